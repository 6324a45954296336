"""
ProgressAggregator - Combine enrollment, results and gamification into display stats.

Reads three independent record sets per user:
- user_progress rows (one per enrolled course)
- assessment_results rows (append-only history)
- the gamification_stats row (optional)

Nothing is cached: every call re-fetches. The three reads are not
transactional, so counts may briefly disagree (e.g. a result for an
assessment whose course enrollment is not visible yet).
"""

import logging
from typing import Optional

from cloudmentor.context import SessionContext
from cloudmentor.gateway import DataGateway, Tables
from cloudmentor.schemas import (
    DEFAULT_PASSING_SCORE,
    AssessmentOverview,
    AssessmentResult,
    CourseProgressPoint,
    DashboardStats,
    GamificationStats,
    ProgressSummary,
    UserProgress,
    round_half_up,
)


logger = logging.getLogger(__name__)

RECENT_SCORE_LIMIT = 10


# -----------------------------------------------------------------------------
# Pure reductions
# -----------------------------------------------------------------------------

def average_score(results: list[AssessmentResult]) -> int:
    """Rounded mean score; 0 when there are no results."""
    if not results:
        return 0
    return round_half_up(sum(r.score for r in results) / len(results))


def best_score(results: list[AssessmentResult]) -> int:
    """Highest score; 0 when there are no results."""
    if not results:
        return 0
    return max(r.score for r in results)


def passed_count(results: list[AssessmentResult]) -> int:
    return sum(1 for r in results if r.passed)


def completed_lessons(progress: list[UserProgress]) -> int:
    return sum(p.lessons_completed or 0 for p in progress)


class ProgressAggregator:
    """
    Compute summary statistics for one user.

    The user comes from the session context, never from global state.
    """

    def __init__(self, gateway: DataGateway, context: SessionContext):
        self.tables = Tables.from_gateway(gateway)
        self.context = context

    @property
    def user_id(self) -> str:
        return self.context.user_id

    # -------------------------------------------------------------------------
    # Fetches
    # -------------------------------------------------------------------------

    def get_enrollments(self) -> list[UserProgress]:
        return self.tables.progress.find(
            user_id=self.user_id, order_by="updated_at", ascending=False
        )

    def get_results(self, assessment_id: Optional[str] = None) -> list[AssessmentResult]:
        """Results in completion order (oldest first)."""
        filters = {"user_id": self.user_id}
        if assessment_id:
            filters["assessment_id"] = assessment_id
        return self.tables.results.find(order_by="completed_at", **filters)

    def get_gamification(self) -> Optional[GamificationStats]:
        return self.tables.gamification.get_or_none(user_id=self.user_id)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def get_summary(self) -> ProgressSummary:
        """Statistics for the progress page."""
        enrollments = self.get_enrollments()
        results = self.get_results()
        gamification = self.get_gamification()

        course_progress = [
            CourseProgressPoint(
                course_id=p.course_id,
                label=f"Course {p.course_id[:8]}",
                progress=p.progress_percentage or 0,
            )
            for p in enrollments
        ]

        return ProgressSummary(
            user_id=self.user_id,
            enrolled_count=len(enrollments),
            completed_lessons=completed_lessons(enrollments),
            average_score=average_score(results),
            passed_count=passed_count(results),
            total_points=gamification.total_points if gamification else 0,
            gamification=gamification,
            course_progress=course_progress,
            recent_scores=[r.score for r in results[-RECENT_SCORE_LIMIT:]],
        )

    def get_dashboard_stats(self) -> DashboardStats:
        """Headline numbers for the dashboard home page."""
        enrollments = self.tables.progress.find(user_id=self.user_id)
        passed = self.tables.results.find(user_id=self.user_id, passed=True)
        gamification = self.get_gamification()

        return DashboardStats(
            courses_enrolled=len(enrollments),
            assessments_passed=len(passed),
            points_earned=gamification.total_points if gamification else 0,
            current_streak=gamification.current_streak if gamification else 0,
        )

    def get_assessment_overview(self, assessment_id: str) -> Optional[AssessmentOverview]:
        """Per-assessment view (best score, attempts); None if the assessment is gone."""
        assessment = self.tables.assessments.get_or_none(id=assessment_id)
        if assessment is None:
            return None
        course = self.tables.courses.get_or_none(id=assessment.course_id)
        results = self.get_results(assessment_id)

        return AssessmentOverview(
            assessment_id=assessment.id,
            title=assessment.title,
            course_id=assessment.course_id,
            course_title=course.title if course else "Unknown Course",
            passing_score=assessment.passing_score or DEFAULT_PASSING_SCORE,
            passed_count=passed_count(results),
            total_attempts=len(results),
            best_score=best_score(results),
            last_attempt=results[-1].completed_at if results else None,
        )

    def get_assessment_overviews(self) -> list[AssessmentOverview]:
        """Overviews for every assessment of every enrolled course."""
        overviews = []
        for enrollment in self.tables.progress.find(user_id=self.user_id):
            for assessment in self.tables.assessments.find(
                course_id=enrollment.course_id, order_by="created_at", ascending=False
            ):
                overview = self.get_assessment_overview(assessment.id)
                if overview is not None:
                    overviews.append(overview)
        logger.debug(f"Built {len(overviews)} assessment overviews for {self.user_id}")
        return overviews
