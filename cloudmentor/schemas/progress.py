"""
Progress tracking schemas for CloudMentor.

Defines Pydantic models for learner progress including:
- Course enrollment progress
- Assessment results (append-only history)
- Gamification counters
- Display summaries computed by the progress aggregator
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import math

from .base import Record


DEFAULT_PASSING_SCORE = 70


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (12.5 -> 13)."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def compute_percentage(part: int, total: int) -> int:
    """Integer percentage of part/total; 0 when total is 0."""
    if total <= 0:
        return 0
    return round_half_up(part * 100 / total)


# -----------------------------------------------------------------------------
# Stored records
# -----------------------------------------------------------------------------

class UserProgress(Record):
    user_id: str
    course_id: str
    lessons_completed: int = Field(default=0, ge=0)
    total_lessons: int = Field(default=0, ge=0)
    progress_percentage: int = Field(default=0, ge=0)
    last_accessed_at: Optional[datetime] = None

    def with_completed(self, lessons_completed: int) -> "UserProgress":
        """Copy with a new completed count and the derived percentage."""
        completed = max(lessons_completed, 0)
        return self.model_copy(update={
            "lessons_completed": completed,
            "progress_percentage": compute_percentage(completed, self.total_lessons),
        })


class AssessmentResult(Record):
    user_id: str
    assessment_id: str
    score: int = Field(..., ge=0, le=100)
    total_points: int = 100
    passed: bool
    completed_at: Optional[datetime] = None
    time_spent_minutes: int = Field(default=0, ge=0)


class GamificationStats(Record):
    user_id: str
    total_points: int = 0
    total_badges: int = 0
    current_streak: int = 0
    level: int = 1


# -----------------------------------------------------------------------------
# Display summaries
# -----------------------------------------------------------------------------

class CourseProgressPoint(BaseModel):
    course_id: str
    label: str
    progress: int


class ProgressSummary(BaseModel):
    """Statistics for the progress page."""
    user_id: str
    enrolled_count: int = 0
    completed_lessons: int = 0
    average_score: int = 0
    passed_count: int = 0
    total_points: int = 0
    gamification: Optional[GamificationStats] = None
    course_progress: list[CourseProgressPoint] = []
    recent_scores: list[int] = []


class DashboardStats(BaseModel):
    courses_enrolled: int = 0
    assessments_passed: int = 0
    points_earned: int = 0
    current_streak: int = 0


class AssessmentOverview(BaseModel):
    """One row of the assessments page for an enrolled course."""
    assessment_id: str
    title: str
    course_id: str
    course_title: str
    passing_score: int = DEFAULT_PASSING_SCORE
    passed_count: int = 0
    total_attempts: int = 0
    best_score: int = 0
    last_attempt: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.passed_count > 0
