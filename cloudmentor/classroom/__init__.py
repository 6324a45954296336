"""
CloudMentor Classroom - Runtime components for courses, assessments and progress.

This module provides:
- CourseCatalog: course listing, enrollment, lesson completion
- LessonNavigator: lesson sequencing within a course
- AssessmentSession: quiz attempt state machine and scoring
- ProgressAggregator: display statistics across enrollments and results
"""

from .catalog import CourseCatalog

from .navigator import LessonNavigator

from .assessment import (
    AssessmentSession,
    AttemptState,
    count_correct,
    compute_score,
    is_passing,
)

from .progress import (
    ProgressAggregator,
    RECENT_SCORE_LIMIT,
    average_score,
    best_score,
    passed_count,
    completed_lessons,
)

__all__ = [
    # Catalog
    "CourseCatalog",
    # Navigator
    "LessonNavigator",
    # Assessment
    "AssessmentSession",
    "AttemptState",
    "count_correct",
    "compute_score",
    "is_passing",
    # Progress
    "ProgressAggregator",
    "RECENT_SCORE_LIMIT",
    "average_score",
    "best_score",
    "passed_count",
    "completed_lessons",
]
