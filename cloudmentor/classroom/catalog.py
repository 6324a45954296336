"""
CourseCatalog - Course listing, enrollment and lesson completion.

Courses, lessons and assessments are seeded externally; this module only
reads them. Enrollment creates a UserProgress row, and marking a lesson
complete updates its counters.
"""

import logging
import math
from datetime import datetime
from typing import Optional

from cloudmentor.context import SessionContext
from cloudmentor.gateway import DataGateway, Tables
from cloudmentor.schemas import (
    Assessment,
    Course,
    CourseLevel,
    Lesson,
    UserProgress,
)


logger = logging.getLogger(__name__)


class CourseCatalog:
    """Read access to courses plus the acting user's enrollments."""

    def __init__(self, gateway: DataGateway, context: SessionContext):
        self.tables = Tables.from_gateway(gateway)
        self.context = context

    # -------------------------------------------------------------------------
    # Courses
    # -------------------------------------------------------------------------

    def list_courses(
        self,
        level: Optional[CourseLevel | str] = None,
        category: Optional[str] = None,
        published_only: bool = True,
    ) -> list[Course]:
        """Courses newest first, optionally filtered by level and category."""
        filters = {}
        if level:
            filters["level"] = CourseLevel(level)
        if category:
            filters["category"] = category
        if published_only:
            filters["is_published"] = True
        return self.tables.courses.find(order_by="created_at", ascending=False, **filters)

    def get_course(self, course_id: str) -> Course:
        """Raises NotFoundError when the course does not exist."""
        return self.tables.courses.get(id=course_id)

    def get_lessons(self, course_id: str) -> list[Lesson]:
        return self.tables.lessons.find(course_id=course_id, order_by="order")

    def get_assessments(self, course_id: str) -> list[Assessment]:
        return self.tables.assessments.find(
            course_id=course_id, order_by="created_at", ascending=False
        )

    def get_course_duration(self, course_id: str) -> tuple[int, int]:
        """(lesson count, estimated hours rounded up) from lesson durations."""
        lessons = self.get_lessons(course_id)
        total_minutes = sum(lesson.estimated_duration or 0 for lesson in lessons)
        return len(lessons), math.ceil(total_minutes / 60)

    # -------------------------------------------------------------------------
    # Enrollment
    # -------------------------------------------------------------------------

    def get_enrollment(self, course_id: str) -> Optional[UserProgress]:
        return self.tables.progress.get_or_none(
            user_id=self.context.user_id, course_id=course_id
        )

    def is_enrolled(self, course_id: str) -> bool:
        return self.get_enrollment(course_id) is not None

    def get_enrolled_course_ids(self) -> set[str]:
        return {p.course_id for p in self.tables.progress.find(user_id=self.context.user_id)}

    def enroll(self, course_id: str) -> UserProgress:
        """
        Create the progress row for a course.

        Raises:
            NotFoundError: course does not exist
            ConflictError: already enrolled
        """
        course = self.get_course(course_id)
        progress = self.tables.progress.create(UserProgress(
            user_id=self.context.user_id,
            course_id=course.id,
            lessons_completed=0,
            total_lessons=course.total_lessons or len(self.get_lessons(course.id)),
            progress_percentage=0,
            last_accessed_at=datetime.now(),
        ))
        logger.info(f"User {self.context.user_id} enrolled in {course_id}")
        return progress

    # -------------------------------------------------------------------------
    # Lesson completion
    # -------------------------------------------------------------------------

    def _set_completed(self, course_id: str, delta: int) -> UserProgress:
        current = self.tables.progress.get(user_id=self.context.user_id, course_id=course_id)
        completed = current.lessons_completed + delta
        if current.total_lessons:
            completed = min(completed, current.total_lessons)
        updated = current.with_completed(completed)

        rows = self.tables.progress.update(
            {
                "lessons_completed": updated.lessons_completed,
                "progress_percentage": updated.progress_percentage,
                "last_accessed_at": datetime.now(),
            },
            user_id=self.context.user_id,
            course_id=course_id,
        )
        return rows[0]

    def mark_lesson_complete(self, course_id: str) -> UserProgress:
        """Count one more completed lesson; NotFoundError if not enrolled."""
        return self._set_completed(course_id, +1)

    def unmark_lesson_complete(self, course_id: str) -> UserProgress:
        """Undo a completion; never drops below zero."""
        return self._set_completed(course_id, -1)
