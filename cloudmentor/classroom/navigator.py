"""
LessonNavigator - Previous/next navigation through a course's lessons.

Provides:
- Next/previous lesson lookup
- Lesson position for "Lesson 2 of 8" displays
- Course progress bar fraction
"""

from typing import Optional

from cloudmentor.schemas import Lesson


class LessonNavigator:
    """Navigate the ordered lessons of a single course."""

    def __init__(self, lessons: list[Lesson]):
        """
        Initialize navigator.

        Args:
            lessons: Lessons of one course (re-sorted by their order field)
        """
        self.lessons = sorted(lessons, key=lambda lesson: lesson.order)
        self._lesson_order = [lesson.id for lesson in self.lessons]
        self._lesson_index = {lid: idx for idx, lid in enumerate(self._lesson_order)}

    @property
    def total_lessons(self) -> int:
        """Total number of lessons."""
        return len(self._lesson_order)

    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        if lesson_id not in self._lesson_index:
            return None
        return self.lessons[self._lesson_index[lesson_id]]

    def get_first_lesson_id(self) -> Optional[str]:
        """Get the ID of the first lesson."""
        return self._lesson_order[0] if self._lesson_order else None

    def get_next_lesson_id(self, current_id: str) -> Optional[str]:
        """Get the ID of the next lesson in order."""
        if current_id not in self._lesson_index:
            return None
        current_idx = self._lesson_index[current_id]
        if current_idx + 1 >= len(self._lesson_order):
            return None
        return self._lesson_order[current_idx + 1]

    def get_previous_lesson_id(self, current_id: str) -> Optional[str]:
        """Get the ID of the previous lesson in order."""
        if current_id not in self._lesson_index:
            return None
        current_idx = self._lesson_index[current_id]
        if current_idx <= 0:
            return None
        return self._lesson_order[current_idx - 1]

    def get_lesson_position(self, lesson_id: str) -> tuple[int, int]:
        """
        Get lesson position as (current, total).

        Returns (0, total) if lesson not found.
        """
        if lesson_id not in self._lesson_index:
            return (0, len(self._lesson_order))
        return (self._lesson_index[lesson_id] + 1, len(self._lesson_order))

    def get_progress_fraction(self, lesson_id: str) -> float:
        """Fraction of the course reached at this lesson (0.0-1.0)."""
        position, total = self.get_lesson_position(lesson_id)
        return position / total if total else 0.0
