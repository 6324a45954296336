"""
Course catalog, enrollment and lesson navigation tests.
"""

import pytest

from cloudmentor.classroom import CourseCatalog, LessonNavigator
from cloudmentor.errors import ConflictError, NotFoundError
from cloudmentor.schemas import Course, CourseLevel


@pytest.fixture
def catalog(seeded_gateway, context):
    return CourseCatalog(seeded_gateway, context)


class TestCourses:
    """Test course listing."""

    def test_list_all(self, catalog):
        assert {c.id for c in catalog.list_courses()} == {"course-ccp", "course-saa"}

    def test_filter_by_level(self, catalog):
        assert [c.id for c in catalog.list_courses(level="beginner")] == ["course-ccp"]
        assert [c.id for c in catalog.list_courses(level=CourseLevel.INTERMEDIATE)] == ["course-saa"]
        assert catalog.list_courses(level="advanced") == []

    def test_filter_by_category(self, catalog):
        assert [c.id for c in catalog.list_courses(category="Architecture")] == ["course-saa"]

    def test_unpublished_hidden(self, catalog, tables):
        tables.courses.create(Course(id="draft", title="Draft", level="advanced", is_published=False))
        assert "draft" not in {c.id for c in catalog.list_courses()}
        assert "draft" in {c.id for c in catalog.list_courses(published_only=False)}

    def test_get_course_missing(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.get_course("missing")

    def test_lessons_in_order(self, catalog):
        assert [lesson.id for lesson in catalog.get_lessons("course-ccp")] == ["ccp-01", "ccp-02", "ccp-03"]

    def test_course_duration_rounds_up(self, catalog):
        # 30 + 45 + 40 minutes
        assert catalog.get_course_duration("course-ccp") == (3, 2)
        assert catalog.get_course_duration("missing") == (0, 0)

    def test_assessments(self, catalog):
        assert [a.id for a in catalog.get_assessments("course-saa")] == ["saa-quiz-1"]


class TestEnrollment:
    """Test enrolling in courses."""

    def test_enroll(self, catalog):
        progress = catalog.enroll("course-ccp")
        assert progress.user_id == "demo-student"
        assert progress.total_lessons == 3
        assert progress.lessons_completed == 0
        assert catalog.is_enrolled("course-ccp")
        assert catalog.get_enrolled_course_ids() == {"course-ccp"}

    def test_enroll_twice_conflicts(self, catalog):
        catalog.enroll("course-ccp")
        with pytest.raises(ConflictError):
            catalog.enroll("course-ccp")

    def test_enroll_unknown_course(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.enroll("missing")

    def test_enrollment_is_per_user(self, catalog, seeded_gateway, buddy_context):
        catalog.enroll("course-ccp")
        assert CourseCatalog(seeded_gateway, buddy_context).is_enrolled("course-ccp") is False


class TestLessonCompletion:
    """Test completion counters."""

    def test_mark_complete(self, catalog):
        catalog.enroll("course-ccp")
        progress = catalog.mark_lesson_complete("course-ccp")
        assert progress.lessons_completed == 1
        assert progress.progress_percentage == 33

    def test_capped_at_total(self, catalog):
        catalog.enroll("course-saa")
        for _ in range(3):
            progress = catalog.mark_lesson_complete("course-saa")
        assert progress.lessons_completed == 2
        assert progress.progress_percentage == 100

    def test_unmark_floors_at_zero(self, catalog):
        catalog.enroll("course-ccp")
        catalog.mark_lesson_complete("course-ccp")
        assert catalog.unmark_lesson_complete("course-ccp").lessons_completed == 0
        progress = catalog.unmark_lesson_complete("course-ccp")
        assert progress.lessons_completed == 0
        assert progress.progress_percentage == 0

    def test_mark_without_enrollment(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.mark_lesson_complete("course-ccp")


class TestLessonNavigator:
    """Test previous/next navigation."""

    @pytest.fixture
    def nav(self, catalog):
        # reversed input; navigator sorts by order
        return LessonNavigator(list(reversed(catalog.get_lessons("course-ccp"))))

    def test_first_and_total(self, nav):
        assert nav.get_first_lesson_id() == "ccp-01"
        assert nav.total_lessons == 3

    def test_next_and_previous(self, nav):
        assert nav.get_next_lesson_id("ccp-01") == "ccp-02"
        assert nav.get_next_lesson_id("ccp-03") is None
        assert nav.get_previous_lesson_id("ccp-02") == "ccp-01"
        assert nav.get_previous_lesson_id("ccp-01") is None

    def test_unknown_lesson(self, nav):
        assert nav.get_lesson("missing") is None
        assert nav.get_next_lesson_id("missing") is None
        assert nav.get_lesson_position("missing") == (0, 3)

    def test_position_and_fraction(self, nav):
        assert nav.get_lesson_position("ccp-02") == (2, 3)
        assert nav.get_progress_fraction("ccp-03") == 1.0

    def test_empty_course(self):
        nav = LessonNavigator([])
        assert nav.get_first_lesson_id() is None
        assert nav.get_progress_fraction("x") == 0.0
