"""
Viewer renderer tests: HTML escaping and chart frames.
"""

from cloudmentor.schemas import Course, CourseLevel, CourseProgressPoint, ProgressSummary
from cloudmentor.viewer import render_course_line
from cloudmentor.viewer.progress import (
    course_progress_frame,
    render_stat_card,
    score_trend_frame,
)


class TestCourseLine:
    """Test the dashboard course summary line."""

    def test_title_escaped(self):
        course = Course(id="c1", title="<script>alert(1)</script>", level=CourseLevel.BEGINNER)
        line = render_course_line(course, 3, 2)
        assert "<script>" not in line
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in line

    def test_counts_and_badge(self):
        course = Course(id="c1", title="Solutions Architect", level=CourseLevel.ADVANCED)
        line = render_course_line(course, 12, 20)
        assert "<b>Solutions Architect</b>" in line
        assert "12 lessons" in line
        assert "20h" in line
        assert ">advanced</span>" in line


class TestStatCard:

    def test_label_and_value_escaped(self):
        card = render_stat_card("<i>Score</i>", "<b>90</b>")
        assert "&lt;i&gt;Score&lt;/i&gt;" in card
        assert "&lt;b&gt;90&lt;/b&gt;" in card


class TestFrames:
    """Test chart frames built from a progress summary."""

    def test_course_progress_frame(self):
        summary = ProgressSummary(
            user_id="u1",
            course_progress=[
                CourseProgressPoint(course_id="c1", label="CCP", progress=40),
                CourseProgressPoint(course_id="c2", label="SAA", progress=100),
            ],
        )
        frame = course_progress_frame(summary)
        assert list(frame.index) == ["CCP", "SAA"]
        assert list(frame["progress"]) == [40, 100]

    def test_empty_frames_keep_columns(self):
        summary = ProgressSummary(user_id="u1")
        assert course_progress_frame(summary).empty
        assert list(score_trend_frame(summary).columns) == ["score"]

    def test_score_trend_labels(self):
        frame = score_trend_frame(ProgressSummary(user_id="u1", recent_scores=[60, 85]))
        assert list(frame.index) == ["Assessment 1", "Assessment 2"]
        assert list(frame["score"]) == [60, 85]
