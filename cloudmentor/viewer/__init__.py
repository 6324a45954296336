"""
CloudMentor Viewer - Rendering components for the Streamlit app.

This module provides:
- Quiz question and result rendering
- Progress stat cards and chart frames
"""

from .quiz import (
    get_quiz_css,
    render_question,
    option_labels,
    selected_option_index,
    render_result,
)

from .progress import (
    LEVEL_COLORS,
    render_stat_card,
    render_level_badge,
    render_course_line,
    course_progress_frame,
    score_trend_frame,
    render_achievements,
)

__all__ = [
    # Quiz
    "get_quiz_css",
    "render_question",
    "option_labels",
    "selected_option_index",
    "render_result",
    # Progress
    "LEVEL_COLORS",
    "render_stat_card",
    "render_level_badge",
    "render_course_line",
    "course_progress_frame",
    "score_trend_frame",
    "render_achievements",
]
