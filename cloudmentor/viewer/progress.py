"""
Progress renderer - Stat cards, chart frames and level display.
"""

import html

import pandas as pd

from cloudmentor.schemas import Course, GamificationStats, ProgressSummary


LEVEL_COLORS = {
    "beginner": "#2e7d32",
    "intermediate": "#1565c0",
    "advanced": "#6a1b9a",
}


def render_stat_card(label: str, value) -> str:
    """Single headline number card."""
    return (
        '<div style="background:#f5f7fa;border-radius:10px;padding:1em;text-align:center;">'
        f'<div style="color:#666;font-size:0.9em;">{html.escape(label)}</div>'
        f'<div style="font-size:1.8em;font-weight:700;color:#232f3e;">{html.escape(str(value))}</div>'
        '</div>'
    )


def render_level_badge(level: str) -> str:
    color = LEVEL_COLORS.get(level, "#555")
    return (
        f'<span style="background:{color};color:white;border-radius:6px;'
        f'padding:0.15em 0.6em;font-size:0.8em;">{html.escape(level)}</span>'
    )


def render_course_line(course: Course, lessons: int, hours: int) -> str:
    """One-line course summary with level badge, for the dashboard."""
    return (
        f"{render_level_badge(course.level.value)} "
        f"<b>{html.escape(course.title)}</b> · {lessons} lessons · {hours}h"
    )


def course_progress_frame(summary: ProgressSummary) -> pd.DataFrame:
    """Course progress rows for a bar chart, indexed by course label."""
    frame = pd.DataFrame(
        [{"course": p.label, "progress": p.progress} for p in summary.course_progress],
        columns=["course", "progress"],
    )
    return frame.set_index("course")


def score_trend_frame(summary: ProgressSummary) -> pd.DataFrame:
    """Recent scores for a line chart, indexed 'Assessment 1..N'."""
    frame = pd.DataFrame(
        [{"attempt": f"Assessment {i + 1}", "score": s} for i, s in enumerate(summary.recent_scores)],
        columns=["attempt", "score"],
    )
    return frame.set_index("attempt")


def render_achievements(stats: GamificationStats) -> str:
    return (
        '<div style="display:flex;gap:2em;">'
        f'<div><b>Level {stats.level}</b></div>'
        f'<div>{stats.total_badges} badges</div>'
        f'<div>{stats.current_streak} day streak</div>'
        '</div>'
    )
