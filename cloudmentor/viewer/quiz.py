"""
Quiz renderer - Assessment question display and result box.

Provides:
- Question header and option list rendering
- Score/result rendering after submission
- Option labels for Streamlit radio widgets
"""

import html
from typing import Optional

from cloudmentor.schemas import QuestionWithOptions, QuestionType


def get_quiz_css() -> str:
    """Get CSS styles for quiz display."""
    return """
    <style>
    .quiz-container {
        background: #f3f7fd;
        border-radius: 12px;
        padding: 1.5em;
        margin: 1em 0;
        border-left: 4px solid #ff9900;
    }
    .quiz-position {
        color: #666;
        font-size: 0.9em;
        margin-bottom: 0.5em;
    }
    .quiz-question {
        font-size: 1.1em;
        color: #232f3e;
        line-height: 1.6;
    }
    .quiz-ungraded {
        background: #fff3e0;
        padding: 0.6em 1em;
        border-radius: 8px;
        font-size: 0.9em;
        color: #e65100;
        margin-top: 0.8em;
    }
    .quiz-score-box {
        border-radius: 12px;
        padding: 1.5em;
        margin-top: 1em;
        text-align: center;
    }
    .quiz-score-box.passed {
        background: #e8f5e9;
    }
    .quiz-score-box.failed {
        background: #ffebee;
    }
    .quiz-score-value {
        font-size: 2.5em;
        font-weight: 700;
        color: #232f3e;
    }
    .quiz-score-label {
        color: #666;
        font-size: 0.95em;
    }
    </style>
    """


def render_question(question: QuestionWithOptions, position: int, total: int) -> str:
    """
    Render a question header.

    Args:
        question: Question with its options
        position: 1-based question number
        total: Number of questions in the assessment

    Returns:
        HTML string for the question
    """
    parts = ['<div class="quiz-container">']
    parts.append(f'<div class="quiz-position">Question {position} of {total}</div>')
    parts.append(f'<div class="quiz-question">{html.escape(question.question.question_text)}</div>')

    if question.question.question_type != QuestionType.MULTIPLE_CHOICE:
        parts.append(
            '<div class="quiz-ungraded">This question is not graded automatically '
            'and will not add to your score.</div>'
        )

    parts.append('</div>')
    return ''.join(parts)


def option_labels(question: QuestionWithOptions) -> dict[str, str]:
    """Map option id -> display text, in option order."""
    return {option.id: option.option_text for option in question.options}


def selected_option_index(question: QuestionWithOptions, answer: Optional[str]) -> Optional[int]:
    """Index of the selected option for a radio widget, or None."""
    for idx, option in enumerate(question.options):
        if option.id == answer:
            return idx
    return None


def render_result(score: int, passed: bool, passing_score: Optional[int], answered: int, total: int) -> str:
    """Render the post-submission result box."""
    status = "passed" if passed else "failed"
    headline = "You passed!" if passed else "You did not pass"
    threshold = (
        f'<div class="quiz-score-label">Passing score: {passing_score}%</div>'
        if passing_score else ''
    )
    return f"""
    <div class="quiz-score-box {status}">
        <div class="quiz-score-value">{score}%</div>
        <div class="quiz-score-label">{headline}</div>
        {threshold}
        <div class="quiz-score-label">You answered {answered} of {total} questions.</div>
    </div>
    """
