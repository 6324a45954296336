"""
AssessmentSession - drive one assessment attempt from first question to result.

States:
    LOADING -> IN_PROGRESS(index, answers) -> SUBMITTED(score)

The session does not enforce that every question is answered before
submit; the UI disables the submit button until ``is_complete``.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

import pydantic

from cloudmentor.context import SessionContext
from cloudmentor.errors import NotFoundError, ValidationError
from cloudmentor.gateway import DataGateway, Tables
from cloudmentor.schemas import (
    DEFAULT_PASSING_SCORE,
    Assessment,
    AssessmentResult,
    QuestionWithOptions,
    round_half_up,
)


logger = logging.getLogger(__name__)


class AttemptState(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


def count_correct(questions: list[QuestionWithOptions], answers: dict[str, str]) -> int:
    """
    Count questions whose selected option is flagged correct.

    Short-answer and code questions store free text, which never matches an
    option id, so they are never counted correct.
    """
    correct = 0
    for question in questions:
        selected = answers.get(question.id)
        if not selected:
            continue
        option = question.find_option(selected)
        if option is not None and option.is_correct:
            correct += 1
    return correct


def compute_score(correct_count: int, total_questions: int) -> int:
    """Percentage score rounded half-up; 0 for an empty assessment."""
    if total_questions <= 0:
        return 0
    return round_half_up(correct_count * 100 / total_questions)


def is_passing(score: int, passing_score: Optional[int]) -> bool:
    """Boundary inclusive; unset or zero threshold falls back to the default."""
    return score >= (passing_score or DEFAULT_PASSING_SCORE)


class AssessmentSession:
    """
    State machine for a single attempt.

    Combines the gateway (assessment content, result persistence) with
    the acting user from the session context.
    """

    def __init__(self, gateway: DataGateway, context: SessionContext):
        """
        Initialize an attempt.

        Args:
            gateway: Record store holding assessments and results
            context: Acting user; results are written for context.user_id
        """
        self.tables = Tables.from_gateway(gateway)
        self.context = context
        self.state = AttemptState.LOADING
        self.assessment: Optional[Assessment] = None
        self.questions: list[QuestionWithOptions] = []
        self.current_index = 0
        self.answers: dict[str, str] = {}
        self.score: Optional[int] = None
        self.result: Optional[AssessmentResult] = None
        self.started_at: Optional[datetime] = None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, assessment_id: str) -> "AssessmentSession":
        """
        Fetch the assessment, its ordered questions and their ordered options.

        Raises:
            NotFoundError: assessment missing or has no questions (state stays LOADING)
            ValidationError: a multiple choice question has no correct option
        """
        assessment = self.tables.assessments.get(id=assessment_id)
        questions = self.tables.questions.find(assessment_id=assessment_id, order_by="order")
        if not questions:
            raise NotFoundError(f"Assessment {assessment_id} has no questions")

        loaded = []
        for question in questions:
            options = self.tables.options.find(question_id=question.id, order_by="order")
            try:
                loaded.append(QuestionWithOptions(question=question, options=options))
            except pydantic.ValidationError as e:
                raise ValidationError(str(e)) from e

        self.assessment = assessment
        self.questions = loaded
        self.current_index = 0
        self.answers = {}
        self.started_at = datetime.now()
        self.state = AttemptState.IN_PROGRESS
        logger.info(f"Loaded assessment {assessment_id} with {len(loaded)} questions")
        return self

    # -------------------------------------------------------------------------
    # Answering and navigation
    # -------------------------------------------------------------------------

    def select_answer(self, question_id: str, option_or_text: Optional[str]):
        """
        Record or overwrite the answer for a question (option id or free text).

        A blank answer clears the question, so it counts as unanswered again.
        """
        if option_or_text is None or not option_or_text.strip():
            self.answers.pop(question_id, None)
            return
        self.answers[question_id] = option_or_text

    def advance(self):
        """Move to the next question; no-op on the last one."""
        if self.current_index < len(self.questions) - 1:
            self.current_index += 1

    def retreat(self):
        """Move to the previous question; no-op on the first one."""
        if self.current_index > 0:
            self.current_index -= 1

    @property
    def current_question(self) -> Optional[QuestionWithOptions]:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def position(self) -> tuple[int, int]:
        """(1-based index, total) for 'Question 2 of 5' displays."""
        return (self.current_index + 1 if self.questions else 0, len(self.questions))

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.questions) - 1

    @property
    def answered_count(self) -> int:
        return sum(1 for q in self.questions if self.answers.get(q.id))

    @property
    def is_complete(self) -> bool:
        """All questions have an answer; the submit button is enabled on this."""
        return bool(self.questions) and self.answered_count == len(self.questions)

    @property
    def passing_score(self) -> int:
        if self.assessment and self.assessment.passing_score:
            return self.assessment.passing_score
        return DEFAULT_PASSING_SCORE

    @property
    def ungraded_question_ids(self) -> list[str]:
        """Questions the scorer never counts correct (short answer, code)."""
        return [q.id for q in self.questions if not q.is_auto_graded]

    @property
    def passed(self) -> Optional[bool]:
        if self.score is None:
            return None
        return is_passing(self.score, self.passing_score)

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit(self) -> AssessmentResult:
        """
        Score the attempt and persist one AssessmentResult.

        Unanswered questions count as wrong; incomplete submissions are not
        rejected here.

        Raises:
            ValidationError: attempt not loaded, or already submitted
        """
        if self.state == AttemptState.LOADING:
            raise ValidationError("Assessment is not loaded")
        if self.state == AttemptState.SUBMITTED:
            raise ValidationError("Assessment attempt already submitted")

        if not self.is_complete:
            logger.warning(
                f"Submitting assessment {self.assessment.id} with "
                f"{self.answered_count}/{len(self.questions)} answers"
            )

        correct = count_correct(self.questions, self.answers)
        score = compute_score(correct, len(self.questions))
        now = datetime.now()
        elapsed = int((now - self.started_at).total_seconds() // 60) if self.started_at else 0

        result = self.tables.results.create(AssessmentResult(
            user_id=self.context.user_id,
            assessment_id=self.assessment.id,
            score=score,
            total_points=100,
            passed=is_passing(score, self.assessment.passing_score),
            completed_at=now,
            time_spent_minutes=max(elapsed, 0),
        ))

        self.score = score
        self.result = result
        self.state = AttemptState.SUBMITTED
        logger.info(
            f"User {self.context.user_id} scored {score} on {self.assessment.id} "
            f"({correct}/{len(self.questions)} correct, passed={result.passed})"
        )
        return result
