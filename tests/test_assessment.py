"""
Assessment attempt tests: scoring rules and the attempt state machine.
"""

import pytest

from cloudmentor.classroom import (
    AssessmentSession,
    AttemptState,
    compute_score,
    count_correct,
    is_passing,
)
from cloudmentor.errors import NotFoundError, ValidationError
from cloudmentor.schemas import Assessment, QuizOption, QuizQuestion


def correct_answers(session: AssessmentSession) -> dict[str, str]:
    """Option id of the correct answer for every auto-graded question."""
    return {
        q.id: next(o.id for o in q.options if o.is_correct)
        for q in session.questions
        if q.is_auto_graded
    }


def wrong_answers(session: AssessmentSession) -> dict[str, str]:
    return {
        q.id: next(o.id for o in q.options if not o.is_correct)
        for q in session.questions
        if q.is_auto_graded
    }


@pytest.fixture
def attempt(seeded_gateway, context):
    return AssessmentSession(seeded_gateway, context).load("ccp-quiz-1")


class TestScoring:
    """Test the pure scoring functions."""

    def test_compute_score(self):
        assert compute_score(3, 4) == 75
        assert compute_score(2, 3) == 67
        assert compute_score(1, 8) == 13
        assert compute_score(5, 5) == 100

    def test_compute_score_empty(self):
        assert compute_score(0, 0) == 0

    def test_passing_boundary_inclusive(self):
        assert is_passing(70, 70) is True
        assert is_passing(69, 70) is False

    def test_passing_default_threshold(self):
        assert is_passing(70, None) is True
        assert is_passing(69, None) is False
        assert is_passing(69, 0) is False

    def test_count_correct_ignores_free_text(self, attempt):
        answers = correct_answers(attempt)
        short_answer = attempt.ungraded_question_ids[0]
        answers[short_answer] = "AWS secures the cloud, customers secure what is in it"
        assert count_correct(attempt.questions, answers) == 3


class TestLoading:
    """Test loading an assessment."""

    def test_load_orders_questions_and_options(self, attempt):
        assert attempt.state == AttemptState.IN_PROGRESS
        assert [q.question.order for q in attempt.questions] == [1, 2, 3, 4]
        for question in attempt.questions:
            assert [o.order for o in question.options] == sorted(o.order for o in question.options)
        assert attempt.position == (1, 4)

    def test_load_unknown_assessment(self, seeded_gateway, context):
        session = AssessmentSession(seeded_gateway, context)
        with pytest.raises(NotFoundError):
            session.load("missing")
        assert session.state == AttemptState.LOADING

    def test_load_assessment_without_questions(self, tables, seeded_gateway, context):
        tables.assessments.create(Assessment(id="empty-quiz", course_id="course-ccp", title="Empty"))
        session = AssessmentSession(seeded_gateway, context)
        with pytest.raises(NotFoundError):
            session.load("empty-quiz")
        assert session.state == AttemptState.LOADING

    def test_load_rejects_question_without_correct_option(self, tables, seeded_gateway, context):
        tables.assessments.create(Assessment(id="bad-quiz", course_id="course-ccp", title="Bad"))
        question = tables.questions.create(
            QuizQuestion(assessment_id="bad-quiz", question_text="?", order=1)
        )
        tables.options.create(QuizOption(question_id=question.id, option_text="No", order=1))
        with pytest.raises(ValidationError):
            AssessmentSession(seeded_gateway, context).load("bad-quiz")

    def test_ungraded_questions_exposed(self, attempt):
        assert len(attempt.ungraded_question_ids) == 1
        assert attempt.passing_score == 70


class TestNavigation:
    """Test moving between questions."""

    def test_retreat_on_first_is_noop(self, attempt):
        attempt.retreat()
        assert attempt.current_index == 0
        assert attempt.is_first

    def test_advance_on_last_is_noop(self, attempt):
        for _ in range(10):
            attempt.advance()
        assert attempt.current_index == 3
        assert attempt.is_last
        assert attempt.position == (4, 4)

    def test_advance_and_retreat(self, attempt):
        attempt.advance()
        attempt.advance()
        attempt.retreat()
        assert attempt.current_question.id == attempt.questions[1].id

    def test_overwrite_answer(self, attempt):
        question = attempt.current_question
        first, second = question.options[0], question.options[1]
        attempt.select_answer(question.id, first.id)
        attempt.select_answer(question.id, second.id)
        assert attempt.answers[question.id] == second.id
        assert attempt.answered_count == 1

    def test_blank_answer_clears_question(self, attempt):
        for qid, oid in correct_answers(attempt).items():
            attempt.select_answer(qid, oid)
        short_answer = attempt.ungraded_question_ids[0]
        attempt.select_answer(short_answer, "shared responsibility")
        assert attempt.is_complete is True

        attempt.select_answer(short_answer, "   ")
        assert short_answer not in attempt.answers
        assert attempt.is_complete is False
        assert attempt.answered_count == 3

        attempt.select_answer(short_answer, None)
        assert attempt.answered_count == 3

    def test_is_complete(self, attempt):
        assert attempt.is_complete is False
        for qid, oid in correct_answers(attempt).items():
            attempt.select_answer(qid, oid)
        assert attempt.is_complete is False
        attempt.select_answer(attempt.ungraded_question_ids[0], "my answer")
        assert attempt.is_complete is True


class TestSubmit:
    """Test submission and persistence."""

    def test_all_correct_scores_100(self, seeded_gateway, tables, context):
        session = AssessmentSession(seeded_gateway, context).load("saa-quiz-1")
        for qid, oid in correct_answers(session).items():
            session.select_answer(qid, oid)
        result = session.submit()
        assert result.score == 100
        assert result.passed is True
        assert session.state == AttemptState.SUBMITTED
        assert session.passed is True

        stored = tables.results.find(user_id="demo-student", assessment_id="saa-quiz-1")
        assert len(stored) == 1
        assert stored[0].total_points == 100
        assert stored[0].completed_at is not None

    def test_three_of_four_scores_75_and_passes(self, attempt):
        for qid, oid in correct_answers(attempt).items():
            attempt.select_answer(qid, oid)
        attempt.select_answer(attempt.ungraded_question_ids[0], "free text")
        result = attempt.submit()
        assert result.score == 75
        assert result.passed is True

    def test_higher_threshold_fails(self, seeded_gateway, context):
        session = AssessmentSession(seeded_gateway, context).load("saa-quiz-1")
        answers = correct_answers(session)
        first_id = session.questions[0].id
        session.select_answer(first_id, answers[first_id])
        session.select_answer(session.questions[1].id, wrong_answers(session)[session.questions[1].id])
        result = session.submit()
        assert result.score == 50
        assert result.passed is False

    def test_partial_submission_accepted(self, attempt, tables):
        first = attempt.questions[0]
        attempt.select_answer(first.id, correct_answers(attempt)[first.id])
        result = attempt.submit()
        assert result.score == 25
        assert result.passed is False
        assert len(tables.results.find(assessment_id="ccp-quiz-1")) == 1

    def test_wrong_answers_score_zero(self, attempt):
        for qid, oid in wrong_answers(attempt).items():
            attempt.select_answer(qid, oid)
        assert attempt.submit().score == 0

    def test_submit_before_load(self, seeded_gateway, context):
        with pytest.raises(ValidationError):
            AssessmentSession(seeded_gateway, context).submit()

    def test_submit_twice(self, attempt, tables):
        attempt.submit()
        with pytest.raises(ValidationError):
            attempt.submit()
        assert len(tables.results.find(assessment_id="ccp-quiz-1")) == 1

    def test_result_written_for_context_user(self, seeded_gateway, buddy_context, tables):
        session = AssessmentSession(seeded_gateway, buddy_context).load("ccp-quiz-1")
        session.submit()
        assert tables.results.find(user_id="study-buddy")[0].assessment_id == "ccp-quiz-1"
        assert tables.results.find(user_id="demo-student") == []
