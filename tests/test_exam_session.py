"""
Unit tests for ai_book.models.session.

Answer recording, one-time grading and the per-question render state.
"""

import json

import pytest

from ai_book.models.exam import QuestionType, parse_exam
from ai_book.models.session import (
    ExamSession,
    GradeSummary,
    InputKind,
    SessionState,
    is_answer_correct,
)


@pytest.fixture
def two_question_exam():
    return parse_exam(json.dumps({
        "title": "T",
        "questions": [
            {"questionText": "2+2?", "type": "FillInTheBlank", "correctAnswer": "4"},
            {"questionText": "Sky color?", "type": "MultipleChoice",
             "options": ["Blue", "Red"], "correctAnswer": "Blue"}
        ]
    }))


@pytest.fixture
def session(two_question_exam):
    return ExamSession(two_question_exam)


class TestSessionStart:

    def test_new_session_is_answering_with_no_answers(self, session):
        assert session.state is SessionState.ANSWERING
        assert session.submitted is False
        assert dict(session.answers) == {}
        assert session.answered_count == 0
        assert session.score == 0
        assert session.summary() is None

    def test_answers_view_is_read_only(self, session):
        session.set_answer(0, "4")

        with pytest.raises(TypeError):
            session.answers[0] = "5"


class TestSetAnswer:

    def test_set_answer_overwrites_prior_value(self, session):
        session.set_answer(1, "Red")
        session.set_answer(1, "Blue")

        assert session.answers[1] == "Blue"
        assert session.answered_count == 1

    def test_set_answer_repeated_identical_calls_are_idempotent(self, session):
        session.set_answer(0, "4")
        session.set_answer(0, "4")

        assert dict(session.answers) == {0: "4"}

    def test_set_answer_after_submit_is_ignored(self, session):
        session.set_answer(0, "4")
        session.set_answer(1, "Red")
        session.submit()

        accepted = session.set_answer(1, "Blue")

        assert accepted is False
        assert session.answers[1] == "Red"
        assert session.score == 1

    @pytest.mark.parametrize("index", [-1, 2, 100])
    def test_set_answer_out_of_range_fails_fast(self, session, index):
        with pytest.raises(IndexError):
            session.set_answer(index, "x")

    def test_set_answer_bool_index_rejected(self, session):
        with pytest.raises(IndexError):
            session.set_answer(True, "x")

    def test_is_complete_once_every_question_answered(self, session):
        session.set_answer(0, "4")
        assert session.is_complete is False

        session.set_answer(1, "Red")
        assert session.is_complete is True


class TestSubmit:

    def test_submit_scores_mixed_answers(self, session):
        session.set_answer(0, "4")
        session.set_answer(1, "Red")

        summary = session.submit()

        assert summary == GradeSummary(score=1, total=2)
        assert session.state is SessionState.GRADED
        assert session.is_correct(0) is True
        assert session.is_correct(1) is False

        wrong = session.question_view(1)
        assert wrong.is_correct is False
        assert wrong.revealed_answer == "Blue"
        assert session.question_view(0).revealed_answer is None

    def test_submit_with_missing_answer_counts_it_wrong(self, session):
        session.set_answer(0, "4")

        summary = session.submit()

        assert summary.score == 1
        assert session.is_correct(1) is False
        assert session.question_view(1).answer is None

    def test_submit_with_no_answers_scores_zero(self, session):
        assert session.submit().score == 0

    def test_second_submit_does_not_change_score(self, session):
        session.set_answer(0, "4")
        first = session.submit()

        session.set_answer(1, "Blue")
        second = session.submit()

        assert first == second
        assert session.score == 1

    def test_score_is_bounded_by_question_count(self, session):
        session.set_answer(0, "4")
        session.set_answer(1, "blue")

        summary = session.submit()

        assert 0 <= summary.score <= summary.total
        assert summary.score == 2
        assert summary.percentage == 100.0

    def test_grading_does_not_mutate_exam(self, two_question_exam):
        before = two_question_exam.to_json()
        session = ExamSession(two_question_exam)
        session.set_answer(0, "wrong")
        session.submit()

        assert two_question_exam.to_json() == before


class TestScoringRule:

    @pytest.mark.parametrize("answer, correct, expected", [
        (" Paris ", "paris", True),
        ("PARIS", "Paris", True),
        ("Paris", " paris\n", True),
        ("Pariss", "Paris", False),
        ("Par is", "Paris", False),
        (None, "Paris", False),
        ("", "", False),
        ("   ", "Paris", False),
    ])
    def test_is_answer_correct(self, answer, correct, expected):
        assert is_answer_correct(answer, correct) is expected

    def test_true_false_tokens_match_exactly(self):
        assert is_answer_correct("صح", "صح") is True
        assert is_answer_correct("خطأ", "صح") is False


class TestQuestionViews:

    def test_input_kind_follows_question_type(self, sample_exam_json):
        session = ExamSession(parse_exam(sample_exam_json), true_false_tokens=["True", "False"])

        views = session.question_views()

        assert [v.input_kind for v in views] == [
            InputKind.SINGLE_CHOICE, InputKind.FREE_TEXT, InputKind.TRUE_FALSE
        ]
        assert views[0].choices == ("Evaporation", "Condensation", "Freezing", "Melting")
        assert views[1].choices == ()
        assert views[2].choices == ("True", "False")
        assert [v.number for v in views] == [1, 2, 3]

    def test_views_before_grading_carry_no_verdict(self, session):
        session.set_answer(0, "4")

        view = session.question_view(0)

        assert view.answer == "4"
        assert view.disabled is False
        assert view.is_correct is None
        assert view.revealed_answer is None

    def test_views_after_grading_are_disabled(self, session):
        session.submit()

        assert all(view.disabled for view in session.question_views())

    def test_to_dict_reports_progress_and_summary(self, session):
        session.set_answer(0, "4")
        data = session.to_dict()

        assert data["state"] == "answering"
        assert data["answered"] == 1
        assert data["total"] == 2
        assert data["can_submit"] is False
        assert data["summary"] is None
        assert data["questions"][1]["type"] == QuestionType.MULTIPLE_CHOICE.value
        assert data["questions"][1]["input_kind"] == "single_choice"
        assert data["questions"][1]["choices"] == ["Blue", "Red"]

        session.set_answer(1, "Red")
        session.submit()
        data = session.to_dict()

        assert data["state"] == "graded"
        assert data["can_submit"] is False
        assert data["summary"] == {"score": 1, "total": 2, "percentage": 50.0}
