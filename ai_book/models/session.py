# ai_book/models/session.py
"""
Exam session: the user's in-progress answers and the one-time grading.

A session starts in ``ANSWERING`` and moves to ``GRADED`` on the first
``submit()``. Grading freezes the answers and computes the score once;
later ``set_answer`` and ``submit`` calls change nothing.
"""

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.config import config
from .exam import Exam, Question, QuestionType, normalize_answer

logger = logging.getLogger(__name__)

class SessionState(str, Enum):
    ANSWERING = "answering"
    GRADED = "graded"

class InputKind(str, Enum):
    SINGLE_CHOICE = "single_choice"
    TRUE_FALSE = "true_false"
    FREE_TEXT = "free_text"

@dataclass(frozen=True)
class GradeSummary:
    score: int
    total: int

    @property
    def percentage(self) -> float:
        return round(self.score * 100.0 / self.total, 2) if self.total else 0.0

    def to_dict(self) -> dict:
        return {"score": self.score, "total": self.total, "percentage": self.percentage}

@dataclass(frozen=True)
class QuestionView:
    """Read-only render state of one question"""
    index: int
    number: int
    question_text: str
    type: QuestionType
    input_kind: InputKind
    choices: Tuple[str, ...]
    answer: Optional[str]
    disabled: bool
    is_correct: Optional[bool] = None
    revealed_answer: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["type"] = self.type.value
        data["input_kind"] = self.input_kind.value
        data["choices"] = list(self.choices)
        return data

def is_answer_correct(answer: Optional[str], correct_answer: str) -> bool:
    """Trimmed, case-insensitive exact match; a missing or blank answer is a miss"""
    if answer is None:
        return False
    given = normalize_answer(answer)
    if not given:
        return False
    return given == normalize_answer(correct_answer)

class ExamSession:
    """Answers and grading state for one exam"""

    def __init__(self, exam: Exam, true_false_tokens: Optional[Sequence[str]] = None):
        self.exam = exam
        self.true_false_tokens: Tuple[str, ...] = tuple(true_false_tokens or config.TRUE_FALSE_TOKENS)
        self._answers: Dict[int, str] = {}
        self._state = SessionState.ANSWERING
        self._results: Optional[Tuple[bool, ...]] = None
        self._score = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def submitted(self) -> bool:
        return self._state is SessionState.GRADED

    @property
    def answers(self) -> Mapping[int, str]:
        return MappingProxyType(self._answers)

    @property
    def total(self) -> int:
        return len(self.exam.questions)

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def is_complete(self) -> bool:
        """Every question has a recorded answer"""
        return self.answered_count == self.total

    @property
    def score(self) -> int:
        """Number of correct answers; 0 until graded"""
        return self._score

    def _check_index(self, index: int):
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < self.total:
            raise IndexError(f"Question index {index!r} out of range for {self.total} questions")

    def set_answer(self, index: int, value: str) -> bool:
        """Record the answer for a question; returns False once graded"""
        self._check_index(index)

        if self.submitted:
            logger.debug(f"Ignoring answer for question {index}: session already graded")
            return False

        self._answers[index] = value
        return True

    def submit(self) -> GradeSummary:
        """Grade the session once and return the summary"""
        if self.submitted:
            return self.summary()

        self._results = tuple(
            is_answer_correct(self._answers.get(index), question.correct_answer)
            for index, question in enumerate(self.exam.questions)
        )
        self._score = sum(self._results)
        self._state = SessionState.GRADED

        logger.info(f"🏁 Exam '{self.exam.title}' graded: {self._score}/{self.total}")
        return self.summary()

    def summary(self) -> Optional[GradeSummary]:
        """Score summary, or None before grading"""
        if not self.submitted:
            return None
        return GradeSummary(score=self._score, total=self.total)

    def is_correct(self, index: int) -> Optional[bool]:
        """Correctness of one question, or None before grading"""
        self._check_index(index)
        if self._results is None:
            return None
        return self._results[index]

    def _input_for(self, question: Question) -> Tuple[InputKind, Tuple[str, ...]]:
        if question.type is QuestionType.MULTIPLE_CHOICE:
            return InputKind.SINGLE_CHOICE, tuple(question.options or ())
        if question.type is QuestionType.TRUE_FALSE:
            return InputKind.TRUE_FALSE, self.true_false_tokens
        if question.type is QuestionType.FILL_IN_THE_BLANK:
            return InputKind.FREE_TEXT, ()
        raise ValueError(f"Unhandled question type: {question.type}")

    def question_view(self, index: int) -> QuestionView:
        self._check_index(index)
        question = self.exam.questions[index]
        input_kind, choices = self._input_for(question)
        is_correct = self.is_correct(index)

        return QuestionView(
            index=index,
            number=index + 1,
            question_text=question.question_text,
            type=question.type,
            input_kind=input_kind,
            choices=choices,
            answer=self._answers.get(index),
            disabled=self.submitted,
            is_correct=is_correct,
            revealed_answer=question.correct_answer if is_correct is False else None
        )

    def question_views(self) -> List[QuestionView]:
        return [self.question_view(index) for index in range(self.total)]

    def to_dict(self) -> dict:
        summary = self.summary()
        return {
            "title": self.exam.title,
            "state": self._state.value,
            "submitted": self.submitted,
            "answered": self.answered_count,
            "total": self.total,
            "can_submit": not self.submitted and self.is_complete,
            "questions": [view.to_dict() for view in self.question_views()],
            "summary": summary.to_dict() if summary else None
        }
