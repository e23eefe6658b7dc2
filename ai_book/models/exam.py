# ai_book/models/exam.py
"""
Exam data produced by the generator and the parsing boundary that validates it.

The JSON contract uses the field names requested from the generator:
``title``, ``questions[].questionText``, ``questions[].type``,
``questions[].options`` and ``questions[].correctAnswer``. Strings are kept
verbatim; trimming and case folding only happen when answers are compared.
"""

import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, model_validator

from ..core.config import config
from ..core.exceptions import MalformedExamError

logger = logging.getLogger(__name__)

class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MultipleChoice"
    FILL_IN_THE_BLANK = "FillInTheBlank"
    TRUE_FALSE = "TrueFalse"

def normalize_answer(value: str) -> str:
    """Comparison form of an answer: trimmed and lower-cased"""
    return value.strip().lower()

class Question(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    question_text: StrictStr = Field(alias="questionText")
    type: QuestionType
    options: Optional[List[StrictStr]] = None
    correct_answer: StrictStr = Field(alias="correctAnswer")

    @model_validator(mode="after")
    def _check_multiple_choice(self) -> "Question":
        if self.type is not QuestionType.MULTIPLE_CHOICE:
            return self

        if not self.options:
            raise ValueError("MultipleChoice question requires a non-empty options list")

        expected = normalize_answer(self.correct_answer)
        if expected not in {normalize_answer(option) for option in self.options}:
            raise ValueError("correctAnswer must be one of the options")

        return self

class Exam(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    title: StrictStr
    questions: List[Question] = Field(min_length=1)

    @property
    def total(self) -> int:
        return len(self.questions)

    def to_dict(self) -> dict:
        """JSON-compatible dict in the generator's shape"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

def parse_exam(raw_text: str) -> Exam:
    """Parse generator output into an Exam or raise MalformedExamError"""
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise MalformedExamError("Generator returned no exam content")

    try:
        exam = Exam.model_validate_json(raw_text)
    except ValidationError as e:
        logger.warning(f"Generated exam rejected: {e.error_count()} validation error(s)")
        logger.debug(f"Rejected exam content: {raw_text[:500]}")
        raise MalformedExamError(f"Exam does not match the expected shape: {e.errors()[0]['msg']}") from e

    tokens = {normalize_answer(token) for token in config.TRUE_FALSE_TOKENS}
    for number, question in enumerate(exam.questions, 1):
        if question.type is QuestionType.TRUE_FALSE and normalize_answer(question.correct_answer) not in tokens:
            # kept as-is: the question can never be answered correctly
            logger.warning(
                f"Question {number} is TrueFalse but its answer {question.correct_answer!r} "
                f"is not one of {config.TRUE_FALSE_TOKENS}"
            )

    logger.info(f"✅ Parsed exam '{exam.title}' with {exam.total} questions")
    return exam
