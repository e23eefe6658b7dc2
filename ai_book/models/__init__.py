# ai_book/models/__init__.py
"""
Exam model, exam session and pydantic request schemas
"""

from .exam import Exam, Question, QuestionType, normalize_answer, parse_exam
from .session import (
    ExamSession,
    SessionState,
    InputKind,
    QuestionView,
    GradeSummary,
    is_answer_correct
)
from .schemas import (
    ExamDifficulty,
    ExamType,
    LessonStyle,
    SourceFilePayload,
    GenerateExamRequest,
    SetAnswerRequest,
    ProjectPlanRequest,
    PlanPdfRequest,
    ImageRequest,
    LessonRequest,
    ChatMessageRequest,
    ChatMessage
)

__all__ = [
    "Exam",
    "Question",
    "QuestionType",
    "normalize_answer",
    "parse_exam",
    "ExamSession",
    "SessionState",
    "InputKind",
    "QuestionView",
    "GradeSummary",
    "is_answer_correct",
    "ExamDifficulty",
    "ExamType",
    "LessonStyle",
    "SourceFilePayload",
    "GenerateExamRequest",
    "SetAnswerRequest",
    "ProjectPlanRequest",
    "PlanPdfRequest",
    "ImageRequest",
    "LessonRequest",
    "ChatMessageRequest",
    "ChatMessage"
]
