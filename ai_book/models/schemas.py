# ai_book/models/schemas.py
from enum import Enum
from typing import Optional, Literal

from pydantic import BaseModel, Field

class ExamDifficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

class ExamType(str, Enum):
    MULTIPLE_CHOICE = "MultipleChoice"
    FILL_IN_THE_BLANK = "FillInTheBlank"
    TRUE_FALSE = "TrueFalse"
    INTEGRATED = "Integrated"

class LessonStyle(str, Enum):
    PHILOSOPHICAL = "Philosophical"
    SCIENTIFIC = "Scientific"
    SIMPLE = "Simple"

class SourceFilePayload(BaseModel):
    """File attached to a request, already base64 encoded by the client"""
    data: str = Field(..., min_length=1, description="Base64 file content (data URL prefix allowed)")
    mime_type: str = Field(..., min_length=1, description="MIME type, e.g. image/png or text/plain")

class GenerateExamRequest(BaseModel):
    difficulty: ExamDifficulty = ExamDifficulty.MEDIUM
    exam_type: ExamType = ExamType.MULTIPLE_CHOICE
    source_text: str = ""
    source_file: Optional[SourceFilePayload] = None
    replaces_session_id: Optional[str] = Field(None, description="Session discarded once the new exam is ready")

class SetAnswerRequest(BaseModel):
    answer: str

class ProjectPlanRequest(BaseModel):
    idea: str

class ImageRequest(BaseModel):
    description: str

class LessonRequest(BaseModel):
    style: LessonStyle = LessonStyle.SIMPLE
    lesson_text: str = ""
    source_file: Optional[SourceFilePayload] = None

class ChatMessageRequest(BaseModel):
    message: str

class ChatMessage(BaseModel):
    id: str
    role: Literal["user", "model"]
    text: str

class PlanPdfRequest(BaseModel):
    plan_markdown: str
    title: str = "Project Plan"
