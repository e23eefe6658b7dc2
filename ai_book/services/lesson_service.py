# ai_book/services/lesson_service.py
import logging
from typing import Dict, Any, Optional

from ..core.config import config
from ..core.ai_services import AIService, Attachment, get_ai_service
from ..core.prompts import PromptTemplates
from ..core.utils import ValidationUtils
from ..models.schemas import LessonStyle
from .project_service import render_markdown

logger = logging.getLogger(__name__)

class LessonService:
    """Lesson explainer in a chosen style"""

    def __init__(self, ai_service: Optional[AIService] = None):
        self.ai_service = ai_service or get_ai_service()
        self.use_dummy = self.ai_service.use_dummy

    def explain(self, style: str, lesson_text: str = "", source_file: Optional[Attachment] = None) -> Dict[str, Any]:
        style = LessonStyle(style)
        lesson_text = ValidationUtils.sanitize_input(lesson_text, config.MAX_SOURCE_TEXT_LENGTH, "Lesson text")

        if not lesson_text and source_file is None:
            raise ValueError("Provide the lesson text or upload a file to explain")

        logger.info(f"📚 Explaining lesson in {style.value} style (dummy: {self.use_dummy})")

        if self.use_dummy:
            explanation = self.ai_service.dummy_data.get_lesson(style.value)
        else:
            prompt = PromptTemplates.create_lesson_prompt(style.value, lesson_text)
            explanation = self.ai_service.generate_text(prompt, source_file)

        return {
            "style": style.value,
            "explanation_markdown": explanation,
            "explanation_html": render_markdown(explanation)
        }

_lesson_service = None

def get_lesson_service() -> LessonService:
    """Get lesson service instance (singleton)"""
    global _lesson_service
    if _lesson_service is None:
        _lesson_service = LessonService()
    return _lesson_service
