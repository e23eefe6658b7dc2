# ai_book/services/__init__.py
"""
Business logic services for exams, project building, lessons, chat and PDF export
"""

from .exam_service import get_exam_service
from .project_service import get_project_service
from .lesson_service import get_lesson_service
from .chat_service import get_chat_service
from .pdf_service import get_pdf_service

__all__ = [
    "get_exam_service",
    "get_project_service",
    "get_lesson_service",
    "get_chat_service",
    "get_pdf_service"
]
