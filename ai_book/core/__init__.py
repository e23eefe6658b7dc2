# ai_book/core/__init__.py
"""
Core module containing configuration, AI services, prompts and utilities
"""

from .config import config
from .exceptions import GenerationFailure, MalformedExamError, SessionNotFoundError
from .ai_services import get_ai_service, Attachment

__all__ = [
    "config",
    "GenerationFailure",
    "MalformedExamError",
    "SessionNotFoundError",
    "get_ai_service",
    "Attachment"
]
