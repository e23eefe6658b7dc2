# ai_book/__init__.py
"""
AI Book - educational AI tools
Exam maker with answering sessions, project builder, lesson explainer and site assistant
"""

__version__ = "1.0.0"
__author__ = "AI Book Team"
__description__ = "Educational AI tools backed by Groq and OpenAI"

from .core.config import config
from .main import app

__all__ = ["app", "config"]
