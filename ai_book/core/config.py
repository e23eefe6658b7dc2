# ai_book/core/config.py
import os
import logging
from typing import Dict, Any, List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Centralized configuration management"""

    # ==================== API Configuration ====================
    API_TITLE = "AI Book API"
    API_DESCRIPTION = "Educational AI tools: exam maker, project builder, lesson explainer and site assistant"
    API_VERSION = "1.0.0"

    # ==================== Development Settings ====================
    USE_DUMMY_DATA = os.getenv("USE_DUMMY_DATA", "true").lower() == "true"

    # ==================== AI Service Configuration ====================
    # Groq settings (text, JSON and chat generation)
    GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
    GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    GROQ_VISION_MODEL = os.getenv("GROQ_VISION_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct")
    GROQ_TIMEOUT = int(os.getenv("GROQ_TIMEOUT", "60"))
    GROQ_TEMPERATURE = float(os.getenv("GROQ_TEMPERATURE", "0.7"))
    GROQ_MAX_TOKENS = int(os.getenv("GROQ_MAX_TOKENS", "4000"))
    GROQ_TOP_P = float(os.getenv("GROQ_TOP_P", "0.9"))

    # OpenAI settings (image generation)
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    OPENAI_IMAGE_MODEL = os.getenv("OPENAI_IMAGE_MODEL", "dall-e-3")
    OPENAI_IMAGE_SIZE = os.getenv("OPENAI_IMAGE_SIZE", "1024x1024")

    # ==================== Content Configuration ====================
    CONTENT_LANGUAGE = os.getenv("CONTENT_LANGUAGE", "Arabic")
    SITE_NAME = os.getenv("SITE_NAME", "AI Book")

    # Literal answer tokens for true/false questions
    TRUE_TOKEN = os.getenv("TRUE_TOKEN", "صح")
    FALSE_TOKEN = os.getenv("FALSE_TOKEN", "خطأ")

    MULTIPLE_CHOICE_OPTIONS = int(os.getenv("MULTIPLE_CHOICE_OPTIONS", "4"))
    MAX_SOURCE_TEXT_LENGTH = int(os.getenv("MAX_SOURCE_TEXT_LENGTH", "20000"))
    MAX_CHAT_MESSAGE_LENGTH = int(os.getenv("MAX_CHAT_MESSAGE_LENGTH", "2000"))
    MAX_SOURCE_FILE_BYTES = int(os.getenv("MAX_SOURCE_FILE_BYTES", str(4 * 1024 * 1024)))

    IMAGE_DOWNLOAD_NAME = "ai-book-image.png"

    # ==================== Session Configuration ====================
    SESSION_EXPIRATION_SECONDS = int(os.getenv("SESSION_EXPIRATION_SECONDS", "7200"))  # 2 hours
    MEMORY_CLEANUP_INTERVAL = int(os.getenv("MEMORY_CLEANUP_INTERVAL", "1800"))  # 30 minutes

    # ==================== PDF Configuration ====================
    PDF_FONT_SIZE = int(os.getenv("PDF_FONT_SIZE", "12"))
    PDF_TITLE_FONT_SIZE = int(os.getenv("PDF_TITLE_FONT_SIZE", "18"))
    PDF_PAGE_SIZE = os.getenv("PDF_PAGE_SIZE", "A4")
    # Unicode TTF with Arabic glyphs; the built-in PDF fonts are Latin-1 only
    PDF_FONT_PATH = os.getenv("PDF_FONT_PATH", "")
    PDF_BOLD_FONT_PATH = os.getenv("PDF_BOLD_FONT_PATH", "")
    PDF_FONT_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/noto/NotoNaskhArabic-Regular.ttf",
        "/usr/share/fonts/truetype/freefont/FreeSerif.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/Library/Fonts/Arial Unicode.ttf",
        "C:/Windows/Fonts/arial.ttf",
    ]

    # ==================== Server Configuration ====================
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
        if origin.strip()
    ]
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"

    @property
    def TRUE_FALSE_TOKENS(self) -> List[str]:
        return [self.TRUE_TOKEN, self.FALSE_TOKEN]

    # ==================== Environment Overrides ====================
    @classmethod
    def from_env(cls) -> 'Config':
        """Create config with environment variable overrides"""
        return cls()

    # ==================== Validation ====================
    def validate(self) -> Dict[str, Any]:
        """Validate configuration and return status"""
        issues = []
        warnings = []

        if not self.USE_DUMMY_DATA and not self.GROQ_API_KEY:
            issues.append("GROQ_API_KEY is required when not using dummy data")

        if not self.USE_DUMMY_DATA and not self.OPENAI_API_KEY:
            warnings.append("OPENAI_API_KEY not set - image generation unavailable")

        if self.TRUE_TOKEN.strip().lower() == self.FALSE_TOKEN.strip().lower():
            issues.append("TRUE_TOKEN and FALSE_TOKEN must differ")

        if self.MULTIPLE_CHOICE_OPTIONS < 2:
            issues.append("MULTIPLE_CHOICE_OPTIONS must be at least 2")

        if self.SESSION_EXPIRATION_SECONDS < 60:
            issues.append("SESSION_EXPIRATION_SECONDS must be at least 60")

        for key in ("PDF_FONT_PATH", "PDF_BOLD_FONT_PATH"):
            path = getattr(self, key)
            if path and not os.path.isfile(path):
                warnings.append(f"{key} does not exist: {path}")

        return {
            "valid": len(issues) == 0,
            "issues": issues,
            "warnings": warnings,
            "config_loaded": True,
            "using_dummy_data": self.USE_DUMMY_DATA
        }

# Global configuration instance
config = Config.from_env()

# Validate on import
validation_result = config.validate()
logger = logging.getLogger(__name__)
if not validation_result["valid"]:
    logger.warning(f"Configuration issues: {validation_result['issues']}")
for warning in validation_result["warnings"]:
    logger.warning(warning)
