# ai_book/services/project_service.py
import logging
from typing import Dict, Any, Optional

import markdown

from ..core.config import config
from ..core.ai_services import AIService, get_ai_service
from ..core.prompts import PromptTemplates
from ..core.utils import ValidationUtils

logger = logging.getLogger(__name__)

def render_markdown(text: str) -> str:
    """Markdown to HTML for the client"""
    return markdown.markdown(text, extensions=["extra", "sane_lists"])

class ProjectService:
    """Project builder: plan generation and image design"""

    def __init__(self, ai_service: Optional[AIService] = None):
        self.ai_service = ai_service or get_ai_service()
        self.use_dummy = self.ai_service.use_dummy

    def generate_plan(self, idea: str) -> Dict[str, Any]:
        """Generate a Markdown project plan for an idea"""
        idea = ValidationUtils.sanitize_input(idea, config.MAX_SOURCE_TEXT_LENGTH, "Project idea")
        if not idea:
            raise ValueError("Enter a project idea to get started")

        logger.info(f"🚀 Building project plan (dummy: {self.use_dummy})")

        if self.use_dummy:
            plan = self.ai_service.dummy_data.get_project_plan(idea)
        else:
            plan = self.ai_service.generate_text(PromptTemplates.create_project_plan_prompt(idea))

        logger.info(f"✅ Project plan ready ({len(plan)} chars)")
        return {
            "idea": idea,
            "plan_markdown": plan,
            "plan_html": render_markdown(plan)
        }

    def generate_image(self, description: str) -> Dict[str, Any]:
        """Design an image and return it base64 encoded"""
        description = ValidationUtils.sanitize_input(description, 1000, "Image description")
        if not description:
            raise ValueError("Enter a description for the image")

        logger.info(f"🎨 Generating image (dummy: {self.use_dummy})")
        image_base64 = self.ai_service.generate_image(PromptTemplates.create_image_prompt(description))

        return {
            "description": description,
            "image_base64": image_base64,
            "data_url": f"data:image/png;base64,{image_base64}",
            "filename": config.IMAGE_DOWNLOAD_NAME
        }

# Singleton pattern for project service
_project_service = None

def get_project_service() -> ProjectService:
    """Get project service instance (singleton)"""
    global _project_service
    if _project_service is None:
        _project_service = ProjectService()
    return _project_service
