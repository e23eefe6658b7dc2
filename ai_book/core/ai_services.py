# ai_book/core/ai_services.py
import base64
import logging
import time
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Tuple

import openai
import groq
from groq import Groq

from .config import config
from .dummy_data import get_dummy_data_service
from .exceptions import GenerationFailure

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Attachment:
    """A decoded file sent along with a prompt"""
    data: bytes
    mime_type: str

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def is_text(self) -> bool:
        return self.mime_type.startswith("text/")

    @property
    def is_supported(self) -> bool:
        return self.is_image or self.is_text

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

class AIService:
    """Service for all generator calls: text, JSON, chat and images"""

    def __init__(self, client: Optional[Groq] = None, image_client: Optional[openai.OpenAI] = None):
        """Initialize clients, or run in dummy mode when no keys are configured"""
        self.client = client
        self.image_client = image_client
        self.use_dummy = config.USE_DUMMY_DATA and client is None and image_client is None
        self.dummy_data = get_dummy_data_service()

        if self.use_dummy:
            logger.info("🔧 AI Service in dummy mode - using mock responses")
        elif client is None and image_client is None:
            self._init_clients()

    def _init_clients(self):
        """Initialize Groq and OpenAI clients"""
        try:
            if not config.GROQ_API_KEY:
                raise ValueError("GROQ_API_KEY not provided")

            self.client = Groq(api_key=config.GROQ_API_KEY, timeout=config.GROQ_TIMEOUT)
            logger.info("✅ Groq client initialized")

        except Exception as e:
            logger.error(f"❌ Groq client initialization failed: {e}")
            raise RuntimeError(f"AI service initialization failed: {e}")

        if config.OPENAI_API_KEY:
            self.image_client = openai.OpenAI(api_key=config.OPENAI_API_KEY)
            logger.info("✅ OpenAI image client initialized")
        else:
            logger.warning("OPENAI_API_KEY not set - image generation disabled")

    # ==================== Text generation ====================

    def generate_text(self, prompt: str, attachment: Optional[Attachment] = None) -> str:
        """Generate free-form text (Markdown) from a prompt and optional file"""
        if self.use_dummy:
            raise GenerationFailure("No dummy response available for free-form text")

        message, model = self._build_user_message(prompt, attachment)
        return self._call_llm([message], model=model)

    def generate_json(self, prompt: str, attachment: Optional[Attachment] = None) -> str:
        """Generate a JSON document; returns the raw text for the caller to validate"""
        if self.use_dummy:
            raise GenerationFailure("No dummy response available for free-form JSON")

        message, model = self._build_user_message(prompt, attachment)
        return self._call_llm([message], model=model, json_mode=True)

    def chat(self, system_instruction: str, history: List[Dict[str, str]], message: str) -> str:
        """Send one chat turn given the prior history of {role, text} messages"""
        if self.use_dummy:
            model_turns = sum(1 for item in history if item.get("role") == "model")
            return self.dummy_data.get_chat_reply(model_turns)

        messages = [{"role": "system", "content": system_instruction}]
        for item in history:
            role = "assistant" if item["role"] == "model" else "user"
            messages.append({"role": role, "content": item["text"]})
        messages.append({"role": "user", "content": message})

        return self._call_llm(messages)

    def _build_user_message(self, prompt: str, attachment: Optional[Attachment]) -> Tuple[Dict[str, Any], str]:
        """Build the user message and pick the model for the attachment type"""
        if attachment is None:
            return {"role": "user", "content": prompt}, config.GROQ_MODEL

        if attachment.is_image:
            content = [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": attachment.to_data_url()}}
            ]
            return {"role": "user", "content": content}, config.GROQ_VISION_MODEL

        if attachment.is_text:
            file_text = attachment.data.decode("utf-8", errors="replace")
            content = f"{prompt}\n\nATTACHED FILE CONTENT:\n{file_text}"
            return {"role": "user", "content": content}, config.GROQ_MODEL

        raise ValueError(f"Unsupported file type: {attachment.mime_type}")

    def _call_llm(self, messages: List[Dict[str, Any]], model: str = None, json_mode: bool = False,
                  max_tokens: int = None, temperature: float = None) -> str:
        """Single LLM call; failures surface as GenerationFailure without retrying"""
        if not self.client:
            raise GenerationFailure("AI service not available")

        request = {
            "model": model or config.GROQ_MODEL,
            "messages": messages,
            "temperature": config.GROQ_TEMPERATURE if temperature is None else temperature,
            "max_completion_tokens": max_tokens or config.GROQ_MAX_TOKENS,
            "top_p": config.GROQ_TOP_P
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        try:
            completion = self.client.chat.completions.create(**request)
        except groq.APIError as e:
            logger.error(f"❌ LLM call failed: {e}")
            raise GenerationFailure(f"LLM call failed: {e}") from e

        if not completion.choices:
            raise GenerationFailure("LLM returned no response")

        content = completion.choices[0].message.content
        if not content or not content.strip():
            raise GenerationFailure("LLM returned empty content")

        return content.strip()

    # ==================== Image generation ====================

    def generate_image(self, prompt: str) -> str:
        """Generate an image and return it as base64 PNG data"""
        if self.use_dummy:
            return self.dummy_data.get_image_base64()

        if not self.image_client:
            raise GenerationFailure("Image generation is not configured")

        request = {
            "model": config.OPENAI_IMAGE_MODEL,
            "prompt": prompt,
            "size": config.OPENAI_IMAGE_SIZE,
            "n": 1
        }
        # gpt-image models always answer with base64 and reject response_format
        if config.OPENAI_IMAGE_MODEL.startswith("dall-e"):
            request["response_format"] = "b64_json"

        try:
            response = self.image_client.images.generate(**request)
        except openai.OpenAIError as e:
            logger.error(f"❌ Image generation failed: {e}")
            raise GenerationFailure(f"Image generation failed: {e}") from e

        for item in response.data or []:
            if getattr(item, "b64_json", None):
                return item.b64_json

        raise GenerationFailure("No image data found in the response")

    def health_check(self) -> Dict[str, Any]:
        """Check AI service health"""
        if self.use_dummy:
            dummy_ok = self.dummy_data.validate_dummy_data()
            return {
                "status": "healthy" if dummy_ok else "error",
                "mode": "dummy",
                "client_ready": True,
                "image_client_ready": True,
                "message": "Running in dummy data mode" if dummy_ok else "Dummy data is incomplete"
            }

        try:
            if not self.client:
                return {"status": "error", "message": "Client not initialized"}

            start_time = time.time()
            test_response = self.client.chat.completions.create(
                model=config.GROQ_MODEL,
                messages=[{"role": "user", "content": "ping"}],
                max_completion_tokens=5
            )
            response_time = time.time() - start_time

            if test_response.choices:
                return {
                    "status": "healthy",
                    "mode": "live",
                    "model": config.GROQ_MODEL,
                    "response_time_ms": round(response_time * 1000, 2),
                    "client_ready": True,
                    "image_client_ready": self.image_client is not None
                }
            else:
                return {"status": "error", "message": "No response from LLM"}

        except Exception as e:
            return {"status": "error", "message": str(e)}

# Singleton pattern for AI service
_ai_service = None

def get_ai_service() -> AIService:
    """Get AI service instance (singleton)"""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service

def close_ai_service():
    """Close AI service instance"""
    global _ai_service
    if _ai_service:
        _ai_service = None
