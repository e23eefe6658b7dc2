# ai_book/services/chat_service.py
import logging
import threading
import time
import uuid
from typing import Dict, Any, List, Optional

from ..core.config import config
from ..core.ai_services import AIService, get_ai_service
from ..core.exceptions import GenerationFailure
from ..core.prompts import PromptTemplates
from ..core.utils import MemoryManager, memory_manager, ValidationUtils
from ..models.schemas import ChatMessage

logger = logging.getLogger(__name__)

FALLBACK_GREETING = "Hello! I am the {site} assistant. How can I help you today?"
ERROR_REPLY = "Sorry, something went wrong. Please try again."

class Conversation:
    """Visible messages plus the turns sent back to the model"""

    def __init__(self, system_instruction: str):
        self.system_instruction = system_instruction
        self.messages: List[ChatMessage] = []
        self.history: List[Dict[str, str]] = []
        self.created_at = time.time()
        self.lock = threading.Lock()

    def add_message(self, role: str, text: str, message_id: str = None) -> ChatMessage:
        message = ChatMessage(id=message_id or uuid.uuid4().hex, role=role, text=text)
        self.messages.append(message)
        return message

    def record_turn(self, user_text: str, model_text: str):
        self.history.append({"role": "user", "text": user_text})
        self.history.append({"role": "model", "text": model_text})

class ChatService:
    """Site assistant chat"""

    def __init__(self, ai_service: Optional[AIService] = None, store: Optional[MemoryManager] = None):
        self.ai_service = ai_service or get_ai_service()
        self.store = store or memory_manager

    def start_chat(self) -> Dict[str, Any]:
        """Open a conversation and let the assistant introduce itself"""
        conversation = Conversation(PromptTemplates.assistant_system_instruction())
        greeting = PromptTemplates.assistant_greeting()

        try:
            reply = self.ai_service.chat(conversation.system_instruction, [], greeting)
        except GenerationFailure as e:
            logger.warning(f"Assistant greeting failed, using fallback: {e}")
            conversation.add_message("model", FALLBACK_GREETING.format(site=config.SITE_NAME), message_id="init-error")
        else:
            conversation.record_turn(greeting, reply)
            conversation.add_message("model", reply, message_id="init")

        chat_id = self.store.create_chat(conversation)
        return {"chat_id": chat_id, "messages": self._dump(conversation)}

    def send_message(self, chat_id: str, text: str) -> Dict[str, Any]:
        """Send a user message; generator failures become an apology reply"""
        if not text or not text.strip():
            raise ValueError("Message cannot be empty")
        if len(text) > config.MAX_CHAT_MESSAGE_LENGTH:
            raise ValueError(f"Message exceeds {config.MAX_CHAT_MESSAGE_LENGTH} characters")

        conversation = self._conversation(chat_id)

        with conversation.lock:
            conversation.add_message("user", text)
            try:
                reply_text = self.ai_service.chat(conversation.system_instruction, conversation.history, text)
            except GenerationFailure as e:
                logger.error(f"❌ Assistant reply failed for chat {chat_id}: {e}")
                reply = conversation.add_message("model", ERROR_REPLY, message_id=f"error-{uuid.uuid4().hex}")
            else:
                conversation.record_turn(text, reply_text)
                reply = conversation.add_message("model", reply_text)

        return {
            "chat_id": chat_id,
            "reply": reply.model_dump(),
            "messages": self._dump(conversation)
        }

    def get_messages(self, chat_id: str) -> Dict[str, Any]:
        conversation = self._conversation(chat_id)
        return {"chat_id": chat_id, "messages": self._dump(conversation)}

    def close_chat(self, chat_id: str) -> bool:
        if not ValidationUtils.validate_session_id(chat_id):
            raise ValueError("Invalid chat ID format")
        return self.store.remove_chat(chat_id)

    def _conversation(self, chat_id: str) -> Conversation:
        if not ValidationUtils.validate_session_id(chat_id):
            raise ValueError("Invalid chat ID format")
        return self.store.get_chat(chat_id)

    def _dump(self, conversation: Conversation) -> List[Dict[str, str]]:
        return [message.model_dump() for message in conversation.messages]

_chat_service = None

def get_chat_service() -> ChatService:
    """Get chat service instance (singleton)"""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service
