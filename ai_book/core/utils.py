# ai_book/core/utils.py
import base64
import binascii
import logging
import threading
import time
import uuid
from datetime import datetime
from typing import Dict, Any, Optional

from .config import config
from .exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)

class MemoryManager:
    """In-memory storage for exam sessions and assistant chats"""

    def __init__(self, start_cleanup_thread: bool = True):
        self.exam_sessions = {}  # session_id -> {"value", "created_at", "last_access"}
        self.chats = {}  # chat_id -> {"value", "created_at", "last_access"}
        self._lock = threading.RLock()
        self._cleanup_thread = None
        if start_cleanup_thread:
            self._start_cleanup_thread()

    def _start_cleanup_thread(self):
        """Start background cleanup thread"""
        if self._cleanup_thread and self._cleanup_thread.is_alive():
            return

        self._cleanup_thread = threading.Thread(target=self._periodic_cleanup, daemon=True)
        self._cleanup_thread.start()
        logger.info("✅ Memory cleanup thread started")

    def _periodic_cleanup(self):
        """Periodic cleanup of expired data"""
        while True:
            time.sleep(config.MEMORY_CLEANUP_INTERVAL)
            try:
                self.cleanup_expired_data()
            except Exception as e:
                logger.error(f"Cleanup thread error: {e}")

    def cleanup_expired_data(self, now: float = None) -> Dict[str, int]:
        """Drop sessions and chats idle for longer than the expiration window"""
        current_time = now if now is not None else time.time()
        removed = {}

        with self._lock:
            for name, store in (("exam_sessions", self.exam_sessions), ("chats", self.chats)):
                expired = [
                    key for key, entry in store.items()
                    if current_time - entry["last_access"] > config.SESSION_EXPIRATION_SECONDS
                ]
                for key in expired:
                    store.pop(key, None)
                removed[name] = len(expired)

        if any(removed.values()):
            logger.info(f"🧹 Cleanup: removed {removed['exam_sessions']} exam sessions, {removed['chats']} chats")

        return removed

    def _put(self, store: Dict[str, Dict[str, Any]], value: Any) -> str:
        key = generate_session_id()
        now = time.time()
        with self._lock:
            store[key] = {"value": value, "created_at": now, "last_access": now}
        return key

    def _get(self, store: Dict[str, Dict[str, Any]], key: str) -> Any:
        with self._lock:
            entry = store.get(key)
            if entry is None:
                raise SessionNotFoundError(key)
            entry["last_access"] = time.time()
            return entry["value"]

    def _pop(self, store: Dict[str, Dict[str, Any]], key: str) -> bool:
        with self._lock:
            return store.pop(key, None) is not None

    # ==================== Exam sessions ====================

    def create_exam_session(self, exam_session: Any) -> str:
        session_id = self._put(self.exam_sessions, exam_session)
        logger.info(f"✅ Exam session created: {session_id}")
        return session_id

    def get_exam_session(self, session_id: str) -> Any:
        return self._get(self.exam_sessions, session_id)

    def remove_exam_session(self, session_id: str) -> bool:
        return self._pop(self.exam_sessions, session_id)

    # ==================== Chats ====================

    def create_chat(self, chat: Any) -> str:
        chat_id = self._put(self.chats, chat)
        logger.info(f"✅ Chat created: {chat_id}")
        return chat_id

    def get_chat(self, chat_id: str) -> Any:
        return self._get(self.chats, chat_id)

    def remove_chat(self, chat_id: str) -> bool:
        return self._pop(self.chats, chat_id)

    def clear(self):
        with self._lock:
            self.exam_sessions.clear()
            self.chats.clear()

    def get_memory_stats(self) -> Dict[str, Any]:
        """Get memory usage statistics"""
        with self._lock:
            return {
                "active_exam_sessions": len(self.exam_sessions),
                "active_chats": len(self.chats),
                "cleanup_thread_alive": self._cleanup_thread.is_alive() if self._cleanup_thread else False
            }

class ValidationUtils:
    """Utility functions for request validation"""

    @staticmethod
    def validate_session_id(session_id: str) -> bool:
        """Validate session ID format"""
        try:
            uuid.UUID(session_id)
            return True
        except (ValueError, TypeError, AttributeError):
            return False

    @staticmethod
    def validate_question_index(index: Any, total_questions: int) -> bool:
        """Validate a 0-based question index"""
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        return 0 <= index < total_questions

    @staticmethod
    def sanitize_input(input_str: str, max_length: int = 5000, field: str = "Input") -> str:
        """Trim surrounding whitespace; reject text longer than max_length"""
        if not input_str:
            return ""

        sanitized = input_str.strip()

        if len(sanitized) > max_length:
            logger.warning(f"{field} rejected: {len(sanitized)} characters (limit {max_length})")
            raise ValueError(f"{field} exceeds {max_length} characters, please shorten it")

        return sanitized

    @staticmethod
    def decode_base64_file(data: str, max_bytes: int = None) -> bytes:
        """Decode base64 file content, accepting an optional data URL prefix"""
        if max_bytes is None:
            max_bytes = config.MAX_SOURCE_FILE_BYTES

        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]

        try:
            decoded = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 file content: {e}")

        if not decoded:
            raise ValueError("Attached file is empty")

        if len(decoded) > max_bytes:
            raise ValueError(f"Attached file exceeds {max_bytes} bytes")

        return decoded

class DateTimeUtils:
    """Utility functions for date/time operations"""

    @staticmethod
    def get_current_timestamp() -> float:
        """Get current timestamp"""
        return time.time()

    @staticmethod
    def format_timestamp(timestamp: float, format_str: str = "%Y-%m-%d %H:%M:%S") -> str:
        """Format timestamp to string"""
        try:
            dt = datetime.fromtimestamp(timestamp)
            return dt.strftime(format_str)
        except (ValueError, OSError, OverflowError):
            return "Invalid timestamp"

# Global instances
memory_manager = MemoryManager()

# Cleanup function for graceful shutdown
def cleanup_all():
    """Clean up all resources"""
    try:
        memory_manager.cleanup_expired_data()
        logger.info("✅ All resources cleaned up")
    except Exception as e:
        logger.error(f"❌ Cleanup failed: {e}")

def generate_session_id() -> str:
    """Generate unique session ID"""
    return str(uuid.uuid4())
