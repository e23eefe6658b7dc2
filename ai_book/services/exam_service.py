# ai_book/services/exam_service.py
import logging
from typing import Dict, Any, Optional

from ..core.config import config
from ..core.ai_services import AIService, Attachment, get_ai_service
from ..core.prompts import PromptTemplates
from ..core.utils import MemoryManager, memory_manager, ValidationUtils, DateTimeUtils
from ..models.exam import parse_exam
from ..models.schemas import ExamDifficulty, ExamType
from ..models.session import ExamSession

logger = logging.getLogger(__name__)

class ExamService:
    """Service for generating exams and managing their sessions"""

    def __init__(self, ai_service: Optional[AIService] = None, store: Optional[MemoryManager] = None):
        self.ai_service = ai_service or get_ai_service()
        self.store = store or memory_manager
        self.use_dummy = self.ai_service.use_dummy

        if self.use_dummy:
            logger.info("🔧 Exam service using dummy data mode")

    def generate_exam(self, difficulty: str, exam_type: str, source_text: str = "",
                      source_file: Optional[Attachment] = None,
                      replaces_session_id: Optional[str] = None) -> Dict[str, Any]:
        """Generate an exam and open a fresh session for it"""
        difficulty = ExamDifficulty(difficulty)
        exam_type = ExamType(exam_type)
        source_text = ValidationUtils.sanitize_input(source_text, config.MAX_SOURCE_TEXT_LENGTH, "Source text")

        if not source_text and source_file is None:
            raise ValueError("Provide some text or upload a file to generate the exam")
        if replaces_session_id and not ValidationUtils.validate_session_id(replaces_session_id):
            raise ValueError("Invalid session ID format")

        logger.info(f"🚀 Generating {difficulty.value} {exam_type.value} exam (dummy: {self.use_dummy})")

        if self.use_dummy:
            raw_exam = self.ai_service.dummy_data.get_exam_json(exam_type.value)
        else:
            prompt = PromptTemplates.create_exam_prompt(difficulty.value, exam_type.value, source_text)
            raw_exam = self.ai_service.generate_json(prompt, source_file)

        exam = parse_exam(raw_exam)
        session = ExamSession(exam)
        session_id = self.store.create_exam_session(session)

        if replaces_session_id and self.store.remove_exam_session(replaces_session_id):
            logger.info(f"Replaced exam session {replaces_session_id} with {session_id}")

        logger.info(f"✅ Exam ready: {session_id} ({exam.total} questions)")
        return self._response(session_id, session)

    def get_session(self, session_id: str) -> ExamSession:
        if not ValidationUtils.validate_session_id(session_id):
            raise ValueError("Invalid session ID format")
        return self.store.get_exam_session(session_id)

    def get_exam(self, session_id: str) -> Dict[str, Any]:
        """Current render state of an exam session"""
        return self._response(session_id, self.get_session(session_id))

    def set_answer(self, session_id: str, index: int, answer: str) -> Dict[str, Any]:
        """Record an answer; ignored once the session is graded"""
        session = self.get_session(session_id)

        if not ValidationUtils.validate_question_index(index, session.total):
            raise ValueError(f"Invalid question index: {index}")

        accepted = session.set_answer(index, answer)
        response = self._response(session_id, session)
        response["accepted"] = accepted
        return response

    def submit(self, session_id: str) -> Dict[str, Any]:
        """Grade the session once every question has an answer"""
        session = self.get_session(session_id)

        if not session.submitted and not session.is_complete:
            raise ValueError(
                f"All questions must be answered before submitting "
                f"({session.answered_count}/{session.total} answered)"
            )

        session.submit()
        return self._response(session_id, session)

    def discard(self, session_id: str) -> bool:
        if not ValidationUtils.validate_session_id(session_id):
            raise ValueError("Invalid session ID format")

        removed = self.store.remove_exam_session(session_id)
        if removed:
            logger.info(f"Exam session discarded: {session_id}")
        return removed

    def _response(self, session_id: str, session: ExamSession) -> Dict[str, Any]:
        response = {"session_id": session_id}
        response.update(session.to_dict())
        return response

    def health_check(self) -> Dict[str, Any]:
        """Health check for exam service"""
        try:
            stats = self.store.get_memory_stats()

            return {
                "status": "healthy",
                "mode": "dummy_data" if self.use_dummy else "live_data",
                "active_exam_sessions": stats["active_exam_sessions"],
                "timestamp": DateTimeUtils.get_current_timestamp()
            }
        except Exception as e:
            return {
                "status": "error",
                "message": str(e),
                "timestamp": DateTimeUtils.get_current_timestamp()
            }

# Singleton pattern for exam service
_exam_service = None

def get_exam_service() -> ExamService:
    """Get exam service instance (singleton)"""
    global _exam_service
    if _exam_service is None:
        _exam_service = ExamService()
    return _exam_service
