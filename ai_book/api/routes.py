# ai_book/api/routes.py
import io
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from ..core.ai_services import Attachment
from ..core.config import config
from ..core.utils import ValidationUtils, DateTimeUtils
from ..models.schemas import (
    SourceFilePayload, GenerateExamRequest, SetAnswerRequest, ProjectPlanRequest,
    PlanPdfRequest, ImageRequest, LessonRequest, ChatMessageRequest
)
from ..services.exam_service import get_exam_service
from ..services.project_service import get_project_service
from ..services.lesson_service import get_lesson_service
from ..services.chat_service import get_chat_service
from ..services.pdf_service import get_pdf_service

logger = logging.getLogger(__name__)

router = APIRouter()

def to_attachment(payload: Optional[SourceFilePayload]) -> Optional[Attachment]:
    """Decode an uploaded file payload"""
    if payload is None:
        return None

    attachment = Attachment(
        data=ValidationUtils.decode_base64_file(payload.data),
        mime_type=payload.mime_type.strip().lower()
    )
    if not attachment.is_supported:
        raise ValueError(f"Unsupported file type: {payload.mime_type}. Use an image or a text file")
    return attachment

def pdf_response(pdf_bytes: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )

@router.get("/")
async def home():
    """Home endpoint"""
    return {
        "service": config.API_TITLE,
        "version": config.API_VERSION,
        "status": "operational"
    }

# ==================== Exam maker ====================

@router.post("/api/exam/generate")
async def generate_exam(request_data: GenerateExamRequest):
    """Generate an exam and open a new answering session"""
    attachment = to_attachment(request_data.source_file)
    return await run_in_threadpool(
        get_exam_service().generate_exam,
        request_data.difficulty.value,
        request_data.exam_type.value,
        request_data.source_text,
        attachment,
        request_data.replaces_session_id
    )

@router.get("/api/exam/{session_id}")
async def get_exam(session_id: str):
    return get_exam_service().get_exam(session_id)

@router.put("/api/exam/{session_id}/answers/{index}")
async def set_answer(session_id: str, index: int, request_data: SetAnswerRequest):
    return get_exam_service().set_answer(session_id, index, request_data.answer)

@router.post("/api/exam/{session_id}/submit")
async def submit_exam(session_id: str):
    response = get_exam_service().submit(session_id)
    logger.info(f"Exam submitted: {session_id} -> {response['summary']}")
    return response

@router.get("/api/exam/{session_id}/pdf")
async def download_exam_pdf(session_id: str):
    session = get_exam_service().get_session(session_id)
    pdf_bytes = await run_in_threadpool(get_pdf_service().generate_exam_pdf, session)
    return pdf_response(pdf_bytes, f"exam_results_{session_id}.pdf")

@router.delete("/api/exam/{session_id}")
async def discard_exam(session_id: str):
    if not get_exam_service().discard(session_id):
        raise HTTPException(status_code=404, detail="Exam session not found")
    return {"session_id": session_id, "discarded": True}

# ==================== Project builder ====================

@router.post("/api/project/plan")
async def generate_project_plan(request_data: ProjectPlanRequest):
    return await run_in_threadpool(get_project_service().generate_plan, request_data.idea)

@router.post("/api/project/plan/pdf")
async def download_project_plan_pdf(request_data: PlanPdfRequest):
    """Export a generated plan, sent back as Markdown, to PDF"""
    pdf_bytes = await run_in_threadpool(
        get_pdf_service().generate_plan_pdf, request_data.plan_markdown, request_data.title
    )
    return pdf_response(pdf_bytes, "project_plan.pdf")

@router.post("/api/project/image")
async def generate_project_image(request_data: ImageRequest):
    return await run_in_threadpool(get_project_service().generate_image, request_data.description)

# ==================== Lesson explainer ====================

@router.post("/api/lesson/explain")
async def explain_lesson(request_data: LessonRequest):
    attachment = to_attachment(request_data.source_file)
    return await run_in_threadpool(
        get_lesson_service().explain,
        request_data.style.value,
        request_data.lesson_text,
        attachment
    )

# ==================== Assistant chat ====================

@router.post("/api/chat")
async def start_chat():
    return await run_in_threadpool(get_chat_service().start_chat)

@router.get("/api/chat/{chat_id}/messages")
async def get_chat_messages(chat_id: str):
    return get_chat_service().get_messages(chat_id)

@router.post("/api/chat/{chat_id}/messages")
async def send_chat_message(chat_id: str, request_data: ChatMessageRequest):
    return await run_in_threadpool(get_chat_service().send_message, chat_id, request_data.message)

@router.delete("/api/chat/{chat_id}")
async def close_chat(chat_id: str):
    if not get_chat_service().close_chat(chat_id):
        raise HTTPException(status_code=404, detail="Chat not found")
    return {"chat_id": chat_id, "closed": True, "timestamp": DateTimeUtils.get_current_timestamp()}
