# ai_book/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import config
from .core.ai_services import get_ai_service, close_ai_service
from .core.exceptions import GenerationFailure, SessionNotFoundError
from .core.utils import cleanup_all, memory_manager, DateTimeUtils
from .api.routes import router

# Setup logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info("🚀 AI Book API starting...")

    try:
        validation = config.validate()
        if not validation["valid"]:
            raise Exception(f"Configuration invalid: {validation['issues']}")

        logger.info("✅ Configuration validated")

        logger.info("🔄 Initializing AI service...")
        ai_health = get_ai_service().health_check()

        if ai_health["status"] != "healthy":
            logger.warning(f"AI service health warning: {ai_health}")
        else:
            logger.info(f"✅ AI service ready ({ai_health.get('mode', 'live')})")

        logger.info(f"🌍 Content language: {config.CONTENT_LANGUAGE}")
        logger.info(f"⏱️ Session expiration: {config.SESSION_EXPIRATION_SECONDS}s")

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise Exception(f"Application startup failed: {e}")

    yield

    logger.info("👋 Shutting down...")
    try:
        cleanup_all()
        close_ai_service()
        logger.info("✅ Graceful shutdown completed")
    except Exception as e:
        logger.error(f"❌ Shutdown error: {e}")

app = FastAPI(
    title=config.API_TITLE,
    description=config.API_DESCRIPTION,
    version=config.API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)

# Exception handlers
@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle validation errors"""
    logger.warning(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation Error",
            "message": str(exc),
            "type": "validation_error"
        }
    )

@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
    logger.warning(f"Session lookup failed: {exc}")
    return JSONResponse(
        status_code=404,
        content={
            "error": "Session Not Found",
            "message": str(exc),
            "type": "not_found_error"
        }
    )

@app.exception_handler(GenerationFailure)
async def generation_failure_handler(request: Request, exc: GenerationFailure):
    """Generator failures are shown to the user as a friendly message"""
    logger.error(f"❌ Generation failed: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "error": "Generation Failed",
            "message": exc.user_message,
            "type": "generation_error"
        }
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "type": "server_error"
        }
    )

@app.get("/health")
async def health_check():
    """Comprehensive health check"""
    try:
        health_status = {
            "status": "healthy",
            "service": "ai_book_api",
            "version": config.API_VERSION,
            "timestamp": DateTimeUtils.get_current_timestamp()
        }

        try:
            from .services.exam_service import get_exam_service
            exam_health = get_exam_service().health_check()
            health_status["exam_service"] = exam_health["status"]
            health_status["active_exam_sessions"] = exam_health.get("active_exam_sessions", 0)
        except Exception as e:
            health_status["exam_service"] = "error"
            logger.warning(f"Exam service health check failed: {e}")

        try:
            ai_health = get_ai_service().health_check()
            health_status["ai_service"] = ai_health["status"]
        except Exception as e:
            health_status["ai_service"] = "error"
            logger.warning(f"AI service health check failed: {e}")

        health_status["active_chats"] = memory_manager.get_memory_stats()["active_chats"]
        return health_status

    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "service": "ai_book_api",
                "error": str(e)
            }
        )

@app.get("/info")
async def api_info():
    """API information and capabilities"""
    return {
        "name": config.API_TITLE,
        "version": config.API_VERSION,
        "description": config.API_DESCRIPTION,
        "features": {
            "exam_maker": True,
            "project_builder": True,
            "image_generation": bool(config.OPENAI_API_KEY) or config.USE_DUMMY_DATA,
            "lesson_explainer": True,
            "site_assistant": True,
            "pdf_export": True
        },
        "configuration": {
            "content_language": config.CONTENT_LANGUAGE,
            "true_false_tokens": config.TRUE_FALSE_TOKENS,
            "multiple_choice_options": config.MULTIPLE_CHOICE_OPTIONS,
            "session_expiration_seconds": config.SESSION_EXPIRATION_SECONDS,
            "using_dummy_data": config.USE_DUMMY_DATA
        },
        "endpoints": {
            "generate_exam": "POST /api/exam/generate",
            "set_answer": "PUT /api/exam/{session_id}/answers/{index}",
            "submit_exam": "POST /api/exam/{session_id}/submit",
            "exam_pdf": "GET /api/exam/{session_id}/pdf",
            "project_plan": "POST /api/project/plan",
            "project_image": "POST /api/project/image",
            "explain_lesson": "POST /api/lesson/explain",
            "start_chat": "POST /api/chat",
            "health": "GET /health",
            "docs": "GET /docs"
        }
    }

if __name__ == "__main__":
    import uvicorn

    logger.info("🚀 Starting AI Book API")
    logger.info(f"🌐 Server: http://{config.API_HOST}:{config.API_PORT}")
    logger.info(f"📚 Docs: http://{config.API_HOST}:{config.API_PORT}/docs")

    uvicorn.run(
        "ai_book.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.DEBUG_MODE,
        log_level=config.LOG_LEVEL.lower(),
        access_log=config.DEBUG_MODE
    )
