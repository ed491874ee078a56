"""Main FastAPI application with modularized routes."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recruit_api.database import init_db
from recruit_api.logging_setup import setup_console_logging
from recruit_api.routes import (
    admin_portuguese_content,
    admin_question_groups,
    admin_question_templates,
    candidate_auth,
    tests,
)
from recruit_api.services.cleanup_service import schedule_token_cleanup

setup_console_logging()

logger = logging.getLogger(__name__)

app = FastAPI(title="Recruit Assessment API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and answer with an opaque 500."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": {"code": "INTERNAL_ERROR", "message": "Unexpected error", "details": None}},
    )


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Initialize database and schedule cleanup tasks on startup."""
    init_db()
    schedule_token_cleanup()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(candidate_auth.router)
app.include_router(tests.router)
app.include_router(admin_question_groups.router)
app.include_router(admin_question_templates.router)
app.include_router(admin_portuguese_content.router)
