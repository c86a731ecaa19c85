"""
FastAPI web server for the BSA Discovery Questionnaire wizard.

Holds per-session wizard state in memory and exposes it to the browser,
which polls the session snapshot after every action.

Endpoints:
    API - Catalog:
        GET    /api/areas                                   - Topic-area catalog
        GET    /api/options                                 - Project type / timeline choices

    API - Wizard:
        POST   /api/wizard/create                           - New wizard session
        GET    /api/wizard/{session_id}                     - State snapshot (drains notices)
        DELETE /api/wizard/{session_id}                     - Tear down session
        PUT    /api/wizard/{session_id}/project             - Update project fields
        POST   /api/wizard/{session_id}/areas/{area_id}/toggle - Toggle a topic area
        PUT    /api/wizard/{session_id}/areas               - Replace area selection
        POST   /api/wizard/{session_id}/next                - Advance one step
        POST   /api/wizard/{session_id}/back                - Go back one step

    API - Uploads (simulated):
        POST   /api/wizard/{session_id}/uploads             - Submit files
        DELETE /api/wizard/{session_id}/uploads/{entry_id}  - Remove an entry

    API - Questionnaire:
        POST   /api/wizard/{session_id}/generate            - Start generation
        POST   /api/wizard/{session_id}/generate/cancel     - Cancel generation
        GET    /api/wizard/{session_id}/questionnaire       - Preview view model
        GET    /api/wizard/{session_id}/questionnaire/text  - Plain-text rendering
        POST   /api/wizard/{session_id}/questionnaire/copy  - Copy action (posts notice)
        POST   /api/wizard/{session_id}/export/{format}     - Start simulated export
        GET    /api/wizard/{session_id}/export/{format}     - Download finished export
"""

import asyncio
import re as _re
import uuid as _uuid
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel, Field
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from bsa_discovery.config import load_settings
from bsa_discovery.logging_config import setup_logging

settings = load_settings()
setup_logging("server", level=settings.logging.level)

import structlog

from bsa_discovery.areas import TOPIC_AREAS
from bsa_discovery.exceptions import (
    GenerationInProgressError,
    InvalidProjectFieldError,
    InvalidTransitionError,
    QuestionnaireNotReadyError,
    SessionNotFoundError,
    StepIncompleteError,
    UnknownTopicAreaError,
    UnsupportedExportFormatError,
    UploadsUnavailableError,
    WizardError,
)
from bsa_discovery.project import PROJECT_TYPE_LABELS, TIMELINE_LABELS
from bsa_discovery.questionnaire.renderer import ExportStatus
from bsa_discovery.sessions import WizardSession, WizardSessionStore
from bsa_discovery.uploads.models import FileHandle

_SESSION_ID_RE = _re.compile(r'^[a-f0-9]{8}$')


def _safe_content_disposition(disposition: str, filename: str) -> str:
    """Build a Content-Disposition header safe for non-ASCII filenames (RFC 5987)."""
    from urllib.parse import quote
    filename = filename.replace("\r", "").replace("\n", "").replace("\x00", "")
    ascii_name = filename.encode("ascii", "ignore").decode("ascii") or "export"
    utf8_name = quote(filename, safe="")
    return f"{disposition}; filename=\"{ascii_name}\"; filename*=UTF-8''{utf8_name}"


logger = structlog.get_logger("server")
session_log = structlog.get_logger("session")

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):
    """Start the idle-session eviction loop; close every session on shutdown."""

    async def _cleanup_loop():
        try:
            while True:
                await asyncio.sleep(settings.sessions.cleanup_interval_seconds)
                evicted = store.evict_idle()
                if evicted:
                    session_log.debug("idle_sessions_cleaned", evicted=evicted)
        except asyncio.CancelledError:
            pass  # Graceful shutdown

    _cleanup_task = asyncio.create_task(_cleanup_loop())
    _track_task(_cleanup_task)
    logger.info("server_started", max_sessions=settings.sessions.max_sessions)

    yield  # --- App running ---

    if not _cleanup_task.done():
        _cleanup_task.cancel()
        try:
            await _cleanup_task
        except asyncio.CancelledError:
            pass
    closed = store.close_all()
    logger.info("server_shutdown_complete", sessions_closed=closed)


app = FastAPI(title="BSA Discovery Questionnaire", lifespan=_lifespan)


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(_uuid.uuid4())[:12]
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


_WIZARD_FIXED_ROUTES = {"create"}


class SessionIDValidationMiddleware(BaseHTTPMiddleware):
    """Reject malformed session ids in /api/wizard/{id} paths."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.startswith("/api/wizard/"):
            parts = path.split("/")
            if len(parts) >= 4:
                sid = parts[3]
                if sid and sid not in _WIZARD_FIXED_ROUTES and not _SESSION_ID_RE.match(sid):
                    return JSONResponse(
                        status_code=400,
                        content={"detail": "Invalid session_id format"},
                    )
        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "frame-ancestors 'none'"
        )
        return response


app.add_middleware(RequestIDMiddleware)
app.add_middleware(SessionIDValidationMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

# Singleton session store (swapped out by tests)
store = WizardSessionStore(settings=settings)

# Background task reference set (prevent GC of fire-and-forget tasks)
_background_tasks: set = set()


def _track_task(task):
    """Keep a reference to a background task to prevent GC."""
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


# ---------------------------------------------------------------------------
# Pydantic request models
# ---------------------------------------------------------------------------


class UpdateProjectRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=200)
    client: Optional[str] = Field(default=None, max_length=200)
    type: Optional[str] = None
    timeline: Optional[str] = None
    context: Optional[str] = Field(default=None, max_length=5000)
    ai_enabled: Optional[bool] = None


class SetAreasRequest(BaseModel):
    area_ids: List[str] = Field(default_factory=list, max_length=50)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_session(session_id: str) -> WizardSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


def _http_error(exc: WizardError) -> HTTPException:
    """Map a wizard error to the HTTP status the browser expects."""
    if isinstance(
        exc, (QuestionnaireNotReadyError, GenerationInProgressError, UploadsUnavailableError)
    ):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, StepIncompleteError):
        return HTTPException(
            status_code=400,
            detail={"message": str(exc), "missing": exc.missing},
        )
    if isinstance(
        exc,
        (
            InvalidTransitionError,
            InvalidProjectFieldError,
            UnknownTopicAreaError,
            UnsupportedExportFormatError,
        ),
    ):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail="Internal wizard error")


# ---------------------------------------------------------------------------
# API: Catalog
# ---------------------------------------------------------------------------


@app.get("/api/areas")
async def list_areas():
    return {"areas": [area.model_dump() for area in TOPIC_AREAS]}


@app.get("/api/options")
async def list_options():
    return {
        "project_types": [{"value": t.value, "label": label} for t, label in PROJECT_TYPE_LABELS.items()],
        "timelines": [{"value": t.value, "label": label} for t, label in TIMELINE_LABELS.items()],
    }


# ---------------------------------------------------------------------------
# API: Wizard session
# ---------------------------------------------------------------------------


@app.post("/api/wizard/create")
async def create_wizard():
    session = store.create()
    return session.snapshot()


@app.get("/api/wizard/{session_id}")
async def get_wizard(session_id: str):
    return _get_session(session_id).snapshot()


@app.delete("/api/wizard/{session_id}")
async def delete_wizard(session_id: str):
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "deleted", "session_id": session_id}


@app.put("/api/wizard/{session_id}/project")
async def update_project(session_id: str, req: UpdateProjectRequest):
    session = _get_session(session_id)
    try:
        session.controller.update_project(**req.model_dump(exclude_unset=True))
    except WizardError as e:
        raise _http_error(e)
    return session.snapshot()


@app.post("/api/wizard/{session_id}/areas/{area_id}/toggle")
async def toggle_area(session_id: str, area_id: str):
    session = _get_session(session_id)
    try:
        selected = session.controller.toggle_area(area_id)
    except WizardError as e:
        raise _http_error(e)
    return {"area_id": area_id, "selected": selected, **session.snapshot()}


@app.put("/api/wizard/{session_id}/areas")
async def set_areas(session_id: str, req: SetAreasRequest):
    session = _get_session(session_id)
    try:
        session.controller.set_areas(req.area_ids)
    except WizardError as e:
        raise _http_error(e)
    return session.snapshot()


@app.post("/api/wizard/{session_id}/next")
async def next_step(session_id: str):
    session = _get_session(session_id)
    try:
        session.controller.advance()
    except WizardError as e:
        raise _http_error(e)
    return session.snapshot()


@app.post("/api/wizard/{session_id}/back")
async def previous_step(session_id: str):
    session = _get_session(session_id)
    try:
        session.controller.go_back()
    except WizardError as e:
        raise _http_error(e)
    return session.snapshot()


# ---------------------------------------------------------------------------
# API: Uploads (simulated)
# ---------------------------------------------------------------------------


@app.post("/api/wizard/{session_id}/uploads")
async def upload_files(session_id: str, files: List[UploadFile] = File(...)):
    """Accept files for simulated upload.

    Content is read only to measure its size and then discarded. Rejected
    files come back as destructive notices in the snapshot. Answers 409
    while the upload panel is hidden.
    """
    session = _get_session(session_id)

    candidates = []
    for file in files:
        content = await file.read()
        candidates.append(
            FileHandle(
                name=file.filename or "unnamed",
                size=len(content),
                content_type=file.content_type,
            )
        )
        await file.close()

    try:
        created = session.submit_uploads(candidates)
    except WizardError as e:
        raise _http_error(e)
    return {"created": [e.to_view() for e in created], **session.snapshot()}


@app.delete("/api/wizard/{session_id}/uploads/{entry_id}")
async def remove_upload(session_id: str, entry_id: str):
    session = _get_session(session_id)
    if not session.uploads.remove(entry_id):
        raise HTTPException(status_code=404, detail="Upload entry not found")
    return session.snapshot()


# ---------------------------------------------------------------------------
# API: Questionnaire
# ---------------------------------------------------------------------------


@app.post("/api/wizard/{session_id}/generate")
async def start_generation(session_id: str):
    session = _get_session(session_id)
    try:
        session.controller.start_generation()
    except WizardError as e:
        raise _http_error(e)
    return session.snapshot()


@app.post("/api/wizard/{session_id}/generate/cancel")
async def cancel_generation(session_id: str):
    session = _get_session(session_id)
    cancelled = session.controller.cancel_generation()
    return {"cancelled": cancelled, **session.snapshot()}


@app.get("/api/wizard/{session_id}/questionnaire")
async def get_questionnaire(session_id: str):
    session = _get_session(session_id)
    try:
        return session.questionnaire_view()
    except WizardError as e:
        raise _http_error(e)


@app.get("/api/wizard/{session_id}/questionnaire/text")
async def get_questionnaire_text(session_id: str):
    session = _get_session(session_id)
    try:
        content = session.plain_text()
    except WizardError as e:
        raise _http_error(e)
    return PlainTextResponse(content)


@app.post("/api/wizard/{session_id}/questionnaire/copy")
async def copy_questionnaire(session_id: str):
    """Copy action: the body is the clipboard payload and a notice is posted."""
    session = _get_session(session_id)
    try:
        content = session.copy_text()
    except WizardError as e:
        raise _http_error(e)
    return PlainTextResponse(content)


@app.post("/api/wizard/{session_id}/export/{export_format}")
async def start_export(session_id: str, export_format: str):
    session = _get_session(session_id)
    try:
        job = session.export(export_format)
    except WizardError as e:
        raise _http_error(e)
    return {"export": job.to_dict(), **session.snapshot()}


@app.get("/api/wizard/{session_id}/export/{export_format}")
async def download_export(session_id: str, export_format: str):
    """Download a finished export.

    Word and JSON are sent as attachments; the print-ready HTML used for
    PDF opens inline so the browser can print it.
    """
    session = _get_session(session_id)
    try:
        job = session.renderer.get_export(export_format)
    except WizardError as e:
        raise _http_error(e)

    if job is None:
        raise HTTPException(status_code=404, detail="No export started for this format")
    if job.status is ExportStatus.RUNNING:
        raise HTTPException(status_code=409, detail="Export is still running")
    if job.status is ExportStatus.CANCELLED:
        raise HTTPException(status_code=409, detail="Export was cancelled")
    if job.status is ExportStatus.FAILED:
        raise HTTPException(status_code=500, detail="Export failed")

    disposition = "inline" if job.format == "pdf" else "attachment"
    session_log.info("session_exported", session_id=session_id, format=job.format, size=len(job.content))
    return Response(
        content=job.content,
        media_type=job.media_type,
        headers={"Content-Disposition": _safe_content_disposition(disposition, job.filename)},
    )
