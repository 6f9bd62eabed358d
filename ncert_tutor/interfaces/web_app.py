"""
Web Interface - FastAPI application for the NCERT Tutor.

Endpoints:
- GET  /health              Liveness plus database check
- POST /api/summarize       Page summaries (summaryType "chat" answers a question)
- POST /api/chat            Follow-up tutoring chat
- POST /api/exercises       Matching and fill-in-the-blank exercises
- POST /api/pdf/metadata    Page count and title of a chapter PDF
- POST /api/bookings        Book a tutor (caller identified by X-User-Id)
- GET  /api/bookings        The caller's bookings

Run with:
    uvicorn ncert_tutor.interfaces.web_app:create_app --factory
"""

import logging
from collections.abc import Generator

from fastapi import BackgroundTasks, Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ncert_tutor import __version__
from ncert_tutor.booking.models import User
from ncert_tutor.booking.notifications import deliver_booking_notification
from ncert_tutor.booking.service import BookingRequest, BookingService, resolve_user
from ncert_tutor.config import DEFAULT_PAGE_COUNT, configure_logging
from ncert_tutor.database import SessionLocal, init_db
from ncert_tutor.errors import DocumentNotFoundError, DocumentParseError, DomainError
from ncert_tutor.ingestion.pdf_parser import get_pdf_info
from ncert_tutor.interfaces.schemas import (
    BookingCreate,
    BookingResponse,
    ChatRequest,
    ExercisesRequest,
    PdfMetadataRequest,
    SummarizeRequest,
)
from ncert_tutor.llm.generator import ChatResult, ExerciseGenerator, Summarizer

logger = logging.getLogger(__name__)


def _chat_payload(result: ChatResult, pages: list[int], pdf_path: str) -> dict:
    return {
        "success": result.success,
        "response": result.response,
        "pages": pages,
        "pdfPath": pdf_path,
        "chapterInfo": result.chapter_info.to_dict(),
        "fromPdf": result.from_pdf,
        "type": "chat",
    }


def create_app(session_factory: sessionmaker | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        session_factory: Session factory for requests and background
            notifications (defaults to the configured database)
    """
    configure_logging()

    factory = session_factory or SessionLocal
    init_db(factory.kw.get("bind"))

    app = FastAPI(title="NCERT Tutor", version=__version__)
    app.state.session_factory = factory
    app.state.summarizer = Summarizer()
    app.state.exercise_generator = ExerciseGenerator()

    # ── Errors ──────────────────────────────────────────────────────────────

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        http_exc = exc.to_http_exception()
        if http_exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=http_exc.status_code,
            content={"error": exc.message, **http_exc.detail},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # ── Dependencies ────────────────────────────────────────────────────────

    def get_db() -> Generator[Session, None, None]:
        db = app.state.session_factory()
        try:
            yield db
        finally:
            db.close()

    def current_user(
        x_user_id: str | None = Header(default=None),
        db: Session = Depends(get_db),
    ) -> User:
        return resolve_user(db, x_user_id)

    # ── Health ──────────────────────────────────────────────────────────────

    @app.get("/health")
    def health(db: Session = Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError as e:
            logger.warning("Health check could not reach the database: %s", e)
            database = "unavailable"
        return {"status": "ok", "database": database, "version": __version__}

    # ── AI endpoints ────────────────────────────────────────────────────────

    @app.post("/api/summarize")
    def summarize(body: SummarizeRequest):
        summarizer: Summarizer = app.state.summarizer

        if body.summary_type == "chat":
            result = summarizer.chat(
                body.pdf_path,
                body.pages,
                body.chat_message or "",
                previous_context=body.previous_context,
                original_summary=body.original_summary,
                subject=body.subject,
                chapter_title=body.chapter_title,
            )
            return _chat_payload(result, body.pages, body.pdf_path)

        result = summarizer.summarize(body.pdf_path, body.pages, body.summary_type)
        return {
            "success": result.success,
            "summary": result.summary,
            "pages": body.pages,
            "summaryType": body.summary_type,
            "pdfPath": body.pdf_path,
            "chapterInfo": result.chapter_info.to_dict(),
            "fromPdf": result.from_pdf,
        }

    @app.post("/api/chat")
    def chat(body: ChatRequest):
        result = app.state.summarizer.chat(
            body.pdf_path,
            body.pages,
            body.chat_message,
            previous_context=body.previous_context,
            original_summary=body.original_summary,
            subject=body.subject,
            chapter_title=body.chapter_title,
        )
        return _chat_payload(result, body.pages, body.pdf_path)

    @app.post("/api/exercises")
    def exercises(body: ExercisesRequest):
        result = app.state.exercise_generator.generate(body.summary, body.pages, body.subject)
        return {"success": True, "exercises": result.to_dict(), "fallback": result.fallback}

    @app.post("/api/pdf/metadata")
    def pdf_metadata(body: PdfMetadataRequest):
        try:
            info = get_pdf_info(body.pdf_path)
        except DocumentNotFoundError:
            logger.warning("PDF not found for metadata: %s", body.pdf_path)
            return {
                "success": False,
                "pageCount": DEFAULT_PAGE_COUNT,
                "message": "PDF not found, using default page count",
            }
        except DocumentParseError as e:
            logger.warning("Could not read PDF metadata for %s: %s", body.pdf_path, e.message)
            return {
                "success": False,
                "pageCount": DEFAULT_PAGE_COUNT,
                "message": "Could not read PDF, using default page count",
            }

        return {
            "success": True,
            "pageCount": info["page_count"],
            "title": info["title"],
            "author": info["author"],
            "filename": info["filename"],
        }

    # ── Bookings ────────────────────────────────────────────────────────────

    @app.post("/api/bookings", status_code=201)
    def create_booking(
        body: BookingCreate,
        background_tasks: BackgroundTasks,
        user: User = Depends(current_user),
        db: Session = Depends(get_db),
    ):
        booking = BookingService(db).create_booking(
            user,
            BookingRequest(
                tutor_id=body.tutor_id,
                start_time=body.start_time,
                end_time=body.end_time,
                timezone=body.timezone,
                subject=body.subject,
            ),
        )
        background_tasks.add_task(
            deliver_booking_notification,
            app.state.session_factory,
            booking.id,
            user.name,
        )
        return BookingResponse.model_validate(booking).model_dump(by_alias=True, mode="json")

    @app.get("/api/bookings")
    def list_bookings(user: User = Depends(current_user), db: Session = Depends(get_db)):
        bookings = BookingService(db).list_bookings(user)
        return [
            BookingResponse.model_validate(booking).model_dump(by_alias=True, mode="json")
            for booking in bookings
        ]

    return app
