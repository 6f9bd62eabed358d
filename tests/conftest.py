"""Shared fixtures for the NCERT Tutor test suite."""

from unittest.mock import patch

import fitz
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ncert_tutor.booking.models import StudentProfile, TutorProfile, User, UserRole
from ncert_tutor.database import init_db

# ---------------------------------------------------------------------------
# Schedules used across booking tests
# ---------------------------------------------------------------------------

# Monday 09:00-12:00 and Wednesday 14:00-16:00, list form
LIST_SCHEDULE = [
    {"dayOfWeek": 1, "startTime": "09:00", "endTime": "12:00"},
    {"dayOfWeek": 3, "startTime": "14:00", "endTime": "16:00"},
]

# The same windows in map form with string slots
MAP_SCHEDULE = {
    "monday": {"available": True, "slots": ["09:00-12:00"]},
    "wednesday": {"available": True, "slots": ["14:00-16:00"]},
    "friday": {"available": False, "slots": ["09:00-17:00"]},
}

# ---------------------------------------------------------------------------
# Fake Ollama that never touches the network
# ---------------------------------------------------------------------------


class FakeOllama:
    """
    Stand-in for ollama.chat.

    Returns `reply` (or raises `error`) and records every call so tests can
    inspect prompts and options.
    """

    def __init__(self, reply: str = "This is a test answer."):
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[dict] = []

    def __call__(self, model, messages, **kwargs):
        self.calls.append({"model": model, "messages": messages, **kwargs})
        if self.error is not None:
            raise self.error
        return {"message": {"role": "assistant", "content": self.reply}}

    @property
    def last_system(self) -> str:
        return self.calls[-1]["messages"][0]["content"]

    @property
    def last_user(self) -> str:
        return self.calls[-1]["messages"][1]["content"]

    @property
    def last_options(self) -> dict:
        return self.calls[-1]["options"]


@pytest.fixture()
def fake_ollama():
    fake = FakeOllama()
    with patch("ollama.chat", fake):
        yield fake


# ---------------------------------------------------------------------------
# Sample PDFs
# ---------------------------------------------------------------------------


def build_pdf(path, pages: list[list[str]], title: str | None = None):
    """Write a PDF whose page i holds the lines pages[i] (empty list = blank page)."""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        if lines:
            page.insert_text((72, 72), "\n".join(lines), fontsize=10)
    if title:
        doc.set_metadata({"title": title, "author": "NCERT"})
    path.parent.mkdir(parents=True, exist_ok=True)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture()
def public_dir(tmp_path):
    """A public/ directory that request paths like /pdfs/... resolve into."""
    root = tmp_path / "public"
    root.mkdir()
    with patch("ncert_tutor.ingestion.pdf_parser.PUBLIC_DIR", root):
        yield root


@pytest.fixture()
def chapter_pdf(public_dir):
    """
    Three-page Class 5 maths chapter at /pdfs/class5/class5maths/chapter1.pdf.

    Each page has four lines, "Page <p> line <n>".
    """
    pages = [[f"Page {p} line {n}" for n in range(1, 5)] for p in range(1, 4)]
    build_pdf(
        public_dir / "pdfs" / "class5" / "class5maths" / "chapter1.pdf",
        pages,
        title="Numbers and Patterns",
    )
    return "/pdfs/class5/class5maths/chapter1.pdf"


@pytest.fixture()
def blank_pdf(public_dir):
    """A PDF with pages but no text layer, like a scanned book."""
    build_pdf(public_dir / "pdfs" / "class3" / "class3english" / "chapter2.pdf", [[], []])
    return "/pdfs/class3/class3english/chapter2.pdf"


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine():
    """In-memory SQLite shared by every session in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def tutor(db):
    """A tutor working Monday mornings and Wednesday afternoons (UTC)."""
    user = User(name="Asha Tutor", email="asha@example.com", role=UserRole.TUTOR.value)
    user.tutor_profile = TutorProfile(subjects=["maths"], availability=LIST_SCHEDULE)
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def student(db):
    """A student user without a profile yet."""
    user = User(name="Ravi Student", email="ravi@example.com", role=UserRole.STUDENT.value)
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def student_with_profile(db):
    user = User(name="Meera Student", email="meera@example.com", role=UserRole.STUDENT.value)
    user.student_profile = StudentProfile(grade="Class 5", subjects=["maths"])
    db.add(user)
    db.commit()
    return user


# ---------------------------------------------------------------------------
# Web app
# ---------------------------------------------------------------------------


@pytest.fixture()
def test_client(session_factory, fake_ollama, public_dir):
    """
    TestClient wired to the in-memory database.

    Ollama is replaced by `fake_ollama`; request PDFs resolve under a
    temporary public/ directory.
    """
    from ncert_tutor.interfaces.web_app import create_app

    app = create_app(session_factory=session_factory)
    with TestClient(app) as client:
        yield client
