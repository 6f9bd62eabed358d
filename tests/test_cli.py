"""Tests for CLI command parsing and handlers."""

import json

import pytest

from ncert_tutor.booking.availability import AvailabilityResolver
from ncert_tutor.interfaces import cli
from ncert_tutor.interfaces.cli import Session, handle_open, handle_pages, handle_slot, parse_command, parse_pages


class TestParseCommand:
    def test_question(self):
        assert parse_command("What is a fraction?") == ("ask", "What is a fraction?")

    def test_command_with_argument(self):
        assert parse_command("/open /pdfs/class5/class5maths/chapter1.pdf") == (
            "open",
            "/pdfs/class5/class5maths/chapter1.pdf",
        )

    def test_command_is_lowercased(self):
        assert parse_command("/SUMMARY key-points") == ("summary", "key-points")

    def test_empty(self):
        assert parse_command("   ") == ("empty", "")


class TestParsePages:
    def test_list_and_ranges(self):
        assert parse_pages("1,3-5") == [1, 3, 4, 5]

    def test_spaces_and_repeats(self):
        assert parse_pages("2 1 2") == [2, 1]

    @pytest.mark.parametrize("text", ["", "0", "a", "5-3", "1,,x"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_pages(text)


class TestHandlers:
    def test_open_sets_session(self, chapter_pdf):
        session = Session()
        handle_open(session, chapter_pdf)
        assert session.pdf_path == chapter_pdf
        assert session.page_count == 3

    def test_open_missing_keeps_session(self, public_dir):
        session = Session()
        handle_open(session, "/pdfs/none.pdf")
        assert session.pdf_path is None

    def test_pages_resets_conversation(self):
        session = Session(pdf_path="/x.pdf", summary="old", history=["Student: hi"])
        handle_pages(session, "2-3")
        assert session.pages == [2, 3]
        assert session.summary is None
        assert session.history == []

    def test_slot(self, tmp_path, monkeypatch):
        schedule_file = tmp_path / "tutor.json"
        schedule_file.write_text(json.dumps({"monday": {"available": True, "slots": ["09:00-12:00"]}}))
        printed = []
        monkeypatch.setattr(cli.console, "print", lambda *args, **kwargs: printed.append(str(args[0])))

        handle_slot(AvailabilityResolver(), f"{schedule_file} 2024-01-01T12:00:00")
        assert "Available slots for Monday" in printed[-1]

        handle_slot(AvailabilityResolver(), f"{schedule_file} 2024-01-01T10:00:00")
        assert "available at that time" in printed[-1]
