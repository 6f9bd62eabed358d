"""Tests for summaries, tutoring chat and exercise generation."""

import json

import pytest

from ncert_tutor.config import SUMMARY_ERROR_MESSAGE
from ncert_tutor.errors import LLMUnavailableError, ValidationError
from ncert_tutor.llm.generator import (
    ExerciseGenerator,
    Generator,
    Summarizer,
    fallback_exercises,
    parse_exercises,
)

VALID_EXERCISES = {
    "matchPairs": [
        {"id": "m1", "left": "Numerator", "right": "Top number of a fraction"},
        {"left": "Denominator", "right": "Bottom number of a fraction"},
    ],
    "fillInBlanks": [
        {
            "sentence": "A fraction has a ____ and a denominator.",
            "blank": "numerator",
            "options": ["numerator", "angle", "base", "line"],
            "correctAnswer": "numerator",
        }
    ],
}


class TestGenerator:
    def test_passes_options(self, fake_ollama):
        reply = Generator(model="tiny").complete("system", "prompt", temperature=0.2, max_tokens=50)
        assert reply == "This is a test answer."
        call = fake_ollama.calls[0]
        assert call["model"] == "tiny"
        assert call["options"] == {"temperature": 0.2, "num_predict": 50}
        assert fake_ollama.last_system == "system"
        assert fake_ollama.last_user == "prompt"

    def test_client_error_is_wrapped(self, fake_ollama):
        fake_ollama.error = ConnectionError("connection refused")
        with pytest.raises(LLMUnavailableError):
            Generator().complete("system", "prompt")

    def test_empty_reply_is_an_error(self, fake_ollama):
        fake_ollama.reply = "   "
        with pytest.raises(LLMUnavailableError):
            Generator().complete("system", "prompt")


class TestSummarize:
    def test_summary_from_pdf(self, fake_ollama, chapter_pdf):
        result = Summarizer().summarize(chapter_pdf, [1], "brief")
        assert result.success
        assert result.from_pdf
        assert result.summary == "This is a test answer."
        assert result.chapter_info.subject == "maths"
        assert "--- Page 1 ---" in fake_ollama.last_user
        assert "Page 1 line 1" in fake_ollama.last_user

    def test_class_band_picks_prompt_and_length(self, fake_ollama, chapter_pdf):
        Summarizer().summarize(chapter_pdf, [1], "key-points")
        assert "ages 8-11" in fake_ollama.last_system
        assert "bullet points that young children can understand" in fake_ollama.last_user
        assert fake_ollama.last_options == {"temperature": 0.3, "num_predict": 600}

    def test_senior_class_gets_longer_budget(self, fake_ollama):
        Summarizer().summarize("/pdfs/class12/class12physics/chapter1.pdf", [1], "detailed")
        assert "ages 16-18" in fake_ollama.last_system
        assert fake_ollama.last_options["num_predict"] == 1200

    def test_missing_pdf_uses_fallback_content(self, fake_ollama, public_dir):
        result = Summarizer().summarize("/pdfs/class1/class1english/chapter1.pdf", [1], "brief")
        assert result.success
        assert not result.from_pdf
        assert "An action poem about body parts" in fake_ollama.last_user

    def test_scanned_pdf_uses_fallback_content(self, fake_ollama, blank_pdf):
        result = Summarizer().summarize(blank_pdf, [1], "brief")
        assert not result.from_pdf
        assert "Page 1:" in fake_ollama.last_user

    def test_unknown_summary_type(self, fake_ollama, chapter_pdf):
        with pytest.raises(ValidationError):
            Summarizer().summarize(chapter_pdf, [1], "poem")

    def test_model_failure_returns_apology(self, fake_ollama, chapter_pdf):
        fake_ollama.error = RuntimeError("model not found")
        result = Summarizer().summarize(chapter_pdf, [1], "brief")
        assert not result.success
        assert result.summary == SUMMARY_ERROR_MESSAGE

    def test_empty_model_reply_returns_apology(self, fake_ollama, chapter_pdf):
        fake_ollama.reply = ""
        result = Summarizer().summarize(chapter_pdf, [1], "brief")
        assert not result.success
        assert result.summary == SUMMARY_ERROR_MESSAGE


class TestChat:
    def test_context_is_flattened_into_system_prompt(self, fake_ollama, chapter_pdf):
        result = Summarizer().chat(
            chapter_pdf,
            [2, 3],
            "What comes after 5?",
            previous_context="Student: hi\nTutor: hello",
            original_summary="Counting numbers.",
            chapter_title="Numbers",
        )
        assert result.success
        assert result.response == "This is a test answer."

        system = fake_ollama.last_system
        assert "specialized in maths for class5 students" in system
        assert "pages 2, 3" in system
        assert "Student: hi\nTutor: hello" in system
        assert "Previous summary: Counting numbers." in system
        assert "Chapter: Numbers" in system
        assert 'Current student question: "What comes after 5?"' in system
        assert fake_ollama.last_user == "What comes after 5?"
        assert fake_ollama.last_options == {"temperature": 0.4, "num_predict": 400}

    def test_defaults_for_missing_context(self, fake_ollama, chapter_pdf):
        Summarizer().chat(chapter_pdf, [1], "Why?")
        assert "No previous conversation" in fake_ollama.last_system
        assert "No previous summary" in fake_ollama.last_system
        assert "Chapter: chapter1" in fake_ollama.last_system

    def test_subject_override(self, fake_ollama, chapter_pdf):
        Summarizer().chat(chapter_pdf, [1], "Why?", subject="Mathematics")
        assert "specialized in Mathematics" in fake_ollama.last_system

    def test_empty_message(self, fake_ollama, chapter_pdf):
        with pytest.raises(ValidationError):
            Summarizer().chat(chapter_pdf, [1], "  ")

    def test_model_failure(self, fake_ollama, chapter_pdf):
        fake_ollama.error = RuntimeError("down")
        result = Summarizer().chat(chapter_pdf, [1], "Why?")
        assert not result.success
        assert result.response == SUMMARY_ERROR_MESSAGE


class TestParseExercises:
    def test_plain_json(self):
        exercises = parse_exercises(json.dumps(VALID_EXERCISES))
        assert len(exercises.match_pairs) == 2
        assert len(exercises.fill_in_blanks) == 1
        assert not exercises.fallback

    def test_fenced_json(self):
        text = f"Here you go:\n```json\n{json.dumps(VALID_EXERCISES)}\n```\nEnjoy!"
        assert len(parse_exercises(text).match_pairs) == 2

    def test_missing_ids_are_filled(self):
        exercises = parse_exercises(json.dumps(VALID_EXERCISES))
        assert [pair["id"] for pair in exercises.match_pairs] == ["m1", "match-1"]
        assert exercises.fill_in_blanks[0]["id"] == "fill-0"

    @pytest.mark.parametrize(
        "text",
        ["not json", "[]", '{"matchPairs": []}', '{"matchPairs": {}, "fillInBlanks": []}'],
    )
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_exercises(text)

    def test_to_dict_uses_camel_case(self):
        assert set(parse_exercises(json.dumps(VALID_EXERCISES)).to_dict()) == {"matchPairs", "fillInBlanks"}


class TestExerciseGenerator:
    def test_generates_from_model_output(self, fake_ollama):
        fake_ollama.reply = json.dumps(VALID_EXERCISES)
        exercises = ExerciseGenerator().generate("Fractions have two parts.", [4, 5], "maths")
        assert exercises.match_pairs[0]["left"] == "Numerator"
        assert "Subject: maths" in fake_ollama.last_system
        assert "Pages: 4, 5" in fake_ollama.last_system
        assert "Fractions have two parts." in fake_ollama.last_user
        assert fake_ollama.last_options == {"temperature": 0.7, "num_predict": 2000}

    def test_unparseable_output_falls_back(self, fake_ollama):
        fake_ollama.reply = "Sorry, I cannot make exercises."
        exercises = ExerciseGenerator().generate("Some summary")
        assert exercises.fallback
        assert exercises.to_dict() == fallback_exercises().to_dict()

    def test_non_object_items_fall_back(self, fake_ollama):
        fake_ollama.reply = json.dumps({"matchPairs": ["a"], "fillInBlanks": []})
        assert ExerciseGenerator().generate("Some summary").fallback

    def test_empty_summary(self, fake_ollama):
        with pytest.raises(ValidationError):
            ExerciseGenerator().generate("")

    def test_model_failure_propagates(self, fake_ollama):
        fake_ollama.error = RuntimeError("down")
        with pytest.raises(LLMUnavailableError):
            ExerciseGenerator().generate("Some summary")

    def test_fallback_is_a_fresh_copy(self):
        first = fallback_exercises()
        first.match_pairs.clear()
        assert len(fallback_exercises().match_pairs) == 3
