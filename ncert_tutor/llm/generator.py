"""
Generator - Summaries, tutoring chat and exercises using Ollama LLM.

This module handles everything that talks to the language model:
1. Reads the requested pages of a chapter PDF (or templated stand-in content)
2. Builds an age-appropriate prompt for the chapter's class
3. Sends it to Ollama
4. Returns the response

Chat keeps no memory between requests: the caller sends the previous
conversation and summary each time and they are flattened into the prompt.
"""

import json
import logging
import re
from dataclasses import dataclass, field

import ollama

from ncert_tutor.config import (
    CHAT_TEMPERATURE,
    EXERCISE_MAX_TOKENS,
    EXERCISE_SYSTEM_TEMPLATE,
    EXERCISE_TEMPERATURE,
    EXERCISE_USER_TEMPLATE,
    OLLAMA_MODEL,
    SUMMARY_ERROR_MESSAGE,
    SUMMARY_PROMPT_TEMPLATES,
    SUMMARY_TEMPERATURE,
    SUMMARY_TYPES,
    TUTOR_CHAT_SYSTEM_TEMPLATE,
    get_age_appropriate_system_prompt,
)
from ncert_tutor.errors import (
    DocumentNotFoundError,
    DocumentParseError,
    LLMUnavailableError,
    ValidationError,
)
from ncert_tutor.ingestion.fallback_content import generate_fallback_content
from ncert_tutor.ingestion.pdf_parser import ChapterInfo, PDFParser, parse_chapter_info

logger = logging.getLogger(__name__)

# Response length budgets by class band (<=5, <=10, >10)
SUMMARY_TOKENS = (600, 800, 1200)
CHAT_TOKENS = (400, 600, 800)


def _band_value(class_number: int, values: tuple[int, int, int]) -> int:
    if class_number <= 5:
        return values[0]
    if class_number <= 10:
        return values[1]
    return values[2]


def _band_key(class_number: int) -> int:
    return 5 if class_number <= 5 else 10 if class_number <= 10 else 12


@dataclass
class SummaryResult:
    """
    A generated summary plus the context it was built from.

    Attributes:
        summary: Model output, or an apology if the model failed
        success: False when the model could not be used
        chapter_info: Class/subject/chapter parsed from the PDF path
        from_pdf: False when templated content stood in for the PDF
    """
    summary: str
    success: bool
    chapter_info: ChapterInfo
    from_pdf: bool = True


@dataclass
class ChatResult:
    response: str
    success: bool
    chapter_info: ChapterInfo
    from_pdf: bool = True


@dataclass
class Exercises:
    """Matching pairs and fill-in-the-blank questions."""
    match_pairs: list[dict] = field(default_factory=list)
    fill_in_blanks: list[dict] = field(default_factory=list)
    fallback: bool = False

    def to_dict(self) -> dict:
        return {"matchPairs": self.match_pairs, "fillInBlanks": self.fill_in_blanks}


def fallback_exercises() -> Exercises:
    """Fixed exercises used when the model output cannot be parsed."""
    return Exercises(
        match_pairs=[
            {"id": "match-1", "left": "Key Concept 1", "right": "Definition from the summary"},
            {"id": "match-2", "left": "Key Concept 2", "right": "Another important definition"},
            {"id": "match-3", "left": "Key Concept 3", "right": "Related explanation"},
        ],
        fill_in_blanks=[
            {
                "id": "fill-1",
                "sentence": "The main topic discussed in this section is ____.",
                "blank": "concept",
                "options": ["concept", "unrelated", "incorrect", "wrong"],
                "correctAnswer": "concept",
            },
            {
                "id": "fill-2",
                "sentence": "An important characteristic mentioned is ____.",
                "blank": "feature",
                "options": ["feature", "aspect", "trait", "quality"],
                "correctAnswer": "feature",
            },
        ],
        fallback=True,
    )


class Generator:
    """
    Thin wrapper around the Ollama chat API.

    Example:
        generator = Generator()
        text = generator.complete("You are a tutor.", "Explain fractions.")
    """

    def __init__(self, model: str | None = None):
        """
        Initialize the generator.

        Args:
            model: Ollama model name (uses config default if not provided)
        """
        self.model = model or OLLAMA_MODEL

    def complete(
        self,
        system: str,
        prompt: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """
        Generate a complete response (non-streaming).

        Raises:
            LLMUnavailableError: If Ollama fails or returns no text
        """
        options = {}
        if temperature is not None:
            options["temperature"] = temperature
        if max_tokens is not None:
            options["num_predict"] = max_tokens

        try:
            response = ollama.chat(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                options=options,
            )
            content = response["message"]["content"]
        except Exception as e:
            raise LLMUnavailableError(f"Error generating response: {e}") from e

        if not content or not content.strip():
            raise LLMUnavailableError("The model returned an empty response")
        return content


class Summarizer:
    """
    Summarizes chapter pages and answers follow-up questions about them.

    Example:
        summarizer = Summarizer()
        result = summarizer.summarize("/pdfs/class5/class5maths/chapter3.pdf", [1, 2], "key-points")
        print(result.summary)
    """

    def __init__(self, generator: Generator | None = None, parser: PDFParser | None = None):
        self.generator = generator or Generator()
        self.parser = parser or PDFParser()

    def load_content(self, pdf_path: str, pages: list[int], chapter_info: ChapterInfo) -> tuple[str, bool]:
        """
        Page text for the prompt, and whether it came from the PDF.

        Missing or unreadable PDFs fall back to templated content.
        """
        try:
            content = self.parser.extract_pages(pdf_path, pages)
        except (DocumentNotFoundError, DocumentParseError) as e:
            logger.warning("PDF extraction failed for %s: %s", pdf_path, e.message)
            return generate_fallback_content(chapter_info, pages), False

        logger.info("Extracted %d characters from %s", len(content), pdf_path)
        return content, True

    def summarize(self, pdf_path: str, pages: list[int], summary_type: str = "brief") -> SummaryResult:
        """
        Summarize the given pages for the chapter's class level.

        Args:
            pdf_path: Chapter PDF request path
            pages: 1-based page numbers
            summary_type: "brief", "detailed" or "key-points"

        Returns:
            SummaryResult (success=False with an apology if the model failed)
        """
        if summary_type not in SUMMARY_TYPES:
            raise ValidationError(
                f"Unknown summary type: {summary_type}",
                details={"allowed": list(SUMMARY_TYPES)},
            )

        chapter_info = parse_chapter_info(pdf_path)
        content, from_pdf = self.load_content(pdf_path, pages, chapter_info)
        class_number = chapter_info.class_number

        system = get_age_appropriate_system_prompt(class_number)
        prompt = SUMMARY_PROMPT_TEMPLATES[summary_type][_band_key(class_number)].format(
            subject=chapter_info.subject,
            content=content,
        )

        try:
            summary = self.generator.complete(
                system,
                prompt,
                temperature=SUMMARY_TEMPERATURE,
                max_tokens=_band_value(class_number, SUMMARY_TOKENS),
            )
        except LLMUnavailableError as e:
            logger.error("Summary generation failed for %s: %s", pdf_path, e.message)
            return SummaryResult(SUMMARY_ERROR_MESSAGE, False, chapter_info, from_pdf)

        return SummaryResult(summary, True, chapter_info, from_pdf)

    def chat(
        self,
        pdf_path: str,
        pages: list[int],
        message: str,
        previous_context: str | None = None,
        original_summary: str | None = None,
        subject: str | None = None,
        chapter_title: str | None = None,
    ) -> ChatResult:
        """
        Answer a student's follow-up question about the pages.

        Args:
            pdf_path: Chapter PDF request path
            pages: Pages the conversation is about
            message: The new question
            previous_context: Earlier turns, flattened by the caller
            original_summary: The summary the conversation started from
            subject: Overrides the subject parsed from the path
            chapter_title: Overrides the chapter parsed from the path
        """
        if not message or not message.strip():
            raise ValidationError("Chat message is required")

        chapter_info = parse_chapter_info(pdf_path)
        content, from_pdf = self.load_content(pdf_path, pages, chapter_info)
        class_number = chapter_info.class_number

        system = TUTOR_CHAT_SYSTEM_TEMPLATE.format(
            subject=subject or chapter_info.subject,
            class_name=chapter_info.class_name,
            pages=", ".join(str(page) for page in pages),
            content=content,
            original_summary=original_summary or "No previous summary",
            previous_context=previous_context or "No previous conversation",
            chapter_title=chapter_title or chapter_info.chapter,
            question=message,
        )

        try:
            response = self.generator.complete(
                system,
                message,
                temperature=CHAT_TEMPERATURE,
                max_tokens=_band_value(class_number, CHAT_TOKENS),
            )
        except LLMUnavailableError as e:
            logger.error("Chat response failed for %s: %s", pdf_path, e.message)
            return ChatResult(SUMMARY_ERROR_MESSAGE, False, chapter_info, from_pdf)

        return ChatResult(response, True, chapter_info, from_pdf)


def parse_exercises(text: str) -> Exercises:
    """
    Parse the model's JSON exercise payload.

    A ```json fenced block is accepted. Missing ids are filled in as
    match-<i> / fill-<i>.

    Raises:
        ValueError: If the text is not JSON or lacks either list
    """
    fenced = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL)
    payload = json.loads(fenced.group(1) if fenced else text)

    if not isinstance(payload, dict):
        raise ValueError("Exercise payload is not an object")
    match_pairs = payload.get("matchPairs")
    fill_in_blanks = payload.get("fillInBlanks")
    if not isinstance(match_pairs, list) or not isinstance(fill_in_blanks, list):
        raise ValueError("Invalid exercise structure")
    if not all(isinstance(item, dict) for item in match_pairs + fill_in_blanks):
        raise ValueError("Exercise items must be objects")

    return Exercises(
        match_pairs=[{**pair, "id": pair.get("id") or f"match-{i}"} for i, pair in enumerate(match_pairs)],
        fill_in_blanks=[{**q, "id": q.get("id") or f"fill-{i}"} for i, q in enumerate(fill_in_blanks)],
    )


class ExerciseGenerator:
    """Builds matching and fill-in-the-blank exercises from a summary."""

    def __init__(self, generator: Generator | None = None):
        self.generator = generator or Generator()

    def generate(self, summary: str, pages: list[int] | None = None, subject: str = "general") -> Exercises:
        """
        Generate exercises for a summary.

        Unparseable model output is replaced by fixed fallback exercises.

        Raises:
            ValidationError: If the summary is empty
            LLMUnavailableError: If the model cannot be reached
        """
        if not summary or not summary.strip():
            raise ValidationError("Summary is required")

        system = EXERCISE_SYSTEM_TEMPLATE.format(
            subject=subject or "general",
            pages=", ".join(str(page) for page in pages or []),
        )
        text = self.generator.complete(
            system,
            EXERCISE_USER_TEMPLATE.format(summary=summary),
            temperature=EXERCISE_TEMPERATURE,
            max_tokens=EXERCISE_MAX_TOKENS,
        )

        try:
            return parse_exercises(text)
        except ValueError as e:
            logger.warning("Could not parse exercises from model output: %s", e)
            logger.debug("Model output was: %s", text)
            return fallback_exercises()
