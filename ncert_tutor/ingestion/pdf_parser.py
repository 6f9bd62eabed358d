"""
PDF Parser - Reads NCERT chapter PDFs and selects page text for prompts.

This module handles the extraction of text content from PDF files.
It uses pymupdf (fitz) which copes well with textbook layouts.

Key Concepts:
- Chapter PDFs are addressed by public paths like /pdfs/class5/class5maths/chapter3.pdf
- Page text is selected either by estimation (see page_estimator) or by
  PyMuPDF's own page boundaries
- Scanned PDFs have no text layer; callers fall back to templated content
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import fitz  # pymupdf - the library is called 'fitz' historically

from ncert_tutor.config import BASE_DIR, PAGE_TEXT_MODE, PUBLIC_DIR
from ncert_tutor.errors import (
    DocumentNotFoundError,
    DocumentParseError,
    DocumentUnreadableError,
)
from ncert_tutor.ingestion.page_estimator import (
    estimate_page_text,
    format_page_block,
    join_page_blocks,
    page_not_available,
)

logger = logging.getLogger(__name__)

PAGE_TEXT_MODES = ("estimate", "exact")


@dataclass
class PageContent:
    """
    Represents the content of a single PDF page.

    Attributes:
        page_number: 1-indexed page number
        text: Extracted text content
    """
    page_number: int
    text: str


@dataclass
class DocumentContent:
    """
    Represents the full content of a PDF document.

    Attributes:
        filename: Name of the PDF file
        total_pages: Total number of pages
        pages: One PageContent per page, empty pages included
        metadata: PDF info dictionary (title, author, ...)
    """
    filename: str
    total_pages: int
    pages: list[PageContent]
    metadata: dict = field(default_factory=dict)

    @property
    def full_text(self) -> str:
        """All page text joined by newlines, page breaks not marked."""
        return "\n".join(page.text for page in self.pages)

    @property
    def has_text(self) -> bool:
        return bool(self.full_text.strip())


@dataclass
class ChapterInfo:
    """Class, subject and chapter derived from a chapter PDF path."""
    class_name: str
    subject: str
    chapter: str

    @property
    def class_number(self) -> int:
        digits = re.sub(r"\D", "", self.class_name)
        return int(digits) if digits else 1

    def to_dict(self) -> dict:
        return {"class": self.class_name, "subject": self.subject, "chapter": self.chapter}


def parse_chapter_info(pdf_path: str) -> ChapterInfo:
    """
    Derive chapter information from a PDF path.

    Examples:
        '/pdfs/class5/class5maths/chapter3.pdf' -> ('class5', 'maths', 'chapter3')
        'chapter1.pdf'                          -> ('Class 1', 'General', 'chapter1')
    """
    parts = [part for part in pdf_path.replace("\\", "/").split("/") if part]

    class_name = next((part for part in parts[:-1] if re.fullmatch(r"class\d+", part)), None)

    subject = None
    if class_name is not None:
        class_index = parts.index(class_name)
        if class_index + 1 < len(parts) - 1:
            folder = parts[class_index + 1]
            subject = re.sub(r"^class\d+", "", folder).lower() or None

    chapter = Path(parts[-1]).stem if parts else ""

    return ChapterInfo(
        class_name=class_name or "Class 1",
        subject=subject or "General",
        chapter=chapter or "Chapter",
    )


def resolve_pdf_path(pdf_path: str | Path) -> Path:
    """
    Map a request path onto a file on disk.

    Paths starting with '/' are public URLs and resolve under PUBLIC_DIR;
    anything else resolves under the project directory. The result must stay
    inside its root.

    Raises:
        DocumentNotFoundError: If the path escapes its root or no file exists
    """
    raw = str(pdf_path)
    root = PUBLIC_DIR if raw.startswith("/") else BASE_DIR
    root = Path(root).resolve()
    candidate = (root / raw.lstrip("/")).resolve()

    if not candidate.is_relative_to(root):
        raise DocumentNotFoundError(f"PDF not found: {raw}", details={"pdfPath": raw})
    if not candidate.is_file():
        raise DocumentNotFoundError(f"PDF not found: {raw}", details={"pdfPath": raw})
    return candidate


class PDFParser:
    """
    Parses PDF files and extracts text content.

    Example:
        parser = PDFParser()
        text = parser.extract_pages("/pdfs/class1/class1english/chapter1.pdf", [1, 2])
        print(text)
    """

    def __init__(self, clean_text: bool = True, mode: str | None = None):
        """
        Initialize the PDF parser.

        Args:
            clean_text: If True, apply text cleaning (remove extra whitespace, etc.)
            mode: "estimate" or "exact" page selection (config default if None)
        """
        self.clean_text = clean_text
        self.mode = mode or PAGE_TEXT_MODE
        if self.mode not in PAGE_TEXT_MODES:
            raise ValueError(f"Unknown page text mode: {self.mode}")

    def _clean_extracted_text(self, text: str) -> str:
        """
        Clean extracted text by removing common artifacts.

        - Multiple consecutive newlines
        - Runs of spaces
        - Lines that are just a page number
        """
        if not self.clean_text:
            return text

        text = re.sub(r'\n{3,}', '\n\n', text)
        text = re.sub(r' {2,}', ' ', text)

        lines = text.split('\n')
        cleaned_lines = [
            line for line in lines
            if not (line.strip().isdigit() and len(line.strip()) < 4)
        ]
        return '\n'.join(cleaned_lines).strip()

    @staticmethod
    def _locate(pdf_path: str | Path) -> Path:
        # Path objects are trusted local files; strings are request paths
        if isinstance(pdf_path, Path):
            if not pdf_path.is_file():
                raise DocumentNotFoundError(f"PDF not found: {pdf_path}")
            return pdf_path
        return resolve_pdf_path(pdf_path)

    def parse_pdf(self, pdf_path: str | Path) -> DocumentContent:
        """
        Parse a PDF file and extract the text of every page.

        Args:
            pdf_path: Request path ('/pdfs/...') or a path on disk

        Returns:
            DocumentContent with per-page text and metadata

        Raises:
            DocumentNotFoundError: If the PDF file doesn't exist
            DocumentParseError: If the PDF cannot be opened
        """
        path = self._locate(pdf_path)

        try:
            doc = fitz.open(str(path))
        except Exception as e:
            raise DocumentParseError(f"Failed to open PDF {path.name}: {e}") from e

        try:
            total_pages = len(doc)
            pages = [
                PageContent(
                    page_number=index + 1,
                    text=self._clean_extracted_text(doc[index].get_text()),
                )
                for index in range(total_pages)
            ]
            metadata = dict(doc.metadata or {})
        finally:
            doc.close()

        logger.debug("Parsed %s: %d pages", path.name, total_pages)
        return DocumentContent(
            filename=path.name,
            total_pages=total_pages,
            pages=pages,
            metadata=metadata,
        )

    def extract_pages(self, pdf_path: str | Path, pages: list[int], mode: str | None = None) -> str:
        """
        Select the text of the requested pages for use in a prompt.

        Args:
            pdf_path: Request path or a path on disk
            pages: 1-based page numbers, in the order they should appear
            mode: Override the parser's page selection mode

        Returns:
            Page text with "--- Page N ---" headers and explicit placeholders

        Raises:
            DocumentNotFoundError, DocumentParseError: As parse_pdf
            DocumentUnreadableError: If the PDF has no extractable text
        """
        mode = mode or self.mode
        content = self.parse_pdf(pdf_path)

        if content.total_pages == 0 or not content.has_text:
            raise DocumentUnreadableError(
                f"No text content found in {content.filename} - "
                "this might be a scanned/image-based PDF"
            )

        if mode == "exact":
            return self._exact_page_text(content, pages)
        return estimate_page_text(content.full_text, content.total_pages, pages)

    @staticmethod
    def _exact_page_text(content: DocumentContent, pages: list[int]) -> str:
        blocks = []
        for page_number in pages:
            if page_number < 1 or page_number > content.total_pages:
                blocks.append(f"\n{page_not_available(page_number, content.total_pages)}\n")
                continue
            blocks.append(format_page_block(page_number, content.pages[page_number - 1].text))
        return join_page_blocks(blocks)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def get_pdf_info(pdf_path: str | Path) -> dict:
    """
    Get basic information about a PDF file.

    Args:
        pdf_path: Request path or a path on disk

    Returns:
        Dictionary with page count, title and author
    """
    path = PDFParser._locate(pdf_path)
    try:
        doc = fitz.open(str(path))
    except Exception as e:
        raise DocumentParseError(f"Failed to open PDF {path.name}: {e}") from e

    try:
        metadata = doc.metadata or {}
        return {
            "filename": path.name,
            "page_count": len(doc),
            "title": metadata.get("title") or None,
            "author": metadata.get("author") or None,
        }
    finally:
        doc.close()
