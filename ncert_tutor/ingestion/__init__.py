"""
Ingestion module - Handles PDF reading and page text selection.

This module is responsible for:
1. Locating and parsing chapter PDFs
2. Estimating which part of the text belongs to a requested page
3. Supplying templated content when a PDF cannot be read
"""

from .pdf_parser import ChapterInfo, PDFParser, get_pdf_info, parse_chapter_info
from .page_estimator import estimate_page_text
from .fallback_content import generate_fallback_content

__all__ = [
    "ChapterInfo",
    "PDFParser",
    "get_pdf_info",
    "parse_chapter_info",
    "estimate_page_text",
    "generate_fallback_content",
]
