"""
Templated stand-in content for chapters whose PDF cannot be read.

When a document is missing, cannot be opened, or is a scan with no text
layer, summaries and chat still need something to work from. These
descriptions depend only on the class level and subject, never on the
actual page text.
"""

import logging

from ncert_tutor.ingestion.pdf_parser import ChapterInfo

logger = logging.getLogger(__name__)


def _english_page(class_number: int, chapter_number: str, page: int) -> str:
    if class_number <= 2:
        if chapter_number == "1" and page == 1:
            return (
                f"Page {page}: An action poem about body parts. Children clap their hands, "
                "tap their feet, open their eyes wide and move their heads while reading along."
            )
        return (
            f"Page {page}: Simple stories and poems with large, clear text, colorful pictures "
            "of familiar objects, and basic vocabulary words that children use in daily life."
        )
    if class_number <= 5:
        return (
            f"Page {page}: A story chapter with dialogue between characters, new vocabulary "
            "words with meanings, reading comprehension questions, and grammar exercises."
        )
    return (
        f"Page {page}: Literary text analysis, advanced vocabulary, prose or poetry with "
        "deeper themes, critical thinking questions, and language structure exercises."
    )


def _hindi_page(class_number: int, page: int) -> str:
    if class_number <= 2:
        return (
            f"Page {page}: Hindi letters (स्वर और व्यंजन), basic Hindi words in Devanagari "
            "script, pictures with Hindi names like गाय (cow) and घर (house), and simple sentences."
        )
    return (
        f"Page {page}: Hindi stories, poems, grammar exercises, and vocabulary building "
        "with cultural context and moral values."
    )


def _maths_page(class_number: int, chapter_number: str, page: int) -> str:
    if class_number <= 2:
        if chapter_number == "1" and page == 1:
            return (
                f"Page {page}: Numbers 1 to 5 with objects to count - 1 sun, 2 eyes, 3 balls, "
                "4 flowers, 5 fingers. Each number has pictures to count and trace."
            )
        if chapter_number == "1" and page == 2:
            return (
                f"Page {page}: Numbers 6 to 10 with more counting objects. Children practice "
                "counting and writing these numbers."
            )
        return (
            f"Page {page}: Basic math concepts with visual learning - counting objects, simple "
            "addition using pictures, shape recognition, and number activities."
        )
    return (
        f"Page {page}: Mathematical concepts, problem-solving exercises, formulas, and "
        "step-by-step solutions with practical examples."
    )


def generate_fallback_content(chapter_info: ChapterInfo, pages: list[int]) -> str:
    """
    Describe the requested pages from the chapter's class and subject alone.

    Args:
        chapter_info: Class, subject and chapter parsed from the PDF path
        pages: Requested page numbers

    Returns:
        One paragraph per page, separated by blank lines
    """
    class_number = chapter_info.class_number
    chapter_number = "".join(ch for ch in chapter_info.chapter if ch.isdigit()) or "1"
    subject = chapter_info.subject.lower()

    paragraphs = []
    for page in pages:
        if "english" in subject:
            paragraphs.append(_english_page(class_number, chapter_number, page))
        elif "hindi" in subject:
            paragraphs.append(_hindi_page(class_number, page))
        elif "math" in subject:
            paragraphs.append(_maths_page(class_number, chapter_number, page))
        else:
            paragraphs.append(
                f"Page {page}: Educational content appropriate for Class {class_number} level "
                "with text, illustrations, examples, and learning activities related to the "
                "chapter topic."
            )

    logger.warning(
        "Using templated content for %s (%s, %s), pages %s",
        chapter_info.chapter, chapter_info.class_name, chapter_info.subject, pages,
    )
    return "\n\n".join(paragraphs)
