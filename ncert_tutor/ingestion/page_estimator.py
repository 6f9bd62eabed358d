"""
Page Estimator - Maps requested page numbers onto slices of flat PDF text.

Text extraction does not reliably keep page breaks, so when all we have is
the document's full text and its page count we approximate: every page is
assumed to hold the same number of non-empty lines.

    lines_per_page = max(1, non_empty_lines // total_pages)
    page p         -> lines [(p - 1) * lines_per_page, min(p * lines_per_page, non_empty_lines))

This is an APPROXIMATION. Pages with big pictures and pages dense with text
get the same share, so a slice can start or end mid-page. When real page
boundaries are available use PDFParser.extract_pages(mode="exact") instead.

The functions here are pure: the same text, page count and page list always
produce byte-identical output.
"""

NO_CONTENT_SENTINEL = "No text content found for selected pages"


def page_header(page_number: int) -> str:
    return f"--- Page {page_number} ---"


def page_not_available(page_number: int, total_pages: int) -> str:
    return f"[Page {page_number} not available - PDF has only {total_pages} pages]"


def page_without_text(page_number: int) -> str:
    return f"[Page {page_number} appears to have no text content]"


def non_empty_lines(full_text: str) -> list[str]:
    """Split text on newlines and drop lines that are blank."""
    return [line for line in full_text.split("\n") if line.strip()]


def estimate_line_range(total_lines: int, total_pages: int, page_number: int) -> tuple[int, int]:
    """
    Return the half-open line range assigned to a 1-based page.

    Args:
        total_lines: Number of non-empty lines in the document
        total_pages: Page count from the PDF metadata
        page_number: Requested page (must be within 1..total_pages)

    Returns:
        (start, end) indices into the non-empty line list
    """
    if total_pages < 1:
        raise ValueError(f"total_pages must be positive, got {total_pages}")

    lines_per_page = max(1, total_lines // total_pages)
    start = (page_number - 1) * lines_per_page
    end = min(page_number * lines_per_page, total_lines)
    return start, max(start, end)


def format_page_block(page_number: int, text: str) -> str:
    """Render one page's text, or the empty-page placeholder."""
    if text.strip():
        return f"\n{page_header(page_number)}\n{text}\n"
    return f"\n{page_without_text(page_number)}\n"


def join_page_blocks(blocks: list[str]) -> str:
    """Concatenate page blocks; never return an unexplained empty string."""
    return "".join(blocks).strip() or NO_CONTENT_SENTINEL


def estimate_page_text(full_text: str, total_pages: int, pages: list[int]) -> str:
    """
    Build prompt content for the requested pages from flat document text.

    Pages are emitted in the order requested (duplicates included). Pages
    outside 1..total_pages get a "not available" marker rather than an error.

    Args:
        full_text: Whole-document text, newline delimited
        total_pages: Page count from the PDF metadata
        pages: Requested 1-based page numbers

    Returns:
        Text with a "--- Page N ---" header per page

    Raises:
        ValueError: If total_pages is less than 1
    """
    if total_pages < 1:
        raise ValueError(f"total_pages must be positive, got {total_pages}")

    lines = non_empty_lines(full_text)
    blocks = []

    for page_number in pages:
        if page_number < 1 or page_number > total_pages:
            blocks.append(f"\n{page_not_available(page_number, total_pages)}\n")
            continue

        start, end = estimate_line_range(len(lines), total_pages, page_number)
        blocks.append(format_page_block(page_number, "\n".join(lines[start:end])))

    return join_page_blocks(blocks)
