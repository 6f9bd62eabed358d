#!/usr/bin/env python3
"""
Debug script to compare estimated and exact page text for a PDF.

The estimator slices the whole document's lines evenly across pages, so
its "page 3" can drift from the real page 3. This shows both side by side.

Run with:
    python scripts/debug_pages.py /pdfs/class5/class5maths/chapter1.pdf 1 2 3
    python scripts/debug_pages.py path/to/file.pdf 4
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel

from ncert_tutor.errors import DomainError
from ncert_tutor.ingestion.pdf_parser import PDFParser

console = Console()


def main():
    if len(sys.argv) < 3:
        console.print("[yellow]Usage: python scripts/debug_pages.py <pdf> <page> [page ...][/yellow]")
        sys.exit(1)

    raw_path = sys.argv[1]
    # Paths that exist on disk are read directly, others resolve under public/
    pdf_path = Path(raw_path) if Path(raw_path).is_file() else raw_path
    pages = [int(page) for page in sys.argv[2:]]

    parser = PDFParser()
    try:
        content = parser.parse_pdf(pdf_path)
        console.print(f"[bold]{content.filename}[/bold]: {content.total_pages} pages, "
                      f"{len(content.full_text.splitlines())} lines")

        for page in pages:
            estimated = parser.extract_pages(pdf_path, [page], mode="estimate")
            exact = parser.extract_pages(pdf_path, [page], mode="exact")
            console.print(Columns([
                Panel(estimated[:1500], title=f"Estimated page {page}", border_style="cyan"),
                Panel(exact[:1500], title=f"Exact page {page}", border_style="green"),
            ], equal=True, expand=True))
    except DomainError as e:
        console.print(f"[red]{e.message}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
