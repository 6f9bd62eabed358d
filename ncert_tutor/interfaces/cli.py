#!/usr/bin/env python3
"""
CLI Interface - Interactive command-line tutor.

This module provides a terminal interface for reading a chapter with the
NCERT Tutor. It supports:
- Opening a chapter PDF (/open) and choosing pages (/pages)
- Page summaries (/summary)
- Practice exercises from the last summary (/exercises)
- Checking a tutor's availability for a lesson (/slot)
- Free-form questions about the selected pages
- Help and commands (/help)

Run with:
    python -m ncert_tutor
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ncert_tutor.booking.availability import AvailabilityResolver
from ncert_tutor.config import SUMMARY_TYPES, configure_logging
from ncert_tutor.errors import DomainError
from ncert_tutor.ingestion.pdf_parser import get_pdf_info, parse_chapter_info
from ncert_tutor.llm.generator import ExerciseGenerator, Summarizer

console = Console()

_PAGE_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


@dataclass
class Session:
    """What the reader currently has open."""
    pdf_path: str | None = None
    page_count: int | None = None
    pages: list[int] = field(default_factory=lambda: [1])
    summary: str | None = None
    history: list[str] = field(default_factory=list)

    def reset(self, pdf_path: str, page_count: int | None) -> None:
        self.pdf_path = pdf_path
        self.page_count = page_count
        self.pages = [1]
        self.summary = None
        self.history = []


def print_welcome():
    """Print welcome message and instructions."""
    welcome_text = """
[bold blue]Welcome to the NCERT AI Tutor![/bold blue]

Open a chapter, pick some pages and I will summarise them, answer your
questions and make practice exercises.

[dim]Start with /open /pdfs/class5/class5maths/chapter1.pdf
Type /help for all commands[/dim]
"""
    console.print(Panel(welcome_text, border_style="blue"))


def print_help():
    """Print help message with available commands."""
    table = Table(title="Available Commands", show_header=True, header_style="bold cyan")
    table.add_column("Command", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Example", style="dim")

    commands = [
        ("/open <pdf>", "Open a chapter PDF", "/open /pdfs/class5/class5maths/chapter1.pdf"),
        ("/pages <list>", "Choose pages to study", "/pages 1,3-4"),
        ("/summary [kind]", "Summarise the pages (brief, detailed, key-points)", "/summary key-points"),
        ("/exercises", "Practice exercises from the last summary", "/exercises"),
        ("/slot <file> <start> [tz]", "Check a tutor schedule", "/slot tutor.json 2024-01-01T10:00 Asia/Kolkata"),
        ("(any question)", "Ask about the selected pages", "What is a fraction?"),
        ("/clear", "Clear the screen", "/clear"),
        ("/help", "Show this help message", "/help"),
        ("/exit", "Exit the tutor", "/exit"),
    ]

    for cmd, desc, example in commands:
        table.add_row(cmd, desc, example)

    console.print(table)


def parse_command(user_input: str) -> tuple[str, str]:
    """
    Parse user input into command and argument text.

    Returns:
        Tuple of (command, rest of the line)
        For regular questions, command is 'ask'
    """
    user_input = user_input.strip()

    if not user_input:
        return ("empty", "")

    if user_input.startswith("/"):
        parts = user_input[1:].split(maxsplit=1)
        command = parts[0].lower() if parts else ""
        rest = parts[1].strip() if len(parts) > 1 else ""
        return (command, rest)

    return ("ask", user_input)


def parse_pages(text: str) -> list[int]:
    """
    Parse "1,2" or "3-5" style page lists, keeping order and dropping repeats.

    Raises:
        ValueError: If a part is not a positive page number or range
    """
    pages: list[int] = []
    for part in text.replace(" ", ",").split(","):
        part = part.strip()
        if not part:
            continue
        match = _PAGE_RANGE_RE.match(part)
        if match:
            first, last = int(match.group(1)), int(match.group(2))
            if first > last:
                raise ValueError(f"Backwards page range: {part}")
            numbers = range(first, last + 1)
        elif part.isdigit():
            numbers = [int(part)]
        else:
            raise ValueError(f"Not a page number: {part}")

        for number in numbers:
            if number < 1:
                raise ValueError("Pages start at 1")
            if number not in pages:
                pages.append(number)

    if not pages:
        raise ValueError("No pages given")
    return pages


def handle_open(session: Session, rest: str):
    """Handle /open command."""
    if not rest:
        console.print("[yellow]Usage: /open <pdf path>[/yellow]")
        return

    try:
        info = get_pdf_info(rest)
    except DomainError as e:
        console.print(f"[red]{e.message}[/red]")
        return

    session.reset(rest, info["page_count"])
    title = info["title"] or info["filename"]
    console.print(f"[green]Opened {title}[/green] [dim]({info['page_count']} pages)[/dim]")


def handle_pages(session: Session, rest: str):
    """Handle /pages command."""
    try:
        pages = parse_pages(rest)
    except ValueError as e:
        console.print(f"[yellow]{e}. Example: /pages 1,3-4[/yellow]")
        return

    if session.page_count:
        beyond = [page for page in pages if page > session.page_count]
        if beyond:
            console.print(f"[yellow]This PDF has only {session.page_count} pages[/yellow]")

    session.pages = pages
    session.summary = None
    session.history = []
    console.print(f"[dim]Studying pages {', '.join(str(page) for page in pages)}[/dim]")


def handle_summary(summarizer: Summarizer, session: Session, rest: str):
    """Handle /summary command."""
    if not session.pdf_path:
        console.print("[yellow]Open a chapter first with /open[/yellow]")
        return

    summary_type = rest or "brief"
    if summary_type not in SUMMARY_TYPES:
        console.print(f"[yellow]Summary kinds: {', '.join(SUMMARY_TYPES)}[/yellow]")
        return

    with console.status("[bold green]Reading...", spinner="dots"):
        result = summarizer.summarize(session.pdf_path, session.pages, summary_type)

    if result.success:
        session.summary = result.summary
    if not result.from_pdf:
        console.print("[dim]Could not read the PDF, using a chapter outline instead[/dim]")

    console.print("\n[bold green]📖 Summary:[/bold green]")
    console.print(Markdown(result.summary))


def handle_exercises(exercise_generator: ExerciseGenerator, session: Session):
    """Handle /exercises command."""
    if not session.summary:
        console.print("[yellow]Make a summary first with /summary[/yellow]")
        return

    subject = parse_chapter_info(session.pdf_path).subject if session.pdf_path else "general"

    with console.status("[bold green]Thinking...", spinner="dots"):
        exercises = exercise_generator.generate(session.summary, session.pages, subject)

    table = Table(title="Match the pairs", show_header=True, header_style="bold cyan")
    table.add_column("Term", style="cyan")
    table.add_column("Meaning", style="white")
    for pair in exercises.match_pairs:
        table.add_row(str(pair.get("left", "")), str(pair.get("right", "")))
    console.print(table)

    console.print("\n[bold green]✏️ Fill in the blanks:[/bold green]")
    for number, question in enumerate(exercises.fill_in_blanks, start=1):
        options = " / ".join(str(option) for option in question.get("options", []))
        console.print(f"{number}. {question.get('sentence', '')}")
        if options:
            console.print(f"   [dim]{options}[/dim]")


def handle_slot(resolver: AvailabilityResolver, rest: str):
    """Handle /slot command."""
    args = rest.split()
    if len(args) < 2:
        console.print("[yellow]Usage: /slot <schedule.json> <ISO start> [timezone][/yellow]")
        return

    schedule_path = Path(args[0])
    try:
        schedule = json.loads(schedule_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Could not read {schedule_path}: {e}[/red]")
        return

    timezone_name = args[2] if len(args) > 2 else None
    try:
        result = resolver.check_slot(schedule, args[1], timezone_name)
    except DomainError as e:
        console.print(f"[red]{e.message}[/red]")
        return

    if result.available:
        console.print("[green]✓ The tutor is available at that time[/green]")
    else:
        console.print(f"[yellow]✗ {result.reason}[/yellow]")


def handle_ask(summarizer: Summarizer, session: Session, question: str):
    """Answer a question about the selected pages."""
    if not session.pdf_path:
        console.print("[yellow]Open a chapter first with /open[/yellow]")
        return

    with console.status("[bold green]Thinking...", spinner="dots"):
        result = summarizer.chat(
            session.pdf_path,
            session.pages,
            question,
            previous_context="\n".join(session.history) or None,
            original_summary=session.summary,
        )

    if result.success:
        session.history.append(f"Student: {question}")
        session.history.append(f"Tutor: {result.response}")

    console.print("\n[bold green]🎓 Tutor:[/bold green]")
    console.print(Markdown(result.response))


def main():
    """Main CLI loop."""
    configure_logging("WARNING")
    print_welcome()

    summarizer = Summarizer()
    exercise_generator = ExerciseGenerator()
    resolver = AvailabilityResolver()
    session = Session()

    while True:
        try:
            user_input = Prompt.ask("[bold cyan]You[/bold cyan]")
            command, rest = parse_command(user_input)

            if command == "empty":
                continue

            elif command == "exit" or command == "quit":
                console.print("\n[bold blue]Goodbye! Keep learning! 📚[/bold blue]")
                break

            elif command == "help":
                print_help()

            elif command == "clear":
                console.clear()
                print_welcome()

            elif command == "open":
                handle_open(session, rest)

            elif command == "pages":
                handle_pages(session, rest)

            elif command == "summary":
                handle_summary(summarizer, session, rest)

            elif command == "exercises":
                handle_exercises(exercise_generator, session)

            elif command == "slot":
                handle_slot(resolver, rest)

            elif command == "ask":
                handle_ask(summarizer, session, rest)

            else:
                console.print(f"[yellow]Unknown command /{command}[/yellow]")
                console.print("[dim]Type /help for available commands[/dim]")

            console.print()

        except KeyboardInterrupt:
            console.print("\n\n[bold blue]Goodbye! Keep learning! 📚[/bold blue]")
            break
        except DomainError as e:
            console.print(f"[red]Error: {e.message}[/red]")
            console.print("[yellow]Make sure Ollama is running: ollama serve[/yellow]")


if __name__ == "__main__":
    main()
