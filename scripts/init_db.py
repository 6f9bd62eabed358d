#!/usr/bin/env python3
"""
Database setup script - Create tables and optionally seed demo users.

Run once before starting the web app:
    python scripts/init_db.py
    python scripts/init_db.py --demo

With --demo a tutor (weekday mornings, UTC) and a student are added, and
their ids are printed for use in the X-User-Id header.
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.table import Table
from sqlalchemy import select

from ncert_tutor.booking.models import StudentProfile, TutorProfile, User, UserRole
from ncert_tutor.config import configure_logging
from ncert_tutor.database import SessionLocal, init_db

console = Console()

DEMO_AVAILABILITY = [
    {"dayOfWeek": day, "startTime": "09:00", "endTime": "12:00"} for day in range(1, 6)
]


def seed_demo_users() -> tuple[User, User]:
    """Create the demo tutor and student unless they already exist."""
    with SessionLocal() as db:
        tutor = db.execute(select(User).where(User.email == "tutor@example.com")).scalars().first()
        if tutor is None:
            tutor = User(name="Demo Tutor", email="tutor@example.com", role=UserRole.TUTOR.value)
            tutor.tutor_profile = TutorProfile(subjects=["maths", "english"], availability=DEMO_AVAILABILITY)
            db.add(tutor)

        student = db.execute(select(User).where(User.email == "student@example.com")).scalars().first()
        if student is None:
            student = User(name="Demo Student", email="student@example.com", role=UserRole.STUDENT.value)
            student.student_profile = StudentProfile(grade="Class 5", subjects=["maths"])
            db.add(student)

        db.commit()
        return tutor, student


def main():
    parser = argparse.ArgumentParser(description="Create the NCERT Tutor database")
    parser.add_argument("--demo", action="store_true", help="Seed a demo tutor and student")
    args = parser.parse_args()

    configure_logging()
    init_db()
    console.print("[green]✓ Tables created[/green]")

    if not args.demo:
        return

    tutor, student = seed_demo_users()

    table = Table(title="Demo Users")
    table.add_column("Role", style="cyan")
    table.add_column("User id (X-User-Id)", style="green")
    table.add_column("Profile id", style="white")
    table.add_row("Tutor", tutor.id, tutor.tutor_profile.id)
    table.add_row("Student", student.id, student.student_profile.id)
    console.print(table)


if __name__ == "__main__":
    main()
