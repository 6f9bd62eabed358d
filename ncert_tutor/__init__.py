"""
NCERT AI Tutor - Textbook summaries, tutoring chat and tutor bookings.

This package provides:
- PDF page extraction with proportional page estimation
- Age-appropriate summaries, chat and exercises via Ollama
- Weekly tutor availability and booking conflict checks
- CLI and Web interfaces
"""

__version__ = "0.2.0"
