"""
LLM module - Everything generated by the language model.

This module is responsible for:
1. Page summaries at the right level for the chapter's class
2. Follow-up tutoring chat over the same pages
3. Matching and fill-in-the-blank exercises
"""

from .generator import ExerciseGenerator, Generator, Summarizer

__all__ = ["ExerciseGenerator", "Generator", "Summarizer"]
