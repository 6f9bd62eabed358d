"""
Interfaces module - User-facing interfaces for the NCERT Tutor.

This module provides:
1. CLI interface for reading a chapter from the terminal
2. Web API using FastAPI
"""
