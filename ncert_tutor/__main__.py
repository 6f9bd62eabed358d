"""
Entry point for running the NCERT Tutor package as a module.

Run with:
    python -m ncert_tutor
"""

from ncert_tutor.interfaces.cli import main

if __name__ == "__main__":
    main()
