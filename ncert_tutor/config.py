"""
Configuration settings for the NCERT Tutor application.

This file centralizes all configuration so you can easily adjust parameters.
Every value can be overridden with an environment variable (or a .env file
in the project root).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from rich.logging import RichHandler

load_dotenv()

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Base directory (where this project lives)
BASE_DIR = Path(__file__).parent.parent

# Public directory holding the textbook PDFs.
# Structure: public/pdfs/class<N>/class<N><subject>/chapter<M>.pdf
# Example:   public/pdfs/class5/class5maths/chapter3.pdf
PUBLIC_DIR = Path(os.getenv("PUBLIC_DIR", BASE_DIR / "public"))

# Data storage directory
DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))

# =============================================================================
# DATABASE CONFIGURATION
# =============================================================================

# SQLAlchemy URL. SQLite is fine for development; use PostgreSQL in
# production so that row locks (SELECT ... FOR UPDATE) are honoured.
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'ncert_tutor.db'}")

# =============================================================================
# PDF CONFIGURATION
# =============================================================================

# How page text is selected for prompts:
#   "estimate" - proportional line slicing over the whole document text
#   "exact"    - real page boundaries as reported by PyMuPDF
PAGE_TEXT_MODE = os.getenv("PAGE_TEXT_MODE", "estimate")

# Page count reported when a PDF cannot be found or parsed
DEFAULT_PAGE_COUNT = int(os.getenv("DEFAULT_PAGE_COUNT", "30"))

# =============================================================================
# BOOKING CONFIGURATION
# =============================================================================

# Timezone used when a booking request does not name one.
# UTC reproduces the old behaviour of reading the UTC wall clock.
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "UTC")

# Subject stored on a booking when the request has none
DEFAULT_BOOKING_SUBJECT = "General"

# Grade given to a student profile created on first booking
DEFAULT_STUDENT_GRADE = "General"

# Attempts made to write the tutor notification after a booking
NOTIFICATION_MAX_ATTEMPTS = int(os.getenv("NOTIFICATION_MAX_ATTEMPTS", "3"))

# Seconds before the first notification retry; doubles on each further retry
NOTIFICATION_RETRY_WAIT = float(os.getenv("NOTIFICATION_RETRY_WAIT", "0.5"))

# =============================================================================
# OLLAMA CONFIGURATION
# =============================================================================

# Default Ollama model
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.2")

# Summary generation
SUMMARY_TEMPERATURE = 0.3
CHAT_TEMPERATURE = 0.4
EXERCISE_TEMPERATURE = 0.7
EXERCISE_MAX_TOKENS = 2000

SUMMARY_TYPES = ("brief", "detailed", "key-points")

SUMMARY_ERROR_MESSAGE = "Error generating AI summary. Please try again later."

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str | None = None) -> None:
    """Route all package logging through a rich console handler."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


# =============================================================================
# LLM PROMPT TEMPLATES
# =============================================================================

_BASE_SYSTEM_PROMPT = (
    "You are an educational AI assistant specializing in creating clear, "
    "accurate summaries of educational content."
)

# Keyed by the highest class number in the band
AGE_BAND_GUIDANCE: dict[int, str] = {
    2: """
IMPORTANT: You are explaining actual educational content to very young children (ages 5-7). Use:
- Very simple words that a 5-7 year old can understand
- Short, easy sentences
- Lots of emojis to make it colorful and fun
- Exciting language ("Amazing!", "Wow!", "Super fun!")
- Actually explain WHAT they will learn - specific stories, letters, numbers, concepts
- "You will learn about..." followed by the real content
- Avoid just saying "fun activities" - explain what the activities actually teach""",
    5: """
IMPORTANT: You are explaining actual educational content to young children (ages 8-11). Use:
- Simple, clear language that 8-11 year olds can understand
- A few emojis to make it engaging
- An encouraging and positive tone
- Connections to their everyday experiences and interests
- "You will discover" or "you will explore" with real content details
- Explanations of what they will actually do and learn, not just general activities""",
    8: """
IMPORTANT: You are explaining content to pre-teens (ages 12-14). Use:
- Clear, informative language appropriate for middle school level
- Practical examples and real-world applications
- An engaging but informative, conversational tone
- A focus on understanding concepts rather than memorizing""",
    10: """
IMPORTANT: You are explaining content to teenagers (ages 14-16). Use:
- More sophisticated vocabulary while staying clear
- The relevance and importance of each concept
- Connections to future learning and practical applications
- Prompts for critical thinking and analysis""",
    12: """
IMPORTANT: You are explaining content to senior students (ages 16-18). Use:
- Advanced, precise academic vocabulary
- Detailed analytical explanations
- Connections to competitive exams, higher education, and careers
- Multiple perspectives and deeper implications""",
}


def get_age_appropriate_system_prompt(class_number: int) -> str:
    """Build the summary system prompt for a class level."""
    for max_class, guidance in AGE_BAND_GUIDANCE.items():
        if class_number <= max_class:
            return f"{_BASE_SYSTEM_PROMPT}\n{guidance}"
    return f"{_BASE_SYSTEM_PROMPT}\n{AGE_BAND_GUIDANCE[12]}"


# summary_type -> band (5, 10, 12) -> template
SUMMARY_PROMPT_TEMPLATES: dict[str, dict[int, str]] = {
    "brief": {
        5: (
            "Explain what this {subject} content is about in a simple, fun way that "
            "young children will find interesting and easy to understand. Content: {content}"
        ),
        10: (
            "Provide a clear, engaging summary of this {subject} content, focusing on "
            "the main concepts and why they're important to learn. Content: {content}"
        ),
        12: (
            "Provide a concise yet comprehensive summary of this {subject} content, "
            "highlighting key concepts, their significance, and connections to broader "
            "academic understanding. Content: {content}"
        ),
    },
    "detailed": {
        5: (
            "Explain what students will learn in this {subject} content in a detailed "
            "but fun way. Make it exciting and easy to understand for young learners. "
            "Content: {content}"
        ),
        10: (
            "Provide a detailed explanation of this {subject} content, focusing on key "
            "concepts, examples, and why they matter. Make it engaging and educational. "
            "Content: {content}"
        ),
        12: (
            "Provide a comprehensive analysis of this {subject} content, including key "
            "concepts, detailed explanations, examples, implications, and connections to "
            "advanced topics. Content: {content}"
        ),
    },
    "key-points": {
        5: (
            "List the main things students will learn from this {subject} content in "
            "simple, exciting bullet points that young children can understand. "
            "Content: {content}"
        ),
        10: (
            "Extract the key points and important concepts from this {subject} content "
            "in clear bullet points. Focus on what students need to understand. "
            "Content: {content}"
        ),
        12: (
            "Extract and analyze the key points, main concepts, and critical insights "
            "from this {subject} content in detailed bullet points suitable for advanced "
            "study. Content: {content}"
        ),
    },
}

# Template for chat follow-ups. The whole conversation is flattened into it.
TUTOR_CHAT_SYSTEM_TEMPLATE = """You are an expert AI tutor specialized in {subject} for {class_name} students.

You have access to:
- Original content from pages {pages}: {content}
- Previous summary: {original_summary}
- Conversation context: {previous_context}
- Chapter: {chapter_title}

Your role:
1. Answer questions directly related to the content with accuracy and clarity
2. Provide explanations appropriate for {class_name} level students
3. Create examples and practice problems when requested
4. Maintain conversation continuity by referencing previous exchanges
5. Connect concepts to real-world applications when relevant

Guidelines:
- Keep responses focused on the educational content
- Use age-appropriate language for {class_name} students
- If asked about topics not covered in the content, acknowledge the limitation and redirect to covered material
- Be encouraging and supportive in your teaching approach

Current student question: "{question}\""""

# Template for exercise generation
EXERCISE_SYSTEM_TEMPLATE = """You are an expert educational AI that creates engaging practice exercises.
Your task is to generate interactive learning activities based on provided content.

Guidelines:
1. Create exercises that test understanding, not just memory
2. Make questions clear and unambiguous
3. Ensure all information is derived from the provided content
4. Create age-appropriate exercises for the subject
5. Focus on key concepts and important details

Subject: {subject}
Pages: {pages}

You must respond with ONLY valid JSON in this exact format:
{{
  "matchPairs": [
    {{"id": "unique-id-1", "left": "Term or concept", "right": "Definition or explanation"}}
  ],
  "fillInBlanks": [
    {{
      "id": "unique-id-1",
      "sentence": "The ____ is an important concept.",
      "blank": "answer",
      "options": ["answer", "wrong1", "wrong2", "wrong3"],
      "correctAnswer": "answer"
    }}
  ]
}}

Important:
- Generate 5-6 matching pairs
- Generate 4-5 fill-in-the-blank questions
- Each fill-in-the-blank should have 4 options (1 correct, 3 plausible distractors)
- Use ____ to indicate where the blank should be in the sentence
- Return ONLY the JSON object, no additional text"""

EXERCISE_USER_TEMPLATE = """Based on this educational content, create interactive exercises:

{summary}

Generate matching pairs and fill-in-the-blank questions that test understanding of this content."""
