"""
Centralized configuration for the study content pipeline
"""
from settings import settings


class ProcessingConfig:
    """Configuration constants for study content processing"""

    # Remote call retry (server faults only)
    MAX_RETRIES = settings.MAX_RETRIES
    RETRY_BASE_DELAY = settings.RETRY_BASE_DELAY_SECS

    # Regeneration retry for unparseable question batches
    PARSE_RETRIES = settings.PARSE_RETRIES
    PARSE_RETRY_DELAY = settings.PARSE_RETRY_DELAY_SECS

    # Prompt size caps
    MAX_STRUCTURE_PAGES = 600
    MAX_CHAPTER_CHARS = 50000
    MAX_LESSON_CHARS = 40000
    MAX_QUESTION_SOURCE_CHARS = 25000
    MAX_CONTEXT_CHARS = 30000
    TRUNCATION_MARKER = "\n...[text truncated]"

    # Question batches
    INITIAL_QUESTION_COUNT = 50
    MORE_QUESTION_COUNT = 10

    # Summaries target a quarter of the source length
    SUMMARY_RATIO = 0.25

    # Fallback outline
    FULL_DOCUMENT_TITLE = "Full Document"
