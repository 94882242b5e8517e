"""
Study tools built on the model: summaries, proofreading, material search,
in-document question answering, image text extraction, library
categorization and chat sessions.
"""

import base64
import binascii
import re
from typing import Any, List, Optional, Sequence, Tuple

from google.genai import types as genai_types

from constants import (
    CATEGORIZE_BOOKS_SCHEMA,
    CHAT_SYSTEM_INSTRUCTION,
    DOCUMENT_SEARCH_SCHEMA,
    IMAGE_TEXT_PROMPT,
)
from processing_config import ProcessingConfig
from prompt_builder import PromptBuilder
from ..content.models import BookCategory, SearchResult, SearchSource, SmartSearchResult
from ..content.normalizer import ContentNormalizer
from ..utils.exceptions import SearchError
from ..utils.logging import get_logger
from .base import BaseAnalyzer

logger = get_logger(__name__)

NO_TEXT_TO_SUMMARIZE = "No text to summarize."
SEARCH_FILTERS = ("all", "video", "sites")

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(;[\w=-]+)*;base64,", re.IGNORECASE)
_SOURCE_LINE_RE = re.compile(r"^\s*[-*]?\s*\[?(?P<uri>https?://[^\s\]]+)\]?\s+-\s+(?P<title>.+?)\s*$")


class StudyToolsAnalyzer(BaseAnalyzer):
    """Single-shot study helpers and chat sessions."""

    def get_mode(self) -> str:
        return "study_tools"

    def summarize_chapter_text(self, text: str, style: Optional[str] = None) -> Optional[str]:
        """
        Summarize a chapter to about a quarter of its word count.

        Args:
            text: Chapter text
            style: Optional presentation style (e.g. "bullet points")

        Returns:
            Summary text, a fixed notice for empty input, or None on failure
        """
        if not text or not text.strip():
            return NO_TEXT_TO_SUMMARIZE

        word_count = len(text.split())
        target_words = max(1, round(word_count * ProcessingConfig.SUMMARY_RATIO))
        prompt = PromptBuilder.build_summary_prompt(text, word_count, target_words, style)
        try:
            summary = self.generate(prompt, "summary")
        except Exception as e:
            logger.error(f"Summary generation failed: {e}")
            return None
        return summary or None

    def proofread_page_text(self, text: str) -> str:
        """Correct spelling and grammar of one page; the input comes back on any failure."""
        if not text or not text.strip():
            return text
        try:
            corrected = self.generate(PromptBuilder.build_proofread_prompt(text), "proofread")
        except Exception as e:
            logger.warning(f"Proofreading failed, keeping original text: {e}")
            return text
        return corrected or text

    # --------------------
    # Search
    # --------------------
    @staticmethod
    def parse_source_lines(text: str) -> List[SearchSource]:
        """Parse ``<url> - <description>`` lines, skipping anything else."""
        sources = []
        seen = set()
        for line in (text or "").splitlines():
            match = _SOURCE_LINE_RE.match(line)
            if not match:
                continue
            uri = match.group("uri")
            if uri in seen:
                continue
            seen.add(uri)
            sources.append(SearchSource(uri=uri, title=match.group("title")))
        return sources

    def search_for_materials(self, query: str, search_filter: str = "all") -> SearchResult:
        """
        Find web and video learning material with the Google Search tool.

        Args:
            query: Topic to search for
            search_filter: One of "all", "video", "sites"

        Returns:
            Found sources (possibly none)

        Raises:
            SearchError: If the search could not be performed
        """
        if not query or not query.strip():
            return SearchResult()
        if search_filter not in SEARCH_FILTERS:
            raise SearchError(f"Unknown search filter: {search_filter!r}")

        prompt = PromptBuilder.build_material_search_prompt(query.strip(), search_filter)
        tools = [genai_types.Tool(google_search=genai_types.GoogleSearch())]
        try:
            text = self.generate(prompt, "material_search", tools=tools)
        except Exception as e:
            logger.error(f"Material search failed for '{query}': {e}")
            if "SAFETY" in str(e):
                raise SearchError(
                    "The search was blocked for safety reasons. Please rephrase your query."
                ) from e
            raise SearchError(f"Failed to search for materials: {e}") from e

        sources = self.parse_source_lines(text)
        logger.info(f"Material search '{query}' ({search_filter}): {len(sources)} source(s)")
        return SearchResult(sources=sources)

    def search_within_document(self, context: str, query: str) -> Optional[SmartSearchResult]:
        """
        Answer a question from document text only.

        Returns:
            Answer with supporting quote, pages and follow-up questions, or
            None when the context or query is empty or the call failed
        """
        if not context or not context.strip() or not query or not query.strip():
            return None
        prompt = PromptBuilder.build_document_search_prompt(context, query.strip())
        try:
            data = self.request_structured(prompt, "document_search", response_schema=DOCUMENT_SEARCH_SCHEMA)
        except Exception as e:
            logger.error(f"Document search failed: {e}")
            return None
        return ContentNormalizer.normalize_smart_search(data)

    # --------------------
    # Images and library
    # --------------------
    @staticmethod
    def decode_image_payload(image_data: str, mime_type: str) -> Tuple[bytes, str]:
        """
        Decode base64 image data, accepting a ``data:`` URL prefix.

        Returns:
            Tuple of (raw bytes, mime type); the mime type of a data URL wins

        Raises:
            ValueError: If the payload is not valid base64
        """
        payload = image_data.strip()
        match = _DATA_URL_RE.match(payload)
        if match:
            mime_type = match.group("mime") or mime_type
            payload = payload[match.end():]
        try:
            return base64.b64decode(payload, validate=True), mime_type
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 image data: {e}") from e

    def extract_text_from_image(self, image_data: str, mime_type: str = "image/png") -> Optional[str]:
        """Read the text visible in an image; None when it cannot be read."""
        if not image_data:
            return None
        try:
            raw, mime_type = self.decode_image_payload(image_data, mime_type)
        except ValueError as e:
            logger.error(str(e))
            return None

        contents = [genai_types.Part.from_bytes(data=raw, mime_type=mime_type), IMAGE_TEXT_PROMPT]
        try:
            return self.generate(contents, "image_text")
        except Exception as e:
            logger.error(f"Image text extraction failed: {e}")
            return None

    def categorize_books(self, titles: Sequence[str]) -> Optional[List[BookCategory]]:
        """Group book titles into categories and sub-categories."""
        books = [(str(i), t.strip()) for i, t in enumerate(titles, start=1) if t and t.strip()]
        if not books:
            return []
        prompt = PromptBuilder.build_categorize_prompt(books)
        try:
            data = self.request_structured(prompt, "categorize_books", response_schema=CATEGORIZE_BOOKS_SCHEMA)
        except Exception as e:
            logger.error(f"Book categorization failed: {e}")
            return None
        if data is None:
            return None
        return ContentNormalizer.normalize_categories(data)

    # --------------------
    # Chat
    # --------------------
    def create_chat(self) -> Any:
        """Open a general study-assistant chat session."""
        return self.api_client.create_chat(CHAT_SYSTEM_INSTRUCTION)

    def create_chat_with_context(self, context: str) -> Any:
        """Open a chat session restricted to the given document text."""
        return self.api_client.create_chat(PromptBuilder.build_context_chat_instruction(context))
