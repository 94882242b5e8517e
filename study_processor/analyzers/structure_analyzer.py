"""
Document structure analysis: chapters for a whole document and lessons
inside one chapter.
"""

from typing import List, Optional, Sequence

from processing_config import ProcessingConfig
from prompt_builder import PromptBuilder
from ..content.models import Chapter, Lesson, PageText, generate_unique_id
from ..content.normalizer import ContentNormalizer
from ..utils.logging import get_logger
from .base import BaseAnalyzer

logger = get_logger(__name__)


class DocumentStructureAnalyzer(BaseAnalyzer):
    """Infers the chapter/lesson outline of a document."""

    def get_mode(self) -> str:
        return "structure"

    def analyze_document_structure(self, pages: Sequence[PageText]) -> List[Chapter]:
        """
        Segment a document into top-level chapters.

        Only the first pages (up to MAX_STRUCTURE_PAGES) are sent; the total
        page count is always the number of pages supplied. Whatever goes
        wrong, the result covers the document: it falls back to a single
        chapter spanning every page.

        Args:
            pages: Page texts in document order

        Returns:
            Reconciled chapters, or [] for an empty document
        """
        total_pages = len(pages)
        if total_pages == 0:
            logger.info("No pages supplied; skipping structure analysis")
            return []

        sample = pages[:ProcessingConfig.MAX_STRUCTURE_PAGES]
        if total_pages > len(sample):
            logger.info(f"Analyzing structure from the first {len(sample)} of {total_pages} pages")
        tagged = PromptBuilder.tag_pages((p.page_number, p.text) for p in sample)
        prompt = PromptBuilder.build_structure_prompt(tagged, total_pages)

        try:
            data = self.request_structured(prompt, "document_structure")
        except Exception as e:
            logger.error(f"Structure analysis failed: {e}")
            data = None

        chapters = ContentNormalizer.normalize_chapters(data, total_pages) if data is not None else []
        if not chapters:
            logger.warning("No usable chapters returned; using a single full-document chapter")
            return [self._full_document_chapter(total_pages)]

        logger.info(f"Identified {len(chapters)} chapter(s) across {total_pages} pages")
        return chapters

    @staticmethod
    def _full_document_chapter(total_pages: int) -> Chapter:
        return Chapter(
            id=generate_unique_id(),
            title=ProcessingConfig.FULL_DOCUMENT_TITLE,
            start_page=1,
            end_page=total_pages,
        )

    def analyze_chapter_for_lessons(self, chapter_text: str, chapter: Chapter) -> Optional[List[Lesson]]:
        """
        Split one chapter into lessons.

        The chapter's page range is given to the model as a constraint;
        lesson pages in the answer are not clamped.

        Args:
            chapter_text: Text of the chapter's pages
            chapter: The chapter being split

        Returns:
            Lessons; [] when the text is empty or the answer is unparseable;
            None when the remote call failed
        """
        if not chapter_text or not chapter_text.strip():
            return []

        prompt = PromptBuilder.build_chapter_lessons_prompt(
            chapter.title, chapter.start_page, chapter.end_page, chapter_text
        )
        try:
            data = self.request_structured(prompt, "chapter_lessons")
        except Exception as e:
            logger.error(f"Lesson analysis failed for '{chapter.title}': {e}")
            return None

        if data is None:
            return []
        lessons = ContentNormalizer.normalize_lessons(data)
        logger.info(f"'{chapter.title}': {len(lessons)} lesson(s)")
        return lessons
