"""
Main study processor orchestrator.
Sequences extraction, outline analysis, lesson generation and grading for
one document session.
"""

from typing import List, Optional, Sequence, Union

from prompt_builder import PromptBuilder
from validators import PageRangeValidator
from ..analyzers.content_generator import InteractiveContentGenerator
from ..analyzers.structure_analyzer import DocumentStructureAnalyzer
from ..analyzers.study_tools import StudyToolsAnalyzer
from ..api.client import GeminiAPIClient
from ..content.models import (
    Chapter,
    ExplanationBlock,
    FeedbackItem,
    InteractiveBlock,
    InteractiveContent,
    Lesson,
    PageText,
    SmartSearchResult,
    UserAnswer,
    generate_unique_id,
)
from ..pdf.operations import PDFOperations
from ..utils.logging import get_logger
from ..utils.retry_handler import RetryHandler

logger = get_logger(__name__)

FURTHER_EXPLANATION_PREFIX = "Further Explanation: "

Section = Union[Chapter, Lesson]


class StudyProcessor:
    """Main orchestrator for study sessions."""

    def __init__(self, api_client: Optional[GeminiAPIClient] = None, model=None,
                 retry_handler: Optional[RetryHandler] = None):
        """
        Initialize the study processor.

        Args:
            api_client: Constructed Gemini API client (built from ``model`` when omitted)
            model: Model configuration from config.create_model()
            retry_handler: Retry policies shared by all analyzers

        Raises:
            ClientInitializationError: If no client is given and one cannot be built
        """
        self.api_client = api_client or GeminiAPIClient(model)
        self.retry_handler = retry_handler or RetryHandler()

        self.structure_analyzer = DocumentStructureAnalyzer(self.api_client, self.retry_handler)
        self.content_generator = InteractiveContentGenerator(self.api_client, self.retry_handler)
        self.tools = StudyToolsAnalyzer(self.api_client, self.retry_handler)

        logger.info(f"Initialized StudyProcessor with model {self.api_client.model_name}")

    # --------------------
    # Document and outline
    # --------------------
    @staticmethod
    def load_document(pdf_path: str) -> List[PageText]:
        return PDFOperations.extract_pages(pdf_path)

    @staticmethod
    def pages_in_range(pages: Sequence[PageText], start_page: int, end_page: int) -> List[PageText]:
        """Pages whose number falls in the inclusive range."""
        return [p for p in pages if start_page <= p.page_number <= end_page]

    @staticmethod
    def text_in_range(pages: Sequence[PageText], start_page: int, end_page: int) -> str:
        return "\n\n".join(p.text for p in StudyProcessor.pages_in_range(pages, start_page, end_page))

    def analyze_structure(self, pages: Sequence[PageText]) -> List[Chapter]:
        return self.structure_analyzer.analyze_document_structure(pages)

    def expand_chapter(self, chapter: Chapter, pages: Sequence[PageText]) -> List[Lesson]:
        """
        Fill a chapter's lessons in place.

        ``is_analyzing`` is set for the duration of the call. A failed
        analysis leaves the chapter with no lessons.

        Returns:
            The lessons now attached to the chapter
        """
        chapter.is_analyzing = True
        try:
            text = self.text_in_range(pages, chapter.start_page, chapter.end_page)
            lessons = self.structure_analyzer.analyze_chapter_for_lessons(text, chapter)
        finally:
            chapter.is_analyzing = False

        if lessons is None:
            logger.warning(f"Lesson analysis failed for '{chapter.title}'")
            lessons = []
        chapter.lessons = lessons
        return lessons

    # --------------------
    # Lessons and questions
    # --------------------
    def start_lesson(self, section: Section, pages: Sequence[PageText]) -> Optional[InteractiveContent]:
        """Generate interactive content for a lesson (or a whole chapter).

        Lesson ranges come from the model unclamped, so the range is fitted
        to the document before pages are selected.
        """
        start_page, end_page = section.start_page, section.end_page
        if pages:
            last_page = max(p.page_number for p in pages)
            start_page, end_page = PageRangeValidator.clamp_range(start_page, end_page, last_page)
        section_pages = self.pages_in_range(pages, start_page, end_page)
        text = "\n\n".join(p.text for p in section_pages)
        return self.content_generator.generate_interactive_lesson(text, section_pages, title=section.title)

    def add_initial_questions(self, content: InteractiveContent) -> Optional[List[InteractiveBlock]]:
        """Append the first question batch to the content; None on failure."""
        questions = self.content_generator.generate_initial_questions(content.explanation_text())
        if questions:
            content.content.extend(questions)
        return questions

    def add_more_questions(self, content: InteractiveContent) -> Optional[List[InteractiveBlock]]:
        """Append another question batch to the content; None on failure."""
        questions = self.content_generator.generate_more_questions(
            content.explanation_text(), content.questions()
        )
        if questions:
            content.content.extend(questions)
        return questions

    def insert_deeper_explanation(self, content: InteractiveContent, block_id: str) -> Optional[ExplanationBlock]:
        """
        Splice a further explanation right after an explanation block.

        Args:
            content: Content holding the block
            block_id: Id of the explanation block to elaborate

        Returns:
            The inserted block, or None when the block is unknown or the
            elaboration failed
        """
        index = next(
            (i for i, b in enumerate(content.content) if b.id == block_id and isinstance(b, ExplanationBlock)),
            None,
        )
        if index is None:
            logger.warning(f"No explanation block with id {block_id}")
            return None

        deeper = self.content_generator.get_deeper_explanation(content.content[index].text)
        if deeper is None:
            return None
        block = ExplanationBlock(id=generate_unique_id(), text=f"{FURTHER_EXPLANATION_PREFIX}{deeper}")
        content.content.insert(index + 1, block)
        return block

    # --------------------
    # Grading
    # --------------------
    def submit_answers(self, content: InteractiveContent,
                       answers: Sequence[UserAnswer]) -> Optional[List[FeedbackItem]]:
        return self.content_generator.get_feedback_on_answers(answers, content.questions())

    def correct_answers(self, feedback: Sequence[FeedbackItem]) -> Optional[List[FeedbackItem]]:
        """Replace explanations of incorrect items with remedial corrections.

        Returns:
            Updated feedback, or None when corrections could not be generated
        """
        corrections = self.content_generator.get_ai_corrections([f for f in feedback if not f.is_correct])
        if corrections is None:
            return None
        return self.content_generator.apply_corrections(feedback, corrections)

    @staticmethod
    def retry_incorrect(content: InteractiveContent, feedback: Sequence[FeedbackItem]) -> List[InteractiveBlock]:
        """Questions that were answered incorrectly, in content order."""
        incorrect_ids = {f.question_id for f in feedback if not f.is_correct}
        return [q for q in content.questions() if q.id in incorrect_ids]

    # --------------------
    # Study tools
    # --------------------
    def summarize_section(self, section: Section, pages: Sequence[PageText],
                          style: Optional[str] = None) -> Optional[str]:
        return self.tools.summarize_chapter_text(
            self.text_in_range(pages, section.start_page, section.end_page), style
        )

    def ask_document(self, pages: Sequence[PageText], query: str) -> Optional[SmartSearchResult]:
        """Answer a question from the page-tagged document text."""
        context = PromptBuilder.tag_pages((p.page_number, p.text) for p in pages)
        return self.tools.search_within_document(context, query)
