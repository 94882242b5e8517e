"""
Centralized prompt building for the study content pipeline
"""
from typing import Iterable, List, Optional, Sequence, Tuple

from constants import (
    JSON_ONLY_WARNING,
    PAGE_RANGE_SCHEMA,
    QUESTION_SCHEMA,
    FILL_IN_THE_BLANK_RULE,
    DOCUMENT_STRUCTURE_PROMPT,
    CHAPTER_LESSONS_PROMPT,
    INTERACTIVE_LESSON_PROMPT,
    INITIAL_QUESTIONS_PROMPT,
    MORE_QUESTIONS_PROMPT,
    FEEDBACK_PROMPT,
    CORRECTIONS_PROMPT,
    DEEPER_EXPLANATION_PROMPT,
    SUMMARY_PROMPT,
    SUMMARY_STYLE_SECTION,
    PROOFREAD_PROMPT,
    SEARCH_FILTER_INSTRUCTIONS,
    MATERIAL_SEARCH_PROMPT,
    DOCUMENT_SEARCH_PROMPT,
    CATEGORIZE_BOOKS_PROMPT,
    CONTEXT_CHAT_SYSTEM_INSTRUCTION,
)
from processing_config import ProcessingConfig


class PromptBuilder:
    """Builds prompts for every remote operation"""

    # --------------------
    # Text helpers
    # --------------------
    @staticmethod
    def truncate(text: str, limit: int) -> str:
        """Cut text at ``limit`` characters and mark the cut

        Args:
            text: Source text
            limit: Maximum number of characters kept

        Returns:
            The text unchanged when short enough, otherwise its prefix
            followed by the truncation marker
        """
        if len(text) <= limit:
            return text
        return text[:limit] + ProcessingConfig.TRUNCATION_MARKER

    @staticmethod
    def tag_pages(pages: Iterable[Tuple[int, str]]) -> str:
        """Join ``(page_number, text)`` pairs with ``--- PAGE n ---`` headers"""
        return "\n\n".join(f"--- PAGE {number} ---\n{text}" for number, text in pages)

    # --------------------
    # Structure
    # --------------------
    @staticmethod
    def build_structure_prompt(tagged_text: str, total_pages: int) -> str:
        return DOCUMENT_STRUCTURE_PROMPT.format(
            document_text=tagged_text,
            total_pages=total_pages,
            json_warning=JSON_ONLY_WARNING,
            schema=PAGE_RANGE_SCHEMA.format(),
        )

    @staticmethod
    def build_chapter_lessons_prompt(chapter_title: str, start_page: int, end_page: int,
                                     chapter_text: str) -> str:
        """Build prompt for splitting one chapter into lessons

        The page range is stated as a constraint only; nothing is enforced
        on the answer.
        """
        return CHAPTER_LESSONS_PROMPT.format(
            chapter_title=chapter_title,
            start_page=start_page,
            end_page=end_page,
            chapter_text=PromptBuilder.truncate(chapter_text, ProcessingConfig.MAX_CHAPTER_CHARS),
            json_warning=JSON_ONLY_WARNING,
            schema=PAGE_RANGE_SCHEMA.format(),
        )

    # --------------------
    # Lessons and questions
    # --------------------
    @staticmethod
    def build_interactive_lesson_prompt(lesson_text: str) -> str:
        return INTERACTIVE_LESSON_PROMPT.format(
            lesson_text=lesson_text,
            json_warning=JSON_ONLY_WARNING,
        )

    @staticmethod
    def build_initial_questions_prompt(lesson_text: str, count: int) -> str:
        return INITIAL_QUESTIONS_PROMPT.format(
            lesson_text=PromptBuilder.truncate(lesson_text, ProcessingConfig.MAX_QUESTION_SOURCE_CHARS),
            count=count,
            blank_rule=FILL_IN_THE_BLANK_RULE,
            json_warning=JSON_ONLY_WARNING,
            schema=QUESTION_SCHEMA.format(),
        )

    @staticmethod
    def build_more_questions_prompt(lesson_text: str, existing_prompts: Sequence[str], count: int) -> str:
        """Build prompt for a further batch of questions

        Args:
            lesson_text: Explanatory text of the lesson
            existing_prompts: Rendered text of the questions already asked
            count: Number of new questions to request

        Returns:
            Complete prompt string
        """
        return MORE_QUESTIONS_PROMPT.format(
            lesson_text=PromptBuilder.truncate(lesson_text, ProcessingConfig.MAX_QUESTION_SOURCE_CHARS),
            existing_questions="\n - ".join(existing_prompts) if existing_prompts else "(none)",
            count=count,
            blank_rule=FILL_IN_THE_BLANK_RULE,
            json_warning=JSON_ONLY_WARNING,
            schema=QUESTION_SCHEMA.format(),
        )

    # --------------------
    # Grading
    # --------------------
    @staticmethod
    def build_feedback_prompt(qa_pairs_json: str) -> str:
        return FEEDBACK_PROMPT.format(qa_pairs=qa_pairs_json, json_warning=JSON_ONLY_WARNING)

    @staticmethod
    def build_corrections_prompt(incorrect_json: str) -> str:
        return CORRECTIONS_PROMPT.format(incorrect_answers=incorrect_json, json_warning=JSON_ONLY_WARNING)

    @staticmethod
    def build_deeper_explanation_prompt(text: str) -> str:
        return DEEPER_EXPLANATION_PROMPT.format(text=text)

    # --------------------
    # Study tools
    # --------------------
    @staticmethod
    def build_summary_prompt(chapter_text: str, word_count: int, target_words: int,
                             style: Optional[str] = None) -> str:
        style_section = SUMMARY_STYLE_SECTION.format(style=style) if style else ""
        return SUMMARY_PROMPT.format(
            word_count=word_count,
            target_words=target_words,
            style_section=style_section,
            chapter_text=chapter_text,
        )

    @staticmethod
    def build_proofread_prompt(text: str) -> str:
        return PROOFREAD_PROMPT.format(text=text)

    @staticmethod
    def build_material_search_prompt(query: str, search_filter: str) -> str:
        instruction = SEARCH_FILTER_INSTRUCTIONS.get(search_filter, SEARCH_FILTER_INSTRUCTIONS["all"])
        return MATERIAL_SEARCH_PROMPT.format(query=query, filter_instruction=instruction)

    @staticmethod
    def build_document_search_prompt(context: str, query: str) -> str:
        return DOCUMENT_SEARCH_PROMPT.format(
            context=PromptBuilder.truncate(context, ProcessingConfig.MAX_CONTEXT_CHARS),
            query=query,
            json_warning=JSON_ONLY_WARNING,
        )

    @staticmethod
    def build_categorize_prompt(titles: List[Tuple[str, str]]) -> str:
        """Build prompt for grouping ``(id, title)`` pairs into categories"""
        book_list = "\n".join(f"- ID: {book_id}, Title: {title}" for book_id, title in titles)
        return CATEGORIZE_BOOKS_PROMPT.format(book_list=book_list, json_warning=JSON_ONLY_WARNING)

    @staticmethod
    def build_context_chat_instruction(context: str) -> str:
        return CONTEXT_CHAT_SYSTEM_INSTRUCTION.format(
            context=PromptBuilder.truncate(context, ProcessingConfig.MAX_CONTEXT_CHARS)
        )
