"""
Normalization of decoded model output into the typed content model.

Everything coming back from the model is untrusted: ids are always replaced,
variant tags are checked against the known set, and malformed elements are
dropped instead of being passed on.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional

from validators import PageRangeValidator
from ..utils.logging import get_logger
from .models import (
    AiCorrection,
    BookCategory,
    BookSubCategory,
    Chapter,
    ExplanationBlock,
    FeedbackItem,
    FillInTheBlankQuestionBlock,
    InteractiveBlock,
    Lesson,
    MathFormulaBlock,
    MultipleChoiceQuestionBlock,
    OpenEndedQuestionBlock,
    SmartSearchResult,
    TrueFalseQuestionBlock,
    generate_unique_id,
)

logger = get_logger(__name__)

_TRUE_STRINGS = {"true", "t", "yes", "y", "1"}
_FALSE_STRINGS = {"false", "f", "no", "n", "0"}


class ContentNormalizer:
    """Turns loosely shaped decoded data into strict content entities."""

    # --------------------
    # Coercion helpers
    # --------------------
    @staticmethod
    def as_list(payload: Any) -> Optional[List[Any]]:
        """Return the list carried by a payload.

        Accepts a bare list, or an object wrapping exactly the list of
        interest (e.g. ``{"questions": [...]}``); the first list value wins.
        """
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict):
            for value in payload.values():
                if isinstance(value, list):
                    return value
        return None

    @staticmethod
    def to_int(value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return None
        return None

    @staticmethod
    def to_bool(value: Any) -> Optional[bool]:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        return None

    @staticmethod
    def to_text(value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @staticmethod
    def to_text_list(value: Any, allow_empty_items: bool = False) -> Optional[List[str]]:
        if not isinstance(value, list):
            return None
        items = []
        for item in value:
            if isinstance(item, (int, float)) and not isinstance(item, bool):
                item = str(item)
            if not isinstance(item, str):
                return None
            if not item.strip() and not allow_empty_items:
                return None
            items.append(item)
        return items

    # --------------------
    # Outline
    # --------------------
    @staticmethod
    def normalize_outline(payload: Any) -> List[Dict[str, Any]]:
        """Decode ``[{title, startPage, endPage}]`` into clean dicts.

        Elements without an integer start page are dropped; a missing end
        page defaults to the start page. Input ids are ignored.
        """
        items = ContentNormalizer.as_list(payload) or []
        outline = []
        for index, item in enumerate(items, start=1):
            if not isinstance(item, dict):
                continue
            start = ContentNormalizer.to_int(item.get("startPage"))
            if start is None:
                logger.debug(f"Skipping outline entry without start page: {item}")
                continue
            end = ContentNormalizer.to_int(item.get("endPage"))
            outline.append({
                "title": ContentNormalizer.to_text(item.get("title")) or f"Section {index}",
                "startPage": start,
                "endPage": start if end is None else end,
            })
        return outline

    @staticmethod
    def normalize_chapters(payload: Any, total_pages: int) -> List[Chapter]:
        """Build reconciled chapters with fresh ids."""
        outline = ContentNormalizer.normalize_outline(payload)
        reconciled = PageRangeValidator.reconcile_chapter_ranges(outline, total_pages)
        return [
            Chapter(
                id=generate_unique_id(),
                title=entry["title"],
                start_page=entry["startPage"],
                end_page=entry["endPage"],
            )
            for entry in reconciled
        ]

    @staticmethod
    def normalize_lessons(payload: Any) -> List[Lesson]:
        """Build lessons with fresh ids.

        Ranges are not clamped to the chapter, but inverted ranges
        (end before start) are dropped.
        """
        lessons = []
        for entry in ContentNormalizer.normalize_outline(payload):
            if entry["endPage"] < entry["startPage"]:
                logger.warning(
                    f"Dropping lesson '{entry['title']}' with inverted range "
                    f"({entry['startPage']}-{entry['endPage']})"
                )
                continue
            lessons.append(Lesson(
                id=generate_unique_id(),
                title=entry["title"],
                start_page=entry["startPage"],
                end_page=entry["endPage"],
            ))
        return lessons

    # --------------------
    # Interactive blocks
    # --------------------
    @staticmethod
    def normalize_blocks(payload: Any, allowed_types: Optional[Iterable[str]] = None) -> List[InteractiveBlock]:
        """Strictly decode a list of tagged blocks.

        Args:
            payload: Decoded model output (list, or object wrapping a list)
            allowed_types: Optional subset of tags to accept

        Returns:
            Blocks with fresh ids; unknown or malformed variants are dropped
        """
        allowed = set(allowed_types) if allowed_types is not None else None
        blocks = []
        dropped = 0
        for raw in ContentNormalizer.as_list(payload) or []:
            block = ContentNormalizer.normalize_block(raw)
            if block is None or (allowed is not None and block.type not in allowed):
                dropped += 1
                continue
            blocks.append(block)
        if dropped:
            logger.warning(f"Dropped {dropped} malformed or unexpected block(s)")
        return blocks

    @staticmethod
    def normalize_block(raw: Any) -> Optional[InteractiveBlock]:
        """Decode one block, or return None when it cannot be trusted."""
        if not isinstance(raw, dict):
            return None
        tag = raw.get("type")
        decoder = _BLOCK_DECODERS.get(tag) if isinstance(tag, str) else None
        if decoder is None:
            logger.debug(f"Unknown block type: {tag!r}")
            return None
        return decoder(raw)

    @staticmethod
    def _explanation(raw: Dict[str, Any]) -> Optional[ExplanationBlock]:
        text = ContentNormalizer.to_text(raw.get("text"))
        return ExplanationBlock(id=generate_unique_id(), text=text) if text else None

    @staticmethod
    def _math_formula(raw: Dict[str, Any]) -> Optional[MathFormulaBlock]:
        latex = ContentNormalizer.to_text(raw.get("latex"))
        return MathFormulaBlock(id=generate_unique_id(), latex=latex) if latex else None

    @staticmethod
    def _multiple_choice(raw: Dict[str, Any]) -> Optional[MultipleChoiceQuestionBlock]:
        question = ContentNormalizer.to_text(raw.get("question"))
        options = ContentNormalizer.to_text_list(raw.get("options"))
        index = ContentNormalizer.to_int(raw.get("correctAnswerIndex"))
        if not question or not options or len(options) < 2 or index is None:
            return None
        if not 0 <= index < len(options):
            logger.debug(f"correctAnswerIndex {index} out of range for {len(options)} options")
            return None
        return MultipleChoiceQuestionBlock(
            id=generate_unique_id(),
            question=question,
            options=options,
            correct_answer_index=index,
        )

    @staticmethod
    def _true_false(raw: Dict[str, Any]) -> Optional[TrueFalseQuestionBlock]:
        question = ContentNormalizer.to_text(raw.get("question"))
        answer = ContentNormalizer.to_bool(raw.get("correctAnswer"))
        if not question or answer is None:
            return None
        return TrueFalseQuestionBlock(id=generate_unique_id(), question=question, correct_answer=answer)

    @staticmethod
    def _fill_in_the_blank(raw: Dict[str, Any]) -> Optional[FillInTheBlankQuestionBlock]:
        parts = ContentNormalizer.to_text_list(raw.get("questionParts"), allow_empty_items=True)
        answers = ContentNormalizer.to_text_list(raw.get("correctAnswers"))
        if not parts or not answers:
            return None
        # One blank per answer, between consecutive parts
        if len(parts) > len(answers) + 1:
            logger.debug(f"Fill-in-the-blank has {len(parts) - 1} blanks but {len(answers)} answers")
            return None
        parts = parts + [""] * (len(answers) + 1 - len(parts))
        return FillInTheBlankQuestionBlock(
            id=generate_unique_id(),
            question_parts=parts,
            correct_answers=answers,
        )

    @staticmethod
    def _open_ended(raw: Dict[str, Any]) -> Optional[OpenEndedQuestionBlock]:
        question = ContentNormalizer.to_text(raw.get("question"))
        return OpenEndedQuestionBlock(id=generate_unique_id(), question=question) if question else None

    # --------------------
    # Grading
    # --------------------
    @staticmethod
    def normalize_feedback(payload: Any) -> List[FeedbackItem]:
        """Decode ``[{questionId, isCorrect, explanation}]``."""
        feedback = []
        for item in ContentNormalizer.as_list(payload) or []:
            if not isinstance(item, dict) or item.get("questionId") is None:
                continue
            is_correct = ContentNormalizer.to_bool(item.get("isCorrect"))
            if is_correct is None:
                continue
            feedback.append(FeedbackItem(
                question_id=str(item["questionId"]),
                is_correct=is_correct,
                explanation=ContentNormalizer.to_text(item.get("explanation")) or "",
            ))
        return feedback

    @staticmethod
    def normalize_corrections(payload: Any) -> List[AiCorrection]:
        """Decode ``[{questionId, correction}]``."""
        corrections = []
        for item in ContentNormalizer.as_list(payload) or []:
            if not isinstance(item, dict) or item.get("questionId") is None:
                continue
            text = ContentNormalizer.to_text(item.get("correction"))
            if text:
                corrections.append(AiCorrection(question_id=str(item["questionId"]), correction=text))
        return corrections

    # --------------------
    # Search and library
    # --------------------
    @staticmethod
    def normalize_smart_search(payload: Any) -> Optional[SmartSearchResult]:
        if not isinstance(payload, dict):
            return None
        answer = ContentNormalizer.to_text(payload.get("answer"))
        if not answer:
            return None
        follow_ups = [
            f.strip() for f in payload.get("follow_ups") or []
            if isinstance(f, str) and f.strip()
        ]
        return SmartSearchResult(
            answer=answer,
            quote=ContentNormalizer.to_text(payload.get("quote")) or "",
            pages=ContentNormalizer.to_text(payload.get("pages")) or "N/A",
            follow_ups=follow_ups,
        )

    @staticmethod
    def normalize_categories(payload: Any) -> List[BookCategory]:
        categories = []
        for item in ContentNormalizer.as_list(payload) or []:
            if not isinstance(item, dict):
                continue
            name = ContentNormalizer.to_text(item.get("category"))
            if not name:
                continue
            subs = []
            for sub in item.get("subCategories") or []:
                if not isinstance(sub, dict):
                    continue
                sub_name = ContentNormalizer.to_text(sub.get("subCategory"))
                books = [b for b in sub.get("books") or [] if isinstance(b, str) and b.strip()]
                if sub_name:
                    subs.append(BookSubCategory(sub_category=sub_name, books=books))
            categories.append(BookCategory(category=name, sub_categories=subs))
        return categories


_BLOCK_DECODERS: Dict[str, Callable[[Dict[str, Any]], Optional[InteractiveBlock]]] = {
    ExplanationBlock.type: ContentNormalizer._explanation,
    MathFormulaBlock.type: ContentNormalizer._math_formula,
    MultipleChoiceQuestionBlock.type: ContentNormalizer._multiple_choice,
    TrueFalseQuestionBlock.type: ContentNormalizer._true_false,
    FillInTheBlankQuestionBlock.type: ContentNormalizer._fill_in_the_blank,
    OpenEndedQuestionBlock.type: ContentNormalizer._open_ended,
}
