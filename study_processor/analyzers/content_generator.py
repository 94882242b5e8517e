"""
Interactive content generation: lesson explanations, question batches,
grading, corrections and deeper explanations.
"""

import json
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from constants import OPEN_ENDED_GRADING_NOTE
from processing_config import ProcessingConfig
from prompt_builder import PromptBuilder
from ..content.models import (
    EXPLANATORY_TYPES,
    QUESTION_TYPES,
    AiCorrection,
    FeedbackItem,
    FillInTheBlankQuestionBlock,
    InteractiveBlock,
    InteractiveContent,
    MultipleChoiceQuestionBlock,
    OpenEndedQuestionBlock,
    PageText,
    TrueFalseQuestionBlock,
    UserAnswer,
    generate_unique_id,
)
from ..content.normalizer import ContentNormalizer
from ..utils.logging import get_logger
from .base import BaseAnalyzer

logger = get_logger(__name__)

NO_ANSWER = "N/A"
EMPTY_BLANK = "empty"


class InteractiveContentGenerator(BaseAnalyzer):
    """Generates and grades interactive lesson content."""

    def get_mode(self) -> str:
        return "interactive"

    # --------------------
    # Lesson content
    # --------------------
    def generate_interactive_lesson(self, text: str, pages: Sequence[PageText],
                                    title: Optional[str] = None) -> Optional[InteractiveContent]:
        """
        Generate explanation and formula blocks for one lesson.

        The page-tagged text is cut at MAX_LESSON_CHARS with a visible
        marker. Question blocks in the answer are discarded.

        Args:
            text: Lesson text, used when ``pages`` is empty
            pages: Page texts of the lesson
            title: Title used when the model does not provide one

        Returns:
            The generated content, or None when nothing usable came back
        """
        if pages:
            source = PromptBuilder.tag_pages((p.page_number, p.text) for p in pages)
        else:
            source = text or ""
        if not source.strip():
            logger.warning("No lesson text to explain")
            return None

        prompt = PromptBuilder.build_interactive_lesson_prompt(
            PromptBuilder.truncate(source, ProcessingConfig.MAX_LESSON_CHARS)
        )
        try:
            data = self.request_structured(prompt, "interactive_lesson")
        except Exception as e:
            logger.error(f"Interactive lesson generation failed: {e}")
            return None
        if data is None:
            return None

        raw_blocks = data.get("content") if isinstance(data, dict) else data
        blocks = ContentNormalizer.normalize_blocks(raw_blocks, allowed_types=EXPLANATORY_TYPES)
        if not blocks:
            logger.warning("Interactive lesson response contained no explanatory blocks")
            return None

        model_title = ContentNormalizer.to_text(data.get("title")) if isinstance(data, dict) else None
        return InteractiveContent(
            id=generate_unique_id(),
            title=model_title or title or "Lesson",
            content=blocks,
        )

    # --------------------
    # Questions
    # --------------------
    def _question_batch(self, prompt: str, operation: str) -> Optional[List[InteractiveBlock]]:
        data = self.request_structured(prompt, operation)
        if data is None:
            return None
        questions = ContentNormalizer.normalize_blocks(data, allowed_types=QUESTION_TYPES)
        return questions or None

    def generate_initial_questions(self, text: str) -> Optional[List[InteractiveBlock]]:
        """
        Generate the first batch of questions for a lesson.

        An unparseable or empty batch is requested again (PARSE_RETRIES
        attempts in total, with increasing delays) on top of the network
        retry of each call.

        Args:
            text: Explanatory text of the lesson

        Returns:
            Question blocks, [] for empty text, or None after all attempts failed
        """
        if not text or not text.strip():
            return []

        prompt = PromptBuilder.build_initial_questions_prompt(text, ProcessingConfig.INITIAL_QUESTION_COUNT)
        questions = self.retry_handler.execute_until_parsed(
            lambda: self._question_batch(prompt, "initial_questions")
        )
        if questions is None:
            logger.error("Initial question generation gave up")
            return None
        logger.info(f"Generated {len(questions)} initial question(s)")
        return questions

    def generate_more_questions(self, text: str,
                                existing: Sequence[InteractiveBlock]) -> Optional[List[InteractiveBlock]]:
        """
        Generate an additional batch, steering away from existing questions.

        Existing prompts are listed in the request; the result is not
        de-duplicated afterwards.
        """
        if not text or not text.strip():
            return []

        existing_prompts = [b.prompt_text for b in existing if b.is_question]
        prompt = PromptBuilder.build_more_questions_prompt(
            text, existing_prompts, ProcessingConfig.MORE_QUESTION_COUNT
        )
        try:
            data = self.request_structured(prompt, "more_questions")
        except Exception as e:
            logger.error(f"Additional question generation failed: {e}")
            return None
        if data is None:
            return None
        return ContentNormalizer.normalize_blocks(data, allowed_types=QUESTION_TYPES)

    # --------------------
    # Grading
    # --------------------
    @staticmethod
    def describe_question(block: InteractiveBlock) -> str:
        """Question text as shown to the grader."""
        if isinstance(block, FillInTheBlankQuestionBlock):
            return " [blank] ".join(block.question_parts)
        return getattr(block, "question", "")

    @staticmethod
    def describe_user_answer(block: InteractiveBlock, answer: Any) -> str:
        """Render a raw submitted answer as text for its question variant."""
        if isinstance(block, MultipleChoiceQuestionBlock):
            index = ContentNormalizer.to_int(answer)
            if index is not None and 0 <= index < len(block.options):
                return block.options[index]
            return NO_ANSWER
        if isinstance(block, TrueFalseQuestionBlock):
            value = ContentNormalizer.to_bool(answer)
            return NO_ANSWER if value is None else str(value)
        if isinstance(block, FillInTheBlankQuestionBlock):
            values = list(answer) if isinstance(answer, (list, tuple)) else [answer]
            values += [None] * (block.blank_count - len(values))
            return ", ".join(str(a) if a not in (None, "") else EMPTY_BLANK for a in values)
        if answer is None:
            return ""
        return str(answer)

    @staticmethod
    def describe_correct_answer(block: InteractiveBlock) -> str:
        if isinstance(block, MultipleChoiceQuestionBlock):
            return block.correct_option
        if isinstance(block, TrueFalseQuestionBlock):
            return str(block.correct_answer)
        if isinstance(block, FillInTheBlankQuestionBlock):
            return ", ".join(block.correct_answers)
        return OPEN_ENDED_GRADING_NOTE

    def get_feedback_on_answers(self, answers: Sequence[UserAnswer],
                                question_blocks: Sequence[InteractiveBlock]) -> Optional[List[FeedbackItem]]:
        """
        Grade submitted answers.

        Each answer is paired with its question; answers for unknown
        question ids are dropped. The model judges correctness. Returned
        items carry the question, the rendered user answer and, for
        objective questions, the correct answer. When the model marks an
        objective answer wrong without naming the correct answer, it is
        appended to the explanation.

        Args:
            answers: Submitted answers
            question_blocks: Question blocks of the content being graded

        Returns:
            Feedback items, [] when nothing is gradable, None on failure
        """
        by_id = {b.id: b for b in question_blocks if b.is_question}
        pairs: List[Dict[str, str]] = []
        for answer in answers:
            block = by_id.get(answer.question_id)
            if block is None:
                logger.debug(f"Dropping answer for unknown question {answer.question_id}")
                continue
            pairs.append({
                "questionId": block.id,
                "question": self.describe_question(block),
                "userAnswer": self.describe_user_answer(block, answer.answer),
                "correctAnswer": self.describe_correct_answer(block),
            })
        if not pairs:
            return []

        prompt = PromptBuilder.build_feedback_prompt(json.dumps(pairs, ensure_ascii=False, indent=2))
        try:
            data = self.request_structured(prompt, "feedback")
        except Exception as e:
            logger.error(f"Feedback generation failed: {e}")
            return None
        if data is None:
            return None

        pair_by_id = {p["questionId"]: p for p in pairs}
        feedback: List[FeedbackItem] = []
        seen = set()
        for item in ContentNormalizer.normalize_feedback(data):
            pair = pair_by_id.get(item.question_id)
            if pair is None or item.question_id in seen:
                continue
            seen.add(item.question_id)
            block = by_id[item.question_id]
            objective = not isinstance(block, OpenEndedQuestionBlock)
            correct = pair["correctAnswer"] if objective else None
            explanation = item.explanation
            if objective and not item.is_correct and correct.lower() not in explanation.lower():
                explanation = f"{explanation} The correct answer is: {correct}".strip()
            feedback.append(replace(
                item,
                explanation=explanation,
                question=pair["question"],
                user_answer=pair["userAnswer"],
                correct_answer=correct,
            ))
        logger.info(f"Graded {len(feedback)} of {len(pairs)} answer(s)")
        return feedback

    def get_ai_corrections(self, incorrect: Sequence[FeedbackItem]) -> Optional[List[AiCorrection]]:
        """
        Request a remedial explanation for each incorrect answer.

        Returns:
            Corrections, [] when nothing is incorrect, None on failure
        """
        items = [f for f in incorrect if not f.is_correct and f.question]
        if not items:
            return []

        payload = []
        for item in items:
            entry = {
                "questionId": item.question_id,
                "question": item.question,
                "userAnswer": item.user_answer or "",
            }
            if item.correct_answer:
                entry["correctAnswer"] = item.correct_answer
            payload.append(entry)

        prompt = PromptBuilder.build_corrections_prompt(json.dumps(payload, ensure_ascii=False, indent=2))
        try:
            data = self.request_structured(prompt, "corrections")
        except Exception as e:
            logger.error(f"Correction generation failed: {e}")
            return None
        if data is None:
            return None
        return ContentNormalizer.normalize_corrections(data)

    @staticmethod
    def apply_corrections(feedback: Sequence[FeedbackItem],
                          corrections: Sequence[AiCorrection]) -> List[FeedbackItem]:
        """Swap in corrections for incorrect items; unmatched items are kept as they are."""
        by_id = {c.question_id: c.correction for c in corrections}
        updated = []
        for item in feedback:
            correction = by_id.get(item.question_id)
            if correction and not item.is_correct:
                item = replace(item, explanation=correction)
            updated.append(item)
        return updated

    def get_deeper_explanation(self, text: str) -> Optional[str]:
        """Elaborate one explanation; None when nothing came back."""
        if not text or not text.strip():
            return None
        try:
            answer = self.generate(PromptBuilder.build_deeper_explanation_prompt(text), "deeper_explanation")
        except Exception as e:
            logger.error(f"Deeper explanation failed: {e}")
            return None
        return answer or None
