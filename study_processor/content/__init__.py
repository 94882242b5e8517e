"""Typed study content and its normalization"""

from .models import (
    AiCorrection,
    BookCategory,
    Chapter,
    ExplanationBlock,
    FeedbackItem,
    FillInTheBlankQuestionBlock,
    InteractiveBlock,
    InteractiveContent,
    Lesson,
    MathFormulaBlock,
    MultipleChoiceQuestionBlock,
    OpenEndedQuestionBlock,
    PageText,
    SearchResult,
    SearchSource,
    SmartSearchResult,
    TrueFalseQuestionBlock,
    UserAnswer,
)
from .normalizer import ContentNormalizer

__all__ = [
    "AiCorrection",
    "BookCategory",
    "Chapter",
    "ContentNormalizer",
    "ExplanationBlock",
    "FeedbackItem",
    "FillInTheBlankQuestionBlock",
    "InteractiveBlock",
    "InteractiveContent",
    "Lesson",
    "MathFormulaBlock",
    "MultipleChoiceQuestionBlock",
    "OpenEndedQuestionBlock",
    "PageText",
    "SearchResult",
    "SearchSource",
    "SmartSearchResult",
    "TrueFalseQuestionBlock",
    "UserAnswer",
]
