"""
Typed content model for generated study material.

Attributes are snake_case; ``to_dict`` renders the camelCase keys used on the
wire and by the presentation layer.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Union

QUESTION_SUFFIX = "_question"


def generate_unique_id() -> str:
    """Return a fresh identifier; ids from model output are never reused."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class PageText:
    """Text of one physical page (1-based)."""
    page_number: int
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"pageNumber": self.page_number, "text": self.text}


@dataclass
class Lesson:
    id: str
    title: str
    start_page: int
    end_page: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "startPage": self.start_page,
            "endPage": self.end_page,
        }


@dataclass
class Chapter:
    id: str
    title: str
    start_page: int
    end_page: int
    lessons: Optional[List[Lesson]] = None
    is_analyzing: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "startPage": self.start_page,
            "endPage": self.end_page,
        }
        if self.lessons is not None:
            data["lessons"] = [lesson.to_dict() for lesson in self.lessons]
        if self.is_analyzing:
            data["isAnalyzing"] = True
        return data


# --------------------
# Interactive blocks
# --------------------
@dataclass(frozen=True)
class InteractiveBlock:
    """Base of the block union; ``type`` is the wire discriminator."""
    id: str

    type: ClassVar[str] = ""

    @property
    def is_question(self) -> bool:
        return self.type.endswith(QUESTION_SUFFIX)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type, **self._fields()}

    def _fields(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class ExplanationBlock(InteractiveBlock):
    text: str
    type: ClassVar[str] = "explanation"

    def _fields(self) -> Dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True)
class MathFormulaBlock(InteractiveBlock):
    latex: str
    type: ClassVar[str] = "math_formula"

    def _fields(self) -> Dict[str, Any]:
        return {"latex": self.latex}


@dataclass(frozen=True)
class MultipleChoiceQuestionBlock(InteractiveBlock):
    question: str
    options: List[str]
    correct_answer_index: int
    type: ClassVar[str] = "multiple_choice_question"

    @property
    def prompt_text(self) -> str:
        return self.question

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer_index]

    def _fields(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswerIndex": self.correct_answer_index,
        }


@dataclass(frozen=True)
class TrueFalseQuestionBlock(InteractiveBlock):
    question: str
    correct_answer: bool
    type: ClassVar[str] = "true_false_question"

    @property
    def prompt_text(self) -> str:
        return self.question

    def _fields(self) -> Dict[str, Any]:
        return {"question": self.question, "correctAnswer": self.correct_answer}


@dataclass(frozen=True)
class FillInTheBlankQuestionBlock(InteractiveBlock):
    """Blanks sit between consecutive parts: len(parts) == len(answers) + 1."""
    question_parts: List[str]
    correct_answers: List[str]
    type: ClassVar[str] = "fill_in_the_blank_question"

    @property
    def blank_count(self) -> int:
        return len(self.correct_answers)

    @property
    def prompt_text(self) -> str:
        return " ___ ".join(self.question_parts)

    def _fields(self) -> Dict[str, Any]:
        return {
            "questionParts": list(self.question_parts),
            "correctAnswers": list(self.correct_answers),
        }


@dataclass(frozen=True)
class OpenEndedQuestionBlock(InteractiveBlock):
    question: str
    type: ClassVar[str] = "open_ended_question"

    @property
    def prompt_text(self) -> str:
        return self.question

    def _fields(self) -> Dict[str, Any]:
        return {"question": self.question}


BLOCK_TYPES = {
    cls.type: cls
    for cls in (
        ExplanationBlock,
        MathFormulaBlock,
        MultipleChoiceQuestionBlock,
        TrueFalseQuestionBlock,
        FillInTheBlankQuestionBlock,
        OpenEndedQuestionBlock,
    )
}
EXPLANATORY_TYPES = frozenset({ExplanationBlock.type, MathFormulaBlock.type})
QUESTION_TYPES = frozenset(t for t in BLOCK_TYPES if t.endswith(QUESTION_SUFFIX))


@dataclass
class InteractiveContent:
    """One generated learning unit for a lesson."""
    id: str
    title: str
    content: List[InteractiveBlock] = field(default_factory=list)

    def questions(self) -> List[InteractiveBlock]:
        return [block for block in self.content if block.is_question]

    def explanation_text(self) -> str:
        return "\n".join(b.text for b in self.content if isinstance(b, ExplanationBlock))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": [block.to_dict() for block in self.content],
        }


# --------------------
# Answers and grading
# --------------------
AnswerValue = Union[int, bool, str, List[str]]


@dataclass(frozen=True)
class UserAnswer:
    question_id: str
    answer: AnswerValue


@dataclass(frozen=True)
class FeedbackItem:
    question_id: str
    is_correct: bool
    explanation: str
    question: Optional[str] = None
    user_answer: Optional[str] = None
    correct_answer: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "questionId": self.question_id,
            "isCorrect": self.is_correct,
            "explanation": self.explanation,
        }
        for key, value in (
            ("question", self.question),
            ("userAnswer", self.user_answer),
            ("correctAnswer", self.correct_answer),
        ):
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class AiCorrection:
    question_id: str
    correction: str

    def to_dict(self) -> Dict[str, Any]:
        return {"questionId": self.question_id, "correction": self.correction}


# --------------------
# Search and library
# --------------------
@dataclass(frozen=True)
class SearchSource:
    uri: str
    title: str


@dataclass
class SearchResult:
    sources: List[SearchSource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"sources": [{"uri": s.uri, "title": s.title} for s in self.sources]}


@dataclass
class SmartSearchResult:
    answer: str
    quote: str
    pages: str
    follow_ups: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "quote": self.quote,
            "pages": self.pages,
            "follow_ups": list(self.follow_ups),
        }


@dataclass
class BookSubCategory:
    sub_category: str
    books: List[str] = field(default_factory=list)


@dataclass
class BookCategory:
    category: str
    sub_categories: List[BookSubCategory] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "subCategories": [
                {"subCategory": s.sub_category, "books": list(s.books)}
                for s in self.sub_categories
            ],
        }
