from study_processor.content.models import (
    EXPLANATORY_TYPES,
    ExplanationBlock,
    FillInTheBlankQuestionBlock,
    MultipleChoiceQuestionBlock,
    TrueFalseQuestionBlock,
)
from study_processor.content.normalizer import ContentNormalizer


def test_chapters_reconciled_with_fresh_ids():
    raw = [
        {"id": "model-id", "title": "Ch1", "startPage": "1", "endPage": 5},
        {"title": "Ch2", "startPage": 4, "endPage": 10},
    ]
    chapters = ContentNormalizer.normalize_chapters(raw, total_pages=10)
    assert [(c.title, c.start_page, c.end_page) for c in chapters] == [("Ch1", 1, 3), ("Ch2", 4, 10)]
    assert chapters[0].id != "model-id"
    assert chapters[0].id != chapters[1].id


def test_outline_skips_entries_without_start():
    raw = {"chapters": [{"title": "No start"}, {"startPage": 2}, "junk"]}
    outline = ContentNormalizer.normalize_outline(raw)
    assert outline == [{"title": "Section 2", "startPage": 2, "endPage": 2}]


def test_lessons_are_not_clamped():
    lessons = ContentNormalizer.normalize_lessons([{"title": "L1", "startPage": 2, "endPage": 99}])
    assert lessons[0].end_page == 99


def test_lessons_with_inverted_range_dropped():
    lessons = ContentNormalizer.normalize_lessons([
        {"title": "Backwards", "startPage": 7, "endPage": 3},
        {"title": "Single", "startPage": 4, "endPage": 4},
    ])
    assert [(l.title, l.start_page, l.end_page) for l in lessons] == [("Single", 4, 4)]


def test_unknown_and_malformed_blocks_dropped():
    raw = [
        {"type": "explanation", "text": "Photosynthesis converts light."},
        {"type": "image", "url": "x.png"},
        {"type": "multiple_choice_question", "question": "Q?", "options": ["a", "b"], "correctAnswerIndex": 2},
        {"type": "true_false_question", "question": "Plants breathe?", "correctAnswer": "true"},
        {"type": ["explanation"], "text": "unhashable tag"},
        {"type": "math_formula"},
    ]
    blocks = ContentNormalizer.normalize_blocks(raw)
    assert [type(b) for b in blocks] == [ExplanationBlock, TrueFalseQuestionBlock]
    assert blocks[1].correct_answer is True


def test_allowed_types_filter():
    raw = [
        {"type": "explanation", "text": "Text"},
        {"type": "open_ended_question", "question": "Why?"},
    ]
    blocks = ContentNormalizer.normalize_blocks(raw, allowed_types=EXPLANATORY_TYPES)
    assert len(blocks) == 1
    assert blocks[0].type == "explanation"


def test_multiple_choice_decoded():
    raw = {"type": "multiple_choice_question", "question": "2+2?", "options": ["3", 4, "5"], "correctAnswerIndex": 1.0}
    block = ContentNormalizer.normalize_block(raw)
    assert isinstance(block, MultipleChoiceQuestionBlock)
    assert block.options == ["3", "4", "5"]
    assert block.correct_option == "4"


def test_fill_in_the_blank_parts_match_answers():
    exact = ContentNormalizer.normalize_block({
        "type": "fill_in_the_blank_question",
        "questionParts": ["Water boils at ", " degrees at ", " level."],
        "correctAnswers": ["100", "sea"],
    })
    padded = ContentNormalizer.normalize_block({
        "type": "fill_in_the_blank_question",
        "questionParts": ["The capital of France is"],
        "correctAnswers": ["Paris"],
    })
    too_few_answers = ContentNormalizer.normalize_block({
        "type": "fill_in_the_blank_question",
        "questionParts": ["A ", " B ", " C ", ""],
        "correctAnswers": ["x"],
    })
    no_answers = ContentNormalizer.normalize_block({
        "type": "fill_in_the_blank_question",
        "questionParts": ["A ", ""],
        "correctAnswers": [],
    })
    for block in (exact, padded):
        assert isinstance(block, FillInTheBlankQuestionBlock)
        assert len(block.correct_answers) == len(block.question_parts) - 1
        assert block.blank_count == len(block.correct_answers)
    assert padded.question_parts == ["The capital of France is", ""]
    assert too_few_answers is None
    assert no_answers is None


def test_feedback_and_corrections():
    feedback = ContentNormalizer.normalize_feedback([
        {"questionId": "q1", "isCorrect": False, "explanation": "Wrong."},
        {"questionId": "q2", "isCorrect": "maybe"},
        {"isCorrect": True},
    ])
    assert [(f.question_id, f.is_correct) for f in feedback] == [("q1", False)]

    corrections = ContentNormalizer.normalize_corrections([
        {"questionId": "q1", "correction": "Because..."},
        {"questionId": "q2", "correction": ""},
    ])
    assert [c.question_id for c in corrections] == ["q1"]


def test_smart_search_defaults():
    result = ContentNormalizer.normalize_smart_search({"answer": "42", "follow_ups": ["Why?", 3]})
    assert result.pages == "N/A"
    assert result.quote == ""
    assert result.follow_ups == ["Why?"]
    assert ContentNormalizer.normalize_smart_search({"answer": ""}) is None


def test_categories():
    categories = ContentNormalizer.normalize_categories([
        {"category": "Science", "subCategories": [{"subCategory": "Biology", "books": ["Cells", ""]}]},
        {"subCategories": []},
    ])
    assert len(categories) == 1
    assert categories[0].to_dict() == {
        "category": "Science",
        "subCategories": [{"subCategory": "Biology", "books": ["Cells"]}],
    }
