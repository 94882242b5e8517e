import json

from processing_config import ProcessingConfig
from study_processor.analyzers.structure_analyzer import DocumentStructureAnalyzer
from study_processor.content.models import Chapter, PageText
from study_processor.utils.exceptions import ContentGenerationError

from conftest import FakeClient


def _analyzer(client, retry_handler):
    return DocumentStructureAnalyzer(client, retry_handler)


def test_overlapping_chapters_reconciled(ten_pages, retry_handler):
    client = FakeClient().queue_json([
        {"title": "Ch1", "startPage": 1, "endPage": 5},
        {"title": "Ch2", "startPage": 4, "endPage": 10},
    ])
    chapters = _analyzer(client, retry_handler).analyze_document_structure(ten_pages)

    assert [(c.title, c.start_page, c.end_page) for c in chapters] == [("Ch1", 1, 3), ("Ch2", 4, 10)]
    assert client.calls[0]["json_mode"] is True
    assert "--- PAGE 1 ---" in client.last_prompt
    assert "--- PAGE 10 ---" in client.last_prompt


def test_last_chapter_forced_to_total(ten_pages, retry_handler):
    client = FakeClient().queue('```json\n[{"title": "Only", "startPage": 1, "endPage": 4},]\n```')
    chapters = _analyzer(client, retry_handler).analyze_document_structure(ten_pages)
    assert [(c.start_page, c.end_page) for c in chapters] == [(1, 10)]


def test_unparseable_response_falls_back_to_full_document(ten_pages, retry_handler):
    client = FakeClient().queue("I could not find any chapters, sorry.")
    chapters = _analyzer(client, retry_handler).analyze_document_structure(ten_pages)
    assert len(chapters) == 1
    assert chapters[0].title == ProcessingConfig.FULL_DOCUMENT_TITLE
    assert (chapters[0].start_page, chapters[0].end_page) == (1, 10)


def test_failed_call_falls_back_after_retries(ten_pages, retry_handler, sleeps):
    client = FakeClient().queue(*[ContentGenerationError("500 INTERNAL", status_code=500)] * 3)
    chapters = _analyzer(client, retry_handler).analyze_document_structure(ten_pages)
    assert client.call_count == 3
    assert len(sleeps) == 2
    assert chapters[0].title == ProcessingConfig.FULL_DOCUMENT_TITLE


def test_all_chapters_outside_document_falls_back(ten_pages, retry_handler):
    client = FakeClient().queue_json([{"title": "Ghost", "startPage": 30, "endPage": 40}])
    chapters = _analyzer(client, retry_handler).analyze_document_structure(ten_pages)
    assert [(c.start_page, c.end_page) for c in chapters] == [(1, 10)]


def test_empty_document_makes_no_call(retry_handler):
    client = FakeClient()
    assert _analyzer(client, retry_handler).analyze_document_structure([]) == []
    assert client.call_count == 0


def test_prompt_limited_to_first_pages(retry_handler):
    pages = [PageText(page_number=n, text=f"p{n}") for n in range(1, ProcessingConfig.MAX_STRUCTURE_PAGES + 6)]
    client = FakeClient().queue_json([{"title": "All", "startPage": 1, "endPage": 2}])
    chapters = _analyzer(client, retry_handler).analyze_document_structure(pages)

    last_sent = ProcessingConfig.MAX_STRUCTURE_PAGES
    assert f"--- PAGE {last_sent} ---" in client.last_prompt
    assert f"--- PAGE {last_sent + 1} ---" not in client.last_prompt
    assert chapters[0].end_page == len(pages)


def _chapter():
    return Chapter(id="c1", title="Genetics", start_page=3, end_page=6)


def test_lessons_parsed(retry_handler):
    client = FakeClient().queue_json({"lessons": [
        {"title": "DNA", "startPage": 3, "endPage": 4},
        {"title": "RNA", "startPage": 5, "endPage": 6},
    ]})
    lessons = _analyzer(client, retry_handler).analyze_chapter_for_lessons("Genetics text", _chapter())
    assert [(l.title, l.start_page, l.end_page) for l in lessons] == [("DNA", 3, 4), ("RNA", 5, 6)]
    assert "[3, 6]" in client.last_prompt


def test_lessons_unparseable_gives_empty_list(retry_handler):
    client = FakeClient().queue("not json")
    assert _analyzer(client, retry_handler).analyze_chapter_for_lessons("text", _chapter()) == []


def test_lessons_call_failure_gives_none(retry_handler):
    client = FakeClient().queue(ContentGenerationError("403 PERMISSION_DENIED", status_code=403))
    assert _analyzer(client, retry_handler).analyze_chapter_for_lessons("text", _chapter()) is None
    assert client.call_count == 1


def test_lessons_empty_text_makes_no_call(retry_handler):
    client = FakeClient()
    assert _analyzer(client, retry_handler).analyze_chapter_for_lessons("  ", _chapter()) == []
    assert client.call_count == 0


def test_long_chapter_text_truncated_with_marker(retry_handler):
    client = FakeClient().queue(json.dumps([]))
    text = "x" * (ProcessingConfig.MAX_CHAPTER_CHARS + 100)
    _analyzer(client, retry_handler).analyze_chapter_for_lessons(text, _chapter())
    assert ProcessingConfig.TRUNCATION_MARKER in client.last_prompt
    assert "x" * (ProcessingConfig.MAX_CHAPTER_CHARS + 1) not in client.last_prompt


def test_inverted_lesson_range_dropped(retry_handler):
    client = FakeClient().queue_json([
        {"title": "L1", "startPage": 7, "endPage": 3},
        {"title": "L2", "startPage": 4, "endPage": 5},
    ])
    lessons = _analyzer(client, retry_handler).analyze_chapter_for_lessons("Genetics text", _chapter())
    assert [(l.title, l.start_page, l.end_page) for l in lessons] == [("L2", 4, 5)]
