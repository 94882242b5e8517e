import base64

import pytest

from study_processor.analyzers.study_tools import NO_TEXT_TO_SUMMARIZE, StudyToolsAnalyzer
from study_processor.utils.exceptions import ContentGenerationError, SearchError

from conftest import FakeClient


def _tools(client, retry_handler):
    return StudyToolsAnalyzer(client, retry_handler)


def test_summary_targets_quarter_of_words(retry_handler):
    client = FakeClient().queue("A short summary.")
    text = " ".join(["word"] * 400)
    summary = _tools(client, retry_handler).summarize_chapter_text(text, style="bullet points")

    assert summary == "A short summary."
    prompt = client.last_prompt
    assert "400 words" in prompt
    assert "approximately **100 words**" in prompt
    assert '"bullet points"' in prompt


def test_summary_empty_text_makes_no_call(retry_handler):
    client = FakeClient()
    assert _tools(client, retry_handler).summarize_chapter_text("   ") == NO_TEXT_TO_SUMMARIZE
    assert client.call_count == 0


def test_summary_failure_is_none(retry_handler):
    client = FakeClient().queue(ContentGenerationError("denied", status_code=403))
    assert _tools(client, retry_handler).summarize_chapter_text("some words here") is None


def test_proofread_returns_original_on_failure(retry_handler):
    client = FakeClient().queue("Fixed text.", ContentGenerationError("denied", status_code=403))
    tools = _tools(client, retry_handler)
    assert tools.proofread_page_text("Fixd txt.") == "Fixed text."
    assert tools.proofread_page_text("Fixd txt.") == "Fixd txt."


def test_material_search_parses_source_lines(retry_handler):
    client = FakeClient().queue(
        "Here are results:\n"
        "https://www.khanacademy.org/science/biology - Clear lessons on cell biology for beginners\n"
        "https://www.youtube.com/watch?v=abc - Animated overview of mitosis and meiosis\n"
        "https://www.youtube.com/watch?v=abc - Duplicate link\n"
        "not a source line"
    )
    result = _tools(client, retry_handler).search_for_materials("cell biology", "all")

    assert [s.uri for s in result.sources] == [
        "https://www.khanacademy.org/science/biology",
        "https://www.youtube.com/watch?v=abc",
    ]
    assert result.sources[1].title == "Animated overview of mitosis and meiosis"
    assert client.calls[0]["tools"]


def test_material_search_filter_instruction(retry_handler):
    client = FakeClient().queue("")
    result = _tools(client, retry_handler).search_for_materials("algebra", "video")
    assert result.sources == []
    assert "YouTube platform" in client.last_prompt


def test_material_search_errors(retry_handler):
    client = FakeClient().queue(
        ContentGenerationError("Response blocked due to SAFETY"),
        ContentGenerationError("403 PERMISSION_DENIED", status_code=403),
    )
    tools = _tools(client, retry_handler)
    with pytest.raises(SearchError, match="safety"):
        tools.search_for_materials("topic")
    with pytest.raises(SearchError):
        tools.search_for_materials("topic")
    with pytest.raises(SearchError):
        tools.search_for_materials("topic", "podcasts")
    assert tools.search_for_materials("   ").sources == []


def test_search_within_document(retry_handler):
    client = FakeClient().queue_json({
        "answer": "Mitochondria produce ATP.",
        "quote": "The mitochondrion is the powerhouse of the cell.",
        "pages": "p. 4",
        "follow_ups": ["What is ATP?", "What is a cell?", "How is energy stored?"],
    })
    result = _tools(client, retry_handler).search_within_document("--- PAGE 4 ---\nThe mitochondrion...", "What makes ATP?")

    assert result.pages == "p. 4"
    assert len(result.follow_ups) == 3
    assert client.calls[0]["response_schema"]["required"] == ["answer", "quote", "pages", "follow_ups"]


def test_search_within_document_empty_query(retry_handler):
    client = FakeClient()
    assert _tools(client, retry_handler).search_within_document("context", "") is None
    assert client.call_count == 0


def test_image_payload_strips_data_url():
    raw = b"\x89PNG fake bytes"
    encoded = base64.b64encode(raw).decode()
    data, mime = StudyToolsAnalyzer.decode_image_payload(f"data:image/jpeg;base64,{encoded}", "image/png")
    assert data == raw
    assert mime == "image/jpeg"

    data, mime = StudyToolsAnalyzer.decode_image_payload(encoded, "image/png")
    assert data == raw
    assert mime == "image/png"


def test_extract_text_from_image_sends_inline_part(retry_handler):
    client = FakeClient().queue("Line one\nLine two")
    encoded = base64.b64encode(b"image-bytes").decode()
    text = _tools(client, retry_handler).extract_text_from_image(f"data:image/png;base64,{encoded}")

    assert text == "Line one\nLine two"
    contents = client.last_prompt
    assert len(contents) == 2
    assert contents[0].inline_data.data == b"image-bytes"
    assert contents[0].inline_data.mime_type == "image/png"
    assert "Extract any text" in contents[1]


def test_extract_text_from_invalid_image(retry_handler):
    client = FakeClient()
    assert _tools(client, retry_handler).extract_text_from_image("not base64!!") is None
    assert client.call_count == 0


def test_categorize_books(retry_handler):
    client = FakeClient().queue_json([
        {"category": "Science", "subCategories": [{"subCategory": "Physics", "books": ["Optics"]}]},
    ])
    categories = _tools(client, retry_handler).categorize_books(["Optics", ""])

    assert categories[0].category == "Science"
    assert "- ID: 1, Title: Optics" in client.last_prompt
    assert _tools(FakeClient(), retry_handler).categorize_books([]) == []


def test_chat_sessions(retry_handler):
    client = FakeClient()
    tools = _tools(client, retry_handler)
    tools.create_chat()
    tools.create_chat_with_context("The Krebs cycle happens in mitochondria.")

    assert "study assistant" in client.chats[0]
    assert "The Krebs cycle happens in mitochondria." in client.chats[1]
