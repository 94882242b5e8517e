import json

from study_processor.parsers.response_parser import ResponseParser


def test_fenced_object_in_prose():
    payload = {"title": "Cells", "content": [{"type": "explanation", "text": "Cells divide."}]}
    text = "Here is the lesson:\n```json\n" + json.dumps(payload) + "\n```\nHope it helps."
    assert ResponseParser.extract_structured(text) == payload


def test_fenced_array_only():
    payload = [{"title": "Ch1", "startPage": 1, "endPage": 3}]
    text = "```json\n" + json.dumps(payload, indent=2) + "\n```"
    assert ResponseParser.extract_structured(text) == payload


def test_trailing_commas_repaired():
    assert ResponseParser.extract_structured("[1,2,3,]") == [1, 2, 3]
    assert ResponseParser.extract_structured('{"a":1,}') == {"a": 1}
    assert ResponseParser.extract_structured('{"a": [1, 2, ], }') == {"a": [1, 2]}


def test_garbage_returns_none():
    assert ResponseParser.extract_structured("no structure here at all") is None
    assert ResponseParser.extract_structured("") is None
    assert ResponseParser.extract_structured("   ") is None
    assert ResponseParser.extract_structured("closing only }") is None


def test_non_string_input_returns_none():
    assert ResponseParser.extract_structured(None) is None
    assert ResponseParser.extract_structured(42) is None


def test_invalid_json_returns_none():
    assert ResponseParser.extract_structured('{"a": 1 "b": 2}') is None
    assert ResponseParser.extract_structured("{unquoted: true}") is None


def test_end_before_start_returns_none():
    assert ResponseParser.extract_structured("] then [") is None


def test_valid_json_with_comma_bracket_inside_strings_is_untouched():
    payload = {"latex": "S = \\{1, 2, \\}", "items": ["a, ]", "b, }"]}
    text = "Result below.\n```json\n" + json.dumps(payload) + "\n```\nDone."
    assert ResponseParser.extract_structured(text) == payload
