from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from study_processor.api import client as client_module
from study_processor.api.client import GeminiAPIClient
from study_processor.utils.exceptions import ClientInitializationError, ContentGenerationError
from study_processor.utils.retry_handler import RetryHandler

MODEL = {"model_name": "gemini-2.5-flash", "generation_config": {"temperature": 0.3}, "safety_settings": None}


class FakeModels:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def generate_content(self, model, contents, config):
        self.requests.append({"model": model, "contents": contents, "config": config})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _sdk(*outcomes):
    return SimpleNamespace(models=FakeModels(outcomes), chats=SimpleNamespace(create=lambda **kw: kw))


def _response(text, finish_reason="STOP", block_reason=None):
    return SimpleNamespace(
        text=text,
        prompt_feedback=SimpleNamespace(block_reason=block_reason),
        candidates=[SimpleNamespace(finish_reason=finish_reason)],
    )


def test_missing_api_key_fails_at_construction(monkeypatch):
    monkeypatch.setattr(client_module, "get_api_key", lambda: None)
    with pytest.raises(ClientInitializationError):
        GeminiAPIClient(MODEL)


def test_sdk_construction_failure(monkeypatch):
    def broken(api_key):
        raise ValueError("bad key format")

    monkeypatch.setattr(client_module, "build_client", broken)
    with pytest.raises(ClientInitializationError, match="bad key format"):
        GeminiAPIClient(MODEL, api_key="test-key")


def test_generate_text_json_mode():
    sdk = _sdk(_response('  {"a": 1}  '))
    api = GeminiAPIClient(MODEL, api_key="test-key", client=sdk)

    assert api.generate_text("prompt", json_mode=True) == '{"a": 1}'
    request = sdk.models.requests[0]
    assert request["model"] == "gemini-2.5-flash"
    assert request["config"]["response_mime_type"] == "application/json"
    assert request["config"]["temperature"] == 0.3


def test_server_error_carries_status_and_is_transient():
    error = genai_errors.ServerError(500, {"error": {"code": 500, "message": "boom", "status": "INTERNAL"}})
    api = GeminiAPIClient(MODEL, api_key="test-key", client=_sdk(error))

    with pytest.raises(ContentGenerationError) as excinfo:
        api.generate_text("prompt")
    assert excinfo.value.status_code == 500
    assert RetryHandler.is_transient_error(excinfo.value)


def test_blocked_prompt_raises():
    api = GeminiAPIClient(MODEL, api_key="test-key", client=_sdk(_response(None, block_reason="SAFETY")))
    with pytest.raises(ContentGenerationError, match="SAFETY"):
        api.generate_text("prompt")


def test_safety_finish_raises_and_empty_text_is_blank():
    api = GeminiAPIClient(
        MODEL, api_key="test-key",
        client=_sdk(_response("partial", finish_reason="SAFETY"), _response(None)),
    )
    with pytest.raises(ContentGenerationError, match="SAFETY"):
        api.generate_text("prompt")
    assert api.generate_text("prompt") == ""


def test_create_chat_passes_system_instruction():
    api = GeminiAPIClient(MODEL, api_key="test-key", client=_sdk())
    chat = api.create_chat("Be helpful.")
    assert chat["model"] == "gemini-2.5-flash"
    assert chat["config"]["system_instruction"] == "Be helpful."
