import json
from typing import Any, Dict, List, Optional

import pytest

from study_processor.content.models import PageText
from study_processor.utils.retry_handler import RetryHandler


class FakeClient:
    """Stands in for GeminiAPIClient with scripted responses.

    Each call consumes the next scripted item: a string is returned as the
    response text, an exception instance is raised.
    """

    model_name = "fake-model"

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []
        self.chats: List[str] = []

    def queue(self, *responses: Any) -> "FakeClient":
        self.responses.extend(responses)
        return self

    def queue_json(self, payload: Any) -> "FakeClient":
        return self.queue(json.dumps(payload))

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_prompt(self) -> Any:
        return self.calls[-1]["contents"] if self.calls else None

    def generate_text(self, contents, *, json_mode=False, response_schema=None, tools=None) -> str:
        self.calls.append({
            "contents": contents,
            "json_mode": json_mode,
            "response_schema": response_schema,
            "tools": tools,
        })
        if not self.responses:
            raise AssertionError("FakeClient ran out of scripted responses")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def create_chat(self, system_instruction: str) -> Dict[str, str]:
        self.chats.append(system_instruction)
        return {"system_instruction": system_instruction}


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def retry_handler(sleeps):
    return RetryHandler(sleep=sleeps.append)


@pytest.fixture
def ten_pages():
    return [PageText(page_number=n, text=f"Page {n} text about topic {n}.") for n in range(1, 11)]
