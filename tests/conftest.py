from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from llm_unified_client.config import ClientConfig
from llm_unified_client.settings import get_settings


class RecordingHandler:
    """MockTransport handler that records requests and replays a canned reply."""

    def __init__(self, status_code: int = 200, json_body: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(status_code=self.status_code, text=self.text)
        return httpx.Response(status_code=self.status_code, json=self.json_body)

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(request.content.decode("utf-8")) for request in self.requests]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture()
def recorder() -> Callable[..., RecordingHandler]:
    return RecordingHandler


@pytest.fixture()
def make_config() -> Callable[..., ClientConfig]:
    def factory(provider: str = "openai", **overrides: Any) -> ClientConfig:
        overrides.setdefault("api_key", "test-key")
        return ClientConfig(provider=provider, **overrides)

    return factory


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
