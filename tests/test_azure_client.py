"""Tests for the Azure OpenAI adapter."""

from __future__ import annotations

import pytest

from llm_unified_client.builders import build_simple_request
from llm_unified_client.exceptions import UnsupportedOperationError
from llm_unified_client.factory import new_client
from llm_unified_client.types import EmbeddingRequest, Message, MessageRole, Request

AZURE_URL = "https://example.openai.azure.com/openai/deployments/gpt4"
REPLY = {
    "choices": [{"message": {"role": "assistant", "content": "hello"}, "finish_reason": "length"}],
    "usage": {"total_tokens": 9},
}


@pytest.mark.asyncio
async def test_generate_uses_deployment_url_and_api_key_header(recorder, make_config) -> None:
    handler = recorder(json_body=REPLY)
    request = Request(messages=[Message(role=MessageRole.USER, content="hi", name="alice")])
    request.set_max_tokens(50)

    async with new_client(make_config("azure", base_url=AZURE_URL), transport=handler.transport) as client:
        response = await client.generate(request)

    sent = handler.requests[0]
    assert str(sent.url) == f"{AZURE_URL}/chat/completions?api-version=2023-12-01-preview"
    assert sent.headers["api-key"] == "test-key"
    assert "Authorization" not in sent.headers
    assert handler.payloads[0] == {
        "messages": [{"role": "user", "content": "hi", "name": "alice"}],
        "stream": False,
        "max_tokens": 50,
    }
    assert response.content == "hello"
    assert response.finish_reason == "length"
    assert response.tokens_used == 9


@pytest.mark.asyncio
async def test_api_version_can_be_overridden(recorder, make_config) -> None:
    handler = recorder(json_body=REPLY)
    config = make_config("azure", base_url=AZURE_URL, extra_config={"api_version": "2024-06-01"})

    async with new_client(config, transport=handler.transport) as client:
        await client.generate(build_simple_request("hi"))

    assert handler.requests[0].url.params["api-version"] == "2024-06-01"


@pytest.mark.asyncio
async def test_embeddings_are_not_supported(recorder, make_config) -> None:
    handler = recorder(json_body={})

    async with new_client(make_config("azure", base_url=AZURE_URL), transport=handler.transport) as client:
        with pytest.raises(UnsupportedOperationError):
            await client.create_embedding(EmbeddingRequest(input=["text"]))

    assert handler.requests == []
