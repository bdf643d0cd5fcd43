"""Integration style tests for the OpenAI-compatible adapter."""

from __future__ import annotations

import pytest

from llm_unified_client.builders import build_simple_request
from llm_unified_client.exceptions import DecodeError, EmptyResultError
from llm_unified_client.factory import new_client
from llm_unified_client.history import ChatHistory
from llm_unified_client.types import EmbeddingRequest, Message, MessageRole, Request

PONG = {
    "choices": [{"message": {"role": "assistant", "content": "pong"}, "finish_reason": "stop"}],
    "usage": {"total_tokens": 5},
}


@pytest.mark.asyncio
async def test_generate_maps_chat_completion(recorder, make_config) -> None:
    handler = recorder(json_body=PONG)

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        response = await client.generate(Request(messages=[Message(role=MessageRole.USER, content="ping")]))

    assert response.content == "pong"
    assert response.role is MessageRole.ASSISTANT
    assert response.tokens_used == 5
    assert response.finish_reason == "stop"
    assert response.response_time >= 0
    assert response.stream is None

    request = handler.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert request.headers["Content-Type"] == "application/json"
    assert handler.payloads[0] == {
        "model": "gpt-3.5-turbo",
        "messages": [{"role": "user", "content": "ping"}],
        "stream": False,
    }


@pytest.mark.asyncio
async def test_deepseek_uses_its_own_defaults(recorder, make_config) -> None:
    handler = recorder(json_body=PONG)

    async with new_client(make_config("deepseek"), transport=handler.transport) as client:
        await client.generate(build_simple_request("ping"))

    assert str(handler.requests[0].url) == "https://api.deepseek.com/chat/completions"
    assert handler.payloads[0]["model"] == "deepseek-chat"


@pytest.mark.asyncio
async def test_parameter_precedence_request_over_config(recorder, make_config) -> None:
    handler = recorder(json_body=PONG)
    config = make_config(
        "openai",
        default_temperature=0.7,
        default_max_tokens=256,
        default_top_p=0.9,
        default_top_k=40,
    )
    request = build_simple_request("ping")
    request.set_temperature(0.0)
    request.set_model("gpt-4o")

    async with new_client(config, transport=handler.transport) as client:
        await client.generate(request)

    payload = handler.payloads[0]
    assert payload["temperature"] == 0.0
    assert payload["max_tokens"] == 256
    assert payload["top_p"] == 0.9
    assert payload["model"] == "gpt-4o"
    assert "top_k" not in payload


@pytest.mark.asyncio
async def test_names_and_extra_params_are_forwarded(recorder, make_config) -> None:
    handler = recorder(json_body=PONG)
    request = Request(
        messages=[Message(role=MessageRole.FUNCTION, content="{}", name="lookup")],
        extra_params={"response_format": {"type": "json_object"}, "stream": True},
    )

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        await client.generate(request)

    payload = handler.payloads[0]
    assert payload["messages"] == [{"role": "function", "content": "{}", "name": "lookup"}]
    assert payload["response_format"] == {"type": "json_object"}
    assert payload["stream"] is True


@pytest.mark.asyncio
async def test_generate_with_history_prepends_system_prompt(recorder, make_config) -> None:
    handler = recorder(json_body=PONG)
    history = ChatHistory()
    history.add_user_message("What is 5 + 3?")
    history.add_assistant_message("8")

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        await client.generate_with_history(history, "Multiply by 2", "You are a math tutor")

    assert handler.payloads[0]["messages"] == [
        {"role": "system", "content": "You are a math tutor"},
        {"role": "user", "content": "What is 5 + 3?"},
        {"role": "assistant", "content": "8"},
        {"role": "user", "content": "Multiply by 2"},
    ]
    assert len(history) == 2


@pytest.mark.asyncio
async def test_generate_with_history_without_system_prompt(recorder, make_config) -> None:
    handler = recorder(json_body=PONG)

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        await client.generate_with_history(ChatHistory(), "hi")

    assert handler.payloads[0]["messages"] == [{"role": "user", "content": "hi"}]


@pytest.mark.asyncio
async def test_empty_choices_is_an_error(recorder, make_config) -> None:
    handler = recorder(json_body={"choices": [], "usage": {"total_tokens": 0}})

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        with pytest.raises(EmptyResultError):
            await client.generate(build_simple_request("ping"))


@pytest.mark.asyncio
async def test_unexpected_shape_is_a_decode_error(recorder, make_config) -> None:
    handler = recorder(json_body={"choices": "nope"})

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        with pytest.raises(DecodeError):
            await client.generate(build_simple_request("ping"))


@pytest.mark.asyncio
async def test_create_embedding_orders_vectors_by_index(recorder, make_config) -> None:
    handler = recorder(
        json_body={
            "data": [
                {"index": 1, "embedding": [0.0, 1.0]},
                {"index": 0, "embedding": [1.0, 0.0]},
            ],
            "model": "text-embedding-3-small",
            "usage": {"total_tokens": 7},
        }
    )
    request = EmbeddingRequest(input=["first", "second"])

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        response = await client.create_embedding(request)

    assert str(handler.requests[0].url) == "https://api.openai.com/v1/embeddings"
    assert handler.payloads[0] == {"model": "text-embedding-3-small", "input": ["first", "second"]}
    assert len(response.embeddings) == len(request.input)
    assert response.embeddings == [[1.0, 0.0], [0.0, 1.0]]
    assert all(vector for vector in response.embeddings)
    assert response.model == "text-embedding-3-small"
    assert response.tokens_used == 7


@pytest.mark.asyncio
async def test_create_embedding_uses_configured_or_requested_model(recorder, make_config) -> None:
    body = {"data": [{"index": 0, "embedding": [0.5]}], "usage": {"total_tokens": 1}}
    handler = recorder(json_body=body)
    config = make_config("openai", default_model="text-embedding-3-large")

    async with new_client(config, transport=handler.transport) as client:
        configured = await client.create_embedding(EmbeddingRequest(input=["x"]))
        requested = await client.create_embedding(EmbeddingRequest(input=["x"], model="custom-embed"))

    assert [payload["model"] for payload in handler.payloads] == ["text-embedding-3-large", "custom-embed"]
    assert configured.model == "text-embedding-3-large"
    assert requested.model == "custom-embed"


@pytest.mark.asyncio
async def test_create_embedding_count_mismatch_is_a_decode_error(recorder, make_config) -> None:
    handler = recorder(json_body={"data": [{"index": 0, "embedding": [0.1]}]})

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        with pytest.raises(DecodeError):
            await client.create_embedding(EmbeddingRequest(input=["a", "b"]))


@pytest.mark.asyncio
async def test_create_embedding_empty_data_is_an_error(recorder, make_config) -> None:
    handler = recorder(json_body={"data": []})

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        with pytest.raises(EmptyResultError):
            await client.create_embedding(EmbeddingRequest(input=["a"]))


@pytest.mark.asyncio
@pytest.mark.parametrize("vector", [[], [0.1, None], [0.1, "0.2"], [True], None])
async def test_create_embedding_rejects_malformed_vectors(recorder, make_config, vector) -> None:
    handler = recorder(json_body={"data": [{"index": 0, "embedding": vector}]})

    async with new_client(make_config("openai"), transport=handler.transport) as client:
        with pytest.raises(DecodeError):
            await client.create_embedding(EmbeddingRequest(input=["a"]))
