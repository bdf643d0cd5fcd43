"""Cohere provider adapter."""

from __future__ import annotations

import time
from typing import Any, Mapping, Sequence

import httpx

from ..config import ClientConfig
from ..exceptions import ConfigurationError, DecodeError, EmptyResultError
from ..types import EmbeddingRequest, EmbeddingResponse, Message, MessageRole, ProviderName, Request, Response
from .base import BaseLLMClient, apply_sampling_parameters, decode_vector, usage_tokens

DEFAULT_BASE_URL = "https://api.cohere.ai/v1"
DEFAULT_EMBEDDING_MODEL = "embed-multilingual-v3.0"
DEFAULT_CHAT_MODEL = "command-r-plus"
EMBEDDING_INPUT_TYPE = "search_document"

COHERE_PARAMETERS = {
    "temperature": "temperature",
    "max_tokens": "max_tokens",
    "top_p": "p",
    "top_k": "k",
}

_HISTORY_ROLES = {
    MessageRole.USER: "USER",
    MessageRole.ASSISTANT: "CHATBOT",
}


def split_conversation(messages: Sequence[Message]) -> tuple[str, list[dict[str, str]]]:
    """Split *messages* into Cohere's ``message`` and ``chat_history`` fields.

    The final message becomes ``message`` when it was written by the user.
    Earlier user and assistant turns go to the history; system and function
    messages have no Cohere equivalent and are dropped.
    """

    message = ""
    history: list[dict[str, str]] = []
    last_index = len(messages) - 1
    for index, item in enumerate(messages):
        role = MessageRole(item.role)
        if role is MessageRole.USER and index == last_index:
            message = item.content
            continue
        label = _HISTORY_ROLES.get(role)
        if label is not None:
            history.append({"role": label, "message": item.content})
    return message, history


class CohereClient(BaseLLMClient):
    """Adapter for the Cohere chat and embed APIs."""

    display_name = "Cohere"

    def __init__(self, config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        if not config.api_key:
            raise ConfigurationError("API key is required")
        config = config.model_copy(
            deep=True,
            update={
                "base_url": config.base_url or DEFAULT_BASE_URL,
                "default_model": config.default_model or DEFAULT_EMBEDDING_MODEL,
            }
        )
        super().__init__(
            ProviderName.COHERE.value,
            config,
            default_headers={"Authorization": f"Bearer {config.api_key}"},
            transport=transport,
        )

    def _chat_endpoint(self) -> str:
        return "/chat"

    def _model_for(self, override: str | None) -> str:
        if override is not None:
            return override
        configured = self.config.default_model
        if not configured or configured == DEFAULT_EMBEDDING_MODEL:
            return DEFAULT_CHAT_MODEL
        return configured

    def _build_payload(self, request: Request) -> Mapping[str, Any]:
        message, history = split_conversation(request.messages)
        payload: dict[str, Any] = {
            "message": message,
            "model": self._model_for(request.model),
        }
        if history:
            payload["chat_history"] = history
        apply_sampling_parameters(payload, request, self.config, names=COHERE_PARAMETERS)
        payload.update(request.extra_params)
        return payload

    def _parse_response(self, data: Mapping[str, Any]) -> Response:
        text = data.get("text") or ""
        if not isinstance(text, str):
            raise DecodeError("Cohere response text is not a string", provider=self.name)
        return Response(
            content=text,
            role=MessageRole.ASSISTANT,
            tokens_used=usage_tokens(data, "meta", "billed_units", "input_tokens")
            + usage_tokens(data, "meta", "billed_units", "output_tokens"),
            finish_reason=data.get("finish_reason") or None,
        )

    async def create_embedding(
        self, request: EmbeddingRequest, *, timeout: float | None = None
    ) -> EmbeddingResponse:
        """Embed ``request.input`` as search documents."""

        start_time = time.perf_counter()
        model = request.model or self.config.default_model or DEFAULT_EMBEDDING_MODEL
        data = await self._post(
            "/embed",
            {
                "model": model,
                "texts": list(request.input),
                "input_type": EMBEDDING_INPUT_TYPE,
            },
            operation="create_embedding",
            timeout=timeout,
        )

        embeddings = data.get("embeddings")
        if embeddings is None:
            embeddings = []
        if not isinstance(embeddings, list):
            raise DecodeError("Cohere embedding response is malformed", provider=self.name)
        if not embeddings:
            raise EmptyResultError("no embeddings in response", provider=self.name)
        if len(embeddings) != len(request.input):
            raise DecodeError(
                f"Cohere returned {len(embeddings)} embeddings for {len(request.input)} inputs",
                provider=self.name,
            )

        return EmbeddingResponse(
            embeddings=[
                decode_vector(vector, provider=self.name, label=f"Cohere embedding {index}")
                for index, vector in enumerate(embeddings)
            ],
            model=model,
            tokens_used=usage_tokens(data, "meta", "billed_units", "input_tokens"),
            response_time=time.perf_counter() - start_time,
        )


__all__ = ("CohereClient", "split_conversation")
