"""OpenAI-compatible provider adapter (OpenAI, DeepSeek)."""

from __future__ import annotations

import time
from typing import Any, Mapping

import httpx

from ..config import ClientConfig
from ..exceptions import ConfigurationError, DecodeError, EmptyResultError
from ..types import EmbeddingRequest, EmbeddingResponse, MessageRole, ProviderName, Request, Response
from .base import (
    BaseLLMClient,
    apply_sampling_parameters,
    coerce_role,
    convert_messages,
    decode_vector,
    usage_tokens,
)

DEFAULT_BASE_URLS = {
    ProviderName.OPENAI: "https://api.openai.com/v1",
    ProviderName.DEEPSEEK: "https://api.deepseek.com",
}
DEFAULT_MODELS = {
    ProviderName.OPENAI: "gpt-3.5-turbo",
    ProviderName.DEEPSEEK: "deepseek-chat",
}
DISPLAY_NAMES = {
    ProviderName.OPENAI: "OpenAI",
    ProviderName.DEEPSEEK: "DeepSeek",
}
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"

OPENAI_PARAMETERS = {
    "temperature": "temperature",
    "max_tokens": "max_tokens",
    "top_p": "top_p",
}


class OpenAICompatibleClient(BaseLLMClient):
    """Adapter for OpenAI Chat Completions style APIs."""

    def __init__(self, config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        if not config.api_key:
            raise ConfigurationError("API key is required")

        provider = config.provider if config.provider in DEFAULT_BASE_URLS else ProviderName.OPENAI
        config = config.model_copy(
            deep=True,
            update={
                "base_url": config.base_url or DEFAULT_BASE_URLS[provider],
                "default_model": config.default_model or DEFAULT_MODELS[provider],
            }
        )
        self.display_name = DISPLAY_NAMES[provider]
        self._chat_default_model = DEFAULT_MODELS[provider]
        super().__init__(
            provider.value,
            config,
            default_headers={"Authorization": f"Bearer {config.api_key}"},
            transport=transport,
        )

    def _chat_endpoint(self) -> str:
        return "/chat/completions"

    def _build_payload(self, request: Request) -> Mapping[str, Any]:
        payload: dict[str, Any] = {
            "model": self._model_for(request.model),
            "messages": convert_messages(request.messages),
            "stream": request.stream,
        }
        apply_sampling_parameters(payload, request, self.config, names=OPENAI_PARAMETERS)
        payload.update(request.extra_params)
        return payload

    def _parse_response(self, data: Mapping[str, Any]) -> Response:
        return parse_chat_completion(data, provider=self.name, display_name=self.display_name)

    async def create_embedding(
        self, request: EmbeddingRequest, *, timeout: float | None = None
    ) -> EmbeddingResponse:
        """Embed ``request.input`` with the ``/embeddings`` endpoint."""

        start_time = time.perf_counter()
        model = self._embedding_model(request.model)
        data = await self._post(
            "/embeddings",
            {"model": model, "input": list(request.input)},
            operation="create_embedding",
            timeout=timeout,
        )

        embeddings = self._ordered_embeddings(data, expected=len(request.input))
        return EmbeddingResponse(
            embeddings=embeddings,
            model=data.get("model") or model,
            tokens_used=usage_tokens(data, "usage", "total_tokens"),
            response_time=time.perf_counter() - start_time,
        )

    def _embedding_model(self, override: str | None) -> str:
        if override is not None:
            return override
        configured = self.config.default_model
        if not configured or configured == self._chat_default_model:
            return DEFAULT_EMBEDDING_MODEL
        return configured

    def _ordered_embeddings(self, data: Mapping[str, Any], *, expected: int) -> list[list[float]]:
        items = data.get("data")
        if not isinstance(items, list):
            raise DecodeError(f"{self.display_name} embedding response missing data list", provider=self.name)
        if not items:
            raise EmptyResultError("no embeddings in response", provider=self.name)

        by_index: dict[int, list[float]] = {}
        for position, item in enumerate(items):
            if not isinstance(item, Mapping):
                raise DecodeError(
                    f"{self.display_name} embedding item {position} is malformed", provider=self.name
                )
            index = item.get("index", position)
            if not isinstance(index, int) or index in by_index:
                raise DecodeError(
                    f"{self.display_name} embedding item {position} has invalid index {index!r}",
                    provider=self.name,
                )
            by_index[index] = decode_vector(
                item.get("embedding"),
                provider=self.name,
                label=f"{self.display_name} embedding {index}",
            )

        if sorted(by_index) != list(range(expected)):
            raise DecodeError(
                f"{self.display_name} returned {len(by_index)} embeddings for {expected} inputs",
                provider=self.name,
            )
        return [by_index[index] for index in range(expected)]


def parse_chat_completion(
    data: Mapping[str, Any],
    *,
    provider: str,
    display_name: str,
    keep_role: bool = True,
) -> Response:
    """Map an OpenAI shaped chat completion body onto a :class:`Response`."""

    choices = data.get("choices") or []
    if not isinstance(choices, list):
        raise DecodeError(f"{display_name} response choices is not a list", provider=provider)
    if not choices:
        raise EmptyResultError(f"no choices in {display_name} response", provider=provider)

    first_choice = choices[0]
    if not isinstance(first_choice, Mapping):
        raise DecodeError(f"{display_name} response choice is malformed", provider=provider)
    message = first_choice.get("message") or {}
    if not isinstance(message, Mapping):
        raise DecodeError(f"{display_name} response message is malformed", provider=provider)

    content = message.get("content") or ""
    if not isinstance(content, str):
        raise DecodeError(f"{display_name} response content is not text", provider=provider)

    return Response(
        content=content,
        role=coerce_role(message.get("role")) if keep_role else MessageRole.ASSISTANT,
        tokens_used=usage_tokens(data, "usage", "total_tokens"),
        finish_reason=first_choice.get("finish_reason") or None,
    )


__all__ = ("OpenAICompatibleClient", "parse_chat_completion")
