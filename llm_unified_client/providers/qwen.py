"""Alibaba Qwen (DashScope) provider adapters."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import httpx

from ..config import ClientConfig
from ..exceptions import ConfigurationError, DecodeError, EmptyResultError
from ..types import Message, MessageRole, ProviderName, Request, Response
from .base import BaseLLMClient, apply_sampling_parameters, convert_messages, resolve_parameter, usage_tokens
from .openai import parse_chat_completion

COMPATIBLE_BASE_URL = "https://dashscope-intl.aliyuncs.com/compatible-mode/v1"
LEGACY_BASE_URL = "https://dashscope.aliyuncs.com/api/v1"
COMPATIBLE_DEFAULT_MODEL = "qwen3-next-80b-a3b-instruct"
LEGACY_DEFAULT_MODEL = "qwen-turbo"
DEFAULT_MAX_TOKENS = 1500

API_MODE_COMPATIBLE = "compatible"
API_MODE_LEGACY = "legacy"

QWEN_PARAMETERS = {
    "temperature": "temperature",
    "top_p": "top_p",
    "top_k": "top_k",
}

_ROLE_LABELS = {
    MessageRole.SYSTEM: "System",
    MessageRole.USER: "User",
    MessageRole.ASSISTANT: "Assistant",
    MessageRole.FUNCTION: "Function",
}


def resolve_api_mode(config: ClientConfig) -> str:
    """Pick the DashScope API flavour for *config*.

    The OpenAI-compatible API is used unless ``extra_config["api_mode"]`` is
    ``"legacy"``; the base URL is never inspected.
    """

    mode = config.extra_config.get("api_mode")
    if mode is None:
        return API_MODE_COMPATIBLE
    if mode not in (API_MODE_COMPATIBLE, API_MODE_LEGACY):
        raise ConfigurationError(
            f"Unknown Qwen api_mode {mode!r}; expected '{API_MODE_COMPATIBLE}' or '{API_MODE_LEGACY}'"
        )
    return mode


def build_prompt(messages: Iterable[Message]) -> str:
    """Fold a conversation into a single role-labelled prompt string."""

    segments = [
        f"{_ROLE_LABELS[MessageRole(message.role)]}: {message.content}" for message in messages
    ]
    segments.append(f"{_ROLE_LABELS[MessageRole.ASSISTANT]}:")
    return "\n\n".join(segments)


class _DashScopeClient(BaseLLMClient):
    display_name = "Qwen"

    def __init__(
        self,
        config: ClientConfig,
        *,
        default_base_url: str,
        default_model: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not config.api_key:
            raise ConfigurationError("API key is required")
        config = config.model_copy(
            deep=True,
            update={
                "base_url": config.base_url or default_base_url,
                "default_model": config.default_model or default_model,
            }
        )
        super().__init__(
            ProviderName.QWEN.value,
            config,
            default_headers={
                "Authorization": f"Bearer {config.api_key}",
                "X-DashScope-SSE": "disable",
            },
            transport=transport,
        )

    def _max_tokens(self, request: Request) -> int:
        return resolve_parameter(
            resolve_parameter(request.max_tokens, self.config.default_max_tokens),
            DEFAULT_MAX_TOKENS,
        )


class QwenClient(_DashScopeClient):
    """Adapter for the DashScope OpenAI-compatible chat endpoint."""

    def __init__(self, config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        super().__init__(
            config,
            default_base_url=COMPATIBLE_BASE_URL,
            default_model=COMPATIBLE_DEFAULT_MODEL,
            transport=transport,
        )

    def _chat_endpoint(self) -> str:
        return "/chat/completions"

    def _build_payload(self, request: Request) -> Mapping[str, Any]:
        payload: dict[str, Any] = {
            "model": self._model_for(request.model),
            "messages": convert_messages(request.messages, include_name=False),
            "max_tokens": self._max_tokens(request),
        }
        apply_sampling_parameters(payload, request, self.config, names=QWEN_PARAMETERS)
        # e.g. enable_thinking for models that support it
        payload.update(request.extra_params)
        return payload

    def _parse_response(self, data: Mapping[str, Any]) -> Response:
        return parse_chat_completion(
            data, provider=self.name, display_name=self.display_name, keep_role=False
        )


class QwenLegacyClient(_DashScopeClient):
    """Adapter for the DashScope native text-generation endpoint.

    This API takes a single prompt string, so the whole conversation, system
    messages included, is folded into role-labelled text.
    """

    def __init__(self, config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        super().__init__(
            config,
            default_base_url=LEGACY_BASE_URL,
            default_model=LEGACY_DEFAULT_MODEL,
            transport=transport,
        )

    def _chat_endpoint(self) -> str:
        return "/services/aigc/text-generation/generation"

    def _build_payload(self, request: Request) -> Mapping[str, Any]:
        parameters: dict[str, Any] = {"max_tokens": self._max_tokens(request)}
        apply_sampling_parameters(parameters, request, self.config, names=QWEN_PARAMETERS)
        parameters.update(request.extra_params)
        return {
            "model": self._model_for(request.model),
            "input": {"prompt": build_prompt(request.messages)},
            "parameters": parameters,
        }

    def _parse_response(self, data: Mapping[str, Any]) -> Response:
        output = data.get("output")
        if not isinstance(output, Mapping):
            raise DecodeError("Qwen response missing output", provider=self.name)
        text = output.get("text")
        if text is None:
            raise EmptyResultError("no text in Qwen response", provider=self.name)
        if not isinstance(text, str):
            raise DecodeError("Qwen response text is not a string", provider=self.name)
        return Response(
            content=text,
            role=MessageRole.ASSISTANT,
            tokens_used=usage_tokens(data, "usage", "total_tokens"),
            finish_reason=output.get("finish_reason") or None,
        )


__all__ = (
    "API_MODE_COMPATIBLE",
    "API_MODE_LEGACY",
    "QwenClient",
    "QwenLegacyClient",
    "build_prompt",
    "resolve_api_mode",
)
