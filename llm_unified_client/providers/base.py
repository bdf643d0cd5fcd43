"""Base implementation for provider specific HTTP clients."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

import httpx

from ..builders import build_chat_request
from ..config import ClientConfig
from ..exceptions import (
    DecodeError,
    ProviderError,
    RemoteAPIError,
    RequestTimeoutError,
    TransportError,
    UnsupportedOperationError,
)
from ..types import EmbeddingRequest, EmbeddingResponse, Message, MessageRole, Request, Response

if TYPE_CHECKING:
    from ..history import ChatHistory

logger = logging.getLogger(__name__)


class BaseLLMClient:
    """Shared HTTP transport and request handling for LLM providers.

    Subclasses supply the endpoint, payload and response mapping for one
    provider. Instances hold no per-call state, so a single client may serve
    concurrent calls.
    """

    display_name: str = "LLM"

    def __init__(
        self,
        name: str,
        config: ClientConfig,
        *,
        default_headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._name = name
        self._config = config
        headers = {"Content-Type": "application/json"}
        headers.update(default_headers or {})
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "",
            timeout=config.timeout,
            headers=headers,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> ClientConfig:
        return self._config

    def get_config(self) -> ClientConfig:
        """Return the configuration this client was built with, defaults applied."""

        return self._config

    async def __aenter__(self) -> "BaseLLMClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the underlying HTTP client."""

        await self._client.aclose()

    async def generate(self, request: Request, *, timeout: float | None = None) -> Response:
        """Send *request* to the provider and return the first result.

        *timeout* is a deadline in seconds for the whole round trip, capped by
        ``config.timeout``.
        """

        start_time = time.perf_counter()
        payload = self._build_payload(request)
        data = await self._post(self._chat_endpoint(), payload, operation="generate", timeout=timeout)
        response = self._parse_response(data)
        response.response_time = time.perf_counter() - start_time
        return response

    async def generate_with_history(
        self,
        history: ChatHistory | Sequence[Message],
        user_message: str,
        system_prompt: str = "",
        *,
        timeout: float | None = None,
    ) -> Response:
        """Generate a reply to *user_message* given the prior conversation.

        The history itself is left untouched; a new request is assembled from a
        copy of its messages.
        """

        request = build_chat_request(history, user_message)
        if system_prompt:
            request.add_system_message(system_prompt)
        return await self.generate(request, timeout=timeout)

    async def create_embedding(
        self, request: EmbeddingRequest, *, timeout: float | None = None
    ) -> EmbeddingResponse:
        """Embed the request texts. Adapters without embedding support refuse."""

        raise UnsupportedOperationError(
            f"embeddings not supported for {self.display_name} provider yet"
        )

    async def _post(
        self,
        path: str,
        payload: Mapping[str, Any],
        *,
        operation: str,
        timeout: float | None = None,
    ) -> Any:
        """POST *payload* as JSON and return the decoded body of a 2xx reply."""

        start_time = time.perf_counter()
        self._log_event("llm.request.start", operation)
        try:
            response = await self._send(path, payload, timeout)
            data = self._decode(response)
        except ProviderError as exc:
            self._log_event(
                "llm.request.failure",
                operation,
                duration=time.perf_counter() - start_time,
                error=str(exc),
            )
            raise

        self._log_event(
            "llm.request.success",
            operation,
            duration=time.perf_counter() - start_time,
            status_code=response.status_code,
        )
        return data

    async def _send(self, path: str, payload: Mapping[str, Any], timeout: float | None) -> httpx.Response:
        try:
            post = self._client.post(
                path,
                json=payload,
                params=self._query_params(),
                timeout=self._effective_timeout(timeout),
            )
            if timeout is None:
                return await post
            # httpx bounds each phase separately; this bounds the whole call.
            return await asyncio.wait_for(post, timeout=self._effective_timeout(timeout))
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            raise RequestTimeoutError(
                f"{self.display_name} request timed out", provider=self._name
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                f"failed to send {self.display_name} request: {exc}", provider=self._name
            ) from exc

    def _decode(self, response: httpx.Response) -> Any:
        if not response.is_success:
            logger.debug(
                "Provider %s responded with error %s: %s",
                self._name,
                response.status_code,
                response.text,
            )
            raise RemoteAPIError(
                f"{self.display_name} API error {response.status_code}: {response.text}",
                provider=self._name,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError(
                f"{self.display_name} returned invalid JSON", provider=self._name
            ) from exc
        if not isinstance(data, Mapping):
            raise DecodeError(
                f"{self.display_name} response is not a JSON object", provider=self._name
            )
        return data

    def _effective_timeout(self, timeout: float | None) -> Any:
        if timeout is None:
            return httpx.USE_CLIENT_DEFAULT
        return min(timeout, self._config.timeout)

    def _query_params(self) -> dict[str, str] | None:
        """Query string parameters appended to every request."""

        return None

    def _chat_endpoint(self) -> str:
        """Return the endpoint path for chat generation."""

        raise NotImplementedError

    def _build_payload(self, request: Request) -> Mapping[str, Any]:
        """Serialise the request payload for the provider."""

        raise NotImplementedError

    def _parse_response(self, data: Mapping[str, Any]) -> Response:
        """Parse the provider specific response payload."""

        raise NotImplementedError

    def _model_for(self, override: str | None) -> str:
        return override if override is not None else self._config.default_model or ""

    def _log_event(
        self,
        action: str,
        operation: str,
        *,
        duration: float | None = None,
        status_code: int | None = None,
        error: str | None = None,
    ) -> None:
        extra: dict[str, Any] = {"provider": self._name, "operation": operation}
        if duration is not None:
            extra["duration"] = duration
        if status_code is not None:
            extra["status_code"] = status_code
        if error is not None:
            extra["error"] = error
        logger.info(action, extra=extra)


def resolve_parameter(value: Any, default: Any) -> Any:
    """Return the request level *value* when set, otherwise the config *default*."""

    return value if value is not None else default


def apply_sampling_parameters(
    payload: dict[str, Any],
    request: Request,
    config: ClientConfig,
    *,
    names: Mapping[str, str],
) -> None:
    """Copy set sampling parameters into *payload* under provider specific keys.

    *names* maps ``temperature``/``max_tokens``/``top_p``/``top_k`` to the key
    the provider expects; parameters missing from *names* are not sent.
    """

    sources = {
        "temperature": (request.temperature, config.default_temperature),
        "max_tokens": (request.max_tokens, config.default_max_tokens),
        "top_p": (request.top_p, config.default_top_p),
        "top_k": (request.top_k, config.default_top_k),
    }
    for parameter, key in names.items():
        value = resolve_parameter(*sources[parameter])
        if value is not None:
            payload[key] = value


def convert_messages(messages: Iterable[Message], *, include_name: bool = True) -> list[dict[str, Any]]:
    """Render messages in the OpenAI chat format."""

    converted: list[dict[str, Any]] = []
    for message in messages:
        item: dict[str, Any] = {
            "role": MessageRole(message.role).value,
            "content": message.content,
        }
        if include_name and message.name:
            item["name"] = message.name
        converted.append(item)
    return converted


def coerce_role(value: Any) -> MessageRole:
    try:
        return MessageRole(value)
    except ValueError:
        return MessageRole.ASSISTANT


def usage_tokens(data: Mapping[str, Any], *path: str) -> int:
    """Follow *path* through nested objects and return the integer found, or 0."""

    current: Any = data
    for key in path:
        if not isinstance(current, Mapping):
            return 0
        current = current.get(key)
    if isinstance(current, bool) or not isinstance(current, (int, float)):
        return 0
    return int(current)


def decode_vector(values: Any, *, provider: str, label: str) -> list[float]:
    """Return *values* as a non-empty list of floats or raise :class:`DecodeError`."""

    if not isinstance(values, list) or not values:
        raise DecodeError(f"{label} is empty or not a list", provider=provider)
    try:
        return [_as_float(value) for value in values]
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"{label} contains a non-numeric value", provider=provider) from exc


def _as_float(value: Any) -> float:
    if isinstance(value, (bool, str)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    return float(value)


__all__ = (
    "BaseLLMClient",
    "apply_sampling_parameters",
    "coerce_role",
    "convert_messages",
    "decode_vector",
    "resolve_parameter",
    "usage_tokens",
)
