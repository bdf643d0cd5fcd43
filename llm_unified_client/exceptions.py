"""Exception hierarchy for the unified LLM client."""

from __future__ import annotations


class LLMClientError(RuntimeError):
    """Base exception for all client failures."""


class ConfigurationError(LLMClientError):
    """Raised when a client cannot be built from the supplied configuration."""


class UnsupportedProviderError(LLMClientError):
    """Raised when no adapter exists for the requested provider tag."""


class UnsupportedOperationError(LLMClientError):
    """Raised when an adapter does not implement the requested operation."""


class ProviderError(LLMClientError):
    """Raised when a provider call fails after the client was built."""

    def __init__(self, message: str, *, provider: str) -> None:
        super().__init__(message)
        self.provider = provider


class TransportError(ProviderError):
    """Network level failure while sending the request or reading the reply."""


class RequestTimeoutError(TransportError):
    """The call did not complete before its deadline."""


class RemoteAPIError(ProviderError):
    """The provider answered with a non-2xx status code."""

    def __init__(self, message: str, *, provider: str, status_code: int, body: str) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.body = body


class DecodeError(ProviderError):
    """The response body did not match the expected JSON shape."""


class EmptyResultError(ProviderError):
    """The provider succeeded but returned no choices or embeddings."""


__all__ = (
    "ConfigurationError",
    "DecodeError",
    "EmptyResultError",
    "LLMClientError",
    "ProviderError",
    "RemoteAPIError",
    "RequestTimeoutError",
    "TransportError",
    "UnsupportedOperationError",
    "UnsupportedProviderError",
)
