"""Unified client over OpenAI-compatible, Qwen, Azure OpenAI and Cohere APIs."""

from __future__ import annotations

from .builders import (
    build_chat_request,
    build_request_with_system_prompt,
    build_simple_request,
    generate_simple,
    generate_with_history,
    generate_with_system_prompt,
)
from .config import ClientConfig
from .exceptions import (
    ConfigurationError,
    DecodeError,
    EmptyResultError,
    LLMClientError,
    ProviderError,
    RemoteAPIError,
    RequestTimeoutError,
    TransportError,
    UnsupportedOperationError,
    UnsupportedProviderError,
)
from .factory import (
    new_azure_client,
    new_client,
    new_cohere_client,
    new_openai_compatible_client,
    new_qwen_client,
)
from .history import ChatHistory
from .providers import BaseLLMClient
from .settings import LLMSettings, get_settings
from .similarity import cosine_similarity
from .types import (
    EmbeddingRequest,
    EmbeddingResponse,
    Message,
    MessageRole,
    ProviderName,
    Request,
    Response,
    StreamChunk,
)

__all__ = (
    "BaseLLMClient",
    "ChatHistory",
    "ClientConfig",
    "ConfigurationError",
    "DecodeError",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "EmptyResultError",
    "LLMClientError",
    "LLMSettings",
    "Message",
    "MessageRole",
    "ProviderError",
    "ProviderName",
    "RemoteAPIError",
    "Request",
    "RequestTimeoutError",
    "Response",
    "StreamChunk",
    "TransportError",
    "UnsupportedOperationError",
    "UnsupportedProviderError",
    "build_chat_request",
    "build_request_with_system_prompt",
    "build_simple_request",
    "cosine_similarity",
    "generate_simple",
    "generate_with_history",
    "generate_with_system_prompt",
    "get_settings",
    "new_azure_client",
    "new_client",
    "new_cohere_client",
    "new_openai_compatible_client",
    "new_qwen_client",
)
