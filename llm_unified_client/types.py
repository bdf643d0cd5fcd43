"""Common types shared by every provider adapter."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ProviderName(str, Enum):
    """Supported LLM provider identifiers."""

    OPENAI = "openai"
    DEEPSEEK = "deepseek"
    QWEN = "qwen"
    AZURE = "azure"
    COHERE = "cohere"


class MessageRole(str, Enum):
    """Author of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"


@dataclass(slots=True, frozen=True)
class Message:
    """A single message in a conversation."""

    role: MessageRole
    content: str
    name: str | None = None


@dataclass(slots=True)
class Request:
    """Provider independent generation request.

    Optional sampling parameters use ``None`` for "not set"; adapters then fall
    back to the configured defaults. ``extra_params`` is merged verbatim into the
    outgoing payload.
    """

    messages: list[Message] = field(default_factory=list)
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None
    top_k: int | None = None
    stream: bool = False
    model: str | None = None
    extra_params: dict[str, Any] = field(default_factory=dict)

    def add_system_message(self, content: str) -> None:
        """Prepend a system message."""

        self.messages.insert(0, Message(role=MessageRole.SYSTEM, content=content))

    def add_user_message(self, content: str) -> None:
        self.messages.append(Message(role=MessageRole.USER, content=content))

    def add_assistant_message(self, content: str) -> None:
        self.messages.append(Message(role=MessageRole.ASSISTANT, content=content))

    def set_temperature(self, temperature: float) -> None:
        self.temperature = temperature

    def set_max_tokens(self, max_tokens: int) -> None:
        self.max_tokens = max_tokens

    def set_top_p(self, top_p: float) -> None:
        self.top_p = top_p

    def set_top_k(self, top_k: int) -> None:
        self.top_k = top_k

    def set_model(self, model: str) -> None:
        self.model = model

    def set_streaming(self, stream: bool) -> None:
        self.stream = stream


@dataclass(slots=True)
class StreamChunk:
    """Partial content of a streamed response."""

    content: str
    finish_reason: str | None = None
    done: bool = False


@dataclass(slots=True)
class Response:
    """Structured response returned by a provider adapter."""

    content: str
    role: MessageRole = MessageRole.ASSISTANT
    tokens_used: int = 0
    response_time: float = 0.0
    finish_reason: str | None = None
    # Reserved for streaming, never populated by the current adapters.
    stream: AsyncIterator[StreamChunk] | None = None


@dataclass(slots=True)
class EmbeddingRequest:
    """Texts to embed, in order."""

    input: list[str]
    model: str | None = None

    def __post_init__(self) -> None:
        self.input = list(self.input)
        if not self.input:
            raise ValueError("Embedding requests require at least one input text")


@dataclass(slots=True)
class EmbeddingResponse:
    """Embedding vectors positionally aligned with the request input."""

    embeddings: list[list[float]]
    model: str
    tokens_used: int = 0
    response_time: float = 0.0


__all__ = (
    "EmbeddingRequest",
    "EmbeddingResponse",
    "Message",
    "MessageRole",
    "ProviderName",
    "Request",
    "Response",
    "StreamChunk",
)
