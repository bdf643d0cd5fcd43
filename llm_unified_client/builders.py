"""Helpers for building requests and running common generation calls."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from .history import ChatHistory
from .types import Message, MessageRole, Request, Response

if TYPE_CHECKING:
    from .providers.base import BaseLLMClient


def build_simple_request(message: str) -> Request:
    """Return a request holding a single user message."""

    return Request(messages=[Message(role=MessageRole.USER, content=message)])


def build_request_with_system_prompt(system_prompt: str, user_message: str) -> Request:
    return Request(
        messages=[
            Message(role=MessageRole.SYSTEM, content=system_prompt),
            Message(role=MessageRole.USER, content=user_message),
        ]
    )


def build_chat_request(history: ChatHistory | Iterable[Message], user_message: str) -> Request:
    """Copy *history* in order and append *user_message* as the newest turn."""

    messages = list(history.get_messages() if isinstance(history, ChatHistory) else history)
    messages.append(Message(role=MessageRole.USER, content=user_message))
    return Request(messages=messages)


async def generate_simple(client: BaseLLMClient, prompt: str) -> Response:
    return await client.generate(build_simple_request(prompt))


async def generate_with_system_prompt(
    client: BaseLLMClient, system_prompt: str, user_message: str
) -> Response:
    return await client.generate(build_request_with_system_prompt(system_prompt, user_message))


async def generate_with_history(
    client: BaseLLMClient,
    history: ChatHistory | Iterable[Message],
    user_message: str,
    system_prompt: str = "",
) -> Response:
    return await client.generate_with_history(history, user_message, system_prompt)


__all__ = (
    "build_chat_request",
    "build_request_with_system_prompt",
    "build_simple_request",
    "generate_simple",
    "generate_with_history",
    "generate_with_system_prompt",
)
