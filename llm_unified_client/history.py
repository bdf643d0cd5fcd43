"""Ordered conversation log."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .types import Message, MessageRole


class ChatHistory:
    """Chronological list of chat messages, oldest first.

    Not synchronised; callers sharing one history across tasks must serialise
    access themselves.
    """

    def __init__(self, messages: Iterable[Message] | None = None) -> None:
        self._messages: list[Message] = list(messages or [])

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def add_message(self, role: MessageRole, content: str) -> None:
        self._messages.append(Message(role=MessageRole(role), content=content))

    def add_system_message(self, content: str) -> None:
        self.add_message(MessageRole.SYSTEM, content)

    def add_user_message(self, content: str) -> None:
        self.add_message(MessageRole.USER, content)

    def add_assistant_message(self, content: str) -> None:
        self.add_message(MessageRole.ASSISTANT, content)

    def get_messages(self) -> tuple[Message, ...]:
        """Return a read-only snapshot of the messages."""

        return tuple(self._messages)

    def get_last_message(self) -> Message | None:
        if not self._messages:
            return None
        return self._messages[-1]

    def truncate(self, n: int) -> None:
        """Keep only the latest *n* messages."""

        if n < 0:
            raise ValueError("truncate expects a non-negative message count")
        if len(self._messages) > n:
            self._messages = self._messages[len(self._messages) - n :]

    def clear(self) -> None:
        self._messages = []


__all__ = ("ChatHistory",)
