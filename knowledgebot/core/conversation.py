"""Conversation history for a single chat session."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


class Outcome(str, Enum):
    """How a model turn came about."""

    OK = "ok"
    EMPTY = "empty"
    UNCONFIGURED = "unconfigured"
    CREDENTIAL_REJECTED = "credential_rejected"
    FAILED = "failed"

    @property
    def is_failure(self) -> bool:
        return self is not Outcome.OK


@dataclass(frozen=True)
class ChatMessage:
    """A single conversation turn."""

    role: Role
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    outcome: Outcome | None = None  # set on model turns only


class Conversation:
    """Append-only ordered list of chat messages.

    Messages are never edited or removed individually; ``reset`` discards
    the whole history when the session restarts.
    """

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    def append(self, role: Role, content: str, outcome: Outcome | None = None) -> ChatMessage:
        message = ChatMessage(role=role, content=content, outcome=outcome)
        self._messages.append(message)
        return message

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def reset(self) -> int:
        """Discard all messages. Returns the count of discarded messages."""
        count = len(self._messages)
        self._messages = []
        return count

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.messages)
