"""
Conversation log — the append-only record of a session's turns.

Turns are frozen once created. The log only grows: there is no delete or
edit operation, and readers get an immutable snapshot.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class Turn:
    role: Role
    content: str

    def to_message(self) -> dict:
        """OpenAI-format message dict."""
        return {"role": self.role.value, "content": self.content}


class ConversationLog:
    """Ordered, append-only sequence of turns."""

    def __init__(self):
        self._turns: list[Turn] = []

    def append(self, turn: Turn):
        if not isinstance(turn, Turn):
            raise TypeError(f"expected Turn, got {type(turn).__name__}")
        self._turns.append(turn)

    def snapshot(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def to_messages(self) -> list[dict]:
        return [t.to_message() for t in self._turns]

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"ConversationLog({len(self._turns)} turns)"
