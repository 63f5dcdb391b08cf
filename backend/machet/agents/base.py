"""
Base agent abstraction — response variants, context and the agent protocol.

This is a separate, simpler way of driving a model than the tool loop: the
whole reply is labelled Complete, Reject or Partial and nothing is executed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from machet.chat.history import Turn


@dataclass(frozen=True)
class AgentResponse:
    text: str


@dataclass(frozen=True)
class Complete(AgentResponse):
    """Task completed; text is the result message."""


@dataclass(frozen=True)
class Reject(AgentResponse):
    """Task rejected; text carries the reason."""


@dataclass(frozen=True)
class Partial(AgentResponse):
    """Partially done; text describes what is left."""


def classify_response(text: str) -> AgentResponse:
    """Label a whole reply by keyword. "complete" wins over "reject"."""
    lowered = text.lower()
    if "complete" in lowered:
        return Complete(text)
    if "reject" in lowered:
        return Reject(text)
    return Partial(text)


@dataclass
class AgentContext:
    system_prompt: Optional[str]
    conversation_history: list[Turn] = field(default_factory=list)

    def add_message(self, turn: Turn):
        self.conversation_history.append(turn)


class BaseAgent(ABC):
    """Base class for agents.

    Every agent subclass must provide a description and implement
    async process_task(context, task) -> AgentResponse.
    """

    def __init__(self, description: str):
        self._description = description

    @property
    def description(self) -> str:
        return self._description

    @abstractmethod
    async def process_task(self, context: AgentContext, task: str) -> AgentResponse:
        ...
