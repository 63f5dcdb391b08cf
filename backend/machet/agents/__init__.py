from machet.agents.base import (
    AgentContext,
    AgentResponse,
    BaseAgent,
    Complete,
    Partial,
    Reject,
    classify_response,
)
from machet.agents.basic import BasicAgent

__all__ = [
    "AgentContext",
    "AgentResponse",
    "BaseAgent",
    "BasicAgent",
    "Complete",
    "Partial",
    "Reject",
    "classify_response",
]
