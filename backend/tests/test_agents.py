"""
Tests for response classification and BasicAgent.
"""

import pytest

from machet.agents import (
    AgentContext,
    AgentResponse,
    BasicAgent,
    Complete,
    Partial,
    Reject,
    classify_response,
)
from machet.chat.history import Role, Turn
from machet.errors import ProviderError


class TestClassifyResponse:
    """Keyword labelling of whole replies."""

    @pytest.mark.parametrize("text,expected", [
        ("The task is complete.", Complete),
        ("COMPLETED the refactor", Complete),
        ("I must reject this request.", Reject),
        ("Rejected: out of scope", Reject),
        ("Working on it, half done.", Partial),
        ("", Partial),
    ])
    def test_labels(self, text, expected):
        response = classify_response(text)
        assert type(response) is expected
        assert response.text == text

    def test_complete_wins_over_reject(self):
        assert isinstance(classify_response("I reject nothing, the work is complete"), Complete)

    def test_variants_share_base(self):
        assert all(issubclass(cls, AgentResponse) for cls in (Complete, Reject, Partial))


class TestBasicAgent:
    """Single request per task, context updated after a reply."""

    @pytest.mark.asyncio
    async def test_process_task_updates_context(self, fake_backend):
        backend = fake_backend(["All done, task complete."])
        agent = BasicAgent("helper", backend)
        context = AgentContext(system_prompt="SYS")

        response = await agent.process_task(context, "tidy the imports")

        assert isinstance(response, Complete)
        assert context.conversation_history == [
            Turn(Role.USER, "tidy the imports"),
            Turn(Role.ASSISTANT, "All done, task complete."),
        ]
        assert backend.calls[0] == {
            "system_prompt": "SYS",
            "history": (),
            "next_input": "tidy the imports",
        }

    @pytest.mark.asyncio
    async def test_history_sent_on_later_tasks(self, fake_backend):
        backend = fake_backend(["partial progress", "rejecting that"])
        agent = BasicAgent("helper", backend)
        context = AgentContext(system_prompt=None)

        await agent.process_task(context, "one")
        response = await agent.process_task(context, "two")

        assert isinstance(response, Reject)
        assert len(backend.calls[1]["history"]) == 2
        assert len(context.conversation_history) == 4

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, fake_backend):
        agent = BasicAgent("helper", fake_backend([ProviderError("down")]))
        context = AgentContext(system_prompt="SYS")

        with pytest.raises(ProviderError):
            await agent.process_task(context, "anything")
        assert context.conversation_history == []

    def test_description(self, fake_backend):
        assert BasicAgent("code helper", fake_backend([])).description == "code helper"
