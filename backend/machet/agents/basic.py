"""
BasicAgent — single request per task, reply classified by keyword.
"""

import logging

from machet.agents.base import AgentContext, AgentResponse, BaseAgent, classify_response
from machet.chat.history import Role, Turn

logger = logging.getLogger(__name__)


class BasicAgent(BaseAgent):

    def __init__(self, description: str, backend):
        super().__init__(description)
        self._backend = backend

    async def process_task(self, context: AgentContext, task: str) -> AgentResponse:
        """Send the task with the context's history and label the reply.

        Provider failures propagate as ProviderError; the context is left
        untouched in that case.
        """
        history = tuple(context.conversation_history)
        reply = await self._backend.chat(context.system_prompt, history, task)

        context.add_message(Turn(Role.USER, task))
        context.add_message(reply)

        response = classify_response(reply.content)
        logger.info("Task classified as %s", type(response).__name__)
        return response
