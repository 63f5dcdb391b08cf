"""
Turn controller — the state machine that drives a chat session.

States:
  USER_INPUT  (initial)  next input comes from the human
  TOOL_INPUT             next input is the output a tool just surfaced
  EXIT        (terminal) the human typed an exit keyword
  ERROR       (terminal) the provider failed

The machine itself is the pure function transition(snapshot, event), which
returns the next snapshot plus a list of effects. TurnController is the thin
async runtime around it: it performs each effect (provider request, log
append, tool dispatch, console output) and feeds the resulting events back
in. The controller owns its ConversationLog; nothing else appends to it.

One exchange looks like:

    UserSubmitted ─▶ RequestReply ─▶ ReplyReceived ─▶ AppendTurn x2, RunTools
                                                          │
                                       ToolsFinished(None)┘ ─▶ USER_INPUT
                                       ToolsFinished(text)  ─▶ TOOL_INPUT
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Iterable, Optional, Union

from machet.chat.dispatcher import run_tools
from machet.chat.history import ConversationLog, Role, Turn
from machet.config import EXIT_KEYWORDS, TASK_TEMPLATE
from machet.errors import ExecutionError, ProviderError
from machet.tools import ToolRegistry
from machet.tools.base import Capability

logger = logging.getLogger(__name__)


class LoopState(Enum):
    USER_INPUT = "awaiting_user"
    TOOL_INPUT = "awaiting_tool_feed"
    EXIT = "terminated"
    ERROR = "failed"

    @property
    def terminal(self) -> bool:
        return self in (LoopState.EXIT, LoopState.ERROR)


class Phase(Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"
    RUNNING_TOOLS = "running_tools"


@dataclass(frozen=True)
class Snapshot:
    state: LoopState = LoopState.USER_INPUT
    phase: Phase = Phase.IDLE
    # Input sent to the provider while AWAITING_REPLY; queued tool output
    # while idle in TOOL_INPUT.
    pending: Optional[str] = None


# ── Events ──

@dataclass(frozen=True)
class UserSubmitted:
    text: str


@dataclass(frozen=True)
class ToolFeedReady:
    pass


@dataclass(frozen=True)
class ReplyReceived:
    turn: Turn


@dataclass(frozen=True)
class ToolsFinished:
    output: Optional[str]


@dataclass(frozen=True)
class ProviderFailed:
    message: str


Event = Union[UserSubmitted, ToolFeedReady, ReplyReceived, ToolsFinished, ProviderFailed]


# ── Effects ──

@dataclass(frozen=True)
class RequestReply:
    input: str


@dataclass(frozen=True)
class AppendTurn:
    turn: Turn


@dataclass(frozen=True)
class RunTools:
    text: str


@dataclass(frozen=True)
class Farewell:
    pass


@dataclass(frozen=True)
class ReportError:
    message: str


Effect = Union[RequestReply, AppendTurn, RunTools, Farewell, ReportError]


@dataclass(frozen=True)
class Step:
    snapshot: Snapshot
    effects: list = field(default_factory=list)


def is_exit_command(text: str) -> bool:
    return text.strip() in EXIT_KEYWORDS


def frame_task(text: str) -> str:
    """Wrap human input in the task template sent to the model."""
    return TASK_TEMPLATE.format(task=text.strip())


def transition(snapshot: Snapshot, event: Event) -> Step:
    """Pure transition function. Events that make no sense in the current
    snapshot (including anything after a terminal state) change nothing."""
    state, phase = snapshot.state, snapshot.phase
    unchanged = Step(snapshot)

    if state.terminal:
        return unchanged

    if isinstance(event, ProviderFailed):
        return Step(Snapshot(LoopState.ERROR), [ReportError(event.message)])

    if isinstance(event, UserSubmitted):
        if state is not LoopState.USER_INPUT or phase is not Phase.IDLE:
            return unchanged
        if is_exit_command(event.text):
            return Step(Snapshot(LoopState.EXIT), [Farewell()])
        framed = frame_task(event.text)
        return Step(Snapshot(state, Phase.AWAITING_REPLY, framed), [RequestReply(framed)])

    if isinstance(event, ToolFeedReady):
        if state is not LoopState.TOOL_INPUT or phase is not Phase.IDLE:
            return unchanged
        # Tool output goes to the model verbatim, no framing
        return Step(Snapshot(state, Phase.AWAITING_REPLY, snapshot.pending),
                    [RequestReply(snapshot.pending)])

    if isinstance(event, ReplyReceived):
        if phase is not Phase.AWAITING_REPLY:
            return unchanged
        return Step(Snapshot(state, Phase.RUNNING_TOOLS), [
            AppendTurn(Turn(Role.USER, snapshot.pending)),
            AppendTurn(event.turn),
            RunTools(event.turn.content),
        ])

    if isinstance(event, ToolsFinished):
        if phase is not Phase.RUNNING_TOOLS:
            return unchanged
        if event.output is None:
            return Step(Snapshot(LoopState.USER_INPUT))
        return Step(Snapshot(LoopState.TOOL_INPUT, Phase.IDLE, event.output))

    return unchanged


# ── Runtime ──

class SessionObserver:
    """Hooks for presenting a session. The default implementation is silent."""

    def thinking(self):
        pass

    def assistant(self, turn: Turn):
        pass

    def tool_output(self, text: str):
        pass

    def farewell(self):
        pass

    def error(self, message: str):
        pass


def format_tool_errors(errors: list[ExecutionError]) -> str:
    return "\n".join(f"Error: {e}" for e in errors)


class TurnController:
    """Async runtime for one chat session.

    backend is any object with an async chat(system_prompt, history,
    next_input) -> Turn that raises ProviderError on failure.
    """

    def __init__(self, backend, system_prompt: Optional[str],
                 registry: Iterable[Capability],
                 tool_errors: str = "drop",
                 observer: Optional[SessionObserver] = None):
        self._backend = backend
        self.system_prompt = system_prompt
        self.registry = registry if isinstance(registry, ToolRegistry) else ToolRegistry(registry)
        self.tool_errors = tool_errors
        self.observer = observer or SessionObserver()
        self._log = ConversationLog()
        self._snapshot = Snapshot()
        self.last_error: Optional[str] = None

    @property
    def state(self) -> LoopState:
        return self._snapshot.state

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def history(self) -> tuple[Turn, ...]:
        return self._log.snapshot()

    def to_messages(self) -> list[dict]:
        return self._log.to_messages()

    async def submit(self, text: str) -> list[Turn]:
        """Handle one line of human input plus every tool-feed cycle it triggers.

        Returns the assistant turns produced, in order. On return the
        controller is back in USER_INPUT or terminal.
        """
        replies: list[Turn] = []
        await self._drive(UserSubmitted(text), replies)
        while self._snapshot.state is LoopState.TOOL_INPUT:
            await self._drive(ToolFeedReady(), replies)
        return replies

    async def run(self, read_line: Callable[[], Awaitable[str]]):
        """Read human input until the session exits or fails."""
        while not self._snapshot.state.terminal:
            line = await read_line()
            await self.submit(line)

    async def _drive(self, event: Event, replies: list[Turn]):
        events = deque([event])
        while events:
            current = events.popleft()
            step = transition(self._snapshot, current)
            if step.snapshot.state is not self._snapshot.state:
                logger.info("State %s -> %s on %s", self._snapshot.state.name,
                            step.snapshot.state.name, type(current).__name__)
            self._snapshot = step.snapshot
            for effect in step.effects:
                follow_up = await self._perform(effect, replies)
                if follow_up is not None:
                    events.append(follow_up)

    async def _perform(self, effect: Effect, replies: list[Turn]) -> Optional[Event]:
        if isinstance(effect, RequestReply):
            self.observer.thinking()
            try:
                reply = await self._backend.chat(self.system_prompt, self._log.snapshot(), effect.input)
            except ProviderError as e:
                return ProviderFailed(str(e))
            return ReplyReceived(reply)

        if isinstance(effect, AppendTurn):
            self._log.append(effect.turn)
            if effect.turn.role is not Role.USER:
                replies.append(effect.turn)
                self.observer.assistant(effect.turn)
            return None

        if isinstance(effect, RunTools):
            errors: list[ExecutionError] = []
            output = run_tools(effect.text, self.registry, on_error=self._tool_error_handler(errors))
            if errors and self.tool_errors == "surface":
                report = format_tool_errors(errors)
                output = f"{output}\n\n{report}" if output else report
            if output is not None:
                self.observer.tool_output(output)
            return ToolsFinished(output)

        if isinstance(effect, Farewell):
            self.observer.farewell()
            return None

        if isinstance(effect, ReportError):
            self.last_error = effect.message
            logger.error("Error getting response: %s", effect.message)
            self.observer.error(effect.message)
            return None

        raise TypeError(f"unknown effect {effect!r}")

    def _tool_error_handler(self, errors: list[ExecutionError]):
        def handle(error: ExecutionError):
            logger.warning("%s", error)
            errors.append(error)
        return handle
