"""
Chat package — the tool-invocation protocol and turn orchestration engine.

Structure:
    parser.py      — fenced-block scanner producing Invocations
    dispatcher.py  — runs invocations against the tool registry
    controller.py  — LoopState machine and the TurnController runtime
    history.py     — Turn, Role and the append-only ConversationLog
    prompts.py     — system prompt assembly
    git.py         — optional pre-flight commit check
"""

from machet.chat.controller import LoopState, SessionObserver, TurnController, transition
from machet.chat.dispatcher import dispatch, run_tools
from machet.chat.history import ConversationLog, Role, Turn
from machet.chat.parser import Invocation, parse_invocations

__all__ = [
    "ConversationLog",
    "Invocation",
    "LoopState",
    "Role",
    "SessionObserver",
    "Turn",
    "TurnController",
    "dispatch",
    "parse_invocations",
    "run_tools",
    "transition",
]
