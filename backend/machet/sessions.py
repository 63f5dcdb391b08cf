"""
Session manager — one TurnController and ConversationLog per HTTP session.

Sessions share nothing but the profile. Requests to the same session are
serialized with a per-session lock so a controller only ever runs one cycle
at a time.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from machet.chat.controller import TurnController
from machet.chat.prompts import build_system_prompt
from machet.inference import backend_from_config
from machet.profile import Profile
from machet.tools import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class Session:
    id: str
    controller: TurnController
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "state": self.controller.state.value,
            "created_at": self.created_at,
            "turns": len(self.controller.history),
            "last_error": self.controller.last_error,
        }


class SessionManager:
    """Creates and tracks sessions. backend_factory defaults to the profile's provider."""

    def __init__(self, profile: Profile, backend_factory: Optional[Callable] = None):
        self.profile = profile
        self._backend_factory = backend_factory or (lambda: backend_from_config(profile.inference))
        self._sessions: dict[str, Session] = {}

    def create(self) -> Session:
        registry = ToolRegistry.default(self.profile.workspace_path)
        controller = TurnController(
            self._backend_factory(),
            build_system_prompt(registry, self.profile.system.name),
            registry,
            tool_errors=self.profile.chat.tool_errors,
        )
        session = Session(id=str(uuid.uuid4()), controller=controller)
        self._sessions[session.id] = session
        logger.info("Created session %s", session.id)
        return session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("Removed session %s", session_id)
        return removed

    def all(self) -> list[Session]:
        return list(self._sessions.values())
