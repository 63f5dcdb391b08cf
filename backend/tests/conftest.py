"""
Test fixtures for the machet test suite.
"""

import os
import sys
from pathlib import Path
from typing import Optional

import pytest

# Add backend to path
BACKEND_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BACKEND_DIR))

# Point the profile at the example before importing anything that reads config
os.environ["MACHET_PROFILE"] = str(BACKEND_DIR.parent / "machet.yaml.example")
os.environ.pop("MACHET_API_KEY", None)

from machet.chat.history import Role, Turn  # noqa: E402
from machet.tools.base import Capability  # noqa: E402


class FakeBackend:
    """Scripted provider. Each item is reply text or an exception to raise."""

    def __init__(self, script):
        self.script = list(script)
        self.calls = []

    async def chat(self, system_prompt, history, next_input):
        self.calls.append({
            "system_prompt": system_prompt,
            "history": tuple(history),
            "next_input": next_input,
        })
        if not self.script:
            raise AssertionError("backend called more times than scripted")
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return Turn(Role.ASSISTANT, item)


class RecordingTool(Capability):
    """Tool that records its calls and returns (or raises) a fixed result."""

    def __init__(self, indicator: str, output: Optional[str] = None,
                 error: Optional[Exception] = None):
        super().__init__()
        self.indicator = indicator
        self.output = output
        self.error = error
        self.calls = []

    @property
    def description(self) -> str:
        return f"## {self.indicator} tool"

    def execute(self, parameter, content):
        self.calls.append((parameter, content))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def fake_backend():
    """Factory: fake_backend(["reply", ProviderError("down")])."""
    return FakeBackend


@pytest.fixture
def make_tool():
    """Factory: make_tool("probe", output="X") or make_tool("bad", error=...)."""
    return RecordingTool
