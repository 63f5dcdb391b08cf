"""
Base capability interface for tools the model can invoke from fenced blocks.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from machet.errors import ExecutionError


class Capability(ABC):
    """Base class for all tools.

    A tool either returns None (a silent, state-changing action such as
    writing a file) or returns exactly one string that is fed back to the
    model as the next turn's input. Failures raise ExecutionError.
    """

    indicator: str = ""

    def __init__(self, workspace: Optional[Path] = None):
        self.workspace = Path(workspace) if workspace else Path.cwd()

    @property
    @abstractmethod
    def description(self) -> str:
        """Prompt text explaining purpose, usage pattern and output."""
        ...

    @abstractmethod
    def execute(self, parameter: Optional[str], content: str) -> Optional[str]:
        ...

    def fail(self, message: str) -> ExecutionError:
        return ExecutionError(self.indicator, message)

    def resolve(self, path: str) -> Path:
        """Resolve a tool path against the workspace. Absolute paths pass through."""
        p = Path(path).expanduser()
        if not p.is_absolute():
            p = self.workspace / p
        return p

    def __repr__(self) -> str:
        return f"{type(self).__name__}(indicator={self.indicator!r})"
