"""
Tools package — the capability registry.

The registry is a fixed, ordered tuple of Capability instances built once
per session. Order matters: it is the tie-break when more than one tool
shares an indicator.

Usage:
    from machet.tools import ToolRegistry
    registry = ToolRegistry.default(workspace)
    output = dispatch(invocations, registry)
"""

from pathlib import Path
from typing import Iterable, Iterator, Optional

from machet.tools.base import Capability
from machet.tools.files import ListTool, ReadTool, SaveTool

# Built-in tools in dispatch order
_BUILTIN_TOOLS: tuple[type[Capability], ...] = (SaveTool, ReadTool, ListTool)


def get_all_tools(workspace: Optional[Path] = None) -> list[Capability]:
    """Instantiate every built-in tool against the given workspace."""
    return [cls(workspace) for cls in _BUILTIN_TOOLS]


class ToolRegistry:
    """Immutable, ordered collection of capabilities."""

    def __init__(self, tools: Iterable[Capability]):
        self._tools: tuple[Capability, ...] = tuple(tools)

    @classmethod
    def default(cls, workspace: Optional[Path] = None,
                extra_tools: Iterable[Capability] = ()) -> "ToolRegistry":
        return cls(list(get_all_tools(workspace)) + list(extra_tools))

    def indicators(self) -> list[str]:
        return [t.indicator for t in self._tools]

    def matching(self, name: str) -> list[Capability]:
        """All tools whose indicator equals name, in registry order."""
        return [t for t in self._tools if t.indicator == name]

    def __iter__(self) -> Iterator[Capability]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)


__all__ = [
    "Capability",
    "ListTool",
    "ReadTool",
    "SaveTool",
    "ToolRegistry",
    "get_all_tools",
]
