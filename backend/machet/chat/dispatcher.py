"""
Dispatcher — runs parsed invocations against the tool registry.

Rule: any number of silent tools, at most one tool with a surfaced result
per assistant turn. Every matched invocation runs for its side effects until
the first one returns output; that output is returned and the remaining
invocations are skipped.
"""

import logging
from typing import Callable, Iterable, Optional

from machet.chat.parser import Invocation, parse_invocations
from machet.errors import ExecutionError
from machet.tools import ToolRegistry
from machet.tools.base import Capability

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[ExecutionError], None]


def _log_error(error: ExecutionError):
    logger.warning("%s", error)


def _execute(tool: Capability, invocation: Invocation) -> Optional[str]:
    try:
        return tool.execute(invocation.parameter, invocation.content)
    except ExecutionError:
        raise
    except Exception as e:
        raise ExecutionError(tool.indicator, f"{type(e).__name__}: {e}") from e


def dispatch(invocations: Iterable[Invocation], registry: Iterable[Capability],
             on_error: Optional[ErrorHandler] = None) -> Optional[str]:
    """Execute matching tools in order. Returns the first surfaced output, or None.

    A failing tool is reported to on_error (default: a logged warning) and
    dispatch continues with the next match.
    """
    handle_error = on_error or _log_error
    if not isinstance(registry, ToolRegistry):
        registry = ToolRegistry(registry)

    for invocation in invocations:
        matches = registry.matching(invocation.name)
        if not matches:
            # Plain code blocks in the reply land here
            logger.debug("No tool for block '%s', skipping", invocation.name)
            continue
        for tool in matches:
            logger.debug("Executing %s (parameter=%r)", tool.indicator, invocation.parameter)
            try:
                output = _execute(tool, invocation)
            except ExecutionError as e:
                handle_error(e)
                continue
            if output is not None:
                logger.info("Tool %s surfaced %d chars", tool.indicator, len(output))
                return output

    return None


def run_tools(text: str, registry: Iterable[Capability],
              on_error: Optional[ErrorHandler] = None) -> Optional[str]:
    """Parse an assistant reply and dispatch every tool block in it."""
    return dispatch(parse_invocations(text), registry, on_error=on_error)
