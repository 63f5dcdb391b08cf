"""
Invocation parser — extracts tool calls from free-form assistant text.

A tool call is a fenced block whose opening line names the tool and an
optional parameter:

    ```save notes/todo.md
    - buy milk
    ```

The scan is a single left-to-right pass with no backtracking. Nesting is
not supported: a fence inside a body closes the block. Malformed candidates
(no line break after the opening fence, no name, no closing fence) are
dropped and the scan resumes just past the opening fence.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from machet.config import FENCE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Invocation:
    name: str
    parameter: Optional[str]
    content: str


def parse_invocations(text: str) -> list[Invocation]:
    """Return every well-formed fenced block in text, in order of appearance."""
    invocations = []
    if not text:
        return invocations

    cursor = 0
    while True:
        found = text.find(FENCE, cursor)
        if found == -1:
            break
        start = found + len(FENCE)

        newline = text.find("\n", start)
        if newline != -1:
            tokens = text[start:newline].split()
            if tokens:
                body_start = newline + 1
                end = text.find(FENCE, body_start)
                if end != -1:
                    parameter = " ".join(tokens[1:]) or None
                    invocations.append(Invocation(
                        name=tokens[0],
                        parameter=parameter,
                        content=text[body_start:end].strip(),
                    ))
                    cursor = end + len(FENCE)
                    continue

        logger.debug("Discarding malformed fence at offset %d", found)
        cursor = start

    return invocations
