"""
File tools — save, read and ls.

save has no output. read and ls surface their result, which becomes the
model's next input.
"""

import logging
from typing import Optional

from machet.tools.base import Capability

logger = logging.getLogger(__name__)

_MAX_READ_CHARS = 50000


class SaveTool(Capability):
    indicator = "save"

    @property
    def description(self) -> str:
        return """
## Save Tool

### Purpose:
Create or overwrite a file with the given content.

### Usage Pattern:

The path can be relative to the current directory, or absolute.

To write to a file, use a code block with the language tag: `save <path>`

Example:

```save hello_world.py
print("Hello, world!")
```

### Output:

no output
"""

    def execute(self, parameter: Optional[str], content: str) -> Optional[str]:
        if not parameter:
            raise self.fail("a file path is required, e.g. ```save notes.txt")
        p = self.resolve(parameter)
        # Block bodies arrive stripped; restore the trailing newline
        if content and not content.endswith("\n"):
            content += "\n"
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(content, encoding="utf-8")
        except OSError as e:
            raise self.fail(f"cannot write {p}: {e}") from e
        logger.info("Saved %d chars to %s", len(content), p)
        return None


class ReadTool(Capability):
    indicator = "read"

    @property
    def description(self) -> str:
        return """
## Read Tool

### Purpose:
Read the content of a file.

### Usage Pattern:

Use a code block with the language tag `read <path>` and an empty body.

Example:

```read src/main.py
```

### Output:

Content of `src/main.py`:
```
<file content>
```
"""

    def execute(self, parameter: Optional[str], content: str) -> Optional[str]:
        if not parameter:
            raise self.fail("a file path is required, e.g. ```read notes.txt")
        p = self.resolve(parameter)
        if not p.is_file():
            raise self.fail(f"file not found: {p}")
        try:
            text = p.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise self.fail(f"cannot read {p}: {e}") from e
        if len(text) > _MAX_READ_CHARS:
            text = text[:_MAX_READ_CHARS] + f"\n[Truncated — file is {len(text)} chars]"
        return f"Content of `{parameter}`:\n```\n{text.rstrip()}\n```"


class ListTool(Capability):
    indicator = "ls"

    @property
    def description(self) -> str:
        return """
## List Tool

### Purpose:
List the files and directories in a folder.

### Usage Pattern:

Use a code block with the language tag `ls <optional path>` and an empty body.
Without a path, the current directory is listed.

Example:

```ls src
```

### Output:

Entries of `src`:
main.py
utils/
"""

    def execute(self, parameter: Optional[str], content: str) -> Optional[str]:
        target = parameter or "."
        p = self.resolve(target)
        if not p.is_dir():
            raise self.fail(f"not a directory: {p}")
        try:
            entries = sorted(p.iterdir(), key=lambda e: e.name)
        except OSError as e:
            raise self.fail(f"cannot list {p}: {e}") from e
        lines = [e.name + "/" if e.is_dir() else e.name for e in entries]
        if not lines:
            return f"Entries of `{target}`:\n(empty)"
        return f"Entries of `{target}`:\n" + "\n".join(lines)
