"""
Error types shared across the chat loop, tools and inference adapters.

Parse problems and unknown tool names are not errors at all: malformed
fences are dropped by the parser and unknown indicators are skipped by the
dispatcher. Everything that does raise derives from MachetError.
"""


class MachetError(Exception):
    """Base class for all machet errors."""
    pass


class ConfigError(MachetError):
    """Raised when the profile or command line cannot produce a usable setup."""
    pass


class ProviderError(MachetError):
    """Raised when a model provider cannot return a reply (network, auth, empty)."""

    def __init__(self, message: str, provider: str = ""):
        self.provider = provider
        super().__init__(f"{provider}: {message}" if provider else message)


class ExecutionError(MachetError):
    """Raised when a single tool fails. Never aborts the rest of a dispatch pass."""

    def __init__(self, tool: str, message: str):
        self.tool = tool
        self.message = message
        super().__init__(f"Tool '{tool}' failed: {message}")


class GitError(MachetError):
    """Raised when a git command in the pre-flight check fails."""
    pass
