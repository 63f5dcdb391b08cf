"""
Profile System — loads machet.yaml and provides validated configuration.

The profile is the single source of truth for user-configurable settings:
system name, model provider and endpoint, chat loop options, tool workspace,
logging level and the HTTP session server.

Usage:
    from machet.profile import get_profile
    profile = get_profile()
    print(profile.inference.model)
"""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from machet.config import (
    API_KEY_ENV,
    DEFAULT_HOSTNAME,
    DEFAULT_MODEL,
    DEFAULT_OLLAMA_PORT,
    DEFAULT_PROFILE_NAME,
    DEFAULT_TIMEOUT,
    OPENAI_API_BASE,
    PROFILE_PATH_ENV,
    TOOL_ERROR_POLICIES,
)

logger = logging.getLogger(__name__)


# ── Dataclasses ──

@dataclass
class SystemConfig:
    name: str = "machet"


@dataclass
class InferenceConfig:
    model: str = DEFAULT_MODEL  # provider/model
    hostname: str = DEFAULT_HOSTNAME  # ollama only
    port: int = DEFAULT_OLLAMA_PORT  # ollama only
    timeout: float = DEFAULT_TIMEOUT
    openai_base_url: str = OPENAI_API_BASE


@dataclass
class ChatConfig:
    preflight: bool = True
    tool_errors: str = "drop"  # drop | surface
    show_tool_output: bool = False


@dataclass
class ToolsConfig:
    workspace: str = "."


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class WebConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    api_key: str = ""  # overridden by MACHET_API_KEY


@dataclass
class Profile:
    system: SystemConfig = field(default_factory=SystemConfig)
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    web: WebConfig = field(default_factory=WebConfig)

    @property
    def workspace_path(self) -> Path:
        return Path(self.tools.workspace).expanduser().resolve()


# ── Parsing ──

def _parse_dict(data: dict, cls):
    """Create a dataclass instance from a dict, ignoring unknown keys."""
    field_names = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


_SECTIONS = {
    "system": SystemConfig,
    "inference": InferenceConfig,
    "chat": ChatConfig,
    "tools": ToolsConfig,
    "logging": LoggingConfig,
    "web": WebConfig,
}


def _load_profile_from_dict(raw: dict) -> Profile:
    """Parse a raw YAML dict into a Profile dataclass."""
    profile = Profile()

    for section, cls in _SECTIONS.items():
        data = raw.get(section)
        if isinstance(data, dict):
            setattr(profile, section, _parse_dict(data, cls))
        elif data is not None:
            logger.warning("Profile section '%s' is not a mapping — using defaults", section)

    if profile.chat.tool_errors not in TOOL_ERROR_POLICIES:
        logger.warning(
            "Unknown chat.tool_errors '%s' (expected one of %s) — using 'drop'",
            profile.chat.tool_errors, ", ".join(TOOL_ERROR_POLICIES),
        )
        profile.chat.tool_errors = "drop"

    # API key from env var wins over the file
    env_key = os.environ.get(API_KEY_ENV)
    if env_key:
        profile.web.api_key = env_key

    return profile


def _resolve_profile_path(path=None) -> Path:
    if path:
        return Path(path)
    env_path = os.environ.get(PROFILE_PATH_ENV)
    if env_path:
        return Path(env_path)
    return Path.cwd() / DEFAULT_PROFILE_NAME


def load_profile(path=None) -> Profile:
    """Load profile from YAML file. Falls back to defaults if missing."""
    profile_path = _resolve_profile_path(path)

    if not profile_path.exists():
        logger.info("No profile found at %s — using defaults", profile_path)
        return _load_profile_from_dict({})

    try:
        raw = yaml.safe_load(profile_path.read_text()) or {}
        if not isinstance(raw, dict):
            logger.warning("%s is not a valid YAML mapping — using defaults", profile_path)
            return _load_profile_from_dict({})
        profile = _load_profile_from_dict(raw)
        logger.info("Profile loaded from %s: model=%s", profile_path, profile.inference.model)
        return profile
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load %s: %s — using defaults", profile_path, e)
        return _load_profile_from_dict({})


# ── Singleton ──

_profile: Optional[Profile] = None


def get_profile() -> Profile:
    """Return the validated profile singleton. Loads on first call."""
    global _profile
    if _profile is None:
        _profile = load_profile()
    return _profile


def reload_profile(path=None) -> Profile:
    """Force reload of the profile from disk."""
    global _profile
    _profile = load_profile(path)
    return _profile
