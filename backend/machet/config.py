"""
Configuration — internal constants for the chat loop and inference adapters.
All user-configurable values come from machet.yaml via get_profile().
Protocol constants and execution limits remain as code constants.
"""

# ── Session boundary ──
# Compared case-sensitively after trimming surrounding whitespace.
EXIT_KEYWORDS = frozenset({"/bye", "/exit", "/quit"})

TASK_TEMPLATE = (
    "Help me with my task. {task}\n"
    "Keep in mind to use the tools described in the system prompt"
)

# ── Tool block wire format ──
FENCE = "```"

# ── Inference ──
DEFAULT_MODEL = "ollama/qwen2.5-coder"
DEFAULT_HOSTNAME = "localhost"
DEFAULT_OLLAMA_PORT = 11434
DEFAULT_TIMEOUT = 300
OPENAI_API_BASE = "https://api.openai.com"
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"

# ── Profile ──
PROFILE_PATH_ENV = "MACHET_PROFILE"
DEFAULT_PROFILE_NAME = "machet.yaml"
API_KEY_ENV = "MACHET_API_KEY"

# ── Tool error reporting ──
TOOL_ERROR_POLICIES = ("drop", "surface")

# ── Logging ──
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
