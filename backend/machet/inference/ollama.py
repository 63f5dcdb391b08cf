"""
Ollama inference backend adapter.

Wraps Ollama's native /api/chat endpoint in non-streaming mode. Ollama uses
the same role/content message structure as OpenAI, so history is sent
unchanged; only plain-string content is supported.
"""

import logging
from typing import Optional

from machet.config import DEFAULT_HOSTNAME, DEFAULT_OLLAMA_PORT, DEFAULT_TIMEOUT
from machet.inference.base import InferenceBackend

logger = logging.getLogger(__name__)


class OllamaBackend(InferenceBackend):
    """Backend adapter for an Ollama inference server."""

    provider = "ollama"

    def __init__(self, model: str, hostname: str = DEFAULT_HOSTNAME,
                 port: int = DEFAULT_OLLAMA_PORT,
                 default_timeout: float = DEFAULT_TIMEOUT, transport=None):
        super().__init__(f"http://{hostname}:{port}", model, default_timeout, transport)

    @property
    def chat_path(self) -> str:
        return "/api/chat"

    def build_payload(self, messages: list[dict]) -> dict:
        return {
            "model": self.model,
            "messages": messages,
            "stream": False,
        }

    def extract_message(self, data: dict) -> Optional[dict]:
        # {"model": ..., "message": {"role": "assistant", "content": ...}, "done": true}
        if data.get("error"):
            logger.error("Ollama error for %s: %s", self.model, data["error"])
            return None
        return data.get("message")
