"""
OpenAI-compatible inference backend adapter.

Covers the OpenAI API itself and any server that implements the
/v1/chat/completions contract (set inference.openai_base_url in the
profile). The API key comes from OPENAI_API_KEY unless passed explicitly.
"""

import logging
import os
from typing import Optional

from machet.config import DEFAULT_TIMEOUT, OPENAI_API_BASE, OPENAI_API_KEY_ENV
from machet.errors import ConfigError
from machet.inference.base import InferenceBackend

logger = logging.getLogger(__name__)


class OpenAICompatBackend(InferenceBackend):
    """Backend adapter for OpenAI-compatible chat completion servers."""

    provider = "openai"

    def __init__(self, model: str, api_key: str = None,
                 base_url: str = OPENAI_API_BASE,
                 default_timeout: float = DEFAULT_TIMEOUT, transport=None):
        super().__init__(base_url, model, default_timeout, transport)
        self.api_key = api_key or os.environ.get(OPENAI_API_KEY_ENV)
        if not self.api_key:
            raise ConfigError(f"{OPENAI_API_KEY_ENV} is not set")

    @property
    def chat_path(self) -> str:
        return "/v1/chat/completions"

    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}"}

    def build_payload(self, messages: list[dict]) -> dict:
        return {
            "model": self.model,
            "messages": messages,
        }

    def extract_message(self, data: dict) -> Optional[dict]:
        choices = data.get("choices") or []
        if not choices:
            return None
        return choices[0].get("message")
