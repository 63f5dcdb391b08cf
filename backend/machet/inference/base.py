"""
Abstract base class for model provider adapters.

Every adapter (Ollama, OpenAI-compatible) implements this interface so the
turn controller can treat them interchangeably: one non-streaming chat
request per turn, the reply returned as an assistant Turn, and every
failure surfaced as ProviderError. No retries happen here.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import httpx

from machet.chat.history import Role, Turn
from machet.config import DEFAULT_TIMEOUT
from machet.errors import ProviderError

logger = logging.getLogger(__name__)


def build_messages(system_prompt: Optional[str], history: Sequence[Turn],
                   next_input: str) -> list[dict]:
    """OpenAI-format message list: system prompt, history, then the new input."""
    messages = []
    if system_prompt:
        messages.append({"role": Role.SYSTEM.value, "content": system_prompt})
    messages.extend(t.to_message() for t in history)
    messages.append({"role": Role.USER.value, "content": next_input})
    return messages


class InferenceBackend(ABC):
    """Abstract provider interface.

    Concrete adapters supply the endpoint path, the request payload and the
    location of the reply message in the response body.
    """

    provider: str = ""

    def __init__(self, base_url: str, model: str,
                 default_timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.default_timeout = default_timeout
        self._transport = transport

    # ── Chat Completion ──

    async def chat(self, system_prompt: Optional[str], history: Sequence[Turn],
                   next_input: str) -> Turn:
        """Send one request and return the assistant's reply.

        Raises:
            ProviderError: network failure, non-2xx status, malformed or
                empty response.
        """
        messages = build_messages(system_prompt, history, next_input)
        url = f"{self.base_url}{self.chat_path}"
        logger.debug("POST %s (%d messages, model=%s)", url, len(messages), self.model)

        try:
            async with self._client() as client:
                resp = await client.post(
                    url,
                    json=self.build_payload(messages),
                    headers=self.headers(),
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"HTTP {e.response.status_code} from {url}: {e.response.text[:200]}",
                self.provider,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"cannot reach {self.base_url}: {e}", self.provider) from e
        except ValueError as e:
            raise ProviderError(f"malformed response from {url}: {e}", self.provider) from e

        message = self.extract_message(data) if isinstance(data, dict) else None
        if not isinstance(message, dict) or not message.get("content"):
            raise ProviderError(f"no response from {self.provider or url}", self.provider)

        return Turn(role=Role.ASSISTANT, content=message["content"])

    def _client(self, timeout: float = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout or self.default_timeout,
            transport=self._transport,
        )

    # ── Adapter hooks ──

    @property
    @abstractmethod
    def chat_path(self) -> str:
        ...

    @abstractmethod
    def build_payload(self, messages: list[dict]) -> dict:
        ...

    @abstractmethod
    def extract_message(self, data: dict) -> Optional[dict]:
        """Return the reply message dict ({"role", "content"}) or None."""
        ...

    def headers(self) -> dict:
        return {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r}, base_url={self.base_url!r})"
