"""
Backend selection — maps a "provider/model" spec to an adapter instance.

Usage:
    from machet.inference import create_backend
    backend = create_backend("ollama/qwen2.5-coder", hostname="localhost", port=11434)
    reply = await backend.chat(system_prompt, history, "hello")
"""

import logging

from machet.errors import ConfigError
from machet.inference.base import InferenceBackend
from machet.inference.ollama import OllamaBackend
from machet.inference.openai_compat import OpenAICompatBackend
from machet.profile import InferenceConfig

logger = logging.getLogger(__name__)

# Map of provider strings to adapter classes
_BACKEND_CLASSES: dict[str, type[InferenceBackend]] = {
    "ollama": OllamaBackend,
    "openai": OpenAICompatBackend,
}


def parse_model_spec(spec: str) -> tuple[str, str]:
    """Split "provider/model" into its two parts."""
    parts = spec.split("/")
    if len(parts) != 2 or not all(p.strip() for p in parts):
        raise ConfigError(f"Model must be in format provider/model, got '{spec}'")
    return parts[0].strip().lower(), parts[1].strip()


def create_backend(model_spec: str, hostname: str = None, port: int = None,
                   timeout: float = None, openai_base_url: str = None,
                   transport=None) -> InferenceBackend:
    """Instantiate the adapter for model_spec.

    hostname and port only apply to Ollama; openai_base_url only to OpenAI.

    Raises:
        ConfigError: malformed spec, unsupported provider, or missing API key.
    """
    provider, model = parse_model_spec(model_spec)
    if provider not in _BACKEND_CLASSES:
        raise ConfigError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(_BACKEND_CLASSES)}"
        )

    kwargs = {"transport": transport}
    if timeout:
        kwargs["default_timeout"] = timeout
    if provider == "ollama":
        if hostname:
            kwargs["hostname"] = hostname
        if port:
            kwargs["port"] = port
    elif openai_base_url:
        kwargs["base_url"] = openai_base_url

    backend = _BACKEND_CLASSES[provider](model, **kwargs)
    logger.info("Using provider '%s' with model '%s' at %s", provider, model, backend.base_url)
    return backend


def backend_from_config(cfg: InferenceConfig, transport=None) -> InferenceBackend:
    """Build the adapter described by the profile's inference section."""
    return create_backend(
        cfg.model,
        hostname=cfg.hostname,
        port=cfg.port,
        timeout=cfg.timeout,
        openai_base_url=cfg.openai_base_url,
        transport=transport,
    )
