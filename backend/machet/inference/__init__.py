"""
Inference package — model provider adapters.

Provides adapters for Ollama and OpenAI-compatible servers and a factory
that picks one from a "provider/model" spec.

Quick start:
    from machet.inference import create_backend
    backend = create_backend("openai/gpt-4o")
    reply = await backend.chat(system_prompt, history, "What is Rust?")
"""

from machet.inference.base import InferenceBackend, build_messages
from machet.inference.ollama import OllamaBackend
from machet.inference.openai_compat import OpenAICompatBackend
from machet.inference.router import backend_from_config, create_backend, parse_model_spec

__all__ = [
    "InferenceBackend",
    "OllamaBackend",
    "OpenAICompatBackend",
    "backend_from_config",
    "build_messages",
    "create_backend",
    "parse_model_spec",
]
