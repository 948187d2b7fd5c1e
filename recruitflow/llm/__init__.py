"""LLM provider registry with lazy loading.

Usage:
    from recruitflow.llm import get_provider, parse_json_response

    provider = get_provider("gemini")
    raw = provider.complete(prompt, system=system_prompt)
    data = parse_json_response(raw)
"""

from __future__ import annotations

import importlib

from recruitflow.llm.base import LLMProvider, parse_json_response

__all__ = ["LLMProvider", "available_providers", "get_provider", "parse_json_response"]

# Lazy registry: maps provider name → (module_path, class_name)
_REGISTRY: dict[str, tuple[str, str]] = {
    "anthropic": ("recruitflow.llm.anthropic", "AnthropicProvider"),
    "openai": ("recruitflow.llm.openai", "OpenAIProvider"),
    "gemini": ("recruitflow.llm.gemini", "GeminiProvider"),
    "ollama": ("recruitflow.llm.ollama", "OllamaProvider"),
}


def get_provider(name: str) -> LLMProvider:
    """Instantiate and return an LLM provider by name.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown LLM provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls()  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    """Return sorted list of registered provider names."""
    return sorted(_REGISTRY)
