"""Ollama local LLM provider (OpenAI-compatible API)."""

import logging
import os

from recruitflow.core.schemas import ResumePayload
from recruitflow.llm.base import SYSTEM_PROMPT, LLMProvider, media_kind
from recruitflow.llm.openai import build_messages

logger = logging.getLogger(__name__)

_OLLAMA_BASE_URL = "http://localhost:11434/v1"


class OllamaProvider(LLMProvider):
    """LLM provider using a local Ollama instance via OpenAI-compatible API."""

    @property
    def provider_id(self) -> str:
        return "ollama"

    @property
    def default_model(self) -> str:
        return "llama3"

    @property
    def env_var(self) -> None:
        return None

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        media: ResumePayload | None = None,
    ) -> str:
        if media is not None and media_kind(media) != "image":
            msg = "Ollama accepts image attachments only; extract PDF text before sending"
            raise ValueError(msg)

        try:
            import openai
        except ImportError:
            msg = (
                "openai is required for Ollama (OpenAI-compatible API). "
                "Install with: pip install 'recruitflow[openai]'"
            )
            raise ImportError(msg) from None

        base_url = os.environ.get("OLLAMA_BASE_URL", _OLLAMA_BASE_URL)
        client = openai.OpenAI(base_url=base_url, api_key="ollama")
        use_model = model or self.default_model
        use_system = system if system is not None else SYSTEM_PROMPT

        logger.info("Sending request to Ollama (%s)...", use_model)
        response = client.chat.completions.create(
            model=use_model,
            messages=build_messages(prompt, use_system, media),  # type: ignore[arg-type]
        )

        return response.choices[0].message.content  # type: ignore[no-any-return]
