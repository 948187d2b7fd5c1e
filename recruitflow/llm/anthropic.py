"""Anthropic Claude LLM provider."""

import base64
import logging
import os
from typing import Any

from recruitflow.core.schemas import ResumePayload
from recruitflow.llm.base import SYSTEM_PROMPT, LLMProvider, media_kind, normalized_media_type

logger = logging.getLogger(__name__)


def _user_content(prompt: str, media: ResumePayload | None) -> str | list[dict[str, Any]]:
    if media is None:
        return prompt
    source = {
        "type": "base64",
        "media_type": normalized_media_type(media),
        "data": base64.b64encode(media.data).decode("ascii"),
    }
    return [
        {"type": media_kind(media), "source": source},
        {"type": "text", "text": prompt},
    ]


class AnthropicProvider(LLMProvider):
    """LLM provider using the Anthropic Claude API."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        media: ResumePayload | None = None,
    ) -> str:
        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            msg = "ANTHROPIC_API_KEY environment variable is required"
            raise ValueError(msg)

        try:
            import anthropic
        except ImportError:
            msg = (
                "anthropic is required for the Anthropic provider. "
                "Install with: pip install 'recruitflow[anthropic]'"
            )
            raise ImportError(msg) from None

        client = anthropic.Anthropic(api_key=api_key)
        use_model = model or self.default_model
        use_system = system if system is not None else SYSTEM_PROMPT

        logger.info("Sending request to Anthropic API (%s)...", use_model)
        message = client.messages.create(
            model=use_model,
            max_tokens=4096,
            system=use_system,
            messages=[{"role": "user", "content": _user_content(prompt, media)}],
        )

        return message.content[0].text  # type: ignore[union-attr]
