"""OpenAI LLM provider."""

import logging
import os
from typing import Any

from recruitflow.core.schemas import ResumePayload
from recruitflow.llm.base import SYSTEM_PROMPT, LLMProvider, media_kind

logger = logging.getLogger(__name__)


def build_messages(
    prompt: str, system: str, media: ResumePayload | None
) -> list[dict[str, Any]]:
    """Chat-completions messages, with the attachment as a content part."""
    if media is None:
        user_content: str | list[dict[str, Any]] = prompt
    elif media_kind(media) == "image":
        user_content = [
            {"type": "image_url", "image_url": {"url": media.data_uri}},
            {"type": "text", "text": prompt},
        ]
    else:
        user_content = [
            {"type": "file", "file": {"filename": "resume.pdf", "file_data": media.data_uri}},
            {"type": "text", "text": prompt},
        ]
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user_content},
    ]


class OpenAIProvider(LLMProvider):
    """LLM provider using the OpenAI API."""

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o-mini"

    @property
    def env_var(self) -> str:
        return "OPENAI_API_KEY"

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        media: ResumePayload | None = None,
    ) -> str:
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            msg = "OPENAI_API_KEY environment variable is required"
            raise ValueError(msg)

        try:
            import openai
        except ImportError:
            msg = (
                "openai is required for the OpenAI provider. "
                "Install with: pip install 'recruitflow[openai]'"
            )
            raise ImportError(msg) from None

        client = openai.OpenAI(api_key=api_key)
        use_model = model or self.default_model
        use_system = system if system is not None else SYSTEM_PROMPT

        logger.info("Sending request to OpenAI API (%s)...", use_model)
        response = client.chat.completions.create(
            model=use_model,
            messages=build_messages(prompt, use_system, media),  # type: ignore[arg-type]
        )

        return response.choices[0].message.content  # type: ignore[no-any-return]
