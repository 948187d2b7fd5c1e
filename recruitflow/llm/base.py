"""Abstract base class for LLM providers and shared logic."""

import json
import re
from abc import ABC, abstractmethod
from typing import Any

from recruitflow.core.schemas import ResumePayload

SYSTEM_PROMPT = (
    "You are an expert recruiting assistant working inside an applicant "
    "processing pipeline. Follow the task instructions exactly.\n\n"
    "Return ONLY valid JSON (no markdown, no explanation) in the shape the "
    "task asks for."
)

IMAGE_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/gif", "image/webp"}
DOCUMENT_TYPES = {"application/pdf"}


def parse_json_response(raw_text: str) -> Any:
    """Decode an LLM response into a JSON value.

    Handles markdown-wrapped JSON (```json ... ```) and plain JSON.
    """
    cleaned = re.sub(r"^```(?:json)?\s*\n?", "", raw_text.strip())
    cleaned = re.sub(r"\n?```\s*$", "", cleaned)

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        msg = f"Failed to parse LLM response as JSON: {e}"
        raise ValueError(msg) from e


def media_kind(media: ResumePayload) -> str:
    """Classify an attachment as 'image' or 'document'.

    Raises ValueError for content types no provider accepts as an attachment.
    """
    if media.content_type in IMAGE_TYPES:
        return "image"
    if media.content_type in DOCUMENT_TYPES:
        return "document"
    msg = f"Unsupported attachment type for LLM input: {media.content_type or 'unknown'}"
    raise ValueError(msg)


def normalized_media_type(media: ResumePayload) -> str:
    # image/jpg is a common browser alias the APIs reject
    return "image/jpeg" if media.content_type == "image/jpg" else media.content_type


class LLMProvider(ABC):
    """Base class that every LLM provider must implement."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'anthropic')."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        media: ResumePayload | None = None,
    ) -> str:
        """Send a prompt to the LLM and return raw response text.

        Args:
            prompt: The user-turn text.
            model: Override the provider's default model. None uses default.
            system: Override the system prompt. None falls back to SYSTEM_PROMPT.
            media: Optional image or PDF attached to the user turn.

        Returns:
            Raw text response from the LLM (expected to be JSON).
        """

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""
