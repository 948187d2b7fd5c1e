"""Shared plumbing for the LLM-backed oracle clients."""

import asyncio
import logging
from typing import Any

from recruitflow.core.schemas import ResumePayload
from recruitflow.llm.base import SYSTEM_PROMPT, LLMProvider, parse_json_response

logger = logging.getLogger(__name__)


def clamp(value: Any, low: float, high: float) -> float:
    """Coerce an LLM-supplied number into [low, high]; non-numbers become low."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    if number != number:  # NaN
        return low
    return max(low, min(high, number))


class OracleClient:
    """Base class: one provider, one optional model override, one system prompt.

    Provider SDKs are blocking, so calls run in a worker thread and the
    oracle methods stay awaitable.
    """

    system_prompt: str = SYSTEM_PROMPT

    def __init__(self, provider: LLMProvider, model: str | None = None) -> None:
        self.provider = provider
        self.model = model

    async def _complete(self, prompt: str, *, media: ResumePayload | None = None) -> str:
        logger.debug(
            "%s -> %s (%d prompt chars)",
            type(self).__name__,
            self.provider.provider_id,
            len(prompt),
        )
        raw = await asyncio.to_thread(
            self.provider.complete,
            prompt,
            self.model,
            system=self.system_prompt,
            media=media,
        )
        return raw or ""

    async def _ask_json(self, prompt: str, *, media: ResumePayload | None = None) -> Any:
        raw = await self._complete(prompt, media=media)
        return parse_json_response(raw)
