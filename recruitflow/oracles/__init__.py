"""LLM-backed oracle clients used by the application pipeline.

Usage:
    from recruitflow.oracles import build_oracles

    oracles = build_oracles(settings.llm)
    outcome = await process_application(resume, jobs, oracles)
"""

from __future__ import annotations

from dataclasses import dataclass

from recruitflow.core.config import LLMConfig
from recruitflow.llm import get_provider
from recruitflow.oracles.authenticity import AuthenticityOracle
from recruitflow.oracles.extraction import ExtractionOracle
from recruitflow.oracles.interview_email import EmailOracle
from recruitflow.oracles.matching import MatchingOracle
from recruitflow.oracles.ranking import RankingCandidate, RankingOracle
from recruitflow.oracles.story import StoryOracle

__all__ = [
    "AuthenticityOracle",
    "EmailOracle",
    "ExtractionOracle",
    "MatchingOracle",
    "Oracles",
    "RankingCandidate",
    "RankingOracle",
    "StoryOracle",
    "build_oracles",
]


@dataclass
class Oracles:
    """The six external services one pipeline run talks to."""

    extraction: ExtractionOracle
    matching: MatchingOracle
    ranking: RankingOracle
    authenticity: AuthenticityOracle
    story: StoryOracle
    email: EmailOracle


def build_oracles(config: LLMConfig) -> Oracles:
    """Instantiate every oracle client, honouring per-oracle overrides."""

    def make(name: str, cls):  # type: ignore[no-untyped-def]
        provider_name, model = config.for_oracle(name)
        return cls(get_provider(provider_name), model)

    return Oracles(
        extraction=make("extraction", ExtractionOracle),
        matching=make("matching", MatchingOracle),
        ranking=make("ranking", RankingOracle),
        authenticity=make("authenticity", AuthenticityOracle),
        story=make("story", StoryOracle),
        email=make("email", EmailOracle),
    )
