"""Aggregate figures over processed candidates for the dashboard view."""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from recruitflow.core.schemas import PipelineOutcome

HIGH_POTENTIAL_RANKING = 80.0

# (label, inclusive upper bound)
_RANKING_BINS: list[tuple[str, float]] = [
    ("0-20", 20.0),
    ("21-40", 40.0),
    ("41-60", 60.0),
    ("61-80", 80.0),
    ("81-100", 100.0),
]


def _empty_distribution() -> dict[str, int]:
    return {label: 0 for label, _ in _RANKING_BINS}


class DashboardSummary(BaseModel):
    total: int = 0
    high_potential: int = 0
    flagged: int = 0
    ai_only: int = 0
    fraud_only: int = 0
    both_flags: int = 0
    ranking_distribution: dict[str, int] = Field(default_factory=_empty_distribution)


def ranking_bin(ranking: float) -> str:
    for label, upper in _RANKING_BINS:
        if ranking <= upper:
            return label
    return _RANKING_BINS[-1][0]


def summarize_candidates(outcomes: Iterable[PipelineOutcome]) -> DashboardSummary:
    """Count candidates, high performers and authenticity flags.

    Candidates without a ranking are counted in the total but not binned.
    """
    summary = DashboardSummary()
    for outcome in outcomes:
        summary.total += 1

        ranking = outcome.ranking_data
        if ranking is not None:
            summary.ranking_distribution[ranking_bin(ranking.ranking)] += 1
            if ranking.ranking >= HIGH_POTENTIAL_RANKING:
                summary.high_potential += 1

        auth = outcome.authenticity_data
        ai, fraud = auth.is_potentially_ai_generated, auth.is_potentially_fraudulent
        if ai or fraud:
            summary.flagged += 1
        if ai and fraud:
            summary.both_flags += 1
        elif ai:
            summary.ai_only += 1
        elif fraud:
            summary.fraud_only += 1
    return summary
