"""Score candidates 0-100 against one job description."""

import logging
from typing import Any

from pydantic import BaseModel

from recruitflow.core.schemas import RankingResult
from recruitflow.oracles.base import OracleClient, clamp

logger = logging.getLogger(__name__)

_RANKING_SYSTEM_PROMPT = (
    "You are an expert talent acquisition specialist. Given a job description "
    "and a list of candidates with their skills and experience, rank the "
    "candidates by how well they match the job description.\n\n"
    "Return ONLY a JSON array (no markdown, no explanation) with one object "
    "per candidate:\n"
    '[{"name": "<candidate name>", "ranking": <integer 0-100>, '
    '"reason": "<brief explanation>"}]'
)


class RankingCandidate(BaseModel):
    """Candidate summary sent to the ranking oracle."""

    name: str
    skills: str
    experience: str


def _build_prompt(job_description: str, candidates: list[RankingCandidate]) -> str:
    blocks = "\n".join(
        f"Name: {c.name}\nSkills: {c.skills}\nExperience: {c.experience}\n---"
        for c in candidates
    )
    return f"JOB DESCRIPTION\n{job_description}\n\nCANDIDATES\n{blocks}"


def _parse_rankings(data: Any) -> list[RankingResult]:
    if isinstance(data, dict):
        data = data.get("rankings", [])
    if not isinstance(data, list):
        msg = f"Ranking response must be a JSON array, got {type(data).__name__}"
        raise ValueError(msg)

    results: list[RankingResult] = []
    for item in data:
        if not isinstance(item, dict) or "ranking" not in item:
            logger.warning("Skipping malformed ranking entry: %r", item)
            continue
        results.append(
            RankingResult(
                name=str(item.get("name") or ""),
                ranking=clamp(item["ranking"], 0.0, 100.0),
                reason=str(item.get("reason") or ""),
            )
        )
    return results


class RankingOracle(OracleClient):
    system_prompt = _RANKING_SYSTEM_PROMPT

    async def rank(
        self, job_description: str, candidates: list[RankingCandidate]
    ) -> list[RankingResult]:
        data = await self._ask_json(_build_prompt(job_description, candidates))
        return _parse_rankings(data)
