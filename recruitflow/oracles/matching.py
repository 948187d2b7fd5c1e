"""Pick the best-fitting job description for a candidate."""

import logging

from recruitflow.core.schemas import JobDescription, MatchResult
from recruitflow.oracles.base import OracleClient, clamp

logger = logging.getLogger(__name__)

_MATCHING_SYSTEM_PROMPT = (
    "You are an expert recruitment assistant. Match a candidate to the most "
    "suitable job description from the list provided.\n\n"
    "Analyze the candidate's skills and experience against each job "
    "description, considering keywords, required experience levels and "
    "overall role alignment.\n\n"
    "Return ONLY a JSON object (no markdown, no explanation):\n"
    '{"matched_job_description_id": "<job id or null>", '
    '"match_confidence": <number 0.0-1.0>, '
    '"match_reason": "<brief reasoning>"}\n\n'
    "If no job is a reasonably good fit (confidence below 0.6), return null "
    "for the id, 0 for confidence, and explain why no suitable match was found."
)


def _build_prompt(
    skills: list[str], experience_summary: str, job_descriptions: list[JobDescription]
) -> str:
    skill_lines = "\n".join(f"- {s}" for s in skills) or "- (none listed)"
    jobs = "\n".join(
        f"---\nJob ID: {jd.id}\nJob Title: {jd.title}\nDescription:\n{jd.full_text}\n---"
        for jd in job_descriptions
    )
    return (
        "CANDIDATE PROFILE\n"
        f"Skills:\n{skill_lines}\n\n"
        f"Experience Summary:\n{experience_summary}\n\n"
        f"AVAILABLE JOB DESCRIPTIONS\n{jobs}"
    )


class MatchingOracle(OracleClient):
    system_prompt = _MATCHING_SYSTEM_PROMPT

    async def match(
        self,
        skills: list[str],
        experience_summary: str,
        job_descriptions: list[JobDescription],
    ) -> MatchResult:
        if not job_descriptions:
            return MatchResult(match_reason="No job descriptions available to match against.")

        prompt = _build_prompt(skills, experience_summary, job_descriptions)
        data = await self._ask_json(prompt)
        if not isinstance(data, dict):
            msg = f"Match response must be a JSON object, got {type(data).__name__}"
            raise ValueError(msg)

        job_id = data.get("matched_job_description_id")
        return MatchResult(
            matched_job_description_id=str(job_id) if job_id else None,
            match_confidence=clamp(data.get("match_confidence"), 0.0, 1.0),
            match_reason=str(data.get("match_reason") or ""),
        )
