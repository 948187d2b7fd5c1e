"""Resume / cover letter / profile URL → structured candidate data."""

import logging
from typing import Any

from recruitflow.core.schemas import ResumePayload
from recruitflow.oracles.base import OracleClient
from recruitflow.oracles.tools import describe_profile_url, lookup_company_industry

logger = logging.getLogger(__name__)

_EXTRACTION_SYSTEM_PROMPT = (
    "You are an expert resume and professional profile parser. Extract "
    "information from the documents provided (resume, and optionally cover "
    "letter text, an online profile URL and a GitHub URL) into structured JSON.\n\n"
    "The resume is the primary source. Use the cover letter to supplement or "
    "corroborate details.\n\n"
    "Return ONLY a JSON object (no markdown, no explanation) with these fields:\n"
    "- personal_information: {name, email, phone, linkedin?, github?}. Omit "
    "linkedin/github entirely when no URL is found; never use null or \"\".\n"
    "- work_experience: list of {title, company, dates, description, industry} "
    "for paid employment and significant internships only.\n"
    "- projects: list of {name, role, dates, description, technologies} for "
    "personal, academic or open-source projects. technologies is [] when none "
    "are listed, never null.\n"
    "- education: list of {degree, institution, dates}.\n"
    "- skills: list of every technical and soft skill mentioned.\n\n"
    "GitHub URL priority: an explicitly provided GitHub URL, then the online "
    "profile URL when it is a GitHub profile, then any GitHub URL in the "
    "documents. LinkedIn URL: one found in the documents, else the online "
    "profile URL when it is a LinkedIn profile."
)


def _build_prompt(
    resume: ResumePayload,
    cover_letter_text: str | None,
    profile_url: str | None,
    github_url: str | None,
) -> str:
    sections: list[str] = []

    if resume.is_text:
        sections.append(f"RESUME\n{resume.text()}")
    else:
        sections.append(f"RESUME\n(attached as {resume.content_type})")

    if cover_letter_text:
        sections.append(f"COVER LETTER TEXT\n{cover_letter_text}")

    if profile_url:
        hints = describe_profile_url(profile_url)
        lines = [
            "ONLINE PROFILE",
            f"URL: {profile_url}",
            f"Profile type: {hints.profile_type}",
        ]
        if hints.possible_headline:
            lines.append(f"Likely headline: {hints.possible_headline}")
        if hints.key_skills:
            lines.append(f"Skills typical of this profile: {', '.join(hints.key_skills)}")
        for point in hints.summary_points:
            lines.append(f"- {point}")
        lines.append(
            "Use these hints together with the resume to supplement skills and "
            "to fill the LinkedIn/GitHub URL fields."
        )
        sections.append("\n".join(lines))

    if github_url:
        sections.append(
            "EXPLICITLY PROVIDED GITHUB URL\n"
            f"{github_url}\n"
            "Use this for personal_information.github."
        )

    return "\n\n".join(sections)


def _fill_industries(raw: dict[str, Any]) -> None:
    for entry in raw.get("work_experience") or []:
        if isinstance(entry, dict) and not entry.get("industry"):
            entry["industry"] = lookup_company_industry(str(entry.get("company") or ""))


class ExtractionOracle(OracleClient):
    """Calls the LLM to turn an application into raw candidate JSON.

    The result is returned un-normalized: null URLs and null technology
    lists are left for the pipeline to coerce.
    """

    system_prompt = _EXTRACTION_SYSTEM_PROMPT

    async def extract(
        self,
        resume: ResumePayload,
        cover_letter_text: str | None = None,
        profile_url: str | None = None,
        github_url: str | None = None,
    ) -> dict[str, Any]:
        prompt = _build_prompt(resume, cover_letter_text, profile_url, github_url)
        media = None if resume.is_text else resume
        data = await self._ask_json(prompt, media=media)
        if not isinstance(data, dict):
            msg = f"Extraction response must be a JSON object, got {type(data).__name__}"
            raise ValueError(msg)
        _fill_industries(data)
        logger.info(
            "Extracted %d experience, %d project, %d education entries",
            len(data.get("work_experience") or []),
            len(data.get("projects") or []),
            len(data.get("education") or []),
        )
        return data
