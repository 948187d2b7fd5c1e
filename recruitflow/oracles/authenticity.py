"""AI-generation, fraud and genuineness review of an application."""

import logging
from typing import Any

from recruitflow.core.schemas import Education, WorkExperience
from recruitflow.llm.base import parse_json_response
from recruitflow.oracles.base import OracleClient
from recruitflow.oracles.tools import InstitutionCheck, verify_institution

logger = logging.getLogger(__name__)

_AUTHENTICITY_SYSTEM_PROMPT = (
    "You are an expert in identifying potentially problematic job applications. "
    "Analyze the application for:\n"
    "  1. Signs of AI-generated content in the application text.\n"
    "  2. Genuineness of the educational institutions listed (institution "
    "verification results are provided).\n"
    "  3. Genuineness of the companies listed in work experience, using your "
    "general knowledge.\n"
    "  4. General signs of fraudulent or fabricated content (inconsistent "
    "timelines, absurd claims).\n\n"
    "Return ONLY a JSON object (no markdown, no explanation):\n"
    '{"is_potentially_ai_generated": <bool>, "is_potentially_fraudulent": <bool>, '
    '"education_seems_genuine": <bool>, "experience_seems_genuine": <bool>, '
    '"overall_confidence_score": <number 0.0-1.0>, "reason": "<explanation>"}\n\n'
    "education_seems_genuine is false if ANY institution failed verification, "
    "true otherwise or when no education is listed. experience_seems_genuine is "
    "false if any company seems clearly fabricated. overall_confidence_score is "
    "your confidence in the most significant negative finding; keep it below "
    "0.1 when nothing is flagged. A score above 0.6 indicates strong concern. "
    "The reason MUST repeat the verification notes for every institution."
)


def _build_prompt(
    application_text: str,
    education: list[Education],
    experience: list[WorkExperience],
    checks: list[InstitutionCheck],
) -> str:
    sections = [f"APPLICATION TEXT\n{application_text}"]

    if education:
        lines = ["EDUCATION HISTORY"]
        for edu, check in zip(education, checks):
            status = "known" if check.is_known_institution else "NOT VERIFIED"
            lines.append(
                f"- Institution: {edu.institution}, Degree: {edu.degree}, "
                f"Dates: {edu.dates or 'Not Specified'}\n"
                f"  Verification ({status}): {check.verification_notes}"
            )
        sections.append("\n".join(lines))
    else:
        sections.append("(No education data provided for verification.)")

    if experience:
        lines = ["WORK EXPERIENCE (verify companies with general knowledge)"]
        for exp in experience:
            lines.append(
                f"- Company: {exp.company or 'Not Specified'}, Title: {exp.title}, "
                f"Dates: {exp.dates or 'Not Specified'}"
            )
        sections.append("\n".join(lines))
    else:
        sections.append("(No experience data provided for company verification.)")

    return "\n\n".join(sections)


class AuthenticityOracle(OracleClient):
    """Returns the raw verdict dict, or None when the LLM gives no answer."""

    system_prompt = _AUTHENTICITY_SYSTEM_PROMPT

    async def verify(
        self,
        application_text: str,
        education: list[Education] | None = None,
        experience: list[WorkExperience] | None = None,
    ) -> dict[str, Any] | None:
        education = education or []
        experience = experience or []
        checks = [verify_institution(edu.institution) for edu in education]
        flagged = [c.institution for c in checks if not c.is_known_institution]
        if flagged:
            logger.info("Institutions failing verification: %s", ", ".join(flagged))

        raw = await self._complete(_build_prompt(application_text, education, experience, checks))
        if not raw.strip():
            logger.warning("Authenticity check returned an empty response")
            return None

        data = parse_json_response(raw)
        if data is None:
            return None
        if not isinstance(data, dict):
            msg = f"Authenticity response must be a JSON object, got {type(data).__name__}"
            raise ValueError(msg)
        return data
