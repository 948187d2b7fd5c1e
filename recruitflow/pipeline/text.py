"""Plain-text summaries of a candidate, as fed to the oracles."""

from recruitflow.core.config import PipelineConfig
from recruitflow.core.schemas import CandidateRecord

NO_EXPERIENCE = "No prior experience listed."
NO_TEXT_CONTENT = (
    "No textual content available for authenticity check other than "
    "structured data which will be passed separately."
)


def experience_summary(record: CandidateRecord | None) -> str:
    """One paragraph per job: 'Title at Company (dates): description'."""
    if record is None or not record.work_experience:
        return NO_EXPERIENCE
    return "\n\n".join(
        f"{exp.title} at {exp.company or 'N/A'} ({exp.dates or 'N/A'}): {exp.description}"
        for exp in record.work_experience
    )


def ranking_experience(record: CandidateRecord) -> str:
    """Experience text for the ranking oracle (no dates)."""
    return "\n\n".join(
        f"{exp.title} at {exp.company or 'N/A'}: {exp.description}"
        for exp in record.work_experience
    )


def application_text(
    record: CandidateRecord | None,
    cover_letter_text: str | None = None,
    profile_url: str | None = None,
    config: PipelineConfig | None = None,
) -> str:
    """Assemble the free text the authenticity oracle reviews.

    Falls back to NO_TEXT_CONTENT when neither experience, education,
    skills, a cover letter nor a profile URL contributed anything.
    """
    config = config or PipelineConfig()
    parts: list[str] = []
    contributed = False

    if record is not None and record.personal_information.name:
        parts.append(f"Candidate: {record.personal_information.name}\n\n")

    if cover_letter_text:
        excerpt = cover_letter_text[: config.cover_letter_excerpt_chars]
        parts.append(f"Cover Letter Content (or placeholder):\n{excerpt}\n\n")
        contributed = True

    if record is not None and record.work_experience:
        lines = ["Experience Summary (for context):\n"]
        for exp in record.work_experience:
            description = exp.description[: config.experience_excerpt_chars]
            lines.append(f"Title: {exp.title} at {exp.company}. Description: {description}...\n")
        parts.append("".join(lines) + "\n")
        contributed = True

    if record is not None and record.education:
        lines = ["Education Summary (for context):\n"]
        for edu in record.education:
            lines.append(f"Degree: {edu.degree} from {edu.institution}.\n")
        parts.append("".join(lines) + "\n")
        contributed = True

    if record is not None and record.skills:
        parts.append(f"Skills: {', '.join(record.skills)}\n\n")
        contributed = True

    if profile_url:
        parts.append(
            f"Online Profile URL Provided: {profile_url}\n"
            "(AI will consider typical information from such a profile for "
            "authenticity check based on this URL.)\n\n"
        )
        contributed = True

    if not contributed:
        return NO_TEXT_CONTENT
    return "".join(parts).strip()
