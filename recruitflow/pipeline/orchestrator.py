"""Orchestrator: one uploaded application → one PipelineOutcome.

Data flow:
  1. Normalize resume (fatal on .doc / DOCX extraction failure)
  2. Normalize cover letter (never fatal)
  3. Extract candidate data (fatal on missing name)
  4. Guard: job description catalog must be non-empty
  5. Match → 6. Rank → 7. Story (ranking >= 70)
  8. Assemble application text → 9. Verify authenticity
  10. Draft interview email (ranking >= 80, matched, not confidently flagged)

Every oracle call is awaited in turn. Nothing here is shared between
invocations, so concurrent calls for different applications are safe.
"""

import copy
import logging
import math
import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from recruitflow.core.config import PipelineConfig
from recruitflow.core.schemas import (
    NEUTRAL_AUTHENTICITY_REASON,
    AuthenticityResult,
    CandidateRecord,
    Education,
    JobDescription,
    PipelineOutcome,
    RankingResult,
    UploadedFile,
    WorkExperience,
    utcnow,
)
from recruitflow.documents.extractor import (
    DocumentError,
    normalize_cover_letter,
    normalize_resume,
)
from recruitflow.oracles import Oracles, RankingCandidate
from recruitflow.pipeline.text import application_text, experience_summary, ranking_experience

logger = logging.getLogger(__name__)

NAME_MISSING_ERROR = "Failed to extract candidate name from resume."
NO_JOBS_ERROR = (
    "No job descriptions available in the system to match against. "
    "Please add job descriptions first."
)
SKIPPED_EXTRACTION_REASON = "Authenticity check skipped due to data extraction error."
SKIPPED_NO_JOBS_REASON = "Authenticity check skipped due to missing job descriptions."
SKIPPED_PROCESSING_REASON = "Authenticity check skipped due to processing error."
INCONCLUSIVE_REASON = "Authenticity check AI flow returned no conclusive data."
NO_REASON_GIVEN = "No specific reason provided by AI."

_PERSONAL_TEXT_FIELDS = ("name", "email", "phone")
_ENTRY_TEXT_FIELDS = {
    "work_experience": ("title", "company", "description"),
    "projects": ("name", "description"),
    "education": ("degree", "institution"),
}


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_extraction(raw: Mapping[str, Any]) -> CandidateRecord:
    """Coerce raw extraction JSON into a CandidateRecord.

    A null github URL becomes "" and a null technology list becomes [].
    A null linkedin URL is left as None.
    """
    data: dict[str, Any] = copy.deepcopy(dict(raw))

    for key in ("personal_information", "work_experience", "projects", "education", "skills"):
        if data.get(key) is None:
            data.pop(key, None)

    personal = data.get("personal_information")
    if isinstance(personal, dict):
        for field in _PERSONAL_TEXT_FIELDS:
            if personal.get(field) is None:
                personal[field] = ""
        if "github" in personal and personal["github"] is None:
            personal["github"] = ""

    for key, fields in _ENTRY_TEXT_FIELDS.items():
        for entry in data.get(key) or []:
            if not isinstance(entry, dict):
                continue
            for field in fields:
                if entry.get(field) is None:
                    entry[field] = ""

    for project in data.get("projects") or []:
        if isinstance(project, dict) and project.get("technologies") is None:
            project["technologies"] = []

    return CandidateRecord.model_validate(data)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    return bool(value)


def _genuine(value: Any, section_empty: bool) -> bool:
    if section_empty or value is None:
        return True
    return _as_bool(value)


def _confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value):
        return 0.0
    return float(value)


def normalize_authenticity(
    raw: Mapping[str, Any],
    education: Sequence[Education],
    experience: Sequence[WorkExperience],
) -> AuthenticityResult:
    """Turn a raw authenticity verdict into strict, defaulted values."""
    return AuthenticityResult(
        is_potentially_ai_generated=_as_bool(raw.get("is_potentially_ai_generated")),
        is_potentially_fraudulent=_as_bool(raw.get("is_potentially_fraudulent")),
        education_seems_genuine=_genuine(raw.get("education_seems_genuine"), not education),
        experience_seems_genuine=_genuine(raw.get("experience_seems_genuine"), not experience),
        overall_confidence_score=_confidence(raw.get("overall_confidence_score")),
        reason=str(raw.get("reason") or "") or NO_REASON_GIVEN,
    )


# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------


def should_generate_story(ranking: RankingResult | None, config: PipelineConfig) -> bool:
    return ranking is not None and ranking.ranking >= config.story_min_ranking


def should_draft_email(
    ranking: RankingResult | None,
    candidate_email: str,
    matched_jd: JobDescription | None,
    authenticity: AuthenticityResult,
    config: PipelineConfig,
) -> bool:
    """Invite only strong, matched, reachable candidates not confidently flagged."""
    if ranking is None or ranking.ranking < config.email_min_ranking:
        return False
    if not candidate_email or matched_jd is None or not matched_jd.title:
        return False
    confidently_flagged = (
        authenticity.is_flagged
        and authenticity.overall_confidence_score > config.flag_confidence_threshold
    )
    return not confidently_flagged


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


async def _run_stages(
    outcome: PipelineOutcome,
    resume: UploadedFile,
    job_descriptions: Sequence[JobDescription],
    oracles: Oracles,
    cover_letter: UploadedFile | None,
    profile_url: str | None,
    github_url: str | None,
    config: PipelineConfig,
) -> None:
    # Step 1: resume
    try:
        resume_payload = normalize_resume(resume)
    except DocumentError as e:
        logger.error("Resume '%s' rejected: %s", resume.name, e)
        outcome.error = str(e)
        return

    # Step 2: cover letter
    cover_letter_text: str | None = None
    if cover_letter is not None:
        cover_letter_text = normalize_cover_letter(cover_letter)

    # Step 3: extract
    raw = await oracles.extraction.extract(
        resume_payload,
        cover_letter_text=cover_letter_text,
        profile_url=profile_url,
        github_url=github_url,
    )
    record = normalize_extraction(raw)
    outcome.extracted_data = record
    name = record.personal_information.name

    if not name:
        logger.error("No candidate name extracted from '%s'", resume.name)
        outcome.error = NAME_MISSING_ERROR
        outcome.authenticity_data.reason = SKIPPED_EXTRACTION_REASON
        return

    # Step 4: catalog guard
    if not job_descriptions:
        logger.error("No job descriptions to match '%s' against", name)
        outcome.error = NO_JOBS_ERROR
        outcome.authenticity_data.reason = SKIPPED_NO_JOBS_REASON
        return

    # Step 5: match
    summary = experience_summary(record)
    match = await oracles.matching.match(record.skills, summary, list(job_descriptions))

    matched_jd: JobDescription | None = None
    if match.matched_job_description_id:
        matched_jd = next(
            (jd for jd in job_descriptions if jd.id == match.matched_job_description_id),
            None,
        )
        if matched_jd is None:
            logger.warning(
                "Matched job id '%s' is not in the supplied catalog",
                match.matched_job_description_id,
            )
        else:
            outcome.matched_job_description_id = matched_jd.id
            outcome.matched_job_description_title = matched_jd.title

    if matched_jd is None:
        logger.warning("No suitable job description for '%s': %s", name, match.match_reason)

    # Step 6: rank
    ranking: RankingResult | None = None
    if matched_jd is not None:
        rankings = await oracles.ranking.rank(
            matched_jd.full_text,
            [
                RankingCandidate(
                    name=name,
                    skills=", ".join(record.skills),
                    experience=ranking_experience(record),
                )
            ],
        )
        if rankings:
            ranking = rankings[0]
        else:
            logger.warning("Ranking returned nothing for '%s' against '%s'", name, matched_jd.title)
        outcome.ranking_data = ranking

        # Step 7: story
        if should_generate_story(ranking, config):
            try:
                outcome.potential_story = await oracles.story.generate(
                    candidate_name=name,
                    skills=record.skills,
                    experience_summary=summary,
                    job_title=matched_jd.title,
                    job_responsibilities=matched_jd.full_text[: config.job_excerpt_chars],
                    company_name=matched_jd.company_name,
                )
            except Exception:
                logger.error("Error generating candidate story for '%s'", name, exc_info=True)

    # Step 8: application text
    text = application_text(record, cover_letter_text, profile_url, config)
    outcome.application_text_content = text

    # Step 9: authenticity
    verdict = await oracles.authenticity.verify(text, record.education, record.work_experience)
    if verdict is not None:
        outcome.authenticity_data = normalize_authenticity(
            verdict, record.education, record.work_experience
        )
    else:
        outcome.authenticity_data.reason = INCONCLUSIVE_REASON

    # Step 10: interview email
    if matched_jd is not None and should_draft_email(
        ranking,
        record.personal_information.email,
        matched_jd,
        outcome.authenticity_data,
        config,
    ):
        try:
            email = await oracles.email.draft(
                candidate_name=name,
                candidate_email=record.personal_information.email,
                job_title=matched_jd.title,
                company_name=matched_jd.company_name,
            )
            if email is not None:
                outcome.drafted_interview_email = email
        except Exception:
            logger.error("Error drafting interview email for '%s'", name, exc_info=True)


async def process_application(
    resume: UploadedFile,
    job_descriptions: Sequence[JobDescription],
    oracles: Oracles,
    cover_letter: UploadedFile | None = None,
    profile_url: str | None = None,
    github_url: str | None = None,
    *,
    config: PipelineConfig | None = None,
    id_factory: Callable[[], str] = _new_id,
    clock: Callable[[], datetime] = utcnow,
) -> PipelineOutcome:
    """Run one application through the full pipeline.

    Never raises: failures are reported through ``outcome.error`` with
    whatever was produced before the failure kept on the outcome.
    """
    config = config or PipelineConfig()
    outcome = PipelineOutcome(id=id_factory(), file_name=resume.name, processed_at=clock())
    logger.info("Processing application '%s' (%s)", resume.name, outcome.id)

    try:
        await _run_stages(
            outcome,
            resume,
            job_descriptions,
            oracles,
            cover_letter,
            profile_url or None,
            github_url or None,
            config,
        )
    except Exception as e:
        logger.exception("Error processing application '%s'", resume.name)
        if outcome.authenticity_data.reason == NEUTRAL_AUTHENTICITY_REASON:
            outcome.authenticity_data.reason = SKIPPED_PROCESSING_REASON
        outcome.error = f"Processing failed: {e}"
        return outcome

    if outcome.succeeded:
        logger.info(
            "Processed '%s': match=%s ranking=%s email=%s",
            resume.name,
            outcome.matched_job_description_title or "none",
            outcome.ranking_data.ranking if outcome.ranking_data else "n/a",
            "yes" if outcome.drafted_interview_email else "no",
        )
    return outcome
