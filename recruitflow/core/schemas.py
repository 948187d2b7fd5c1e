"""Core data models for the recruiting pipeline."""

import base64
import mimetypes
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME_TYPE = "application/msword"

NEUTRAL_AUTHENTICITY_REASON = "Authenticity check not performed or inconclusive."


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


class UploadedFile(BaseModel):
    """A file handed to the pipeline by the caller (resume or cover letter)."""

    model_config = ConfigDict(frozen=True)

    name: str
    content_type: str = ""
    data: bytes = b""

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "UploadedFile":
        """Read a file from disk, guessing its content type from the extension."""
        path = Path(path)
        if not path.exists():
            msg = f"File not found: {path}"
            raise FileNotFoundError(msg)
        if content_type is None:
            guessed, _ = mimetypes.guess_type(path.name)
            if guessed is None and path.suffix.lower() == ".docx":
                guessed = DOCX_MIME_TYPE
            content_type = guessed or "application/octet-stream"
        return cls(name=path.name, content_type=content_type, data=path.read_bytes())


class ResumePayload(BaseModel):
    """Resume content in the form the extraction oracle accepts."""

    model_config = ConfigDict(frozen=True)

    content_type: str
    data: bytes

    @property
    def is_text(self) -> bool:
        return self.content_type.startswith("text/")

    @property
    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"

    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Extracted candidate data
# ---------------------------------------------------------------------------


class PersonalInformation(BaseModel):
    """Contact block. Absent URLs stay None and are dropped by exclude_none dumps."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str | None = None
    github: str | None = None


class WorkExperience(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    title: str = ""
    company: str = ""
    dates: str | None = None
    description: str = ""
    industry: str | None = None


class Project(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = ""
    role: str | None = None
    dates: str | None = None
    description: str = ""
    technologies: list[str] = Field(default_factory=list)


class Education(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    degree: str = ""
    institution: str = ""
    dates: str | None = None


class CandidateRecord(BaseModel):
    """Structured candidate data produced by the extraction oracle."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    personal_information: PersonalInformation = Field(default_factory=PersonalInformation)
    work_experience: list[WorkExperience] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Job descriptions and oracle results
# ---------------------------------------------------------------------------


class JobDescription(BaseModel):
    """A stored, open job description."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    company_name: str = ""
    full_text: str
    created_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def create(cls, title: str, company_name: str, full_text: str) -> "JobDescription":
        """Build a new job description with a fresh id and creation time."""
        return cls(
            id=str(uuid.uuid4()),
            title=title,
            company_name=company_name,
            full_text=full_text,
        )


class MatchResult(BaseModel):
    """Best-matching job for a candidate. No id means no match."""

    model_config = ConfigDict(frozen=True)

    matched_job_description_id: str | None = None
    match_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    match_reason: str = ""

    @model_validator(mode="before")
    @classmethod
    def no_match_has_zero_confidence(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("matched_job_description_id"):
            data = {**data, "matched_job_description_id": None, "match_confidence": 0.0}
        return data


class RankingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    ranking: float = Field(default=0.0, ge=0.0, le=100.0)
    reason: str = ""


class AuthenticityResult(BaseModel):
    """Outcome of the AI-generation / fraud / genuineness review."""

    is_potentially_ai_generated: bool = False
    is_potentially_fraudulent: bool = False
    education_seems_genuine: bool = True
    experience_seems_genuine: bool = True
    overall_confidence_score: float = 0.0
    reason: str = NEUTRAL_AUTHENTICITY_REASON

    @classmethod
    def not_performed(cls) -> "AuthenticityResult":
        return cls()

    @property
    def is_flagged(self) -> bool:
        return self.is_potentially_ai_generated or self.is_potentially_fraudulent


class DraftedEmail(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str
    body: str


# ---------------------------------------------------------------------------
# Pipeline output
# ---------------------------------------------------------------------------


class PipelineOutcome(BaseModel):
    """Consolidated result of processing one application.

    Built with defaults when the pipeline starts, filled in stage by stage,
    and handed back once. ``error`` is the only failure signal.
    """

    id: str
    file_name: str
    processed_at: datetime
    matched_job_description_id: str | None = None
    matched_job_description_title: str | None = None
    extracted_data: CandidateRecord | None = None
    ranking_data: RankingResult | None = None
    authenticity_data: AuthenticityResult = Field(default_factory=AuthenticityResult.not_performed)
    application_text_content: str | None = None
    drafted_interview_email: DraftedEmail | None = None
    potential_story: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def candidate_name(self) -> str:
        if self.extracted_data is None:
            return ""
        return self.extracted_data.personal_information.name
