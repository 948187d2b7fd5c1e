"""Deterministic lookups whose results are fed into oracle prompts.

None of these fetch anything over the network: they are heuristics that
give the LLM a consistent starting point.
"""

from pydantic import BaseModel, Field

UNKNOWN_INDUSTRY = "Unknown Industry"

_INDUSTRY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("Technology", ("google", "microsoft", "facebook", "amazon", "apple")),
    ("Consulting", ("accenture", "deloitte")),
    ("Healthcare", ("hospital", "health")),
]

_KNOWN_INSTITUTION_KEYWORDS = (
    "university",
    "college",
    "institute",
    "polytechnic",
    "school of",
    "academy of",
    "faculty of",
)
_SUSPICIOUS_INSTITUTION_KEYWORDS = (
    "test school",
    "fake university",
    "example institution",
    "my own school",
)
_GENERIC_INSTITUTION_KEYWORDS = {"academy", "school", "school of", "academy of"}


class ProfileHints(BaseModel):
    """Plausible content of an online profile, inferred from its URL alone."""

    profile_type: str
    possible_headline: str | None = None
    key_skills: list[str] = Field(default_factory=list)
    summary_points: list[str] = Field(default_factory=list)


class InstitutionCheck(BaseModel):
    institution: str
    is_known_institution: bool
    verification_notes: str


def lookup_company_industry(company_name: str) -> str:
    """Primary industry for a company name, or UNKNOWN_INDUSTRY."""
    name = company_name.lower()
    for industry, keywords in _INDUSTRY_KEYWORDS:
        if any(k in name for k in keywords):
            return industry
    return UNKNOWN_INDUSTRY


def describe_profile_url(url: str) -> ProfileHints:
    """Infer profile type and typical content from a profile URL."""
    lowered = url.lower()
    if "linkedin.com/in/" in lowered:
        return ProfileHints(
            profile_type="LinkedIn",
            possible_headline="Experienced Professional | Seeking New Opportunities",
            key_skills=["Project Management", "Data Analysis", "Communication", "Team Leadership"],
            summary_points=[
                "Results-oriented professional with X years of experience.",
                "Proven ability to manage complex projects and deliver results.",
                "Strong analytical and problem-solving skills.",
            ],
        )
    if "github.com/" in lowered:
        return ProfileHints(
            profile_type="GitHub",
            possible_headline="Software Developer | Open Source Contributor",
            key_skills=["JavaScript", "Python", "Git", "React", "Node.js"],
            summary_points=[
                "Passionate developer with a focus on building scalable web applications.",
                "Contributor to several open-source projects.",
                "Proficient in various programming languages and frameworks.",
            ],
        )
    if lowered.startswith("http"):
        return ProfileHints(
            profile_type="Personal Portfolio/Other",
            possible_headline="Creative Professional",
            key_skills=["Design", "Content Creation", "Marketing"],
            summary_points=["Showcasing a collection of work and projects."],
        )
    return ProfileHints(profile_type="Unknown")


def verify_institution(institution_name: str) -> InstitutionCheck:
    """Judge whether a name looks like a real educational institution."""
    name = institution_name.lower().strip()

    def result(known: bool, notes: str) -> InstitutionCheck:
        return InstitutionCheck(
            institution=institution_name,
            is_known_institution=known,
            verification_notes=notes,
        )

    if not name:
        return result(False, "Institution name is empty.")

    if any(k in name for k in _SUSPICIOUS_INSTITUTION_KEYWORDS):
        return result(
            False,
            f"Institution name '{institution_name}' contains suspicious keywords (e.g., 'test', 'fake').",
        )

    word_count = len(name.split(" "))
    if any(k in name for k in _KNOWN_INSTITUTION_KEYWORDS):
        short_generic = (
            ("academy" in name or "school" in name) and word_count < 3 and " of " not in name
        )
        has_specific_keyword = any(
            k in name and k not in _GENERIC_INSTITUTION_KEYWORDS
            for k in _KNOWN_INSTITUTION_KEYWORDS
        )
        if short_generic and not has_specific_keyword:
            return result(
                False,
                f"Institution name '{institution_name}' like 'X Academy' or 'Y School' is generic "
                "without further specification (e.g., 'University of X', 'X State College', "
                "'Academy of Sciences').",
            )
        return result(
            True,
            f"Institution name '{institution_name}' contains standard institutional keywords "
            "and seems plausible.",
        )

    if word_count < 2:
        return result(
            False,
            f"Institution name '{institution_name}' is very short and lacks common institutional keywords.",
        )

    return result(
        False,
        f"Institution name '{institution_name}' does not strongly match patterns of known "
        "institutional names (e.g., missing 'University', 'College', 'Institute'). "
        "Further scrutiny advised.",
    )
