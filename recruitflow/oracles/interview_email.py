"""Draft an interview invitation email."""

from recruitflow.core.schemas import DraftedEmail
from recruitflow.oracles.base import OracleClient

_EMAIL_SYSTEM_PROMPT = (
    "You are an expert HR assistant drafting an interview invitation email. "
    "The email must be professional, friendly and concise. Congratulate the "
    "candidate on moving forward, name the job title and company, and include "
    "the placeholders [Interviewer Name], [Date/Time Options] and "
    "[Video Call Link/Location] for the recruiter to fill in. Sign off as "
    "\"The Hiring Team at <Company Name>\".\n\n"
    "Return ONLY a JSON object (no markdown, no explanation):\n"
    '{"email_subject": "Interview Invitation: <Job Title> at <Company Name>", '
    '"email_body": "<full email body>"}'
)


class EmailOracle(OracleClient):
    system_prompt = _EMAIL_SYSTEM_PROMPT

    async def draft(
        self,
        candidate_name: str,
        candidate_email: str,
        job_title: str,
        company_name: str,
    ) -> DraftedEmail | None:
        """Return the drafted email, or None if the LLM produced nothing usable."""
        prompt = (
            f"Company Name: {company_name}\n"
            f"Candidate Name: {candidate_name}\n"
            f"Candidate Email: {candidate_email}\n"
            f"Job Title: {job_title}"
        )
        data = await self._ask_json(prompt)
        if not isinstance(data, dict):
            return None
        subject = data.get("email_subject")
        body = data.get("email_body")
        if not subject or not body:
            return None
        return DraftedEmail(subject=str(subject), body=str(body))
