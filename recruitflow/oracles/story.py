"""Short narrative about a strong candidate's potential in the matched role."""

from recruitflow.oracles.base import OracleClient

_STORY_SYSTEM_PROMPT = (
    "You are a creative and insightful talent acquisition storyteller. Write a "
    "brief, optimistic narrative (2-4 sentences) about a candidate's potential "
    "fit, unique strengths, and possible impact or growth in the matched role "
    "at the hiring company. Be engaging and forward-looking, and base it on "
    "the skills and experience given.\n\n"
    "Return ONLY a JSON object (no markdown, no explanation):\n"
    '{"potential_story": "<narrative>"}'
)


class StoryOracle(OracleClient):
    system_prompt = _STORY_SYSTEM_PROMPT

    async def generate(
        self,
        candidate_name: str,
        skills: list[str],
        experience_summary: str,
        job_title: str,
        job_responsibilities: str,
        company_name: str,
    ) -> str:
        prompt = (
            f"Candidate Name: {candidate_name}\n"
            f"Key Skills: {', '.join(skills) or 'not specified'}\n"
            f"Experience Summary:\n{experience_summary}\n\n"
            f"Matched Job Title: {job_title}\n"
            f"Company: {company_name or 'not provided'}\n"
            f"Key Responsibilities:\n{job_responsibilities}"
        )
        data = await self._ask_json(prompt)
        story = data.get("potential_story") if isinstance(data, dict) else None
        if not story:
            msg = "Story response missing 'potential_story' field"
            raise ValueError(msg)
        return str(story)
