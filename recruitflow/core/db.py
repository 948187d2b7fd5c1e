"""SQLite database layer for job descriptions and processed candidates."""

import sqlite3
from datetime import datetime
from pathlib import Path

from recruitflow.core.schemas import JobDescription, PipelineOutcome

_JOB_DESCRIPTIONS_TABLE = """
CREATE TABLE IF NOT EXISTS job_descriptions (
    id              TEXT PRIMARY KEY,
    title           TEXT NOT NULL,
    company_name    TEXT NOT NULL DEFAULT '',
    full_text       TEXT NOT NULL,
    created_at      TEXT NOT NULL
);
"""

_CANDIDATES_TABLE = """
CREATE TABLE IF NOT EXISTS candidates (
    id                          TEXT PRIMARY KEY,
    file_name                   TEXT NOT NULL,
    matched_job_description_id  TEXT,
    ranking                     REAL,
    payload                     TEXT NOT NULL,
    processed_at                TEXT NOT NULL
);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_JOB_DESCRIPTIONS_TABLE)
    conn.execute(_CANDIDATES_TABLE)
    conn.commit()
    return conn


# ---------------------------------------------------------------------------
# Job descriptions
# ---------------------------------------------------------------------------


def _row_to_job_description(row: sqlite3.Row) -> JobDescription:
    return JobDescription(
        id=row["id"],
        title=row["title"],
        company_name=row["company_name"],
        full_text=row["full_text"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def insert_job_description(conn: sqlite3.Connection, jd: JobDescription) -> None:
    """Store a new job description. Raises ValueError if the id is taken."""
    try:
        conn.execute(
            """
            INSERT INTO job_descriptions (id, title, company_name, full_text, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (jd.id, jd.title, jd.company_name, jd.full_text, jd.created_at.isoformat()),
        )
        conn.commit()
    except sqlite3.IntegrityError as e:
        msg = f"Job description '{jd.id}' already exists"
        raise ValueError(msg) from e


def update_job_description(conn: sqlite3.Connection, jd: JobDescription) -> bool:
    """Replace title, company and text of an existing job description.

    Returns True if a row was updated, False if the id is unknown.
    """
    cursor = conn.execute(
        """
        UPDATE job_descriptions
        SET title = ?, company_name = ?, full_text = ?
        WHERE id = ?
        """,
        (jd.title, jd.company_name, jd.full_text, jd.id),
    )
    conn.commit()
    return cursor.rowcount > 0


def delete_job_description(conn: sqlite3.Connection, jd_id: str) -> bool:
    cursor = conn.execute("DELETE FROM job_descriptions WHERE id = ?", (jd_id,))
    conn.commit()
    return cursor.rowcount > 0


def get_job_description(conn: sqlite3.Connection, jd_id: str) -> JobDescription | None:
    row = conn.execute(
        "SELECT * FROM job_descriptions WHERE id = ?", (jd_id,)
    ).fetchone()
    return None if row is None else _row_to_job_description(row)


def list_job_descriptions(conn: sqlite3.Connection) -> list[JobDescription]:
    """Return all job descriptions, newest first."""
    rows = conn.execute(
        "SELECT * FROM job_descriptions ORDER BY created_at DESC, rowid DESC"
    ).fetchall()
    return [_row_to_job_description(r) for r in rows]


# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------


def save_candidate(conn: sqlite3.Connection, outcome: PipelineOutcome) -> None:
    """Insert or replace a successfully processed application.

    Outcomes carrying an error are never stored.
    """
    if not outcome.succeeded:
        msg = f"Refusing to store failed outcome '{outcome.id}': {outcome.error}"
        raise ValueError(msg)
    ranking = outcome.ranking_data.ranking if outcome.ranking_data else None
    conn.execute(
        """
        INSERT OR REPLACE INTO candidates
            (id, file_name, matched_job_description_id, ranking, payload, processed_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            outcome.id,
            outcome.file_name,
            outcome.matched_job_description_id,
            ranking,
            outcome.model_dump_json(exclude_none=True),
            outcome.processed_at.isoformat(),
        ),
    )
    conn.commit()


def get_candidate(conn: sqlite3.Connection, candidate_id: str) -> PipelineOutcome | None:
    row = conn.execute(
        "SELECT payload FROM candidates WHERE id = ?", (candidate_id,)
    ).fetchone()
    return None if row is None else PipelineOutcome.model_validate_json(row["payload"])


def delete_candidate(conn: sqlite3.Connection, candidate_id: str) -> bool:
    cursor = conn.execute("DELETE FROM candidates WHERE id = ?", (candidate_id,))
    conn.commit()
    return cursor.rowcount > 0


def _matches_search(outcome: PipelineOutcome, term: str) -> bool:
    skills = outcome.extracted_data.skills if outcome.extracted_data else []
    haystacks = [
        outcome.candidate_name,
        ", ".join(skills),
        outcome.matched_job_description_title or "",
        outcome.file_name,
    ]
    return any(term in h.lower() for h in haystacks)


def _has_skill(outcome: PipelineOutcome, skill: str) -> bool:
    skills = outcome.extracted_data.skills if outcome.extracted_data else []
    return any(s.lower() == skill for s in skills)


def list_candidates(
    conn: sqlite3.Connection,
    search: str | None = None,
    skill: str | None = None,
) -> list[PipelineOutcome]:
    """Return stored candidates, newest first.

    ``search`` matches name, skills, matched job title or file name
    (case-insensitive substring); ``skill`` requires an exact skill match.
    """
    rows = conn.execute(
        "SELECT payload FROM candidates ORDER BY processed_at DESC, rowid DESC"
    ).fetchall()
    outcomes = [PipelineOutcome.model_validate_json(r["payload"]) for r in rows]

    if search:
        term = search.lower()
        outcomes = [o for o in outcomes if _matches_search(o, term)]
    if skill:
        wanted = skill.lower()
        outcomes = [o for o in outcomes if _has_skill(o, wanted)]
    return outcomes
