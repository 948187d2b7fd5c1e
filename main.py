"""CLI entry point for the recruiting pipeline."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from recruitflow.core.config import Settings
from recruitflow.core.db import (
    delete_candidate,
    delete_job_description,
    get_candidate,
    get_job_description,
    init_db,
    insert_job_description,
    list_candidates,
    list_job_descriptions,
    save_candidate,
    update_job_description,
)
from recruitflow.core.schemas import JobDescription, PipelineOutcome, UploadedFile
from recruitflow.llm import available_providers

DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to settings YAML file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recruiting pipeline - extract, match, rank and vet job applications",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- process ---
    process_parser = subparsers.add_parser(
        "process", help="Process one application against all stored job descriptions",
    )
    process_parser.add_argument("--resume", required=True, help="Path to the resume file")
    process_parser.add_argument("--cover-letter", help="Path to an optional cover letter")
    process_parser.add_argument("--profile-url", help="Online profile URL (e.g. LinkedIn)")
    process_parser.add_argument("--github-url", help="GitHub profile URL")
    process_parser.add_argument(
        "--provider",
        choices=available_providers(),
        help="LLM provider for every oracle (overrides config)",
    )
    process_parser.add_argument(
        "--no-save",
        action="store_true",
        help="Do not store the processed candidate",
    )
    _add_common(process_parser)

    # --- jobs ---
    jobs_parser = subparsers.add_parser("jobs", help="Manage job descriptions")
    jobs_sub = jobs_parser.add_subparsers(dest="jobs_command", required=True)

    jobs_add = jobs_sub.add_parser("add", help="Add a job description")
    jobs_add.add_argument("--title", required=True)
    jobs_add.add_argument("--company", default="")
    source = jobs_add.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Full job description text")
    source.add_argument("--file", help="Path to a text file with the job description")
    _add_common(jobs_add)

    jobs_list = jobs_sub.add_parser("list", help="List job descriptions")
    _add_common(jobs_list)

    jobs_update = jobs_sub.add_parser("update", help="Edit a job description")
    jobs_update.add_argument("id")
    jobs_update.add_argument("--title")
    jobs_update.add_argument("--company")
    new_source = jobs_update.add_mutually_exclusive_group()
    new_source.add_argument("--text", help="Replacement job description text")
    new_source.add_argument("--file", help="Path to a text file with the replacement text")
    _add_common(jobs_update)

    jobs_show = jobs_sub.add_parser("show", help="Show one job description")
    jobs_show.add_argument("id")
    _add_common(jobs_show)

    jobs_delete = jobs_sub.add_parser("delete", help="Delete a job description")
    jobs_delete.add_argument("id")
    _add_common(jobs_delete)

    # --- candidates ---
    cand_parser = subparsers.add_parser("candidates", help="Review processed candidates")
    cand_sub = cand_parser.add_subparsers(dest="candidates_command", required=True)

    cand_list = cand_sub.add_parser("list", help="List candidates")
    cand_list.add_argument("--search", help="Match name, skills, job title or file name")
    cand_list.add_argument("--skill", help="Only candidates with this exact skill")
    _add_common(cand_list)

    cand_show = cand_sub.add_parser("show", help="Show one candidate as JSON")
    cand_show.add_argument("id")
    _add_common(cand_show)

    cand_delete = cand_sub.add_parser("delete", help="Delete a candidate")
    cand_delete.add_argument("id")
    _add_common(cand_delete)

    # --- dashboard ---
    dashboard_parser = subparsers.add_parser("dashboard", help="Print pipeline statistics")
    _add_common(dashboard_parser)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str | None) -> Settings:
    if path is not None:
        return Settings.from_yaml(path)
    if DEFAULT_CONFIG_PATH.exists():
        return Settings.from_yaml(DEFAULT_CONFIG_PATH)
    return Settings()


def _outcome_json(outcome: PipelineOutcome) -> str:
    return json.dumps(outcome.model_dump(mode="json", exclude_none=True), indent=2)


async def run_process(args: argparse.Namespace, settings: Settings) -> int:
    """Process one application. Returns the process exit code."""
    from recruitflow.oracles import build_oracles
    from recruitflow.pipeline.orchestrator import process_application

    if args.provider:
        llm = settings.llm.model_copy(update={"provider": args.provider, "model": None})
        settings = settings.model_copy(update={"llm": llm})

    resume = UploadedFile.from_path(args.resume)
    cover_letter = UploadedFile.from_path(args.cover_letter) if args.cover_letter else None

    conn = init_db(settings.database.path)
    try:
        jobs = list_job_descriptions(conn)
        oracles = build_oracles(settings.llm)
        outcome = await process_application(
            resume,
            jobs,
            oracles,
            cover_letter=cover_letter,
            profile_url=args.profile_url,
            github_url=args.github_url,
            config=settings.pipeline,
        )

        print(_outcome_json(outcome))
        if not outcome.succeeded:
            print(f"Error: {outcome.error}", file=sys.stderr)
            return 1

        if not args.no_save:
            save_candidate(conn, outcome)
            print(f"Candidate {outcome.id} saved.", file=sys.stderr)
        return 0
    finally:
        conn.close()


def cmd_jobs(args: argparse.Namespace, settings: Settings) -> int:
    conn = init_db(settings.database.path)
    try:
        if args.jobs_command == "add":
            text = args.text if args.text is not None else Path(args.file).read_text()
            jd = JobDescription.create(args.title, args.company, text)
            insert_job_description(conn, jd)
            print(f"Added job description {jd.id}: {jd.title}")
        elif args.jobs_command == "list":
            jobs = list_job_descriptions(conn)
            print(f"{len(jobs)} job description(s)")
            for jd in jobs:
                print(f"  {jd.id}  {jd.title} @ {jd.company_name or '-'}  ({jd.created_at:%Y-%m-%d})")
        elif args.jobs_command == "show":
            jd = get_job_description(conn, args.id)
            if jd is None:
                print(f"Error: job description '{args.id}' not found", file=sys.stderr)
                return 1
            print(jd.model_dump_json(indent=2))
        elif args.jobs_command == "update":
            jd = get_job_description(conn, args.id)
            if jd is None:
                print(f"Error: job description '{args.id}' not found", file=sys.stderr)
                return 1
            changes: dict[str, str] = {}
            if args.title is not None:
                changes["title"] = args.title
            if args.company is not None:
                changes["company_name"] = args.company
            if args.text is not None:
                changes["full_text"] = args.text
            elif args.file is not None:
                changes["full_text"] = Path(args.file).read_text()
            update_job_description(conn, jd.model_copy(update=changes))
            print(f"Updated job description {jd.id}")
        elif args.jobs_command == "delete":
            if not delete_job_description(conn, args.id):
                print(f"Error: job description '{args.id}' not found", file=sys.stderr)
                return 1
            print(f"Deleted job description {args.id}")
    finally:
        conn.close()
    return 0


def cmd_candidates(args: argparse.Namespace, settings: Settings) -> int:
    conn = init_db(settings.database.path)
    try:
        if args.candidates_command == "list":
            candidates = list_candidates(conn, search=args.search, skill=args.skill)
            print(f"{len(candidates)} candidate(s)")
            for c in candidates:
                ranking = f"{c.ranking_data.ranking:.0f}" if c.ranking_data else "-"
                flag = " [flagged]" if c.authenticity_data.is_flagged else ""
                print(
                    f"  {c.id}  {c.candidate_name or c.file_name}  "
                    f"job={c.matched_job_description_title or '-'}  ranking={ranking}{flag}"
                )
        elif args.candidates_command == "show":
            candidate = get_candidate(conn, args.id)
            if candidate is None:
                print(f"Error: candidate '{args.id}' not found", file=sys.stderr)
                return 1
            print(_outcome_json(candidate))
        elif args.candidates_command == "delete":
            if not delete_candidate(conn, args.id):
                print(f"Error: candidate '{args.id}' not found", file=sys.stderr)
                return 1
            print(f"Deleted candidate {args.id}")
    finally:
        conn.close()
    return 0


def cmd_dashboard(settings: Settings) -> int:
    from recruitflow.pipeline.report import summarize_candidates

    conn = init_db(settings.database.path)
    try:
        summary = summarize_candidates(list_candidates(conn))
    finally:
        conn.close()

    print(f"Total candidates:   {summary.total}")
    print(f"High potential:     {summary.high_potential} (ranked 80+)")
    print(
        f"Flagged:            {summary.flagged} "
        f"(AI only {summary.ai_only}, fraud only {summary.fraud_only}, both {summary.both_flags})"
    )
    print("Ranking distribution:")
    for label, count in summary.ranking_distribution.items():
        print(f"  {label:>7}: {count}")
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "process":
            code = asyncio.run(run_process(args, settings))
        elif args.command == "jobs":
            code = cmd_jobs(args, settings)
        elif args.command == "candidates":
            code = cmd_candidates(args, settings)
        else:
            code = cmd_dashboard(settings)
    except (FileNotFoundError, ImportError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
