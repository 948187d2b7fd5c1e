"""Integration test: CLI commands against a temporary database."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from main import load_settings, main, parse_args
from recruitflow.core.config import Settings
from recruitflow.core.schemas import DraftedEmail, MatchResult, RankingResult
from recruitflow.oracles import Oracles


@pytest.fixture()
def config(tmp_path: Path) -> str:
    cfg = tmp_path / "settings.yaml"
    cfg.write_text(f"database:\n  path: {tmp_path / 'cli.db'}\n")
    return str(cfg)


def _stub_oracles(job_id_holder: dict[str, str]) -> Oracles:
    extraction = MagicMock()
    extraction.extract = AsyncMock(
        return_value={
            "personal_information": {"name": "Jane Doe", "email": "jane@example.com"},
            "skills": ["Python"],
            "work_experience": [{"title": "Engineer", "company": "Acme"}],
        }
    )
    matching = MagicMock()

    async def match(skills, summary, jobs):  # type: ignore[no-untyped-def]
        job_id_holder["id"] = jobs[0].id
        return MatchResult(matched_job_description_id=jobs[0].id, match_confidence=0.9)

    matching.match = AsyncMock(side_effect=match)
    ranking = MagicMock()
    ranking.rank = AsyncMock(return_value=[RankingResult(name="Jane Doe", ranking=90)])
    authenticity = MagicMock()
    authenticity.verify = AsyncMock(return_value={"reason": "fine"})
    story = MagicMock()
    story.generate = AsyncMock(return_value="A great fit.")
    email = MagicMock()
    email.draft = AsyncMock(return_value=DraftedEmail(subject="Interview", body="Hi Jane"))
    return Oracles(
        extraction=extraction,
        matching=matching,
        ranking=ranking,
        authenticity=authenticity,
        story=story,
        email=email,
    )


def _add_job(config: str, capsys: pytest.CaptureFixture[str]) -> str:
    main(["jobs", "add", "--title", "Backend Engineer", "--company", "Acme",
          "--text", "Build APIs", "--config", config])
    out = capsys.readouterr().out
    assert out.startswith("Added job description ")
    return out.split()[3].rstrip(":")


class TestParseArgs:
    def test_process(self) -> None:
        args = parse_args(["process", "--resume", "cv.pdf", "--provider", "openai", "--no-save"])
        assert args.command == "process"
        assert args.resume == "cv.pdf"
        assert args.provider == "openai"
        assert args.no_save is True
        assert args.config is None

    def test_unknown_provider(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["process", "--resume", "cv.pdf", "--provider", "nope"])

    def test_jobs_add_requires_source(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["jobs", "add", "--title", "x"])

    def test_jobs_update_text_and_file_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["jobs", "update", "jd-1", "--text", "a", "--file", "b.txt"])

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args([])


class TestJobsCommands:
    def test_add_list_show_delete(self, config: str, capsys: pytest.CaptureFixture[str]) -> None:
        jd_id = _add_job(config, capsys)

        main(["jobs", "list", "--config", config])
        out = capsys.readouterr().out
        assert "1 job description(s)" in out
        assert "Backend Engineer @ Acme" in out

        main(["jobs", "show", jd_id, "--config", config])
        shown = json.loads(capsys.readouterr().out)
        assert shown["full_text"] == "Build APIs"

        main(["jobs", "delete", jd_id, "--config", config])
        assert f"Deleted job description {jd_id}" in capsys.readouterr().out

        with pytest.raises(SystemExit) as exc:
            main(["jobs", "show", jd_id, "--config", config])
        assert exc.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_update(self, config: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        jd_id = _add_job(config, capsys)

        main(["jobs", "update", jd_id, "--title", "Staff Engineer", "--config", config])
        assert f"Updated job description {jd_id}" in capsys.readouterr().out

        main(["jobs", "show", jd_id, "--config", config])
        shown = json.loads(capsys.readouterr().out)
        assert shown["title"] == "Staff Engineer"
        assert shown["company_name"] == "Acme"
        assert shown["full_text"] == "Build APIs"

        text_file = tmp_path / "jd.txt"
        text_file.write_text("Lead the API team.")
        main(["jobs", "update", jd_id, "--company", "Globex", "--file", str(text_file), "--config", config])
        capsys.readouterr()

        main(["jobs", "show", jd_id, "--config", config])
        shown = json.loads(capsys.readouterr().out)
        assert shown["title"] == "Staff Engineer"
        assert shown["company_name"] == "Globex"
        assert shown["full_text"] == "Lead the API team."

    def test_update_unknown_id(self, config: str, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["jobs", "update", "ghost", "--title", "x", "--config", config])
        assert exc.value.code == 1
        assert "Error: job description 'ghost' not found" in capsys.readouterr().err

    def test_add_from_file(self, config: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        text_file = tmp_path / "jd.txt"
        text_file.write_text("Own the data platform.")
        main(["jobs", "add", "--title", "Data Engineer", "--file", str(text_file), "--config", config])
        assert "Data Engineer" in capsys.readouterr().out


class TestProcessCommand:
    def test_process_and_store(self, config: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        _add_job(config, capsys)
        resume = tmp_path / "jane.txt"
        resume.write_text("Jane Doe")
        holder: dict[str, str] = {}

        with patch("recruitflow.oracles.build_oracles", return_value=_stub_oracles(holder)):
            main(["process", "--resume", str(resume), "--config", config])

        captured = capsys.readouterr()
        outcome = json.loads(captured.out)
        assert outcome["matched_job_description_id"] == holder["id"]
        assert outcome["drafted_interview_email"]["subject"] == "Interview"
        assert "saved" in captured.err

        main(["candidates", "list", "--config", config])
        out = capsys.readouterr().out
        assert "1 candidate(s)" in out
        assert "Jane Doe" in out
        assert "ranking=90" in out

        main(["candidates", "show", outcome["id"], "--config", config])
        assert json.loads(capsys.readouterr().out)["id"] == outcome["id"]

        main(["dashboard", "--config", config])
        out = capsys.readouterr().out
        assert "Total candidates:   1" in out
        assert "High potential:     1" in out

    def test_no_save(self, config: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        _add_job(config, capsys)
        resume = tmp_path / "jane.txt"
        resume.write_text("Jane Doe")

        with patch("recruitflow.oracles.build_oracles", return_value=_stub_oracles({})):
            main(["process", "--resume", str(resume), "--no-save", "--config", config])
        capsys.readouterr()

        main(["candidates", "list", "--config", config])
        assert "0 candidate(s)" in capsys.readouterr().out

    def test_failed_outcome_exits_nonzero(self, config: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        resume = tmp_path / "jane.txt"
        resume.write_text("Jane Doe")

        with (
            patch("recruitflow.oracles.build_oracles", return_value=_stub_oracles({})),
            pytest.raises(SystemExit) as exc,
        ):
            main(["process", "--resume", str(resume), "--config", config])

        assert exc.value.code == 1
        assert "No job descriptions available" in capsys.readouterr().err

    def test_missing_resume(self, config: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["process", "--resume", str(tmp_path / "nope.pdf"), "--config", config])
        assert exc.value.code == 1
        assert "File not found" in capsys.readouterr().err


class TestConfigErrors:
    def test_missing_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["dashboard", "--config", str(tmp_path / "missing.yaml")])
        assert exc.value.code == 1
        assert "Error loading config" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("llm:\n  provider: nope\n")
        with pytest.raises(SystemExit) as exc:
            main(["dashboard", "--config", str(cfg)])
        assert exc.value.code == 1
        assert "Error loading config" in capsys.readouterr().err


class TestLoadSettings:
    def test_builtin_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert load_settings(None) == Settings()

    def test_default_path_picked_up(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "settings.yaml").write_text("llm:\n  provider: openai\n")
        assert load_settings(None).llm.provider == "openai"
