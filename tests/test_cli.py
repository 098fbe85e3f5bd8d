"""End-to-end tests for the command-line front end against a SQLite store."""

import json

import pytest

from devsecops_maturity.__main__ import main
from devsecops_maturity.config import EngineConfig
from devsecops_maturity.storage import ProjectRepository, SQLiteStore


@pytest.fixture
def cli(tmp_path):
    data_dir = tmp_path / "data"
    out_dir = tmp_path / "out"

    def run(*argv):
        return main(["--data-dir", str(data_dir), "--output-dir", str(out_dir), *argv])

    run.repository = lambda: ProjectRepository(SQLiteStore(data_dir / "maturity.db"))
    run.out_dir = out_dir
    return run


def test_project_lifecycle(cli, capsys):
    assert cli("project", "add", "Payments API", "--description", "Cards") == 0
    project_id = cli.repository().load()[0].id

    assert cli("answer", project_id, "code-001", "--yes", "--assessor", "Sarah") == 0
    assert cli("answer", project_id, "code-002", "--no", "--notes", "trunk based") == 0
    assert cli("notes", project_id, "code-003", "PRs optional") == 0

    project = cli.repository().get(project_id)
    a = project.current_assessment
    assert a.assessor == "Sarah"
    assert a.answers["code-001"].response is True
    assert a.answers["code-002"].notes == "trunk based"
    assert a.answers["code-003"].response is None
    assert a.pillar_scores["code"] == 17

    capsys.readouterr()
    assert cli("show", project_id) == 0
    out = capsys.readouterr().out
    assert "in-progress" in out
    assert "2/48" in out

    assert cli("project", "list") == 0
    assert "Payments API" in capsys.readouterr().out


def test_evidence_commands(cli, tmp_path):
    cli("project", "add", "Payments API")
    project_id = cli.repository().load()[0].id
    proof = tmp_path / "gate.txt"
    proof.write_text("quality gate green")

    assert cli("evidence", "attach", project_id, "quality-002", str(proof)) == 0
    dest = tmp_path / "restored.txt"
    assert cli("evidence", "get", project_id, "quality-002", str(dest)) == 0
    assert dest.read_text() == "quality gate green"

    assert cli("evidence", "attach", project_id, "quality-002", str(tmp_path / "missing")) == 1
    assert cli.repository().get(project_id).current_assessment.answers["quality-002"].evidence is not None

    assert cli("evidence", "clear", project_id, "quality-002") == 0
    assert cli("evidence", "get", project_id, "quality-002", str(dest)) == 1


def test_evidence_get_into_missing_directory(cli, tmp_path, capsys):
    cli("project", "add", "Payments API")
    project_id = cli.repository().load()[0].id
    proof = tmp_path / "gate.txt"
    proof.write_text("quality gate green")
    cli("evidence", "attach", project_id, "quality-002", str(proof))

    capsys.readouterr()
    assert cli("evidence", "get", project_id, "quality-002", str(tmp_path / "nope" / "x.txt")) == 1
    assert "Evidence error" in capsys.readouterr().out


def test_unknown_project_exits_non_zero(cli, capsys):
    assert cli("answer", "nope", "code-001", "--yes") == 1
    assert "Project not found: nope" in capsys.readouterr().out
    assert cli("project", "remove", "nope") == 1


def test_export(cli):
    cli("project", "add", "Payments API")
    project_id = cli.repository().load()[0].id
    cli("answer", project_id, "security-001", "--yes")

    assert cli("export", "--include-current", "--formats", "csv", "json", "markdown") == 0
    csv_text = (cli.out_dir / "assessment-history.csv").read_text(encoding="utf-8-sig")
    assert "Payments API" in csv_text
    snapshot = json.loads((cli.out_dir / "maturity_snapshot.json").read_text(encoding="utf-8"))
    assert snapshot["projects"][0]["name"] == "Payments API"
    assert (cli.out_dir / "reports" / f"assessment_report_{project_id}.md").exists()


def test_questions_listing(cli, capsys):
    assert cli("questions", "--pillar", "codeQuality") == 0
    out = capsys.readouterr().out
    assert "quality-001" in out
    assert "code-001" not in out


def test_config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "storage": {"backend": "memory", "unknown": 1},
        "output": {"base_dir": str(tmp_path / "exports")},
        "verbose": True,
    }))
    config = EngineConfig.from_file(path)
    assert config.storage.backend == "memory"
    assert config.output.export_dir == tmp_path / "exports"
    assert config.verbose is True

    path.write_text(json.dumps({
        "storage": {"db_path": "/tmp/x.db", "data_dir": str(tmp_path)},
        "output": {"export_dir": "ignored", "reports_dir": "ignored"},
    }))
    config = EngineConfig.from_file(path)
    assert config.storage.db_path == tmp_path / "maturity.db"
    assert config.output.reports_dir.name == "reports"
