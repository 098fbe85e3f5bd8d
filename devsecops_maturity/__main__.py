"""
DevSecOps Maturity Engine — command-line front end.

Usage:
    python -m devsecops_maturity project add "Payments API" --description "..."
    python -m devsecops_maturity project list
    python -m devsecops_maturity questions --pillar security
    python -m devsecops_maturity answer <project_id> code-001 --yes --notes "..."
    python -m devsecops_maturity evidence attach <project_id> code-001 ./proof.pdf
    python -m devsecops_maturity show <project_id>
    python -m devsecops_maturity export --formats csv json --sort-by score
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from . import __version__
from .catalog import PILLAR_ORDER, all_pillars, get_pillar
from .config import EngineConfig
from .evidence import EvidenceReadError, write_evidence
from .lifecycle import AssessmentManager
from .scoring import compute_scores, maturity_rating
from .storage import NotFoundError, PersistenceError, ProjectRepository, build_store
from .reporting import (
    collect_history,
    export_csv,
    export_json,
    export_markdown,
    filter_records,
    sort_records,
)

logger = logging.getLogger("devsecops_maturity")

_RESPONSE_ICONS = {True: "✅", False: "❌", None: "⬜"}


# ---------------------------------------------------------------------------
# Project sub-commands
# ---------------------------------------------------------------------------

def _cmd_project(args: argparse.Namespace, manager: AssessmentManager) -> int:
    action = args.project_action

    if action == "list":
        return _project_list(manager)
    elif action == "add":
        project = manager.create_project(args.name, args.description or "")
        print(f"  ✅ Project '{project.name}' created: {project.id}")
        return 0
    elif action == "remove":
        if manager.repository.delete(args.project_id):
            print(f"  ✅ Project '{args.project_id}' removed.")
            return 0
        print(f"  ❌ Project '{args.project_id}' not found.")
        return 1
    print("Usage: python -m devsecops_maturity project {add|list|remove}")
    return 0


def _project_list(manager: AssessmentManager) -> int:
    projects = manager.repository.load()
    if not projects:
        print("No projects yet. Add one with:\n")
        print('  python -m devsecops_maturity project add "<name>" --description "..."')
        return 0

    print(f"\n  {'ID':<34s} {'Name':<28s} {'Status':<12s} {'Score':>5s}  {'Last Assessed'}")
    print(f"  {'─'*34} {'─'*28} {'─'*12} {'─'*5}  {'─'*25}")
    for p in projects:
        a = p.current_assessment
        status = a.status.value if a else "not-started"
        score = f"{a.overall_score}%" if a else "—"
        print(f"  {p.id:<34s} {p.name[:28]:<28s} {status:<12s} {score:>5s}  {p.last_assessed or 'Never'}")
    print()
    return 0


# ---------------------------------------------------------------------------
# Assessment sub-commands
# ---------------------------------------------------------------------------

def _cmd_questions(args: argparse.Namespace) -> int:
    pillars = [get_pillar(args.pillar)] if args.pillar else all_pillars()
    for pillar in pillars:
        print(f"\n  {pillar.name} ({pillar.key}) — {pillar.description}")
        print(f"  Tools: {', '.join(pillar.tools)}")
        for q in pillar.questions:
            print(f"    {q.id:<16s} {q.question}")
    print()
    return 0


def _cmd_answer(args: argparse.Namespace, manager: AssessmentManager) -> int:
    kwargs = {}
    if args.yes:
        kwargs["response"] = True
    elif args.no:
        kwargs["response"] = False
    elif args.clear:
        kwargs["response"] = None
    if args.notes is not None:
        kwargs["notes"] = args.notes
    if args.assessor:
        manager.set_assessor(args.project_id, args.assessor)

    assessment = manager.record_answer(args.project_id, args.question_id, **kwargs)
    answer = assessment.answers[args.question_id]
    print(f"  {_RESPONSE_ICONS[answer.response]} {args.question_id} recorded — "
          f"overall {assessment.overall_score}% ({assessment.status.value})")
    return 0


def _cmd_notes(args: argparse.Namespace, manager: AssessmentManager) -> int:
    manager.record_answer(args.project_id, args.question_id, notes=args.text)
    print(f"  ✅ Notes saved for {args.question_id}")
    return 0


def _cmd_evidence(args: argparse.Namespace, manager: AssessmentManager) -> int:
    action = args.evidence_action

    if action == "attach":
        assessment = asyncio.run(
            manager.attach_evidence(args.project_id, args.question_id, args.path)
        )
        evidence = assessment.answers[args.question_id].evidence
        print(f"  📎 Attached {evidence.file_name} ({evidence.file_size} bytes, {evidence.mime_type})")
        return 0
    elif action == "clear":
        asyncio.run(manager.attach_evidence(args.project_id, args.question_id, None))
        print(f"  ✅ Evidence cleared for {args.question_id}")
        return 0
    elif action == "get":
        assessment = manager.get_assessment(args.project_id)
        answer = assessment.answers.get(args.question_id) if assessment else None
        if answer is None or answer.evidence is None:
            print(f"  ❌ No evidence attached to {args.question_id}")
            return 1
        path = write_evidence(answer.evidence, args.dest)
        print(f"  📄 Evidence written to {path}")
        return 0
    print("Usage: python -m devsecops_maturity evidence {attach|clear|get}")
    return 0


def _cmd_show(args: argparse.Namespace, manager: AssessmentManager) -> int:
    project = manager.repository.get(args.project_id)
    print(f"\n  Project:   {project.name} ({project.id})")
    if project.description:
        print(f"  About:     {project.description}")

    assessment = project.current_assessment
    if assessment is None:
        print("  Status:    not-started (no assessment yet)\n")
        return 0

    score = compute_scores(assessment.answers)
    print(f"  Assessor:  {assessment.assessor or 'Not assigned'}")
    print(f"  Status:    {assessment.status.value}")
    print(f"  Progress:  {score.answered_count}/{score.total_questions} ({score.progress}%)")
    if assessment.completed_date:
        print(f"  Completed: {assessment.completed_date}")
    print(f"  Overall:   {assessment.overall_score}% ({maturity_rating(assessment.overall_score)})\n")

    for key in PILLAR_ORDER:
        pillar = get_pillar(key)
        value = assessment.pillar_scores.get(key, 0)
        print(f"    {pillar.name:16s} {value:4d}%  {maturity_rating(value):6s} "
              f"answered {score.pillar_progress[key]:3d}%")
    print(f"\n  History:   {len(project.assessment_history)} completed assessment(s)\n")
    return 0


def _cmd_export(args: argparse.Namespace, manager: AssessmentManager, config: EngineConfig) -> int:
    projects = manager.repository.load()
    output_dir = config.output.export_dir
    config.output.create_directories()

    records = collect_history(projects, include_current=args.include_current)
    records = sort_records(filter_records(records, args.search), args.sort_by)

    created = []
    if "csv" in args.formats:
        path = export_csv(records, output_dir)
        created.append(path)
        print(f"  📊 CSV:       {path}")
    if "json" in args.formats:
        path = export_json(projects, output_dir)
        created.append(path)
        print(f"  📄 JSON:      {path}")
    if "markdown" in args.formats:
        for project in projects:
            path = export_markdown(project, config.output.reports_dir)
            created.append(path)
            print(f"  📝 Markdown:  {path}")

    print(f"\n  {len(records)} history record(s), {len(created)} file(s) written.")
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="devsecops_maturity",
        description=f"DevSecOps Maturity Engine v{__version__}",
    )
    parser.add_argument("--config", "-c", type=Path, help="Path to JSON configuration file")
    parser.add_argument("--data-dir", type=Path, help="Directory holding the project database")
    parser.add_argument("--output-dir", "-o", type=Path, help="Output directory for exports")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # project
    prof_parser = subparsers.add_parser("project", help="Manage projects")
    prof_sub = prof_parser.add_subparsers(dest="project_action", help="Project actions")
    add_p = prof_sub.add_parser("add", help="Create a project")
    add_p.add_argument("name", help="Project name")
    add_p.add_argument("--description", help="Short project description")
    prof_sub.add_parser("list", help="List all projects")
    rm_p = prof_sub.add_parser("remove", help="Remove a project")
    rm_p.add_argument("project_id", help="ID of the project to remove")

    # questions
    q_p = subparsers.add_parser("questions", help="List the question catalog")
    q_p.add_argument("--pillar", choices=list(PILLAR_ORDER), help="Only show one pillar")

    # answer
    ans_p = subparsers.add_parser("answer", help="Record a response for a question")
    ans_p.add_argument("project_id")
    ans_p.add_argument("question_id")
    group = ans_p.add_mutually_exclusive_group()
    group.add_argument("--yes", action="store_true", help="Answer yes")
    group.add_argument("--no", action="store_true", help="Answer no")
    group.add_argument("--clear", action="store_true", help="Reset the response to unanswered")
    ans_p.add_argument("--notes", help="Notes to store with the answer")
    ans_p.add_argument("--assessor", help="Set the assessor of the current assessment")

    # notes
    notes_p = subparsers.add_parser("notes", help="Set notes on a question")
    notes_p.add_argument("project_id")
    notes_p.add_argument("question_id")
    notes_p.add_argument("text")

    # evidence
    ev_parser = subparsers.add_parser("evidence", help="Manage evidence attachments")
    ev_sub = ev_parser.add_subparsers(dest="evidence_action", help="Evidence actions")
    att_p = ev_sub.add_parser("attach", help="Attach a file to a question")
    att_p.add_argument("project_id")
    att_p.add_argument("question_id")
    att_p.add_argument("path", type=Path)
    clr_p = ev_sub.add_parser("clear", help="Remove a question's evidence")
    clr_p.add_argument("project_id")
    clr_p.add_argument("question_id")
    get_p = ev_sub.add_parser("get", help="Write a question's evidence to disk")
    get_p.add_argument("project_id")
    get_p.add_argument("question_id")
    get_p.add_argument("dest", type=Path)

    # show
    show_p = subparsers.add_parser("show", help="Show a project's scores")
    show_p.add_argument("project_id")

    # export
    exp_p = subparsers.add_parser("export", help="Export history and reports")
    exp_p.add_argument(
        "--formats",
        nargs="+",
        choices=["csv", "json", "markdown"],
        default=["csv", "json", "markdown"],
        help="Output formats to generate",
    )
    exp_p.add_argument("--search", default="", help="Filter by project name or assessor")
    exp_p.add_argument("--sort-by", choices=["date", "score", "project"], default="date")
    exp_p.add_argument("--include-current", action="store_true",
                       help="Include in-progress assessments in the history export")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> EngineConfig:
    """Build engine configuration from a config file and CLI overrides."""
    if args.config and args.config.exists():
        config = EngineConfig.from_file(args.config)
    else:
        config = EngineConfig()

    if args.data_dir:
        config.storage.data_dir = str(args.data_dir)
    if args.output_dir:
        config.output.base_dir = str(args.output_dir)
    if args.verbose:
        config.verbose = True
    return config


def run(args: argparse.Namespace) -> int:
    config = build_config(args)
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    if args.command is None:
        print("Usage: python -m devsecops_maturity {project|questions|answer|notes|evidence|show|export} ...")
        return 0
    if args.command == "questions":
        return _cmd_questions(args)

    manager = AssessmentManager(ProjectRepository(build_store(config.storage)))
    if args.command == "project":
        return _cmd_project(args, manager)
    if args.command == "answer":
        return _cmd_answer(args, manager)
    if args.command == "notes":
        return _cmd_notes(args, manager)
    if args.command == "evidence":
        return _cmd_evidence(args, manager)
    if args.command == "show":
        return _cmd_show(args, manager)
    if args.command == "export":
        return _cmd_export(args, manager, config)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for `python -m devsecops_maturity`."""
    args = parse_args(argv)
    try:
        return run(args)
    except NotFoundError as e:
        print(f"\n❌ {e}")
    except EvidenceReadError as e:
        print(f"\n❌ Evidence error: {e}")
    except PersistenceError as e:
        logger.exception("Storage failure")
        print(f"\n❌ Storage error: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
