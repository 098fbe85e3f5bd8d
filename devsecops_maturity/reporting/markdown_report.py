"""
Markdown assessment report — per-project report rendered via Jinja2.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..catalog import all_pillars
from ..models import Project
from ..scoring import compute_scores, maturity_rating

TEMPLATE_DIR = Path(__file__).parent / "templates"


def export_markdown(project: Project, output_dir: Path) -> Path:
    """
    Generate a Markdown report of the project's current assessment and
    history.

    Returns:
        Path to the created report.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    filepath = output_dir / f"assessment_report_{project.id}.md"

    with open(filepath, "w", encoding="utf-8") as fh:
        fh.write(render_markdown(project))

    return filepath


def render_markdown(project: Project) -> str:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape([]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["maturity"] = maturity_rating
    template = env.get_template("assessment_report.md.j2")

    assessment = project.current_assessment
    score = compute_scores(assessment.answers) if assessment else None
    return template.render(
        project=project,
        assessment=assessment,
        score=score,
        pillars=all_pillars(),
        generated_utc=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
    )
