"""
JSON exporter — Produces a full snapshot of projects and their scores.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from .. import __version__
from ..models import Project
from ..scoring import compute_scores, maturity_rating


def export_json(
    projects: list[Project],
    output_dir: Path,
    include_evidence: bool = False,
) -> Path:
    """
    Write all projects to a JSON file.

    Evidence payloads are stripped unless include_evidence is set; file
    metadata is always kept.

    Returns:
        Path to the created JSON file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    payload = {
        "metadata": {
            "engine": "DevSecOps Maturity Engine",
            "version": __version__,
            "generated_utc": datetime.now(timezone.utc).isoformat(),
            "project_count": len(projects),
        },
        "projects": [_project_to_dict(p, include_evidence) for p in projects],
    }

    filepath = output_dir / "maturity_snapshot.json"
    with open(filepath, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)

    return filepath


def _project_to_dict(project: Project, include_evidence: bool) -> dict:
    data = project.to_dict()
    if not include_evidence:
        _strip_payloads(data.get("currentAssessment"))
        for entry in data.get("assessmentHistory", []):
            _strip_payloads(entry)

    current = project.current_assessment
    if current is not None:
        score = compute_scores(current.answers)
        data["summary"] = {
            **score.to_dict(),
            "maturity": maturity_rating(score.overall_score),
        }
    return data


def _strip_payloads(assessment: dict | None):
    if not assessment:
        return
    for answer in assessment.get("answers", {}).values():
        evidence = answer.get("evidence")
        if evidence:
            evidence.pop("fileData", None)
