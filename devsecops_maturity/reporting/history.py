"""
Assessment history records — the flat view consumed by exporters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..catalog import PILLAR_ORDER
from ..models import Assessment, Project

# Column contract for exported rows
EXPORT_COLUMNS = ["projectName", "assessor", "date", "overallScore", *PILLAR_ORDER]

SORT_KEYS = ("date", "score", "project")


@dataclass
class HistoryRecord:
    """One assessment flattened for listing and export."""
    assessment_id: str
    project_id: str
    project_name: str
    assessor: str
    date: str
    status: str
    overall_score: int
    pillar_scores: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_assessment(cls, assessment: Assessment) -> "HistoryRecord":
        return cls(
            assessment_id=assessment.id,
            project_id=assessment.project_id,
            project_name=assessment.project_name,
            assessor=assessment.assessor,
            date=assessment.completed_date or assessment.last_updated,
            status=assessment.status.value,
            overall_score=assessment.overall_score,
            pillar_scores={k: assessment.pillar_scores.get(k, 0) for k in PILLAR_ORDER},
        )

    def to_row(self) -> dict:
        row = {
            "projectName": self.project_name,
            "assessor": self.assessor,
            "date": self.date,
            "overallScore": self.overall_score,
        }
        for key in PILLAR_ORDER:
            row[key] = self.pillar_scores.get(key, 0)
        return row


def collect_history(projects: Iterable[Project], include_current: bool = False) -> list[HistoryRecord]:
    """
    Gather history records across projects.
    With include_current, in-flight assessments not yet in history are added.
    """
    records = []
    for project in projects:
        seen = set()
        for assessment in project.assessment_history:
            seen.add(assessment.id)
            records.append(HistoryRecord.from_assessment(assessment))
        current = project.current_assessment
        if include_current and current is not None and current.id not in seen:
            records.append(HistoryRecord.from_assessment(current))
    return records


def filter_records(records: Iterable[HistoryRecord], search: str = "") -> list[HistoryRecord]:
    """Keep records whose project name or assessor contains the search term."""
    term = search.strip().lower()
    if not term:
        return list(records)
    return [
        r for r in records
        if term in r.project_name.lower() or term in r.assessor.lower()
    ]


def sort_records(records: Iterable[HistoryRecord], sort_by: str = "date") -> list[HistoryRecord]:
    """Sort by newest date, highest score, or project name."""
    if sort_by == "date":
        return sorted(records, key=lambda r: r.date, reverse=True)
    if sort_by == "score":
        return sorted(records, key=lambda r: r.overall_score, reverse=True)
    if sort_by == "project":
        return sorted(records, key=lambda r: r.project_name.lower())
    raise ValueError(f"Unknown sort key: {sort_by} (expected one of {', '.join(SORT_KEYS)})")


def export_rows(records: Iterable[HistoryRecord]) -> list[dict]:
    return [r.to_row() for r in records]
