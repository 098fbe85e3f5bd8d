"""
Assessment data models: answers, evidence, assessments and projects.

Persisted dictionaries use the camelCase layout of the original browser
tool's saved state, so that data round-trips between the two.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Union

from .catalog import PILLAR_ORDER


class AssessmentStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class _Keep:
    """Sentinel for patch fields that keep their previous value."""

    def __repr__(self) -> str:
        return "KEEP"

    def __bool__(self) -> bool:
        return False


KEEP = _Keep()


def new_id() -> str:
    return uuid.uuid4().hex


def zero_scores() -> dict[str, int]:
    return {key: 0 for key in PILLAR_ORDER}


# ---------------------------------------------------------------------------
# Evidence & answers
# ---------------------------------------------------------------------------

@dataclass
class Evidence:
    """An uploaded file stored inline as base64."""
    file_name: str
    file_size: int                 # Size of the decoded content in bytes
    mime_type: str
    uploaded_at: str               # ISO-8601 UTC
    file_data: str                 # base64 payload

    def to_dict(self) -> dict:
        return {
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileType": self.mime_type,
            "uploadDate": self.uploaded_at,
            "fileData": self.file_data,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Evidence"]:
        if not isinstance(data, dict):
            return None
        return cls(
            file_name=data.get("fileName", ""),
            file_size=int(data.get("fileSize") or 0),
            mime_type=data.get("fileType", "") or "application/octet-stream",
            uploaded_at=data.get("uploadDate", ""),
            file_data=data.get("fileData", ""),
        )


@dataclass
class Answer:
    """Response, evidence and notes for one question."""
    question_id: str
    response: Optional[bool] = None      # None = unset
    evidence: Optional[Evidence] = None
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "questionId": self.question_id,
            "response": self.response,
            "evidence": self.evidence.to_dict() if self.evidence else None,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict, question_id: str = "") -> "Answer":
        response = data.get("response")
        return cls(
            question_id=data.get("questionId") or question_id,
            response=response if isinstance(response, bool) else None,
            evidence=Evidence.from_dict(data.get("evidence")),
            notes=data.get("notes") or "",
        )


ResponseValue = Union[Optional[bool], _Keep]
EvidenceValue = Union[Optional[Evidence], _Keep]
NotesValue = Union[str, _Keep]


@dataclass(frozen=True)
class AnswerPatch:
    """
    A partial answer update. Fields left at KEEP retain the prior value;
    None explicitly clears a response or evidence.
    """
    response: ResponseValue = KEEP
    evidence: EvidenceValue = KEEP
    notes: NotesValue = KEEP

    def apply(self, question_id: str, prior: Optional[Answer] = None) -> Answer:
        base = prior if prior is not None else Answer(question_id=question_id)
        changes: dict[str, Any] = {"question_id": question_id}
        if self.response is not KEEP:
            changes["response"] = self.response
        if self.evidence is not KEEP:
            changes["evidence"] = self.evidence
        if self.notes is not KEEP:
            changes["notes"] = self.notes
        return replace(base, **changes)


# ---------------------------------------------------------------------------
# Assessment & project
# ---------------------------------------------------------------------------

@dataclass
class Assessment:
    """One evaluation pass over the question catalog for a project."""
    id: str
    project_id: str
    project_name: str
    assessor: str
    start_date: str
    last_updated: str
    completed_date: Optional[str] = None
    status: AssessmentStatus = AssessmentStatus.NOT_STARTED
    answers: dict[str, Answer] = field(default_factory=dict)
    pillar_scores: dict[str, int] = field(default_factory=zero_scores)
    overall_score: int = 0

    @classmethod
    def start(cls, project: "Project", assessor: str, now: str) -> "Assessment":
        return cls(
            id=new_id(),
            project_id=project.id,
            project_name=project.name,
            assessor=assessor,
            start_date=now,
            last_updated=now,
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "projectId": self.project_id,
            "projectName": self.project_name,
            "assessor": self.assessor,
            "startDate": self.start_date,
            "lastUpdated": self.last_updated,
            "status": self.status.value,
            "answers": {qid: a.to_dict() for qid, a in self.answers.items()},
            "pillarScores": dict(self.pillar_scores),
            "overallScore": self.overall_score,
        }
        if self.completed_date:
            data["completedDate"] = self.completed_date
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Assessment":
        try:
            status = AssessmentStatus(data.get("status", AssessmentStatus.NOT_STARTED.value))
        except ValueError:
            status = AssessmentStatus.NOT_STARTED

        scores = zero_scores()
        for key, value in (data.get("pillarScores") or {}).items():
            if isinstance(value, (int, float)):
                scores[key] = int(value)

        answers = {
            qid: Answer.from_dict(a, question_id=qid)
            for qid, a in (data.get("answers") or {}).items()
            if isinstance(a, dict)
        }

        return cls(
            id=data["id"],
            project_id=data.get("projectId", ""),
            project_name=data.get("projectName", ""),
            assessor=data.get("assessor", ""),
            start_date=data.get("startDate", ""),
            last_updated=data.get("lastUpdated", ""),
            completed_date=data.get("completedDate") or None,
            status=status,
            answers=answers,
            pillar_scores=scores,
            overall_score=int(data.get("overallScore") or 0),
        )


@dataclass
class Project:
    """A software project with its current assessment and history."""
    id: str
    name: str
    description: str = ""
    created_date: str = ""
    last_assessed: Optional[str] = None
    current_assessment: Optional[Assessment] = None
    assessment_history: list[Assessment] = field(default_factory=list)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "createdDate": self.created_date,
            "assessmentHistory": [a.to_dict() for a in self.assessment_history],
        }
        if self.last_assessed:
            data["lastAssessed"] = self.last_assessed
        if self.current_assessment is not None:
            data["currentAssessment"] = self.current_assessment.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        current = data.get("currentAssessment")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            created_date=data.get("createdDate", ""),
            last_assessed=data.get("lastAssessed") or None,
            current_assessment=Assessment.from_dict(current) if isinstance(current, dict) else None,
            assessment_history=[
                Assessment.from_dict(a)
                for a in data.get("assessmentHistory") or []
                if isinstance(a, dict)
            ],
        )
