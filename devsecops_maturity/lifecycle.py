"""
Assessment lifecycle — applies answer mutations, rescores, transitions
status and persists the owning project.
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from .catalog import pillar_for_question
from .evidence import read_evidence
from .models import (
    KEEP,
    AnswerPatch,
    Assessment,
    AssessmentStatus,
    EvidenceValue,
    NotesValue,
    Project,
    ResponseValue,
    new_id,
)
from .scoring import compute_scores
from .storage import ProjectRepository

logger = logging.getLogger("devsecops_maturity.lifecycle")


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AssessmentManager:
    """
    Orchestrates answer mutation → rescoring → status transition → write.

    A completed assessment stays as the project's current assessment and is
    also upserted into its history by id.
    """

    def __init__(self, repository: ProjectRepository, clock: Callable[[], str] = utc_now):
        self.repository = repository
        self.clock = clock

    # --- Projects ---

    def create_project(self, name: str, description: str = "") -> Project:
        """Create and persist a project with no assessment."""
        project = Project(
            id=new_id(),
            name=name,
            description=description,
            created_date=self.clock(),
        )
        self.repository.upsert(project)
        logger.info(f"Created project {project.id} ({name})")
        return project

    # --- Assessments ---

    def ensure_assessment(self, project: Project, assessor: str = "") -> Assessment:
        """Return the project's current assessment, creating one if needed."""
        if project.current_assessment is not None:
            return project.current_assessment

        assessment = Assessment.start(project, assessor, self.clock())
        project.current_assessment = assessment
        self.repository.upsert(project)
        logger.info(f"Started assessment {assessment.id} for project {project.id}")
        return assessment

    def get_assessment(self, project_id: str) -> Optional[Assessment]:
        return self.repository.get(project_id).current_assessment

    def set_assessor(self, project_id: str, assessor: str) -> Assessment:
        project = self.repository.get(project_id)
        assessment = self.ensure_assessment(project, assessor)
        assessment.assessor = assessor
        assessment.last_updated = self.clock()
        for entry in project.assessment_history:
            if entry.id == assessment.id:
                entry.assessor = assessor
        self.repository.upsert(project)
        return assessment

    def record_answer(
        self,
        project_id: str,
        question_id: str,
        response: ResponseValue = KEEP,
        evidence: EvidenceValue = KEEP,
        notes: NotesValue = KEEP,
    ) -> Assessment:
        """
        Merge a partial answer update and rescore.

        Fields left at KEEP retain their prior value; ``response=None`` clears
        the response and ``evidence=None`` removes the attachment.

        Raises:
            NotFoundError: if no project has ``project_id``.
        """
        patch = AnswerPatch(response=response, evidence=evidence, notes=notes)
        return self.apply_patch(project_id, question_id, patch)

    def apply_patch(self, project_id: str, question_id: str, patch: AnswerPatch) -> Assessment:
        project = self.repository.get(project_id)
        assessment = self.ensure_assessment(project)

        if pillar_for_question(question_id) is None:
            logger.warning(f"Answer recorded for unknown question id {question_id}; it will not be scored")

        prior = assessment.answers.get(question_id)
        assessment.answers[question_id] = patch.apply(question_id, prior)
        assessment.last_updated = self.clock()

        previous_status = assessment.status
        self._rescore(assessment)
        self._track_transition(project, assessment, previous_status)

        project.last_assessed = assessment.last_updated
        self.repository.upsert(project)
        return assessment

    async def attach_evidence(
        self,
        project_id: str,
        question_id: str,
        path: Optional[str | Path],
    ) -> Assessment:
        """
        Attach a file as evidence, or clear evidence when ``path`` is None.

        The file is read before any state is touched, so a failed read
        (EvidenceReadError) leaves the stored answer unchanged.
        """
        evidence = await read_evidence(path) if path is not None else None
        return self.record_answer(project_id, question_id, evidence=evidence)

    # --- Internals ---

    def _rescore(self, assessment: Assessment):
        score = compute_scores(assessment.answers)
        assessment.pillar_scores = dict(score.pillar_scores)
        assessment.overall_score = score.overall_score
        assessment.status = score.status
        if score.completed and not assessment.completed_date:
            assessment.completed_date = assessment.last_updated

    def _track_transition(self, project: Project, assessment: Assessment,
                          previous_status: AssessmentStatus):
        if assessment.status == previous_status:
            return

        if assessment.status is AssessmentStatus.COMPLETED:
            self._upsert_history(project, assessment)
            logger.info(
                f"Assessment {assessment.id} completed "
                f"(overall {assessment.overall_score}%)"
            )
        elif previous_status is AssessmentStatus.COMPLETED:
            logger.info(
                f"Assessment {assessment.id} regressed to {assessment.status.value}; "
                f"completed date {assessment.completed_date} retained"
            )

    @staticmethod
    def _upsert_history(project: Project, assessment: Assessment):
        snapshot = copy.deepcopy(assessment)
        for i, entry in enumerate(project.assessment_history):
            if entry.id == assessment.id:
                project.assessment_history[i] = snapshot
                return
        project.assessment_history.append(snapshot)
