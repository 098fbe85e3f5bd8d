"""
Scoring data models — Defines structured types for the scoring engine output.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models import AssessmentStatus


@dataclass
class AssessmentScore:
    """Complete scoring result for one answer set."""
    pillar_scores: dict[str, int] = field(default_factory=dict)
    overall_score: int = 0
    status: AssessmentStatus = AssessmentStatus.NOT_STARTED
    answered_count: int = 0
    total_questions: int = 0
    pillar_progress: dict[str, int] = field(default_factory=dict)
    progress: int = 0

    @property
    def completed(self) -> bool:
        """True when every catalog question has a response."""
        return self.status is AssessmentStatus.COMPLETED

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "status": self.status.value,
            "answered": self.answered_count,
            "total_questions": self.total_questions,
            "progress": self.progress,
            "pillar_scores": dict(self.pillar_scores),
            "pillar_progress": dict(self.pillar_progress),
        }
