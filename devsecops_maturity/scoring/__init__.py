"""Scoring package — pillar, overall and status calculation."""

from .engine import compute_scores, maturity_rating, round_half_up
from .models import AssessmentScore

__all__ = [
    "compute_scores",
    "maturity_rating",
    "round_half_up",
    "AssessmentScore",
]
