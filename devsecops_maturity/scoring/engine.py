"""
Scoring Engine — Computes 0-100 maturity scores from an answer set.

Scoring model:
  - Each pillar scores the share of "yes" responses over its fixed
    question count; unanswered and "no" both count as not-yes.
  - The overall score is the mean of the eight pillar scores.
  - Rounding is half-up and applied at each stage (pillar, then overall).
  - Status follows the number of catalog questions with any response.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..catalog import PILLAR_ORDER, QUESTION_INDEX, question_count, total_question_count
from ..config import MATURITY_THRESHOLDS
from ..models import Answer, AssessmentStatus
from .models import AssessmentScore

logger = logging.getLogger("devsecops_maturity.scoring")


def round_half_up(numerator: int, denominator: int) -> int:
    """Round a non-negative fraction to the nearest integer, halves up."""
    return (2 * numerator + denominator) // (2 * denominator)


def percent(part: int, whole: int) -> int:
    return round_half_up(100 * part, whole) if whole else 0


def _response_of(answer: Any) -> Any:
    """Extract a response from an Answer or a persisted answer dict."""
    if isinstance(answer, Answer):
        return answer.response
    if isinstance(answer, Mapping):
        return answer.get("response")
    return None


def compute_scores(answers: Mapping[str, Any]) -> AssessmentScore:
    """
    Compute pillar scores, overall score and status from an answer map.

    Args:
        answers: question id → Answer (or persisted answer dict).

    Returns:
        AssessmentScore. Never raises; malformed entries count as unanswered.
    """
    result = AssessmentScore(total_questions=total_question_count())

    # --- Bucket responses by pillar ---
    yes_counts = {key: 0 for key in PILLAR_ORDER}
    answered_counts = {key: 0 for key in PILLAR_ORDER}
    for question_id, answer in (answers or {}).items():
        pillar = QUESTION_INDEX.get(question_id)
        if pillar is None:
            logger.debug(f"Ignoring answer for unknown question id: {question_id}")
            continue
        response = _response_of(answer)
        if not isinstance(response, bool):
            continue
        answered_counts[pillar] += 1
        if response is True:
            yes_counts[pillar] += 1

    # --- Per-pillar scores ---
    for key in PILLAR_ORDER:
        total = question_count(key)
        result.pillar_scores[key] = percent(yes_counts[key], total)
        result.pillar_progress[key] = percent(answered_counts[key], total)

    # --- Overall score: mean of already-rounded pillar scores ---
    result.overall_score = round_half_up(
        sum(result.pillar_scores.values()), len(result.pillar_scores)
    )

    # --- Status ---
    result.answered_count = sum(answered_counts.values())
    result.progress = percent(result.answered_count, result.total_questions)
    if result.answered_count == result.total_questions:
        result.status = AssessmentStatus.COMPLETED
    elif result.answered_count > 0:
        result.status = AssessmentStatus.IN_PROGRESS
    else:
        result.status = AssessmentStatus.NOT_STARTED

    return result


def maturity_rating(score: int) -> str:
    """Map a 0-100 score to its maturity band."""
    for threshold, rating in MATURITY_THRESHOLDS:
        if score >= threshold:
            return rating
    return MATURITY_THRESHOLDS[-1][1]
