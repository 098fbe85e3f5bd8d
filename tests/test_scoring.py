"""Tests for the scoring engine: pillar/overall scores, status and rounding."""

import random

import pytest

from devsecops_maturity.catalog import PILLAR_ORDER, get_pillar
from devsecops_maturity.models import Answer, AssessmentStatus
from devsecops_maturity.scoring import compute_scores, maturity_rating, round_half_up


def answers_for(question_ids, response=True):
    return {qid: Answer(question_id=qid, response=response) for qid in question_ids}


def pillar_ids(key):
    return [q.id for q in get_pillar(key).questions]


# ──────────────────────────────────────────────────────────────────────
# Rounding
# ──────────────────────────────────────────────────────────────────────


class TestRounding:

    def test_halves_round_up(self):
        assert round_half_up(25, 2) == 13      # 12.5
        assert round_half_up(5, 2) == 3        # 2.5, banker's rounding would give 2

    def test_below_half_rounds_down(self):
        assert round_half_up(100, 6) == 17     # 16.67
        assert round_half_up(100, 3) == 33     # 33.33


# ──────────────────────────────────────────────────────────────────────
# Pillar and overall scores
# ──────────────────────────────────────────────────────────────────────


class TestScores:

    def test_empty_answers(self):
        score = compute_scores({})
        assert score.status is AssessmentStatus.NOT_STARTED
        assert score.overall_score == 0
        assert score.answered_count == 0
        assert set(score.pillar_scores) == set(PILLAR_ORDER)
        assert all(v == 0 for v in score.pillar_scores.values())

    def test_one_full_pillar(self):
        score = compute_scores(answers_for(pillar_ids("security")))
        assert score.pillar_scores["security"] == 100
        for key in PILLAR_ORDER:
            if key != "security":
                assert score.pillar_scores[key] == 0
        assert score.overall_score == 13

    def test_code_quality_is_scored_from_quality_ids(self):
        score = compute_scores(answers_for(pillar_ids("codeQuality")))
        assert score.pillar_scores["codeQuality"] == 100
        assert score.pillar_scores["code"] == 0

    def test_denominator_is_fixed_at_six(self):
        score = compute_scores(answers_for(["build-001"]))
        assert score.pillar_scores["build"] == 17

    def test_no_answers_lower_nothing_but_do_not_count(self):
        answers = answers_for(pillar_ids("deploy")[:3], True)
        answers.update(answers_for(pillar_ids("deploy")[3:], False))
        score = compute_scores(answers)
        assert score.pillar_scores["deploy"] == 50
        assert score.pillar_progress["deploy"] == 100

    def test_two_stage_rounding(self):
        # Pillars: 17, 17, 0... → mean 4.25 → 4
        score = compute_scores(answers_for(["code-001", "build-001"]))
        assert score.pillar_scores["code"] == 17
        assert score.overall_score == 4

    def test_unset_answers_count_as_unanswered(self):
        answers = {
            "code-001": Answer("code-001", response=None, notes="looked at it"),
        }
        score = compute_scores(answers)
        assert score.answered_count == 0
        assert score.status is AssessmentStatus.NOT_STARTED

    def test_unknown_ids_change_nothing(self, all_question_ids):
        base = answers_for(all_question_ids[:10])
        with_unknown = dict(base)
        with_unknown["codeQuality-001"] = Answer("codeQuality-001", response=True)
        with_unknown["code-099"] = Answer("code-099", response=True)
        a, b = compute_scores(base), compute_scores(with_unknown)
        assert a.pillar_scores == b.pillar_scores
        assert a.overall_score == b.overall_score
        assert a.answered_count == b.answered_count == 10

    def test_unknown_ids_do_not_complete_assessment(self, all_question_ids):
        answers = answers_for(all_question_ids[:-1])
        answers["extra-001"] = Answer("extra-001", response=True)
        assert compute_scores(answers).status is AssessmentStatus.IN_PROGRESS

    def test_malformed_answers_do_not_raise(self):
        answers = {
            "code-001": {"response": "yes"},
            "code-002": None,
            "code-003": {"response": True},
            "code-004": 42,
        }
        score = compute_scores(answers)
        assert score.answered_count == 1
        assert score.pillar_scores["code"] == 17

    def test_scores_always_in_range(self, all_question_ids):
        rng = random.Random(7)
        for _ in range(50):
            answers = {
                qid: Answer(qid, response=rng.choice([True, False, None]))
                for qid in rng.sample(all_question_ids, rng.randint(0, 48))
            }
            score = compute_scores(answers)
            assert 0 <= score.overall_score <= 100
            assert all(0 <= v <= 100 for v in score.pillar_scores.values())


# ──────────────────────────────────────────────────────────────────────
# Status
# ──────────────────────────────────────────────────────────────────────


class TestStatus:

    def test_single_answer_is_in_progress(self):
        score = compute_scores(answers_for(["monitoring-004"]))
        assert score.status is AssessmentStatus.IN_PROGRESS
        assert not score.completed

    def test_all_answered_mixed_is_completed(self, all_question_ids):
        answers = {
            qid: Answer(qid, response=(i % 2 == 0))
            for i, qid in enumerate(all_question_ids)
        }
        score = compute_scores(answers)
        assert score.status is AssessmentStatus.COMPLETED
        assert score.completed
        assert score.progress == 100
        assert score.overall_score == 50

    def test_all_no_is_still_completed(self, all_question_ids):
        score = compute_scores(answers_for(all_question_ids, False))
        assert score.status is AssessmentStatus.COMPLETED
        assert score.overall_score == 0


@pytest.mark.parametrize("value,expected", [
    (100, "High"), (80, "High"), (79, "Medium"), (60, "Medium"), (59, "Low"), (0, "Low"),
])
def test_maturity_rating(value, expected):
    assert maturity_rating(value) == expected
