"""Shared fixtures: in-memory repository and a manager with a fixed clock."""

from __future__ import annotations

import itertools

import pytest

from devsecops_maturity.catalog import all_pillars
from devsecops_maturity.lifecycle import AssessmentManager
from devsecops_maturity.storage import MemoryStore, ProjectRepository


class TickingClock:
    """Returns strictly increasing ISO timestamps, one second apart."""

    def __init__(self):
        self._ticks = itertools.count()

    def __call__(self) -> str:
        n = next(self._ticks)
        return f"2024-01-01T00:{n // 60:02d}:{n % 60:02d}+00:00"


@pytest.fixture
def repository() -> ProjectRepository:
    return ProjectRepository(MemoryStore())


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def manager(repository, clock) -> AssessmentManager:
    return AssessmentManager(repository, clock=clock)


@pytest.fixture
def project(manager):
    return manager.create_project("Payments API", "Card processing backend")


@pytest.fixture
def all_question_ids() -> list[str]:
    return [q.id for p in all_pillars() for q in p.questions]
