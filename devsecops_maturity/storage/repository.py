"""
Project repository — load/upsert/get over the key-value store.

The whole project list lives under a single key. Every write rewrites the
full list; concurrent writers are not coordinated (last write wins).
"""

from __future__ import annotations

import logging
from typing import Optional

from ..models import Project
from .store import KeyValueStore, PersistenceError

logger = logging.getLogger("devsecops_maturity.storage")


# ---------------------------------------------------------------------------
# Fixed storage keys. "assessments" is reserved by the persisted layout and
# is not written; assessments live inside their project.
# ---------------------------------------------------------------------------
STORAGE_KEYS = {
    "projects": "devops_assessment_projects",
    "assessments": "devops_assessment_assessments",
}


class NotFoundError(KeyError):
    """Raised when a referenced project or assessment does not exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "not found"


class ProjectRepository:
    """Maps project id to its profile, current assessment and history."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> list[Project]:
        """Return every stored project, in insertion order."""
        raw = self.store.get(STORAGE_KEYS["projects"])
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise PersistenceError(
                f"Expected a project list under {STORAGE_KEYS['projects']}, "
                f"got {type(raw).__name__}"
            )
        try:
            return [Project.from_dict(p) for p in raw if isinstance(p, dict)]
        except KeyError as e:
            raise PersistenceError(f"Stored project is missing required field {e}") from e
        except (ValueError, TypeError) as e:
            raise PersistenceError(f"Stored project has a malformed field: {e}") from e

    def save_all(self, projects: list[Project]):
        self.store.put(STORAGE_KEYS["projects"], [p.to_dict() for p in projects])

    def upsert(self, project: Project):
        """Insert a new project or fully replace the one sharing its id."""
        projects = self.load()
        for i, existing in enumerate(projects):
            if existing.id == project.id:
                projects[i] = project
                break
        else:
            projects.append(project)
            logger.debug(f"Inserted project {project.id} ({project.name})")
        self.save_all(projects)

    def find(self, project_id: str) -> Optional[Project]:
        for project in self.load():
            if project.id == project_id:
                return project
        return None

    def get(self, project_id: str) -> Project:
        project = self.find(project_id)
        if project is None:
            raise NotFoundError(f"Project not found: {project_id}")
        return project

    def delete(self, project_id: str) -> bool:
        """Remove a project by id. Returns True if it existed."""
        projects = self.load()
        remaining = [p for p in projects if p.id != project_id]
        if len(remaining) == len(projects):
            return False
        self.save_all(remaining)
        logger.info(f"Removed project {project_id}")
        return True
