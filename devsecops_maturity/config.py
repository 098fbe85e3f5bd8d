"""
Configuration module for the DevSecOps Maturity Engine.
Defines storage, output and scoring settings.
"""

from __future__ import annotations

import os
import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from datetime import datetime, timezone


# ─── Catalog Shape ──────────────────────────────────────────────────────────

QUESTIONS_PER_PILLAR = 6          # Fixed denominator for every pillar score


# ─── Maturity Bands ─────────────────────────────────────────────────────────

MATURITY_THRESHOLDS = [
    (80, "High"),
    (60, "Medium"),
    ( 0, "Low"),
]


# ─── Storage Settings ───────────────────────────────────────────────────────

HOME_ENV_VAR = "DEVSECOPS_MATURITY_HOME"
DEFAULT_DATA_DIR = Path.home() / ".devsecops_maturity"


def default_data_dir() -> str:
    return os.environ.get(HOME_ENV_VAR) or str(DEFAULT_DATA_DIR)


@dataclass
class StorageConfig:
    """Where and how project data is persisted."""
    backend: str = "sqlite"           # "sqlite" or "memory"
    data_dir: str = field(default_factory=default_data_dir)
    db_filename: str = "maturity.db"

    @property
    def db_path(self) -> Path:
        return Path(self.data_dir).expanduser() / self.db_filename


# ─── Output Configuration ───────────────────────────────────────────────────

@dataclass
class OutputConfig:
    """Output directory and format settings for exports."""
    base_dir: str = ""
    timestamp: str = ""
    formats: list[str] = field(default_factory=lambda: [
        "csv", "json", "markdown"
    ])

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        if not self.base_dir:
            self.base_dir = os.path.join(
                os.getcwd(),
                f"maturity_export_{self.timestamp}"
            )

    @property
    def export_dir(self) -> Path:
        return Path(self.base_dir)

    @property
    def reports_dir(self) -> Path:
        return self.export_dir / "reports"

    def create_directories(self):
        for d in [self.export_dir, self.reports_dir]:
            d.mkdir(parents=True, exist_ok=True)


# ─── Master Configuration ───────────────────────────────────────────────────

@dataclass
class EngineConfig:
    """Top-level configuration for the entire engine."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    verbose: bool = False

    @classmethod
    def from_file(cls, path: str | Path) -> "EngineConfig":
        """Load configuration from a JSON file. Unknown keys are ignored."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        config = cls()
        for section in ("storage", "output"):
            target = getattr(config, section)
            allowed = {fld.name for fld in fields(target)}
            for k, v in data.get(section, {}).items():
                if k in allowed:
                    setattr(target, k, v)
        config.verbose = data.get("verbose", False)
        return config
