"""
CSV exporter — Produces the assessment history table.
"""

from __future__ import annotations

import csv
from pathlib import Path

from .history import EXPORT_COLUMNS, HistoryRecord, export_rows

# Header labels, aligned with EXPORT_COLUMNS
CSV_HEADERS = [
    "Project Name", "Assessor", "Date", "Overall Score",
    "Code", "Build", "Quality", "Security", "Testing",
    "Package", "Deploy", "Monitoring",
]


def export_csv(
    records: list[HistoryRecord],
    output_dir: Path,
    filename: str = "assessment-history.csv",
) -> Path:
    """
    Write history records as CSV, one row per assessment.

    Returns:
        Path to the created CSV file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    filepath = output_dir / filename

    with open(filepath, "w", newline="", encoding="utf-8-sig") as fh:
        writer = csv.writer(fh)
        writer.writerow(CSV_HEADERS)
        for row in export_rows(records):
            writer.writerow([row[col] for col in EXPORT_COLUMNS])

    return filepath
