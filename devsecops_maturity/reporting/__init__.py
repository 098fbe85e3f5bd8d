"""Reporting package — multi-format output generation."""

from .csv_export import export_csv
from .history import (
    EXPORT_COLUMNS,
    HistoryRecord,
    collect_history,
    export_rows,
    filter_records,
    sort_records,
)
from .json_export import export_json
from .markdown_report import export_markdown

__all__ = [
    "EXPORT_COLUMNS",
    "HistoryRecord",
    "collect_history",
    "export_csv",
    "export_json",
    "export_markdown",
    "export_rows",
    "filter_records",
    "sort_records",
]
