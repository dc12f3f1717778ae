"""Task tracking model and report rendering."""

from .models import Report, ReportEntry
from .report import build_entries, format_days, format_full, render, render_days, render_full
from .store import ParseError, TaskStore, format_timestamp, now, parse_timestamp

__all__ = [
    "ParseError",
    "Report",
    "ReportEntry",
    "TaskStore",
    "build_entries",
    "format_days",
    "format_full",
    "format_timestamp",
    "now",
    "parse_timestamp",
    "render",
    "render_days",
    "render_full",
]
