"""Turn a task store into an ordered elapsed-time report."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

from .models import Report, ReportEntry
from .store import TaskStore

DurationFormatter = Callable[[timedelta], str]


def whole_days(elapsed: timedelta) -> int:
    """Return the number of whole days in ``elapsed``, truncated toward zero."""

    days = abs(elapsed).days
    return -days if elapsed < timedelta(0) else days


def format_days(elapsed: timedelta, *, suffix: str = "") -> str:
    return f"{whole_days(elapsed)}{suffix}"


def format_full(elapsed: timedelta) -> str:
    """Format as ``<d>d <h>h <m>m``, with a leading ``-`` for negative durations."""

    total_minutes = abs(elapsed) // timedelta(minutes=1)
    sign = "-" if elapsed < timedelta(0) and total_minutes else ""
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)
    return f"{sign}{days}d {hours}h {minutes}m"


def build_entries(store: TaskStore, now: datetime) -> list[ReportEntry]:
    """Compute elapsed time for every task, most recently done first.

    Equal durations are ordered by task name.
    """

    entries = [ReportEntry(name=name, elapsed=now - timestamp) for name, timestamp in store.items()]
    entries.sort(key=lambda entry: (entry.elapsed, entry.name))
    return entries


def render(store: TaskStore, now: datetime, formatter: DurationFormatter) -> Report:
    return Report([(entry.name, formatter(entry.elapsed)) for entry in build_entries(store, now)])


def render_days(store: TaskStore, now: datetime, *, suffix: str = "") -> Report:
    return render(store, now, lambda elapsed: format_days(elapsed, suffix=suffix))


def render_full(store: TaskStore, now: datetime) -> Report:
    return render(store, now, format_full)


__all__ = [
    "DurationFormatter",
    "build_entries",
    "format_days",
    "format_full",
    "render",
    "render_days",
    "render_full",
    "whole_days",
]
