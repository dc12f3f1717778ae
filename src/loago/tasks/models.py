"""Data models for rendered reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

SEPARATOR = "—"


@dataclass(slots=True)
class ReportEntry:
    name: str
    elapsed: timedelta


@dataclass(slots=True)
class Report:
    """Ordered ``(name, text)`` pairs ready for display."""

    lines: list[tuple[str, str]] = field(default_factory=list)

    def to_text(self) -> str:
        if not self.lines:
            return ""
        width = max(len(name) for name, _ in self.lines)
        return "".join(f"{name.ljust(width)} {SEPARATOR} {text}\n" for name, text in self.lines)

    def __str__(self) -> str:
        return self.to_text()

    def __len__(self) -> int:
        return len(self.lines)


__all__ = ["Report", "ReportEntry", "SEPARATOR"]
