"""In-memory task store keyed by task name."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping

logger = logging.getLogger(__name__)

_TIMESTAMP_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?",
    re.ASCII,
)


class ParseError(ValueError):
    """Raised when persisted task data cannot be parsed."""

    def __init__(self, message: str, *, task: str | None = None, value: object = None) -> None:
        super().__init__(message)
        self.task = task
        self.value = value


def _invalid_timestamp(task: str, value: object, reason: str) -> ParseError:
    return ParseError(
        f"invalid timestamp for task '{task}': {value!r} ({reason})", task=task, value=value
    )


def now() -> datetime:
    """Return the current UTC moment as a naive datetime."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp as ``YYYY-MM-DDTHH:MM:SS[.ffffff]``."""

    return value.isoformat(sep="T")


def parse_timestamp(task: str, value: object) -> datetime:
    """Parse a persisted timestamp, raising :class:`ParseError` for ``task`` on failure."""

    if not isinstance(value, str):
        raise _invalid_timestamp(task, value, "expected a string")
    match = _TIMESTAMP_RE.fullmatch(value)
    if match is None:
        raise _invalid_timestamp(task, value, "expected YYYY-MM-DDTHH:MM:SS[.fraction]")

    # datetime only keeps microseconds; extra digits are truncated.
    fraction = (match.group("fraction") or "").ljust(6, "0")[:6]
    try:
        return datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second")),
            int(fraction),
        )
    except ValueError as exc:
        raise _invalid_timestamp(task, value, str(exc)) from exc


class TaskStore:
    """Track the last time each named task was done.

    Task names are opaque and case-sensitive. Each name maps to a single naive
    timestamp; touching a task again replaces it.
    """

    def __init__(
        self,
        tasks: Mapping[str, datetime] | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._tasks: dict[str, datetime] = dict(tasks or {})
        self._clock = clock or now

    @classmethod
    def from_persistable(
        cls,
        data: Mapping[str, str],
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> TaskStore:
        """Build a store from a ``name -> timestamp string`` mapping.

        Every value must parse; a single bad entry rejects the whole mapping.
        """

        tasks = {name: parse_timestamp(name, raw) for name, raw in data.items()}
        return cls(tasks, clock=clock)

    def to_persistable(self) -> dict[str, str]:
        """Return a ``name -> timestamp string`` snapshot suitable for JSON."""

        return {name: format_timestamp(timestamp) for name, timestamp in self._tasks.items()}

    def touch(self, name: str, *, now: datetime | None = None) -> None:
        """Mark ``name`` as done at ``now`` (defaults to the store clock)."""

        timestamp = now if now is not None else self._clock()
        self._tasks[name] = timestamp
        logger.debug("Touched task %r at %s", name, timestamp)

    def touch_many(self, names: Iterable[str], *, now: datetime | None = None) -> None:
        """Mark every name as done, all at the same moment."""

        timestamp = now if now is not None else self._clock()
        for name in names:
            self.touch(name, now=timestamp)

    def remove(self, name: str) -> None:
        if self._tasks.pop(name, None) is not None:
            logger.debug("Removed task %r", name)

    def remove_many(self, names: Iterable[str]) -> None:
        for name in names:
            self.remove(name)

    def retain(self, name: str) -> None:
        self.retain_only([name])

    def retain_only(self, names: Iterable[str]) -> None:
        """Keep only the named tasks; unknown names are ignored."""

        wanted = set(names)
        self._tasks = {name: ts for name, ts in self._tasks.items() if name in wanted}

    def get(self, name: str) -> datetime | None:
        return self._tasks.get(name)

    def names(self) -> list[str]:
        return list(self._tasks)

    def items(self) -> list[tuple[str, datetime]]:
        return list(self._tasks.items())

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __repr__(self) -> str:
        return f"TaskStore({self._tasks!r})"


__all__ = [
    "ParseError",
    "TaskStore",
    "format_timestamp",
    "now",
    "parse_timestamp",
]
