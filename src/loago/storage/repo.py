"""JSON file persistence for the task store."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Mapping

from pydantic import TypeAdapter, ValidationError

from ..config import LoagoSettings
from ..tasks.store import ParseError

logger = logging.getLogger(__name__)

APP_NAME = "loago"
DATA_FILE_NAME = "loago.json"
EMPTY_DOCUMENT = "{}"

_DOCUMENT_ADAPTER: TypeAdapter[dict[str, str]] = TypeAdapter(dict[str, str])


class DataDirNotFoundError(RuntimeError):
    """Raised when the local data directory cannot be resolved."""

    def __init__(self, message: str = "local data directory wasn't found") -> None:
        super().__init__(message)


def _home() -> Path:
    try:
        return Path.home()
    except RuntimeError as exc:
        raise DataDirNotFoundError() from exc


def local_data_dir() -> Path:
    """Return the per-user local data directory for the platform."""

    if sys.platform.startswith("win"):
        base = os.environ.get("LOCALAPPDATA")
        if not base:
            raise DataDirNotFoundError()
        return Path(base)
    if sys.platform == "darwin":
        return _home() / "Library" / "Application Support"
    base = os.environ.get("XDG_DATA_HOME")
    if base and Path(base).is_absolute():
        return Path(base)
    return _home() / ".local" / "share"


def default_path(settings: LoagoSettings | None = None) -> Path:
    """Return the data file path, honouring an explicitly configured one."""

    if settings is not None and settings.data_file is not None:
        return Path(settings.data_file)
    return local_data_dir() / APP_NAME / DATA_FILE_NAME


def ensure_exists(path: Path) -> bool:
    """Create ``path`` containing an empty JSON object unless it already exists.

    Returns ``True`` when the file was created.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with path.open("x", encoding="utf-8") as handle:
            handle.write(EMPTY_DOCUMENT)
    except FileExistsError:
        return False
    logger.debug("Created data file %s", path)
    return True


class JsonRepo:
    """Read and write the ``name -> timestamp string`` document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, str]:
        try:
            raw = self._path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"{self._path} is not a valid task file: {exc}") from exc
        try:
            data = _DOCUMENT_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
                for error in exc.errors()
            )
            raise ParseError(f"{self._path} is not a valid task file: {errors}") from exc
        logger.debug("Loaded %d task(s) from %s", len(data), self._path)
        return data

    def save(self, data: Mapping[str, str]) -> None:
        document = json.dumps(dict(data), indent=2, sort_keys=True, ensure_ascii=False)
        # Write beside the target and swap it in so a failed write keeps the old file.
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(document + "\n")
            os.replace(tmp_name, self._path)
        except Exception:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise
        logger.debug("Saved %d task(s) to %s", len(data), self._path)


__all__ = [
    "APP_NAME",
    "DATA_FILE_NAME",
    "DataDirNotFoundError",
    "JsonRepo",
    "default_path",
    "ensure_exists",
    "local_data_dir",
]
