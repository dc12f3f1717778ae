"""Storage abstractions for loago."""

from .repo import (
    APP_NAME,
    DATA_FILE_NAME,
    DataDirNotFoundError,
    JsonRepo,
    default_path,
    ensure_exists,
    local_data_dir,
)

__all__ = [
    "APP_NAME",
    "DATA_FILE_NAME",
    "DataDirNotFoundError",
    "JsonRepo",
    "default_path",
    "ensure_exists",
    "local_data_dir",
]
