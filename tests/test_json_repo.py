from __future__ import annotations

import json
from pathlib import Path

import pytest

from loago.config import LoagoSettings
from loago.storage import (
    APP_NAME,
    DATA_FILE_NAME,
    DataDirNotFoundError,
    JsonRepo,
    default_path,
    ensure_exists,
    local_data_dir,
)
from loago.storage import repo as repo_module
from loago.tasks import ParseError


def test_ensure_exists_creates_empty_document(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / DATA_FILE_NAME

    assert ensure_exists(path) is True
    assert path.read_text(encoding="utf-8") == "{}"


def test_ensure_exists_keeps_existing_file(tmp_path: Path) -> None:
    path = tmp_path / DATA_FILE_NAME
    path.write_text('{"dust": "2023-12-20T00:00:00"}', encoding="utf-8")

    assert ensure_exists(path) is False
    assert json.loads(path.read_text(encoding="utf-8")) == {"dust": "2023-12-20T00:00:00"}


def test_load_and_save(tmp_path: Path) -> None:
    path = tmp_path / DATA_FILE_NAME
    ensure_exists(path)
    repo = JsonRepo(path)
    assert repo.load() == {}

    repo.save({"vacuum": "2023-02-20T00:00:00", "dust": "2023-01-20T00:00:00.250000"})

    assert repo.load() == {"dust": "2023-01-20T00:00:00.250000", "vacuum": "2023-02-20T00:00:00"}
    text = path.read_text(encoding="utf-8")
    assert text.index('"dust"') < text.index('"vacuum"')


def test_save_keeps_unicode_names(tmp_path: Path) -> None:
    path = tmp_path / DATA_FILE_NAME
    repo = JsonRepo(path)
    repo.save({"déjà vu": "2023-01-20T00:00:00"})
    assert "déjà vu" in path.read_text(encoding="utf-8")
    assert repo.load() == {"déjà vu": "2023-01-20T00:00:00"}


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[]",
        '{"dust": 5}',
        '{"dust": null}',
        "",
        b'{"\xff": "2023-01-20T00:00:00"}',
    ],
)
def test_load_rejects_invalid_documents(tmp_path: Path, content: str | bytes) -> None:
    path = tmp_path / DATA_FILE_NAME
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")

    with pytest.raises(ParseError) as excinfo:
        JsonRepo(path).load()
    assert str(path) in str(excinfo.value)
    assert "\n" not in str(excinfo.value)


def test_load_missing_file_raises_oserror(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        JsonRepo(tmp_path / "absent.json").load()


def test_default_path_prefers_configured_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("LOAGO_DATA_FILE", str(tmp_path / "custom.json"))
    settings = LoagoSettings(_env_file=None)
    assert default_path(settings) == tmp_path / "custom.json"


def test_default_path_uses_local_data_dir(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(repo_module, "local_data_dir", lambda: tmp_path)
    assert default_path() == tmp_path / APP_NAME / DATA_FILE_NAME


def test_local_data_dir_linux(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(repo_module.sys, "platform", "linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert local_data_dir() == tmp_path

    monkeypatch.delenv("XDG_DATA_HOME")
    monkeypatch.setattr(repo_module.Path, "home", classmethod(lambda cls: tmp_path))
    assert local_data_dir() == tmp_path / ".local" / "share"


def test_local_data_dir_ignores_relative_xdg(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(repo_module.sys, "platform", "linux")
    monkeypatch.setenv("XDG_DATA_HOME", "relative/dir")
    monkeypatch.setattr(repo_module.Path, "home", classmethod(lambda cls: tmp_path))
    assert local_data_dir() == tmp_path / ".local" / "share"


def test_local_data_dir_macos(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(repo_module.sys, "platform", "darwin")
    monkeypatch.setattr(repo_module.Path, "home", classmethod(lambda cls: tmp_path))
    assert local_data_dir() == tmp_path / "Library" / "Application Support"


def test_local_data_dir_windows_requires_localappdata(monkeypatch) -> None:
    monkeypatch.setattr(repo_module.sys, "platform", "win32")
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    with pytest.raises(DataDirNotFoundError, match="local data directory wasn't found"):
        local_data_dir()


def test_local_data_dir_without_home(monkeypatch) -> None:
    def no_home(cls):
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(repo_module.sys, "platform", "linux")
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.setattr(repo_module.Path, "home", classmethod(no_home))
    with pytest.raises(DataDirNotFoundError):
        local_data_dir()


def test_save_replaces_file_without_leftovers(tmp_path: Path) -> None:
    path = tmp_path / DATA_FILE_NAME
    repo = JsonRepo(path)
    repo.save({"dust": "2023-01-20T00:00:00"})
    repo.save({"vacuum": "2023-02-20T00:00:00"})

    assert repo.load() == {"vacuum": "2023-02-20T00:00:00"}
    assert [entry.name for entry in tmp_path.iterdir()] == [DATA_FILE_NAME]


def test_failed_save_keeps_previous_document(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / DATA_FILE_NAME
    repo = JsonRepo(path)
    repo.save({"dust": "2023-01-20T00:00:00"})

    def broken_replace(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(repo_module.os, "replace", broken_replace)

    with pytest.raises(OSError):
        repo.save({"vacuum": "2023-02-20T00:00:00"})

    monkeypatch.undo()
    assert repo.load() == {"dust": "2023-01-20T00:00:00"}
    assert [entry.name for entry in tmp_path.iterdir()] == [DATA_FILE_NAME]
