from pathlib import Path

import pytest

from conftest import output
from create_devx import filesystem
from create_devx.filesystem import (
    DirectoryNotEmptyError,
    FilesystemError,
    NotWritableError,
    PathNotFoundError,
    check_writable,
    conflicting_entries,
    ensure_empty_dir,
    is_folder_empty,
    is_writeable,
)


def test_only_housekeeping_entries_is_empty(tmp_path: Path, console) -> None:
    for name in (".git", ".idea", "docs"):
        (tmp_path / name).mkdir()
    for name in (".DS_Store", "LICENSE", "project.iml", "npm-debug.log.1", "yarn-error.log"):
        (tmp_path / name).write_text("x")

    assert conflicting_entries(tmp_path) == []
    assert is_folder_empty(tmp_path, "backend", console)
    assert output(console) == ""


def test_extra_entries_are_listed(tmp_path: Path, console) -> None:
    (tmp_path / ".gitignore").write_text("node_modules\n")
    (tmp_path / "index.js").write_text("")
    (tmp_path / "src").mkdir()

    assert not is_folder_empty(tmp_path, "backend", console)
    text = output(console)
    assert "The directory backend contains files that could conflict:" in text
    assert "  index.js" in text
    assert "  src/" in text
    assert ".gitignore" not in text
    assert "Either try using a new directory name" in text


def test_ensure_empty_dir_creates_missing_directories(tmp_path: Path, console) -> None:
    target = tmp_path / "a" / "b" / "backend"
    ensure_empty_dir(target, "backend", console)
    assert target.is_dir()


def test_ensure_empty_dir_raises_with_conflicts(tmp_path: Path, console) -> None:
    (tmp_path / "server.js").write_text("")
    with pytest.raises(DirectoryNotEmptyError) as e:
        ensure_empty_dir(tmp_path, "backend", console)
    assert e.value.conflicts == ["server.js"]


def test_check_writable(tmp_path: Path) -> None:
    check_writable(tmp_path)
    assert list(tmp_path.iterdir()) == []
    assert is_writeable(tmp_path)


def test_check_writable_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(PathNotFoundError):
        check_writable(tmp_path / "missing")


def test_check_writable_permission_denied(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _denied(*args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(filesystem.tempfile, "TemporaryFile", _denied)
    with pytest.raises(NotWritableError):
        check_writable(tmp_path)
    assert not is_writeable(tmp_path)


def test_file_at_target_is_a_conflict(tmp_path: Path, console) -> None:
    target = tmp_path / "backend"
    target.write_text("x")

    assert conflicting_entries(target) == ["backend"]
    assert not is_folder_empty(target, "backend", console)
    text = output(console)
    assert "backend already exists and is not a directory." in text
    assert "Either try using a new directory name" in text


def test_dangling_symlink_at_target_is_a_conflict(tmp_path: Path, console) -> None:
    target = tmp_path / "backend"
    target.symlink_to(tmp_path / "gone")

    with pytest.raises(DirectoryNotEmptyError) as e:
        ensure_empty_dir(target, "backend", console)
    assert e.value.conflicts == ["backend"]
    assert not (tmp_path / "gone").exists()


def test_unreadable_directory_is_filesystem_error(tmp_path: Path, console, monkeypatch: pytest.MonkeyPatch) -> None:
    def _denied(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "iterdir", _denied)
    with pytest.raises(FilesystemError, match="Cannot read directory"):
        is_folder_empty(tmp_path, "backend", console)


def test_mkdir_failure_is_filesystem_error(tmp_path: Path, console, monkeypatch: pytest.MonkeyPatch) -> None:
    def _denied(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "mkdir", _denied)
    with pytest.raises(FilesystemError, match="Cannot create directory"):
        ensure_empty_dir(tmp_path / "backend", "backend", console)


def test_not_empty_directory_is_listed_once(tmp_path: Path, console, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "server.js").write_text("")
    calls = []
    real_iterdir = Path.iterdir

    def _counting(self):
        calls.append(self)
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", _counting)
    with pytest.raises(DirectoryNotEmptyError):
        ensure_empty_dir(tmp_path, "backend", console)
    assert calls == [tmp_path]
