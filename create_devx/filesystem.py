"""
filesystem.py

Responsibility: Check the target location before anything is written.

- `check_writable`: probe-write into the parent directory.
- `is_folder_empty`: treat a directory as empty when it only holds
  housekeeping files (VCS/IDE metadata, logs, license, docs).
"""

from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)

IGNORABLE_ENTRIES = frozenset(
    {
        ".DS_Store",
        ".git",
        ".gitattributes",
        ".gitignore",
        ".gitlab-ci.yml",
        ".hg",
        ".hgcheck",
        ".hgignore",
        ".idea",
        ".npmignore",
        ".travis.yml",
        "LICENSE",
        "Thumbs.db",
        "docs",
        "mkdocs.yml",
        "npm-debug.log",
        "yarn-debug.log",
        "yarn-error.log",
        "yarnrc.yml",
        ".yarn",
    }
)

# IntelliJ module files and rotated package manager logs.
_IGNORABLE_PATTERN = re.compile(r"(\.iml$)|^(npm-debug\.log|yarn-debug\.log|yarn-error\.log)")


class FilesystemError(OSError):
    pass


class PathNotFoundError(FilesystemError):
    pass


class NotWritableError(FilesystemError):
    pass


class DirectoryNotEmptyError(FilesystemError):
    def __init__(self, root: str | Path, conflicts: list[str]) -> None:
        super().__init__(f"Directory is not empty: {root}")
        self.root = Path(root)
        self.conflicts = conflicts


def check_writable(directory: str | Path) -> None:
    """
    Raise `PathNotFoundError` if `directory` is missing, `NotWritableError`
    if a file cannot be created in it. The probe file is removed again.
    """
    path = Path(directory)
    if not path.is_dir():
        raise PathNotFoundError(f"Directory does not exist: {path}")
    try:
        with tempfile.TemporaryFile(dir=path):
            pass
    except PermissionError as e:
        raise NotWritableError(f"Directory is not writable: {path}") from e
    except FileNotFoundError as e:
        raise PathNotFoundError(f"Directory does not exist: {path}") from e


def is_writeable(directory: str | Path) -> bool:
    try:
        check_writable(directory)
    except NotWritableError:
        return False
    return True


def is_ignorable(entry: str) -> bool:
    return entry in IGNORABLE_ENTRIES or _IGNORABLE_PATTERN.search(entry) is not None


def _occupied_by_non_directory(path: Path) -> bool:
    # A dangling symlink is_symlink() but not exists().
    return (path.exists() or path.is_symlink()) and not path.is_dir()


def conflicting_entries(root: str | Path) -> list[str]:
    """
    Return the entries of `root` that would conflict with a new project,
    sorted by name. Directories carry a trailing `/`. A file or symlink at
    `root` itself conflicts as a whole.
    """
    path = Path(root)
    if _occupied_by_non_directory(path):
        return [path.name]
    try:
        children = sorted(path.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise FilesystemError(f"Cannot read directory: {path} ({e.strerror or e})") from e

    conflicts: list[str] = []
    for child in children:
        if is_ignorable(child.name):
            continue
        conflicts.append(f"{child.name}/" if child.is_dir() else child.name)
    return conflicts


def report_conflicts(root: str | Path, name: str, conflicts: list[str], console: Console) -> None:
    logger.debug("%d conflicting entries in %s", len(conflicts), root)
    if _occupied_by_non_directory(Path(root)):
        console.print(f"[green]{escape(name)}[/green] already exists and is not a directory.", highlight=False)
    else:
        console.print(f"The directory [green]{escape(name)}[/green] contains files that could conflict:", highlight=False)
        console.print()
        for entry in conflicts:
            if entry.endswith("/"):
                console.print(f"  [blue]{escape(entry)}[/blue]", highlight=False)
            else:
                console.print(f"  {escape(entry)}", highlight=False)
    console.print()
    console.print("Either try using a new directory name, or remove the files listed above.")
    console.print()


def is_folder_empty(root: str | Path, name: str, console: Console) -> bool:
    """
    Return True if `root` only holds ignorable entries. Otherwise list the
    conflicts on `console` and return False.
    """
    conflicts = conflicting_entries(root)
    if not conflicts:
        return True
    report_conflicts(root, name, conflicts, console)
    return False


def ensure_empty_dir(root: str | Path, name: str, console: Console) -> None:
    """
    Create `root` (and missing parents) and require it to be effectively empty.
    """
    path = Path(root)
    if not _occupied_by_non_directory(path):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create directory: {path} ({e.strerror or e})") from e
    conflicts = conflicting_entries(path)
    if conflicts:
        report_conflicts(path, name, conflicts, console)
        raise DirectoryNotEmptyError(path, conflicts)
