"""
git.py

Responsibility: Best-effort `git init` + initial commit for a new project.

Nothing here raises for expected tool failures (git missing, no user
identity configured); callers only learn whether a repository was created.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit from Create DevX"


def _run(cmd: list[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        cmd,
        cwd=str(cwd),
        check=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )


def is_in_git_repository(root: Path) -> bool:
    try:
        _run(["git", "rev-parse", "--is-inside-work-tree"], cwd=root)
    except (OSError, subprocess.CalledProcessError):
        return False
    return True


def is_in_mercurial_repository(root: Path) -> bool:
    try:
        _run(["hg", "--cwd", ".", "root"], cwd=root)
    except (OSError, subprocess.CalledProcessError):
        return False
    return True


def is_default_branch_set(root: Path) -> bool:
    try:
        _run(["git", "config", "init.defaultBranch"], cwd=root)
    except (OSError, subprocess.CalledProcessError):
        return False
    return True


def try_git_init(root: str | Path) -> bool:
    """
    Initialize a repository in `root` and commit everything in it.

    Returns False, leaving no `.git` behind, if any step fails or if `root` is
    already inside a git or Mercurial repository.
    """
    path = Path(root)
    did_init = False
    try:
        if is_in_git_repository(path) or is_in_mercurial_repository(path):
            logger.debug("%s is already under version control; skipping git init", path)
            return False

        _run(["git", "init"], cwd=path)
        did_init = True

        if not is_default_branch_set(path):
            _run(["git", "checkout", "-b", "main"], cwd=path)

        _run(["git", "add", "-A"], cwd=path)
        _run(["git", "commit", "-m", INITIAL_COMMIT_MESSAGE], cwd=path)
        return True
    except (OSError, subprocess.CalledProcessError) as e:
        output = getattr(e, "stdout", None) or ""
        logger.debug("git init failed in %s: %s %s", path, e, output.strip())
        if did_init:
            shutil.rmtree(path / ".git", ignore_errors=True)
        return False
