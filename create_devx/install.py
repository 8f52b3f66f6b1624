"""
install.py

Responsibility: Run the project's package manager install step.

The child inherits our stdin/stdout/stderr so its progress output is shown
live. Failures carry the exact command line that was run.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Mapping
from pathlib import Path

from rich.console import Console

from create_devx.cancel import CancelToken
from create_devx.package_manager import PackageManager

logger = logging.getLogger(__name__)


class InstallError(RuntimeError):
    def __init__(self, command: str, *, returncode: int | None = None) -> None:
        super().__init__(f"{command} has failed")
        self.command = command
        self.returncode = returncode


def install_env(base_env: Mapping[str, str]) -> dict[str, str]:
    env = dict(base_env)
    env["ADBLOCK"] = "1"
    # pnpm skips devDependencies when NODE_ENV=production.
    env["NODE_ENV"] = "development"
    env["DISABLE_OPENCOLLECTIVE"] = "1"
    return env


def install_args(is_online: bool) -> list[str]:
    args = ["install"]
    if not is_online:
        args.append("--offline")
    return args


def install_packages(
    package_manager: PackageManager,
    is_online: bool,
    *,
    cwd: str | Path,
    console: Console,
    env: Mapping[str, str] | None = None,
    cancel: CancelToken | None = None,
) -> None:
    """
    Run `<pm> install` in `cwd`, raising `InstallError` on a non-zero exit.
    """
    args = install_args(is_online)
    command = " ".join([package_manager.value, *args])
    if not is_online:
        console.print("[yellow]You appear to be offline.\nFalling back to the local cache.[/yellow]")

    if cancel is not None:
        cancel.raise_if_cancelled()

    # Resolve npm.cmd and friends on Windows.
    executable = shutil.which(package_manager.value) or package_manager.value
    logger.debug("running %s in %s", command, cwd)
    try:
        completed = subprocess.run(
            [executable, *args],
            cwd=str(cwd),
            env=install_env(os.environ if env is None else env),
        )
    except OSError as e:
        logger.debug("could not start %s: %s", executable, e)
        raise InstallError(command) from e

    if completed.returncode != 0:
        raise InstallError(command, returncode=completed.returncode)
