"""
cli.py

Responsibility: CLI entrypoint for create-devx.

High-level flow (single command):
1) Resolve the project directory (argument, or interactive prompt)
2) Validate the name, refuse a non-empty existing directory
3) Run the scaffolding pipeline (`create_app.py`)
4) Check the registry for a newer release

This module owns user-facing error reporting and exit codes; the modules it
calls only raise.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import TextIO

import requests
from rich.console import Console
from rich.markup import escape

from create_devx import __version__
from create_devx.cancel import Cancelled, CancelToken, handle_signals, restore_terminal
from create_devx.config import ConfigError, Settings, load_settings
from create_devx.create_app import create_app
from create_devx.download import DownloadError
from create_devx.filesystem import (
    DirectoryNotEmptyError,
    FilesystemError,
    NotWritableError,
    PathNotFoundError,
    is_folder_empty,
)
from create_devx.install import InstallError
from create_devx.package_manager import PackageManager, package_manager_from_env
from create_devx.prompt import ask_project_path
from create_devx.update_check import notify_update
from create_devx.validate import validate_project_name

PROG = "create-devx"

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_usage_hint(console: Console) -> None:
    console.print()
    console.print("Please specify the project directory:")
    console.print(f"  [cyan]{PROG}[/cyan] [green]<project-directory>[/green]")
    console.print("For example:")
    console.print(f"  [cyan]{PROG}[/cyan] [green]backend[/green]")
    console.print()
    console.print(f"Run [cyan]{PROG} --help[/cyan] to see all options.")


def _print_validation_problems(console: Console, name: str, problems: list[str]) -> None:
    console.print(
        f'Could not create a project called [red]"{escape(name)}"[/red] because of npm naming restrictions:',
        highlight=False,
    )
    for problem in problems:
        console.print(f"    [bold red]*[/bold red] {escape(problem)}", highlight=False)


def _print_filesystem_error(console: Console, error: FilesystemError) -> None:
    if isinstance(error, DirectoryNotEmptyError):
        # The conflicting entries were already listed.
        return
    if isinstance(error, NotWritableError):
        console.print("[red]The application path is not writable, please check folder permissions and try again.[/red]")
        console.print("[red]It is likely you do not have write permissions for this folder.[/red]")
        return
    if isinstance(error, PathNotFoundError):
        console.print(f"[red]{escape(str(error))}[/red]")
        console.print("[red]Create the parent directory first, or pick another location.[/red]")
        return
    console.print(f"[red]{escape(str(error))}[/red]")


def _resolve_project_path(
    project_directory: str | None,
    *,
    console: Console,
    stream: TextIO | None,
    cwd: Path,
    cancel: CancelToken,
) -> str:
    project_path = (project_directory or "").strip()
    if project_path:
        return project_path
    if stream is None and not sys.stdin.isatty():
        return ""
    return ask_project_path(console, cwd=cwd, stream=stream, cancel=cancel)


def run(
    project_directory: str | None,
    package_manager: PackageManager,
    *,
    settings: Settings,
    console: Console,
    cwd: Path,
    env: Mapping[str, str] | None = None,
    session: requests.Session | None = None,
    stream: TextIO | None = None,
    cancel: CancelToken,
) -> int:
    """
    Validate input and run the pipeline. Returns the exit code for user input
    errors; pipeline errors propagate.
    """
    project_path = _resolve_project_path(project_directory, console=console, stream=stream, cwd=cwd, cancel=cancel)
    if not project_path:
        _print_usage_hint(console)
        return 1

    resolved = (cwd / project_path).resolve()
    project_name = resolved.name
    validation = validate_project_name(project_name)
    if not validation.valid:
        _print_validation_problems(console, project_name, validation.problems)
        return 1

    try:
        if (resolved.exists() or resolved.is_symlink()) and not is_folder_empty(resolved, project_name, console):
            return 1
        create_app(
            resolved,
            package_manager,
            settings=settings,
            console=console,
            original_directory=cwd,
            session=session,
            env=env,
            cancel=cancel,
        )
    except FilesystemError as e:
        _print_filesystem_error(console, e)
        return 1
    return 0


def _report_failure(console: Console, error: BaseException) -> None:
    console.print()
    console.print("Aborting installation.")
    if isinstance(error, InstallError):
        console.print(f"  [cyan]{escape(error.command)}[/cyan] has failed.", highlight=False)
    elif not isinstance(error, DownloadError):
        console.print("[red]Unexpected error. Please report it as a bug:[/red]")
        console.print_exception()
    console.print()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=PROG,
        usage=f"{PROG} <project-directory> [options]",
        description="Create a new Express.js backend from the DevX template",
    )
    p.add_argument("project_directory", nargs="?", default=None, metavar="project-directory")
    p.add_argument("-V", "--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return p


def main(
    argv: list[str] | None = None,
    *,
    console: Console | None = None,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    session: requests.Session | None = None,
    stream: TextIO | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(bool(args.verbose))

    console = console or Console()
    env = os.environ if env is None else env
    cwd = (cwd or Path.cwd()).resolve()
    package_manager = package_manager_from_env(env)

    try:
        settings = load_settings(env)
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return 1

    token = CancelToken()
    with handle_signals(token):
        try:
            code = run(
                args.project_directory,
                package_manager,
                settings=settings,
                console=console,
                cwd=cwd,
                env=env,
                session=session,
                stream=stream,
                cancel=token,
            )
        except (Cancelled, KeyboardInterrupt):
            restore_terminal(console)
            return 1
        except Exception as e:  # noqa: BLE001 - top-level error policy
            logger.debug("aborting after %s", e.__class__.__name__)
            _report_failure(console, e)
            code = 1

        if settings.update_check:
            try:
                notify_update(
                    console,
                    package_manager,
                    registry_url=settings.registry_url,
                    session=session,
                    timeout=settings.update_check_timeout,
                )
            except (Cancelled, KeyboardInterrupt):
                restore_terminal(console)
                return 1

    return code


if __name__ == "__main__":
    raise SystemExit(main())
