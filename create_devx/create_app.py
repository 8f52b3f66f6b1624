"""
create_app.py

Responsibility: The scaffolding pipeline for one project directory.

High-level flow:
1) Guard: parent writable, target created and effectively empty
2) Download + extract the template tarball
3) Install dependencies if the template ships a `package.json`
4) Best-effort git init
5) Print the success summary

Errors are raised to the caller (`cli.py`), which owns presentation and
exit codes. Steps run strictly one after another.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import requests
from rich.console import Console
from rich.markup import escape

from create_devx.cancel import CancelToken
from create_devx.config import Settings
from create_devx.download import download_and_extract_repo
from create_devx.filesystem import check_writable, ensure_empty_dir
from create_devx.git import try_git_init
from create_devx.install import install_packages
from create_devx.online import get_online
from create_devx.package_manager import PackageManager

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"


@dataclass(frozen=True)
class CreateResult:
    root: Path
    has_package_json: bool
    git_initialized: bool


def _cd_path(app_path: Path, original_directory: Path) -> str:
    if original_directory / app_path.name == app_path:
        return app_path.name
    return str(app_path)


def print_success(
    console: Console,
    result: CreateResult,
    package_manager: PackageManager,
    *,
    original_directory: Path,
) -> None:
    app_name = result.root.name
    console.print(f"[green]Success![/green] Created {escape(app_name)} at {escape(str(result.root))}", highlight=False)

    if result.has_package_json:
        dev = package_manager.run_command("dev")
        console.print("Inside that directory, you can run several commands:")
        console.print()
        console.print(f"[cyan]  {dev}[/cyan]")
        console.print("    Starts the development server.")
        console.print()
        console.print(f"[cyan]  {package_manager.value} start[/cyan]")
        console.print("    Builds the app and Runs the built app in production mode.")
        console.print()
        console.print("We suggest that you begin by typing:")
        console.print()
        console.print(f"[cyan]  cd[/cyan] {escape(_cd_path(result.root, original_directory))}", highlight=False)
        console.print(f"  [cyan]{dev}[/cyan]")
    console.print()


def create_app(
    app_path: str | Path,
    package_manager: PackageManager,
    *,
    settings: Settings,
    console: Console,
    original_directory: Path | None = None,
    session: requests.Session | None = None,
    env: Mapping[str, str] | None = None,
    cancel: CancelToken | None = None,
) -> CreateResult:
    """
    Scaffold a project at `app_path`.

    Raises `FilesystemError` subclasses before anything is written,
    `DownloadError` for fetch/extract failures and `InstallError` when the
    package manager exits non-zero.
    """
    cwd = (original_directory or Path.cwd()).resolve()
    root = (cwd / Path(app_path)).resolve()
    app_name = root.name

    check_writable(root.parent)
    ensure_empty_dir(root, app_name, console)

    is_online = True
    if package_manager.requires_online_probe:
        is_online = get_online(settings.probe_host, env=env, cancel=cancel)
        logger.debug("online probe: %s", is_online)

    console.print()
    console.print(f"Creating a new Express.js backend in [green]{escape(str(root))}[/green].", highlight=False)
    console.print()

    download_and_extract_repo(
        root,
        url=settings.template_url,
        session=session,
        timeout=settings.http_timeout,
        cancel=cancel,
    )

    # Presence alone decides; the manifest is not parsed.
    has_package_json = (root / MANIFEST_NAME).exists()
    if has_package_json:
        console.print("Installing packages. This might take a couple of minutes.")
        console.print()
        install_packages(package_manager, is_online, cwd=root, console=console, env=env, cancel=cancel)
        console.print()
    else:
        logger.debug("no %s in %s; skipping install", MANIFEST_NAME, root)

    if cancel is not None:
        cancel.raise_if_cancelled()

    git_initialized = try_git_init(root)
    if git_initialized:
        console.print("Initialized a git repository.")
        console.print()

    result = CreateResult(root=root, has_package_json=has_package_json, git_initialized=git_initialized)
    print_success(console, result, package_manager, original_directory=cwd)
    return result
