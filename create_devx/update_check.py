"""
update_check.py

Responsibility: Tell the user when a newer `create-devx` has been published.

Purely informational: every failure is logged at debug level and ignored.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from packaging.version import InvalidVersion, Version
from rich.console import Console

from create_devx import __version__
from create_devx.package_manager import PackageManager

logger = logging.getLogger(__name__)

PACKAGE_NAME = "create-devx"


def fetch_latest_version(
    registry_url: str,
    *,
    session: requests.Session | None = None,
    timeout: float = 2.0,
) -> str | None:
    """
    Return the `latest` version the registry reports for this tool, or None.
    """
    if session is None:
        with requests.Session() as http:
            return fetch_latest_version(registry_url, session=http, timeout=timeout)

    url = f"{registry_url.rstrip('/')}/{PACKAGE_NAME}/latest"
    r = session.get(url, headers={"Accept": "application/json"}, timeout=timeout)
    if r.status_code >= 400:
        logger.debug("registry returned %s for %s", r.status_code, url)
        return None
    data: Any = r.json()
    if not isinstance(data, dict):
        return None
    version = data.get("version")
    return str(version) if version else None


def newer_version(current: str, latest: str | None) -> str | None:
    if not latest:
        return None
    try:
        if Version(latest) > Version(current):
            return latest
    except InvalidVersion:
        logger.debug("unparseable version %r / %r", current, latest)
    return None


def notify_update(
    console: Console,
    package_manager: PackageManager,
    *,
    registry_url: str,
    session: requests.Session | None = None,
    timeout: float = 2.0,
    current: str = __version__,
) -> bool:
    """
    Print an update hint if the registry has a newer release. Returns whether
    a hint was printed. Never raises for network or payload problems.
    """
    try:
        latest = newer_version(current, fetch_latest_version(registry_url, session=session, timeout=timeout))
    except (requests.RequestException, ValueError) as e:
        logger.debug("update check failed: %s", e)
        return False
    if latest is None:
        return False

    console.print(f"[bold yellow]A new version of `{PACKAGE_NAME}` is available![/bold yellow]")
    console.print(
        f"You can update by running: [cyan]{package_manager.global_add_command(PACKAGE_NAME)}[/cyan]",
        highlight=False,
    )
    console.print()
    return True
