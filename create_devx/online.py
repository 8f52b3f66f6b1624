"""
online.py

Responsibility: Decide whether the package registry is reachable.

A DNS lookup of the registry host is enough; when it fails, the configured
https proxy host is tried instead. No request is sent.
"""

from __future__ import annotations

import logging
import os
import socket
import subprocess
import urllib.parse
from collections.abc import Mapping

from create_devx.cancel import CancelToken

logger = logging.getLogger(__name__)


def _resolves(host: str) -> bool:
    try:
        socket.getaddrinfo(host, None)
    except (socket.gaierror, UnicodeError, OSError) as e:
        logger.debug("lookup of %s failed: %s", host, e)
        return False
    return True


def get_proxy(env: Mapping[str, str] | None = None) -> str | None:
    """
    Return the configured https proxy: npm's own setting first, then the
    conventional environment variables.
    """
    env = os.environ if env is None else env
    try:
        result = subprocess.run(
            ["npm", "config", "get", "https-proxy"],
            check=True,
            capture_output=True,
            text=True,
        )
        proxy = result.stdout.strip()
        if proxy and proxy not in ("null", "undefined"):
            return proxy
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("npm config lookup failed: %s", e)
    return env.get("https_proxy") or env.get("HTTPS_PROXY") or None


def get_online(
    host: str = "registry.yarnpkg.com",
    *,
    env: Mapping[str, str] | None = None,
    cancel: CancelToken | None = None,
) -> bool:
    """
    Best-effort connectivity probe: DNS for `host`, or for the proxy host when
    a proxy is configured.
    """
    if cancel is not None:
        cancel.raise_if_cancelled()
    if _resolves(host):
        return True

    proxy = get_proxy(env)
    if not proxy:
        return False
    proxy_host = urllib.parse.urlsplit(proxy if "://" in proxy else f"//{proxy}").hostname
    if not proxy_host:
        return False
    if cancel is not None:
        cancel.raise_if_cancelled()
    return _resolves(proxy_host)
