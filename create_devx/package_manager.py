"""
package_manager.py

Responsibility: Identify the package manager that launched us and phrase
commands in its syntax.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Mapping

USER_AGENT_ENV = "npm_config_user_agent"


class PackageManager(str, enum.Enum):
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"

    def __str__(self) -> str:
        return self.value

    @property
    def requires_online_probe(self) -> bool:
        # Only yarn has a usable offline mode worth detecting.
        return self is PackageManager.YARN

    def run_command(self, script: str) -> str:
        """Phrase `<pm> run <script>` the way this manager is usually typed."""
        if self is PackageManager.YARN:
            return f"yarn {script}"
        return f"{self.value} run {script}"

    def global_add_command(self, package: str) -> str:
        return {
            PackageManager.NPM: f"npm i -g {package}",
            PackageManager.YARN: f"yarn global add {package}",
            PackageManager.PNPM: f"pnpm add -g {package}",
            PackageManager.BUN: f"bun add -g {package}",
        }[self]


def detect_package_manager(user_agent: str | None) -> PackageManager:
    """
    Map an npm-style user agent (`yarn/1.22.19 npm/? node/v20...`) to the
    package manager that launched us. Anything unrecognized is npm.
    """
    agent = (user_agent or "").strip()
    for pm in (PackageManager.YARN, PackageManager.PNPM, PackageManager.BUN):
        if agent.startswith(pm.value):
            return pm
    return PackageManager.NPM


def package_manager_from_env(env: Mapping[str, str] | None = None) -> PackageManager:
    env = os.environ if env is None else env
    return detect_package_manager(env.get(USER_AGENT_ENV))
