"""
validate.py

Responsibility: Decide whether a directory name can become the project name.

The rules follow npm's package-name conventions, restricted to names that are
also a single filesystem path segment (no scopes, no separators). Errors and
warnings are both fatal for a new project, so they are reported together.
"""

from __future__ import annotations

import re
import urllib.parse
from dataclasses import dataclass, field

MAX_NAME_LENGTH = 214

BLOCKED_NAMES = frozenset({"node_modules", "favicon.ico"})

# Node.js built-in modules; a package with one of these names would shadow it.
CORE_MODULE_NAMES = frozenset(
    {
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "sys",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

_SPECIAL_CHARS = re.compile(r"[~'!()*]")
_PATH_SEPARATORS = ("/", "\\")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    problems: list[str] = field(default_factory=list)


def _is_url_friendly(name: str) -> bool:
    # Same safe set as JavaScript's encodeURIComponent.
    return urllib.parse.quote(name, safe="!'()*~") == name


def validate_project_name(name: str) -> ValidationResult:
    """
    Validate `name`; the result lists every problem found.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not name:
        return ValidationResult(valid=False, problems=["name length must be greater than zero"])

    if name.startswith("."):
        errors.append("name cannot start with a period")
    if name.startswith("_"):
        errors.append("name cannot start with an underscore")
    if name.strip() != name:
        errors.append("name cannot contain leading or trailing spaces")
    if name.lower() in BLOCKED_NAMES:
        errors.append(f"{name} is not a valid package name")
    if any(sep in name for sep in _PATH_SEPARATORS):
        errors.append("name cannot contain path separators")

    if name.lower() in CORE_MODULE_NAMES:
        warnings.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        warnings.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        warnings.append("name can no longer contain capital letters")
    if _SPECIAL_CHARS.search(name):
        warnings.append("name can no longer contain special characters (\"~'!()*\")")

    if not any(sep in name for sep in _PATH_SEPARATORS) and not _is_url_friendly(name):
        errors.append("name can only contain URL-friendly characters")

    problems = errors + warnings
    return ValidationResult(valid=not problems, problems=problems)
