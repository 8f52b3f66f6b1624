"""
config.py

Responsibility: Resolve runtime settings into a single typed, immutable value.

Resolution order (later wins):
1) built-in defaults
2) an optional YAML mapping file named by `CREATE_DEVX_CONFIG`
3) individual `CREATE_DEVX_*` environment variables

Nothing else in the package reads the environment for settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_TEMPLATE_URL = "https://codeload.github.com/DevXEnterprise/backend/tar.gz/main"
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"

CONFIG_ENV = "CREATE_DEVX_CONFIG"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    """Settings for a single invocation."""

    template_url: str = DEFAULT_TEMPLATE_URL
    registry_url: str = DEFAULT_REGISTRY_URL
    probe_host: str = "registry.yarnpkg.com"
    # None means no client-side timeout for the archive download.
    http_timeout: float | None = None
    update_check: bool = True
    update_check_timeout: float = 2.0


_ENV_KEYS: dict[str, str] = {
    "CREATE_DEVX_TEMPLATE_URL": "template_url",
    "CREATE_DEVX_REGISTRY_URL": "registry_url",
    "CREATE_DEVX_HTTP_TIMEOUT": "http_timeout",
    "CREATE_DEVX_NO_UPDATE_CHECK": "update_check",
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _coerce_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ConfigError(f"`{key}` must be a boolean, got {value!r}.")


def _coerce_timeout(key: str, value: Any) -> float | None:
    if value is None or (isinstance(value, str) and value.strip().lower() in ("", "none")):
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"`{key}` must be a number of seconds, got {value!r}.") from e
    if timeout <= 0:
        raise ConfigError(f"`{key}` must be positive, got {value!r}.")
    return timeout


def _coerce(key: str, value: Any) -> Any:
    if key in ("update_check",):
        return _coerce_bool(key, value)
    if key == "http_timeout":
        return _coerce_timeout(key, value)
    if key == "update_check_timeout":
        timeout = _coerce_timeout(key, value)
        if timeout is None:
            raise ConfigError("`update_check_timeout` cannot be disabled.")
        return timeout
    text = str(value or "").strip()
    if not text:
        raise ConfigError(f"`{key}` must be a non-empty string.")
    return text.rstrip("/") if key == "registry_url" else text


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML settings file. The top level must be a mapping whose keys are
    `Settings` field names.
    """
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config file must be a mapping/object at the top level.")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    return {str(k): _coerce(str(k), v) for k, v in data.items()}


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """
    Build `Settings` from defaults, the optional YAML file and the environment.
    """
    env = os.environ if env is None else env
    settings = Settings()

    config_path = env.get(CONFIG_ENV, "").strip()
    if config_path:
        settings = replace(settings, **_load_yaml_file(Path(config_path).expanduser()))

    overrides: dict[str, Any] = {}
    for env_key, field_name in _ENV_KEYS.items():
        if env_key not in env:
            continue
        value = _coerce(field_name, env[env_key])
        # CREATE_DEVX_NO_UPDATE_CHECK=1 disables the check.
        if env_key == "CREATE_DEVX_NO_UPDATE_CHECK":
            value = not value
        overrides[field_name] = value

    return replace(settings, **overrides)
