from pathlib import Path

import pytest

from create_devx.config import DEFAULT_TEMPLATE_URL, ConfigError, Settings, load_settings


def test_defaults() -> None:
    settings = load_settings({})
    assert settings == Settings()
    assert settings.template_url == DEFAULT_TEMPLATE_URL
    assert settings.http_timeout is None
    assert settings.update_check


def test_yaml_file_then_env(tmp_path: Path) -> None:
    config = tmp_path / "create-devx.yaml"
    config.write_text(
        "template_url: https://example.invalid/a.tar.gz\n"
        "registry_url: https://registry.example/\n"
        "http_timeout: 10\n"
    )
    settings = load_settings(
        {
            "CREATE_DEVX_CONFIG": str(config),
            "CREATE_DEVX_TEMPLATE_URL": "https://example.invalid/b.tar.gz",
        }
    )
    assert settings.template_url == "https://example.invalid/b.tar.gz"
    assert settings.registry_url == "https://registry.example"
    assert settings.http_timeout == 10.0


def test_no_update_check_env() -> None:
    assert not load_settings({"CREATE_DEVX_NO_UPDATE_CHECK": "1"}).update_check
    assert load_settings({"CREATE_DEVX_NO_UPDATE_CHECK": "0"}).update_check


def test_unknown_keys_rejected(tmp_path: Path) -> None:
    config = tmp_path / "c.yaml"
    config.write_text("template: x\n")
    with pytest.raises(ConfigError, match="Unknown config keys"):
        load_settings({"CREATE_DEVX_CONFIG": str(config)})


def test_non_mapping_rejected(tmp_path: Path) -> None:
    config = tmp_path / "c.yaml"
    config.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_settings({"CREATE_DEVX_CONFIG": str(config)})


def test_bad_values_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings({"CREATE_DEVX_HTTP_TIMEOUT": "soon"})
    with pytest.raises(ConfigError):
        load_settings({"CREATE_DEVX_NO_UPDATE_CHECK": "maybe"})
    with pytest.raises(ConfigError):
        load_settings({"CREATE_DEVX_CONFIG": str(tmp_path / "missing.yaml")})
