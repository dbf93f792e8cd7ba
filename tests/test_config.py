from __future__ import annotations

from pathlib import Path

import pytest

from preview_server.config import ConfigError, ConfigValidationError, deep_merge, load_settings


def test_defaults_without_file_or_environment() -> None:
    settings = load_settings(environ={})

    assert settings.site_url == "https://ozvion.app"
    assert settings.app_icon_url == "https://ozvion.app/app-icon.png"
    assert settings.cache_seconds == 60
    assert settings.missing_required() == ["store_url", "store_key"]


def test_environment_overrides_yaml_file(tmp_path: Path) -> None:
    config_path = tmp_path / "preview.yaml"
    config_path.write_text(
        """
store_url: https://db.example.test/
site_url: https://file.example.test/
app_name: FromFile
cache_seconds: 120
        """.strip(),
        encoding="utf-8",
    )
    environ = {
        "SUPABASE_SERVICE_ROLE_KEY": "secret",
        "SITE_URL": "https://env.example.test/",
        "IOS_APP_STORE_URL": "https://apps.apple.com/app/id1",
        "PREVIEW_VALIDATE_IDS": "false",
        "APP_SCHEME": "   ",
    }

    settings = load_settings(config_path, environ=environ)

    assert settings.store_url == "https://db.example.test"
    assert settings.store_key == "secret"
    assert settings.site_url == "https://env.example.test"
    assert settings.app_name == "FromFile"
    assert settings.app_scheme == "ozvion"
    assert settings.cache_seconds == 120
    assert settings.validate_ids is False
    assert settings.store_link == "https://apps.apple.com/app/id1"
    assert settings.missing_required() == []


def test_config_path_from_environment(tmp_path: Path) -> None:
    config_path = tmp_path / "preview.yaml"
    config_path.write_text("app_name: Pointed\n", encoding="utf-8")

    settings = load_settings(environ={"PREVIEW_CONFIG": str(config_path)})

    assert settings.app_name == "Pointed"


def test_missing_file_uses_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "absent.yaml", environ={})

    assert settings.app_name == "Ozvion"


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    config_path = tmp_path / "preview.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(config_path, environ={})


def test_out_of_range_values_fail_validation() -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        load_settings(environ={"PREVIEW_CACHE_SECONDS": "86400"})

    assert excinfo.value.errors


def test_access_key_is_hidden_from_repr_and_scrubbed() -> None:
    settings = load_settings(environ={"SUPABASE_SERVICE_ROLE_KEY": "topsecret"})

    assert "topsecret" not in repr(settings)
    assert settings.scrub("key=topsecret") == "key=***"


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"a": {"b": 1, "c": 2}}
    update = {"a": {"c": 3}, "d": 4}

    merged = deep_merge(base, update)

    assert merged == {"a": {"b": 1, "c": 3}, "d": 4}
    assert base == {"a": {"b": 1, "c": 2}}
