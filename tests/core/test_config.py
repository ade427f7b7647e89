"""Tests for the Config system."""

import pytest
from prefkit.core.config import (
    PrefkitConfig,
    _convert_value,
    _deep_merge,
    _substitute_env_vars,
)
from prefkit.core.errors import ConfigError


@pytest.fixture
def no_files(tmp_path):
    """Config file locations that do not exist."""
    return {
        "project_path": tmp_path / "missing" / "prefkit.toml",
        "user_path": tmp_path / "missing" / "config.toml",
    }


def test_default_config():
    config = PrefkitConfig()

    assert config.storage.backend == "sqlite"
    assert config.storage.path == "~/.prefkit/settings.db"
    assert config.storage.default_suite == "standard"
    assert config.logging.level == "WARNING"
    assert config.logging.file_enabled is False


def test_db_path_is_expanded():
    config = PrefkitConfig()
    assert "~" not in str(config.storage.get_db_path())


def test_load_with_overrides(no_files):
    config = PrefkitConfig.load(
        overrides={"storage": {"backend": "memory", "default_suite": "app"}},
        **no_files,
    )

    assert config.storage.backend == "memory"
    assert config.storage.default_suite == "app"
    # Defaults still work for non-overridden values
    assert config.storage.path == "~/.prefkit/settings.db"


def test_env_var_loading(monkeypatch, no_files):
    monkeypatch.setenv("PREFKIT_STORAGE_BACKEND", "memory")
    monkeypatch.setenv("PREFKIT_DEFAULT_SUITE", "com.example.premium")
    monkeypatch.setenv("PREFKIT_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("PREFKIT_LOG_FILE", "true")

    config = PrefkitConfig.load(**no_files)

    assert config.storage.backend == "memory"
    assert config.storage.default_suite == "com.example.premium"
    assert config.logging.level == "DEBUG"
    assert config.logging.file_enabled is True


def test_toml_precedence(tmp_path):
    user = tmp_path / "config.toml"
    user.write_text('[storage]\npath = "/user/settings.db"\ndefault_suite = "user"\n')
    project = tmp_path / "prefkit.toml"
    project.write_text('[storage]\ndefault_suite = "project"\n')

    config = PrefkitConfig.load(project_path=project, user_path=user)

    assert config.storage.path == "/user/settings.db"
    assert config.storage.default_suite == "project"


def test_overrides_beat_env(monkeypatch, no_files):
    monkeypatch.setenv("PREFKIT_DEFAULT_SUITE", "env")
    config = PrefkitConfig.load(
        overrides={"storage": {"default_suite": "explicit"}}, **no_files
    )
    assert config.storage.default_suite == "explicit"


def test_invalid_backend_raises_config_error(no_files):
    with pytest.raises(ConfigError):
        PrefkitConfig.load(overrides={"storage": {"backend": "redis"}}, **no_files)


def test_empty_default_suite_raises_config_error(no_files):
    with pytest.raises(ConfigError):
        PrefkitConfig.load(overrides={"storage": {"default_suite": ""}}, **no_files)


def test_malformed_toml_raises_config_error(tmp_path):
    bad = tmp_path / "prefkit.toml"
    bad.write_text("[storage\nbackend = ")
    with pytest.raises(ConfigError):
        PrefkitConfig.load(project_path=bad, user_path=tmp_path / "none.toml")


def test_env_var_substitution(monkeypatch):
    monkeypatch.setenv("PREFS_DIR", "/data/prefs")
    data = {"storage": {"path": "${PREFS_DIR}/settings.db"}, "other": "${UNSET_VAR_X}"}
    monkeypatch.delenv("UNSET_VAR_X", raising=False)

    _substitute_env_vars(data)

    assert data["storage"]["path"] == "/data/prefs/settings.db"
    assert data["other"] == ""


def test_deep_merge():
    base = {"a": 1, "b": {"c": 2, "d": 3}, "e": 5}
    override = {"b": {"c": 20, "f": 6}, "g": 7}

    _deep_merge(base, override)

    assert base == {"a": 1, "b": {"c": 20, "d": 3, "f": 6}, "e": 5, "g": 7}


def test_convert_value():
    assert _convert_value("true") is True
    assert _convert_value("No") is False
    assert _convert_value("42") == "42"
    assert _convert_value("standard") == "standard"
