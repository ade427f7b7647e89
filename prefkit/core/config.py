"""
prefkit Configuration — decides which backend serves the default suite.

Precedence (highest to lowest):
1. Explicit overrides (passed in code)
2. Environment variables (PREFKIT_*)
3. Project config (./prefkit.toml)
4. User config (~/.prefkit/config.toml)
5. Defaults (hardcoded)

Environment variable mapping:
    PREFKIT_STORAGE_BACKEND → storage.backend
    PREFKIT_STORAGE_PATH → storage.path
    PREFKIT_DEFAULT_SUITE → storage.default_suite
    PREFKIT_LOG_LEVEL → logging.level
    PREFKIT_LOG_DIR → logging.log_dir
    PREFKIT_LOG_FILE → logging.file_enabled
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from prefkit.core.errors import ConfigError

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Config Sub-Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class StorageConfig(BaseModel):
    """Which store backs each suite."""

    backend: Literal["sqlite", "memory"] = "sqlite"
    path: str = "~/.prefkit/settings.db"
    default_suite: str = Field(default="standard", min_length=1)

    def get_db_path(self) -> Path:
        return Path(self.path).expanduser()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    log_dir: str = "~/.prefkit/logs"
    file_enabled: bool = False


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Main Config
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class PrefkitConfig(BaseModel):
    """Root configuration for prefkit."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @staticmethod
    def load(
        overrides: dict[str, Any] | None = None,
        project_path: Path | None = None,
        user_path: Path | None = None,
    ) -> PrefkitConfig:
        """
        Load configuration from all sources and merge.

        Precedence: overrides > env vars > project toml > user toml > defaults
        """
        merged: dict[str, Any] = {}

        user_config_path = user_path or get_prefkit_home() / "config.toml"
        if user_config_path.exists():
            _deep_merge(merged, _load_toml(user_config_path))

        project_config_path = project_path or Path.cwd() / "prefkit.toml"
        if project_config_path.exists():
            _deep_merge(merged, _load_toml(project_config_path))

        _deep_merge(merged, _load_from_env())

        if overrides:
            _deep_merge(merged, overrides)

        _substitute_env_vars(merged)

        try:
            return PrefkitConfig(**merged)
        except Exception as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def get_prefkit_home() -> Path:
    """Get the prefkit home directory (~/.prefkit)."""
    return Path.home() / ".prefkit"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Internal Helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e


_ENV_MAPPING = {
    "PREFKIT_STORAGE_BACKEND": ("storage", "backend"),
    "PREFKIT_STORAGE_PATH": ("storage", "path"),
    "PREFKIT_DEFAULT_SUITE": ("storage", "default_suite"),
    "PREFKIT_LOG_LEVEL": ("logging", "level"),
    "PREFKIT_LOG_DIR": ("logging", "log_dir"),
    "PREFKIT_LOG_FILE": ("logging", "file_enabled"),
}


def _load_from_env() -> dict[str, Any]:
    """Load configuration from PREFKIT_* environment variables."""
    result: dict[str, Any] = {}

    for env_var, (section, key) in _ENV_MAPPING.items():
        value = os.environ.get(env_var)
        if value is not None:
            result.setdefault(section, {})[key] = _convert_value(value)

    return result


def _convert_value(value: str) -> Any:
    """Convert a boolean-looking env string, leave everything else as text."""
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False
    return value


def _deep_merge(base: dict, override: dict) -> None:
    """Deep merge override into base (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _substitute_env_vars(data: dict) -> None:
    """Recursively substitute ${ENV_VAR} patterns in string values."""
    for key, value in data.items():
        if isinstance(value, dict):
            _substitute_env_vars(value)
        elif isinstance(value, str):
            data[key] = _ENV_PATTERN.sub(
                lambda m: os.environ.get(m.group(1), ""), value
            )
