"""Configuration management for typedmatter."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import CLIOptions, FrontMatterSettings, LoggingSettings, TypedMatterConfig
from .resolver import ENV_PREFIX, flatten_for_env, parse_override_value, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.typedmatter/config.yaml")
_CONFIG_HEADER = "# typedmatter configuration file\n# Manage with `typedmatter config set`.\n"


class ConfigManager:
    """Load and persist configuration, applying precedence rules."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> TypedMatterConfig:
        """Return the effective configuration.

        A missing configuration file is treated as empty.

        Args:
            cli_overrides: Highest-precedence overrides, e.g. from command flags.
            include_env: Whether environment variables are consulted.
            env_overrides: Environment mapping to use instead of the process one.

        Raises:
            ConfigError: If the file or any override is invalid.
        """
        env_data = None
        if include_env:
            env_data = self._from_env(env_overrides if env_overrides is not None else self._env)

        return resolve_with_precedence(
            defaults=TypedMatterConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=env_data,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored in the configuration file."""
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def save(self, config: TypedMatterConfig | Mapping[str, Any]) -> None:
        """Write configuration data to disk."""
        if isinstance(config, TypedMatterConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n" + yaml.safe_dump(data, sort_keys=False),
            encoding="utf-8",
        )

    def ensure_exists(self) -> Path:
        """Create a configuration file holding the defaults if none exists."""
        if not self._config_path.exists():
            self.save(TypedMatterConfig())
        return self._config_path

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def _from_env(self, env: Mapping[str, str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for key, raw_value in env.items():
            if not key.startswith(ENV_PREFIX):
                continue
            dotted = ".".join(part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part)
            if not dotted:
                continue
            overrides[dotted] = parse_override_value(raw_value)
        return overrides


__all__ = [
    "ConfigManager",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "TypedMatterConfig",
    "FrontMatterSettings",
    "LoggingSettings",
    "CLIOptions",
    "resolve_with_precedence",
    "flatten_for_env",
    "parse_override_value",
]
