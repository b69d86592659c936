"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from typedmatter.cli import cli
from typedmatter.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("TYPEDMATTER__")}
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".typedmatter" / "config.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "view"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "front_matter:" in result.output
    assert _config_path(tmp_path).exists()


def test_config_view_applies_environment_unless_disabled(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    env["TYPEDMATTER__LOGGING__LEVEL"] = "DEBUG"

    with_env = runner.invoke(cli, ["config", "view"], env=env)
    without_env = runner.invoke(cli, ["config", "view", "--no-env"], env=env)

    assert "DEBUG" in with_env.output
    assert "DEBUG" not in without_env.output


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli, ["config", "set", "front_matter.smart_parse", "--value", "true"], env=env
    )

    assert result.exit_code == 0
    assert "smart_parse: true" in result.output

    config = ConfigManager(config_path=_config_path(tmp_path), env={}).load()
    assert config.front_matter.smart_parse is True

    repeat = runner.invoke(
        cli, ["config", "set", "front_matter.smart_parse", "--value", "true"], env=env
    )
    assert "No changes applied" in repeat.output


def test_config_set_rejects_invalid_values(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    bad_level = runner.invoke(cli, ["config", "set", "logging.level", "--value", "LOUD"], env=env)
    bad_key = runner.invoke(cli, ["config", "set", "logging", "--value", "x"], env=env)

    assert bad_level.exit_code != 0
    assert bad_key.exit_code != 0
    config = ConfigManager(config_path=_config_path(tmp_path), env={}).load()
    assert config.logging.level == "WARNING"
