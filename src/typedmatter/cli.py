"""Command line interface for typedmatter."""

from __future__ import annotations

import difflib
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from typedmatter.config import (
    ConfigError,
    ConfigManager,
    TypedMatterConfig,
    parse_override_value,
    resolve_with_precedence,
)
from typedmatter.errors import (
    BulkInsertError,
    FrontMatterDecodeError,
    MalformedFrontMatterError,
    TypedMatterError,
)
from typedmatter.factory import CollectionFactory
from typedmatter.frontmatter import FrontMatterExtraction
from typedmatter.properties import Property

console = Console()
error_console = Console(stderr=True)

_ERROR_CODES = (
    (MalformedFrontMatterError, "malformed_front_matter"),
    (FrontMatterDecodeError, "decode_error"),
    (BulkInsertError, "property_error"),
)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Raises:
        SystemExit: When emitting JSON output.
        click.ClickException: For non-JSON flows.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _configure_logging(level: str) -> None:
    handler = RichHandler(console=error_console, show_time=False, show_path=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign ``value`` at the nested location described by ``path``.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """
    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


def _display_value(prop: Property) -> str:
    value = prop.any_value()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list):
        return ", ".join(value)
    return str(value)


def _extraction_payload(path: Path, extraction: FrontMatterExtraction) -> dict[str, Any]:
    properties = []
    if extraction.properties is not None:
        ordered = sorted(extraction.properties.list(), key=lambda prop: prop.name)
        properties = [prop.model_dump(mode="json") for prop in ordered]
    body = None
    if extraction.body is not None:
        body = extraction.body.decode("utf-8", errors="replace")
    return {
        "path": str(path),
        "has_front_matter": extraction.has_front_matter,
        "count": extraction.count,
        "properties": properties,
        "body": body,
    }


def _render_extraction(path: Path, extraction: FrontMatterExtraction) -> None:
    if extraction.body is None:
        console.print(f"[yellow]Discarded {path}: front matter could not be decoded.[/yellow]")
        return
    if extraction.properties is None:
        console.print(f"[yellow]No front matter found in {path}.[/yellow]")
        return

    table = Table(title=f"{path.name} ({extraction.count} properties)")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Kind", style="magenta")
    table.add_column("Value", overflow="fold")
    for prop in sorted(extraction.properties.list(), key=lambda item: item.name):
        table.add_row(prop.name, getattr(prop, "kind", type(prop).__name__), _display_value(prop))
    console.print(table)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="typedmatter")
def cli() -> None:
    """Typedmatter turns document front matter into typed properties."""


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--smart/--no-smart",
    "smart_parse",
    default=False,
    help="Infer value types from their text instead of trusting YAML types.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the properties.")
@click.option("--lenient", is_flag=True, help="Skip documents with undecodable front matter.")
@click.pass_context
def inspect(
    ctx: click.Context, path: Path, smart_parse: bool, json_output: bool, lenient: bool
) -> None:
    """Extract and display the front matter properties of PATH.

    Flags given on the command line override the configured defaults.

    Args:
        ctx: Click context used to detect explicitly provided flags.
        path: Document to inspect.
        smart_parse: Whether to smart parse front matter values.
        json_output: Whether to emit JSON.
        lenient: Whether undecodable front matter is skipped instead of failing.
    """
    cli_overrides: dict[str, Any] = {}
    if ctx.get_parameter_source("smart_parse") == ParameterSource.COMMANDLINE:
        cli_overrides["front_matter.smart_parse"] = smart_parse
    if lenient:
        cli_overrides["front_matter.strict"] = False

    try:
        config = ConfigManager().load(cli_overrides=cli_overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if ctx.get_parameter_source("json_output") != ParameterSource.COMMANDLINE:
        json_output = config.cli.json_default

    _configure_logging(config.logging.level)

    factory = CollectionFactory.from_config(config)
    try:
        extraction = factory.mutable_from_front_matter(path.read_bytes())
    except OSError as exc:
        message = f"Unable to read {path}: {exc}"
        _handle_cli_error(message, code="read_error", json_output=json_output, original=exc)
        return
    except TypedMatterError as exc:
        code = next(
            (code for kind, code in _ERROR_CODES if isinstance(exc, kind)), "internal_error"
        )
        _handle_cli_error(str(exc), code=code, json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data=_extraction_payload(path, extraction))
        return
    _render_extraction(path, extraction)


@cli.group()
def config() -> None:
    """Manage typedmatter configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        config = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(config.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path describing the configuration field to update.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If assignment or validation fails.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        file_data = manager.load_file_overrides()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if len(segments) < 2:
        raise click.ClickException(
            "KEY must specify a dotted path such as 'front_matter.smart_parse'."
        )

    try:
        _assign_nested(file_data, segments, parse_override_value(value))
        resolve_with_precedence(defaults=TypedMatterConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    # Comment lines hold the header and timestamp.
    diff = list(
        difflib.unified_diff(
            [line for line in before if not line.startswith("#")],
            [line for line in after if not line.startswith("#")],
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )

    if diff:
        console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    else:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
