"""CLI entry point for orgtree."""

from __future__ import annotations

import json
import logging
from typing import IO

import click

from . import __version__
from .config import DEFAULT_CONFIG_PATH, OrgTreeConfig, load_config, save_config
from .exceptions import OrgTreeError
from .friendly_errors import format_friendly_error, friendly_error


# ── Helpers ──────────────────────────────────────────────


def _load(config_path: str | None, verbose: bool) -> OrgTreeConfig:
    """Load config and configure logging, exiting on a bad config file."""
    try:
        config = load_config(config_path)
    except OrgTreeError as e:
        _fail(e)
    level = logging.DEBUG if verbose else getattr(
        logging, config.logging.level.upper(), logging.WARNING
    )
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return config


def _fail(error: Exception) -> None:
    click.echo(format_friendly_error(friendly_error(error)), err=True)
    raise SystemExit(1)


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


config_option = click.option(
    "--config", "config_path", default=None, help="Config file path"
)
verbose_option = click.option(
    "--verbose", "-v", is_flag=True, help="Log each repair step"
)


# ── CLI Commands ─────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="orgtree")
def main() -> None:
    """orgtree: repair and validate org-chart JSON from model output."""


@main.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option(
    "--strategy", "show_strategy", is_flag=True, help="Report the winning strategy"
)
@config_option
@verbose_option
def repair(
    source: IO[str], show_strategy: bool, config_path: str | None, verbose: bool
) -> None:
    """Repair and parse almost-valid JSON from SOURCE (default: stdin)."""
    from .repair import repair_and_parse

    config = _load(config_path, verbose)
    result = repair_and_parse(source.read(), config.repair.preview_chars)
    if not result.ok:
        _fail(result.failure)
    _echo_json(result.value)
    if show_strategy:
        lossy = " (lossy)" if result.lossy else ""
        click.echo(f"strategy: {result.strategy}{lossy}", err=True)


@main.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option(
    "--strict", is_flag=True, help="Fail instead of printing a placeholder tree"
)
@config_option
@verbose_option
def tree(source: IO[str], strict: bool, config_path: str | None, verbose: bool) -> None:
    """Turn a raw model response in SOURCE into a validated tree."""
    from .pipeline import parse_response, process_response

    config = _load(config_path, verbose)
    raw = source.read()
    try:
        root = parse_response(raw, config) if strict else process_response(raw, config)
    except OrgTreeError as e:
        _fail(e)
    _echo_json(root.to_dict())


@main.command()
@click.argument("source", type=click.File("r"), default="-")
@config_option
@verbose_option
def validate(source: IO[str], config_path: str | None, verbose: bool) -> None:
    """Validate a flat node list (id / parentId / name) from SOURCE."""
    from .pipeline import process_flat
    from .repair import loads

    config = _load(config_path, verbose)
    try:
        records = process_flat(
            loads(source.read(), config.repair.preview_chars), config
        )
    except OrgTreeError as e:
        _fail(e)
    _echo_json([r.to_dict() for r in records])


@main.command()
@config_option
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init(config_path: str | None, force: bool) -> None:
    """Write a default config file."""
    from pathlib import Path

    target = Path(config_path or DEFAULT_CONFIG_PATH).expanduser()
    if target.exists() and not force:
        click.echo(f"Config already exists: {target} (use --force to overwrite)")
        return
    path = save_config(OrgTreeConfig(), target)
    click.echo(f"Config written to {path}")


if __name__ == "__main__":
    main()
