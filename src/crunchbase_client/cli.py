"""Command line entry point for quick lookups against the Crunchbase API.

Usage:
    crunchbase get organizations facebook
    crunchbase search people --page 2 --option name=mark
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from loguru import logger

from .api import CrunchbaseAPI
from .config import ClientSettings
from .entities import Entity
from .errors import CrunchbaseError


def _configure_logging(debug: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "INFO", format="<level>{message}</level>")


def _load_settings(config_path: Path | None, debug: bool) -> ClientSettings:
    settings = ClientSettings.from_file(config_path) if config_path else ClientSettings.from_env()
    if debug and not settings.debug:
        settings = settings.model_copy(update={"debug": True})
    return settings


def _parse_options(pairs: tuple[str, ...]) -> dict[str, str]:
    options: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--option")
        options[key] = value
    return options


def _echo_entity(entity: Entity) -> None:
    click.echo(entity.model_dump_json(exclude_none=True))


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML settings file (defaults to CRUNCHBASE_* environment variables)",
)
@click.option("--debug", is_flag=True, help="Log every URI visited")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, debug: bool) -> None:
    """Query the Crunchbase REST API."""
    _configure_logging(debug)
    ctx.obj = _load_settings(config_path, debug)


@cli.command()
@click.argument("resource")
@click.argument("permalink")
@click.pass_obj
def get(settings: ClientSettings, resource: str, permalink: str) -> None:
    """Look up one RESOURCE entity by PERMALINK."""
    try:
        with CrunchbaseAPI(settings) as api:
            _echo_entity(api.single_entity(permalink, resource))
    except CrunchbaseError as exc:
        logger.error(str(exc))
        sys.exit(1)


@cli.command()
@click.argument("resource")
@click.option("--page", type=int, default=None, help="Result page (defaults to 1)")
@click.option("--order", default=None, help="Ordering, e.g. 'updated_at desc'")
@click.option("--option", "extra", multiple=True, help="Extra key=value filter")
@click.pass_obj
def search(
    settings: ClientSettings,
    resource: str,
    page: int | None,
    order: str | None,
    extra: tuple[str, ...],
) -> None:
    """Search RESOURCE and print one JSON line per result."""
    options: dict[str, object] = {"page": page, "order": order, **_parse_options(extra)}
    try:
        with CrunchbaseAPI(settings) as api:
            results = api.search(options, resource)
    except CrunchbaseError as exc:
        logger.error(str(exc))
        sys.exit(1)

    for entity in results:
        _echo_entity(entity)
    logger.info(f"{len(results)} of {results.total_items} result(s)")


if __name__ == "__main__":
    cli()
