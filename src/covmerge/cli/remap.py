"""covmerge remap and nyc-config commands."""

import json
from pathlib import Path

import click
import structlog

from covmerge.core.errors import RemapError
from covmerge.core.progress import pluralize, status
from covmerge.remap.canonicalize import canonicalize_file
from covmerge.remap.nyc import apply_nyc_config
from covmerge.remap.rules import PathRemapRule, rules_from_config

log = structlog.get_logger()


def _load_rules(obj: dict) -> tuple[PathRemapRule, ...]:
    try:
        return rules_from_config(obj["config"].remap.rules)
    except RemapError as e:
        raise click.ClickException(str(e)) from e


@click.command()
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def remap_command(obj: dict, files: tuple[Path, ...]) -> None:
    """Rewrite execution paths in JSON coverage files to workspace paths.

    FILES default to remap.coverage_file. Every file is processed even when
    an earlier one fails; the exit code is 1 if any failed.
    """
    rules = _load_rules(obj)
    targets = list(files) or [Path(obj["config"].remap.coverage_file)]

    failed = 0
    for path in targets:
        try:
            result = canonicalize_file(path, rules)
        except RemapError as e:
            failed += 1
            status(str(e), style="error")
            log.error("remap_failed", path=str(path), error=str(e))
            continue

        if result.missing:
            status(f"{path}: not found, skipped", style="warning")
        else:
            status(f"{path}: remapped {pluralize(result.remapped, 'path')}")

    if failed:
        raise SystemExit(1)


@click.command()
@click.option("--write", is_flag=True, help="Persist map-path to the nyc config file.")
@click.pass_obj
def nyc_config_command(obj: dict, write: bool) -> None:
    """Set the nyc map-path from the remap rules and print the config."""
    rules = _load_rules(obj)
    path = Path(obj["config"].remap.nyc_config)
    try:
        config = apply_nyc_config(path, rules, write=write)
    except RemapError as e:
        raise click.ClickException(str(e)) from e

    click.echo(json.dumps(config, indent=2))
