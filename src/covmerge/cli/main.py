"""covmerge CLI - covmerge command."""

from pathlib import Path

import click

from covmerge import __version__
from covmerge.cli.capture import capture_command
from covmerge.cli.merge import merge_command
from covmerge.cli.remap import nyc_config_command, remap_command
from covmerge.config.loader import load_config
from covmerge.core.errors import ConfigError
from covmerge.core.logging import configure_logging, set_run_id


@click.group()
@click.version_option(version=__version__, prog_name="covmerge")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root. Defaults to the current directory.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, root: Path | None) -> None:
    """covmerge - merge per-process coverage fragments into one report."""
    ctx.ensure_object(dict)
    try:
        config = load_config(root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    set_run_id()

    ctx.obj["verbose"] = verbose
    ctx.obj["root"] = (root or Path.cwd()).resolve()
    ctx.obj["config"] = config


cli.add_command(merge_command, name="merge")
cli.add_command(remap_command, name="remap")
cli.add_command(nyc_config_command, name="nyc-config")
cli.add_command(capture_command, name="capture")


if __name__ == "__main__":
    cli()
