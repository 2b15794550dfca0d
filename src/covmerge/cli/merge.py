"""covmerge merge command - fold fragments into one report."""

from pathlib import Path

import click
import structlog

from covmerge.config.models import CovmergeConfig
from covmerge.core.errors import RemapError, ReportError
from covmerge.core.progress import pluralize, status, task
from covmerge.coverage.report import RENDERERS, build_text_summary, write_report
from covmerge.coverage.scope import InclusionScope
from covmerge.fragments.aggregate import aggregate
from covmerge.fragments.store import discover_fragments
from covmerge.remap.rules import rules_from_config

log = structlog.get_logger()


def _against_root(root: Path, path: Path | None) -> Path | None:
    if path is None or path.is_absolute():
        return path
    return root / path


def run_merge(
    config: CovmergeConfig,
    *,
    fragment_dir: Path | None = None,
    include: tuple[Path, ...] = (),
    output: Path | None = None,
    fmt: str | None = None,
) -> Path | None:
    """Merge every fragment and write the report.

    Returns:
        The report path, or None when the fragment directory does not exist
        (in which case any previous report is left untouched).

    Raises:
        RemapError: If the configured remap rules are invalid.
        ReportError: If the report cannot be written.
    """
    fragment_dir = fragment_dir or Path(config.fragments.directory)
    output = output or Path(config.merge.output)
    fmt = fmt or config.merge.format
    directories = [str(d) for d in include] or config.merge.include

    rules = rules_from_config(config.remap.rules)
    scope = InclusionScope.of(directories)

    fragments = discover_fragments(fragment_dir, config.fragments.pattern)
    if fragments is None:
        status(f"No coverage parts found at {fragment_dir}", style="warning")
        log.info("fragment_dir_missing", path=str(fragment_dir))
        return None

    status(f"Found {pluralize(len(fragments), 'coverage part')}.")
    log.info("fragments_found", count=len(fragments), path=str(fragment_dir))

    def _announce(paths: list[Path]):  # noqa: ANN202
        for path in paths:
            status(f"Processing {path.name}...", indent=2)
            yield path

    result = aggregate(_announce(fragments), scope, rules)

    if result.skipped:
        status(
            f"Skipped {pluralize(len(result.skipped), 'unreadable fragment')}",
            style="warning",
        )

    with task(f"Generating {output.name}"):
        write_report(result.model, output, fmt=fmt)

    status(build_text_summary(result.model), style="success")
    log.info(
        "merge_done",
        processed=len(result.processed),
        empty=len(result.empty),
        skipped=len(result.skipped),
        files=len(result.model.files),
        output=str(output),
    )
    return output


@click.command()
@click.option(
    "--fragments",
    "fragment_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Fragment directory (default: fragments.directory).",
)
@click.option(
    "--include",
    type=click.Path(path_type=Path),
    multiple=True,
    help="Directory eligible for the report. Repeatable (default: merge.include).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Report path (default: merge.output).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(sorted(RENDERERS)),
    default=None,
    help="Report format (default: merge.format).",
)
@click.pass_obj
def merge_command(
    obj: dict,
    fragment_dir: Path | None,
    include: tuple[Path, ...],
    output: Path | None,
    fmt: str | None,
) -> None:
    """Merge coverage fragments into a single XML report.

    Exits 0 when the fragment directory does not exist (nothing to merge) and
    when an empty directory produces an empty report. Exits non-zero only when
    the report cannot be written. Relative option paths are taken from the
    workspace root, like the configured ones.
    """
    root = obj["root"]
    try:
        run_merge(
            obj["config"],
            fragment_dir=_against_root(root, fragment_dir),
            include=tuple(root / d for d in include),
            output=_against_root(root, output),
            fmt=fmt,
        )
    except (RemapError, ReportError) as e:
        raise click.ClickException(str(e)) from e
