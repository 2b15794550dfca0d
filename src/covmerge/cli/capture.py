"""covmerge capture command - run a script and record its fragment."""

import runpy
import sys
from pathlib import Path

import click

from covmerge.capture.session import CaptureSession
from covmerge.core.progress import status


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def capture_command(obj: dict, script: Path, args: tuple[str, ...]) -> None:
    """Run SCRIPT under coverage capture and write one fragment.

    The script's own exit code is passed through.
    """
    session = CaptureSession(obj["config"].capture)
    if not session.start():
        status("Coverage capture unavailable, running without it", style="warning")

    saved_argv = sys.argv
    sys.argv = [str(script), *args]
    exit_code: int | str | None = 0
    try:
        runpy.run_path(str(script), run_name="__main__")
    except SystemExit as e:
        exit_code = e.code
    finally:
        sys.argv = saved_argv
        fragment = session.close()

    if fragment is not None:
        status(f"Wrote {fragment.name}", style="success")
    if exit_code:
        raise SystemExit(exit_code)
