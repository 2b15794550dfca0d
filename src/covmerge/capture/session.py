"""Per-process line capture that persists exactly one fragment.

A CaptureSession is a scoped resource: acquiring it starts coverage.py
measurement, releasing it stops measurement and flushes the fragment. Release
happens on every exit path, including exceptions, and never raises, so a
failing write cannot disturb the host process.

Usage::

    with CaptureSession(config.capture):
        serve_request()

For bootstrap hooks that cannot wrap the process body (``sitecustomize``),
:func:`install` starts a session and releases it at interpreter exit.
"""

from __future__ import annotations

import atexit
from pathlib import Path
from types import TracebackType

import coverage
import structlog
from coverage.exceptions import CoverageException

from covmerge.config.models import CaptureConfig
from covmerge.core.errors import FragmentError
from covmerge.coverage.models import LineStatus
from covmerge.fragments.store import write_fragment

log = structlog.get_logger()


def capture_available(config: CaptureConfig) -> bool:
    """Whether a session could start in this process.

    Capture is unavailable when disabled in config, or when another
    coverage.py session is already measuring this process.
    """
    if not config.enabled:
        return False
    return coverage.Coverage.current() is None


def collect_line_status(cov: coverage.Coverage) -> dict[str, dict[int, LineStatus]]:
    """Classify every line of every measured file.

    Executed statements are hits, unexecuted statements are not-hit and
    excluded lines are dead. Files whose source can no longer be analysed
    keep only their executed lines.
    """
    data = cov.get_data()
    raw: dict[str, dict[int, LineStatus]] = {}
    for filename in sorted(data.measured_files()):
        executed = set(data.lines(filename) or ())
        try:
            _, statements, excluded, _, _ = cov.analysis2(filename)
        except CoverageException:
            statements, excluded = sorted(executed), []

        lines = {num: LineStatus.DEAD for num in excluded}
        for num in statements:
            lines[num] = LineStatus.NOT_HIT
        for num in executed:
            lines[num] = LineStatus.HIT

        if lines:
            raw[filename] = lines
    return raw


class CaptureSession:
    """Scoped coverage capture for one process."""

    def __init__(self, config: CaptureConfig) -> None:
        self.config = config
        self.fragment_path: Path | None = None
        self._cov: coverage.Coverage | None = None
        self._closed = False

    @property
    def active(self) -> bool:
        return self._cov is not None

    def start(self) -> bool:
        """Begin measurement. Returns False when capture is unavailable."""
        if self._cov is not None:
            return True
        if self._closed or not capture_available(self.config):
            log.debug("capture_unavailable", enabled=self.config.enabled)
            return False

        cov = coverage.Coverage(
            data_file=None,
            config_file=False,
            source=self.config.source or None,
        )
        cov.start()
        self._cov = cov
        log.debug("capture_started", fragment_dir=self.config.fragment_dir)
        return True

    def close(self) -> Path | None:
        """Stop measurement and write the fragment. Safe to call repeatedly.

        Returns:
            The fragment path, or None if nothing was written.
        """
        if self._closed:
            return self.fragment_path
        self._closed = True

        cov, self._cov = self._cov, None
        if cov is None:
            return None

        try:
            cov.stop()
            raw = collect_line_status(cov)
            if not raw:
                log.debug("capture_empty")
                return None
            self.fragment_path = write_fragment(Path(self.config.fragment_dir), raw)
        except (CoverageException, FragmentError) as e:
            log.error("fragment_write_failed", fragment_dir=self.config.fragment_dir, error=str(e))
            return None

        log.info("fragment_written", path=str(self.fragment_path), files=len(raw))
        return self.fragment_path

    def __enter__(self) -> CaptureSession:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def install(config: CaptureConfig) -> CaptureSession | None:
    """Start a session released at interpreter exit.

    Returns:
        The running session, or None when capture is unavailable.
    """
    session = CaptureSession(config)
    if not session.start():
        return None
    atexit.register(session.close)
    return session
