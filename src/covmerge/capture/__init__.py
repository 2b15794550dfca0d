"""Per-process coverage capture.

A ``sitecustomize.py`` on the instrumented process's path only needs::

    from covmerge.capture import bootstrap

    bootstrap()

Capture events are logged to the configured outputs (stderr by default)
through the ``covmerge`` logger only, so the host process's stdout and its own
logging setup are left alone.
"""

from pathlib import Path

import structlog

from covmerge.capture.session import (
    CaptureSession,
    capture_available,
    collect_line_status,
    install,
)
from covmerge.config.loader import load_config
from covmerge.core.errors import ConfigError
from covmerge.core.logging import configure_logging

__all__ = [
    "CaptureSession",
    "bootstrap",
    "capture_available",
    "collect_line_status",
    "install",
]

LOGGER_NAME = "covmerge"


def bootstrap(repo_root: Path | None = None) -> CaptureSession | None:
    """Load config for ``repo_root`` and install a session for this process.

    A broken config disables capture instead of failing the host process.
    """
    try:
        config = load_config(repo_root)
    except ConfigError as e:
        configure_logging(logger_name=LOGGER_NAME)
        structlog.get_logger().error("capture_config_invalid", error=str(e))
        return None

    configure_logging(config=config.logging, logger_name=LOGGER_NAME)
    return install(config.capture)
