"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
gives every test a clean logging setup.
"""

import json
import logging
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of covmerge modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("covmerge"):
        del sys.modules[module_name]

from covmerge.core.logging import clear_run_id  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers bound to streams a previous test may have closed."""
    yield
    logging.getLogger().handlers.clear()
    package_logger = logging.getLogger("covmerge")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
    structlog.reset_defaults()
    clear_run_id()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient COVMERGE__* and NYC_CONFIG variables out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("COVMERGE__"):
            monkeypatch.delenv(key)
    # setenv first so teardown also undoes values written by the code under test
    monkeypatch.setenv("NYC_CONFIG", "{}")
    monkeypatch.delenv("NYC_CONFIG")


@pytest.fixture
def write_fragment_file(tmp_path: Path) -> Callable[..., Path]:
    """Write raw fragment JSON under tmp_path/coverage-parts."""

    def _write(name: str, data: object, *, raw: str | None = None) -> Path:
        directory = tmp_path / "coverage-parts"
        directory.mkdir(exist_ok=True)
        path = directory / name
        path.write_text(raw if raw is not None else json.dumps(data))
        return path

    return _write
