"""Fragment store: one immutable JSON file per captured process.

Fragment files are named ``coverage-<time_ns>-<pid>.json`` and hold the raw
capture::

    {"/opt/app/src/a.py": {"1": 1, "2": -1, "5": -2}, ...}

where ``1`` is hit, ``-1`` executable but not hit and ``-2`` not executable.
The timestamp/pid pair keeps names unique across concurrent writers without
any shared counter or lock, and files are created exclusively so an existing
fragment is never overwritten.
"""

from __future__ import annotations

import json
import os
import time
from collections.abc import Mapping
from pathlib import Path

from covmerge.core.errors import FragmentError
from covmerge.coverage.merge import merge_lines
from covmerge.coverage.models import CoverageFragment, CoverageParseError, LineStatus

FRAGMENT_PREFIX = "coverage-"
FRAGMENT_SUFFIX = ".json"


def fragment_name(now_ns: int | None = None, pid: int | None = None) -> str:
    """File name for a new fragment."""
    now_ns = time.time_ns() if now_ns is None else now_ns
    pid = os.getpid() if pid is None else pid
    return f"{FRAGMENT_PREFIX}{now_ns}-{pid}{FRAGMENT_SUFFIX}"


def write_fragment(
    directory: Path,
    raw: Mapping[str, Mapping[int, int]],
    *,
    name: str | None = None,
) -> Path:
    """Serialize ``raw`` into a new fragment file under ``directory``.

    The directory is created on first use.

    Raises:
        FragmentError: If the directory or file cannot be created, the data
            cannot be serialized, or a fragment with that name already exists.
    """
    path = directory / (name or fragment_name())
    try:
        payload = json.dumps(
            {
                file: {str(line): int(status) for line, status in lines.items()}
                for file, lines in raw.items()
            }
        )
    except (TypeError, ValueError) as e:
        raise FragmentError.write_failed(str(path), str(e)) from e

    try:
        directory.mkdir(parents=True, exist_ok=True)
        with path.open("x", encoding="utf-8") as f:
            f.write(payload)
    except FileExistsError as e:
        raise FragmentError.already_exists(str(path)) from e
    except OSError as e:
        raise FragmentError.write_failed(str(path), str(e)) from e
    return path


def discover_fragments(directory: Path, pattern: str = "*.json") -> list[Path] | None:
    """List fragment files in ``directory``, sorted by name.

    Returns:
        The fragment paths, or None when the directory does not exist.
    """
    if not directory.is_dir():
        return None
    return sorted(p for p in directory.glob(pattern) if p.is_file())


def _parse_lines(file_path: str, lines: object) -> dict[int, LineStatus]:
    if not isinstance(lines, dict):
        raise CoverageParseError(f"Line data for {file_path!r} must be an object")

    parsed: dict[int, LineStatus] = {}
    for key, value in lines.items():
        try:
            line_num = int(key)
        except ValueError as e:
            raise CoverageParseError(f"Invalid line number {key!r} in {file_path!r}") from e
        if line_num <= 0:
            raise CoverageParseError(f"Invalid line number {key!r} in {file_path!r}")
        # "1" and "01" decode to the same line
        merge_lines(parsed, {line_num: LineStatus.from_raw(value)})
    return parsed


def load_fragment(path: Path) -> CoverageFragment | None:
    """Parse a fragment file.

    Returns:
        The fragment, or None when it holds no coverage data.

    Raises:
        CoverageParseError: If the file is unreadable or malformed.
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CoverageParseError(f"Failed to read fragment {path}: {e}") from e

    if not data:
        return None
    if not isinstance(data, dict):
        raise CoverageParseError(f"Fragment {path} must be a JSON object keyed by file path")

    files = {file_path: _parse_lines(file_path, lines) for file_path, lines in data.items()}
    return CoverageFragment(id=path.stem, path=str(path), files=files)
