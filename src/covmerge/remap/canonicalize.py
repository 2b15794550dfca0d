"""Canonicalize paths inside JSON coverage data files.

Works on any ``{path: entry}`` document, which covers Istanbul's
``coverage-final.json``::

    {
      "/opt/app/src/a.js": {"path": "/opt/app/src/a.js", "statementMap": {...}, ...},
      ...
    }

Both the key and an embedded ``path`` field are rewritten, each on its own.
Test runners call :func:`after_unit` after every test unit so that an
interrupted run still leaves canonical data behind; ``covmerge remap`` runs the
same :func:`canonicalize_file` once the run is over. Since canonical paths no
longer match any rule, either call site can run any number of times.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from covmerge.core.atomic import atomic_write
from covmerge.core.errors import RemapError
from covmerge.remap.rules import PathRemapRule, remap_path

log = structlog.get_logger()


@dataclass(slots=True)
class RemapResult:
    """Outcome of one canonicalization pass."""

    path: Path | None = None
    data: dict[str, Any] = field(default_factory=dict)
    remapped: int = 0  # keys rewritten
    embedded: int = 0  # embedded path fields rewritten
    missing: bool = False
    written: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.remapped or self.embedded)


def canonicalize_entries(
    data: Mapping[str, Any],
    rules: Sequence[PathRemapRule],
) -> RemapResult:
    """Remap every key of ``data``, and any embedded ``path`` field.

    The input mapping and its entries are left untouched. When two keys map to
    the same path the later entry wins and a ``remap_collision`` warning names
    both source keys.
    """
    result = RemapResult()
    sources: dict[str, str] = {}
    for file_path, entry in data.items():
        new_path = remap_path(file_path, rules)
        if new_path != file_path:
            result.remapped += 1

        if isinstance(entry, Mapping):
            entry = dict(entry)
            embedded = entry.get("path")
            if isinstance(embedded, str):
                entry["path"] = remap_path(embedded, rules)
                if entry["path"] != embedded:
                    result.embedded += 1

        if new_path in sources:
            log.warning(
                "remap_collision", path=new_path, first=sources[new_path], second=file_path
            )
        sources[new_path] = file_path
        result.data[new_path] = entry
    return result


def _write_json(path: Path, data: dict[str, Any]) -> None:
    payload = json.dumps(data, indent=2).encode("utf-8")
    try:
        atomic_write(path, payload)
    except OSError as e:
        raise RemapError.write_failed(str(path), str(e)) from e


def canonicalize_file(path: Path, rules: Sequence[PathRemapRule]) -> RemapResult:
    """Canonicalize a JSON coverage data file in place.

    The file is only rewritten when a key or an embedded ``path`` changed. A
    missing file is reported through ``RemapResult.missing``, not raised.

    Raises:
        RemapError: If the file cannot be read, is not a JSON object, or
            cannot be written back.
    """
    if not path.exists():
        log.debug("coverage_file_missing", path=str(path))
        return RemapResult(path=path, missing=True)

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RemapError.read_failed(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise RemapError.read_failed(str(path), "expected a JSON object keyed by file path")

    result = canonicalize_entries(data, rules)
    result.path = path

    if result.changed:
        _write_json(path, result.data)
        result.written = True
        log.info(
            "paths_remapped", path=str(path), count=result.remapped, embedded=result.embedded
        )

    return result


def after_unit(files: Iterable[Path], rules: Sequence[PathRemapRule]) -> list[RemapResult]:
    """Canonicalize coverage files after a test unit completes.

    Failures are logged and the remaining files are still processed; this
    never raises, so it cannot fail the surrounding test run.
    """
    results: list[RemapResult] = []
    for path in files:
        try:
            results.append(canonicalize_file(path, rules))
        except RemapError as e:
            log.error("remap_failed", path=str(path), error=str(e))
    return results
