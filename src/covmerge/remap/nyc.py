"""nyc config adjustment.

nyc reads path mappings from the ``map-path`` field of its config. The
``NYC_CONFIG`` environment variable, holding the whole config as JSON, takes
precedence over the file for nyc processes started afterwards.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog

from covmerge.core.errors import RemapError
from covmerge.remap.rules import PathRemapRule

log = structlog.get_logger()

NYC_CONFIG_ENV = "NYC_CONFIG"
MAP_PATH_FIELD = "map-path"


def load_nyc_config(path: Path) -> dict[str, Any]:
    """Load an nyc JSON config. A missing file yields an empty config.

    Raises:
        RemapError: If the file cannot be read or is not a JSON object.
    """
    if not path.exists():
        log.info("nyc_config_missing", path=str(path))
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RemapError.read_failed(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise RemapError.read_failed(str(path), "expected a JSON object")
    return data


def apply_nyc_config(
    path: Path,
    rules: Sequence[PathRemapRule],
    *,
    write: bool = False,
) -> dict[str, Any]:
    """Replace the config's ``map-path`` with ``rules`` and export it.

    Args:
        path: nyc config file (``.nycrc``).
        rules: Ordered remap rules, written as ``[[from, to], ...]``.
        write: Also persist the updated config to ``path``.

    Returns:
        The updated config document.

    Raises:
        RemapError: If the config cannot be read, or written when ``write``.
    """
    config = load_nyc_config(path)
    config[MAP_PATH_FIELD] = [[rule.from_prefix, rule.to_prefix] for rule in rules]

    payload = json.dumps(config)
    os.environ[NYC_CONFIG_ENV] = payload

    if write:
        try:
            path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise RemapError.write_failed(str(path), str(e)) from e

    log.info("nyc_config_applied", path=str(path), rules=len(rules), written=write)
    return config
