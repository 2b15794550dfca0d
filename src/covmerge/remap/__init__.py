"""Path canonicalization for coverage data and the nyc config."""

from covmerge.remap.canonicalize import (
    RemapResult,
    after_unit,
    canonicalize_entries,
    canonicalize_file,
)
from covmerge.remap.nyc import apply_nyc_config, load_nyc_config
from covmerge.remap.rules import PathRemapRule, remap_path, rules_from_config, validate_rules

__all__ = [
    "PathRemapRule",
    "RemapResult",
    "after_unit",
    "apply_nyc_config",
    "canonicalize_entries",
    "canonicalize_file",
    "load_nyc_config",
    "remap_path",
    "rules_from_config",
    "validate_rules",
]
