"""Fold fragment files into one CoverageModel.

Each fragment is loaded, its paths canonicalized with the remap rules,
filtered against the inclusion scope, and OR-merged into the running model.
A fragment that cannot be parsed is skipped with a warning; it never aborts
the run or leaves a partial contribution in the model.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from covmerge.coverage.merge import merge_lines
from covmerge.coverage.models import (
    CoverageFragment,
    CoverageModel,
    CoverageParseError,
    FileCoverage,
)
from covmerge.coverage.scope import InclusionScope
from covmerge.fragments.store import load_fragment
from covmerge.remap.rules import PathRemapRule, remap_path

log = structlog.get_logger()


@dataclass(slots=True)
class AggregateResult:
    """Merged model plus bookkeeping about the fragments seen."""

    model: CoverageModel = field(default_factory=CoverageModel)
    processed: list[Path] = field(default_factory=list)
    empty: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


def fold_fragment(
    model: CoverageModel,
    fragment: CoverageFragment,
    scope: InclusionScope,
    rules: Sequence[PathRemapRule] = (),
) -> int:
    """OR-merge one fragment into ``model`` in place.

    Returns:
        Number of files from the fragment that fell inside the scope.
    """
    included = 0
    for raw_path, lines in fragment.files.items():
        path = remap_path(raw_path, rules)
        if not scope.contains(path):
            continue
        included += 1
        fc = model.files.get(path)
        if fc is None:
            fc = model.files[path] = FileCoverage(path=path)
        merge_lines(fc.lines, lines)
    return included


def aggregate(
    fragments: Iterable[Path],
    scope: InclusionScope,
    rules: Sequence[PathRemapRule] = (),
) -> AggregateResult:
    """Merge every fragment file into a fresh CoverageModel.

    Args:
        fragments: Fragment files, in any order.
        scope: Directories eligible for the report.
        rules: Remap rules applied to fragment paths before scope filtering.

    Returns:
        AggregateResult; an empty input yields an empty model.
    """
    result = AggregateResult()
    for path in fragments:
        try:
            fragment = load_fragment(path)
        except CoverageParseError as e:
            log.warning("fragment_skipped", path=str(path), error=str(e))
            result.skipped.append(path)
            continue

        if fragment is None:
            log.info("fragment_empty", path=str(path))
            result.empty.append(path)
            continue

        included = fold_fragment(result.model, fragment, scope, rules)
        result.processed.append(path)
        log.info(
            "fragment_processed",
            path=str(path),
            files=len(fragment.files),
            included=included,
        )

    return result
