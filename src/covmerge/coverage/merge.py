"""Coverage merging with OR semantics.

When merging coverage captured by many processes, each line takes the
highest status any input reported for it:

- line[i] = max(line[i] across all inputs), ordered DEAD < NOT_HIT < HIT

A single execution anywhere proves the line covered, so HIT is sticky and
never downgraded. max() over a total order is commutative, associative and
idempotent, which makes fragment order and duplicate fragments irrelevant.
"""

from collections.abc import Iterable, Mapping

from covmerge.coverage.models import CoverageModel, FileCoverage, LineStatus


def merge_lines(
    into: dict[int, LineStatus],
    lines: Mapping[int, LineStatus],
) -> dict[int, LineStatus]:
    """Fold ``lines`` into ``into`` in place and return it."""
    for line_num, status in lines.items():
        current = into.get(line_num)
        if current is None or status > current:
            into[line_num] = status
    return into


def merge_file_coverage(files: Iterable[FileCoverage]) -> FileCoverage:
    """Merge multiple FileCoverage objects for the same file.

    Args:
        files: FileCoverage objects to merge (must have same path).

    Returns:
        New FileCoverage holding the highest status per line.
    """
    files_list = list(files)
    if not files_list:
        raise ValueError("Cannot merge empty file coverage list")

    path = files_list[0].path
    merged: dict[int, LineStatus] = {}
    for fc in files_list:
        if fc.path != path:
            raise ValueError(f"Cannot merge coverage for different files: {path!r}, {fc.path!r}")
        merge_lines(merged, fc.lines)

    return FileCoverage(path=path, lines=merged)


def merge_models(models: Iterable[CoverageModel]) -> CoverageModel:
    """Merge multiple CoverageModel objects.

    Files present in several models are merged line by line; files present in
    only one are copied. Inputs are never mutated.
    """
    files_by_path: dict[str, list[FileCoverage]] = {}
    for model in models:
        for path, fc in model.files.items():
            files_by_path.setdefault(path, []).append(fc)

    return CoverageModel(
        files={path: merge_file_coverage(group) for path, group in files_by_path.items()}
    )


def merge(*models: CoverageModel) -> CoverageModel:
    """Convenience function to merge models as varargs."""
    return merge_models(models)
