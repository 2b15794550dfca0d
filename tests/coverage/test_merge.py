"""Tests for coverage merging.

The merge is a max over DEAD < NOT_HIT < HIT, so it must be commutative,
associative and idempotent, and a hit is never lost.
"""

import itertools

import pytest

from covmerge.coverage.merge import merge, merge_file_coverage, merge_lines, merge_models
from covmerge.coverage.models import CoverageModel, FileCoverage, LineStatus

HIT, NOT_HIT, DEAD = LineStatus.HIT, LineStatus.NOT_HIT, LineStatus.DEAD


def _model(path: str, lines: dict[int, LineStatus]) -> CoverageModel:
    return CoverageModel(files={path: FileCoverage(path=path, lines=dict(lines))})


def _as_dict(model: CoverageModel) -> dict[str, dict[int, LineStatus]]:
    return {path: dict(fc.lines) for path, fc in model.files.items()}


class TestMergeLines:
    """Line-level fold."""

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            (HIT, NOT_HIT, HIT),
            (NOT_HIT, HIT, HIT),
            (DEAD, NOT_HIT, NOT_HIT),
            (HIT, DEAD, HIT),
            (DEAD, DEAD, DEAD),
        ],
    )
    def test_takes_highest(self, a: LineStatus, b: LineStatus, expected: LineStatus) -> None:
        assert merge_lines({1: a}, {1: b}) == {1: expected}

    def test_mutates_and_returns_target(self) -> None:
        into = {1: NOT_HIT}

        result = merge_lines(into, {1: HIT, 2: DEAD})

        assert result is into
        assert into == {1: HIT, 2: DEAD}


class TestMergeFileCoverage:
    """Merging per-file coverage."""

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            merge_file_coverage([])

    def test_rejects_mixed_paths(self) -> None:
        with pytest.raises(ValueError, match="different files"):
            merge_file_coverage([FileCoverage("/a.php"), FileCoverage("/b.php")])

    def test_does_not_mutate_inputs(self) -> None:
        first = FileCoverage("/a.php", {1: NOT_HIT})
        second = FileCoverage("/a.php", {1: HIT})

        merged = merge_file_coverage([first, second])

        assert merged.lines == {1: HIT}
        assert first.lines == {1: NOT_HIT}


class TestMergeModels:
    """Model-level algebra."""

    def test_two_processes_same_file(self) -> None:
        """Two fragments for a.php combine line by line."""
        a = _model("/src/a.php", {10: HIT, 11: NOT_HIT, 12: DEAD})
        b = _model("/src/a.php", {10: NOT_HIT, 11: HIT, 13: NOT_HIT})

        merged = merge(a, b)

        assert _as_dict(merged) == {"/src/a.php": {10: HIT, 11: HIT, 12: DEAD, 13: NOT_HIT}}

    def test_disjoint_files_are_unioned(self) -> None:
        merged = merge(_model("/src/a.php", {1: HIT}), _model("/src/b.php", {1: NOT_HIT}))

        assert set(merged.files) == {"/src/a.php", "/src/b.php"}

    def test_commutative(self) -> None:
        models = [
            _model("/src/a.php", {1: HIT, 2: NOT_HIT}),
            _model("/src/a.php", {1: NOT_HIT, 2: DEAD, 3: HIT}),
            _model("/src/b.php", {5: NOT_HIT}),
        ]
        expected = _as_dict(merge_models(models))

        for perm in itertools.permutations(models):
            assert _as_dict(merge_models(perm)) == expected

    def test_associative(self) -> None:
        a = _model("/src/a.php", {1: HIT, 2: DEAD})
        b = _model("/src/a.php", {2: NOT_HIT, 3: NOT_HIT})
        c = _model("/src/a.php", {3: HIT})

        assert _as_dict(merge(merge(a, b), c)) == _as_dict(merge(a, merge(b, c)))

    def test_idempotent(self) -> None:
        a = _model("/src/a.php", {1: HIT, 2: NOT_HIT, 3: DEAD})

        assert _as_dict(merge(a, a)) == _as_dict(a)

    def test_empty(self) -> None:
        assert merge().files == {}
