"""Unified line-coverage data model.

File-centric model: every fragment, whatever process produced it, converts to
a mapping of path -> line -> LineStatus. The integer values of LineStatus are
the raw fragment encoding, and their ordering is the merge order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class CoverageParseError(Exception):
    """Error parsing coverage data."""

    pass


class LineStatus(IntEnum):
    """Tri-state line status, ordered DEAD < NOT_HIT < HIT."""

    DEAD = -2  # not executable
    NOT_HIT = -1  # executable, never executed
    HIT = 1

    @classmethod
    def from_raw(cls, value: object) -> LineStatus:
        """Decode a raw fragment value. Any positive execution count is a hit."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise CoverageParseError(f"Line status must be an integer, got {value!r}")
        if value > 0:
            return cls.HIT
        if value == cls.NOT_HIT:
            return cls.NOT_HIT
        if value == cls.DEAD:
            return cls.DEAD
        raise CoverageParseError(f"Unknown line status: {value}")

    @property
    def executable(self) -> bool:
        return self is not LineStatus.DEAD


@dataclass(slots=True)
class FileCoverage:
    """Coverage data for a single file.

    Line numbers are 1-based to match source file conventions.
    """

    path: str
    lines: dict[int, LineStatus] = field(default_factory=dict)

    @property
    def executable_lines(self) -> dict[int, LineStatus]:
        """Executable lines in line order."""
        return {num: self.lines[num] for num in sorted(self.lines) if self.lines[num].executable}

    @property
    def lines_found(self) -> int:
        """Total number of executable lines."""
        return sum(1 for status in self.lines.values() if status.executable)

    @property
    def lines_hit(self) -> int:
        return sum(1 for status in self.lines.values() if status is LineStatus.HIT)

    @property
    def line_rate(self) -> float:
        """Fraction of executable lines covered (0.0 to 1.0)."""
        found = self.lines_found
        if not found:
            return 0.0
        return self.lines_hit / found

    @property
    def uncovered_lines(self) -> list[int]:
        """Sorted executable line numbers that were never hit."""
        return sorted(num for num, status in self.lines.items() if status is LineStatus.NOT_HIT)


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Aggregate line statistics for a CoverageModel."""

    files: int
    lines_found: int
    lines_hit: int
    line_rate: float


@dataclass(slots=True)
class CoverageModel:
    """Unified coverage keyed by canonical source path."""

    files: dict[str, FileCoverage] = field(default_factory=dict)

    @property
    def summary(self) -> CoverageSummary:
        lines_found = sum(f.lines_found for f in self.files.values())
        lines_hit = sum(f.lines_hit for f in self.files.values())
        return CoverageSummary(
            files=len(self.files),
            lines_found=lines_found,
            lines_hit=lines_hit,
            line_rate=lines_hit / lines_found if lines_found > 0 else 0.0,
        )


@dataclass(frozen=True, slots=True)
class CoverageFragment:
    """One process's capture, as loaded from the fragment store.

    ``id`` is the fragment file stem (``coverage-<time_ns>-<pid>``) and
    ``files`` holds the paths exactly as the capturing process saw them.
    """

    id: str
    path: str
    files: dict[str, dict[int, LineStatus]]
