"""Inclusion scope: which source paths may appear in the report."""

from __future__ import annotations

import posixpath
from collections.abc import Iterable
from dataclasses import dataclass


def _normalize(path: str) -> str:
    normalized = posixpath.normpath(path.replace("\\", "/"))
    # normpath keeps a leading "//" as-is
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


@dataclass(frozen=True, slots=True)
class InclusionScope:
    """A set of directory prefixes.

    A path is in scope when it equals one of the prefixes or lies beneath one
    on a path-segment boundary, so ``/app/src`` admits ``/app/src/a.php`` but
    not ``/app/src2/a.php``. Paths outside the scope are filtered, not errors.
    """

    prefixes: frozenset[str]

    @classmethod
    def of(cls, directories: Iterable[str]) -> InclusionScope:
        return cls(prefixes=frozenset(_normalize(str(d)) for d in directories))

    def contains(self, path: str) -> bool:
        candidate = _normalize(path)
        for prefix in self.prefixes:
            if candidate == prefix:
                return True
            base = prefix if prefix.endswith("/") else prefix + "/"
            if candidate.startswith(base):
                return True
        return False

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.contains(path)
