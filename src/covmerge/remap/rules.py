"""Prefix rules that rewrite execution-environment paths to workspace paths."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from covmerge.core.errors import RemapError

if TYPE_CHECKING:
    from covmerge.config.models import RemapRuleConfig


@dataclass(frozen=True, slots=True)
class PathRemapRule:
    """Replace ``from_prefix`` with ``to_prefix`` on matching paths."""

    from_prefix: str
    to_prefix: str

    @property
    def is_identity(self) -> bool:
        return self.from_prefix == self.to_prefix

    def matches(self, path: str) -> bool:
        return path.startswith(self.from_prefix)

    def apply(self, path: str) -> str:
        """Rewrite a matching path; any other path passes through unchanged."""
        if not self.matches(path):
            return path
        return self.to_prefix + path[len(self.from_prefix) :]


def remap_path(path: str, rules: Sequence[PathRemapRule]) -> str:
    """Apply the first matching rule, or return ``path`` unchanged."""
    for rule in rules:
        if rule.matches(path):
            return rule.apply(path)
    return path


def validate_rules(rules: Sequence[PathRemapRule]) -> tuple[PathRemapRule, ...]:
    """Check that re-applying the rules to their own output is a no-op.

    A rule set is rejected when some rule's ``to_prefix`` and some rule's
    ``from_prefix`` overlap (either is a prefix of the other), since remapped
    paths could then be rewritten again on the next pass. Identity rules
    (``from_prefix == to_prefix``) never change a path and are exempt.

    Raises:
        RemapError: If a prefix is empty or the rule set is not idempotent.
    """
    for rule in rules:
        if not rule.from_prefix:
            raise RemapError.invalid_rules("from_prefix must not be empty")

    changing = [rule for rule in rules if not rule.is_identity]
    for rule in changing:
        for other in changing:
            overlaps = rule.to_prefix and other.from_prefix.startswith(rule.to_prefix)
            if other.matches(rule.to_prefix) or overlaps:
                raise RemapError.invalid_rules(
                    f"target {rule.to_prefix!r} is matched by source {other.from_prefix!r}"
                )
    return tuple(rules)


def rules_from_config(configs: Iterable[RemapRuleConfig]) -> tuple[PathRemapRule, ...]:
    """Build a validated rule tuple from configuration entries."""
    return validate_rules([PathRemapRule(c.from_prefix, c.to_prefix) for c in configs])
