"""Fragment store and aggregation."""

from covmerge.fragments.aggregate import AggregateResult, aggregate, fold_fragment
from covmerge.fragments.store import (
    discover_fragments,
    fragment_name,
    load_fragment,
    write_fragment,
)

__all__ = [
    "AggregateResult",
    "aggregate",
    "discover_fragments",
    "fold_fragment",
    "fragment_name",
    "load_fragment",
    "write_fragment",
]
