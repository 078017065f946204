"""Filter state and predicate evaluation."""

from .predicate import apply_filters, matches
from .store import FilterStore, UnknownFacetValueError

__all__ = [
    "FilterStore",
    "UnknownFacetValueError",
    "apply_filters",
    "matches",
]
