"""Filter state schema."""

from enum import Enum

from pydantic import BaseModel


class Facet(str, Enum):
    """Set-valued filter facets, named after their FilterState field."""

    TEAMS = "teams"
    AUTHORS = "authors"
    DATES = "dates"
    TAGS = "tags"


class FilterState(BaseModel):
    """An immutable snapshot of the current facet selection.

    Within a facet, selected values combine with OR; across facets, with
    AND. An empty facet set means the facet is inactive ("All").

    Attributes:
        teams: Selected team names
        authors: Selected author names
        dates: Selected Month-Year labels
        tags: Selected tag names
        uplevel_only: Restrict to uplevel articles
    """

    teams: frozenset[str] = frozenset()
    authors: frozenset[str] = frozenset()
    dates: frozenset[str] = frozenset()
    tags: frozenset[str] = frozenset()
    uplevel_only: bool = False

    model_config = {"frozen": True}

    def values(self, facet: Facet) -> frozenset[str]:
        return getattr(self, Facet(facet).value)

    @property
    def is_empty(self) -> bool:
        return self == FilterState()
