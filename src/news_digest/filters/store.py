"""Filter state store.

Holds the visitor's current facet selection for one news block and
notifies subscribers whenever it changes.
"""

import logging
from collections.abc import Callable, Iterable

from schemas.filter_state import Facet, FilterState
from schemas.index import Vocabulary

logger = logging.getLogger(__name__)

Listener = Callable[[FilterState], None]

VOCABULARY_FIELDS = {
    Facet.TEAMS: "teams",
    Facet.AUTHORS: "authors",
    Facet.DATES: "months",
    Facet.TAGS: "tags",
}


class UnknownFacetValueError(ValueError):
    """Raised when a value is not part of the facet's vocabulary."""

    def __init__(self, facet: Facet, value: str):
        self.facet = facet
        self.value = value
        super().__init__(f"Unknown {facet.value} value: {value!r}")


class FilterStore:
    """Mutable holder of the current FilterState.

    Every mutating call replaces the immutable state and fires exactly one
    change notification, including ``clear_all``. Values are validated
    against the vocabulary derived at load time.

    With ``multi_select=False`` each facet holds at most one value:
    toggling a new value replaces the selection.

    Attributes:
        vocabulary: Facet values the store accepts
        multi_select: Whether a facet may hold several values
    """

    def __init__(self, vocabulary: Vocabulary, multi_select: bool = True):
        self.vocabulary = vocabulary
        self.multi_select = multi_select
        self._state = FilterState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> FilterState:
        return self._state

    def on_change(self, callback: Listener) -> Callable[[], None]:
        """Subscribe to state changes.

        Returns:
            A callable that removes the subscription
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def options(self, facet: Facet | str) -> list[str]:
        """Return the values offered for a facet, in display order."""
        return list(getattr(self.vocabulary, VOCABULARY_FIELDS[Facet(facet)]))

    def is_showing_all(self, facet: Facet | str) -> bool:
        """Whether the facet's "All" shortcut is active."""
        return not self._state.values(Facet(facet))

    def toggle_value(self, facet: Facet | str, value: str) -> FilterState:
        """Select a value if absent, deselect it if present."""
        facet = Facet(facet)
        self._validate(facet, value)
        current = self._state.values(facet)

        if value in current:
            selected = current - {value}
        elif self.multi_select:
            selected = current | {value}
        else:
            selected = frozenset({value})

        return self._update(**{facet.value: selected})

    def select_all(self, facet: Facet | str) -> FilterState:
        """Clear one facet, re-activating its "All" shortcut."""
        return self._update(**{Facet(facet).value: frozenset()})

    def set_uplevel_only(self, enabled: bool) -> FilterState:
        return self._update(uplevel_only=bool(enabled))

    def set_values(
        self,
        teams: Iterable[str] | None = None,
        authors: Iterable[str] | None = None,
        dates: Iterable[str] | None = None,
        tags: Iterable[str] | None = None,
        uplevel_only: bool | None = None,
    ) -> FilterState:
        """Replace several facets at once with a single notification.

        Facets passed as None are left unchanged.
        """
        changes: dict = {}
        for facet, values in (
            (Facet.TEAMS, teams),
            (Facet.AUTHORS, authors),
            (Facet.DATES, dates),
            (Facet.TAGS, tags),
        ):
            if values is None:
                continue
            selected = frozenset(values)
            for value in selected:
                self._validate(facet, value)
            if not self.multi_select and len(selected) > 1:
                raise ValueError(f"{facet.value} accepts a single value")
            changes[facet.value] = selected
        if uplevel_only is not None:
            changes["uplevel_only"] = bool(uplevel_only)
        return self._update(**changes)

    def clear_all(self) -> FilterState:
        """Reset every facet and the uplevel flag."""
        self._state = FilterState()
        self._notify()
        return self._state

    def _validate(self, facet: Facet, value: str) -> None:
        if value not in self.options(facet):
            raise UnknownFacetValueError(facet, value)

    def _update(self, **changes) -> FilterState:
        self._state = self._state.model_copy(update=changes)
        self._notify()
        return self._state

    def _notify(self) -> None:
        logger.debug(f"Filter state changed: {self._state!r}")
        for listener in list(self._listeners):
            listener(self._state)
