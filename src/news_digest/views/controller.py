"""View-mode controller.

Keeps exactly one of the Grid, List and Newsletter views visible and
renders views lazily: a view is rendered when it is selected for the
first time or when the filters changed since its last render. Hidden
views keep their last rendered elements.
"""

import asyncio
import logging

from lxml import html

from news_digest.filters import FilterStore, apply_filters
from schemas.article import Article
from schemas.content import PresentationMode
from schemas.filter_state import Facet, FilterState

from .renderer import ViewRenderer
from .templating import is_hidden, set_active, set_hidden

logger = logging.getLogger(__name__)


class ViewModeController:
    """Single-selection state machine over the three views.

    Filter changes re-render the active view immediately and mark the
    other views stale. ``settle()`` waits for renders triggered by filter
    notifications.

    Attributes:
        mode: The currently selected view mode
        renderers: Renderer for each mode
        buttons: Toggle button element for each mode
    """

    def __init__(
        self,
        renderers: dict[PresentationMode, ViewRenderer],
        store: FilterStore,
        articles: list[Article],
        buttons: dict[PresentationMode, html.HtmlElement] | None = None,
        initial: PresentationMode = PresentationMode.GRID,
        newsletter_latest_month: bool = False,
    ):
        missing = set(PresentationMode) - set(renderers)
        if missing:
            raise ValueError(f"Missing renderers for: {sorted(m.value for m in missing)}")

        self.renderers = renderers
        self.store = store
        self.articles = list(articles)
        self.buttons = buttons or {}
        self.mode = PresentationMode(initial)
        self.newsletter_latest_month = newsletter_latest_month
        self._stale = {mode: True for mode in PresentationMode}
        self._pending: set[asyncio.Future] = set()
        self._unsubscribe = store.on_change(self._on_filter_change)

    def filtered(self) -> list[Article]:
        return apply_filters(self.articles, self.store.state)

    def is_stale(self, mode: PresentationMode | str) -> bool:
        return self._stale[PresentationMode(mode)]

    def is_visible(self, mode: PresentationMode | str) -> bool:
        return not is_hidden(self.renderers[PresentationMode(mode)].panel)

    async def start(self) -> None:
        """Show the initial view and render it."""
        self._sync_visibility()
        await self._render(self.mode)

    async def select(self, mode: PresentationMode | str) -> None:
        """Switch to a view, rendering it if it has no current render."""
        mode = PresentationMode(mode)
        if mode is not self.mode:
            logger.debug(f"Switching view from {self.mode.value} to {mode.value}")
        self.mode = mode
        self._sync_visibility()

        if mode is PresentationMode.NEWSLETTER and self._select_latest_month():
            await self.settle()
            return

        if self._stale[mode]:
            await self._render(mode)

    async def settle(self) -> None:
        """Wait until renders triggered by filter changes have finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def close(self) -> None:
        self._unsubscribe()

    def _select_latest_month(self) -> bool:
        if not self.newsletter_latest_month or not self.store.is_showing_all(Facet.DATES):
            return False
        months = self.store.options(Facet.DATES)
        if not months:
            return False
        self.store.toggle_value(Facet.DATES, months[0])
        return True

    def invalidate(self) -> None:
        """Mark every view as needing a render on its next selection."""
        for mode in self._stale:
            self._stale[mode] = True

    def _on_filter_change(self, state: FilterState) -> None:
        self.invalidate()

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the active view renders on the next select().
            return

        task = asyncio.ensure_future(self._render(self.mode))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _render(self, mode: PresentationMode) -> None:
        self._stale[mode] = False
        await self.renderers[mode].render(self.filtered())

    def _sync_visibility(self) -> None:
        for mode, renderer in self.renderers.items():
            set_hidden(renderer.panel, mode is not self.mode)
        for mode, button in self.buttons.items():
            set_active(button, mode is self.mode)
