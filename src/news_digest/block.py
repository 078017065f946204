"""News list block.

Composes the index loader, content cache, filter store, view renderers
and view-mode controller for one mount point. Each block owns its own
cache and clients, so several blocks on one page never share state.
"""

import logging
from collections.abc import Callable

import httpx
from lxml import html

from news_digest.clients import ContentClient, IndexClient
from news_digest.content.cache import ContentCache
from news_digest.filters import FilterStore
from news_digest.loader import ArticleIndexLoader
from news_digest.views import (
    ElementFactory,
    GridRenderer,
    ListRenderer,
    NewsletterRenderer,
    ViewModeController,
)
from news_digest.views.filters import DEFAULT_IMAGE
from news_digest.views.grid_view import DEFAULT_PAGE_SIZE
from news_digest.views.list_view import DEFAULT_PREVIEW_LENGTH
from news_digest.views.templating import replace_children
from schemas.content import PresentationMode
from schemas.filter_state import Facet, FilterState
from schemas.index import LoadedIndex

logger = logging.getLogger(__name__)

VIEW_LABELS = (
    (PresentationMode.GRID, "Cards"),
    (PresentationMode.LIST, "List"),
    (PresentationMode.NEWSLETTER, "Newsletter"),
)


class UnknownArticleError(ValueError):
    """Raised when activating a path that is not in the loaded index."""


class BlockNotDecoratedError(RuntimeError):
    """Raised when an interaction happens before ``decorate``."""


class NewsListBlock:
    """A filterable news list mounted into a host-provided element.

    Config keys (in addition to the client keys, see ``Client``):
        code_base_path: Site prefix for the index and images (default: "")
        page_size: Cards per grid page (default: 6)
        preview_length: List preview length in characters (default: 280)
        default_image: Image used for articles without one
        newsletter_latest_month: Select the most recent month when the
            newsletter is opened with no date filter (default: False)
        multi_select: Allow several values per facet (default: True)

    Example:
        root = html.fragment_fromstring("<div class='news-list'></div>")
        async with NewsListBlock({"base_url": "https://example.com"}) as block:
            await block.decorate(root)
            await block.toggle_filter("teams", "Platform")
            await block.select_view("newsletter")
    """

    def __init__(
        self,
        config: dict,
        index_client: IndexClient | None = None,
        content_client: ContentClient | None = None,
        navigate: Callable[[str], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        factory: ElementFactory | None = None,
    ):
        self._config = config
        self._owns_clients = index_client is None and content_client is None
        self.index_client = index_client or IndexClient(config, transport=transport)
        self.content_client = content_client or ContentClient(config, transport=transport)
        self.navigate = navigate or self._log_navigation
        self.factory = factory or ElementFactory()

        self.loader = ArticleIndexLoader(self.index_client)
        self.cache = ContentCache(self.content_client)
        self.index: LoadedIndex | None = None
        self.store: FilterStore | None = None
        self.controller: ViewModeController | None = None
        self.root: html.HtmlElement | None = None
        self.grid: GridRenderer | None = None
        self._filter_section: html.HtmlElement | None = None
        self._unsubscribe_filters: Callable[[], None] | None = None

    @property
    def code_base_path(self) -> str:
        return str(self._config.get("code_base_path", "")).rstrip("/")

    @property
    def page_size(self) -> int:
        return int(self._config.get("page_size", DEFAULT_PAGE_SIZE))

    @property
    def preview_length(self) -> int:
        return int(self._config.get("preview_length", DEFAULT_PREVIEW_LENGTH))

    @property
    def default_image(self) -> str:
        return str(self._config.get("default_image", DEFAULT_IMAGE))

    @property
    def newsletter_latest_month(self) -> bool:
        return bool(self._config.get("newsletter_latest_month", False))

    @property
    def multi_select(self) -> bool:
        return bool(self._config.get("multi_select", True))

    @property
    def mode(self) -> PresentationMode:
        return self._require_controller().mode

    @property
    def state(self) -> FilterState:
        return self._require_store().state

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    async def close(self) -> None:
        """Detach from the store and close the clients this block created."""
        if self.controller is not None:
            self.controller.close()
        if self._unsubscribe_filters is not None:
            self._unsubscribe_filters()
            self._unsubscribe_filters = None
        if self._owns_clients:
            await self.index_client.close()
            await self.content_client.close()

    async def decorate(self, block: html.HtmlElement) -> LoadedIndex:
        """Load the index and build the news list inside ``block``.

        Load failures leave a working, empty news list with a notice.
        """
        self.index = await self.loader.load()
        self.root = block
        self.store = FilterStore(self.index.vocabulary, multi_select=self.multi_select)

        self._filter_section = self._render_filters()
        toggle = self.factory.element(
            "layout_toggle.html.j2",
            modes=VIEW_LABELS,
            active=PresentationMode.GRID,
        )
        buttons = {
            PresentationMode(button.get("data-view")): button
            for button in toggle.iter("button")
        }

        grid_panel = html.fragment_fromstring('<div class="grid-panel"></div>')
        grid_container = html.fragment_fromstring('<div class="grid-view"></div>')
        list_container = html.fragment_fromstring('<div class="list-view hidden"></div>')
        newsletter_container = html.fragment_fromstring(
            '<div class="newsletter-view hidden"></div>'
        )

        renderer_options = {
            "factory": self.factory,
            "code_base_path": self.code_base_path,
            "default_image": self.default_image,
        }
        self.grid = GridRenderer(
            grid_container,
            self.cache,
            page_size=self.page_size,
            panel=grid_panel,
            **renderer_options,
        )
        grid_panel.append(grid_container)
        grid_panel.append(self.grid.load_more_button)

        renderers = {
            PresentationMode.GRID: self.grid,
            PresentationMode.LIST: ListRenderer(
                list_container,
                self.cache,
                preview_length=self.preview_length,
                **renderer_options,
            ),
            PresentationMode.NEWSLETTER: NewsletterRenderer(
                newsletter_container, self.cache, **renderer_options
            ),
        }

        children = [self._filter_section, toggle]
        if not self.index.articles:
            children.append(self._status_message())
        children.extend([grid_panel, list_container, newsletter_container])
        replace_children(block, children)
        block.classes.add("news-list")

        self._unsubscribe_filters = self.store.on_change(self._refresh_filters)
        self.controller = ViewModeController(
            renderers,
            self.store,
            self.index.articles,
            buttons=buttons,
            newsletter_latest_month=self.newsletter_latest_month,
        )
        await self.controller.start()
        return self.index

    async def toggle_filter(self, facet: Facet | str, value: str) -> FilterState:
        state = self._require_store().toggle_value(facet, value)
        await self._require_controller().settle()
        return state

    async def select_all(self, facet: Facet | str) -> FilterState:
        state = self._require_store().select_all(facet)
        await self._require_controller().settle()
        return state

    async def set_uplevel_only(self, enabled: bool) -> FilterState:
        state = self._require_store().set_uplevel_only(enabled)
        await self._require_controller().settle()
        return state

    async def clear_filters(self) -> FilterState:
        state = self._require_store().clear_all()
        await self._require_controller().settle()
        return state

    async def select_view(self, mode: PresentationMode | str) -> None:
        controller = self._require_controller()
        await controller.select(mode)
        await controller.settle()

    def load_more(self) -> int:
        """Reveal the next page of grid cards."""
        if self.grid is None:
            raise BlockNotDecoratedError("decorate() must be awaited first")
        return self.grid.load_more()

    def activate(self, path: str) -> None:
        """Navigate to an article, as a click on its card or row does."""
        index = self.index
        if index is None:
            raise BlockNotDecoratedError("decorate() must be awaited first")
        if index.find(path) is None:
            raise UnknownArticleError(f"No article with path {path!r}")
        self.navigate(path)

    async def refresh(self) -> None:
        """Retry failed article bodies and re-render the active view."""
        controller = self._require_controller()
        self.cache.retry_failed()
        controller.invalidate()
        await controller.select(controller.mode)

    def _render_filters(self) -> html.HtmlElement:
        store = self._require_store()
        return self.factory.element(
            "filters.html.j2",
            vocabulary=store.vocabulary,
            state=store.state,
        )

    def _refresh_filters(self, state: FilterState) -> None:
        section = self._render_filters()
        if self._filter_section is not None and self._filter_section.getparent() is not None:
            self._filter_section.getparent().replace(self._filter_section, section)
        self._filter_section = section

    def _status_message(self) -> html.HtmlElement:
        message = "Unable to load news articles." if self.index and self.index.failed else ""
        status = self.factory.element(
            "no_results.html.j2",
            title="No news articles found.",
            message=message or "Check back later for updates.",
        )
        status.set("class", "news-status")
        return status

    def _require_store(self) -> FilterStore:
        if self.store is None:
            raise BlockNotDecoratedError("decorate() must be awaited first")
        return self.store

    def _require_controller(self) -> ViewModeController:
        if self.controller is None:
            raise BlockNotDecoratedError("decorate() must be awaited first")
        return self.controller

    @staticmethod
    def _log_navigation(path: str) -> None:
        logger.info(f"Navigating to {path}")
