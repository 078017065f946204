"""Base class for the news view renderers."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from lxml import html

from news_digest.content.cache import ContentCache
from schemas.article import Article
from schemas.content import PresentationMode, RenderedContent

from .filters import DEFAULT_IMAGE
from .templating import ElementFactory, replace_children

logger = logging.getLogger(__name__)


class ViewRenderer(ABC):
    """Renders a filtered article set into one view container.

    Renders of one renderer never interleave: each builds a complete new
    subtree off-document, then swaps it into the container under a lock.
    A render that has been superseded by a newer request is discarded
    before it touches the container.

    Attributes:
        mode: Presentation mode this renderer produces
        container: Element the rendered subtree is written into
        panel: Element whose visibility represents the whole view
        cache: Content cache shared with the other renderers
        render_count: Number of renders written to the container
    """

    mode: PresentationMode

    def __init__(
        self,
        container: html.HtmlElement,
        cache: ContentCache,
        panel: html.HtmlElement | None = None,
        factory: ElementFactory | None = None,
        code_base_path: str = "",
        default_image: str = DEFAULT_IMAGE,
    ):
        self.container = container
        self.panel = panel if panel is not None else container
        self.cache = cache
        self.factory = factory or ElementFactory()
        self.code_base_path = code_base_path
        self.default_image = default_image
        self.render_count = 0
        self._lock = asyncio.Lock()
        self._generation = 0

    async def render(self, articles: Iterable[Article]) -> bool:
        """Render the articles into the container.

        Returns:
            True if this render was written, False if a newer one superseded it
        """
        articles = list(articles)
        self._generation += 1
        generation = self._generation

        async with self._lock:
            if generation != self._generation:
                logger.debug(f"Skipping superseded {self.mode.value} render")
                return False

            elements = await self.build(articles)

            if generation != self._generation:
                logger.debug(f"Discarding stale {self.mode.value} render")
                return False

            replace_children(self.container, elements)
            self.after_render(articles)
            self.render_count += 1

        logger.debug(f"Rendered {len(articles)} articles in {self.mode.value} view")
        return True

    @abstractmethod
    async def build(self, articles: list[Article]) -> list[html.HtmlElement]:
        """Build the container's new children for the articles."""
        pass

    def after_render(self, articles: list[Article]) -> None:
        """Hook run once the new children are in place."""
        pass

    async def fetch_contents(self, articles: list[Article]) -> dict[str, RenderedContent]:
        """Fetch this mode's content for several articles concurrently."""
        results = await asyncio.gather(
            *(self.cache.get(article.path, self.mode) for article in articles)
        )
        return {article.path: content for article, content in zip(articles, results)}

    def no_results(self) -> html.HtmlElement:
        return self.factory.element("no_results.html.j2")

    def template_context(self, **context) -> dict:
        return {
            "code_base_path": self.code_base_path,
            "default_image": self.default_image,
            **context,
        }
