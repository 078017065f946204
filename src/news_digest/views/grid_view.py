"""Paginated card grid view."""

import logging

from lxml import html

from news_digest.content.extract import html_to_text
from schemas.article import Article
from schemas.content import PresentationMode

from .renderer import ViewRenderer
from .templating import is_hidden, set_hidden

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 6
NO_DESCRIPTION = "No description available"


class GridRenderer(ViewRenderer):
    """Renders articles as cards, one page visible at a time.

    Every render shows the first ``page_size`` cards and hides the rest.
    The renderer owns its "Load More" button; ``load_more`` reveals the
    next batch of already built cards without rebuilding them.

    The card preview is the index description. Articles without one show
    the text of their first body paragraph from the content cache, or the
    unavailable-content message when the body could not be loaded.
    """

    mode = PresentationMode.GRID

    def __init__(self, container: html.HtmlElement, cache, page_size: int = DEFAULT_PAGE_SIZE, **kwargs):
        super().__init__(container, cache, **kwargs)
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.load_more_button = html.fragment_fromstring(
            '<button class="load-more-btn hidden" type="button">Load More</button>'
        )

    async def build(self, articles: list[Article]) -> list[html.HtmlElement]:
        if not articles:
            return [self.no_results()]

        undescribed = [article for article in articles if not article.description]
        contents = await self.fetch_contents(undescribed) if undescribed else {}

        cards = []
        for index, article in enumerate(articles):
            preview = article.description
            if not preview:
                content = contents[article.path]
                preview = html_to_text(content.first_paragraph)
            cards.append(
                self.factory.element(
                    "grid_card.html.j2",
                    **self.template_context(
                        article=article,
                        preview=preview or NO_DESCRIPTION,
                        visible=index < self.page_size,
                    ),
                )
            )
        return cards

    def after_render(self, articles: list[Article]) -> None:
        self._update_load_more(self.hidden_count)

    @property
    def cards(self) -> list[html.HtmlElement]:
        return [child for child in self.container if "article-card" in child.classes]

    @property
    def visible_count(self) -> int:
        return sum(1 for card in self.cards if card.get("data-visible") == "true")

    @property
    def hidden_count(self) -> int:
        return sum(1 for card in self.cards if card.get("data-visible") == "false")

    @property
    def can_load_more(self) -> bool:
        return not is_hidden(self.load_more_button)

    def load_more(self) -> int:
        """Reveal the next page of hidden cards.

        Returns:
            Number of cards revealed
        """
        hidden = [card for card in self.cards if card.get("data-visible") == "false"]
        batch = hidden[: self.page_size]
        for card in batch:
            card.set("data-visible", "true")

        self._update_load_more(len(hidden) - len(batch))
        logger.debug(f"Revealed {len(batch)} cards, {len(hidden) - len(batch)} remaining")
        return len(batch)

    def _update_load_more(self, remaining: int) -> None:
        button = self.load_more_button
        button.set("data-remaining", str(remaining))
        if remaining > 0:
            button.text = f"Load More ({remaining} remaining)"
            set_hidden(button, False)
        else:
            button.text = "Load More"
            set_hidden(button, True)
