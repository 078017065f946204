"""Full-width list view."""

from lxml import html

from news_digest.content.extract import html_to_text
from schemas.article import Article
from schemas.content import PresentationMode

from .filters import truncate_words
from .renderer import ViewRenderer

DEFAULT_PREVIEW_LENGTH = 280


class ListRenderer(ViewRenderer):
    """Renders every filtered article as one row with a content preview.

    The preview is the article body from the content cache, reduced to
    text and truncated to ``preview_length`` characters.
    """

    mode = PresentationMode.LIST

    def __init__(
        self,
        container: html.HtmlElement,
        cache,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
        **kwargs,
    ):
        super().__init__(container, cache, **kwargs)
        self.preview_length = preview_length

    async def build(self, articles: list[Article]) -> list[html.HtmlElement]:
        if not articles:
            return [self.no_results()]

        contents = await self.fetch_contents(articles)

        rows = []
        for article in articles:
            content = contents[article.path]
            preview = truncate_words(html_to_text(content.full_content), self.preview_length)
            rows.append(
                self.factory.element(
                    "list_item.html.j2",
                    **self.template_context(
                        article=article,
                        preview=preview or article.description,
                        failed=content.failed,
                    ),
                )
            )
        return rows
