"""Newsletter digest view.

Articles are placed in a fixed sequence of sections by their declared
newsletter section. Sections without articles stay in the digest with an
explicit notice so the skeleton is always visible.
"""

from dataclasses import dataclass, field

from lxml import html

from schemas.article import Article
from schemas.content import PresentationMode

from .renderer import ViewRenderer

DEFAULT_GROUP_NAME = "Other"


@dataclass(frozen=True)
class NewsletterSection:
    """A digest section.

    Attributes:
        id: CSS identifier of the section
        title: Section heading
        value: ``newsletter-section`` value that places an article here
        group_by_team: Whether articles are sub-grouped by team
    """

    id: str
    title: str
    value: str
    group_by_team: bool = False


NEWSLETTER_SECTIONS = (
    NewsletterSection("intro", "Introduction", "introduction"),
    NewsletterSection("customer-focus", "Customer Focus", "CustomerFocus"),
    NewsletterSection("highlights", "Highlights", "highlight", group_by_team=True),
    NewsletterSection("events", "Events", "events"),
)


@dataclass
class ArticleGroup:
    name: str
    articles: list[Article] = field(default_factory=list)


@dataclass
class SectionContent:
    id: str
    title: str
    value: str
    articles: list[Article]
    groups: list[ArticleGroup]


def group_by_team(articles: list[Article]) -> list[ArticleGroup]:
    """Group articles by team in order of first appearance.

    Articles without a team fall into the "Other" group.
    """
    groups: dict[str, ArticleGroup] = {}
    for article in articles:
        name = article.team or DEFAULT_GROUP_NAME
        groups.setdefault(name, ArticleGroup(name)).articles.append(article)
    return list(groups.values())


def partition(
    articles: list[Article],
    sections: tuple[NewsletterSection, ...] = NEWSLETTER_SECTIONS,
) -> list[SectionContent]:
    """Split an already filtered article list into newsletter sections."""
    result = []
    for section in sections:
        members = [a for a in articles if a.newsletter_section == section.value]
        result.append(
            SectionContent(
                id=section.id,
                title=section.title,
                value=section.value,
                articles=members,
                groups=group_by_team(members) if section.group_by_team and members else [],
            )
        )
    return result


class NewsletterRenderer(ViewRenderer):
    """Renders the filtered articles as a sectioned newsletter digest.

    Each article shows the first paragraph of its body from the content
    cache.
    """

    mode = PresentationMode.NEWSLETTER

    def __init__(
        self,
        container: html.HtmlElement,
        cache,
        sections: tuple[NewsletterSection, ...] = NEWSLETTER_SECTIONS,
        **kwargs,
    ):
        super().__init__(container, cache, **kwargs)
        self.sections = sections

    async def build(self, articles: list[Article]) -> list[html.HtmlElement]:
        sections = partition(articles, self.sections)
        placed = [article for section in sections for article in section.articles]
        contents = await self.fetch_contents(placed) if placed else {}

        return self.factory.elements(
            "newsletter.html.j2",
            **self.template_context(
                sections=sections,
                contents=contents,
                empty=not articles,
            ),
        )
