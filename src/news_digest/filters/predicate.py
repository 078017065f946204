"""Filter predicate evaluation.

Facets combine with AND; values selected within one facet combine with
OR. An empty facet set is inactive.
"""

from collections.abc import Iterable

from schemas.article import Article
from schemas.filter_state import FilterState


def matches(article: Article, state: FilterState) -> bool:
    """Return whether an article satisfies every active facet.

    An article with an unknown publish date is excluded whenever the date
    facet is active and included otherwise.
    """
    if state.teams and article.team not in state.teams:
        return False

    if state.authors and article.author not in state.authors:
        return False

    if state.dates:
        label = article.month_label
        if label is None or label not in state.dates:
            return False

    if state.tags and state.tags.isdisjoint(article.tags):
        return False

    if state.uplevel_only and not article.uplevel:
        return False

    return True


def apply_filters(articles: Iterable[Article], state: FilterState) -> list[Article]:
    """Return the matching articles, preserving their order."""
    return [article for article in articles if matches(article, state)]
