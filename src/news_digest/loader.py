"""Article index loader.

Fetches the news query index once and derives the facet vocabularies used
to build the filter controls.
"""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from news_digest.clients import ClientError, IndexClient
from schemas.article import Article, MonthBucket
from schemas.index import LoadedIndex, Vocabulary

logger = logging.getLogger(__name__)


def build_vocabulary(articles: list[Article]) -> Vocabulary:
    """Derive sorted facet vocabularies from a collection.

    Teams, authors and tags are sorted lexically. Months are the distinct
    Month-Year buckets of every parseable publish date, most recent first;
    articles with unknown dates contribute nothing to ``months``.
    """
    teams: set[str] = set()
    authors: set[str] = set()
    tags: set[str] = set()
    months: set[MonthBucket] = set()

    for article in articles:
        if article.team:
            teams.add(article.team)
        if article.author:
            authors.add(article.author)
        tags.update(article.tags)
        bucket = article.month_bucket
        if bucket is not None:
            months.add(bucket)

    return Vocabulary(
        teams=sorted(teams),
        authors=sorted(authors),
        tags=sorted(tags),
        months=[bucket.label for bucket in sorted(months, reverse=True)],
    )


class ArticleIndexLoader:
    """Loads the article collection and its vocabularies.

    Load failures never propagate: they are logged and reported through
    ``LoadedIndex.error`` with an empty collection so the page can show a
    neutral "no articles" state.

    Example:
        async with IndexClient({"base_url": "https://example.com"}) as client:
            index = await ArticleIndexLoader(client).load()
    """

    def __init__(self, index_client: IndexClient):
        self.index_client = index_client
        self._result: LoadedIndex | None = None

    async def load(self) -> LoadedIndex:
        """Fetch and normalize the index, once per loader."""
        if self._result is not None:
            return self._result

        try:
            records = await self.index_client.fetch()
        except ClientError as e:
            logger.error(f"Failed to load news index: {e.message}")
            self._result = LoadedIndex(error=e.message)
            return self._result

        articles = self._parse_records(records)
        self._result = LoadedIndex(
            articles=articles,
            vocabulary=build_vocabulary(articles),
        )
        logger.info(f"Loaded {len(articles)} articles from news index")
        return self._result

    def _parse_records(self, records: list[dict[str, Any]]) -> list[Article]:
        articles: list[Article] = []
        seen: set[str] = set()

        for i, record in enumerate(records):
            try:
                article = Article.model_validate(record)
            except PydanticValidationError as e:
                logger.warning(
                    f"Skipping index record {record.get('path', f'index {i}')}: "
                    f"{e.error_count()} validation errors"
                )
                continue

            if article.path in seen:
                logger.warning(f"Skipping duplicate index record {article.path}")
                continue

            if article.publish_date is None and article.publish_date_raw:
                logger.debug(
                    f"Unparseable publish date for {article.path}: "
                    f"{article.publish_date_raw!r}"
                )

            seen.add(article.path)
            articles.append(article)

        return articles
