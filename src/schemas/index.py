"""Loaded index and facet vocabulary schemas."""

from pydantic import BaseModel

from .article import Article


class Vocabulary(BaseModel):
    """Facet values derived from the loaded collection.

    Attributes:
        teams: Distinct team names, sorted ascending
        authors: Distinct author names, sorted ascending
        tags: Distinct tag names, sorted ascending
        months: Distinct Month-Year labels, most recent first
    """

    teams: list[str] = []
    authors: list[str] = []
    tags: list[str] = []
    months: list[str] = []

    model_config = {"frozen": True}


class LoadedIndex(BaseModel):
    """Result of loading the article index.

    Attributes:
        articles: Articles in index order, unique by path
        vocabulary: Facet vocabularies for building filter controls
        error: Description of the load failure, or None on success
    """

    articles: list[Article] = []
    vocabulary: Vocabulary = Vocabulary()
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def find(self, path: str) -> Article | None:
        for article in self.articles:
            if article.path == path:
                return article
        return None
