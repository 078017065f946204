"""Schema definitions for News Digest."""

from .article import Article, MonthBucket, parse_publish_date, parse_tags
from .content import PresentationMode, RenderedContent
from .filter_state import Facet, FilterState
from .index import LoadedIndex, Vocabulary

__all__ = [
    "Article",
    "Facet",
    "FilterState",
    "LoadedIndex",
    "MonthBucket",
    "PresentationMode",
    "RenderedContent",
    "Vocabulary",
    "parse_publish_date",
    "parse_tags",
]
