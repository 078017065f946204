"""News Digest: a filterable news list with grid, list and newsletter views."""

from .block import NewsListBlock

__all__ = ["NewsListBlock"]
