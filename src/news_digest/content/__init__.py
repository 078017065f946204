"""Article body fetching, extraction and caching."""

from .cache import CacheEntry, ContentCache, EntryState
from .extract import extract_content, html_to_text

__all__ = [
    "CacheEntry",
    "ContentCache",
    "EntryState",
    "extract_content",
    "html_to_text",
]
