"""Per-article content cache.

Entries are keyed by (article path, presentation mode). Each key is
fetched at most once per session: concurrent requests share one task,
and both successes and failures are memoized. Failed entries are only
dropped by an explicit ``retry_failed()``.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from lxml import etree

from news_digest.clients import ClientError, ContentClient
from schemas.content import PresentationMode, RenderedContent

from .extract import extract_content

logger = logging.getLogger(__name__)

CacheKey = tuple[str, PresentationMode]


class EntryState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass
class CacheEntry:
    """One cached body.

    Attributes:
        task: The shared fetch task every caller awaits
        state: PENDING until the task finishes, then READY or FAILED
        content: The resolved content once the task has finished
    """

    task: asyncio.Task
    state: EntryState = EntryState.PENDING
    content: RenderedContent | None = field(default=None)


class ContentCache:
    """Lazily fetches and memoizes article bodies for one news block.

    Example:
        cache = ContentCache(content_client)
        content = await cache.get("/news/launch-day", PresentationMode.NEWSLETTER)
    """

    def __init__(self, content_client: ContentClient):
        self.content_client = content_client
        self._entries: dict[CacheKey, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, path: str, mode: PresentationMode | str) -> CacheEntry | None:
        """Return the entry for a key without fetching."""
        return self._entries.get((path, PresentationMode(mode)))

    async def get(self, path: str, mode: PresentationMode | str) -> RenderedContent:
        """Return the content for a key, fetching it on first demand.

        Never raises for fetch or parse failures; those resolve to a
        failed RenderedContent carrying the fallback message.
        """
        key = (path, PresentationMode(mode))
        entry = self._entries.get(key)

        if entry is None:
            entry = CacheEntry(task=asyncio.ensure_future(self._load(key)))
            self._entries[key] = entry
        elif entry.content is not None:
            return entry.content

        # Shielded so a cancelled caller never cancels the shared fetch.
        return await asyncio.shield(entry.task)

    def retry_failed(self) -> int:
        """Drop failed entries so their next request fetches again.

        Returns:
            Number of entries dropped
        """
        failed = [key for key, entry in self._entries.items() if entry.state is EntryState.FAILED]
        for key in failed:
            del self._entries[key]
        if failed:
            logger.info(f"Cleared {len(failed)} failed content entries for retry")
        return len(failed)

    async def _load(self, key: CacheKey) -> RenderedContent:
        path, mode = key
        try:
            markup = await self.content_client.fetch(path)
            content = extract_content(markup)
        except (ClientError, etree.ParserError, ValueError) as e:
            logger.error(f"Error loading content for {path} ({mode.value}): {e}")
            content = RenderedContent.failure(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error loading content for {path} ({mode.value})")
            content = RenderedContent.failure(repr(e))

        entry = self._entries.get(key)
        if entry is not None and entry.task is asyncio.current_task():
            entry.content = content
            entry.state = EntryState.FAILED if content.failed else EntryState.READY
        logger.debug(f"Cached content for {path} ({mode.value})")
        return content
