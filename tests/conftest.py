"""Pytest fixtures for News Digest tests."""

import asyncio
import json

import httpx
import pytest
from lxml import html

from news_digest.clients import ContentClient, NotFoundError
from schemas.article import Article

BASE_URL = "https://news.example.com"

SAMPLE_BODY = (
    "<h1>Launch Day</h1>"
    "<p>The platform team shipped the new build pipeline.</p>"
    "<p>Rollout continues next week.</p>"
    "<table><tr><td>Author</td><td>Ada Lovelace</td></tr></table>"
)


class FakeContentClient(ContentClient):
    """ContentClient that serves bodies from a dict and records calls."""

    def __init__(self, pages: dict | None = None, fail=(), delay: float = 0):
        super().__init__({"base_url": BASE_URL})
        self.pages = pages or {}
        self.fail = set(fail)
        self.delay = delay
        self.calls: list[str] = []

    async def fetch(self, path: str) -> str:
        self.calls.append(path)
        if self.delay:
            await asyncio.sleep(self.delay)
        if path in self.fail:
            raise NotFoundError(f"Resource not found: {path}.plain.html")
        return self.pages.get(path, SAMPLE_BODY)


class SiteStub:
    """In-memory site serving the news index and plain article bodies."""

    def __init__(self, records: list[dict], index_status: int = 200, missing=()):
        self.records = records
        self.index_status = index_status
        self.missing = set(missing)
        self.requests: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append(path)

        if path.endswith("/news/query-index.json"):
            if self.index_status != 200:
                return httpx.Response(self.index_status, text="error")
            return httpx.Response(200, text=json.dumps({"data": self.records}))

        if path.endswith(".plain.html"):
            article_path = path[: -len(".plain.html")]
            if article_path in self.missing:
                return httpx.Response(404, text="not found")
            return httpx.Response(200, text=SAMPLE_BODY)

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def count(self, path: str) -> int:
        return self.requests.count(path)


@pytest.fixture
def sample_records():
    """Index records in the shape published by the site indexer."""
    return [
        {
            "path": "/news/launch-day",
            "title": "Launch Day",
            "author": "Ada Lovelace",
            "team": "Platform",
            "tags": '["release", "ci"]',
            "publishdate": "2025-03-14",
            "uplevel": "true",
            "image": "/media/launch.png",
            "description": "The new build pipeline is live.",
            "newsletter-section": "highlight",
        },
        {
            "path": "/news/quarterly-review",
            "title": "Quarterly Review",
            "author": "Grace Hopper",
            "team": "Leadership",
            "tags": "strategy, planning",
            "publishdate": "January 20, 2025",
            "uplevel": "false",
            "image": "0",
            "description": "",
            "newsletter-section": "introduction",
        },
        {
            "path": "/news/customer-visit",
            "title": "Customer Visit",
            "author": "Ada Lovelace",
            "team": "Sales",
            "tags": "",
            "publishdate": "12/02/2024",
            "uplevel": "",
            "image": "",
            "description": "Notes from the Acme visit.",
            "newsletter-section": "CustomerFocus",
        },
        {
            "path": "/news/undated-note",
            "title": "Undated Note",
            "author": "Linus Torvalds",
            "team": "Platform",
            "tags": "ci",
            "publishdate": "sometime soon",
            "uplevel": "false",
            "image": "media/note.png",
            "description": "A note without a usable date.",
            "newsletter-section": "events",
        },
    ]


@pytest.fixture
def sample_articles(sample_records):
    return [Article.model_validate(record) for record in sample_records]


@pytest.fixture
def site(sample_records):
    return SiteStub(sample_records)


@pytest.fixture
def content_client():
    return FakeContentClient()


@pytest.fixture
def container():
    """A detached view container element."""
    return html.fragment_fromstring("<div></div>")


def make_articles(count: int, **overrides) -> list[Article]:
    """Build ``count`` distinct articles sharing the given field values."""
    articles = []
    for i in range(count):
        data = {
            "path": f"/news/article-{i:02d}",
            "title": f"Article {i}",
            "author": "Ada Lovelace",
            "team": "Platform",
            "publishdate": "2025-03-01",
            "description": f"Summary {i}",
        }
        data.update(overrides)
        articles.append(Article.model_validate(data))
    return articles
