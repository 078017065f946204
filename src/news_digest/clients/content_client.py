"""Client for per-article body content."""

from .client import Client

CONTENT_SUFFIX = ".plain.html"


class ContentClient(Client):
    """Fetches the plain-HTML rendition of an article.

    Example:
        async with ContentClient({"base_url": "https://example.com"}) as client:
            html = await client.fetch("/news/launch-day")
    """

    async def fetch(self, path: str) -> str:
        """Fetch the body HTML served at ``<path>.plain.html``.

        Raises:
            NotFoundError: If the article has no plain rendition
            APIError: If the site returns another non-2xx response
            ConnectionError: If the network connection fails
        """
        response = await self.get(f"{path}{CONTENT_SUFFIX}")
        return response.text
