"""Client for the site's news query index."""

from typing import Any

from .client import Client
from .exceptions import ValidationError

INDEX_SUFFIX = "/news/query-index.json"


class IndexClient(Client):
    """Fetches the raw article records of the news query index.

    The index is a JSON document of the form ``{"data": [...]}`` published
    under the code base path of the site.

    Example:
        config = {"base_url": "https://main--site--org.aem.page"}
        async with IndexClient(config) as client:
            records = await client.fetch()
    """

    @property
    def code_base_path(self) -> str:
        return str(self._config.get("code_base_path", "")).rstrip("/")

    @property
    def index_path(self) -> str:
        return f"{self.code_base_path}{INDEX_SUFFIX}"

    async def fetch(self) -> list[dict[str, Any]]:
        """Fetch the index records.

        Returns:
            The list of raw article records

        Raises:
            ValidationError: If the body is not JSON or has no ``data`` list
            APIError: If the site returns a non-2xx response
            ConnectionError: If the network connection fails
        """
        response = await self.get(self.index_path)

        try:
            payload = response.json()
        except ValueError as e:
            raise ValidationError(f"Index at {self.index_path} is not valid JSON") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise ValidationError(f"Index at {self.index_path} has no 'data' list")

        return [record for record in payload["data"] if isinstance(record, dict)]
