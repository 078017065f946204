"""Network clients for the news site."""

from .client import Client
from .content_client import ContentClient
from .exceptions import (
    APIError,
    ClientError,
    ConnectionError,
    NotFoundError,
    ValidationError,
)
from .index_client import IndexClient

__all__ = [
    "Client",
    "ContentClient",
    "IndexClient",
    "ClientError",
    "ConnectionError",
    "APIError",
    "NotFoundError",
    "ValidationError",
]
