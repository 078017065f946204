"""Rendered article content schemas."""

from enum import Enum

from pydantic import BaseModel

NO_CONTENT_HTML = "<p>No content available.</p>"
UNAVAILABLE_HTML = "<p>Unable to load article content.</p>"


class PresentationMode(str, Enum):
    """How an article is presented; also the view-mode state."""

    GRID = "grid"
    LIST = "list"
    NEWSLETTER = "newsletter"


class RenderedContent(BaseModel):
    """Body content of one article, shaped for display.

    Only markup strings are stored so that every render builds its own
    elements from them.

    Attributes:
        full_content: Article body with the title and metadata table removed
        first_paragraph: Outer HTML of the first paragraph of the body
        failed: True when the body could not be fetched or parsed
        error: Failure description for logging
    """

    full_content: str = ""
    first_paragraph: str = NO_CONTENT_HTML
    failed: bool = False
    error: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def failure(cls, error: str) -> "RenderedContent":
        return cls(
            full_content=UNAVAILABLE_HTML,
            first_paragraph=UNAVAILABLE_HTML,
            failed=True,
            error=error,
        )
