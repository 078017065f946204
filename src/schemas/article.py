"""Article schemas for the news index.

The index payload uses the spreadsheet-style keys produced by the site
indexer (``publishdate``, ``newsletter-section``); aliases map them onto
snake_case fields. Raw values are normalized once here so that filtering
and rendering never re-parse strings.
"""

import json
from datetime import date, datetime, timezone
from functools import total_ordering
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

# Formats tried in order after ISO parsing fails
DATE_FORMATS = (
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%Y/%m/%d",
)


def parse_publish_date(value: Any) -> date | None:
    """Parse a raw publish date into a date.

    Args:
        value: Raw value from the index (string, number, date or None)

    Returns:
        The parsed date, or None when the value is missing or unparseable

    Examples:
        >>> parse_publish_date("2025-03-14")
        datetime.date(2025, 3, 14)
        >>> parse_publish_date("not a date") is None
        True
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _from_timestamp(value)

    text = str(value).strip()
    if not text:
        return None
    if text.isdigit():
        return _from_timestamp(int(text))

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _from_timestamp(seconds: float) -> date | None:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError):
        return None


def parse_tags(value: Any) -> frozenset[str]:
    """Normalize a raw tags value into a set of tag names.

    Accepts a JSON array string, a comma-delimited string, or an iterable
    of strings. Blank entries are dropped.

    Examples:
        >>> sorted(parse_tags('["ai", "cloud"]'))
        ['ai', 'cloud']
        >>> sorted(parse_tags("ai, cloud ,"))
        ['ai', 'cloud']
    """
    if value is None:
        return frozenset()

    if isinstance(value, str):
        text = value.strip()
        items: Any
        try:
            items = json.loads(text)
        except ValueError:
            items = text.split(",")
        if isinstance(items, str):
            items = items.split(",")
        elif not isinstance(items, list):
            items = text.split(",")
    else:
        items = value

    return frozenset(str(item).strip() for item in items if str(item).strip())


@total_ordering
class MonthBucket(BaseModel):
    """A date normalized to month granularity.

    Buckets order chronologically by (year, month); ``label`` is only a
    display projection and is never used for comparison.
    """

    year: int
    month: int = Field(ge=1, le=12)

    model_config = {"frozen": True}

    @classmethod
    def from_date(cls, value: date) -> "MonthBucket":
        return cls(year=value.year, month=value.month)

    @property
    def label(self) -> str:
        return date(self.year, self.month, 1).strftime("%B %Y")

    def __lt__(self, other: "MonthBucket") -> bool:
        return (self.year, self.month) < (other.year, other.month)


class Article(BaseModel):
    """A single entry of the news index.

    Attributes:
        path: Site path of the article; unique identity and link target
        title: Article headline
        author: Author display name
        team: Owning team name
        description: Short summary used as the card preview
        tags: Normalized set of tag names
        publish_date: Parsed publish date, or None when unknown
        publish_date_raw: The publish date exactly as it appeared in the index
        uplevel: Whether the article is flagged as leadership content
        image: Image reference relative to the code base path, or None
        newsletter_section: Newsletter section key the article belongs to
    """

    path: str = Field(min_length=1)
    title: str = ""
    author: str = ""
    team: str = ""
    description: str = ""
    tags: frozenset[str] = frozenset()
    publish_date: date | None = None
    publish_date_raw: str = ""
    uplevel: bool = False
    image: str | None = None
    newsletter_section: str | None = Field(default=None, alias="newsletter-section")

    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def _extract_publish_date(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        raw = None
        for key in ("publishdate", "publishDate", "publish_date"):
            if key in data:
                raw = data.pop(key)
                break
        if raw is not None:
            data.setdefault("publish_date_raw", str(raw))
            data["publish_date"] = parse_publish_date(raw)
        return data

    @field_validator("title", "author", "team", "description", mode="before")
    @classmethod
    def _blank_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> frozenset[str]:
        return parse_tags(value)

    @field_validator("uplevel", mode="before")
    @classmethod
    def _normalize_uplevel(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() == "true"

    @field_validator("image", mode="before")
    @classmethod
    def _normalize_image(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        if text in ("", "0"):
            return None
        return text

    @field_validator("newsletter_section", mode="before")
    @classmethod
    def _normalize_section(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @property
    def month_bucket(self) -> MonthBucket | None:
        if self.publish_date is None:
            return None
        return MonthBucket.from_date(self.publish_date)

    @property
    def month_label(self) -> str | None:
        bucket = self.month_bucket
        return bucket.label if bucket is not None else None
