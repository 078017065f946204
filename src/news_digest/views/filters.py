"""Jinja2 filters for news view templates.

These filters format index data for the card, list and newsletter
templates.
"""

import re
from datetime import date


DEFAULT_IMAGE = "/styles/default-images/default-card-image-1.png"


def format_date(article) -> str:
    """Format an article's publish date as a short human-readable date.

    Falls back to the raw index value when the date could not be parsed.

    Examples:
        >>> format_date(Article(path="/a", publishdate="2025-03-04"))
        'Mar 4, 2025'
    """
    value: date | None = getattr(article, "publish_date", None)
    if value is None:
        return getattr(article, "publish_date_raw", "") or ""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def image_url(image: str | None, code_base_path: str = "", default: str = DEFAULT_IMAGE) -> str:
    """Resolve an article image reference against the code base path.

    A missing image resolves to the default placeholder image.

    Examples:
        >>> image_url("/media/a.png", "/site")
        '/site/media/a.png'
        >>> image_url(None)
        '/styles/default-images/default-card-image-1.png'
    """
    if not image:
        return default
    if image.startswith(("http://", "https://", "//")):
        return image
    base = (code_base_path or "").rstrip("/")
    if image.startswith("/"):
        return f"{base}{image}"
    return f"{base}/{image}"


def meta_line(
    article,
    separator: str = " | ",
    include_team: bool = False,
    include_uplevel: bool = False,
) -> str:
    """Join the author, date and optionally team into one metadata line.

    Examples:
        >>> meta_line(Article(path="/a", author="Ada", publishdate="2025-03-04"))
        'By Ada | Mar 4, 2025'
    """
    parts = []
    if article.author:
        parts.append(f"By {article.author}")
    formatted = format_date(article)
    if formatted:
        parts.append(formatted)
    if include_team and article.team:
        parts.append(article.team)
    if include_uplevel and article.uplevel:
        parts.append("Uplevel")
    return separator.join(parts)


def truncate_words(text: str, length: int = 280, suffix: str = "…") -> str:
    """Truncate text on a word boundary, appending a suffix when cut.

    Examples:
        >>> truncate_words("alpha beta gamma", 11)
        'alpha beta…'
    """
    if not text:
        return ""
    text = text.strip()
    if len(text) <= length:
        return text
    cut = text[:length]
    if " " in cut and not text[length].isspace():
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(" ,;:.") + suffix


def clean_content(markup: str) -> str:
    """Strip scripts and embeds from fetched article markup.

    Removes ``<script>``, ``<iframe>`` and ``<noscript>`` elements so the
    fragment can be inserted into the page with ``| safe``.

    Examples:
        >>> clean_content('<p>Hello</p><script>alert("x")</script>')
        '<p>Hello</p>'
    """
    if not markup:
        return ""

    markup = re.sub(r"<script[^>]*>.*?</script>", "", markup, flags=re.DOTALL | re.IGNORECASE)
    markup = re.sub(r"<iframe[^>]*>.*?</iframe>", "", markup, flags=re.DOTALL | re.IGNORECASE)
    markup = re.sub(r"<iframe[^>]*/?>", "", markup, flags=re.IGNORECASE)
    markup = re.sub(r"<noscript[^>]*>.*?</noscript>", "", markup, flags=re.DOTALL | re.IGNORECASE)

    return markup.strip()


# Registry of all filters for registration with Jinja2
FILTERS = {
    "format_date": format_date,
    "image_url": image_url,
    "meta_line": meta_line,
    "truncate_words": truncate_words,
    "clean_content": clean_content,
}
