"""Extraction of displayable content from article bodies.

Plain renditions start with the article's ``<h1>`` title and carry the
authoring metadata table; both duplicate fields already shown from the
index and are dropped before the body is displayed.
"""

import re

from lxml import etree, html

from schemas.content import NO_CONTENT_HTML, RenderedContent

WHITESPACE = re.compile(r"\s+")

BLOCK_TAGS = (
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "ol", "p", "pre", "section", "table", "td", "th",
    "tr", "ul",
)


def _parse_fragment(markup: str) -> html.HtmlElement:
    return html.fragment_fromstring(markup, create_parent="div")


def _inner_html(element: html.HtmlElement) -> str:
    parts = [element.text or ""]
    parts.extend(etree.tostring(child, encoding="unicode", method="html") for child in element)
    return "".join(parts).strip()


def extract_content(markup: str) -> RenderedContent:
    """Derive the full body and first paragraph from a plain rendition.

    Args:
        markup: HTML text of ``<path>.plain.html``

    Returns:
        RenderedContent with the primary heading and first table removed

    Raises:
        lxml.etree.ParserError: If the markup cannot be parsed
    """
    if not markup or not markup.strip():
        return RenderedContent()

    root = _parse_fragment(markup)

    for tag in ("h1", "table"):
        element = next(root.iter(tag), None)
        if element is not None:
            element.drop_tree()

    paragraph = next(root.iter("p"), None)
    first_paragraph = NO_CONTENT_HTML
    if paragraph is not None:
        first_paragraph = etree.tostring(
            paragraph, encoding="unicode", method="html", with_tail=False
        ).strip()

    return RenderedContent(
        full_content=_inner_html(root),
        first_paragraph=first_paragraph,
    )


def html_to_text(markup: str) -> str:
    """Collapse markup to its whitespace-normalized text.

    Block elements are separated by a space so adjacent paragraphs do not
    run together; inline elements are joined as written.
    """
    if not markup or not markup.strip():
        return ""
    root = _parse_fragment(markup)
    for element in root.iter(*BLOCK_TAGS):
        element.text = " " + (element.text or "")
        element.tail = " " + (element.tail or "")
    return WHITESPACE.sub(" ", root.text_content()).strip()
