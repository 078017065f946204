"""Template environment and element helpers shared by the views."""

import logging
from collections.abc import Iterable
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from lxml import html

from .filters import FILTERS

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

HIDDEN_CLASS = "hidden"
ACTIVE_CLASS = "active"


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Create a Jinja2 environment with the view filters registered."""
    env = Environment(
        loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    for name, func in FILTERS.items():
        env.filters[name] = func
    return env


class ElementFactory:
    """Renders templates into fresh lxml elements.

    Every call parses new elements, so no element is ever shared between
    two renders or two views.
    """

    def __init__(self, env: Environment | None = None):
        self.env = env or create_environment()

    def element(self, template_name: str, **context) -> html.HtmlElement:
        """Render a template whose output has a single root element."""
        markup = self.env.get_template(template_name).render(**context)
        return html.fragment_fromstring(markup.strip())

    def elements(self, template_name: str, **context) -> list[html.HtmlElement]:
        """Render a template that may produce several sibling elements."""
        markup = self.env.get_template(template_name).render(**context)
        return [
            fragment
            for fragment in html.fragments_fromstring(markup.strip())
            if not isinstance(fragment, str)
        ]


def replace_children(container: html.HtmlElement, children: Iterable[html.HtmlElement]) -> None:
    """Swap a container's content for new children in one step."""
    for child in list(container):
        container.remove(child)
    container.text = None
    for child in children:
        container.append(child)


def set_hidden(element: html.HtmlElement, hidden: bool) -> None:
    if hidden:
        element.classes.add(HIDDEN_CLASS)
    else:
        element.classes.discard(HIDDEN_CLASS)


def is_hidden(element: html.HtmlElement) -> bool:
    return HIDDEN_CLASS in element.classes


def set_active(element: html.HtmlElement, active: bool) -> None:
    if active:
        element.classes.add(ACTIVE_CLASS)
    else:
        element.classes.discard(ACTIVE_CLASS)
