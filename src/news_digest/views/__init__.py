"""View renderers and the view-mode controller."""

from .controller import ViewModeController
from .grid_view import GridRenderer
from .list_view import ListRenderer
from .newsletter_view import NEWSLETTER_SECTIONS, NewsletterRenderer, NewsletterSection
from .renderer import ViewRenderer
from .templating import ElementFactory, create_environment

__all__ = [
    "ElementFactory",
    "GridRenderer",
    "ListRenderer",
    "NEWSLETTER_SECTIONS",
    "NewsletterRenderer",
    "NewsletterSection",
    "ViewModeController",
    "ViewRenderer",
    "create_environment",
]
