"""Command-line interface for news-digest."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from lxml import html

from news_digest.block import NewsListBlock
from news_digest.filters import UnknownFacetValueError
from schemas.content import PresentationMode

DEFAULT_VIEW = PresentationMode.GRID.value


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


async def _render_snapshot(args: argparse.Namespace) -> str:
    config = {
        "base_url": args.base_url,
        "code_base_path": args.code_base_path,
        "timeout": args.timeout,
        "headers": {"User-Agent": "news-digest/1.0"},
    }
    root = html.fragment_fromstring("<div></div>")

    async with NewsListBlock(config) as block:
        await block.decorate(root)
        block.store.set_values(
            teams=args.team or None,
            authors=args.author or None,
            dates=args.month or None,
            tags=args.tag or None,
            uplevel_only=args.uplevel or None,
        )
        await block.controller.settle()
        await block.select_view(args.view)
        for _ in range(args.pages - 1):
            block.load_more()

    return html.tostring(root, pretty_print=True, encoding="unicode")


def render(args: argparse.Namespace) -> int:
    """Execute the render command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        markup = asyncio.run(_render_snapshot(args))
    except UnknownFacetValueError as e:
        logger.error(f"Invalid filter: {e}")
        return 1

    if args.output is None:
        sys.stdout.write(markup)
        return 0

    try:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(markup)
    except OSError as e:
        logger.error(f"Failed to write snapshot: {e}")
        return 1

    logger.info(f"Wrote {args.view} view to {args.output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="news-digest",
        description="Render filtered views of a site's news index",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    render_parser = subparsers.add_parser(
        "render",
        help="Render one view of the news list as HTML",
        description="Load the news index from a site, apply filters and write the rendered news list.",
    )
    render_parser.add_argument(
        "--base-url",
        type=str,
        required=True,
        help="Origin of the site serving the news index",
    )
    render_parser.add_argument(
        "--code-base-path",
        type=str,
        default="",
        help="Path prefix of the site's code base (default: none)",
    )
    render_parser.add_argument(
        "--view",
        choices=[mode.value for mode in PresentationMode],
        default=DEFAULT_VIEW,
        help=f"View to render (default: {DEFAULT_VIEW})",
    )
    render_parser.add_argument("--team", action="append", help="Team to include (repeatable)")
    render_parser.add_argument("--author", action="append", help="Author to include (repeatable)")
    render_parser.add_argument("--month", action="append", help='Month to include, e.g. "March 2025" (repeatable)')
    render_parser.add_argument("--tag", action="append", help="Tag to include (repeatable)")
    render_parser.add_argument(
        "--uplevel",
        action="store_true",
        help="Only include uplevel articles",
    )
    render_parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Grid pages to reveal (default: 1)",
    )
    render_parser.add_argument(
        "--timeout",
        type=float,
        default=30,
        help="Request timeout in seconds (default: 30)",
    )
    render_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="File to write the HTML to (default: stdout)",
    )
    render_parser.set_defaults(func=render)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
