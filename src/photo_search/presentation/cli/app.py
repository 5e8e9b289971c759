"""
Photo Search console client.

Each line read from stdin is one search-text change, as if typed into a
search field. Results are printed whenever the pipeline publishes a new
snapshot. On end of input the client waits for outstanding searches, then
exits.

Usage:
    export PIXABAY_API_KEY=...
    photo-search                          # interactive
    printf 'p\\npa\\npar\\n' | photo-search  # piped: only "par" is searched
    photo-search --typing-delay 1.5 < queries.txt

Environment Variables:
    PIXABAY_API_KEY, PHOTO_SEARCH_* (see photo_search.shared.settings)
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from collections.abc import Mapping
from typing import TextIO

from photo_search.container import ApplicationContainer, create_container
from photo_search.presentation.cli.presenter import ConsolePresenter
from photo_search.shared.exceptions import ConfigurationError
from photo_search.shared.settings import PhotoSearchSettings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-search",
        description="Debounced photo search against the Pixabay API; one query per input line",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="Pixabay API key (default: $PIXABAY_API_KEY)",
    )
    parser.add_argument(
        "--debounce",
        type=float,
        default=None,
        help="Quiet window in seconds before a query is sent (default: 1.0)",
    )
    parser.add_argument(
        "--per-page",
        type=int,
        default=None,
        help="Photos requested per search, 3-200 (default: 200)",
    )
    parser.add_argument(
        "--no-safesearch",
        action="store_true",
        help="Disable Pixabay safe search",
    )
    parser.add_argument(
        "--fallback-query",
        default=None,
        help='Term searched when a query cannot be encoded (default: "paris", "" disables)',
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Photos printed per result set (default: 10)",
    )
    parser.add_argument(
        "--typing-delay",
        type=float,
        default=0.0,
        help="Pause after each input line, in seconds (default: 0)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def settings_from_args(
    args: argparse.Namespace,
    environ: Mapping[str, str] | None = None,
) -> PhotoSearchSettings:
    """Environment settings overridden by explicit command-line options."""
    settings = PhotoSearchSettings.from_env(environ).replace(
        api_key=args.api_key,
        debounce_seconds=args.debounce,
        per_page=args.per_page,
    )
    if args.no_safesearch:
        settings = dataclasses.replace(settings, safe_search=False)
    if args.fallback_query is not None:
        settings = dataclasses.replace(settings, fallback_query=args.fallback_query.strip() or None)
    return settings


async def run(
    container: ApplicationContainer,
    presenter: ConsolePresenter,
    stdin: TextIO,
    typing_delay: float = 0.0,
) -> None:
    """Feed ``stdin`` lines into a pipeline session until end of input."""
    async with container.session() as session:
        session.subscribe(presenter.render)
        while True:
            line = await asyncio.to_thread(stdin.readline)
            if not line:
                break
            session.on_input(line.rstrip("\r\n"))
            if typing_delay > 0:
                await asyncio.sleep(typing_delay)
        await session.wait_idle()


def main(argv: list[str] | None = None) -> int:
    """Run the console client."""
    args = build_parser().parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = settings_from_args(args)
        settings.require_api_key()
    except ConfigurationError as e:
        logger.log(e.log_level, str(e))
        return 2

    container = create_container(settings)
    presenter = ConsolePresenter(limit=args.limit)

    try:
        asyncio.run(run(container, presenter, sys.stdin, typing_delay=args.typing_delay))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
