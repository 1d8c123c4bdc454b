#!/usr/bin/env python3
"""Command line entry point.

Run with: casechart [options] or casechart cache {list,flush,refresh}
"""

import argparse
import logging
import sys
from datetime import timedelta
from typing import Optional

from casechart import __version__
from casechart.app_context import AppContext
from casechart.config.logging_config import adjust_level, setup_logging
from casechart.config.settings import Settings
from casechart.core.durations import parse_duration
from casechart.core.exceptions import AppError
from casechart.core.timezone import format_age, now_utc
from casechart.ui import AnsiTerminal, Screen

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def _duration(value: str) -> timedelta:
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="casechart",
        description="Download and render the latest COVID-19 case numbers in the terminal.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Print more logs, can be used multiple times",
    )
    verbosity.add_argument(
        "-q", "--quiet", action="count", default=0,
        help="Print less logs, can be used multiple times",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-f", "--force", "--download", action="store_true",
        help="Force download of new data before running",
    )
    source.add_argument(
        "-c", "--cache", "--offline", dest="offline", action="store_true",
        help="Force the use of cached data, never download",
    )

    parser.add_argument(
        "-s", "--stale-after", type=_duration, metavar="DURATION",
        help="Consider cached data stale after this duration (default: 1 hour)",
    )
    parser.add_argument(
        "-t", "--timeout", type=_duration, metavar="DURATION",
        help="Timeout for the download if new data needs to be fetched (default: 10 seconds)",
    )
    parser.add_argument(
        "--no-stale-fallback", dest="stale_fallback", action="store_false", default=None,
        help="Fail instead of showing outdated cached data when the download fails",
    )
    parser.add_argument("--no-color", action="store_true", help="Draw the chart without colors")
    parser.add_argument("--no-ui", action="store_true", help=argparse.SUPPRESS)

    commands = parser.add_subparsers(dest="command")
    cache = commands.add_parser("cache", help="Operation on the cache for the data downloads")
    cache_commands = cache.add_subparsers(dest="cache_command", required=True)
    cache_commands.add_parser("list", help="List the file currently in the cache")
    cache_commands.add_parser("flush", help="Flush the cache (delete the cached file)")
    cache_commands.add_parser("refresh", help="Refresh the cache, downloading regardless of age")
    return parser


def settings_from_args(args: argparse.Namespace, settings: Settings) -> Settings:
    """Apply command line overrides on top of the environment settings."""
    update: dict[str, object] = {
        "log_level": adjust_level(settings.log_level, args.verbose - args.quiet),
    }
    if args.stale_after is not None:
        update["stale_after_seconds"] = args.stale_after.total_seconds()
    if args.timeout is not None:
        update["request_timeout_seconds"] = args.timeout.total_seconds()
    if args.stale_fallback is not None:
        update["stale_fallback"] = args.stale_fallback
    return settings.model_copy(update=update)


def run_command(args: argparse.Namespace, context: AppContext, screen: Optional[Screen] = None) -> int:
    """Load the series and show it until the user quits."""
    loaded = context.data.load_series(force=args.force, offline=args.offline)
    logger.info(
        "Loaded %d data points (%s, %s)",
        len(loaded.series),
        loaded.origin.value,
        loaded.fetched_at.isoformat(),
    )
    if args.no_ui:
        return EXIT_OK

    if screen is not None:
        return context.render_loop(loaded, screen).run()
    with AnsiTerminal(context.renderer(use_color=not args.no_color)) as terminal:
        return context.render_loop(loaded, terminal).run()


def cache_command(command: str, context: AppContext) -> int:
    """Handle `cache list`, `cache flush` and `cache refresh`."""
    if command == "list":
        info = context.data.cache_info()
        if info is not None:
            age = format_age(now_utc() - info.created_at)
            print(f"{info.path}\t{info.created_at.isoformat()}\t{age}\t{info.point_count}")
    elif command == "flush":
        context.data.clear_cache()
    elif command == "refresh":
        loaded = context.data.refresh()
        logger.info("Refreshed cache with %d data points", len(loaded.series))
    return EXIT_OK


def dispatch(args: argparse.Namespace, context: AppContext, screen: Optional[Screen] = None) -> int:
    if args.command == "cache":
        return cache_command(args.cache_command, context)
    return run_command(args, context, screen)


def main(argv: Optional[list[str]] = None) -> int:
    """Parse arguments, set up logging and run the selected command."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args, Settings())
    setup_logging(settings)
    logger.info("Starting casechart %s", __version__)

    try:
        return dispatch(args, AppContext(settings))

    except AppError as e:
        logger.debug("Fatal error", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        if e.hint:
            print(f"Hint: {e.hint}", file=sys.stderr)
        return EXIT_FAILURE

    except KeyboardInterrupt:
        return EXIT_INTERRUPTED

    except Exception as e:
        logger.exception(f"Application error: {e}")
        print(f"\nApplication error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
