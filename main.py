# main.py

"""Entry point for the whisky_offers command-line search."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("whisky_offers.main")


def _non_negative_int(value: str) -> int:
    """argparse type for a budget in yen."""
    try:
        number = int(value)
    except ValueError as exc:
        msg = f"not an integer: {value!r}"
        raise argparse.ArgumentTypeError(msg) from exc
    if number < 0:
        msg = "budget must be zero or positive"
        raise argparse.ArgumentTypeError(msg)
    return number


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="whisky_offers",
        description="Compare whisky offers across Japanese marketplaces.",
        epilog=f"Available sources: {valid_ids}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query, e.g. 'サントリー 山崎 700ml'.",
    )
    parser.add_argument(
        "-b",
        "--budget",
        type=_non_negative_int,
        default=None,
        help="Target price in yen; ranks offers closest to it first.",
    )
    parser.add_argument(
        "-s",
        "--sources",
        default=None,
        help="Comma-separated source IDs (default: all).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Check credentials and connectivity for every source.",
    )
    return parser


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless search and exit."""
    from src.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            query=args.query,
            budget=args.budget,
            source_csv=args.sources,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run marketplace health check."""
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to the health check or a search."""
    log_file = setup_logging()
    logger.info("whisky_offers starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.health:
        _run_health_check()
    elif args.query is None:
        parser.error("a search query is required")
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
