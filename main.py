# main.py

"""Entry point for basket_search (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging

logger = logging.getLogger("basket_search.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="basket_search",
        description=(
            "Find Snapp Express vendors that stock every product on "
            "your list, cheapest delivery first."
        ),
        epilog=(
            "Search parameters are captured from the storefront's own "
            "traffic: use --browser, --har or --capture-url, or set "
            "BASKET_LAT, BASKET_LONG and BASKET_UDID."
        ),
    )
    parser.add_argument(
        "products",
        nargs="*",
        help="Product names. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "-c",
        "--capture-url",
        action="append",
        default=None,
        dest="capture_urls",
        metavar="URL",
        help="A storefront API request URL to learn parameters from "
        "(repeatable).",
    )
    parser.add_argument(
        "--har",
        default=None,
        dest="har_path",
        help="HAR export of a storefront browsing session.",
    )
    parser.add_argument(
        "-b",
        "--browser",
        action="store_true",
        default=False,
        help="Open the storefront in a browser and capture parameters.",
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
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo debug logging to stderr.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.services.basket_service import BasketService
    from src.ui.app import BasketSearchApp

    service = BasketService()
    service.seed_from_env()
    try:
        BasketSearchApp(service).run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("basket_search TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run headless basket search and exit."""
    from src.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            products=args.products,
            output_format=args.output_format,
            capture_urls=args.capture_urls,
            har_path=args.har_path,
            use_browser=args.browser,
        )
    )
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no products) or headless CLI."""
    args = _build_parser().parse_args()
    log_file = setup_logging(verbose=args.verbose)
    logger.info("basket_search starting, log file: %s", log_file)

    if args.products:
        _run_cli(args)
    else:
        _run_tui()


if __name__ == "__main__":
    main()
