# src/cli/runner.py

"""Headless CLI basket search: capture parameters, search, print."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.capture.taps import UrlFeedTap, capture_with_browser
from src.models.vendor import ResultVendor
from src.services.basket_service import BasketService, SearchOutcome
from src.ui.formatting import (
    format_delivery_fee,
    format_delivery_time,
    format_matched_products,
    format_rating,
)

logger = logging.getLogger("basket_search.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOT_READY = 2


async def warm_up(
    service: BasketService,
    capture_urls: list[str] | None = None,
    har_path: str | None = None,
    use_browser: bool = False,
) -> bool:
    """Feed every configured capture source into the observer.

    Returns whether the search context is ready afterwards.
    """
    service.seed_from_env()

    if capture_urls:
        UrlFeedTap(service.observer, capture_urls).start()

    if har_path is not None:
        try:
            UrlFeedTap.from_har(service.observer, Path(har_path)).start()
        except (OSError, ValueError) as exc:
            logger.error("Could not read HAR file %s: %s", har_path, exc)
            _err.print(f"[red]Could not read HAR file: {exc}[/red]")

    if use_browser and not service.is_ready():
        _err.print(
            "[bold]Browser opened.[/bold] Pick a delivery location and "
            "search for anything on the storefront..."
        )
        await capture_with_browser(service.observer)

    return service.is_ready()


def _print_table(vendors: list[ResultVendor]) -> None:
    """Render a Rich table of matching vendors to stdout."""
    table = Table(
        title="Vendors carrying every product",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Vendor", max_width=40)
    table.add_column("Products", max_width=40)
    table.add_column("Delivery fee", justify="right", style="green")
    table.add_column("Time", justify="right")
    table.add_column("Rating", justify="center")
    table.add_column("Address", max_width=40, style="dim")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, v in enumerate(vendors, 1):
        table.add_row(
            str(idx),
            v.title,
            format_matched_products(v),
            format_delivery_fee(v.delivery_fee),
            format_delivery_time(v.delivery_time),
            format_rating(v.rating),
            v.address,
            v.url or "—",
        )

    Console().print(table)


def _report_failure(outcome: SearchOutcome) -> None:
    _err.print(f"[red]Error: {outcome.error}[/red]")
    if outcome.failed_products:
        _err.print(
            f"[dim]Failed products: "
            f"{', '.join(outcome.failed_products)}[/dim]"
        )


async def cli_search(
    products: list[str],
    output_format: str = "json",
    capture_urls: list[str] | None = None,
    har_path: str | None = None,
    use_browser: bool = False,
) -> int:
    """Run a headless basket search and return an exit code."""
    service = BasketService()
    ready = await warm_up(service, capture_urls, har_path, use_browser)
    if not ready:
        _err.print(
            "[yellow]Search context is not ready.[/yellow] Provide "
            "--capture-url, --har, --browser or BASKET_LAT/BASKET_LONG/"
            "BASKET_UDID."
        )
        return EXIT_NOT_READY

    _err.print(f"[bold]Searching:[/bold] {', '.join(products)}")
    outcome = await service.find_stores(products)

    if not outcome.ok:
        _report_failure(outcome)
        if output_format == "json":
            json.dump(outcome.to_dict(), sys.stdout, ensure_ascii=False)
            sys.stdout.write("\n")
        return EXIT_FAILED

    if outcome.vendors:
        _err.print(
            f"[green]✓ {len(outcome.vendors)} vendors carry all "
            f"{len(outcome.products)} products[/green]"
        )
    else:
        _err.print("[yellow]No vendor carries every product.[/yellow]")

    if output_format == "table":
        _print_table(outcome.vendors)
    else:
        json.dump(
            outcome.to_dict(),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return EXIT_OK
