# src/ui/formatting.py

"""Display helpers shared by the CLI table and the TUI."""

from typing import Any

from src.config.settings import Settings
from src.models.vendor import ResultVendor

UNKNOWN = "Unknown"


def format_delivery_fee(fee: float | None) -> str:
    """'12,000 Toman', 'Free' for zero, 'Unknown' when absent."""
    if fee is None:
        return UNKNOWN
    if fee == 0:
        return "Free"
    return f"{fee:,.0f} {Settings.CURRENCY_LABEL}"


def format_rating(rating: float | None) -> str:
    """One decimal place, or 'Unknown'."""
    if rating is None:
        return UNKNOWN
    return f"{rating:.1f}"


def format_delivery_time(minutes: Any) -> str:
    if minutes is None or minutes == "":
        return UNKNOWN
    return f"{minutes} min"


def format_matched_products(
    vendor: ResultVendor, separator: str = "\n",
) -> str:
    """One 'name: listed title' line per requested product."""
    return separator.join(
        f"{m.name}: {m.label}" for m in vendor.matched_products
    )
