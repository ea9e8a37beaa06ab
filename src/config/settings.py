# src/config/settings.py

"""Central configuration for the basket_search engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back on bad input."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings:
    """Central configuration for the basket_search engine."""

    # --- Marketplace API ---
    API_BASE_URL: str = "https://api.snapp.express"
    SEARCH_ENDPOINT: str = API_BASE_URL + "/mobile/v3/search"
    CAPTURE_URL_PREFIX: str = API_BASE_URL

    # Fixed protocol values sent with every product search
    SEARCH_FIXED_PARAMS: dict[str, str] = {
        "superType": "[4]",     # Category scope: supermarkets
        "new_design": "0",
        "new_search": "1",
        "source": "2",
    }
    SEARCH_PAGE: int = 0
    SEARCH_PAGE_SIZE: int = 20

    # Used when the page never sent these (lat/long/UDID have none)
    PARAM_FALLBACKS: dict[str, str] = {
        "pro_client": "snapp",
        "client": "PWA",
        "deviceType": "PWA",
        "appVersion": "1.333.5",
    }

    # --- Transport ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    QUERY_DEADLINE: float = _env_float(
        "BASKET_QUERY_DEADLINE", 30.0
    )                                   # Per-query bound; 0 disables
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "fa-IR,fa;q=0.9,en-US;q=0.8,en;q=0.7",
        "Origin": "https://express.snapp.market",
        "Referer": "https://express.snapp.market/",
    }

    # --- Capture ---
    HOST_PAGE_URL: str = "https://express.snapp.market/"
    BROWSER_CAPTURE_TIMEOUT: float = 300.0  # Seconds to wait for readiness

    # Environment variables seeding the search context at startup
    CONTEXT_ENV_VARS: dict[str, str] = {
        "lat": "BASKET_LAT",
        "long": "BASKET_LONG",
        "pro_discount": "BASKET_PRO_DISCOUNT",
        "pro_client": "BASKET_PRO_CLIENT",
        "client": "BASKET_CLIENT",
        "device_type": "BASKET_DEVICE_TYPE",
        "app_version": "BASKET_APP_VERSION",
        "udid": "BASKET_UDID",
    }

    # --- Display ---
    VENDOR_URL_TEMPLATE: str = (
        "https://express.snapp.market/supermarket/m/{code}"
    )
    CURRENCY_LABEL: str = "Toman"
    UNKNOWN_VENDOR_TITLE: str = "Unknown vendor"
    UNKNOWN_VENDOR_ADDRESS: str = "Address unavailable"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
