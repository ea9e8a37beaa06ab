# src/capture/observer.py

"""Learns search parameters from the storefront's own API traffic."""

import logging
from urllib.parse import parse_qs, urlparse

from src.config.settings import Settings
from src.models.search_context import CapturedParams, SearchContext

logger = logging.getLogger("basket_search.observer")

# Query-string name -> CapturedParams field
_PARAM_FIELDS: dict[str, str] = {
    "lat": "lat",
    "long": "long",
    "pro_discount": "pro_discount",
    "pro_client": "pro_client",
    "client": "client",
    "deviceType": "device_type",
    "appVersion": "app_version",
    "UDID": "udid",
}


def extract_params(url: str) -> CapturedParams:
    """Parse the capture fields out of a request URL's query string.

    Empty values are treated as absent.
    """
    query = parse_qs(urlparse(url).query, keep_blank_values=False)
    values: dict[str, str | None] = {}
    for param, field_name in _PARAM_FIELDS.items():
        found = query.get(param)
        values[field_name] = found[0] if found else None
    return CapturedParams(**values)


class ParameterObserver:
    """Receives "request about to be sent" callbacks from a tap.

    Matching requests update the shared ``SearchContext``. The observer
    never raises into the tap: failures are logged and dropped so the
    host page's request always proceeds untouched.
    """

    def __init__(
        self,
        context: SearchContext,
        url_prefix: str | None = None,
    ) -> None:
        self.context = context
        self.url_prefix = url_prefix or Settings.CAPTURE_URL_PREFIX
        self.captured: int = 0

    def matches(self, url: str) -> bool:
        """True when ``url`` targets the marketplace API."""
        return url.startswith(self.url_prefix)

    def on_request(self, url: object) -> None:
        """Handle one outgoing request URL. Never raises."""
        try:
            if not isinstance(url, str) or not self.matches(url):
                return
            params = extract_params(url)
            if not params.has_location:
                return
            was_ready = self.context.is_ready()
            self.context.update(params)
            self.captured += 1
            if not was_ready and self.context.is_ready():
                logger.info("Search context is ready")
        except Exception:
            logger.error(
                "Failed to capture parameters from %r", url, exc_info=True
            )
