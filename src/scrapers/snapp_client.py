# src/scrapers/snapp_client.py

"""Product search client for the Snapp Express marketplace API."""

import asyncio
import json
import logging
from typing import Any
from urllib.parse import urlencode

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.errors import ContextNotInitialized, TransportFailure
from src.models.search_context import SearchContext
from src.models.vendor import ProductQuery, VendorRecord


class SnappSearchClient:
    """Runs one product-name search using the captured search context.

    The blocking HTTP call runs in a worker thread; everything that
    touches the context (the readiness check and URL construction)
    runs on the caller's event loop before the request is dispatched.
    """

    def __init__(self, context: SearchContext) -> None:
        self.context = context
        self.logger = logging.getLogger("basket_search.client")
        self.settings = Settings()

    def build_url(self, query: ProductQuery) -> str:
        """Compose the search URL for ``query`` from current context values.

        Raises:
            ContextNotInitialized: The context is not ready.
        """
        if not self.context.is_ready():
            raise ContextNotInitialized()
        params: dict[str, str] = {
            "query": query.name,
            **self.settings.SEARCH_FIXED_PARAMS,
            **self.context.as_query_params(),
            "page": str(query.page_index),
            "size": str(self.settings.SEARCH_PAGE_SIZE),
        }
        return f"{self.settings.SEARCH_ENDPOINT}?{urlencode(params)}"

    def _fetch_json(self, url: str) -> dict[str, Any]:
        """GET ``url`` and decode the JSON body (runs in a thread)."""
        session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        try:
            resp = session.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            raise TransportFailure(f"Request failed: {exc}") from exc
        finally:
            session.close()

        if resp.status_code != 200:
            raise TransportFailure(
                f"API request failed: HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        try:
            data: Any = json.loads(resp.text)
        except ValueError as exc:
            raise TransportFailure(
                "API returned a non-JSON body",
                status_code=resp.status_code,
            ) from exc
        if not isinstance(data, dict):
            raise TransportFailure("API returned an unexpected payload")
        return data

    @staticmethod
    def extract_vendors(data: dict[str, Any]) -> list[VendorRecord]:
        """Pull vendor entries from ``data.vendor_product_variations.items``."""
        body = data.get("data")
        if not isinstance(body, dict):
            return []
        variations = body.get("vendor_product_variations")
        if not isinstance(variations, dict):
            return []
        items = variations.get("items") or []
        return [
            VendorRecord.from_api(item)
            for item in items
            if isinstance(item, dict)
        ]

    async def search(self, name: str) -> list[VendorRecord]:
        """Search the marketplace for one product name.

        Raises:
            ValueError: ``name`` is blank.
            ContextNotInitialized: Checked before any network access.
            TransportFailure: Network error or non-200 response.
        """
        if not name or not name.strip():
            msg = "Product name must be a non-empty string"
            raise ValueError(msg)

        url = self.build_url(
            ProductQuery(name=name, page_index=self.settings.SEARCH_PAGE)
        )
        self.logger.debug("Searching '%s': %s", name, url)
        try:
            data = await asyncio.to_thread(self._fetch_json, url)
        except TransportFailure as exc:
            self.logger.warning(
                "Search for '%s' failed: %s", name, exc.message
            )
            raise

        vendors = self.extract_vendors(data)
        self.logger.info(
            "Search for '%s' returned %d vendors", name, len(vendors)
        )
        return vendors
