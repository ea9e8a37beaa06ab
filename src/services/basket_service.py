# src/services/basket_service.py

"""Entry point used by the CLI and TUI to run a basket search."""

import logging
from dataclasses import dataclass, field
from typing import Any

from src.capture.observer import ParameterObserver
from src.models.errors import (
    BasketSearchError,
    ContextNotInitialized,
    InvalidInput,
    PartialSearchFailure,
)
from src.models.search_context import CapturedParams, SearchContext
from src.models.vendor import ResultVendor
from src.scrapers.snapp_client import SnappSearchClient
from src.services.intersection_engine import (
    VendorIntersectionEngine,
    normalize_names,
)

logger = logging.getLogger("basket_search.service")


@dataclass
class SearchOutcome:
    """Success payload or structured failure for one basket search."""

    ok: bool
    products: list[str] = field(default_factory=lambda: list[str]())
    vendors: list[ResultVendor] = field(
        default_factory=lambda: list[ResultVendor]()
    )
    error: str = ""
    error_kind: str = ""
    failed_products: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @classmethod
    def failure(
        cls, exc: BasketSearchError, products: list[str] | None = None,
    ) -> "SearchOutcome":
        """Build a failed outcome from a domain error."""
        failed = (
            list(exc.failed_products)
            if isinstance(exc, PartialSearchFailure)
            else []
        )
        return cls(
            ok=False,
            products=products or [],
            error=exc.message,
            error_kind=exc.kind,
            failed_products=failed,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON wire shape for presentation layers."""
        if self.ok:
            return {
                "ok": True,
                "result": [v.to_dict() for v in self.vendors],
            }
        payload: dict[str, Any] = {
            "ok": False,
            "error": self.error,
            "error_kind": self.error_kind,
        }
        if self.failed_products:
            payload["failed_products"] = self.failed_products
        return payload


class BasketService:
    """Owns the search context and wires observer, client and engine.

    One instance lives for the whole process so parameters captured
    before a failed search are still there for the next attempt.
    """

    def __init__(
        self,
        context: SearchContext | None = None,
        engine: VendorIntersectionEngine | None = None,
    ) -> None:
        self.context = context or SearchContext()
        self.observer = ParameterObserver(self.context)
        self.engine = engine or VendorIntersectionEngine(
            SnappSearchClient(self.context)
        )

    def seed_from_env(self) -> bool:
        """Publish ``BASKET_*`` environment values into the context.

        Returns whether anything was applied.
        """
        seed = CapturedParams.from_env()
        changed = self.context.update(seed)
        if changed:
            logger.info("Seeded search context from env: %s", changed)
        return bool(changed)

    def is_ready(self) -> bool:
        """Readiness gate: can a search be issued right now?"""
        return self.context.is_ready()

    @staticmethod
    def validate_items(items: object) -> list[str]:
        """Check the raw request and keep the non-blank string names.

        Raises:
            InvalidInput: Not a non-empty list, or no usable names.
        """
        if not isinstance(items, list) or not items:
            raise InvalidInput(
                "Invalid product list: expected a non-empty list"
            )
        valid = [
            item for item in items
            if isinstance(item, str) and item.strip()
        ]
        if not valid:
            raise InvalidInput("No valid product names were provided")
        return valid

    async def find_stores(self, items: object) -> SearchOutcome:
        """Run a basket search and report the outcome; never raises.

        ``products`` on the outcome is the cleaned, de-duplicated list
        the engine searched, in the same order as ``matchedProducts``.
        """
        try:
            products = normalize_names(self.validate_items(items))
        except InvalidInput as exc:
            logger.warning("Rejected basket request: %s", exc.message)
            return SearchOutcome.failure(exc)

        if not self.is_ready():
            exc = ContextNotInitialized()
            logger.warning("Search attempted before context was ready")
            return SearchOutcome.failure(exc, products)

        try:
            vendors = await self.engine.find_vendors_with_all(products)
        except BasketSearchError as exc:
            return SearchOutcome.failure(exc, products)
        except Exception as exc:
            logger.error("Unexpected basket search error", exc_info=True)
            return SearchOutcome(
                ok=False,
                products=products,
                error=str(exc) or "Unexpected error",
                error_kind="internal",
            )

        return SearchOutcome(ok=True, products=products, vendors=vendors)
