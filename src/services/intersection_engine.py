# src/services/intersection_engine.py

"""Finds the vendors that stock every product on a shopping list."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from src.config.settings import Settings
from src.models.errors import (
    InvalidInput,
    PartialSearchFailure,
    TransportFailure,
)
from src.models.vendor import MatchedProduct, ResultVendor, VendorRecord
from src.scrapers.snapp_client import SnappSearchClient

logger = logging.getLogger("basket_search.engine")


@dataclass
class AggregatedVendor:
    """A vendor's contributions across all per-product searches."""

    record: VendorRecord
    slots: dict[str, dict[str, Any] | None] = field(
        default_factory=lambda: dict[str, dict[str, Any] | None]()
    )

    def covers(self, names: list[str]) -> bool:
        """Every name has a slot holding a matched product."""
        return len(self.slots) == len(names) and all(
            self.slots.get(name) is not None for name in names
        )

    def to_result(self, names: list[str]) -> ResultVendor:
        """Build the public row, re-walking ``names`` in caller order."""
        rec = self.record
        return ResultVendor(
            vendor_id=rec.vendor_id,
            code=rec.code,
            title=rec.title,
            address=rec.address,
            rating=rec.rating,
            delivery_fee=rec.delivery_fee,
            delivery_time=rec.delivery_time,
            featured_image_url=rec.featured_image_url,
            matched_products=[
                MatchedProduct(name=name, product=self.slots.get(name))
                for name in names
            ],
        )


def normalize_names(names: list[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate, keeping first-seen order.

    Raises:
        InvalidInput: The list is empty or nothing usable remains.
    """
    if not names:
        raise InvalidInput("Product list is empty")
    seen: set[str] = set()
    cleaned: list[str] = []
    for raw in names:
        if not isinstance(raw, str):
            continue
        name = raw.strip()
        if name and name not in seen:
            seen.add(name)
            cleaned.append(name)
    if not cleaned:
        raise InvalidInput("No valid product names were given")
    return cleaned


def aggregate(
    names: list[str],
    responses: list[list[VendorRecord]],
) -> dict[Any, AggregatedVendor]:
    """Fold each search's vendor list into a map keyed by vendor id.

    ``responses[i]`` must be the result of searching ``names[i]``. A
    vendor listed without products still gets a slot for that name,
    but the slot holds ``None`` and does not count as coverage. When a
    vendor is listed more than once for the same name, the first
    matched product wins. Entries without an id are skipped.
    """
    vendors: dict[Any, AggregatedVendor] = {}
    for name, records in zip(names, responses, strict=True):
        for record in records:
            if record.vendor_id is None:
                logger.debug(
                    "Skipping vendor entry without id for '%s': %s",
                    name,
                    record.title,
                )
                continue
            entry = vendors.get(record.vendor_id)
            if entry is None:
                entry = AggregatedVendor(record=record)
                vendors[record.vendor_id] = entry
            if entry.slots.get(name) is None:
                entry.slots[name] = record.matched_product
    return vendors


def rank_by_delivery_fee(
    vendors: list[ResultVendor],
) -> list[ResultVendor]:
    """Cheapest delivery first; unknown fees last, in discovery order."""
    return sorted(
        vendors,
        key=lambda v: (
            v.delivery_fee is None,
            v.delivery_fee if v.delivery_fee is not None else 0.0,
        ),
    )


def intersect(
    names: list[str],
    responses: list[list[VendorRecord]],
) -> list[ResultVendor]:
    """Vendors covering every name, ranked by delivery fee."""
    vendors = aggregate(names, responses)
    matching = [
        entry.to_result(names)
        for entry in vendors.values()
        if entry.covers(names)
    ]
    return rank_by_delivery_fee(matching)


class VendorIntersectionEngine:
    """Fans out one search per product name and intersects the vendors."""

    def __init__(
        self,
        client: SnappSearchClient,
        deadline: float | None = None,
    ) -> None:
        self.client = client
        self.deadline = (
            Settings.QUERY_DEADLINE if deadline is None else deadline
        )

    async def _search_one(self, name: str) -> list[VendorRecord]:
        """Run one search, bounded by the per-query deadline if set."""
        if self.deadline <= 0:
            return await self.client.search(name)
        try:
            return await asyncio.wait_for(
                self.client.search(name), timeout=self.deadline
            )
        except TimeoutError as exc:
            raise TransportFailure(
                f"Search timed out after {self.deadline:.0f}s"
            ) from exc

    async def find_vendors_with_all(
        self, names: list[str],
    ) -> list[ResultVendor]:
        """Return vendors stocking every product in ``names``.

        All searches run concurrently and are awaited together. If any
        of them fails the whole call fails with ``PartialSearchFailure``
        naming every failed product; no partial answer is returned.

        Raises:
            InvalidInput: No usable product names.
            PartialSearchFailure: At least one search failed.
        """
        products = normalize_names(names)
        logger.info(
            "Searching %d products: %s", len(products), products
        )

        outcomes = await asyncio.gather(
            *(self._search_one(name) for name in products),
            return_exceptions=True,
        )

        responses: list[list[VendorRecord]] = []
        failures: dict[str, BaseException] = {}
        for name, outcome in zip(products, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                failures[name] = outcome
                logger.error(
                    "Search for '%s' failed: %s",
                    name,
                    outcome,
                    exc_info=outcome,
                )
            else:
                responses.append(outcome)

        if failures:
            raise PartialSearchFailure(list(failures), failures)

        result = intersect(products, responses)
        logger.info(
            "%d vendors carry all %d products",
            len(result),
            len(products),
        )
        return result
