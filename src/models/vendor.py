# src/models/vendor.py

"""Vendor data models for inter-module data flow."""

import math
from dataclasses import dataclass, field
from typing import Any

from src.config.settings import Settings


@dataclass(frozen=True)
class ProductQuery:
    """A single product-name search request."""

    name: str
    page_index: int = 0

    def __post_init__(self) -> None:
        if self.page_index < 0:
            msg = f"page_index must be >= 0, got {self.page_index}"
            raise ValueError(msg)


def _optional_number(value: Any) -> float | None:
    """Coerce an API number to float; absent or non-finite values are ``None``."""
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass
class VendorRecord:
    """One vendor entry as returned by a single product search."""

    vendor_id: Any
    title: str
    address: str
    code: str | None = None
    rating: float | None = None
    delivery_fee: float | None = None
    delivery_time: Any = None
    featured_image_url: str | None = None
    products: list[dict[str, Any]] = field(
        default_factory=lambda: list[dict[str, Any]]()
    )

    @property
    def matched_product(self) -> dict[str, Any] | None:
        """First product the vendor matched for this query, if any."""
        return self.products[0] if self.products else None

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "VendorRecord":
        """Parse a raw ``vendor_product_variations`` item."""
        raw_products = item.get("products") or []
        products = [p for p in raw_products if isinstance(p, dict)]
        return cls(
            vendor_id=item.get("id"),
            code=item.get("code") or None,
            title=str(item.get("title") or Settings.UNKNOWN_VENDOR_TITLE),
            address=str(
                item.get("address") or Settings.UNKNOWN_VENDOR_ADDRESS
            ),
            rating=_optional_number(item.get("rating")),
            delivery_fee=_optional_number(item.get("deliveryFee")),
            delivery_time=item.get("deliveryTime"),
            featured_image_url=item.get("featured") or None,
            products=products,
        )


@dataclass
class MatchedProduct:
    """A requested product name and the vendor's matching item."""

    name: str
    product: dict[str, Any] | None

    @property
    def label(self) -> str:
        """Product title as listed by the vendor, else the requested name."""
        if self.product and self.product.get("title"):
            return str(self.product["title"])
        return self.name

    @property
    def image_url(self) -> str | None:
        """First image of the product, thumbnail preferred over main."""
        if not self.product:
            return None
        images = self.product.get("images")
        if not isinstance(images, list) or not images:
            return None
        first = images[0]
        if not isinstance(first, dict):
            return None
        return first.get("thumb") or first.get("main") or None


@dataclass
class ResultVendor:
    """A vendor confirmed to stock every requested product."""

    vendor_id: Any
    title: str
    address: str
    code: str | None = None
    rating: float | None = None
    delivery_fee: float | None = None
    delivery_time: Any = None
    featured_image_url: str | None = None
    matched_products: list[MatchedProduct] = field(
        default_factory=lambda: list[MatchedProduct]()
    )

    @property
    def url(self) -> str:
        """Storefront page for this vendor, or empty when unknown."""
        if not self.code:
            return ""
        return Settings.VENDOR_URL_TEMPLATE.format(code=self.code)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape handed to presentation layers."""
        return {
            "vendorId": self.vendor_id,
            "code": self.code,
            "title": self.title,
            "address": self.address,
            "rating": self.rating,
            "deliveryFee": self.delivery_fee,
            "deliveryTime": self.delivery_time,
            "featured": self.featured_image_url,
            "url": self.url,
            "matchedProducts": [
                {
                    "name": m.name,
                    "product": m.product,
                    "image": m.image_url,
                }
                for m in self.matched_products
            ],
        }
