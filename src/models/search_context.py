# src/models/search_context.py

"""Capture-derived query parameters shared by the observer and client."""

import logging
import os
from dataclasses import dataclass, fields

from src.config.settings import Settings

logger = logging.getLogger("basket_search.context")


@dataclass(frozen=True)
class CapturedParams:
    """One observation of the host page's query parameters.

    Any field may be ``None``: the page does not send every parameter
    on every request.
    """

    lat: str | None = None
    long: str | None = None
    pro_discount: str | None = None
    pro_client: str | None = None
    client: str | None = None
    device_type: str | None = None
    app_version: str | None = None
    udid: str | None = None

    @property
    def has_location(self) -> bool:
        """Both geolocation components are present."""
        return bool(self.lat) and bool(self.long)

    @classmethod
    def from_env(cls) -> "CapturedParams":
        """Build a capture from the ``BASKET_*`` environment variables."""
        values: dict[str, str | None] = {}
        for field_name, var in Settings.CONTEXT_ENV_VARS.items():
            raw = os.getenv(var)
            values[field_name] = raw.strip() if raw and raw.strip() else None
        return cls(**values)


class SearchContext:
    """Latest known-good search parameters.

    ``update`` is the only way to change the context. It merges: a
    field is overwritten only by a non-null value, so a partial capture
    never erases what an earlier capture learned.
    """

    def __init__(self) -> None:
        self._values: dict[str, str | None] = {
            f.name: None for f in fields(CapturedParams)
        }

    def update(self, partial: CapturedParams) -> list[str]:
        """Merge ``partial`` into the context.

        Returns:
            Names of the fields whose value changed.
        """
        changed: list[str] = []
        for f in fields(partial):
            value = getattr(partial, f.name)
            if value is None:
                continue
            if self._values[f.name] != value:
                changed.append(f.name)
            self._values[f.name] = value
        if changed:
            logger.debug("Search context updated: %s", changed)
        return changed

    def is_ready(self) -> bool:
        """Location pair and device identifier are all known."""
        return all(
            self._values[name] is not None
            for name in ("lat", "long", "udid")
        )

    def get(self, name: str) -> str | None:
        """Read one field by name."""
        return self._values[name]

    def snapshot(self) -> CapturedParams:
        """Return an immutable copy of the current values."""
        return CapturedParams(**self._values)

    def as_query_params(self) -> dict[str, str]:
        """Map context values to the marketplace's query-string names.

        Optional fields the page never sent fall back to
        ``Settings.PARAM_FALLBACKS``; ones with no fallback are omitted.
        """
        mapping = {
            "lat": "lat",
            "long": "long",
            "pro_discount": "pro_discount",
            "pro_client": "pro_client",
            "client": "client",
            "device_type": "deviceType",
            "app_version": "appVersion",
            "udid": "UDID",
        }
        params: dict[str, str] = {}
        for field_name, param in mapping.items():
            value = self._values[field_name]
            if value is None:
                value = Settings.PARAM_FALLBACKS.get(param)
            if value is not None:
                params[param] = value
        return params
