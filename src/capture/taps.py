# src/capture/taps.py

"""Sources of "request about to be sent" events for the observer.

Each tap hides one way of seeing the storefront's traffic: a live
browser page, a HAR export, or URLs copied by hand. The observer only
ever sees a plain URL string.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from src.capture.observer import ParameterObserver
from src.config.settings import Settings

logger = logging.getLogger("basket_search.taps")


class RequestTap(ABC):
    """Delivers outgoing request URLs to a ``ParameterObserver``."""

    def __init__(self, observer: ParameterObserver) -> None:
        self.observer = observer

    def emit(self, url: str) -> None:
        """Forward one URL to the observer."""
        self.observer.on_request(url)

    @abstractmethod
    def start(self) -> None:
        """Begin delivering requests."""
        ...


class UrlFeedTap(RequestTap):
    """Replays a fixed list of request URLs."""

    def __init__(
        self, observer: ParameterObserver, urls: Iterable[str],
    ) -> None:
        super().__init__(observer)
        self.urls = list(urls)

    def start(self) -> None:
        """Feed every URL to the observer, in order."""
        for url in self.urls:
            self.emit(url)
        logger.info("Replayed %d request URLs", len(self.urls))

    @classmethod
    def from_har(
        cls, observer: ParameterObserver, path: Path,
    ) -> "UrlFeedTap":
        """Build a feed from every request recorded in a HAR file."""
        with open(path, encoding="utf-8") as f:
            har: dict[str, Any] = json.load(f)
        entries: list[dict[str, Any]] = (
            har.get("log", {}).get("entries", [])
        )
        urls = [
            str(entry["request"]["url"])
            for entry in entries
            if isinstance(entry.get("request"), dict)
            and "url" in entry["request"]
        ]
        logger.debug("Loaded %d request URLs from %s", len(urls), path)
        return cls(observer, urls)


class PlaywrightRequestTap(RequestTap):
    """Network-layer hook on a Playwright page.

    Playwright fires ``request`` before the request leaves the
    browser; the handler only reads ``request.url``.
    """

    def __init__(self, observer: ParameterObserver, page: Any) -> None:
        super().__init__(observer)
        self.page = page
        self._handler: Callable[[Any], None] | None = None

    def _on_request(self, request: Any) -> None:
        self.emit(request.url)

    def start(self) -> None:
        """Subscribe to the page's ``request`` event."""
        if self._handler is not None:
            return
        self._handler = self._on_request
        self.page.on("request", self._handler)

    def stop(self) -> None:
        """Unsubscribe from the page."""
        if self._handler is None:
            return
        self.page.remove_listener("request", self._handler)
        self._handler = None


async def capture_with_browser(
    observer: ParameterObserver,
    timeout: float | None = None,
    poll_interval: float = 0.5,
) -> bool:
    """Open the storefront in a visible browser and wait for readiness.

    The user browses normally (sets a location, runs a search); the tap
    captures parameters from the page's own API calls. Returns ``True``
    once the context is ready, ``False`` if ``timeout`` elapses first.
    """
    from playwright.async_api import async_playwright

    limit = timeout if timeout is not None else (
        Settings.BROWSER_CAPTURE_TIMEOUT
    )
    loop = asyncio.get_running_loop()
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=False)
        try:
            page = await browser.new_page()
            tap = PlaywrightRequestTap(observer, page)
            tap.start()
            await page.goto(Settings.HOST_PAGE_URL)
            logger.info(
                "Waiting up to %.0fs for search parameters", limit
            )
            started = loop.time()
            while not observer.context.is_ready():
                if loop.time() - started >= limit:
                    logger.warning(
                        "Browser capture timed out after %.0fs", limit
                    )
                    break
                await asyncio.sleep(poll_interval)
            tap.stop()
        finally:
            await browser.close()
    return observer.context.is_ready()
