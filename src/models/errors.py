# src/models/errors.py

"""Error taxonomy shared by the client, engine and presentation layer."""


class BasketSearchError(Exception):
    """Base class for every failure surfaced to the user."""

    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(BasketSearchError):
    """The product list was empty or held only blank names."""

    kind = "invalid_input"


class ContextNotInitialized(BasketSearchError):
    """Search parameters have not been captured from the host page yet."""

    kind = "context_not_initialized"

    def __init__(
        self,
        message: str = (
            "Search context is not ready: open the storefront and "
            "browse once so location and device parameters are captured"
        ),
    ) -> None:
        super().__init__(message)


class TransportFailure(BasketSearchError):
    """Network error, timeout or non-success HTTP status."""

    kind = "transport_failure"

    def __init__(
        self, message: str, status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class PartialSearchFailure(BasketSearchError):
    """One or more per-product searches failed, so no result is given."""

    kind = "partial_search_failure"

    def __init__(
        self,
        failed_products: list[str],
        causes: dict[str, BaseException] | None = None,
    ) -> None:
        super().__init__(
            "Failed to search for: " + ", ".join(failed_products)
        )
        self.failed_products = failed_products
        self.causes = causes or {}

    @property
    def context_missing(self) -> bool:
        """True when every failure was a readiness rejection."""
        return bool(self.causes) and all(
            isinstance(exc, ContextNotInitialized)
            for exc in self.causes.values()
        )
