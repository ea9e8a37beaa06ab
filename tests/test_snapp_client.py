# tests/test_snapp_client.py

"""Tests for SnappSearchClient using mocked HTTP responses."""

import json
import unittest
from typing import Any
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

from builders import load_fixture, ready_context

from src.models.errors import ContextNotInitialized, TransportFailure
from src.models.search_context import CapturedParams, SearchContext
from src.models.vendor import ProductQuery
from src.scrapers.snapp_client import SnappSearchClient

SESSION_PATH = "src.scrapers.snapp_client.curl_requests.Session"


def _mock_response(
    data: Any = None, status_code: int = 200, text: str | None = None,
) -> MagicMock:
    """Build a fake curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text if text is not None else json.dumps(data)
    return resp


class TestBuildUrl(unittest.TestCase):
    """build_url() composes the search request from context values."""

    def test_query_string_fields(self) -> None:
        client = SnappSearchClient(ready_context())
        url = client.build_url(ProductQuery(name="شیر"))
        parsed = urlparse(url)
        qs = parse_qs(parsed.query)
        self.assertEqual(
            f"{parsed.scheme}://{parsed.netloc}{parsed.path}",
            "https://api.snapp.express/mobile/v3/search",
        )
        self.assertEqual(qs["query"], ["شیر"])
        self.assertEqual(qs["superType"], ["[4]"])
        self.assertEqual(qs["page"], ["0"])
        self.assertEqual(qs["size"], ["20"])
        self.assertEqual(qs["lat"], ["35.737"])
        self.assertEqual(qs["long"], ["51.395"])
        self.assertEqual(
            qs["UDID"], ["3cba87c6-e238-4852-86d7-0352fec57794"]
        )
        self.assertEqual(qs["deviceType"], ["PWA"])

    def test_not_ready_raises(self) -> None:
        client = SnappSearchClient(SearchContext())
        with self.assertRaises(ContextNotInitialized):
            client.build_url(ProductQuery(name="milk"))

    def test_reads_context_at_call_time(self) -> None:
        """A context update between calls changes the next request."""
        context = ready_context()
        client = SnappSearchClient(context)
        first = client.build_url(ProductQuery(name="milk"))
        context.update(CapturedParams(lat="36.3", long="59.6"))
        second = client.build_url(ProductQuery(name="milk"))
        self.assertIn("lat=35.737", first)
        self.assertIn("lat=36.3", second)


class TestProductQuery(unittest.TestCase):

    def test_negative_page_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ProductQuery(name="milk", page_index=-1)


class TestExtractVendors(unittest.TestCase):
    """extract_vendors() walks data.vendor_product_variations.items."""

    def test_parses_fixture(self) -> None:
        vendors = SnappSearchClient.extract_vendors(
            load_fixture("snapp_search_milk.json")
        )
        self.assertEqual([v.vendor_id for v in vendors], [101, 102])
        self.assertEqual(vendors[0].title, "Shahrvand Market")
        self.assertEqual(vendors[0].delivery_fee, 15000.0)
        self.assertEqual(vendors[0].code, "v1code")
        self.assertEqual(
            vendors[0].matched_product["title"], "Pasteurized Milk 1L"
        )

    def test_missing_path_is_empty(self) -> None:
        for payload in (
            {},
            {"data": None},
            {"data": {"vendor_product_variations": None}},
            {"data": {"vendor_product_variations": {}}},
        ):
            with self.subTest(payload=payload):
                self.assertEqual(
                    SnappSearchClient.extract_vendors(payload), []
                )


class TestSearch(unittest.IsolatedAsyncioTestCase):
    """search() fetches, decodes and raises typed errors."""

    @patch(SESSION_PATH)
    async def test_search_returns_vendors(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.return_value = _mock_response(
            load_fixture("snapp_search_bread.json")
        )

        client = SnappSearchClient(ready_context())
        vendors = await client.search("bread")

        self.assertEqual([v.vendor_id for v in vendors], [101, 103])
        mock_session.get.assert_called_once()
        mock_session.close.assert_called_once()
        url = mock_session.get.call_args.args[0]
        self.assertIn("query=bread", url)

    @patch(SESSION_PATH)
    async def test_not_ready_fails_before_network(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """The readiness guard runs before any session is created."""
        client = SnappSearchClient(SearchContext())
        with self.assertRaises(ContextNotInitialized):
            await client.search("milk")
        mock_session_cls.assert_not_called()

    @patch(SESSION_PATH)
    async def test_http_error_raises_transport_failure(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.return_value = _mock_response(
            {}, status_code=503
        )

        client = SnappSearchClient(ready_context())
        with self.assertRaises(TransportFailure) as ctx:
            await client.search("milk")
        self.assertEqual(ctx.exception.status_code, 503)

    @patch(SESSION_PATH)
    async def test_network_error_raises_transport_failure(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.side_effect = ConnectionError("reset")

        client = SnappSearchClient(ready_context())
        with self.assertRaises(TransportFailure):
            await client.search("milk")
        mock_session.close.assert_called_once()
        self.assertEqual(mock_session.get.call_count, 1)

    @patch(SESSION_PATH)
    async def test_non_json_body_raises_transport_failure(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.return_value = _mock_response(
            text="<html>maintenance</html>"
        )

        client = SnappSearchClient(ready_context())
        with self.assertRaises(TransportFailure):
            await client.search("milk")

    async def test_blank_name_rejected(self) -> None:
        client = SnappSearchClient(ready_context())
        with self.assertRaises(ValueError):
            await client.search("   ")


if __name__ == "__main__":
    unittest.main()
