# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import unittest

from builders import FakeClient, make_vendor, ready_context
from textual.widgets import DataTable, Input, ListView

from src.models.errors import TransportFailure
from src.models.search_context import SearchContext
from src.services.basket_service import BasketService
from src.services.intersection_engine import VendorIntersectionEngine
from src.ui.app import BasketSearchApp


def _app(
    client: FakeClient | None = None,
    context: SearchContext | None = None,
) -> BasketSearchApp:
    service = BasketService(
        context=context if context is not None else ready_context(),
        engine=VendorIntersectionEngine(
            client or FakeClient(), deadline=0
        ),
    )
    return BasketSearchApp(service)


class TestBasketSearchApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    async def test_app_composes_without_crash(self) -> None:
        app = _app()
        async with app.run_test() as pilot:
            app.query_one("#product_input", Input)
            app.query_one("#add_btn")
            app.query_one("#search_btn")
            app.query_one("#product_list", ListView)
            app.query_one("#results_table", DataTable)
            await pilot.pause()

    async def test_add_products(self) -> None:
        """Typed names are added once; blanks and duplicates are skipped."""
        app = _app()
        async with app.run_test() as pilot:
            self.assertTrue(app.add_product(" milk "))
            self.assertFalse(app.add_product("milk"))
            self.assertFalse(app.add_product("   "))
            await pilot.pause()
            self.assertEqual(app.products, ["milk"])

    async def test_empty_list_warns(self) -> None:
        client = FakeClient()
        app = _app(client)
        async with app.run_test(notifications=True) as pilot:
            await pilot.click("#search_btn")
            await pilot.pause()
            self.assertEqual(client.calls, [])

    async def test_not_ready_blocks_search(self) -> None:
        client = FakeClient()
        app = _app(client, context=SearchContext())
        async with app.run_test(notifications=True) as pilot:
            app.add_product("milk")
            await pilot.click("#search_btn")
            await pilot.pause()
            self.assertEqual(client.calls, [])
            self.assertIn("not ready", app.status_text)

    async def test_search_populates_table(self) -> None:
        client = FakeClient(
            responses={
                "milk": [
                    make_vendor(1, "m", fee=200.0),
                    make_vendor(2, "m", fee=100.0),
                ],
                "bread": [
                    make_vendor(1, "b", fee=200.0),
                    make_vendor(2, "b", fee=100.0),
                ],
            }
        )
        app = _app(client)
        async with app.run_test() as pilot:
            app.add_product("milk")
            app.add_product("bread")
            await pilot.click("#search_btn")
            await pilot.pause()
            table = app.query_one("#results_table", DataTable)
            self.assertEqual(table.row_count, 2)
            self.assertEqual(len(table.columns), 6)
            self.assertEqual(table.get_row_at(0)[1], "milk: m, bread: b")
            self.assertEqual(
                [v.vendor_id for v in app.vendors], [2, 1]
            )

    async def test_failed_search_clears_table(self) -> None:
        client = FakeClient(errors={"milk": TransportFailure("down")})
        app = _app(client)
        async with app.run_test(notifications=True) as pilot:
            app.add_product("milk")
            await pilot.click("#search_btn")
            await pilot.pause()
            table = app.query_one("#results_table", DataTable)
            self.assertEqual(table.row_count, 0)
            self.assertIn("Failed to search for: milk", app.status_text)

    async def test_remove_and_clear(self) -> None:
        app = _app()
        async with app.run_test() as pilot:
            app.add_product("milk")
            app.add_product("bread")
            await pilot.pause()
            app.action_remove_product()
            await pilot.pause()
            self.assertEqual(len(app.products), 1)
            app.action_clear_products()
            await pilot.pause()
            self.assertEqual(app.products, [])


if __name__ == "__main__":
    unittest.main()
