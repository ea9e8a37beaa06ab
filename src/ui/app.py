# src/ui/app.py

"""Terminal UI: enter a shopping list, see who stocks all of it."""

import logging
import webbrowser
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    ListItem,
    ListView,
    Static,
)

from src.capture.taps import capture_with_browser
from src.models.vendor import ResultVendor
from src.services.basket_service import BasketService
from src.ui.formatting import (
    format_delivery_fee,
    format_delivery_time,
    format_matched_products,
    format_rating,
)

logger = logging.getLogger("basket_search.ui")

_READY_TEXT = "🟢 Search context ready"
_NOT_READY_TEXT = (
    "🟡 Search context not ready: press Ctrl+B to open the storefront"
)


class BasketSearchApp(App[object]):
    """Terminal UI for the basket_search vendor finder."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+r", "remove_product", "Remove product"),
        Binding("ctrl+l", "clear_products", "Clear list"),
        Binding("ctrl+b", "capture", "Browser capture"),
    ]

    def __init__(self, service: BasketService | None = None) -> None:
        super().__init__()
        self.service = service or BasketService()
        self.products: list[str] = []
        self.vendors: list[ResultVendor] = []
        self.status_text: str = ""

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🛒 Basket vendor finder", id="title"),
            Horizontal(
                Input(placeholder="Product name", id="product_input"),
                Button("Add", id="add_btn"),
                Button("Find stores", variant="primary", id="search_btn"),
                id="input_bar",
            ),
            ListView(id="product_list"),
            Static(id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the results table and show readiness."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.add_columns(
            "Vendor", "Products", "Delivery fee", "Time", "Rating", "Address"
        )
        self.refresh_status()

    def set_status(self, text: str) -> None:
        self.status_text = text
        self.query_one("#status", Static).update(text)

    def refresh_status(self) -> None:
        """Show the readiness gate in the status line."""
        self.set_status(
            _READY_TEXT if self.service.is_ready() else _NOT_READY_TEXT
        )

    # ── Product list ─────────────────────────────────────

    def add_product(self, name: str) -> bool:
        """Append ``name`` to the list unless blank or already present."""
        name = name.strip()
        if not name or name in self.products:
            return False
        self.products.append(name)
        self.query_one("#product_list", ListView).append(
            ListItem(Label(name))
        )
        return True

    def action_remove_product(self) -> None:
        """Remove the highlighted product (or the last one)."""
        if not self.products:
            return
        list_view = self.query_one("#product_list", ListView)
        index = list_view.index
        if index is None or not 0 <= index < len(self.products):
            index = len(self.products) - 1
        self.products.pop(index)
        list_view.pop(index)

    def action_clear_products(self) -> None:
        self.products.clear()
        self.query_one("#product_list", ListView).clear()

    # ── Events ───────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "add_btn":
            self._add_from_input()
        elif event.button.id == "search_btn":
            await self.perform_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter adds the typed product; Enter on an empty box searches."""
        if event.input.id != "product_input":
            return
        if event.value.strip():
            self._add_from_input()
        else:
            await self.perform_search()

    def _add_from_input(self) -> None:
        product_input = self.query_one("#product_input", Input)
        self.add_product(product_input.value)
        product_input.value = ""

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the selected vendor's storefront page."""
        if 0 <= event.cursor_row < len(self.vendors):
            url = self.vendors[event.cursor_row].url
            if url:
                webbrowser.open(url)

    # ── Search ───────────────────────────────────────────

    async def perform_search(self) -> None:
        """Run the basket search for the current product list."""
        self._add_from_input()
        if not self.products:
            self.notify("Add at least one product", severity="warning")
            return
        if not self.service.is_ready():
            self.refresh_status()
            self.notify(
                "Search context not ready yet", severity="error"
            )
            return

        self.set_status(
            f"🔍 Searching {len(self.products)} products..."
        )
        outcome = await self.service.find_stores(list(self.products))

        if not outcome.ok:
            self.vendors = []
            self.populate_table()
            self.set_status(f"❌ {outcome.error}")
            self.notify(outcome.error, severity="error")
            return

        self.vendors = outcome.vendors
        self.populate_table()
        if self.vendors:
            self.set_status(
                f"✅ {len(self.vendors)} vendors carry all "
                f"{len(outcome.products)} products"
            )
        else:
            self.set_status("❌ No vendor carries every product")

    def populate_table(self) -> None:
        """Fill the DataTable in engine order (cheapest delivery first)."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.clear()
        for idx, v in enumerate(self.vendors):
            fee_style = "bold green" if idx == 0 else ""
            table.add_row(
                v.title[:40],
                format_matched_products(v, separator=", "),
                Text(format_delivery_fee(v.delivery_fee), style=fee_style),
                format_delivery_time(v.delivery_time),
                f"⭐ {format_rating(v.rating)}",
                v.address[:50],
            )

    async def action_capture(self) -> None:
        """Open the storefront in a browser and capture parameters."""
        if self.service.is_ready():
            self.notify("Search context is already ready")
            return
        self.set_status(
            "🌐 Browse the storefront to capture search parameters..."
        )
        try:
            await capture_with_browser(self.service.observer)
        except Exception as exc:
            logger.error("Browser capture failed", exc_info=True)
            self.notify(f"Browser capture failed: {exc}", severity="error")
        self.refresh_status()
