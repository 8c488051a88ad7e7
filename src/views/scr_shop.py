from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.reactive import reactive
from textual.widgets import Button, DataTable, Input, Label, Select

from db import crud
from db.documents import RemoteError
from db.models import Product
from utils.messages import ProductsChangedMessage
from utils.pure import (
    ALL_CATEGORIES,
    ANY_SIZE,
    SIZE_OPTIONS,
    SORT_OPTIONS,
    category_options,
    filter_products,
    format_price,
)
from views.base_screen import BaseScreen
from views.modal_prod_detail import ProdDetailModal


class ShopScreen(BaseScreen):
    """
    Shop all: the whole catalog, narrowed by search, category and size,
    optionally sorted by price.
    """

    BINDINGS = [
        Binding("enter", "noop", "View Product", show=True, key_display="⏎"),
        Binding("ctrl+r", "reset_filters", "Reset Filters", show=True),
    ]

    query_str = reactive("")
    category = reactive(ALL_CATEGORIES)
    size = reactive(ANY_SIZE)
    sort = reactive("relevance")

    def __init__(self):
        super().__init__()
        self._products: List[Product] = []
        self._loading = True

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-shop"):
            with Horizontal(id="div-filters"):
                yield Input(id="input-search", placeholder="Search products...")
                yield Select(
                    [(c, c) for c in category_options([])],
                    value=ALL_CATEGORIES,
                    allow_blank=False,
                    id="select-category",
                )
                yield Select(
                    [(s, s) for s in SIZE_OPTIONS],
                    value=ANY_SIZE,
                    allow_blank=False,
                    id="select-size",
                )
                yield Select(
                    [(label, key) for key, label in SORT_OPTIONS.items()],
                    value="relevance",
                    allow_blank=False,
                    id="select-sort",
                )
                yield Button("Reset filters", id="btn-reset")
            yield Label("Loading...", id="label-result-count")
            yield DataTable(id="table-products")
            yield Label("No products found.", id="label-empty")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Category", "Price", "Sizes", "Stock")
        self.query_one("#label-empty").display = False

        self.load_products()
        self.query_one("#input-search").focus()

    @on(ScreenResume)
    @on(ProductsChangedMessage)
    @work(exclusive=True, group="load")
    async def load_products(self) -> None:
        self._loading = True
        self.query_one("#label-result-count", Label).update("Loading...")
        try:
            self._products = await crud.get_all_products()
        except RemoteError as e:
            self.notify(e.message, severity="error")
            self._products = []
        self._loading = False

        select_category = self.query_one("#select-category", Select)
        select_category.set_options([(c, c) for c in category_options(self._products)])
        # set_options drops the selection
        if self.category in category_options(self._products):
            select_category.value = self.category
        else:
            self.category = ALL_CATEGORIES
        self.render_results()

    def render_results(self) -> None:
        if self._loading:
            return
        results = filter_products(
            self._products, self.query_str, self.category, self.size, self.sort
        )

        table = self.query_one(DataTable)
        table.clear()
        for p in results:
            table.add_row(
                p.name,
                p.category,
                format_price(p.price),
                ", ".join(p.sizes),
                p.stock if p.in_stock else "Out of stock",
                key=p.id,
            )

        self.query_one("#label-result-count", Label).update(f"{len(results)} results")
        self.query_one("#label-empty").display = not results
        table.display = bool(results)

    def watch_query_str(self) -> None:
        self.render_results()

    def watch_category(self) -> None:
        self.render_results()

    def watch_size(self) -> None:
        self.render_results()

    def watch_sort(self) -> None:
        self.render_results()

    @on(Input.Changed, "#input-search")
    def handle_search(self, message: Input.Changed) -> None:
        self.query_str = message.value

    @on(Select.Changed)
    def handle_select(self, message: Select.Changed) -> None:
        if message.value is Select.BLANK:
            return
        if message.select.id == "select-category":
            self.category = message.value
        elif message.select.id == "select-size":
            self.size = message.value
        elif message.select.id == "select-sort":
            self.sort = message.value

    @on(Button.Pressed, "#btn-reset")
    def action_reset_filters(self) -> None:
        self.query_one("#input-search", Input).value = ""
        self.query_one("#select-category", Select).value = ALL_CATEGORIES
        self.query_one("#select-size", Select).value = ANY_SIZE
        self.query_one("#select-sort", Select).value = "relevance"

    def action_noop(self) -> None:
        pass

    @on(DataTable.RowSelected)
    @work
    async def handle_view_product(self, event: DataTable.RowSelected) -> None:
        await self.app.push_screen_wait(ProdDetailModal(event.row_key.value))
