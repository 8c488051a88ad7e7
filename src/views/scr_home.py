from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Label, Markdown

from db import crud
from db.documents import RemoteError
from utils.messages import ProductsChangedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen
from views.modal_prod_detail import ProdDetailModal

# (featured tag, section title)
SECTIONS = [
    ("best-selling", "Best Selling"),
    ("trending-now", "Trending Now"),
]


class HomeScreen(BaseScreen):
    """
    Landing page: a banner and the featured collections.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll(id="vertscroll-home"):
            yield Markdown(
                f"# {self.app.STORE_NAME}\n\n"
                "Comfortable everyday apparel: hoodies, shirts, track pants and more.",
                id="md-banner",
            )
            with Horizontal(id="hort-home-btns"):
                yield Button("Shop All", id="btn-shop-all", variant="primary")
                yield Button("Contact Us", id="btn-contact")
            for tag, title in SECTIONS:
                yield Label(title, classes="section-title")
                yield DataTable(id=f"table-{tag}", classes="table-featured")
                yield Label(
                    "Nothing here yet.", id=f"label-empty-{tag}", classes="hint"
                )

    def on_mount(self):
        for tag, _ in SECTIONS:
            table = self.query_one(f"#table-{tag}", DataTable)
            table.cursor_type = "row"
            table.add_columns("Name", "Category", "Price")
        self.load_featured()

    @on(ScreenResume)
    @on(ProductsChangedMessage)
    @work(exclusive=True)
    async def load_featured(self) -> None:
        for tag, title in SECTIONS:
            try:
                products = await crud.get_featured_products(tag)
            except RemoteError:
                self.notify(f"Failed to load {title.lower()} products.", severity="error")
                products = []

            table = self.query_one(f"#table-{tag}", DataTable)
            table.clear()
            for p in products:
                table.add_row(p.name, p.category, format_price(p.price), key=p.id)
            table.display = bool(products)
            self.query_one(f"#label-empty-{tag}").display = not products

    @on(DataTable.RowSelected)
    @work
    async def handle_view_product(self, event: DataTable.RowSelected) -> None:
        await self.app.push_screen_wait(ProdDetailModal(event.row_key.value))

    @on(Button.Pressed, "#btn-shop-all")
    async def handle_shop_all(self):
        await self.app.switch_mode("shop")

    @on(Button.Pressed, "#btn-contact")
    async def handle_contact(self):
        await self.app.switch_mode("contact")
