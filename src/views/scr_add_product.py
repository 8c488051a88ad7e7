from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import ScreenResume
from textual.validation import Number
from textual.widgets import Button, Input, Label, Select, SelectionList, TextArea

from db import crud, storage
from db.documents import RemoteError
from db.models import FEATURED_TAGS, PRODUCT_SIZES, Product
from utils.logger import get_logger
from utils.messages import ProductsChangedMessage
from utils.validation import (
    MAX_PRODUCT_IMAGES,
    ValidationError,
    parse_product_form,
)
from views.base_screen import AdminScreen

_logger = get_logger(__name__)


def split_paths(raw: str) -> List[str]:
    """Image paths, one per line or comma separated."""
    parts = raw.replace(",", "\n").splitlines()
    return [p.strip() for p in parts if p.strip()]


class AddProductScreen(AdminScreen):
    """
    Product form: uploads the images, then creates the product.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll(id="vertscroll-add-product"):
            with Horizontal():
                with Vertical():
                    yield Label("Product Name *")
                    yield Input(placeholder="Oversized Hoodie", id="input-name")
                    yield Label("Price (PKR) *")
                    yield Input(
                        placeholder="2500",
                        type="number",
                        validators=[Number(minimum=0.01)],
                        id="input-price",
                    )
                    yield Label("Stock *")
                    yield Input(
                        placeholder="10",
                        type="integer",
                        validators=[Number(minimum=0)],
                        id="input-stock",
                    )
                    yield Label("Category *")
                    yield Select([], prompt="Select a category", id="select-category")
                    with Horizontal(id="div-new-category"):
                        yield Input(placeholder="New category", id="input-new-category")
                        yield Button("Add", id="btn-add-category")
                    yield Label("Featured")
                    yield Select(
                        [(t, t) for t in FEATURED_TAGS],
                        value="none",
                        allow_blank=False,
                        id="select-featured",
                    )
                with Vertical():
                    yield Label("Sizes *")
                    yield SelectionList[str](
                        *[(s, s) for s in PRODUCT_SIZES], id="sellist-sizes"
                    )
                    yield Label(
                        f"Image files * (up to {MAX_PRODUCT_IMAGES}, max 5MB each)"
                    )
                    yield TextArea(id="textarea-images")
                    yield Label("Description")
                    yield TextArea(id="textarea-description")
            with Horizontal(id="hort-add-product-btns"):
                yield Button("Cancel", id="btn-cancel")
                yield Button("Add Product", id="btn-submit", variant="primary")

    def on_mount(self) -> None:
        self.load_categories()
        self.query_one("#input-name").focus()

    @on(ScreenResume)
    @work(exclusive=True, group="categories")
    async def load_categories(self) -> None:
        if not self.app.state.is_admin:
            return
        try:
            categories = await crud.get_all_categories()
        except RemoteError as e:
            self.notify(e.message, severity="error")
            return
        select = self.query_one("#select-category", Select)
        current = select.value
        names = [c.name for c in categories]
        select.set_options([(n, n) for n in names])
        if current in names:
            select.value = current

    @on(Button.Pressed, "#btn-add-category")
    @work(exclusive=True, group="categories")
    async def handle_add_category(self) -> None:
        inp = self.query_one("#input-new-category", Input)
        name = inp.value.strip()
        if not name:
            self.notify("Please enter a category name.", severity="error")
            return
        try:
            await crud.add_category(name)
            categories = await crud.get_all_categories()
        except RemoteError as e:
            self.notify(e.message, severity="error")
            return
        select = self.query_one("#select-category", Select)
        select.set_options([(c.name, c.name) for c in categories])
        select.value = name
        inp.value = ""
        self.notify(f"Category {name!r} added.")

    def _reset_form(self) -> None:
        for input_id in ("#input-name", "#input-price", "#input-stock"):
            self.query_one(input_id, Input).value = ""
        self.query_one("#select-category", Select).clear()
        self.query_one("#select-featured", Select).value = "none"
        self.query_one("#sellist-sizes", SelectionList).deselect_all()
        self.query_one("#textarea-images", TextArea).text = ""
        self.query_one("#textarea-description", TextArea).text = ""

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True, group="submit")
    async def handle_submit(self) -> None:
        name = self.query_one("#input-name", Input).value.strip()
        category = self.query_one("#select-category", Select).value
        if category is Select.BLANK:
            category = None
        sizes = self.query_one("#sellist-sizes", SelectionList).selected
        paths = split_paths(self.query_one("#textarea-images", TextArea).text)

        try:
            price, stock = parse_product_form(
                name,
                self.query_one("#input-price", Input).value.strip(),
                self.query_one("#input-stock", Input).value.strip(),
                category,
                sizes,
                len(paths),
            )
            for path in paths:
                storage.validate_image_file(path)
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return

        btn = self.query_one("#btn-submit", Button)
        btn.disabled = True
        btn.label = "Adding Product..."
        try:
            urls = [await storage.upload_image_file(path) for path in paths]
            product_id = await crud.add_product(
                Product(
                    name=name,
                    price=price,
                    category=category,
                    sizes=[s for s in PRODUCT_SIZES if s in sizes],
                    stock=stock,
                    description=self.query_one(
                        "#textarea-description", TextArea
                    ).text.strip(),
                    images=urls,
                    featured=self.query_one("#select-featured", Select).value,
                )
            )
        except (ValidationError, RemoteError) as e:
            self.notify(str(e), severity="error")
            return
        finally:
            btn.disabled = False
            btn.label = "Add Product"

        _logger.info(f"Product {product_id} added with {len(urls)} image(s)")
        self.notify("Product added successfully!")
        self._reset_form()
        self.app.broadcast(ProductsChangedMessage)
        await self.app.switch_mode("admin_products")

    @on(Button.Pressed, "#btn-cancel")
    async def handle_cancel(self) -> None:
        self._reset_form()
        await self.app.switch_mode("admin_products")
