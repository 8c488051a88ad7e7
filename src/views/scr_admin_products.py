import asyncio
from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, ListItem, ListView

from db import crud
from db.documents import RemoteError
from db.models import Category, Product
from utils.messages import ProductsChangedMessage
from utils.pure import format_price
from views.base_screen import AdminScreen
from views.modal_dialog import DialogModal
from views.modal_edit_product import EditProductModal


class AdminProductsScreen(AdminScreen):
    """
    Product and category management. Edits and deletes go to the store
    first; the local list follows only when the write succeeded.
    """

    BINDINGS = [
        Binding("enter", "noop", "Edit Product", show=True, key_display="⏎"),
        Binding("delete", "delete_product", "Delete Product", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._products: List[Product] = []
        self._categories: List[Category] = []
        # set while an edit or delete is open; a resume refresh would race it
        self._writing = False

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-admin-products"):
            with Vertical(id="div-products"):
                yield Label("Products", classes="section-title")
                yield DataTable(id="table-products")
                yield Label("No products found.", id="label-empty")
                with Horizontal(id="hort-product-btns"):
                    yield Button("Refresh", id="btn-refresh")
                    yield Button("Edit", id="btn-edit")
                    yield Button("Delete", id="btn-delete", variant="error")
                    yield Button("Add Product", id="btn-add", variant="primary")
            with Vertical(id="div-categories"):
                yield Label("Categories", classes="section-title")
                yield ListView(id="list-categories")
                yield Input(placeholder="New category", id="input-new-category")
                yield Button("Add Category", id="btn-add-category")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Category", "Price", "Stock", "Sizes", "Featured")
        self.handle_refresh()

    @on(Button.Pressed, "#btn-refresh")
    @on(ScreenResume)
    @on(ProductsChangedMessage)
    @work(exclusive=True, group="load")
    async def handle_refresh(self) -> None:
        if not self.app.state.is_admin or self._writing:
            return
        try:
            self._products, self._categories = await asyncio.gather(
                crud.get_all_products(), crud.get_all_categories()
            )
        except RemoteError as e:
            self.notify(e.message, severity="error")
        self.render_products()
        await self.render_categories()

    def render_products(self) -> None:
        table = self.query_one(DataTable)
        cursor = table.cursor_row
        table.clear()
        for p in self._products:
            table.add_row(
                p.name,
                p.category,
                format_price(p.price),
                p.stock if p.in_stock else "Out of stock",
                ", ".join(p.sizes),
                p.featured,
                key=p.id,
            )
        table.display = bool(self._products)
        self.query_one("#label-empty").display = not self._products
        if self._products and cursor is not None:
            table.move_cursor(row=min(cursor, len(self._products) - 1))

    async def render_categories(self) -> None:
        list_view = self.query_one("#list-categories", ListView)
        await list_view.clear()
        await list_view.extend([ListItem(Label(c.name)) for c in self._categories])

    def selected_product(self) -> Optional[Product]:
        table = self.query_one(DataTable)
        if not self._products or table.cursor_row is None:
            return None
        if table.cursor_row >= len(self._products):
            return None
        return self._products[table.cursor_row]

    def action_noop(self) -> None:
        pass

    @on(DataTable.RowSelected)
    @on(Button.Pressed, "#btn-edit")
    @work(exclusive=True, group="write")
    async def handle_edit(self) -> None:
        self._writing = True
        try:
            await self._edit_selected()
        finally:
            self._writing = False

    async def _edit_selected(self) -> None:
        product = self.selected_product()
        if product is None:
            self.notify("No product selected.", severity="warning")
            return

        edited = await self.app.push_screen_wait(
            EditProductModal(product, [c.name for c in self._categories])
        )
        if edited is None or edited == product:
            return

        try:
            await crud.update_product(product.id, edited.to_document())
        except RemoteError as e:
            self.notify(e.message, severity="error")
            return

        self._products = [edited if p.id == product.id else p for p in self._products]
        self.render_products()
        self.notify("Product updated successfully.")

    @on(Button.Pressed, "#btn-delete")
    @work(exclusive=True, group="write")
    async def action_delete_product(self) -> None:
        self._writing = True
        try:
            await self._delete_selected()
        finally:
            self._writing = False

    async def _delete_selected(self) -> None:
        product = self.selected_product()
        if product is None:
            self.notify("No product selected.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Are you sure you want to delete {product.name}?",
                primary_text="Delete",
                secondary_text="Cancel",
                tone="error",
            )
        ):
            return

        try:
            await crud.delete_product(product.id)
        except RemoteError as e:
            self.notify(e.message, severity="error")
            return

        self._products = [p for p in self._products if p.id != product.id]
        self.render_products()
        self.notify("Product deleted.")

    @on(Button.Pressed, "#btn-add")
    async def handle_add(self) -> None:
        await self.app.switch_mode("admin_add")

    @on(Input.Submitted, "#input-new-category")
    @on(Button.Pressed, "#btn-add-category")
    @work(exclusive=True, group="category")
    async def handle_add_category(self) -> None:
        inp = self.query_one("#input-new-category", Input)
        name = inp.value.strip()
        if not name:
            self.notify("Please enter a category name.", severity="error")
            return
        if any(c.name == name for c in self._categories):
            self.notify(f"Category {name!r} already exists.", severity="warning")
            return

        try:
            category_id = await crud.add_category(name)
        except RemoteError as e:
            self.notify(e.message, severity="error")
            return

        self._categories = sorted(
            [*self._categories, Category(name=name, id=category_id)],
            key=lambda c: c.name,
        )
        await self.render_categories()
        inp.value = ""
        self.notify(f"Category {name!r} added.")
