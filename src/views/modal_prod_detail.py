from typing import Optional

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, MarkdownViewer, Select

from db import crud
from db.documents import RemoteError
from db.models import CartLineItem, Product
from utils.pure import format_price, generate_markdown_table


class ProdDetailModal(ModalScreen[bool]):
    """
    Product detail with size and quantity pickers.
    Returns True if something was added to the cart, False if not.
    """

    order_qty = reactive(1)

    def __init__(self, product_id: str) -> None:
        super().__init__()

        self._product_id = product_id
        self._prod: Optional[Product] = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-prod-detail"):
            yield MarkdownViewer("Loading...", show_table_of_contents=False)
            with Vertical(id="div-prod-order"):
                yield Label("Size")
                yield Select([], prompt="Select a size", id="select-size")
                yield Label("Quantity")
                with Horizontal():
                    yield Button("-", id="btn-sub-qty")
                    yield Input(value="1", id="input-order-qty", type="integer")
                    yield Button("+", id="btn-add-qty")
                with Horizontal():
                    yield Button("Go Back", id="btn-quit")
                    yield Button("Add to Cart", id="btn-addcart", variant="primary")

    def on_mount(self):
        self.load_product()

    @work(exclusive=True)
    async def load_product(self) -> None:
        try:
            self._prod = await crud.get_product(self._product_id)
        except RemoteError:
            self.notify("Failed to fetch product details.", severity="error")
            self.dismiss(False)
            return
        if self._prod is None:
            self.notify("Product not found.", severity="error")
            self.dismiss(False)
            return

        prod = self._prod
        rows = [
            ["Price", format_price(prod.price)],
            ["Category", prod.category],
            ["Sizes", ", ".join(prod.sizes) or "-"],
            ["Stock", prod.stock if prod.in_stock else "Out of stock"],
        ]
        md = f"# {prod.name}\n\n" + generate_markdown_table(["", ""], rows, ["l", "l"])
        if prod.description:
            md += f"\n\n{prod.description}"
        if prod.images:
            md += "\n\n### Images\n\n" + "\n".join(
                f"- [{i + 1}]({url})" for i, url in enumerate(prod.images)
            )
        await self.query_one(MarkdownViewer).document.update(md)

        self.query_one("#select-size", Select).set_options([(s, s) for s in prod.sizes])

        if not prod.in_stock:
            order_btn = self.query_one("#btn-addcart", Button)
            order_btn.label = "Out of Stock"
            order_btn.disabled = True
            order_btn.variant = "warning"
        else:
            self.query_one("#input-order-qty").validators = [
                Number(minimum=1, maximum=prod.stock)
            ]
        self.watch_order_qty(self.order_qty)
        self.query_one("#select-size").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    async def on_input_changed(self, message: Input.Changed) -> None:
        if (
            message.input.id == "input-order-qty"
            and message.value
            and message.input.is_valid
            and self.focused == message.input
        ):
            self.order_qty = int(message.value)

    def validate_order_qty(self, qty: int) -> int:
        upper = self._prod.stock if self._prod and self._prod.in_stock else 1
        return max(1, min(qty, upper))

    def watch_order_qty(self, qty: int):
        btn_sub_qty = self.query_one("#btn-sub-qty", Button)
        btn_add_qty = self.query_one("#btn-add-qty", Button)

        btn_sub_qty.disabled = qty <= 1
        btn_add_qty.disabled = self._prod is None or qty >= self._prod.stock

        input_order_qty = self.query_one("#input-order-qty", Input)
        if input_order_qty.value != str(qty):
            input_order_qty.value = str(qty)

    @on(Button.Pressed, "#btn-add-qty")
    def handle_add_qty(self):
        self.order_qty += 1

    @on(Button.Pressed, "#btn-sub-qty")
    def handle_sub_qty(self):
        self.order_qty -= 1

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)

    @on(Button.Pressed, "#btn-addcart")
    def handle_addcart(self):
        if self._prod is None:
            return
        size = self.query_one("#select-size", Select).value
        if size is Select.BLANK:
            self.notify("Please select a size.", severity="error")
            self.query_one("#select-size").focus()
            return

        self.app.state.cart.add_item(
            CartLineItem(
                id=self._prod.id,
                name=self._prod.name,
                price=self._prod.price,
                image=self._prod.cover_image,
                size=size,
            ),
            self.order_qty,
        )
        self.app.notify(f"Added {self.order_qty} x {self._prod.name} ({size}) to cart.")
        self.dismiss(True)
