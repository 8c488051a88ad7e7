from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, HorizontalGroup, VerticalScroll
from textual.events import ScreenResume
from textual.message import Message
from textual.widgets import Button, Input, Label, Rule

from db.models import CartLineItem
from utils.messages import CartChangedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen
from views.modal_checkout import CheckoutModal
from views.modal_dialog import DialogModal


class CartItemRemoveMessage(Message):
    bubble = True

    def __init__(self, index: int) -> None:
        super().__init__()
        self.index = index


class CartItemQtyMessage(Message):
    bubble = True

    def __init__(self, index: int, quantity: float) -> None:
        super().__init__()
        self.index = index
        self.quantity = quantity


class CartItemWidget(HorizontalGroup):
    """One line item. Knows its position, the cart works by index."""

    def __init__(self, index: int, item: CartLineItem):
        super().__init__()

        self.index = index
        self.item = item

    def compose(self):
        with Container(id="div-cart-item-group"):
            with Container(id="div-item"):
                yield Label(self.item.name, id="label-item-name")
                yield Label(f"Size: {self.item.size or '-'}", id="label-item-size")
                yield Label(format_price(self.item.price), id="label-item-price")
            with Horizontal(id="div-actions"):
                yield Button("-", id="btn-item-sub")
                yield Input(
                    value=str(self.item.quantity),
                    type="integer",
                    id="input-item-qty",
                )
                yield Button("+", id="btn-item-add")
                yield Label(
                    format_price(self.item.price * self.item.quantity),
                    id="label-item-subtotal",
                )
                yield Button("Remove", id="btn-item-remove", variant="error")

    def on_mount(self):
        self.query_one("#btn-item-sub").disabled = self.item.quantity <= 1

    @on(Button.Pressed, "#btn-item-add")
    def handle_add(self):
        self.post_message(CartItemQtyMessage(self.index, self.item.quantity + 1))

    @on(Button.Pressed, "#btn-item-sub")
    def handle_sub(self):
        self.post_message(CartItemQtyMessage(self.index, self.item.quantity - 1))

    @on(Input.Submitted, "#input-item-qty")
    def handle_qty_submitted(self, message: Input.Submitted):
        if not message.value.lstrip("-").isdigit():
            return
        self.post_message(CartItemQtyMessage(self.index, int(message.value)))

    @on(Button.Pressed, "#btn-item-remove")
    @work()
    async def handle_remove_item(self):
        remove_confirmed = await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove this item from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        )
        if remove_confirmed:
            self.post_message(CartItemRemoveMessage(self.index))


class CartScreen(BaseScreen):
    """
    Line items with quantity editing, the cart total, and checkout.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield VerticalScroll(id="vertscroll-content")
        yield Label("Your cart is empty.", id="label-cart-empty")
        yield Label("Total Cart Value: PKR 0.00", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Continue Shopping", id="btn-shop")
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    async def on_mount(self):
        self.handle_cart_change()

    @on(CartChangedMessage)
    @on(ScreenResume)
    @work(exclusive=True)  # must exclusive, else might race cond and gen duplicate
    async def handle_cart_change(self):
        cart = self.app.state.cart
        items = cart.items

        content = self.query_one("#vertscroll-content")
        await content.remove_children()
        await content.mount_all(
            [CartItemWidget(i, item) for i, item in enumerate(items)]
        )

        content.display = bool(items)
        self.query_one("#label-cart-empty").display = not items
        self.query_one("#btn-checkout").disabled = not items
        self.query_one("#label-cart-total", Label).update(
            f"Total Cart Value: {format_price(cart.total)} ({cart.item_count} items)"
        )

    @on(CartItemQtyMessage)
    def handle_qty_change(self, message: CartItemQtyMessage):
        # the store clamps to at least 1
        self.app.state.cart.update_quantity(message.index, message.quantity)

    @on(CartItemRemoveMessage)
    def handle_remove(self, message: CartItemRemoveMessage):
        self.app.state.cart.remove_item(message.index)
        self.notify("Item removed from cart.", severity="information")

    @on(Button.Pressed, "#btn-shop")
    async def handle_shop(self):
        await self.app.switch_mode("shop")

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        if not len(self.app.state.cart):
            self.app.notify("Cart is empty.", severity="warning")
            return

        remove_confirmed = await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove all items from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        )
        if remove_confirmed:
            self.app.state.cart.clear()

    @on(Button.Pressed, "#btn-checkout")
    @work()
    async def handle_checkout(self) -> None:
        if not len(self.app.state.cart):
            self.app.notify("Your cart is empty!", severity="warning")
            return

        if await self.app.push_screen_wait(CheckoutModal()):
            await self.app.switch_mode("home")
