from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, MarkdownViewer

from db.documents import RemoteError
from db.models import ShippingDetails
from utils.checkout import place_order
from utils.mailer import MailError
from utils.messages import OrderPlacedMessage
from utils.pure import format_price, generate_markdown_table
from utils.validation import ValidationError, validate_shipping
from views.modal_dialog import DialogModal, OrderConfirmationModal

# (input id, label, placeholder)
SHIPPING_FIELDS = [
    ("input-full-name", "Full Name", "Jane Doe"),
    ("input-phone", "Phone Number", "03001234567"),
    ("input-street", "Street Address", "House 12, Street 4"),
    ("input-city", "City", "Lahore"),
    ("input-zip", "Zip Code", "54000"),
    ("input-email", "Email", "you@example.com"),
]


class CheckoutModal(ModalScreen[bool]):
    """
    Order summary plus the shipping form.
    Return True once the order is placed, False otherwise.
    """

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-checkout"):
            yield MarkdownViewer("", show_table_of_contents=False)
            with VerticalScroll(id="div-shipping"):
                yield Label("Shipping Details", id="label-shipping-title")
                for input_id, label, placeholder in SHIPPING_FIELDS:
                    yield Label(label)
                    yield Input(placeholder=placeholder, id=input_id)
                with Vertical():
                    with Horizontal():
                        yield Button("Go Back", id="btn-quit")
                        yield Button("Place Order", id="btn-submit", variant="primary")

    async def on_mount(self):
        cart = self.app.state.cart
        headers = ["Product", "Size", "Unit Price", "Quantity", "Total Price"]
        rows = [
            [
                item.name,
                item.size or "-",
                format_price(item.price),
                item.quantity,
                format_price(item.price * item.quantity),
            ]
            for item in cart.items
        ]
        aligns = ["l", "c", "r", "c", "r"]
        header_md = "### Order Summary\n\n"
        md = generate_markdown_table(headers, rows, aligns)
        md += f"\n\n**Subtotal:** {format_price(cart.total)}"
        md += "\n\n**Shipping:** Free"
        md += f"\n\n**Total:** {format_price(cart.total)}"
        await self.query_one(MarkdownViewer).document.update(header_md + md)

        session = self.app.state.session
        if session:
            self.query_one("#input-email", Input).value = session.email
            if session.display_name:
                self.query_one("#input-full-name", Input).value = session.display_name
        self.query_one("#input-full-name").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    def _details(self) -> ShippingDetails:
        def value(input_id: str) -> str:
            return self.query_one(f"#{input_id}", Input).value.strip()

        return ShippingDetails(
            full_name=value("input-full-name"),
            phone_number=value("input-phone"),
            street_address=value("input-street"),
            city=value("input-city"),
            zip_code=value("input-zip"),
            email=value("input-email"),
        )

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        details = self._details()
        for input_id, _, _ in SHIPPING_FIELDS:
            inp = self.query_one(f"#{input_id}", Input)
            inp.set_class(not inp.value.strip(), "-invalid")
        try:
            validate_shipping(details)
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return

        if not await self.app.push_screen_wait(
            DialogModal(
                "Place order? This cannot be undone.",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        submit = self.query_one("#btn-submit", Button)
        submit.disabled = True
        submit.label = "Placing Order..."
        try:
            order_id = await place_order(self.app.state.cart, details)
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return
        except MailError:
            self.notify(
                "There was an error placing your order. Please try again.",
                severity="error",
            )
            return
        except RemoteError as e:
            self.notify(e.message, severity="error")
            return
        finally:
            submit.disabled = False
            submit.label = "Place Order"

        self.app.broadcast(OrderPlacedMessage)
        await self.app.push_screen_wait(OrderConfirmationModal(order_id))
        self.dismiss(True)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)
