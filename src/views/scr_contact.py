from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, Markdown, TextArea

from utils.mailer import MailError, send_contact_message
from utils.validation import contact_form_errors
from views.base_screen import BaseScreen

# form field -> (input id, error label id)
FORM_FIELDS = {
    "name": ("input-contact-name", "label-error-name"),
    "email": ("input-contact-email", "label-error-email"),
    "message": ("textarea-contact-message", "label-error-message"),
}


class ContactScreen(BaseScreen):
    """
    Contact form, mailed to the store owner.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-contact"):
            yield Markdown(
                "## Get in touch\n\n"
                "Questions about an order, sizing or returns? "
                "Send us a message and we will get back to you.",
                id="md-contact-info",
            )
            with Vertical(id="div-contact-form"):
                yield Label("Name")
                yield Input(placeholder="Jane Doe", id="input-contact-name")
                yield Label("", id="label-error-name", classes="form-error")
                yield Label("Email")
                yield Input(placeholder="you@example.com", id="input-contact-email")
                yield Label("", id="label-error-email", classes="form-error")
                yield Label("Phone (optional)")
                yield Input(placeholder="03001234567", id="input-contact-phone")
                yield Label("Message")
                yield TextArea(id="textarea-contact-message")
                yield Label("", id="label-error-message", classes="form-error")
                yield Button("Send Message", id="btn-send", variant="primary")

    def _value(self, widget_id: str) -> str:
        widget = self.query_one(f"#{widget_id}")
        if isinstance(widget, TextArea):
            return widget.text.strip()
        return widget.value.strip()

    @on(Button.Pressed, "#btn-send")
    @work(exclusive=True)
    async def handle_send(self) -> None:
        name = self._value("input-contact-name")
        email = self._value("input-contact-email")
        phone = self._value("input-contact-phone")
        message = self._value("textarea-contact-message")

        errors = contact_form_errors(name, email, message)
        for field, (widget_id, label_id) in FORM_FIELDS.items():
            self.query_one(f"#{label_id}", Label).update(errors.get(field, ""))
            self.query_one(f"#{widget_id}").set_class(field in errors, "-invalid")
        if errors:
            return

        btn = self.query_one("#btn-send", Button)
        btn.disabled = True
        btn.label = "Sending..."
        try:
            await send_contact_message(name, email, phone, message)
        except MailError:
            self.notify(
                "Failed to send message. Please try again later.", severity="error"
            )
            return
        finally:
            btn.disabled = False
            btn.label = "Send Message"

        self.notify("Your message has been sent successfully!")
        for widget_id in (
            "input-contact-name",
            "input-contact-email",
            "input-contact-phone",
        ):
            self.query_one(f"#{widget_id}", Input).value = ""
        self.query_one("#textarea-contact-message", TextArea).text = ""
