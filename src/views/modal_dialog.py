from typing import Dict, Literal, Optional, Tuple, override

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Markdown

from utils.messages import QuitRequestedMessage

Tone = Literal["default", "positive", "warning", "error"]


class DialogModal(ModalScreen[bool]):
    """
    A yes/no dialog box. Dismisses with True for the primary button and
    False for the secondary button or escape.
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    # tone -> (primary variant, secondary variant)
    VARIANT_MAP: Dict[
        Tone, Tuple[Literal["primary", "default", "success", "warning", "error"], ...]
    ] = {
        "default": ("primary", "default"),
        "positive": ("success", "default"),
        "warning": ("warning", "default"),
        "error": ("error", "primary"),
    }

    def __init__(
        self,
        caption: str,
        primary_text: str = "OK",
        secondary_text: str = "",
        tone: Tone = "default",
    ):
        super().__init__()
        self.caption = caption
        self.primary_text = primary_text
        self.secondary_text = secondary_text
        self.tone = tone

    def compose(self) -> ComposeResult:
        primary, secondary = self.VARIANT_MAP[self.tone]
        with Container(id="div-dialog"):
            yield Label(self.caption, id="caption")
            with Horizontal(id="dialog"):
                if self.secondary_text:
                    yield Button(
                        self.secondary_text, variant=secondary, id="btn-secondary"
                    )
                yield Button(self.primary_text, variant=primary, id="btn-primary")

    def on_mount(self):
        # destructive prompts focus the safe choice
        if self.secondary_text and self.tone == "error":
            self.query_one("#btn-secondary").focus()
        else:
            self.query_one("#btn-primary").focus()

    @on(Button.Pressed, "#btn-primary")
    def handle_primary(self) -> None:
        self.confirm()

    def confirm(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#btn-secondary")
    def action_cancel(self) -> None:
        self.dismiss(False)


class QuitDialogModal(DialogModal):
    def __init__(self):
        super().__init__("Leave the store?", "Quit", "Stay", "error")

    @override
    def confirm(self) -> None:
        self.post_message(QuitRequestedMessage())
        self.dismiss(True)


class OrderConfirmationModal(ModalScreen[bool]):
    """
    Shown after a successful checkout. "Continue Shopping" dismisses with True.
    """

    def __init__(self, order_id: Optional[str] = None):
        super().__init__()
        self.order_id = order_id

    def compose(self) -> ComposeResult:
        ref = f"\n\nOrder reference: `{self.order_id}`" if self.order_id else ""
        with Container(id="div-dialog"):
            yield Markdown(
                "## Thank you for your order!\n\n"
                "A confirmation email with your order details is on its way."
                + ref,
                id="md-confirmation",
            )
            with Horizontal(id="dialog"):
                yield Button("Continue Shopping", variant="success", id="btn-primary")

    def on_mount(self):
        self.query_one("#btn-primary").focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(True)
