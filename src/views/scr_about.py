from textual.app import ComposeResult
from textual.widgets import MarkdownViewer

from views.base_screen import BaseScreen

ABOUT_MD = """\
# About {store}

{store} makes everyday apparel that fits: hoodies, shirts, track pants and
trousers in sizes S to XXL.

## Shipping

Orders ship free across the country. You will get a confirmation email with
your order details as soon as the order is placed.

## Returns

Unworn items can be returned within 7 days of delivery. Use the contact page
to start a return.
"""


class AboutScreen(BaseScreen):
    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield MarkdownViewer(
            ABOUT_MD.format(store=self.app.STORE_NAME),
            show_table_of_contents=False,
            id="md-about",
        )
