from dataclasses import replace
from typing import List, Optional

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, SelectionList, TextArea

from db.models import FEATURED_TAGS, PRODUCT_SIZES, Product
from utils.validation import ValidationError, parse_product_form


class EditProductModal(ModalScreen[Optional[Product]]):
    """
    Edit a product's fields. Dismisses with the edited copy, or None when
    cancelled. Nothing is written here; the caller saves it.
    """

    def __init__(self, product: Product, categories: List[str]):
        super().__init__()
        self.product = product
        # the product's own category stays selectable even if it was removed
        self.categories = list(dict.fromkeys([*categories, product.category]))

    def compose(self) -> ComposeResult:
        p = self.product
        with Vertical(id="div-edit-product"):
            yield Label(f"Edit Product: {p.name}", id="label-edit-title")
            with Horizontal():
                with Vertical():
                    yield Label("Name")
                    yield Input(p.name, id="input-edit-name")
                    yield Label("Price (PKR)")
                    yield Input(str(p.price), type="number", id="input-edit-price")
                    yield Label("Stock")
                    yield Input(str(p.stock), type="integer", id="input-edit-stock")
                    yield Label("Category")
                    yield Select(
                        [(c, c) for c in self.categories],
                        value=p.category,
                        allow_blank=False,
                        id="select-edit-category",
                    )
                    yield Label("Featured")
                    yield Select(
                        [(t, t) for t in FEATURED_TAGS],
                        value=p.featured if p.featured in FEATURED_TAGS else "none",
                        allow_blank=False,
                        id="select-edit-featured",
                    )
                with Vertical():
                    yield Label("Sizes")
                    yield SelectionList[str](
                        *[(s, s, s in p.sizes) for s in PRODUCT_SIZES],
                        id="sellist-edit-sizes",
                    )
                    yield Label("Description")
                    yield TextArea(p.description, id="textarea-edit-description")
            with Horizontal():
                yield Button("Cancel", id="btn-cancel")
                yield Button("Save Changes", id="btn-save", variant="primary")

    def on_mount(self):
        self.query_one("#input-edit-name").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Button.Pressed, "#btn-save")
    def handle_save(self):
        name = self.query_one("#input-edit-name", Input).value.strip()
        sizes = self.query_one("#sellist-edit-sizes", SelectionList).selected
        category = self.query_one("#select-edit-category", Select).value
        try:
            price, stock = parse_product_form(
                name,
                self.query_one("#input-edit-price", Input).value.strip(),
                self.query_one("#input-edit-stock", Input).value.strip(),
                category,
                sizes,
                # images are managed at upload time
                max(1, len(self.product.images)),
            )
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return

        self.dismiss(
            replace(
                self.product,
                name=name,
                price=price,
                stock=stock,
                category=category,
                sizes=[s for s in PRODUCT_SIZES if s in sizes],
                featured=self.query_one("#select-edit-featured", Select).value,
                description=self.query_one(
                    "#textarea-edit-description", TextArea
                ).text.strip(),
            )
        )

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self):
        self.dismiss(None)
