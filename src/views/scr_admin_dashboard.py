import asyncio

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, MarkdownViewer

from db import crud
from db.documents import RemoteError
from utils.messages import OrderPlacedMessage, ProductsChangedMessage
from utils.pure import dashboard_stats, format_price, generate_markdown_table
from views.base_screen import AdminScreen

RECENT_ORDERS = 5


class AdminDashboardScreen(AdminScreen):
    """
    Store overview: revenue, order, product and customer counts,
    plus the most recent orders.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-dashboard", show_table_of_contents=False)
            with Horizontal(id="hort-dashboard-btns"):
                yield Button("Add Product", id="btn-add-product", variant="primary")
                yield Button("Manage Products", id="btn-products")
                yield Button("Manage Orders", id="btn-orders")

    def on_mount(self) -> None:
        self.handle_reload()

    @on(ScreenResume)
    @on(OrderPlacedMessage)
    @on(ProductsChangedMessage)
    @work(exclusive=True)
    async def handle_reload(self) -> None:
        if not self.app.state.is_admin:
            return
        try:
            orders, products = await asyncio.gather(
                crud.get_all_orders(), crud.get_all_products()
            )
        except RemoteError as e:
            self.notify(e.message, severity="error")
            orders, products = [], []

        stats = dashboard_stats(orders, products)
        md = (
            "### Overview\n\n"
            f"- Total Revenue: {format_price(stats['total_revenue'])}\n"
            f"- Total Orders: {stats['total_orders']}\n"
            f"- Total Products: {stats['total_products']}\n"
            f"- Total Customers: {stats['total_customers']}\n\n"
            "### Recent Orders\n\n"
        )
        rows = [
            [o.customer, o.email, o.date, o.items, format_price(o.total), o.status]
            for o in orders[:RECENT_ORDERS]
        ]
        if rows:
            md += generate_markdown_table(
                ["Customer", "Email", "Date", "Items", "Total", "Status"],
                rows,
                ["l", "l", "c", "r", "r", "c"],
            )
        else:
            md += "No orders yet."
        await self.query_one("#md-dashboard", MarkdownViewer).document.update(md)

    @on(Button.Pressed, "#btn-add-product")
    async def handle_add_product(self):
        await self.app.switch_mode("admin_add")

    @on(Button.Pressed, "#btn-products")
    async def handle_products(self):
        await self.app.switch_mode("admin_products")

    @on(Button.Pressed, "#btn-orders")
    async def handle_orders(self):
        await self.app.switch_mode("admin_orders")
