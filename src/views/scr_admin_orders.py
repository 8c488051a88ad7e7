from dataclasses import replace
from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Label, MarkdownViewer, Select

from db import crud
from db.documents import RemoteError
from db.models import ORDER_STATUSES, Order
from utils.messages import OrderPlacedMessage
from utils.pure import format_price, generate_markdown_table
from views.base_screen import AdminScreen
from views.modal_dialog import DialogModal


class AdminOrdersScreen(AdminScreen):
    """
    All orders, newest first. The admin can change an order's status or
    delete it; the table only changes after the store accepted the write.
    """

    BINDINGS = [
        Binding("enter", "noop", "View Order", show=True, key_display="⏎"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []
        # set while a delete is open; a resume refresh would race it
        self._writing = False

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield DataTable(id="table-orders")
            yield Label("No orders found.", id="label-empty")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Select(
                [(s.capitalize(), s) for s in ORDER_STATUSES],
                prompt="Set status",
                id="select-status",
            )
            yield Button("Delete Order", id="btn-delete", variant="error")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Customer", "Email", "Date", "Items", "Total", "Status")
        self.handle_refresh()

    @on(Button.Pressed, "#btn-refresh")
    @on(ScreenResume)
    @on(OrderPlacedMessage)
    @work(exclusive=True, group="orders")
    async def handle_refresh(self) -> None:
        if not self.app.state.is_admin or self._writing:
            return
        try:
            self._orders = await crud.get_all_orders()
        except RemoteError as e:
            self.notify(e.message, severity="error")
        self.render_table()

    def render_table(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for o in self._orders:
            table.add_row(
                o.customer,
                o.email,
                o.date,
                o.items,
                format_price(o.total),
                o.status.capitalize(),
                key=o.id,
            )
        table.display = bool(self._orders)
        self.query_one("#label-empty").display = not self._orders
        self.render_detail(self._orders[0] if self._orders else None)

    def selected_order(self) -> Optional[Order]:
        table = self.query_one(DataTable)
        if not self._orders or table.cursor_row is None:
            return None
        if table.cursor_row >= len(self._orders):
            return None
        return self._orders[table.cursor_row]

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self) -> None:
        order = self.selected_order()
        self.render_detail(order)
        if order is not None:
            # keep the picker on the highlighted order's status
            self.query_one("#select-status", Select).value = order.status

    @work(exclusive=True, group="detail")
    async def render_detail(self, order: Optional[Order]) -> None:
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        if order is None:
            await viewer.document.update("### Order Detail\n\nNo order selected.")
            return
        rows = [
            ["Order", order.id],
            ["Customer", order.customer],
            ["Email", order.email],
            ["Date", order.date],
            ["Items", order.items],
            ["Total", format_price(order.total)],
            ["Status", order.status.capitalize()],
        ]
        await viewer.document.update(
            "### Order Detail\n\n" + generate_markdown_table(["", ""], rows, ["l", "l"])
        )

    def action_noop(self) -> None:
        pass

    @on(Select.Changed, "#select-status")
    @work(group="write")
    async def handle_status_change(self, message: Select.Changed) -> None:
        status = message.value
        if status is Select.BLANK:
            return
        order = self.selected_order()
        if order is None or order.status == status:
            return

        try:
            await crud.update_order_status(order.id, status)
        except RemoteError as e:
            self.notify(e.message, severity="error")
            return

        self._orders = [
            replace(o, status=status) if o.id == order.id else o for o in self._orders
        ]
        cursor = self.query_one(DataTable).cursor_row
        self.render_table()
        self.query_one(DataTable).move_cursor(row=cursor)
        self.notify(f"Order status updated to {status}.")

    @on(Button.Pressed, "#btn-delete")
    @work(exclusive=True, group="delete")
    async def handle_delete(self) -> None:
        self._writing = True
        try:
            await self._delete_selected()
        finally:
            self._writing = False

    async def _delete_selected(self) -> None:
        order = self.selected_order()
        if order is None:
            self.notify("No order selected.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Are you sure you want to delete the order from {order.customer}?",
                primary_text="Delete",
                secondary_text="Cancel",
                tone="error",
            )
        ):
            return

        try:
            await crud.delete_order(order.id)
        except RemoteError as e:
            self.notify(e.message, severity="error")
            return

        self._orders = [o for o in self._orders if o.id != order.id]
        self.render_table()
        self.notify("Order deleted.")
