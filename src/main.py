from typing import Type

from textual import on, work
from textual.app import App, ComposeResult, ScreenStackError
from textual.binding import Binding
from textual.message import Message
from textual.widgets import LoadingIndicator

from utils import config
from utils.logger import get_logger
from utils.messages import (
    CartChangedMessage,
    ModeSwitchedMessage,
    QuitRequestedMessage,
    SessionChangedMessage,
    SignOutRequestedMessage,
)
from utils.state import GlobalState
from views.scr_about import AboutScreen
from views.scr_add_product import AddProductScreen
from views.scr_admin_dashboard import AdminDashboardScreen
from views.scr_admin_orders import AdminOrdersScreen
from views.scr_admin_products import AdminProductsScreen
from views.scr_cart import CartScreen
from views.scr_contact import ContactScreen
from views.scr_home import HomeScreen
from views.scr_shop import ShopScreen

_logger = get_logger(__name__)


class StorefrontApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    STORE_NAME = config.STORE_NAME

    MODES = {
        "home": HomeScreen,
        "shop": ShopScreen,
        "cart": CartScreen,
        "contact": ContactScreen,
        "about": AboutScreen,
        "admin_dash": AdminDashboardScreen,
        "admin_products": AdminProductsScreen,
        "admin_orders": AdminOrdersScreen,
        "admin_add": AddProductScreen,
    }

    CUSTOMER_MODES = {
        "home": "Home",
        "shop": "Shop All",
        "cart": "Cart",
        "contact": "Contact",
        "about": "About",
    }
    ADMIN_MODES = {
        "admin_dash": "Dashboard",
        "admin_products": "Products",
        "admin_orders": "Orders",
        "admin_add": "Add Product",
    }

    CSS_PATH = [
        "views/styles/index.tcss",
        "views/styles/login.tcss",
        "views/styles/shop.tcss",
        "views/styles/cart.tcss",
        "views/styles/admin.tcss",
    ]

    state: GlobalState

    def __init__(self, state: GlobalState = None):
        super().__init__()
        self.state = state or GlobalState()
        self._unsubscribers = []

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self._unsubscribers = [
            self.state.cart.subscribe(lambda _: self.broadcast(CartChangedMessage)),
            self.state.auth.on_auth_state_change(
                lambda _: self.broadcast(SessionChangedMessage)
            ),
        ]
        self.main_flow()

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()

    def broadcast(self, message_type: Type[Message]) -> None:
        """
        Post a non-bubbling notice to the active screen. Screens that are not
        showing catch up on ScreenResume.
        """
        try:
            screen = self.screen
        except ScreenStackError:
            # no screen yet while the app is starting
            return
        screen.post_message(message_type())

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(SignOutRequestedMessage)
    @work
    async def handle_sign_out(self):
        # admin screens leave for home on the session change
        await self.state.sign_out()
        self.notify("Signed out successfully.")

    @on(ModeSwitchedMessage)
    def handle_mode_switched(self, message: ModeSwitchedMessage):
        _logger.debug(f"Mode switched: {message.old_mode} -> {message.new_mode}")

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.exit()

    @work
    async def main_flow(self):
        session = await self.state.restore()
        if session:
            _logger.info(f"Restored session for {session.email}")
        start = "admin_dash" if self.state.is_admin else "home"
        self.post_message(ModeSwitchedMessage(self.current_mode, start))
        await self.switch_mode(start)


def main():
    app = StorefrontApp()
    app.run()


if __name__ == "__main__":
    main()
