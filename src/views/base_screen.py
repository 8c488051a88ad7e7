from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.events import Resize, ScreenResume
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from utils.messages import (
    CartChangedMessage,
    ModeSwitchedMessage,
    SessionChangedMessage,
    SignOutRequestedMessage,
)
from utils.pure import format_price, generate_markdown_table
from views.modal_dialog import DialogModal, QuitDialogModal
from views.modal_resize import ResizeScreenPromptModal


class Sidebar(Container):
    init_mode = ""

    def compose(self) -> ComposeResult:
        yield Label("Account", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        with Horizontal(id="div-account-btns"):
            yield Button("Sign in", id="btn-signin", variant="primary")
            yield Button("Sign out", id="btn-logout", variant="error")
            yield Button("Admin", id="btn-admin")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    async def on_mount(self):
        self.init_mode = self.app.current_mode
        await self.refresh_info()

    async def refresh_info(self) -> None:
        state = self.app.state
        session = state.session

        rows = [["User", state.display_name]]
        if session:
            rows.append(["Email", session.email])
            rows.append(["Role", "Admin" if state.role == "admin" else "Customer"])
        if not state.is_admin:
            rows.append(["Cart", f"{state.cart.item_count} item(s)"])
            rows.append(["Total", format_price(state.cart.total)])
        await self.query_one(Markdown).update(
            generate_markdown_table(None, rows, ["l", "l"])
        )

        self.query_one("#btn-signin").display = session is None
        self.query_one("#btn-logout").display = session is not None
        self.query_one("#btn-admin").display = not state.is_admin

        modes = self.app.ADMIN_MODES if state.is_admin else self.app.CUSTOMER_MODES
        list_menu: ListView = self.query_one("#list-menu")
        await list_menu.clear()
        await list_menu.extend(
            [ListItem(Label(v), id="list-menu-item-" + k) for k, v in modes.items()]
        )
        self.highlight_item(self.init_mode)

    async def on_list_view_selected(self, event: ListView.Selected):
        selected_mode = event.item.id.removeprefix("list-menu-item-")
        self.highlight_item(self.init_mode)
        if self.app.current_mode != selected_mode:
            self.app.post_message(
                ModeSwitchedMessage(self.app.current_mode, selected_mode)
            )
            await self.app.switch_mode(selected_mode)

    @on(Button.Pressed, "#btn-signin")
    @work
    async def handle_signin(self):
        # deferred: scr_login imports this module
        from views.scr_login import LoginScreen

        await self.app.push_screen_wait(LoginScreen())

    @on(Button.Pressed, "#btn-admin")
    @work
    async def handle_admin(self):
        from views.scr_admin_login import AdminLoginScreen

        if await self.app.push_screen_wait(AdminLoginScreen()):
            self.app.post_message(
                ModeSwitchedMessage(self.app.current_mode, "admin_dash")
            )
            await self.app.switch_mode("admin_dash")

    @on(Button.Pressed, "#btn-logout")
    @work
    async def handle_logout(self):
        if not await self.app.push_screen_wait(
            DialogModal(
                "Are you sure you want to sign out?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            return

        self.post_message(SignOutRequestedMessage())

    def highlight_item(self, mode_str: str):
        list_menu = self.query_one("#list-menu")
        for item in list_menu.children:
            item.highlighted = item.id == "list-menu-item-" + mode_str


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()

        self.configure()

    def configure(
        self,
        header_sub_title: str = "Base Screen",
        show_sidebar: bool = True,
    ) -> None:
        """
        configure behavior of the base screen
        :return:
        """

        # auto gen titles and subtitles
        self.app.title = f"{self.app.STORE_NAME} Store"
        self.sub_title = header_sub_title
        for k, v in self.app.MODES.items():
            if isinstance(self, v):
                if k in self.app.ADMIN_MODES:
                    self.sub_title = self.app.ADMIN_MODES[k]
                elif k in self.app.CUSTOMER_MODES:
                    self.sub_title = self.app.CUSTOMER_MODES[k]

        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    async def on_resize(self, event: Resize) -> None:
        min_width = 80
        min_height = 24
        if event.size.width < min_width or event.size.height < min_height:
            self.app.push_screen(ResizeScreenPromptModal(min_width, min_height))

    @on(ScreenResume)
    @on(SessionChangedMessage)
    @on(CartChangedMessage)
    async def handle_sidebar_refresh(self):
        for sidebar in self.query(Sidebar):
            await sidebar.refresh_info()

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())


class AdminScreen(BaseScreen):
    """
    Base for the admin console. Leaves for the home screen unless the admin
    session flag is set.
    """

    def require_admin(self, quiet: bool = False) -> bool:
        if self.app.state.is_admin:
            return True
        if not quiet:
            self.notify("Please login to access admin dashboard", severity="error")
        self.app.call_later(self.app.switch_mode, "home")
        return False

    @on(ScreenResume)
    def handle_admin_guard(self):
        self.require_admin()

    @on(SessionChangedMessage)
    def handle_signed_out(self):
        # signing out leaves the console without a second warning
        self.require_admin(quiet=True)
