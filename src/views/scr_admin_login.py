from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Input, Label, Static, TabbedContent, TabPane

from db import crud
from db.auth import AuthError
from db.documents import NotFoundError, RemoteError
from utils.logger import get_logger
from utils.state import AccessDeniedError
from utils.validation import (
    MIN_PASSWORD_LENGTH,
    ValidationError,
    is_valid_email,
    validate_sign_in,
)
from views.base_screen import BaseScreen

_logger = get_logger(__name__)


class AdminLoginScreen(BaseScreen):
    """
    Admin sign in, plus the two one-time bootstrap utilities:
    creating the first admin account and promoting an existing user.
    Dismisses with True once an admin is signed in.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Admin Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-adminlogin"):
            with TabPane("Login", id="tab-admin-login"):
                with Vertical(id="div-admin-login"):
                    yield Label("Email Address")
                    yield Input(placeholder="admin@example.com", id="input-admin-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-admin-pwd"
                    )
                    with Horizontal(id="div-admin-login-btns"):
                        yield Button("Back to Home", id="btn-back")
                        yield Button(
                            "Login to Dashboard", id="btn-admin-login", variant="primary"
                        )
                    yield Static(
                        "Only authorized admin accounts can access the dashboard.",
                        classes="hint",
                    )

            with TabPane("Create Admin", id="tab-create-admin"):
                with Vertical(id="div-create-admin"):
                    yield Static(
                        "One-time setup: creates an account with admin privileges.",
                        classes="hint",
                    )
                    yield Label("Full Name")
                    yield Input(placeholder="Jane Doe", id="input-create-name")
                    yield Label("Email Address")
                    yield Input(placeholder="admin@example.com", id="input-create-email")
                    yield Label("Password")
                    yield Input(
                        placeholder=f"at least {MIN_PASSWORD_LENGTH} characters",
                        password=True,
                        id="input-create-pwd",
                    )
                    yield Button(
                        "Create Admin Account", id="btn-create-admin", variant="warning"
                    )

            with TabPane("Make Admin", id="tab-make-admin"):
                with Vertical(id="div-make-admin"):
                    yield Static(
                        "Promote an existing user to admin by email.", classes="hint"
                    )
                    yield Label("User Email")
                    yield Input(placeholder="user@example.com", id="input-make-email")
                    yield Button("Make Admin", id="btn-make-admin", variant="warning")
                    yield Label("", id="label-make-result")

    def on_mount(self):
        self.query_one("#input-admin-email").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self.dismiss(False)
        if event.key == "enter" and self.focused == self.query_one("#input-admin-pwd"):
            self.handle_login()

    @on(Button.Pressed, "#btn-admin-login")
    @work(exclusive=True)
    async def handle_login(self) -> None:
        email = self.query_one("#input-admin-email", Input).value.strip()
        pwd = self.query_one("#input-admin-pwd", Input).value

        try:
            validate_sign_in(email, pwd)
            await self.app.state.admin_sign_in(email, pwd)
        except AccessDeniedError as e:
            self.notify(str(e), severity="error")
            self.notify(
                "If you just created your admin account, set up its profile first.",
                severity="information",
            )
            return
        except (ValidationError, AuthError, RemoteError) as e:
            self.notify(str(e), severity="error")
            return

        self.notify("Login successful! Welcome to Admin Dashboard")
        self.dismiss(True)

    @on(Button.Pressed, "#btn-create-admin")
    @work(exclusive=True)
    async def handle_create_admin(self) -> None:
        name = self.query_one("#input-create-name", Input).value.strip()
        email = self.query_one("#input-create-email", Input).value.strip()
        pwd = self.query_one("#input-create-pwd", Input).value

        if not name or not email or not pwd:
            self.notify("Please fill in all fields", severity="error")
            return
        if len(pwd) < MIN_PASSWORD_LENGTH:
            self.notify(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                severity="error",
            )
            return

        try:
            session = await self.app.state.auth.sign_up(email, pwd, name, role="admin")
        except (AuthError, RemoteError) as e:
            self.notify(str(e), severity="error")
            return
        # sign_up signs the new account in; the admin flag only comes from the login tab
        await self.app.state.sign_out()
        _logger.info(f"Admin user created: {session.uid} ({email})")

        self.notify("Admin user created successfully!")
        self.get_child_by_type(TabbedContent).active = "tab-admin-login"
        self.query_one("#input-admin-email", Input).value = email
        self.query_one("#input-admin-pwd", Input).focus()

    @on(Button.Pressed, "#btn-make-admin")
    @work(exclusive=True)
    async def handle_make_admin(self) -> None:
        email = self.query_one("#input-make-email", Input).value.strip()
        result = self.query_one("#label-make-result", Label)
        if not is_valid_email(email):
            result.update("Please enter a valid email address.")
            return
        try:
            await crud.make_user_admin(email)
        except NotFoundError as e:
            result.update(str(e))
            return
        except RemoteError as e:
            result.update(e.message)
            self.notify(e.message, severity="error")
            return
        result.update(f"Successfully made {email} an admin.")

    @on(Button.Pressed, "#btn-back")
    def handle_back(self) -> None:
        self.dismiss(False)
