from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Input, Label, TabbedContent, TabPane

from db.auth import AuthError
from db.documents import RemoteError
from utils.validation import ValidationError, validate_sign_in, validate_sign_up
from views.base_screen import BaseScreen


class LoginScreen(BaseScreen):
    """
    Customer sign in / sign up. Dismisses with True once signed in,
    False if the user backs out.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Sign In", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-loginscr"):
            with TabPane("Sign in", id="tab-login"):
                with Vertical(id="div-login"):
                    yield Label("Email")
                    yield Input(placeholder="you@example.com", id="input-login-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-login-pwd"
                    )
                    yield Label("", id="label-login-error", classes="form-error")
                    with Horizontal(id="div-login-btns"):
                        yield Button("Back", id="btn-back")
                        yield Button("Sign in", id="btn-login", variant="primary")

            with TabPane("Sign up", id="tab-signup"):
                with Vertical(id="div-reg"):
                    yield Label("Name")
                    yield Input(placeholder="Jane Doe", id="input-reg-name")
                    yield Label("Email")
                    yield Input(placeholder="you@example.com", id="input-reg-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="at least 6 characters",
                        password=True,
                        id="input-reg-pwd",
                    )
                    yield Label("Confirm Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-reg-confirm"
                    )
                    yield Label("", id="label-reg-error", classes="form-error")
                    with Container(id="div-reg-btns"):
                        yield Button("Sign up", id="btn-reg", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-email").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self.dismiss(False)
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()
        if event.key == "enter" and self.focused == self.query_one(
            "#input-reg-confirm"
        ):
            self.handle_registration_submit()

    def _show_error(self, label_id: str, message: str) -> None:
        self.query_one(label_id, Label).update(message)
        self.notify(message, severity="error")

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        email = self.query_one("#input-login-email", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value

        try:
            validate_sign_in(email, pwd)
            session = await self.app.state.sign_in(email, pwd)
        except (ValidationError, AuthError, RemoteError) as e:
            self._show_error("#label-login-error", str(e))
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")
            return

        self.notify(f"Welcome back, {session.display_name or 'User'}!")
        self.dismiss(True)

    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        name = self.query_one("#input-reg-name", Input).value.strip()
        email = self.query_one("#input-reg-email", Input).value.strip()
        pwd = self.query_one("#input-reg-pwd", Input).value
        confirm = self.query_one("#input-reg-confirm", Input).value

        try:
            validate_sign_up(name, email, pwd, confirm)
            await self.app.state.sign_up(name, email, pwd)
        except (ValidationError, AuthError, RemoteError) as e:
            self._show_error("#label-reg-error", str(e))
            return

        self.notify(f"Account created successfully! Welcome to {self.app.STORE_NAME}.")
        self.dismiss(True)

    @on(Button.Pressed, "#btn-back")
    def handle_back(self) -> None:
        self.dismiss(False)
