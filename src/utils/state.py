from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from db import crud
from db.auth import AuthGateway
from db.models import AuthSession
from utils import config
from utils.cart import CartStore
from utils.local_storage import LocalStorage, LocalStorageError
from utils.logger import get_logger

_logger = get_logger(__name__)

ADMIN_FLAG_KEY = "adminAuthenticated"
ADMIN_EMAIL_KEY = "adminEmail"
ADMIN_ID_KEY = "adminId"


class AccessDeniedError(Exception):
    pass


def _default_storage() -> LocalStorage:
    return LocalStorage(config.LOCAL_STORAGE_PATH)


@dataclass
class GlobalState:
    """
    Centralized application state shared by screens.

    Fields:
      - storage: the local key-value slot (cart, session, admin flag)
      - cart: the shopping cart of this session
      - auth: the identity provider, owner of the current session
      - role: "user" | "admin" | None when signed out
    """

    storage: LocalStorage = field(default_factory=_default_storage)
    cart: CartStore = None
    auth: AuthGateway = None
    role: Optional[Literal["user", "admin"]] = None

    def __post_init__(self):
        if self.cart is None:
            self.cart = CartStore(self.storage)
        if self.auth is None:
            self.auth = AuthGateway(self.storage)

    @property
    def session(self) -> Optional[AuthSession]:
        return self.auth.current_session()

    @property
    def display_name(self) -> str:
        s = self.session
        if s is None:
            return "Guest"
        return s.display_name or s.email

    @property
    def is_admin(self) -> bool:
        """Admin session flag: set by an admin sign-in, cleared on sign-out."""
        try:
            return self.storage.get_item(ADMIN_FLAG_KEY) == "true"
        except LocalStorageError:
            return False

    async def restore(self) -> Optional[AuthSession]:
        """Restore the previous session; drop a stale admin flag."""
        session = await self.auth.restore()
        await self._resolve_role()
        if self.is_admin and (session is None or self.role != "admin"):
            self._clear_admin_flag()
        return session

    async def sign_in(self, email: str, password: str) -> AuthSession:
        session = await self.auth.sign_in(email, password)
        await self._resolve_role()
        return session

    async def sign_up(self, name: str, email: str, password: str) -> AuthSession:
        session = await self.auth.sign_up(email, password, name)
        await self._resolve_role()
        return session

    async def admin_sign_in(self, email: str, password: str) -> AuthSession:
        """
        Sign in and require the admin role. On success the admin session flag
        is set; otherwise AccessDeniedError and the flag stays cleared.
        """
        session = await self.auth.sign_in(email, password)
        await self._resolve_role()
        if self.role != "admin":
            raise AccessDeniedError("Access denied. You don't have admin privileges.")
        try:
            self.storage.set_item(ADMIN_FLAG_KEY, "true")
            self.storage.set_item(ADMIN_EMAIL_KEY, session.email)
            self.storage.set_item(ADMIN_ID_KEY, session.uid)
        except LocalStorageError as e:
            _logger.warning(f"Failed to store admin session flag: {e}")
        return session

    async def sign_out(self) -> None:
        await self.auth.sign_out()
        self.role = None
        self._clear_admin_flag()

    async def _resolve_role(self) -> None:
        session = self.session
        if session is None:
            self.role = None
            return
        self.role = "admin" if await crud.check_admin_status(session.uid) else "user"

    def _clear_admin_flag(self) -> None:
        for key in (ADMIN_FLAG_KEY, ADMIN_EMAIL_KEY, ADMIN_ID_KEY):
            try:
                self.storage.remove_item(key)
            except LocalStorageError as e:
                _logger.warning(f"Failed to clear {key}: {e}")

