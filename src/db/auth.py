from __future__ import annotations

import json
from typing import Callable, List, Optional

import aiosqlite
import bcrypt

from db import crud
from db.database import connect, new_id, now_iso
from db.documents import RemoteError
from db.models import AuthSession
from utils.local_storage import LocalStorage, LocalStorageError
from utils.logger import get_logger
from utils.validation import MIN_PASSWORD_LENGTH, is_valid_email

_logger = get_logger(__name__)

SESSION_STORAGE_KEY = "auth:session"

AUTH_ERROR_MESSAGES = {
    "auth/email-already-in-use": (
        "This email is already registered. Please sign in instead."
    ),
    "auth/invalid-email": "Invalid email address format.",
    "auth/operation-not-allowed": "Email/password accounts are not enabled.",
    "auth/weak-password": "Password should be at least 6 characters.",
    "auth/user-disabled": "This account has been disabled.",
    "auth/user-not-found": "No account found with this email.",
    "auth/wrong-password": "Incorrect password. Please try again.",
    "auth/too-many-requests": "Too many failed attempts. Please try again later.",
    "auth/network-request-failed": "Network error. Please check your connection.",
}

AuthListener = Callable[[Optional[AuthSession]], None]


class AuthError(Exception):
    def __init__(self, code: str):
        self.code = code
        self.message = AUTH_ERROR_MESSAGES.get(
            code, "An error occurred. Please try again."
        )
        super().__init__(self.message)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, pwd_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), pwd_hash.encode("utf-8"))


class AuthGateway:
    """
    Email/password identity provider.

    Holds the current session, persists it to local storage so it survives a
    restart, and pushes every sign-in/sign-out to the registered listeners.
    """

    def __init__(self, storage: Optional[LocalStorage] = None):
        self._storage = storage
        self._session: Optional[AuthSession] = None
        self._listeners: List[AuthListener] = []

    def current_session(self) -> Optional[AuthSession]:
        return self._session

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """
        Register `callback`; it is called right away with the current session,
        then on every change. Returns the unsubscribe handle.
        """
        self._listeners.append(callback)
        callback(self._session)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def sign_up(
        self,
        email: str,
        password: str,
        display_name: Optional[str] = None,
        role: str = "user",
    ) -> AuthSession:
        """Create the account and its profile, then sign it in."""
        email = email.strip()
        if not is_valid_email(email):
            raise AuthError("auth/invalid-email")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError("auth/weak-password")

        uid = new_id()
        try:
            async with connect() as conn:
                await conn.execute(
                    """
                    INSERT INTO auth_users(
                        uid, email, pwd_hash, display_name, created_at
                    )
                    VALUES (?, ?, ?, ?, ?);
                    """,
                    (
                        uid,
                        email,
                        hash_password(password),
                        display_name,
                        now_iso(),
                    ),
                )
                await conn.commit()
        except aiosqlite.IntegrityError as e:
            raise AuthError("auth/email-already-in-use") from e
        except (aiosqlite.Error, OSError) as e:
            _logger.error(f"Error signing up: {e}")
            raise AuthError("auth/network-request-failed") from e

        try:
            await crud.create_user_profile(uid, email, display_name, role)
        except RemoteError:
            # drop the credentials so the email is free for a retry
            await self._delete_credentials(uid)
            raise
        _logger.info(f"Registered {email} ({role})")

        session = AuthSession(uid=uid, email=email, display_name=display_name)
        self._set_session(session)
        return session

    async def _delete_credentials(self, uid: str) -> None:
        try:
            async with connect() as conn:
                await conn.execute("DELETE FROM auth_users WHERE uid = ?;", (uid,))
                await conn.commit()
        except (aiosqlite.Error, OSError) as e:
            _logger.error(f"Error removing credentials of {uid}: {e}")

    async def sign_in(self, email: str, password: str) -> AuthSession:
        email = email.strip()
        if not is_valid_email(email):
            raise AuthError("auth/invalid-email")
        try:
            async with connect() as conn:
                cur = await conn.execute(
                    """
                    SELECT uid, email, pwd_hash, display_name, disabled
                    FROM auth_users
                    WHERE email = ?;
                    """,
                    (email,),
                )
                row = await cur.fetchone()
                await cur.close()
        except (aiosqlite.Error, OSError) as e:
            _logger.error(f"Error signing in: {e}")
            raise AuthError("auth/network-request-failed") from e

        if not row:
            raise AuthError("auth/user-not-found")
        if row["disabled"]:
            raise AuthError("auth/user-disabled")
        if not verify_password(password, row["pwd_hash"]):
            raise AuthError("auth/wrong-password")

        session = AuthSession(
            uid=row["uid"], email=row["email"], display_name=row["display_name"]
        )
        self._set_session(session)
        _logger.info(f"Signed in {session.email}")
        return session

    async def sign_out(self) -> None:
        if self._session:
            _logger.info(f"Signed out {self._session.email}")
        self._set_session(None)

    async def restore(self) -> Optional[AuthSession]:
        """Bring back the session of a previous run, if the account still exists."""
        if self._storage is None:
            return None
        try:
            raw = self._storage.get_item(SESSION_STORAGE_KEY)
            uid = json.loads(raw)["uid"] if raw else None
        except (LocalStorageError, ValueError, TypeError, KeyError) as e:
            _logger.warning(f"Ignoring unreadable session: {e}")
            uid = None
        if not uid:
            return None

        try:
            async with connect() as conn:
                cur = await conn.execute(
                    """
                    SELECT uid, email, display_name, disabled
                    FROM auth_users
                    WHERE uid = ?;
                    """,
                    (uid,),
                )
                row = await cur.fetchone()
                await cur.close()
        except (aiosqlite.Error, OSError) as e:
            _logger.error(f"Error restoring session: {e}")
            return None

        if not row or row["disabled"]:
            self._set_session(None)
            return None
        session = AuthSession(
            uid=row["uid"], email=row["email"], display_name=row["display_name"]
        )
        self._set_session(session)
        return session

    def _set_session(self, session: Optional[AuthSession]) -> None:
        self._session = session
        if self._storage is not None:
            try:
                if session:
                    self._storage.set_item(
                        SESSION_STORAGE_KEY, json.dumps({"uid": session.uid})
                    )
                else:
                    self._storage.remove_item(SESSION_STORAGE_KEY)
            except LocalStorageError as e:
                _logger.warning(f"Failed to persist session: {e}")
        for listener in list(self._listeners):
            listener(session)
