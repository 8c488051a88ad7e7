import json
import unittest
from unittest import mock

from db import crud
from db.auth import (
    SESSION_STORAGE_KEY,
    AuthError,
    AuthGateway,
    hash_password,
    verify_password,
)
from db.database import connect
from db.documents import RemoteError
from support import StoreTestCase


class AuthGatewayTestCase(StoreTestCase):
    def setUp(self):
        super().setUp()
        self.auth = AuthGateway(self.local_storage)

    async def test_sign_up_creates_profile_and_session(self):
        session = await self.auth.sign_up("jane@example.com", "secret1", "Jane")
        self.assertEqual(self.auth.current_session(), session)
        self.assertEqual(session.display_name, "Jane")

        profile = await crud.get_user_profile(session.uid)
        self.assertEqual(profile.email, "jane@example.com")
        self.assertEqual(profile.role, "user")

    async def test_sign_up_as_admin(self):
        session = await self.auth.sign_up("boss@example.com", "secret1", role="admin")
        self.assertTrue(await crud.check_admin_status(session.uid))

    async def test_sign_up_rejects_bad_input(self):
        with self.assertRaises(AuthError) as ctx:
            await self.auth.sign_up("not-an-email", "secret1")
        self.assertEqual(ctx.exception.code, "auth/invalid-email")

        with self.assertRaises(AuthError) as ctx:
            await self.auth.sign_up("jane@example.com", "123")
        self.assertEqual(ctx.exception.code, "auth/weak-password")
        self.assertIsNone(self.auth.current_session())

    async def test_duplicate_email(self):
        await self.auth.sign_up("jane@example.com", "secret1")
        with self.assertRaises(AuthError) as ctx:
            await self.auth.sign_up("JANE@example.com", "secret2")
        self.assertEqual(ctx.exception.code, "auth/email-already-in-use")
        self.assertEqual(
            str(ctx.exception),
            "This email is already registered. Please sign in instead.",
        )

    async def test_sign_in_and_out(self):
        await self.auth.sign_up("jane@example.com", "secret1", "Jane")
        await self.auth.sign_out()
        self.assertIsNone(self.auth.current_session())

        session = await self.auth.sign_in("jane@example.com", "secret1")
        self.assertEqual(session.email, "jane@example.com")
        self.assertEqual(session.display_name, "Jane")

    async def test_sign_in_errors(self):
        await self.auth.sign_up("jane@example.com", "secret1")
        await self.auth.sign_out()

        with self.assertRaises(AuthError) as ctx:
            await self.auth.sign_in("jane@example.com", "wrong-pass")
        self.assertEqual(ctx.exception.code, "auth/wrong-password")

        with self.assertRaises(AuthError) as ctx:
            await self.auth.sign_in("ghost@example.com", "secret1")
        self.assertEqual(ctx.exception.code, "auth/user-not-found")
        self.assertIsNone(self.auth.current_session())

    async def test_disabled_account(self):
        await self.auth.sign_up("jane@example.com", "secret1")
        await self.auth.sign_out()
        async with connect() as conn:
            await conn.execute("UPDATE auth_users SET disabled = 1;")
            await conn.commit()
        with self.assertRaises(AuthError) as ctx:
            await self.auth.sign_in("jane@example.com", "secret1")
        self.assertEqual(ctx.exception.code, "auth/user-disabled")

    async def test_listeners(self):
        seen = []
        unsubscribe = self.auth.on_auth_state_change(
            lambda s: seen.append(s.email if s else None)
        )
        await self.auth.sign_up("jane@example.com", "secret1")
        await self.auth.sign_out()
        unsubscribe()
        await self.auth.sign_in("jane@example.com", "secret1")
        self.assertEqual(seen, [None, "jane@example.com", None])

    async def test_session_survives_restart(self):
        session = await self.auth.sign_up("jane@example.com", "secret1", "Jane")
        stored = json.loads(self.local_storage.get_item(SESSION_STORAGE_KEY))
        self.assertEqual(stored["uid"], session.uid)

        restored = await AuthGateway(self.local_storage).restore()
        self.assertEqual(restored, session)

        await self.auth.sign_out()
        self.assertIsNone(self.local_storage.get_item(SESSION_STORAGE_KEY))
        self.assertIsNone(await AuthGateway(self.local_storage).restore())

    async def test_restore_ignores_garbage(self):
        self.local_storage.set_item(SESSION_STORAGE_KEY, "not json")
        self.assertIsNone(await self.auth.restore())
        self.local_storage.set_item(SESSION_STORAGE_KEY, json.dumps({"uid": "gone"}))
        self.assertIsNone(await self.auth.restore())

    def test_password_hash_is_salted_and_verifies(self):
        first, second = hash_password("secret1"), hash_password("secret1")
        self.assertNotEqual(first, second)
        self.assertTrue(first.startswith("$2"))
        self.assertTrue(verify_password("secret1", first))
        self.assertFalse(verify_password("secret2", first))

    async def test_failed_profile_write_frees_the_email(self):
        with mock.patch.object(
            crud,
            "create_user_profile",
            side_effect=RemoteError("Failed to create user profile"),
        ):
            with self.assertRaises(RemoteError):
                await self.auth.sign_up("jane@example.com", "secret1")
        self.assertIsNone(self.auth.current_session())

        session = await self.auth.sign_up("jane@example.com", "secret1")
        self.assertIsNotNone(await crud.get_user_profile(session.uid))

    def test_unknown_error_code_message(self):
        self.assertEqual(
            AuthError("auth/something-else").message,
            "An error occurred. Please try again.",
        )


if __name__ == "__main__":
    unittest.main()
