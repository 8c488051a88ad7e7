import unittest
from unittest import mock

import resend

from db.models import CartLineItem, ShippingDetails
from utils import config, mailer
from utils.mailer import MailError

DETAILS = ShippingDetails(
    full_name="Jane <Doe>",
    phone_number="03001234567",
    street_address="House 12",
    city="Lahore",
    zip_code="54000",
    email="jane@example.com",
)
ITEMS = [
    CartLineItem(id="p1", name="Hoodie", price=1000.0, quantity=2, size="M"),
    CartLineItem(id="p2", name="Tee", price=450.0, quantity=1, size="S"),
]


class RenderTestCase(unittest.TestCase):
    def test_order_lines(self):
        self.assertEqual(
            mailer.order_lines(ITEMS),
            ["Hoodie (x2) - PKR 1,000.00", "Tee (x1) - PKR 450.00"],
        )

    def test_order_email_contents_are_escaped(self):
        body = mailer.render_order_email("Order", DETAILS, ITEMS)
        self.assertIn("Jane &lt;Doe&gt;", body)
        self.assertIn("House 12, Lahore, 54000", body)
        self.assertIn("Hoodie (x2) - PKR 1,000.00", body)
        self.assertIn("PKR 2,450.00", body)

    def test_contact_email(self):
        body = mailer.render_contact_email("Jane", "jane@example.com", "", "Hi & bye")
        self.assertIn("Hi &amp; bye", body)
        self.assertIn("<strong>Phone:</strong> -", body)


class SendTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        patches = [
            mock.patch.object(config, "RESEND_API_KEY", "re_test"),
            mock.patch.object(config, "MAIL_DRY_RUN", False),
            mock.patch.object(config, "STORE_OWNER_EMAIL", "owner@example.com"),
            mock.patch.object(config, "SENDER_EMAIL", "shop@example.com"),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        send_patch = mock.patch.object(
            resend.Emails, "send", return_value={"id": "msg_1"}
        )
        self.send = send_patch.start()
        self.addCleanup(send_patch.stop)

    async def test_send_email(self):
        await mailer.send_email("jane@example.com", "Hello", "<p>hi</p>")
        params = self.send.call_args.args[0]
        self.assertEqual(params["from"], "shop@example.com")
        self.assertEqual(params["to"], ["jane@example.com"])
        self.assertEqual(params["subject"], "Hello")
        self.assertEqual(resend.api_key, "re_test")

    async def test_order_emails_go_to_customer_and_owner(self):
        await mailer.send_order_emails(DETAILS, ITEMS)
        recipients = [c.args[0]["to"] for c in self.send.call_args_list]
        self.assertEqual(recipients, [["jane@example.com"], ["owner@example.com"]])

    async def test_order_email_without_owner(self):
        with mock.patch.object(config, "STORE_OWNER_EMAIL", ""):
            await mailer.send_order_emails(DETAILS, ITEMS)
        self.assertEqual(self.send.call_count, 1)

    async def test_contact_message_goes_to_owner(self):
        await mailer.send_contact_message("Jane", "jane@example.com", "", "Hello")
        params = self.send.call_args.args[0]
        self.assertEqual(params["to"], ["owner@example.com"])
        self.assertIn("Jane", params["subject"])

    async def test_contact_message_needs_owner(self):
        with mock.patch.object(config, "STORE_OWNER_EMAIL", ""):
            with self.assertRaises(MailError):
                await mailer.send_contact_message("Jane", "j@example.com", "", "Hi")
        self.send.assert_not_called()

    async def test_failures_raise_mail_error(self):
        self.send.side_effect = RuntimeError("connection reset")
        with self.assertRaises(MailError):
            await mailer.send_email("jane@example.com", "Hello", "<p>hi</p>")

        self.send.side_effect = None
        self.send.return_value = {}
        with self.assertRaises(MailError):
            await mailer.send_email("jane@example.com", "Hello", "<p>hi</p>")

    async def test_missing_api_key(self):
        with mock.patch.object(config, "RESEND_API_KEY", ""):
            with self.assertRaises(MailError):
                await mailer.send_email("jane@example.com", "Hello", "<p>hi</p>")
        self.send.assert_not_called()

    async def test_missing_recipient(self):
        with self.assertRaises(MailError):
            await mailer.send_email("", "Hello", "<p>hi</p>")

    async def test_dry_run_sends_nothing(self):
        with mock.patch.object(config, "MAIL_DRY_RUN", True):
            await mailer.send_order_emails(DETAILS, ITEMS)
        self.send.assert_not_called()


if __name__ == "__main__":
    unittest.main()
