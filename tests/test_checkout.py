import unittest
from dataclasses import replace
from datetime import date
from unittest import mock

from db import crud
from db.documents import RemoteError
from db.models import CartLineItem, ShippingDetails
from support import StoreTestCase
from utils import checkout
from utils.cart import CartStore
from utils.mailer import MailError
from utils.validation import ValidationError

DETAILS = ShippingDetails(
    full_name="Jane Doe",
    phone_number="03001234567",
    street_address="House 12",
    city="Lahore",
    zip_code="54000",
    email="jane@example.com",
)


class PlaceOrderTestCase(StoreTestCase):
    def setUp(self):
        super().setUp()
        self.cart = CartStore(self.local_storage)
        self.cart.add_item(CartLineItem(id="p1", name="Hoodie", price=1000.0, size="M"), 2)
        self.cart.add_item(CartLineItem(id="p2", name="Tee", price=450.0, size="S"))
        send_patch = mock.patch.object(
            checkout, "send_order_emails", new_callable=mock.AsyncMock
        )
        self.send = send_patch.start()
        self.addCleanup(send_patch.stop)

    async def test_order_is_mailed_recorded_and_cart_cleared(self):
        order_id = await checkout.place_order(self.cart, DETAILS)

        sent_details, sent_items = self.send.await_args.args
        self.assertEqual(sent_details, DETAILS)
        self.assertEqual([i.name for i in sent_items], ["Hoodie", "Tee"])

        orders = await crud.get_all_orders()
        self.assertEqual(len(orders), 1)
        self.assertEqual(orders[0].id, order_id)
        self.assertEqual(orders[0].customer, "Jane Doe")
        self.assertEqual(orders[0].total, 2450.0)
        self.assertEqual(orders[0].items, 3)
        self.assertEqual(orders[0].status, "pending")
        self.assertEqual(orders[0].date, date.today().isoformat())

        self.assertEqual(self.cart.items, [])
        self.assertEqual(CartStore(self.local_storage).items, [])

    async def test_empty_cart(self):
        self.cart.clear()
        with self.assertRaises(ValidationError) as ctx:
            await checkout.place_order(self.cart, DETAILS)
        self.assertEqual(str(ctx.exception), "Your cart is empty!")
        self.send.assert_not_awaited()

    async def test_invalid_details_keep_cart(self):
        bad = replace(DETAILS, phone_number="")
        with self.assertRaises(ValidationError):
            await checkout.place_order(self.cart, bad)
        self.send.assert_not_awaited()
        self.assertEqual(len(self.cart), 2)

    async def test_mail_failure_keeps_cart_and_records_nothing(self):
        self.send.side_effect = MailError("Failed to send email.")
        with self.assertRaises(MailError):
            await checkout.place_order(self.cart, DETAILS)
        self.assertEqual(len(self.cart), 2)
        self.assertEqual(await crud.get_all_orders(), [])

    async def test_record_failure_still_clears_cart(self):
        with mock.patch.object(
            crud, "add_order", side_effect=RemoteError("Failed to add order")
        ):
            order_id = await checkout.place_order(self.cart, DETAILS)
        self.assertIsNone(order_id)
        self.send.assert_awaited_once()
        self.assertEqual(self.cart.items, [])


if __name__ == "__main__":
    unittest.main()
