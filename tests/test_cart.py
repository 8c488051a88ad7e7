import json
import os
import tempfile
import unittest

from db.models import CartLineItem
from utils.cart import CART_STORAGE_KEY, CartStore, cart_total, item_count
from utils.local_storage import LocalStorage


def hoodie(**kwargs):
    fields = dict(id="p1", name="Hoodie", price=1000.0, size="M")
    fields.update(kwargs)
    return CartLineItem(**fields)


class CartStoreTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.storage = LocalStorage(os.path.join(self.temp_dir.name, "local.json"))
        self.cart = CartStore(self.storage)

    def tearDown(self):
        self.temp_dir.cleanup()

    def reload(self) -> CartStore:
        return CartStore(self.storage)

    # ---------- merging ----------

    def test_same_identity_merges_into_one_line(self):
        for qty in (1, 2, 4):
            self.cart.add_item(hoodie(), qty)
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(self.cart.items[0].quantity, 7)

    def test_distinct_identities_keep_insertion_order(self):
        self.cart.add_item(hoodie(size="S"))
        self.cart.add_item(hoodie(size="M"))
        self.cart.add_item(hoodie(id="p2", name="Tee", price=500.0))
        self.cart.add_item(hoodie(size="S"), 2)
        self.assertEqual(
            [(i.id, i.size, i.quantity) for i in self.cart.items],
            [("p1", "S", 3), ("p1", "M", 1), ("p2", "M", 1)],
        )

    def test_name_is_part_of_identity(self):
        self.cart.add_item(hoodie())
        self.cart.add_item(hoodie(name="Hoodie (Limited)"))
        self.assertEqual(len(self.cart), 2)

    def test_add_to_existing_line_and_total(self):
        self.cart.add_item(hoodie(size=None), 1)
        self.cart.add_item(hoodie(size=None, quantity=2), 2)
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(self.cart.items[0].quantity, 3)
        self.assertEqual(self.cart.total, 3000.0)
        self.assertEqual(self.cart.item_count, 3)

    def test_candidate_quantity_is_used_when_none_given(self):
        self.cart.add_item(CartLineItem(id="p1", name="Hoodie", price=1000.0, quantity=1))
        self.cart.add_item(CartLineItem(id="p1", name="Hoodie", price=1000.0, quantity=2))
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(self.cart.items[0].quantity, 3)
        self.assertEqual(self.cart.total, 3000.0)

    def test_explicit_quantity_overrides_candidate_quantity(self):
        self.cart.add_item(hoodie(quantity=9), 2)
        self.assertEqual(self.cart.items[0].quantity, 2)

    # ---------- quantity & removal ----------

    def test_update_quantity_clamps_and_floors(self):
        self.cart.add_item(hoodie(), 5)
        self.cart.update_quantity(0, 0)
        self.assertEqual(self.cart.items[0].quantity, 1)
        self.cart.update_quantity(0, -3)
        self.assertEqual(self.cart.items[0].quantity, 1)
        self.cart.update_quantity(0, 2.7)
        self.assertEqual(self.cart.items[0].quantity, 2)

    def test_update_quantity_non_finite_clamps_to_one(self):
        self.cart.add_item(hoodie(), 5)
        for value in (float("nan"), float("inf"), float("-inf")):
            self.cart.update_quantity(0, value)
            self.assertEqual(self.cart.items[0].quantity, 1)

    def test_update_quantity_out_of_range_is_noop(self):
        self.cart.add_item(hoodie(), 2)
        self.cart.update_quantity(5, 10)
        self.assertEqual(self.cart.items[0].quantity, 2)

    def test_remove_item_by_position(self):
        self.cart.add_item(hoodie(size="S"))
        self.cart.add_item(hoodie(size="M"))
        self.cart.remove_item(0)
        self.assertEqual([i.size for i in self.cart.items], ["M"])

    def test_remove_item_out_of_range_leaves_cart_unchanged(self):
        self.cart.add_item(hoodie(size="S"))
        self.cart.add_item(hoodie(size="M"))
        before = self.cart.items
        self.cart.remove_item(2)
        self.cart.remove_item(-1)
        self.assertEqual(self.cart.items, before)

    def test_clear(self):
        self.cart.add_item(hoodie(), 3)
        self.cart.clear()
        self.assertEqual(self.cart.items, [])
        self.assertEqual(self.cart.total, 0)

    def test_items_is_a_copy(self):
        self.cart.add_item(hoodie())
        self.cart.items.clear()
        self.assertEqual(len(self.cart), 1)

    # ---------- persistence ----------

    def test_every_mutation_round_trips(self):
        self.cart.add_item(hoodie(size="S", image="file:///a.png"), 2)
        self.assertEqual(self.reload().items, self.cart.items)
        self.cart.add_item(hoodie(id="p2", name="Tee", price=450.5))
        self.assertEqual(self.reload().items, self.cart.items)
        self.cart.update_quantity(1, 4)
        self.assertEqual(self.reload().items, self.cart.items)
        self.cart.remove_item(0)
        self.assertEqual(self.reload().items, self.cart.items)
        self.cart.clear()
        self.assertEqual(self.reload().items, [])

    def test_non_positive_quantity_in_snapshot_is_clamped(self):
        self.storage.set_item(
            CART_STORAGE_KEY,
            json.dumps([hoodie(quantity=0).to_dict(), hoodie(size="S", quantity=-4).to_dict()]),
        )
        self.assertEqual([i.quantity for i in self.reload().items], [1, 1])

    def test_snapshot_is_written_under_cart_key(self):
        self.cart.add_item(hoodie(), 2)
        data = json.loads(self.storage.get_item(CART_STORAGE_KEY))
        self.assertEqual(data[0]["id"], "p1")
        self.assertEqual(data[0]["quantity"], 2)

    def test_corrupt_snapshot_restores_empty(self):
        self.storage.set_item(CART_STORAGE_KEY, "{not json")
        self.assertEqual(self.reload().items, [])

    def test_wrong_shape_snapshot_restores_empty(self):
        self.storage.set_item(CART_STORAGE_KEY, json.dumps([{"id": "p1"}]))
        self.assertEqual(self.reload().items, [])
        self.storage.set_item(CART_STORAGE_KEY, json.dumps({"id": "p1"}))
        self.assertEqual(self.reload().items, [])

    def test_unreadable_storage_file_restores_empty_and_recovers(self):
        with open(self.storage.path, "w", encoding="utf-8") as f:
            f.write("garbage")
        cart = self.reload()
        self.assertEqual(cart.items, [])
        cart.add_item(hoodie())
        self.assertEqual(len(self.reload()), 1)

    def test_cart_without_storage_works_in_memory(self):
        cart = CartStore()
        cart.add_item(hoodie(), 2)
        self.assertEqual(cart.item_count, 2)

    # ---------- subscriptions ----------

    def test_subscribers_see_every_mutation_until_unsubscribed(self):
        seen = []
        unsubscribe = self.cart.subscribe(lambda items: seen.append(len(items)))
        self.cart.add_item(hoodie(size="S"))
        self.cart.add_item(hoodie(size="M"))
        self.cart.remove_item(0)
        unsubscribe()
        self.cart.clear()
        self.assertEqual(seen, [1, 2, 1])
        # a second call is harmless
        unsubscribe()


class CartHelpersTestCase(unittest.TestCase):
    def test_totals(self):
        items = [
            CartLineItem(name="a", price=100.0, quantity=2),
            CartLineItem(name="b", price=49.5, quantity=1),
        ]
        self.assertEqual(item_count(items), 3)
        self.assertEqual(cart_total(items), 249.5)
        self.assertEqual(cart_total([]), 0)


if __name__ == "__main__":
    unittest.main()
