import unittest

from db.models import Order, Product
from utils.pure import (
    ALL_CATEGORIES,
    ANY_SIZE,
    DEFAULT_CATEGORIES,
    category_options,
    dashboard_stats,
    filter_products,
    format_price,
    generate_markdown_table,
)


def product(name, price, category, sizes, pid=None):
    return Product(name=name, price=price, category=category, sizes=sizes, id=pid)


class FilterProductsTestCase(unittest.TestCase):
    def setUp(self):
        self.a = product("Alpha Hoodie", 100, "A", ["S"], "a")
        self.b = product("Beta Tee", 50, "B", ["M"], "b")
        self.products = [self.a, self.b]

    def test_category_filter(self):
        self.assertEqual(filter_products(self.products, category="A"), [self.a])

    def test_size_filter(self):
        self.assertEqual(filter_products(self.products, size="M"), [self.b])

    def test_price_sorts(self):
        self.assertEqual(
            filter_products(self.products, sort="price-asc"), [self.b, self.a]
        )
        self.assertEqual(
            filter_products(self.products, sort="price-desc"), [self.a, self.b]
        )

    def test_relevance_keeps_catalog_order(self):
        self.assertEqual(filter_products(self.products), self.products)
        self.assertEqual(filter_products(self.products, sort="unknown"), self.products)

    def test_sentinels_mean_no_filter(self):
        self.assertEqual(
            filter_products(self.products, "", ALL_CATEGORIES, ANY_SIZE),
            self.products,
        )

    def test_text_filter_is_case_insensitive(self):
        sweat = product("Sweat Shirt", 10, "Shirts", ["L"])
        self.assertEqual(filter_products([sweat, self.b], query="shirt"), [sweat])
        self.assertEqual(filter_products([sweat, self.b], query="SWEAT"), [sweat])

    def test_whitespace_query_is_no_filter(self):
        self.assertEqual(filter_products(self.products, query="   "), self.products)

    def test_filters_combine(self):
        extra = product("Alpha Tee", 70, "A", ["M"], "c")
        result = filter_products(
            [self.a, self.b, extra], query="alpha", category="A", size="M"
        )
        self.assertEqual(result, [extra])

    def test_price_sort_is_stable(self):
        first = product("One", 20, "A", ["S"], "1")
        second = product("Two", 20, "A", ["S"], "2")
        cheap = product("Three", 10, "A", ["S"], "3")
        self.assertEqual(
            filter_products([first, second, cheap], sort="price-asc"),
            [cheap, first, second],
        )
        self.assertEqual(
            filter_products([first, second, cheap], sort="price-desc"),
            [first, second, cheap],
        )

    def test_empty_catalog_never_raises(self):
        for args in [
            {},
            {"query": "x"},
            {"category": "A", "size": "M", "sort": "price-desc"},
        ]:
            self.assertEqual(filter_products([], **args), [])

    def test_product_without_sizes_is_excluded_by_size_filter(self):
        bare = product("Bare", 10, "A", [])
        self.assertEqual(filter_products([bare], size="S"), [])

    def test_input_is_not_mutated(self):
        products = [self.a, self.b]
        filter_products(products, sort="price-asc")
        self.assertEqual(products, [self.a, self.b])


class CatalogHelpersTestCase(unittest.TestCase):
    def test_category_options_from_catalog(self):
        products = [
            product("x", 1, "Shirts", []),
            product("y", 1, "Hoodies", []),
            product("z", 1, "Shirts", []),
        ]
        self.assertEqual(
            category_options(products), [ALL_CATEGORIES, "Shirts", "Hoodies"]
        )

    def test_category_options_fall_back_to_defaults(self):
        self.assertEqual(category_options([]), [ALL_CATEGORIES, *DEFAULT_CATEGORIES])

    def test_dashboard_stats(self):
        orders = [
            Order(customer="A", email="a@example.com", total=1000, items=2),
            Order(customer="A", email="a@example.com", total=500, items=1),
            Order(customer="B", email="b@example.com", total=250, items=1),
        ]
        stats = dashboard_stats(orders, [product("x", 1, "A", [])])
        self.assertEqual(stats["total_revenue"], 1750)
        self.assertEqual(stats["total_orders"], 3)
        self.assertEqual(stats["total_products"], 1)
        self.assertEqual(stats["total_customers"], 2)

    def test_dashboard_stats_empty(self):
        stats = dashboard_stats([], [])
        self.assertEqual(stats["total_revenue"], 0)
        self.assertEqual(stats["total_customers"], 0)

    def test_format_price(self):
        self.assertEqual(format_price(1000), "PKR 1,000.00")
        self.assertEqual(format_price(49.5), "PKR 49.50")


class MarkdownTableTestCase(unittest.TestCase):
    def test_headers_and_alignment(self):
        md = generate_markdown_table(["Name", "Qty"], [["Tee", 2]], ["l", "r"])
        lines = md.splitlines()
        self.assertIn("Name", lines[0])
        self.assertIn(":---", lines[1])
        self.assertIn("---:", lines[1])
        self.assertIn("Tee", lines[2])

    def test_pipes_are_escaped(self):
        md = generate_markdown_table(["Name"], [["a|b"]])
        self.assertIn("a\\|b", md)

    def test_no_rows(self):
        self.assertEqual(generate_markdown_table(["Name"], []), "")


if __name__ == "__main__":
    unittest.main()
