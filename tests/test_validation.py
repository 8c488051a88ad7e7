import unittest

from db.models import ShippingDetails
from utils.validation import (
    ValidationError,
    contact_form_errors,
    is_valid_email,
    parse_product_form,
    validate_shipping,
    validate_sign_in,
    validate_sign_up,
)


def shipping(**kwargs):
    fields = dict(
        full_name="Jane Doe",
        phone_number="03001234567",
        street_address="House 12",
        city="Lahore",
        zip_code="54000",
        email="jane@example.com",
    )
    fields.update(kwargs)
    return ShippingDetails(**fields)


class ValidationTestCase(unittest.TestCase):
    def test_is_valid_email(self):
        self.assertTrue(is_valid_email("a@b.co"))
        self.assertFalse(is_valid_email("a@b"))
        self.assertFalse(is_valid_email("a b@c.com"))
        self.assertFalse(is_valid_email(""))

    def test_sign_in(self):
        validate_sign_in("a@b.co", "pw")
        with self.assertRaises(ValidationError):
            validate_sign_in("", "pw")
        with self.assertRaises(ValidationError):
            validate_sign_in("nope", "pw")

    def test_sign_up(self):
        validate_sign_up("Jane", "a@b.co", "secret1", "secret1")
        cases = [
            ("", "a@b.co", "secret1", "secret1", "Please fill all fields."),
            ("Jane", "a@b", "secret1", "secret1", "Please enter a valid email address."),
            (
                "Jane",
                "a@b.co",
                "123",
                "123",
                "Password must be at least 6 characters long.",
            ),
            ("Jane", "a@b.co", "secret1", "secret2", "Passwords do not match."),
        ]
        for name, email, pwd, confirm, message in cases:
            with self.assertRaises(ValidationError) as ctx:
                validate_sign_up(name, email, pwd, confirm)
            self.assertEqual(str(ctx.exception), message)

    def test_shipping(self):
        validate_shipping(shipping())
        with self.assertRaises(ValidationError) as ctx:
            validate_shipping(shipping(city=""))
        self.assertEqual(
            str(ctx.exception), "Please fill in all the required shipping details."
        )
        with self.assertRaises(ValidationError) as ctx:
            validate_shipping(shipping(email="jane@example"))
        self.assertEqual(str(ctx.exception), "Please enter a valid email address!")

    def test_contact_form_errors(self):
        self.assertEqual(contact_form_errors("Jane", "a@b.co", "Hi"), {})
        errors = contact_form_errors("", "bad", "")
        self.assertEqual(set(errors), {"name", "email", "message"})

    def test_parse_product_form(self):
        self.assertEqual(
            parse_product_form("Tee", "1999.5", "10", "Shirts", ["M"], 1),
            (1999.5, 10),
        )
        bad = [
            ("", "10", "1", "Shirts", ["M"], 1),
            ("Tee", "10", "1", None, ["M"], 1),
            ("Tee", "10", "1", "Shirts", [], 1),
            ("Tee", "abc", "1", "Shirts", ["M"], 1),
            ("Tee", "10", "1.5", "Shirts", ["M"], 1),
            ("Tee", "0", "1", "Shirts", ["M"], 1),
            ("Tee", "10", "-1", "Shirts", ["M"], 1),
            ("Tee", "10", "1", "Shirts", ["M"], 0),
            ("Tee", "10", "1", "Shirts", ["M"], 5),
        ]
        for args in bad:
            with self.assertRaises(ValidationError, msg=repr(args)):
                parse_product_form(*args)


if __name__ == "__main__":
    unittest.main()
