# form checks run before any remote call; each raises ValidationError with the message to show
import re
from typing import Dict, Optional, Sequence

from db.models import ShippingDetails

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# checkout is stricter about the domain part
CHECKOUT_EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,4}$", re.I)

MIN_PASSWORD_LENGTH = 6
MAX_PRODUCT_IMAGES = 4


class ValidationError(ValueError):
    pass


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def validate_sign_in(email: str, password: str) -> None:
    if not email or not password:
        raise ValidationError("Please enter both email and password.")
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address.")


def validate_sign_up(name: str, email: str, password: str, confirm: str) -> None:
    if not name or not email or not password or not confirm:
        raise ValidationError("Please fill all fields.")
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    if password != confirm:
        raise ValidationError("Passwords do not match.")


def validate_shipping(details: ShippingDetails) -> None:
    if not all(
        [
            details.full_name,
            details.phone_number,
            details.street_address,
            details.city,
            details.zip_code,
            details.email,
        ]
    ):
        raise ValidationError("Please fill in all the required shipping details.")
    if not CHECKOUT_EMAIL_RE.match(details.email):
        raise ValidationError("Please enter a valid email address!")


def contact_form_errors(name: str, email: str, message: str) -> Dict[str, str]:
    """Per-field errors of the contact form; empty when the form is fine."""
    errors = {}
    if not name:
        errors["name"] = "Please enter your name."
    if not email or not is_valid_email(email):
        errors["email"] = "Please enter a valid email."
    if not message:
        errors["message"] = "Please enter your message."
    return errors


def parse_product_form(
    name: str,
    price: str,
    stock: str,
    category: Optional[str],
    sizes: Sequence[str],
    image_count: int,
) -> tuple:
    """
    Check the add/edit product form and return (price, stock) as numbers.
    """
    if not name or not price or not stock or not category:
        raise ValidationError("Please fill in all required fields.")
    if not sizes:
        raise ValidationError("Please select at least one size.")
    try:
        price_val = float(price)
    except ValueError:
        raise ValidationError("Price must be a number.")
    try:
        stock_val = int(stock)
    except ValueError:
        raise ValidationError("Stock must be a whole number.")
    if price_val <= 0:
        raise ValidationError("Price must be greater than 0.")
    if stock_val < 0:
        raise ValidationError("Stock cannot be negative.")
    if image_count == 0:
        raise ValidationError("Please upload at least one product image.")
    if image_count > MAX_PRODUCT_IMAGES:
        raise ValidationError(
            f"You can upload a maximum of {MAX_PRODUCT_IMAGES} images."
        )
    return price_val, stock_val
