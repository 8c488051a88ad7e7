from __future__ import annotations

from datetime import date
from typing import Optional

from db import crud
from db.documents import RemoteError
from db.models import Order, ShippingDetails
from utils.cart import CartStore, cart_total, item_count
from utils.logger import get_logger
from utils.mailer import send_order_emails
from utils.validation import ValidationError, validate_shipping

_logger = get_logger(__name__)


async def place_order(cart: CartStore, details: ShippingDetails) -> Optional[str]:
    """
    Email the order, record it for the admin console, then empty the cart.

    Validation and mail failures propagate and leave the cart as it was.
    The order is already confirmed once the email is out, so a failure to
    record it is only logged; the id is None in that case.
    """
    items = cart.items
    if not items:
        raise ValidationError("Your cart is empty!")
    validate_shipping(details)

    await send_order_emails(details, items)

    order_id = None
    try:
        order_id = await crud.add_order(
            Order(
                customer=details.full_name,
                email=details.email,
                total=cart_total(items),
                status="pending",
                items=item_count(items),
                date=date.today().isoformat(),
            )
        )
    except RemoteError as e:
        _logger.error(f"Order emailed but not recorded: {e}")

    cart.clear()
    return order_id
