"""
Transactional email through Resend.

Three messages exist: the order confirmation sent to the customer, the
order notification sent to the store owner, and the contact form
notification sent to the store owner.
"""

from __future__ import annotations

import asyncio
import html
from datetime import datetime
from typing import Dict, List, Sequence

import resend

from db.models import CartLineItem, ShippingDetails
from utils import config
from utils.cart import cart_total
from utils.logger import get_logger
from utils.pure import format_price

_logger = get_logger(__name__)


class MailError(Exception):
    pass


def order_lines(items: Sequence[CartLineItem]) -> List[str]:
    return [f"{i.name} (x{i.quantity}) - {format_price(i.price)}" for i in items]


def _page(title: str, body: str) -> str:
    year = datetime.now().year
    return f"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>{html.escape(title)}</title></head>
<body style="font-family: Arial, sans-serif; color: #1a1a1a;">
  <h2>{html.escape(title)}</h2>
  {body}
  <p style="color: #777; font-size: 12px;">&copy; {year} {html.escape(config.STORE_NAME)}</p>
</body>
</html>"""


def render_order_email(
    title: str, details: ShippingDetails, items: Sequence[CartLineItem]
) -> str:
    lines = "<br>".join(html.escape(line) for line in order_lines(items))
    body = f"""
  <p><strong>Name:</strong> {html.escape(details.full_name)}</p>
  <p><strong>Email:</strong> {html.escape(details.email)}</p>
  <p><strong>Phone:</strong> {html.escape(details.phone_number)}</p>
  <p><strong>Address:</strong> {html.escape(details.address_line)}</p>
  <p><strong>Items:</strong><br>{lines}</p>
  <p><strong>Order total:</strong> {html.escape(format_price(cart_total(items)))}</p>"""
    return _page(title, body)


def render_contact_email(name: str, email: str, phone: str, message: str) -> str:
    body = f"""
  <p><strong>Name:</strong> {html.escape(name)}</p>
  <p><strong>Email:</strong> {html.escape(email)}</p>
  <p><strong>Phone:</strong> {html.escape(phone or "-")}</p>
  <p><strong>Message:</strong><br>{html.escape(message)}</p>"""
    return _page("New message from the contact form", body)


def _send_sync(params: Dict) -> str:
    resend.api_key = config.RESEND_API_KEY
    response = resend.Emails.send(params)
    return response.get("id", "") if isinstance(response, dict) else ""


async def send_email(recipient: str, subject: str, html_body: str) -> None:
    """Send one message. Raises MailError when delivery is impossible or fails."""
    if not recipient:
        raise MailError("No recipient email provided.")
    params = {
        "from": config.SENDER_EMAIL,
        "to": [recipient],
        "subject": subject,
        "html": html_body,
    }
    if config.MAIL_DRY_RUN:
        _logger.info(f"[dry run] email to {recipient}: {subject}")
        return
    if not config.RESEND_API_KEY:
        raise MailError("Email delivery is not configured.")

    _logger.info(f"Sending email via Resend to {recipient}: {subject}")
    try:
        message_id = await asyncio.to_thread(_send_sync, params)
    except Exception as e:
        # resend raises its own error types plus transport errors
        _logger.error(f"Error sending email to {recipient}: {e}")
        raise MailError("Failed to send email.") from e
    if not message_id:
        raise MailError("Failed to send email.")
    _logger.debug(f"Resend accepted message {message_id}")


async def send_order_emails(
    details: ShippingDetails, items: Sequence[CartLineItem]
) -> None:
    """Confirmation to the customer, then a copy for the store owner."""
    subject = f"Your {config.STORE_NAME} Store Order Confirmation"
    await send_email(details.email, subject, render_order_email(subject, details, items))
    if config.STORE_OWNER_EMAIL:
        owner_subject = f"New order from {details.full_name}"
        await send_email(
            config.STORE_OWNER_EMAIL,
            owner_subject,
            render_order_email(owner_subject, details, items),
        )


async def send_contact_message(name: str, email: str, phone: str, message: str) -> None:
    if not config.STORE_OWNER_EMAIL:
        raise MailError("Store contact address is not configured.")
    await send_email(
        config.STORE_OWNER_EMAIL,
        f"Contact form: {name}",
        render_contact_email(name, email, phone, message),
    )
