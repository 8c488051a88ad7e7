# src/db/crud.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from db import documents, models
from db.database import now_iso
from db.documents import NotFoundError, RemoteError
from utils.logger import get_logger

_logger = get_logger(__name__)


# ---------------------------
# Users & Admins
# ---------------------------


async def create_user_profile(
    user_id: str, email: str, name: Optional[str] = None, role: str = "user"
) -> None:
    """Create or merge-update the profile document keyed by the auth uid."""
    data: Dict[str, Any] = {
        "email": email,
        "role": role or "user",
        "createdAt": now_iso(),
        "updatedAt": now_iso(),
    }
    if name:
        data["name"] = name
    try:
        await documents.set_document("users", user_id, data, merge=True)
    except RemoteError as e:
        _logger.error(f"Error creating user profile: {e}")
        raise RemoteError("Failed to create user profile") from e


async def get_user_profile(user_id: str) -> Optional[models.UserProfile]:
    try:
        doc = await documents.read_one("users", user_id)
    except RemoteError as e:
        _logger.error(f"Error getting user profile: {e}")
        raise RemoteError("Failed to fetch user profile") from e
    return models.UserProfile.from_document(doc) if doc else None


async def check_admin_status(user_id: str) -> bool:
    """True only if the profile exists and its role is admin; failures read as False."""
    try:
        profile = await get_user_profile(user_id)
    except RemoteError as e:
        _logger.error(f"Error checking admin status: {e}")
        return False
    return bool(profile and profile.is_admin)


async def make_user_admin(email: str) -> int:
    """Promote every profile with `email` to admin. Returns how many were updated."""
    docs = await documents.read_all("users", where=("email", email))
    if not docs:
        raise NotFoundError(f"User with email {email} not found")
    for doc in docs:
        await documents.update("users", doc["id"], {"role": "admin", "updatedAt": now_iso()})
    _logger.info(f"Promoted {email} to admin")
    return len(docs)


# ---------------------------
# Categories
# ---------------------------


async def get_all_categories() -> List[models.Category]:
    try:
        docs = await documents.read_all("categories", order_by="name")
    except RemoteError as e:
        _logger.error(f"Error getting categories: {e}")
        raise RemoteError("Failed to fetch categories") from e
    return [models.Category.from_document(d) for d in docs]


async def add_category(name: str) -> str:
    """Add a category, or return the id of the one already named `name`."""
    try:
        existing = await documents.read_all("categories", where=("name", name))
        if existing:
            return existing[0]["id"]
        return await documents.create("categories", {"name": name})
    except RemoteError as e:
        _logger.error(f"Error adding category: {e}")
        raise RemoteError("Failed to add category") from e


# ---------------------------
# Products
# ---------------------------


async def add_product(product: models.Product) -> str:
    try:
        product_id = await documents.create("products", product.to_document())
    except RemoteError as e:
        _logger.error(f"Error adding product: {e}")
        raise RemoteError("Failed to add product") from e
    _logger.info(f"Added product {product.name!r} as {product_id}")
    return product_id


async def get_product(product_id: str) -> Optional[models.Product]:
    try:
        doc = await documents.read_one("products", product_id)
    except RemoteError as e:
        _logger.error(f"Error getting product by ID: {e}")
        raise RemoteError("Failed to fetch product") from e
    return models.Product.from_document(doc) if doc else None


async def get_all_products() -> List[models.Product]:
    """All products, newest first."""
    try:
        docs = await documents.read_all("products", order_by="createdAt", descending=True)
    except RemoteError as e:
        _logger.error(f"Error getting products: {e}")
        raise RemoteError("Failed to fetch products") from e
    return [models.Product.from_document(d) for d in docs]


async def get_featured_products(featured: str) -> List[models.Product]:
    """Products tagged `best-selling` or `trending-now`, newest first."""
    try:
        docs = await documents.read_all(
            "products",
            order_by="createdAt",
            descending=True,
            where=("featured", featured),
        )
    except RemoteError as e:
        _logger.error(f"Error getting {featured} products: {e}")
        raise RemoteError(f"Failed to fetch {featured} products") from e
    return [models.Product.from_document(d) for d in docs]


async def update_product(product_id: str, updates: Dict[str, Any]) -> None:
    try:
        await documents.update("products", product_id, updates)
    except RemoteError as e:
        _logger.error(f"Error updating product: {e}")
        raise RemoteError("Failed to update product") from e


async def delete_product(product_id: str) -> None:
    try:
        await documents.delete("products", product_id)
    except RemoteError as e:
        _logger.error(f"Error deleting product: {e}")
        raise RemoteError("Failed to delete product") from e


# ---------------------------
# Orders
# ---------------------------


async def add_order(order: models.Order) -> str:
    try:
        order_id = await documents.create("orders", order.to_document())
    except RemoteError as e:
        _logger.error(f"Error adding order: {e}")
        raise RemoteError("Failed to add order") from e
    _logger.info(f"Recorded order {order_id} for {order.email}")
    return order_id


async def get_all_orders() -> List[models.Order]:
    """All orders, newest first."""
    try:
        docs = await documents.read_all("orders", order_by="createdAt", descending=True)
    except RemoteError as e:
        _logger.error(f"Error getting orders: {e}")
        raise RemoteError("Failed to fetch orders") from e
    return [models.Order.from_document(d) for d in docs]


async def update_order_status(order_id: str, status: str) -> None:
    if status not in models.ORDER_STATUSES:
        raise ValueError(f"Unknown order status: {status}")
    try:
        await documents.update("orders", order_id, {"status": status})
    except RemoteError as e:
        _logger.error(f"Error updating order status: {e}")
        raise RemoteError("Failed to update order status") from e


async def delete_order(order_id: str) -> None:
    try:
        await documents.delete("orders", order_id)
    except RemoteError as e:
        _logger.error(f"Error deleting order: {e}")
        raise RemoteError("Failed to delete order") from e
