# provide dataclass models, plus conversion to/from stored documents
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union

OrderStatus = Literal["pending", "processing", "shipped", "delivered"]
FeaturedTag = Literal["best-selling", "trending-now", "none"]
Role = Literal["user", "admin"]

ORDER_STATUSES: List[str] = ["pending", "processing", "shipped", "delivered"]
FEATURED_TAGS: List[str] = ["none", "best-selling", "trending-now"]
PRODUCT_SIZES: List[str] = ["S", "M", "L", "XL", "XXL"]


@dataclass(frozen=True)
class CartLineItem:
    name: str
    price: float
    quantity: int = 1
    id: Union[str, int, None] = None
    image: Optional[str] = None
    size: Optional[str] = None

    @property
    def merge_key(self) -> tuple:
        return self.id, self.size, self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "size": self.size,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLineItem":
        return cls(
            id=data.get("id"),
            name=str(data["name"]),
            price=float(data["price"]),
            image=data.get("image"),
            size=data.get("size"),
            quantity=max(1, int(data.get("quantity", 1))),
        )


@dataclass(frozen=True)
class Product:
    name: str
    price: float
    category: str
    sizes: List[str] = field(default_factory=list)
    stock: int = 0
    description: str = ""
    images: List[str] = field(default_factory=list)
    featured: FeaturedTag = "none"
    id: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def cover_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def to_document(self) -> Dict[str, Any]:
        """Fields written to the store; id and timestamp belong to the store."""
        return {
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "sizes": list(self.sizes),
            "stock": self.stock,
            "description": self.description,
            "images": list(self.images),
            "featured": self.featured,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Product":
        images = list(doc.get("images") or [])
        if not images and doc.get("image"):
            # older documents carry a single image field
            images = [doc["image"]]
        return cls(
            id=doc.get("id"),
            name=doc.get("name", ""),
            price=float(doc.get("price") or 0),
            category=doc.get("category", ""),
            sizes=list(doc.get("sizes") or []),
            stock=int(doc.get("stock") or 0),
            description=doc.get("description") or "",
            images=images,
            featured=doc.get("featured") or "none",
            created_at=doc.get("createdAt"),
        )


@dataclass(frozen=True)
class Order:
    customer: str
    email: str
    total: float
    status: OrderStatus = "pending"
    items: int = 0  # number of units in the order
    date: str = ""
    id: Optional[str] = None
    created_at: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "customer": self.customer,
            "email": self.email,
            "total": self.total,
            "status": self.status,
            "items": self.items,
            "date": self.date,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Order":
        return cls(
            id=doc.get("id"),
            customer=doc.get("customer", ""),
            email=doc.get("email", ""),
            total=float(doc.get("total") or 0),
            status=doc.get("status") or "pending",
            items=int(doc.get("items") or 0),
            date=doc.get("date", ""),
            created_at=doc.get("createdAt"),
        )


@dataclass(frozen=True)
class Category:
    name: str
    id: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Category":
        return cls(id=doc.get("id"), name=doc.get("name", ""))


@dataclass(frozen=True)
class UserProfile:
    id: str
    email: str
    name: Optional[str] = None
    role: Role = "user"
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "UserProfile":
        return cls(
            id=doc["id"],
            email=doc.get("email", ""),
            name=doc.get("name"),
            role=doc.get("role") or "user",
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )


@dataclass(frozen=True)
class AuthSession:
    uid: str
    email: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class ShippingDetails:
    full_name: str
    phone_number: str
    street_address: str
    city: str
    zip_code: str
    email: str

    @property
    def address_line(self) -> str:
        return f"{self.street_address}, {self.city}, {self.zip_code}"
