"""
Cart schemas
Domain shapes shared by the cart store, the cart cache and the cart service
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional, List, Tuple
from dataclasses import dataclass
from datetime import datetime
import enum

from .product import ProductSnapshot

class IdentityKind(str, enum.Enum):
    """Who a cart belongs to"""
    USER = "user"
    SESSION = "session"

@dataclass(frozen=True)
class CartIdentity:
    """Exactly one of a user id or a guest session id"""
    kind: IdentityKind
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError(f"{self.kind.value} identity requires a non-empty value")

    @classmethod
    def user(cls, user_id: str) -> "CartIdentity":
        return cls(IdentityKind.USER, str(user_id))

    @classmethod
    def session(cls, session_id: str) -> "CartIdentity":
        return cls(IdentityKind.SESSION, session_id)

    @property
    def is_user(self) -> bool:
        return self.kind is IdentityKind.USER

    @property
    def cache_key(self) -> str:
        return f"cart:{self.kind.value}:{self.value}"

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"

LineKey = Tuple[str, str, str]

class CartItem(BaseModel):
    """A cart line; lines are distinguished by product, size and color together"""
    product_id: str
    quantity: int
    selected_size: str = ""
    selected_color: str = ""

    @property
    def line_key(self) -> LineKey:
        return (self.product_id, self.selected_size, self.selected_color)

class Cart(BaseModel):
    """Shopping cart document"""
    id: Optional[str] = None
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    items: List[CartItem] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def empty(cls, identity: CartIdentity) -> "Cart":
        """Unpersisted cart for an identity that has none yet"""
        cart = cls()
        cart.bind(identity)
        return cart

    @property
    def identity(self) -> Optional[CartIdentity]:
        if self.user_id:
            return CartIdentity.user(self.user_id)
        if self.session_id:
            return CartIdentity.session(self.session_id)
        return None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def bind(self, identity: CartIdentity) -> None:
        """Point the cart at exactly one identity, clearing the other field"""
        if identity.is_user:
            self.user_id = identity.value
            self.session_id = None
        else:
            self.session_id = identity.value
            self.user_id = None

    def find_line(self, key: LineKey) -> Optional[CartItem]:
        for item in self.items:
            if item.line_key == key:
                return item
        return None

    def add_line(self, item: CartItem) -> CartItem:
        """Accumulate into the matching line or append a new one"""
        existing = self.find_line(item.line_key)
        if existing is not None:
            existing.quantity += item.quantity
            return existing

        line = item.model_copy()
        self.items.append(line)
        return line

    def remove_line(self, key: LineKey) -> bool:
        remaining = [item for item in self.items if item.line_key != key]
        removed = len(remaining) != len(self.items)
        self.items = remaining
        return removed

class EnrichedCartItem(CartItem):
    """Cart line with the product as it looks right now"""
    product: Optional[ProductSnapshot] = None

class CartResponse(BaseModel):
    """Cart as presented to clients"""
    id: Optional[str] = None
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    items: List[EnrichedCartItem] = Field(default_factory=list)
    total_items: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_cart(
        cls,
        cart: Cart,
        products: Optional[Dict[str, Optional[ProductSnapshot]]] = None
    ) -> "CartResponse":
        products = products or {}
        return cls(
            id=cart.id,
            user_id=cart.user_id,
            session_id=cart.session_id,
            items=[
                EnrichedCartItem(**item.model_dump(), product=products.get(item.product_id))
                for item in cart.items
            ],
            total_items=cart.total_quantity,
            created_at=cart.created_at,
            updated_at=cart.updated_at,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "id": "5b1f3c1e-7a43-4d53-9a57-3b0c7f1c2d11",
                "user_id": None,
                "session_id": "k3J9x0...",
                "items": [
                    {
                        "product_id": "0c7e2f5a-2b0b-4b8e-9c51-7f6d3f1f8a21",
                        "quantity": 2,
                        "selected_size": "M",
                        "selected_color": "red",
                        "product": {
                            "id": "0c7e2f5a-2b0b-4b8e-9c51-7f6d3f1f8a21",
                            "name": "Linen Kurta",
                            "image": "https://cdn.example.com/kurta.jpg",
                            "price": "2499.00"
                        }
                    }
                ],
                "total_items": 2,
            }
        }

@dataclass(frozen=True)
class MergeResult:
    """What a session-to-user merge moved"""
    merged_lines: int = 0
    merged_quantity: int = 0
