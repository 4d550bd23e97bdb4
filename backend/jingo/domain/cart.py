"""
Shopping cart

The storefront keeps the cart client-side and sends it back as JSON; this
module holds the bookkeeping rules so the API can re-price and validate it.
"""
import json
import logging
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class CartItem(BaseModel):
    product_id: int
    sku: Optional[str] = None
    name: str
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(1, ge=1)

    @property
    def line_total(self) -> Decimal:
        return (self.price * self.quantity).quantize(CENT)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "sku": self.sku,
            "name": self.name,
            "price": float(self.price),
            "quantity": self.quantity,
            "line_total": float(self.line_total),
        }


class Cart:
    """Ordered collection of cart lines, one line per product"""

    def __init__(self, items: Optional[List[CartItem]] = None):
        self.items: List[CartItem] = list(items or [])

    def _find(self, product_id: int) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def add(self, item: CartItem, quantity: int = 1) -> None:
        """Add a product, merging quantities when it is already in the cart; quantity < 1 is ignored"""
        if quantity <= 0:
            return
        existing = self._find(item.product_id)
        if existing:
            existing.quantity += quantity
            return
        self.items.append(item.model_copy(update={"quantity": quantity}))

    def remove(self, product_id: int) -> None:
        self.items = [item for item in self.items if item.product_id != product_id]

    def update_quantity(self, product_id: int, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line"""
        if quantity <= 0:
            self.remove(product_id)
            return
        existing = self._find(product_id)
        if existing:
            existing.quantity = quantity

    def clear(self) -> None:
        self.items = []

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> Decimal:
        total = sum((item.price * item.quantity for item in self.items), Decimal("0"))
        return total.quantize(CENT)

    def __len__(self) -> int:
        return len(self.items)

    @classmethod
    def from_json(cls, text: Optional[str]) -> "Cart":
        """
        Load a stored cart.

        Invalid JSON or a non-list payload gives an empty cart; malformed
        entries are dropped.
        """
        if not text:
            return cls()

        try:
            parsed = json.loads(text)
        except ValueError:
            logger.warning("Stored cart is not valid JSON, starting empty")
            return cls()

        if not isinstance(parsed, list):
            return cls()

        items = []
        for entry in parsed:
            if not isinstance(entry, dict):
                continue
            try:
                items.append(CartItem.model_validate(entry))
            except ValidationError:
                logger.debug(f"Dropping malformed cart entry: {entry}")
        return cls(items)

    def to_json(self) -> str:
        return json.dumps([
            {
                "product_id": item.product_id,
                "sku": item.sku,
                "name": item.name,
                "price": str(item.price),
                "quantity": item.quantity,
            }
            for item in self.items
        ])

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "total_items": self.total_items,
            "total_price": float(self.total_price),
        }
