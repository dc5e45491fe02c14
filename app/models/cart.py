# app/models/cart.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
import json


@dataclass
class CartLine:
    product_id: str
    quantity: int = 1

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CartLine":
        if d is None:
            raise ValueError("Cannot construct CartLine from None")
        product_id = str(d.get("productId") or d.get("product_id") or "")
        raw_quantity = d.get("quantity")
        try:
            if raw_quantity in (None, ""):
                quantity = 1
            elif isinstance(raw_quantity, int):
                quantity = raw_quantity
            else:
                quantity = int(float(raw_quantity))
        except (TypeError, ValueError):
            quantity = 0
        return cls(product_id=product_id, quantity=quantity)

    def to_dict(self) -> Dict[str, Any]:
        return {"productId": self.product_id, "quantity": int(self.quantity)}


@dataclass
class Cart:
    """
    One cart per user. Saved to CSV/Excel as a single row with 'items' serialized
    as JSON (list of CartLine dicts). Line order is the order products were first added.
    """
    user_id: str
    items: List[CartLine] = field(default_factory=list)
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Cart":
        if d is None:
            raise ValueError("Cannot construct Cart from None")
        raw_items = d.get("items") or []
        if isinstance(raw_items, str):
            try:
                parsed = json.loads(raw_items)
            except ValueError:
                parsed = []
            raw_items = parsed if isinstance(parsed, list) else []
        items = []
        for it in raw_items:
            if isinstance(it, CartLine):
                items.append(it)
            elif isinstance(it, dict):
                line = CartLine.from_dict(it)
                # rows written by hand may carry blanks or zero quantities; never keep them
                if line.product_id and line.quantity >= 1:
                    items.append(line)
        return cls(
            user_id=str(d.get("user_id") or d.get("userId") or ""),
            items=items,
            id=d.get("id") or None,
            created_at=d.get("created_at") or None,
            updated_at=d.get("updated_at") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id or "",
            "user_id": self.user_id,
            "items": json.dumps([it.to_dict() for it in self.items], ensure_ascii=False),
            "created_at": self.created_at or "",
            "updated_at": self.updated_at or "",
        }

    # business helpers

    def find_line(self, product_id: str) -> Optional[CartLine]:
        for it in self.items:
            if it.product_id == str(product_id):
                return it
        return None

    def add_line(self, product_id: str, quantity: int) -> CartLine:
        """Increment an existing line's quantity, or append a new line."""
        existing = self.find_line(product_id)
        if existing is not None:
            existing.quantity = int(existing.quantity) + int(quantity)
            return existing
        line = CartLine(product_id=str(product_id), quantity=int(quantity))
        self.items.append(line)
        return line

    def set_quantity(self, product_id: str, quantity: int) -> bool:
        """Replace a line's quantity. Returns False if the product has no line."""
        line = self.find_line(product_id)
        if line is None:
            return False
        line.quantity = int(quantity)
        return True

    def remove_line(self, product_id: str) -> bool:
        """Drop the line for product_id. Returns True if a line was removed."""
        before = len(self.items)
        self.items = [it for it in self.items if it.product_id != str(product_id)]
        return len(self.items) != before

    def clear(self) -> None:
        self.items = []


@dataclass
class EnrichedCartLine:
    """Response-only view of a cart line joined with live product data."""
    product_id: str
    quantity: int
    name: str = "Product"
    description: str = ""
    price: float = 0.0
    image: str = ""
    stock: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.product_id,
            "productId": self.product_id,
            "quantity": int(self.quantity),
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "image": self.image,
            "stock": self.stock,
        }
