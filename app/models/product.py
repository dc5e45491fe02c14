# app/models/product.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict, Any


def _first_image_url(images: Any) -> Optional[str]:
    if not isinstance(images, list) or not images:
        return None
    first = images[0]
    if isinstance(first, dict):
        return first.get("url") or None
    if isinstance(first, str):
        return first or None
    return None


def _as_float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value: Any, default: int = 0) -> int:
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


@dataclass
class ProductView:
    """
    Display fields pulled out of a product-service payload. The catalog schema
    varies between product versions, so every field is read defensively.
    """
    name: str = "Product"
    description: str = ""
    price: float = 0.0
    image: Optional[str] = None
    stock: int = 0

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], placeholder_image: str) -> "ProductView":
        """
        Build a view from a product JSON object.

        image: images[0] (url or bare string) -> image -> thumbnail -> placeholder
        stock: inventory.available -> stock -> 0
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Product payload must be an object, got {type(payload).__name__}")

        image = (
            _first_image_url(payload.get("images"))
            or payload.get("image")
            or payload.get("thumbnail")
            or placeholder_image
        )

        inventory = payload.get("inventory")
        available = inventory.get("available") if isinstance(inventory, dict) else None
        stock_raw = available if available is not None else payload.get("stock")

        return cls(
            name=str(payload.get("name") or "Product"),
            description=str(payload.get("description") or ""),
            price=_as_float(payload.get("price")),
            image=str(image),
            stock=_as_int(stock_raw),
        )
