# app/services/cart_service.py
import logging
import math
import uuid
from typing import Any, Dict, List, Optional, Tuple

from starlette.concurrency import run_in_threadpool

from app.core.errors import NotFoundError, ValidationError
from app.db.cart_store import CartStore
from app.models.cart import Cart, CartLine
from app.services.enrichment import enrich_items
from app.services.product_client import ProductClient

logger = logging.getLogger(__name__)


def parse_quantity(value: Any, default: Optional[int] = None) -> int:
    """
    Coerce a request quantity to an int >= 1.
    Accepts ints, integral floats and numeric strings; None falls back to `default`.
    """
    if value is None and default is not None:
        return default
    if isinstance(value, bool):
        raise ValidationError("quantity must be a number")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().lstrip("+-").isdigit():
        # exact, no float round-trip
        number = int(value)
    else:
        try:
            as_float = float(value)
        except (TypeError, ValueError):
            raise ValidationError("quantity must be a number")
        if not math.isfinite(as_float) or as_float != int(as_float):
            raise ValidationError("quantity must be a whole number")
        number = int(as_float)
    if number < 1:
        raise ValidationError("quantity must be at least 1")
    return number


def parse_product_id(value: Any) -> str:
    if value is None or isinstance(value, bool):
        raise ValidationError("productId is required")
    product_id = str(value).strip()
    if not product_id:
        raise ValidationError("productId is required")
    return product_id


class CartService:
    """
    Cart operations for one caller identity. Every mutation persists the full
    line list and then re-enriches it, so responses always reflect stored state.
    Store calls do blocking file I/O and lock waits, so they run in the threadpool.
    """

    def __init__(self, store: CartStore, products: ProductClient):
        self.store = store
        self.products = products

    async def _view(self, cart_lines: List[CartLine]) -> List[Dict[str, Any]]:
        enriched = await enrich_items(cart_lines, self.products)
        return [line.to_dict() for line in enriched]

    async def get_cart(self, user_id: str) -> Dict[str, Any]:
        cart = await run_in_threadpool(self.store.get, user_id)
        if cart is None:
            # reads never create a record; hand back an id for the empty view
            return {"id": uuid.uuid4().hex, "userId": user_id, "items": []}
        return {"id": cart.id, "userId": user_id, "items": await self._view(cart.items)}

    async def add_item(self, user_id: str, product_id: Any, quantity: Any) -> Tuple[Dict[str, Any], bool]:
        """Returns (cart view, created) where created is True if this call created the cart."""
        product_id = parse_product_id(product_id)
        quantity = parse_quantity(quantity, default=1)

        cart = await run_in_threadpool(self.store.get, user_id)
        created = cart is None
        if created:
            cart = Cart(user_id=user_id)
        cart.add_line(product_id, quantity)
        cart = await run_in_threadpool(self.store.save, cart)
        logger.info("cart %s: added %s x%d (created=%s)", user_id, product_id, quantity, created)
        return {"userId": user_id, "items": await self._view(cart.items)}, created

    async def update_item(self, user_id: str, item_id: str, quantity: Any) -> Dict[str, Any]:
        item_id = parse_product_id(item_id)
        quantity = parse_quantity(quantity)

        cart = await run_in_threadpool(self.store.get, user_id)
        if cart is None:
            raise NotFoundError("Cart not found")
        if not cart.set_quantity(item_id, quantity):
            raise NotFoundError("Cart item not found")
        cart = await run_in_threadpool(self.store.save, cart)
        return {"userId": user_id, "items": await self._view(cart.items)}

    async def remove_item(self, user_id: str, item_id: str) -> Dict[str, Any]:
        cart = await run_in_threadpool(self.store.get, user_id)
        if cart is None:
            raise NotFoundError("Cart not found")
        if cart.remove_line(item_id):
            cart = await run_in_threadpool(self.store.save, cart)
        return {"userId": user_id, "items": await self._view(cart.items)}

    async def clear_cart(self, user_id: str) -> Dict[str, Any]:
        cart = await run_in_threadpool(self.store.get, user_id)
        if cart is not None:
            cart.clear()
            await run_in_threadpool(self.store.save, cart)
        return {"userId": user_id, "items": []}
