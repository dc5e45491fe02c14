# app/db/cart_store.py
from datetime import datetime, timezone
from typing import Optional

from app.database import FileBackedDB
from app.models.cart import Cart

TABLE = "carts"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class CartStore:
    """
    Carts keyed by user id, one row per user in the `carts` table.

    save() writes the full line list with no version check: two concurrent
    mutations for the same user both read, then the last write wins.
    """

    def __init__(self, db: FileBackedDB):
        self.db = db

    def get(self, user_id: str) -> Optional[Cart]:
        row = self.db.get_record(TABLE, "user_id", user_id)
        if not row:
            return None
        return Cart.from_dict(row)

    def save(self, cart: Cart) -> Cart:
        """Upsert by user id. Fills in id / timestamps on first save."""
        cart.updated_at = _now()
        if cart.id:
            updates = cart.to_dict()
            updates.pop("id")
            updates.pop("created_at")
            row = self.db.update_record(TABLE, "user_id", cart.user_id, updates)
            if row is not None:
                return Cart.from_dict(row)
        # new cart (or its row vanished under us): create it
        cart.created_at = cart.created_at or cart.updated_at
        row = self.db.create_record(TABLE, cart.to_dict(), id_field="id")
        return Cart.from_dict(row)
