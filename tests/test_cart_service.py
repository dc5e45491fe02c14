# tests/test_cart_service.py
import asyncio
import threading
import time

import pytest
from filelock import FileLock

from app.core.errors import ValidationError
from app.database import db as file_db
from app.db.cart_store import CartStore
from app.models.cart import Cart, CartLine
from app.services.cart_service import CartService, parse_quantity


def test_parse_quantity_keeps_large_integers_exact():
    big = 2 ** 53 + 1
    assert parse_quantity(big) == big
    assert parse_quantity(str(big)) == big
    assert parse_quantity("+7") == 7
    assert parse_quantity(3.0) == 3


@pytest.mark.parametrize("bad", [0, -1, "0", 2.5, "2.5", "abc", True, float("nan"), float("inf")])
def test_parse_quantity_rejects(bad):
    with pytest.raises(ValidationError):
        parse_quantity(bad)


def test_parse_quantity_default_only_for_missing():
    assert parse_quantity(None, default=1) == 1
    with pytest.raises(ValidationError):
        parse_quantity(None)


def test_large_quantity_survives_storage(catalog):
    big = 2 ** 53 + 1
    service = CartService(CartStore(file_db), catalog.client())

    view, created = asyncio.run(service.add_item("u-big", "p1", big))

    assert created is True
    assert view["items"][0]["quantity"] == big
    assert CartStore(file_db).get("u-big").items[0].quantity == big


def test_store_io_does_not_block_event_loop(catalog):
    store = CartStore(file_db)
    store.save(Cart(user_id="u1", items=[CartLine("p1", 1)]))
    service = CartService(store, catalog.client())

    # another writer holds the carts file lock for half a second
    lock = FileLock(str(file_db._file_path("carts")) + ".lock")
    locked = threading.Event()

    def hold():
        with lock:
            locked.set()
            time.sleep(0.5)

    holder = threading.Thread(target=hold)
    holder.start()
    locked.wait()

    async def scenario():
        gaps = []
        done = asyncio.Event()

        async def ticker():
            last = time.monotonic()
            while not done.is_set():
                await asyncio.sleep(0.02)
                now = time.monotonic()
                gaps.append(now - last)
                last = now

        async def update():
            try:
                return await service.update_item("u1", "p1", 2)
            finally:
                done.set()

        _, view = await asyncio.gather(ticker(), update())
        return gaps, view

    try:
        gaps, view = asyncio.run(scenario())
    finally:
        holder.join()

    assert gaps
    assert max(gaps) < 0.2
    assert view["items"][0]["quantity"] == 2
    assert store.get("u1").items[0].quantity == 2
