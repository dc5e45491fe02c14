# tests/conftest.py
import asyncio
import os
import sys
from typing import Any, Dict, Optional
from urllib.parse import unquote

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

# ensure project root is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app.config import settings  # noqa: E402
from app import database as app_database  # noqa: E402
from app.api.deps import get_product_client  # noqa: E402
from app.main import app  # noqa: E402
from app.services.product_client import ProductClient  # noqa: E402


@pytest.fixture(autouse=True)
def temp_data_dir(tmp_path, monkeypatch):
    """
    Point the file-backed DB at a per-test temporary directory so carts never
    leak between tests.
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(app_database.db, "data_dir", data_dir)
    yield data_dir


class FakeCatalog:
    """
    Stand-in for the product service behind httpx.MockTransport.

    products maps product id -> one of:
      - dict: returned as the JSON body with status 200
      - int: returned as a bare status code
      - Exception instance: raised from the transport (e.g. httpx.ConnectError)
    Unknown ids answer 404. Every raw (still percent-encoded) request path is
    recorded in `calls`.
    """

    def __init__(self):
        self.products: Dict[str, Any] = {}
        self.delays: Dict[str, float] = {}
        self.calls = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        raw_path = request.url.raw_path.decode("ascii")
        self.calls.append(raw_path)
        product_id = unquote(raw_path.split("?", 1)[0].rsplit("/", 1)[-1])
        delay = self.delays.get(product_id)
        if delay:
            await asyncio.sleep(delay)
        entry = self.products.get(product_id, 404)
        if isinstance(entry, Exception):
            raise entry
        if isinstance(entry, int):
            return httpx.Response(entry, json={"error": "Not Found"})
        return httpx.Response(200, json=entry)

    def client(self, timeout: float = 2.0) -> ProductClient:
        return ProductClient(
            base_url="http://product-service.test",
            timeout=timeout,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def client(catalog):
    app.dependency_overrides[get_product_client] = lambda: catalog.client()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_token():
    """
    Build a signed JWT the way the auth service issues them.
    Usage: tok = make_token("u1")
    """
    def _fn(user_id: str, claim: str = "userId", secret: Optional[str] = None):
        return jwt.encode(
            {claim: user_id, "email": f"{user_id}@example.com", "role": "buyer"},
            secret or settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
    return _fn


@pytest.fixture
def auth_header(make_token):
    """
    Helper that returns a callable to build Authorization header for a user id.
    Usage: hdr = auth_header("u1")
    """
    def _h(user_id: str):
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _h
