from __future__ import annotations


class CartServiceError(Exception):
    """Base class for errors the cart API reports to callers."""
    status_code = 500
    headers = None


class AuthenticationRequired(CartServiceError):
    """No caller identity was supplied."""
    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}


class ValidationError(CartServiceError):
    status_code = 400


class NotFoundError(CartServiceError):
    status_code = 404


class ProductLookupError(Exception):
    """A single product-service lookup failed. Never surfaced to API callers."""

    def __init__(self, product_id: str, reason: str):
        super().__init__(f"lookup for product {product_id} failed: {reason}")
        self.product_id = product_id
        self.reason = reason
