# app/api/deps.py
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError

from app.config import settings
from app.core.errors import AuthenticationRequired
from app.database import db, FileBackedDB
from app.db.cart_store import CartStore
from app.services.cart_service import CartService
from app.services.product_client import ProductClient

# auto_error=False: a missing header is handled below so the x-user-id fallback can apply
bearer_scheme = HTTPBearer(auto_error=False)

# claims checked, in order, for the caller's id
IDENTITY_CLAIMS = ("userId", "sub", "user_id", "id")


def get_db() -> FileBackedDB:
    """
    Dependency that returns the file-backed DB object.
    Usage:
        db = Depends(get_db)
    """
    return db


def get_cart_store(database: FileBackedDB = Depends(get_db)) -> CartStore:
    return CartStore(database)


def get_product_client() -> ProductClient:
    return ProductClient()


def get_cart_service(
    store: CartStore = Depends(get_cart_store),
    products: ProductClient = Depends(get_product_client),
) -> CartService:
    return CartService(store, products)


def _decode_token(token: str) -> Optional[str]:
    """
    Verify a JWT with the configured secret and return the first identity claim
    found, else None. Raises JWTError if the token does not verify.
    """
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    for claim in IDENTITY_CLAIMS:
        value = payload.get(claim)
        if value:
            return str(value)
    return None


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Resolve the caller's user id.

    This function accepts:
     - A signed JWT in `Authorization: Bearer ...` carrying a userId/sub/user_id/id claim.
       A token that fails verification, or has none of those claims, is rejected with 403.
     - When no bearer token is sent and TRUST_USER_ID_HEADER is on, the `x-user-id`
       header set by the API gateway.
    Raises AuthenticationRequired (401) when no identity is supplied at all.
    """
    if credentials and credentials.credentials:
        try:
            user_id = _decode_token(credentials.credentials)
        except JWTError:
            user_id = None
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Token is invalid or expired",
            )
        return user_id

    if settings.TRUST_USER_ID_HEADER:
        header_id = (request.headers.get("x-user-id") or "").strip()
        if header_id:
            return header_id

    raise AuthenticationRequired("Authentication token is required")
