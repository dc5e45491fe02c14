from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from app.api.deps import get_cart_service, get_current_user_id
from app.api.schemas.cart import AddItemRequest, CartOut, CartWithIdOut, UpdateItemRequest
from app.core.errors import CartServiceError
from app.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _to_http(exc: CartServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc), headers=exc.headers)


@router.get("", response_model=CartWithIdOut)
async def get_cart(
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
):
    """
    Return the caller's cart with every line enriched from the product service.
    Lines whose product lookup fails come back as placeholders.
    """
    return await service.get_cart(user_id)


@router.post("", response_model=CartOut)
async def add_to_cart(
    response: Response,
    payload: AddItemRequest = Body(...),
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
):
    """
    Add `quantity` of `productId` to the cart. Adding a product already in the
    cart increases that line's quantity. Answers 201 when the cart is created.
    """
    try:
        cart, created = await service.add_item(user_id, payload.product_id, payload.quantity)
    except CartServiceError as e:
        raise _to_http(e)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return cart


@router.put("/{item_id}", response_model=CartOut)
async def update_cart_item(
    item_id: str,
    payload: UpdateItemRequest = Body(...),
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
):
    """Set the line's quantity to exactly the requested value."""
    try:
        return await service.update_item(user_id, item_id, payload.quantity)
    except CartServiceError as e:
        raise _to_http(e)


@router.delete("/{item_id}", response_model=CartOut)
async def remove_cart_item(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
):
    try:
        return await service.remove_item(user_id, item_id)
    except CartServiceError as e:
        raise _to_http(e)


@router.delete("", response_model=CartOut)
async def clear_cart(
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
):
    return await service.clear_cart(user_id)
