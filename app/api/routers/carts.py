# app/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_cart_service, get_current_user
from app.domain.auth import CurrentUser
from app.domain.errors import DomainError
from app.domain.schemas import CartItemIn, CartItemUpdateIn, CartOut, CartSummaryOut
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    """Aktywny koszyk uzytkownika, tworzony przy pierwszym odczycie."""
    return svc.get_cart(user.id)


@router.get("/summary", response_model=CartSummaryOut)
def get_summary(
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_summary(user.id)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.add_item(user.id, payload.variant_id, payload.quantity)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.patch("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: CartItemUpdateIn,
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.update_item(user.id, item_id, payload.quantity)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.remove_item(user.id, item_id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("", response_model=CartOut)
def clear_cart(
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.clear_cart(user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
