# app/api/routers/orders.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_current_user, get_order_service, require_role
from app.domain.auth import CurrentUser, Role
from app.domain.errors import DomainError
from app.domain.order_status import OrderStatus
from app.domain.schemas import OrderCreate, OrderOut, OrderStatusUpdate
from app.repos.order_repo import OrderQuery
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=List[OrderOut])
def list_orders(
    status: Optional[OrderStatus] = Query(None),
    user_id: Optional[int] = Query(None, description="Filtr tylko dla ADMIN"),
    created_from: Optional[datetime] = Query(None),
    created_to: Optional[datetime] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: CurrentUser = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    query = OrderQuery(
        user_id=user_id,
        status=status.value if status else None,
        created_from=created_from,
        created_to=created_to,
        limit=limit,
        offset=offset,
    )
    return svc.list_orders(user.id, user.role, query)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    """
    Pobiera szczegoly zamowienia.
    """
    try:
        return svc.get_order(order_id, user.id, user.role)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user: CurrentUser = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    """
    Checkout aktywnego koszyka na wskazany adres.
    Wysyla potwierdzenie asynchronicznie.
    """
    try:
        return svc.checkout(user.id, payload.address_id, notes=payload.notes)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusUpdate,
    admin: CurrentUser = Depends(require_role(Role.ADMIN)),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.update_status(
            order_id,
            payload.status,
            tracking_number=payload.tracking_number,
            carrier=payload.carrier,
        )
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("/{order_id}", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    # klient moze anulowac tylko wlasne zamowienie w PENDING
    try:
        return svc.cancel(order_id, user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
