# app/api/routers/payments.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_current_user, get_payment_service
from app.domain.auth import CurrentUser
from app.domain.errors import DomainError
from app.domain.schemas import PaymentCreate, PaymentMethodOut, PaymentOut, PaymentProcess
from app.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/methods", response_model=List[PaymentMethodOut])
def payment_methods(user: CurrentUser = Depends(get_current_user)):
    return PaymentService.payment_methods()


@router.post("/orders/{order_id}", response_model=PaymentOut, status_code=201)
def create_payment(
    order_id: int,
    payload: PaymentCreate,
    user: CurrentUser = Depends(get_current_user),
    svc: PaymentService = Depends(get_payment_service),
):
    try:
        return svc.create(order_id, payload.provider, user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.post("/orders/{order_id}/process", response_model=PaymentOut)
def process_payment(
    order_id: int,
    payload: PaymentProcess,
    user: CurrentUser = Depends(get_current_user),
    svc: PaymentService = Depends(get_payment_service),
):
    """Wynik od operatora platnosci (tu symulowany), zatwierdzenie -> zamowienie PAID."""
    # zastepuje callback operatora platnosci, stad dostep dla kazdego zalogowanego
    try:
        return svc.process(
            order_id,
            payload.success,
            transaction_id=payload.transaction_id,
            error_message=payload.error_message,
        )
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.get("/orders/{order_id}", response_model=PaymentOut)
def get_payment(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    svc: PaymentService = Depends(get_payment_service),
):
    try:
        return svc.get_for_order(order_id, user.id, user.role)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
