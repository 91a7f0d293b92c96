# app/api/deps.py
"""
Zaleznosci FastAPI w kolejnosci: authenticate -> authorize (rola) -> body -> handler.

Serwisy skladane jawnie przez konstruktory; singletony procesu
(lock, powiadomienia, bramka platnosci) tworzone raz.
"""
from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.auth import CurrentUser, Role
from app.services.cart_service import CartService
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService
from app.services.order_state_machine import OrderStateMachine
from app.services.payment_gateway import PaymentGateway, SimulatedGateway
from app.services.payment_service import PaymentService


def get_current_user(
    x_user_id: str | None = Header(None),
    x_user_role: str = Header(Role.USER.value),
) -> CurrentUser:
    if not x_user_id or not x_user_id.isdigit() or int(x_user_id) <= 0:
        raise HTTPException(status_code=401, detail="Missing or invalid X-User-Id")
    try:
        role = Role(x_user_role.upper())
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid X-User-Role") from None
    return CurrentUser(id=int(x_user_id), role=role)


def require_role(*roles: Role):
    def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return user

    return checker


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


@lru_cache
def get_notification_service() -> NotificationService:
    return NotificationService()


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    return SimulatedGateway()


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


def get_order_service(
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
    lock_service: LockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(db=db, notifications=notifications, lock_service=lock_service)


def get_payment_service(
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentService:
    return PaymentService(db, gateway=gateway, state_machine=OrderStateMachine(db, notifications))
