# app/services/order_service.py
import uuid
from contextlib import contextmanager
from typing import List, Optional

from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.domain.errors import ConflictError, ForbiddenError, NotFoundError, OrderNotPendingError
from app.domain.auth import Role
from app.domain.order_status import OrderStatus
from app.repos.order_repo import OrderQuery, OrderRepo
from app.services.cart_snapshot import CartSnapshotBuilder
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.services.order_state_machine import OrderStateMachine
from app.services.order_store import OrderStore
from app.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Use case'y zamowien: checkout, odczyt, zmiana statusu, anulowanie przez klienta.
    Separacja od CartService, zapis zamowienia w OrderStore, statusy w OrderStateMachine.
    """

    def __init__(
        self,
        db: Session,
        notifications: NotificationService,
        lock_service: LockService,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.snapshots = CartSnapshotBuilder(db)
        self.store = OrderStore(db)
        self.state_machine = OrderStateMachine(db, notifications)
        self.notifications = notifications
        self.lock_service = lock_service

    #commands
    def checkout(self, user_id: int, address_id: int, notes: Optional[str] = None) -> OrderModel:
        """
        1. blokada checkoutu uzytkownika (redis)
        2. walidacja koszyka (snapshot)
        3. zamowienie + rezerwacja + czyszczenie koszyka w jednej transakcji
        4. powiadomienie (async)
        """
        with self._checkout_guard(user_id):
            snapshot = self.snapshots.build(user_id)
            order = self.store.place_order(user_id, address_id, snapshot, notes=notes)

        self.notifications.order_confirmed(order)
        return order

    def update_status(
        self,
        order_id: int,
        status: OrderStatus,
        tracking_number: Optional[str] = None,
        carrier: Optional[str] = None,
    ) -> OrderModel:
        return self.state_machine.transition(
            order_id, status, tracking_number=tracking_number, carrier=carrier
        )

    def cancel(self, order_id: int, user_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("order", order_id)

        if order.user_id != user_id:
            raise ForbiddenError("You do not have access to this order", order_id=order_id)

        if order.status != OrderStatus.PENDING.value:
            raise OrderNotPendingError(order_id, order.status)

        logger.info(f"User {user_id} cancels order {order_id}")
        return self.state_machine.transition(order_id, OrderStatus.CANCELLED)

    #query
    def get_order(self, order_id: int, user_id: int, role: Role) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("order", order_id)

        if role != Role.ADMIN and order.user_id != user_id:
            raise ForbiddenError("You do not have access to this order", order_id=order_id)

        return order

    def list_orders(self, user_id: int, role: Role, query: OrderQuery) -> List[OrderModel]:
        # zwykly uzytkownik widzi tylko swoje zamowienia
        if role != Role.ADMIN:
            query.user_id = user_id
        return self.repo.find(query)

    @contextmanager
    def _checkout_guard(self, user_id: int):
        token = uuid.uuid4().hex
        try:
            acquired = self.lock_service.acquire_checkout_lock(
                user_id, token, ttl=CHECKOUT_LOCK_TTL_SECONDS
            )
        except RedisError as e:
            logger.warning(f"Checkout guard unavailable for user {user_id}, continuing: {e}")
            acquired = None

        if acquired is None:
            yield
            return

        if not acquired:
            raise ConflictError("Checkout already in progress", user_id=user_id)

        try:
            yield
        finally:
            try:
                self.lock_service.release_checkout_lock(user_id, token)
            except RedisError as e:
                logger.warning(f"Failed to release checkout guard for user {user_id}: {e}")
