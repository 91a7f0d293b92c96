# app/services/order_state_machine.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.domain.errors import ConcurrentModificationError, IllegalTransitionError, NotFoundError
from app.domain.order_status import OrderStatus, can_transition
from app.repos.unit_of_work import UnitOfWork
from app.services.notification_service import NotificationService
from app.utils.settings import ESTIMATED_DELIVERY_DAYS
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StatusChange:
    order: OrderModel
    old_status: OrderStatus
    new_status: OrderStatus


class OrderStateMachine:
    """
    Pilnuje dozwolonych przejsc statusu zamowienia i ich efektow ubocznych.

    - CANCELLED: zwrot stanu dla kazdej pozycji, w tej samej transakcji co zmiana statusu
    - SHIPPED: estimated_delivery = teraz + ESTIMATED_DELIVERY_DAYS jesli nie podano
    - zapis statusu to compare-and-swap na aktualnym statusie
    - powiadomienia dopiero po commicie, bledy powiadomien nie cofaja zmiany
    """

    def __init__(self, db: Session, notifications: NotificationService):
        self.db = db
        self.notifications = notifications

    def transition(
        self,
        order_id: int,
        target: OrderStatus,
        tracking_number: Optional[str] = None,
        carrier: Optional[str] = None,
        estimated_delivery: Optional[datetime] = None,
    ) -> OrderModel:
        with UnitOfWork(self.db) as uow:
            change = self.apply(
                uow,
                order_id,
                target,
                tracking_number=tracking_number,
                carrier=carrier,
                estimated_delivery=estimated_delivery,
            )

        self.notify(change)
        return change.order

    def apply(
        self,
        uow: UnitOfWork,
        order_id: int,
        target: OrderStatus,
        tracking_number: Optional[str] = None,
        carrier: Optional[str] = None,
        estimated_delivery: Optional[datetime] = None,
    ) -> StatusChange:
        """Sprawdza i zapisuje przejscie w transakcji wywolujacego, bez commita."""
        target = OrderStatus(target)
        order = uow.orders.get_order(order_id)
        if order is None:
            raise NotFoundError("order", order_id)

        current = OrderStatus(order.status)
        if not can_transition(current, target):
            raise IllegalTransitionError(current.value, target.value)

        if target == OrderStatus.CANCELLED:
            # kompensacja rezerwacji z checkoutu, ta sama kolejnosc blokad co przy rezerwacji
            items = sorted(uow.orders.get_order_items(order_id), key=lambda i: i.variant_id)
            for item in items:
                uow.inventory.release(item.variant_id, item.quantity)

        values = {"status": target.value}
        if tracking_number:
            values["tracking_number"] = tracking_number
        if carrier:
            values["carrier"] = carrier
        if target == OrderStatus.SHIPPED:
            values["estimated_delivery"] = estimated_delivery or (
                datetime.now(timezone.utc) + timedelta(days=ESTIMATED_DELIVERY_DAYS)
            )

        rowcount = uow.orders.compare_and_set_status(order_id, current.value, values)
        if rowcount == 0:
            raise ConcurrentModificationError(
                f"Order {order_id} status changed concurrently", order_id=order_id
            )

        logger.info(f"Order {order_id}: {current.value} -> {target.value}")
        return StatusChange(order=order, old_status=current, new_status=target)

    def notify(self, change: StatusChange) -> None:
        if change.old_status == change.new_status:
            return

        self.notifications.status_changed(change.order, change.old_status, change.new_status)
        if change.new_status == OrderStatus.SHIPPED:
            self.notifications.shipped(change.order)
