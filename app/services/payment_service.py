# app/services/payment_service.py
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.payment import PaymentModel
from app.domain.errors import (
    ConflictError,
    ConcurrentModificationError,
    DuplicatePaymentError,
    ForbiddenError,
    NotFoundError,
    OrderNotPendingError,
    UnsupportedProviderError,
)
from app.domain.auth import Role
from app.domain.order_status import OrderStatus
from app.repos.order_repo import OrderRepo
from app.repos.payment_repo import PaymentRepo
from app.repos.unit_of_work import UnitOfWork
from app.services.order_state_machine import OrderStateMachine
from app.services.payment_gateway import (
    PROVIDER_NAMES,
    PaymentGateway,
    PaymentProvider,
    PaymentStatus,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentService:
    """
    Platnosc dla zamowienia w statusie PENDING (najwyzej jedna na zamowienie).
    Zatwierdzona platnosc przestawia zamowienie na PAID w tej samej transakcji.
    """

    def __init__(self, db: Session, gateway: PaymentGateway, state_machine: OrderStateMachine):
        self.db = db
        self.orders = OrderRepo(db)
        self.repo = PaymentRepo(db)
        self.gateway = gateway
        self.state_machine = state_machine

    @staticmethod
    def payment_methods() -> List[Dict[str, object]]:
        return [
            {"id": provider.value, "name": PROVIDER_NAMES[provider], "available": True}
            for provider in PaymentProvider
        ]

    def create(self, order_id: int, provider: str, user_id: int) -> PaymentModel:
        order = self.orders.get_order(order_id)
        if order is None:
            raise NotFoundError("order", order_id)

        if order.user_id != user_id:
            raise ForbiddenError("You do not have access to this order", order_id=order_id)

        if provider not in {p.value for p in PaymentProvider}:
            raise UnsupportedProviderError(provider)

        if order.status != OrderStatus.PENDING.value:
            raise OrderNotPendingError(order_id, order.status)

        if self.repo.get_by_order(order_id) is not None:
            raise DuplicatePaymentError(order_id)

        try:
            with UnitOfWork(self.db) as uow:
                payment = uow.payments.create_payment(
                    PaymentModel(
                        order_id=order_id,
                        provider=provider,
                        amount=order.total,
                        status=PaymentStatus.PENDING.value,
                    )
                )
        except IntegrityError:
            # rownolegly double-submit przegral na unikalnym order_id
            raise DuplicatePaymentError(order_id) from None

        logger.info(f"Payment {payment.id} created for order {order_id} via {provider}")
        return payment

    def process(
        self,
        order_id: int,
        success: bool,
        transaction_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> PaymentModel:
        payment = self.repo.get_by_order(order_id)
        if payment is None:
            raise NotFoundError("payment", order_id)

        # status z chwili odczytu, zapis tylko jesli nikt go w miedzyczasie nie zmienil
        read_status = payment.status
        if read_status == PaymentStatus.APPROVED.value:
            raise ConflictError(f"Payment for order {order_id} is already approved", order_id=order_id)

        result = self.gateway.charge(payment.provider, success, transaction_id)
        change = None

        with UnitOfWork(self.db) as uow:
            rowcount = uow.payments.compare_and_set_status(
                payment.id,
                read_status,
                {
                    "status": result.status.value,
                    "transaction_id": result.transaction_id,
                    "error_message": error_message if result.status == PaymentStatus.FAILED else None,
                },
            )
            if rowcount == 0:
                raise ConcurrentModificationError(
                    f"Payment for order {order_id} was processed concurrently", order_id=order_id
                )
            if result.status == PaymentStatus.APPROVED:
                change = self.state_machine.apply(uow, order_id, OrderStatus.PAID)

        logger.info(f"Payment {payment.id} for order {order_id} processed: {result.status.value}")

        if change is not None:
            self.state_machine.notify(change)
        return payment

    def get_for_order(self, order_id: int, user_id: int, role: Role) -> PaymentModel:
        order = self.orders.get_order(order_id)
        if order is None:
            raise NotFoundError("order", order_id)

        if role != Role.ADMIN and order.user_id != user_id:
            raise ForbiddenError("You do not have access to this order", order_id=order_id)

        payment = self.repo.get_by_order(order_id)
        if payment is None:
            raise NotFoundError("payment", order_id)
        return payment
