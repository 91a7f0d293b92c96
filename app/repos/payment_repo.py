# app/repos/payment_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_order(self, order_id: int) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.order_id == order_id)
        ).scalar_one_or_none()

    def create_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def compare_and_set_status(self, payment_id: int, expected_status: str, values: dict) -> int:
        # update payments set ... where id = :id and status = :expected
        result = self.db.execute(
            update(PaymentModel)
            .where(PaymentModel.id == payment_id, PaymentModel.status == expected_status)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
