# app/repos/order_repo.py
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel


@dataclass
class OrderQuery:
    """Parametry listowania zamowien, kazde pole to osobny predykat."""

    user_id: Optional[int] = None
    status: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    limit: int = 50
    offset: int = 0


def by_user(q: OrderQuery):
    return OrderModel.user_id == q.user_id if q.user_id is not None else None


def by_status(q: OrderQuery):
    return OrderModel.status == q.status if q.status is not None else None


def created_after(q: OrderQuery):
    return OrderModel.created_at >= q.created_from if q.created_from is not None else None


def created_before(q: OrderQuery):
    return OrderModel.created_at <= q.created_to if q.created_to is not None else None


ORDER_PREDICATES: List[Callable[[OrderQuery], object]] = [
    by_user,
    by_status,
    created_after,
    created_before,
]


def build_order_select(query: OrderQuery):
    stmt = select(OrderModel)
    for fragment in ORDER_PREDICATES:
        clause = fragment(query)
        if clause is not None:
            stmt = stmt.where(clause)
    return (
        stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        .limit(query.limit)
        .offset(query.offset)
    )


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_items(self, order_id: int) -> List[OrderItemModel]:
        return list(
            self.db.execute(
                select(OrderItemModel)
                .where(OrderItemModel.order_id == order_id)
                .order_by(OrderItemModel.id)
            ).scalars()
        )

    def find(self, query: OrderQuery) -> List[OrderModel]:
        return list(self.db.execute(build_order_select(query)).scalars())

    def compare_and_set_status(self, order_id: int, expected_status: str, values: dict) -> int:
        # update orders set status = :new ... where id = :id and status = :expected
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == expected_status)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def refresh(self, order: OrderModel) -> OrderModel:
        self.db.refresh(order)
        return order
