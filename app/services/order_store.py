# app/services/order_store.py
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.errors import AddressNotFoundError, ConcurrentModificationError
from app.domain.order_status import OrderStatus
from app.domain.pricing import compute_totals
from app.repos.address_repo import AddressRepo
from app.repos.unit_of_work import UnitOfWork
from app.services.cart_snapshot import CartSnapshot
from app.utils.settings import ORDER_NUMBER_START
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderStore:
    """
    Tworzy zamowienie z pozycjami, rezerwuje stan i czysci koszyk
    jako jedna transakcja. Blad w dowolnym kroku -> pelny rollback
    (brak zamowienia, brak dekrementacji, koszyk nietkniety).
    """

    def __init__(self, db: Session):
        self.db = db
        self.addresses = AddressRepo(db)

    def place_order(
        self,
        user_id: int,
        address_id: int,
        snapshot: CartSnapshot,
        notes: str | None = None,
    ) -> OrderModel:
        address = self.addresses.find_by_id_and_user(address_id, user_id)
        if address is None:
            raise AddressNotFoundError(address_id)

        totals = compute_totals(snapshot.priced_lines())

        with UnitOfWork(self.db) as uow:
            order = uow.orders.create_order(
                OrderModel(
                    user_id=user_id,
                    status=OrderStatus.PENDING.value,
                    subtotal=totals.subtotal,
                    tax=totals.tax,
                    shipping_cost=totals.shipping_cost,
                    total=totals.total,
                    shipping_address_id=address.id,
                    shipping_address_snapshot=address.snapshot(),
                    notes=notes,
                )
            )
            # numer dla klienta, sekwencyjny bo oparty o PK
            order.order_number = ORDER_NUMBER_START + order.id

            for line in snapshot.lines:
                uow.orders.add_item(
                    OrderItemModel(
                        order_id=order.id,
                        variant_id=line.variant_id,
                        quantity=line.quantity,
                        price=line.unit_price,
                        product_name=line.product_name,
                    )
                )

            # jedyne miejsce gdzie rownolegly checkout moze jeszcze przegrac,
            # blokady wierszy zawsze w kolejnosci variant_id (bez deadlockow)
            for line in sorted(snapshot.lines, key=lambda l: l.variant_id):
                uow.inventory.reserve(line.variant_id, line.quantity)

            uow.carts.clear_items(snapshot.cart_id)
            cart = uow.carts.get_cart_by_user(user_id)
            rowcount = uow.carts.update_cart_version(
                cart_id=cart.id,
                old_version=cart.version,
                new_data={"version": cart.version + 1},
            )
            if rowcount == 0:
                raise ConcurrentModificationError(
                    f"Cart {cart.id} changed during checkout", cart_id=cart.id
                )

        uow.orders.refresh(order)
        logger.info(
            f"Order {order.id} (#{order.order_number}) placed by user {user_id}: "
            f"{len(snapshot.lines)} lines, total {order.total}"
        )
        return order
