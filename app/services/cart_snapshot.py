# app/services/cart_snapshot.py
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.domain.errors import EmptyCartError, InsufficientStockError, NotFoundError
from app.repos.cart_repo import CartRepo
from app.repos.variant_repo import VariantRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SnapshotLine:
    cart_item_id: int
    variant_id: int
    quantity: int
    unit_price: Decimal
    product_name: str


@dataclass(frozen=True)
class CartSnapshot:
    cart_id: int
    user_id: int
    lines: Tuple[SnapshotLine, ...]

    def priced_lines(self) -> List[Tuple[Decimal, int]]:
        return [(line.unit_price, line.quantity) for line in self.lines]


class CartSnapshotBuilder:
    """
    Query: waliduje koszyk w chwili checkoutu, niczego nie zapisuje.

    Cena brana z pozycji koszyka (zapisana przy dodaniu), nazwa produktu
    i stan z aktualnego katalogu. Sprawdzenie stanu jest optymistyczne,
    ostateczna blokada to rezerwacja w InventoryLedger.
    """

    def __init__(self, db: Session):
        self.carts = CartRepo(db)
        self.variants = VariantRepo(db)

    def build(self, user_id: int) -> CartSnapshot:
        cart = self.carts.get_cart_by_user(user_id)
        items = self.carts.get_cart_items(cart.id) if cart else []

        if not items:
            raise EmptyCartError()

        lines = []
        for item in items:
            variant = self.variants.get(item.variant_id)
            if variant is None:
                raise NotFoundError("variant", item.variant_id)

            if item.quantity > variant.stock:
                logger.info(
                    f"Cart {cart.id}: variant {variant.id} wants {item.quantity}, stock {variant.stock}"
                )
                raise InsufficientStockError(variant.id, variant.stock)

            lines.append(
                SnapshotLine(
                    cart_item_id=item.id,
                    variant_id=variant.id,
                    quantity=item.quantity,
                    unit_price=Decimal(item.price),
                    product_name=variant.product_name,
                )
            )

        return CartSnapshot(cart_id=cart.id, user_id=user_id, lines=tuple(lines))
