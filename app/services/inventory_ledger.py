# app/services/inventory_ledger.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.variant import VariantModel
from app.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from app.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryLedger:
    """
    Atomowa rezerwacja i zwalnianie stanu magazynowego.

    Sprawdzenie i dekrementacja to jeden UPDATE z warunkiem na stock, baza
    trzyma blokade wiersza do konca transakcji, wiec rownolegly checkout
    widzi juz zmniejszony stan. Nigdy nie commituje, dziala w transakcji
    wywolujacego (UnitOfWork).
    """

    def __init__(self, db: Session):
        self.db = db

    def available(self, variant_id: int) -> int:
        stock = self.db.execute(
            select(VariantModel.stock).where(VariantModel.id == variant_id)
        ).scalar_one_or_none()
        if stock is None:
            raise NotFoundError("variant", variant_id)
        return stock

    def reserve(self, variant_id: int, quantity: int) -> None:
        self._check_quantity(quantity)

        result = self.db.execute(
            update(VariantModel)
            .where(VariantModel.id == variant_id, VariantModel.stock >= quantity)
            .values(stock=VariantModel.stock - quantity)
            .execution_options(synchronize_session="fetch")
        )

        if result.rowcount == 0:
            available = self.available(variant_id)
            logger.info(
                f"Reservation of {quantity} x variant {variant_id} rejected, available {available}"
            )
            raise InsufficientStockError(variant_id, available)

        logger.info(f"Reserved {quantity} x variant {variant_id}")

    def release(self, variant_id: int, quantity: int) -> None:
        self._check_quantity(quantity)

        result = self.db.execute(
            update(VariantModel)
            .where(VariantModel.id == variant_id)
            .values(stock=VariantModel.stock + quantity)
            .execution_options(synchronize_session="fetch")
        )

        if result.rowcount == 0:
            raise NotFoundError("variant", variant_id)

        logger.info(f"Released {quantity} x variant {variant_id}")

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0", quantity=quantity)
