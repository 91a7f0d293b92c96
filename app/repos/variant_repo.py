# app/repos/variant_repo.py
from sqlalchemy.orm import Session

from app.data.models.variant import VariantModel


class VariantRepo:
    """Odczyty katalogu (cena, nazwa, stan). Zapisy stanu tylko przez InventoryLedger."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, variant_id: int) -> VariantModel | None:
        return self.db.get(VariantModel, variant_id)
