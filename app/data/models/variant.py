from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String

from app.data.database import Base


class VariantModel(Base):
    """Wariant produktu (SKU) razem ze stanem magazynowym."""

    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True)
    sku = Column(String(64), nullable=False, unique=True)
    product_name = Column(String(255), nullable=False)

    price = Column(Numeric(12, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)

    __table_args__ = (CheckConstraint("stock >= 0", name="ck_variant_stock_non_negative"),)
