# app/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from app.data.database import SessionLocal, init_db
from app.data.models import AddressModel, UserModel, VariantModel
from app.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_USERS = [
    {"name": "Ana Gomez", "email": "ana@example.com", "phone": "+573001112233"},
    {"name": "Luis Perez", "email": "luis@example.com", "phone": None},
]

DEMO_VARIANTS = [
    {"sku": "TSHIRT-BLK-M", "product_name": "Basic T-shirt black M", "price": Decimal("50000"), "stock": 25},
    {"sku": "TSHIRT-WHT-L", "product_name": "Basic T-shirt white L", "price": Decimal("50000"), "stock": 10},
    {"sku": "JEANS-32", "product_name": "Slim jeans 32", "price": Decimal("129900"), "stock": 5},
    {"sku": "JACKET-M", "product_name": "Rain jacket M", "price": Decimal("249000"), "stock": 2},
]


def seed(db: Session) -> bool:
    """Dane demo; nic nie robi jesli baza ma juz uzytkownikow."""
    # not forcing: only seed if empty
    if db.query(UserModel).first():
        return False

    for data in DEMO_USERS:
        user = UserModel(**data)
        db.add(user)
        db.flush()
        db.add(
            AddressModel(
                user_id=user.id,
                street="Calle 100 # 10-20",
                city="Bogota",
                state="Cundinamarca",
                zip_code="110111",
                country="CO",
                is_default=True,
            )
        )

    for data in DEMO_VARIANTS:
        db.add(VariantModel(**data))

    db.commit()
    logger.info(f"Seeded {len(DEMO_USERS)} users and {len(DEMO_VARIANTS)} variants")
    return True


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        seed(session)
    finally:
        session.close()
