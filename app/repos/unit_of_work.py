# app/repos/unit_of_work.py
from sqlalchemy.orm import Session

from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.repos.payment_repo import PaymentRepo
from app.services.inventory_ledger import InventoryLedger
from app.utils.logging import get_logger

logger = get_logger(__name__)


class UnitOfWork:
    """
    Jedna transakcja na sesji, uzywana jako context manager.

    Wyjscie bez wyjatku -> commit, kazdy wyjatek -> rollback i propagacja.
    Repozytoria w srodku tylko flushuja.
    """

    def __init__(self, session: Session):
        self.session = session
        self.orders = OrderRepo(session)
        self.payments = PaymentRepo(session)
        self.carts = CartRepo(session)
        self.inventory = InventoryLedger(session)

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            logger.info(f"Rolling back unit of work: {exc_type.__name__}")
            self.session.rollback()
            return False

        try:
            self.session.commit()
        except BaseException:
            self.session.rollback()
            raise
        return False
