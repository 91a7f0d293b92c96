# tests/conftest.py
import os

# musi byc ustawione przed importem app.*, engine i celery powstaja przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["NOTIFICATION_WEBHOOK_URL"] = ""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.data.database import init_db
from app.data.models import AddressModel, OrderItemModel, OrderModel, UserModel, VariantModel
from app.domain.order_status import OrderStatus
from app.services.cart_service import CartService
from app.services.order_service import OrderService
from app.services.order_state_machine import OrderStateMachine
from app.services.payment_gateway import SimulatedGateway
from app.services.payment_service import PaymentService


class StubLock:
    """Checkout guard w pamieci zamiast redisa."""

    def __init__(self, acquire: bool = True, error: Exception | None = None):
        self.acquire = acquire
        self.error = error
        self.acquired = []
        self.released = []

    def acquire_checkout_lock(self, user_id, token, ttl):
        if self.error is not None:
            raise self.error
        if self.acquire:
            self.acquired.append(user_id)
        return self.acquire

    def release_checkout_lock(self, user_id, token):
        self.released.append(user_id)
        return True


class RecordingNotifications:
    def __init__(self):
        self.calls = []

    def order_confirmed(self, order):
        self.calls.append(("confirmed", order.id))

    def status_changed(self, order, old_status, new_status):
        self.calls.append(("status", order.id, OrderStatus(old_status), OrderStatus(new_status)))

    def shipped(self, order):
        self.calls.append(("shipped", order.id))


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    u = UserModel(name="Ana Gomez", email="ana@example.com", phone="+573001112233")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def other_user(db):
    u = UserModel(name="Luis Perez", email="luis@example.com")
    db.add(u)
    db.commit()
    return u


def _address(db, user_id):
    a = AddressModel(
        user_id=user_id,
        street="Calle 100 # 10-20",
        city="Bogota",
        state="Cundinamarca",
        zip_code="110111",
        country="CO",
        is_default=True,
    )
    db.add(a)
    db.commit()
    return a


@pytest.fixture
def address(db, user):
    return _address(db, user.id)


@pytest.fixture
def other_address(db, other_user):
    return _address(db, other_user.id)


@pytest.fixture
def make_variant(db):
    counter = {"n": 0}

    def _make(price="50000", stock=10, name=None):
        counter["n"] += 1
        v = VariantModel(
            sku=f"SKU-{counter['n']}",
            product_name=name or f"Product {counter['n']}",
            price=Decimal(price),
            stock=stock,
        )
        db.add(v)
        db.commit()
        return v

    return _make


@pytest.fixture
def variant(make_variant):
    return make_variant(price="50000", stock=10, name="Basic T-shirt")


@pytest.fixture
def make_order(db):
    """Zamowienie wstawione bezposrednio w danym statusie (bez checkoutu)."""

    def _make(user, address, status=OrderStatus.PENDING, lines=()):
        order = OrderModel(
            user_id=user.id,
            status=OrderStatus(status).value,
            subtotal=Decimal("0"),
            tax=Decimal("0"),
            shipping_cost=Decimal("0"),
            total=Decimal("0"),
            shipping_address_id=address.id,
            shipping_address_snapshot=address.snapshot(),
        )
        db.add(order)
        db.flush()
        order.order_number = 1000 + order.id
        for v, qty in lines:
            db.add(
                OrderItemModel(
                    order_id=order.id,
                    variant_id=v.id,
                    quantity=qty,
                    price=v.price,
                    product_name=v.product_name,
                )
            )
        db.commit()
        return order

    return _make


@pytest.fixture
def stock_of(db):
    def _stock(variant_id):
        return db.execute(select(VariantModel.stock).where(VariantModel.id == variant_id)).scalar_one()

    return _stock


@pytest.fixture
def notifications():
    return RecordingNotifications()


@pytest.fixture
def lock():
    return StubLock()


@pytest.fixture
def lock_factory():
    return StubLock


@pytest.fixture
def cart_service(db):
    return CartService(db)


@pytest.fixture
def order_service(db, notifications, lock):
    return OrderService(db=db, notifications=notifications, lock_service=lock)


@pytest.fixture
def state_machine(db, notifications):
    return OrderStateMachine(db, notifications)


@pytest.fixture
def payment_service(db, state_machine):
    return PaymentService(db, gateway=SimulatedGateway(), state_machine=state_machine)
