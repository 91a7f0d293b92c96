import pytest

from app.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from app.repos.unit_of_work import UnitOfWork
from app.services.inventory_ledger import InventoryLedger


def test_reserve_decrements_stock(db, make_variant, stock_of):
    v = make_variant(stock=5)

    with UnitOfWork(db) as uow:
        uow.inventory.reserve(v.id, 3)

    assert stock_of(v.id) == 2


def test_reserve_more_than_available_fails_and_keeps_stock(db, make_variant, stock_of):
    v = make_variant(stock=2)

    with pytest.raises(InsufficientStockError) as exc:
        with UnitOfWork(db) as uow:
            uow.inventory.reserve(v.id, 3)

    assert exc.value.variant_id == v.id
    assert exc.value.available == 2
    assert stock_of(v.id) == 2


def test_reserve_exact_stock_reaches_zero(db, make_variant, stock_of):
    v = make_variant(stock=1)

    with UnitOfWork(db) as uow:
        uow.inventory.reserve(v.id, 1)

    assert stock_of(v.id) == 0
    with pytest.raises(InsufficientStockError):
        with UnitOfWork(db) as uow:
            uow.inventory.reserve(v.id, 1)
    assert stock_of(v.id) == 0


def test_release_increments_stock(db, make_variant, stock_of):
    v = make_variant(stock=0)

    with UnitOfWork(db) as uow:
        uow.inventory.release(v.id, 4)

    assert stock_of(v.id) == 4


def test_failed_unit_of_work_rolls_back_earlier_reservations(db, make_variant, stock_of):
    a = make_variant(stock=5)
    b = make_variant(stock=1)

    with pytest.raises(InsufficientStockError):
        with UnitOfWork(db) as uow:
            uow.inventory.reserve(a.id, 2)
            uow.inventory.reserve(b.id, 2)

    assert stock_of(a.id) == 5
    assert stock_of(b.id) == 1


def test_stock_never_negative_over_a_sequence(db, make_variant, stock_of):
    v = make_variant(stock=3)
    ledger = InventoryLedger(db)

    for op, qty in [("reserve", 2), ("reserve", 2), ("release", 1), ("reserve", 2), ("reserve", 1)]:
        try:
            getattr(ledger, op)(v.id, qty)
            db.commit()
        except InsufficientStockError:
            db.rollback()
        assert stock_of(v.id) >= 0

    assert stock_of(v.id) == 0


def test_unknown_variant(db):
    ledger = InventoryLedger(db)

    with pytest.raises(NotFoundError):
        ledger.reserve(999, 1)
    with pytest.raises(NotFoundError):
        ledger.release(999, 1)
    with pytest.raises(NotFoundError):
        ledger.available(999)


@pytest.mark.parametrize("qty", [0, -1])
def test_non_positive_quantity_is_rejected(db, variant, qty):
    ledger = InventoryLedger(db)

    with pytest.raises(ValidationError):
        ledger.reserve(variant.id, qty)
    with pytest.raises(ValidationError):
        ledger.release(variant.id, qty)
