from decimal import Decimal

import pytest

from app.domain.pricing import compute_totals, round_amount, shipping_cost_for


def test_two_units_below_threshold_pay_flat_shipping():
    totals = compute_totals([(Decimal("50000"), 2)])

    assert totals.subtotal == Decimal("100000")
    assert totals.tax == Decimal("19000")
    assert totals.shipping_cost == Decimal("15000")
    assert totals.total == Decimal("134000")
    assert totals.amount_for_free_shipping == Decimal("100000")


@pytest.mark.parametrize(
    "subtotal, shipping",
    [
        (Decimal("200000"), Decimal("0")),
        (Decimal("199999"), Decimal("15000")),
        (Decimal("250000"), Decimal("0")),
    ],
)
def test_free_shipping_boundary(subtotal, shipping):
    assert shipping_cost_for(subtotal) == shipping


def test_totals_at_free_shipping_threshold():
    totals = compute_totals([(Decimal("100000"), 2)])

    assert totals.shipping_cost == Decimal("0")
    assert totals.tax == Decimal("38000")
    assert totals.total == Decimal("238000")
    assert totals.amount_for_free_shipping == Decimal("0")


def test_totals_just_below_threshold():
    totals = compute_totals([(Decimal("199999"), 1)])

    # 199999 * 0.19 = 37999.81
    assert totals.tax == Decimal("38000")
    assert totals.shipping_cost == Decimal("15000")
    assert totals.total == Decimal("252999")


def test_rounding_is_half_up():
    assert round_amount(Decimal("9.5")) == Decimal("10")
    assert round_amount(Decimal("10.49")) == Decimal("10")
    # 50 * 0.19 = 9.50
    assert compute_totals([(Decimal("50"), 1)]).tax == Decimal("10")


def test_multiple_lines_are_summed():
    totals = compute_totals([(Decimal("129900"), 1), (Decimal("50000"), 3)])

    assert totals.subtotal == Decimal("279900")
    assert totals.shipping_cost == Decimal("0")
    assert totals.total == Decimal("333081")
