from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from textile_orders.domain.errors import ErrorKind, OrderValidationError
from textile_orders.domain.line_item import (
    LineItem,
    LineItemCandidate,
    ProductReference,
    ProductType,
    compute_subtotal,
)

D = Decimal


def test_subtotal_without_adjustments():
    assert compute_subtotal(2, D("100"), D("0"), D("0")) == D("200.00")


def test_subtotal_applies_discount_then_tax():
    assert compute_subtotal(3, D("10.50"), D("5"), D("2.5")) == D("29.00")


def test_subtotal_rounds_half_up_to_cents():
    assert compute_subtotal(3, D("0.333"), D("0"), D("0")) == D("1.00")
    assert compute_subtotal(1, D("0.125"), D("0"), D("0")) == D("0.13")


def test_discount_equal_to_base_is_allowed():
    assert compute_subtotal(2, D("100"), D("200"), D("10")) == D("10.00")


@pytest.mark.parametrize(
    "quantity,price,discount,tax",
    [
        (1, D("0.01"), D("0"), D("0")),
        (7, D("13.37"), D("1.11"), D("0.99")),
        (120, D("450.00"), D("1000"), D("250.50")),
    ],
)
def test_subtotal_is_never_negative(quantity, price, discount, tax):
    subtotal = compute_subtotal(quantity, price, discount, tax)

    assert subtotal >= 0
    assert subtotal == (max(D("0"), quantity * price - discount) + tax).quantize(D("0.01"))


def test_every_failing_field_is_reported():
    with pytest.raises(OrderValidationError) as exc:
        compute_subtotal(0, D("0"), D("-1"), D("-1"))

    assert exc.value.kinds == [
        ErrorKind.INVALID_QUANTITY,
        ErrorKind.INVALID_PRICE,
        ErrorKind.INVALID_DISCOUNT,
        ErrorKind.INVALID_TAX,
    ]


def test_quantity_above_stock_carries_the_limit():
    with pytest.raises(OrderValidationError) as exc:
        compute_subtotal(10, D("100"), D("0"), D("0"), available_quantity=5)

    assert exc.value.kinds == [ErrorKind.INSUFFICIENT_STOCK]
    assert exc.value.issues[0].limit == "5"
    assert exc.value.issues[0].field == "quantity"


def test_quantity_equal_to_stock_is_allowed():
    assert compute_subtotal(5, D("100"), D("0"), D("0"), available_quantity=5) == D("500.00")


def test_discount_above_base_is_rejected():
    with pytest.raises(OrderValidationError) as exc:
        compute_subtotal(2, D("100"), D("250"), D("0"))

    assert exc.value.kinds == [ErrorKind.DISCOUNT_EXCEEDS_BASE]
    assert exc.value.issues[0].limit == "200.00"


def test_line_item_is_built_from_candidate_and_frozen():
    candidate = LineItemCandidate(
        product=ProductReference(1, ProductType.FABRIC, "Grey Lawn", 21),
        quantity=4,
        unit_price=D("185.75"),
        available_quantity=50,
        discount=D("43.00"),
        tax=D("12.00"),
    )

    item = LineItem.from_candidate(candidate)

    assert item.subtotal == D("712.00")
    assert item.item_discount == D("43.00")
    assert item.product.key == ("FABRIC", 1, 21)
    with pytest.raises(FrozenInstanceError):
        item.quantity = 5


def test_line_amount_beyond_column_range_is_rejected():
    with pytest.raises(OrderValidationError) as exc:
        compute_subtotal(10**6, D("9999999999.99"), D("0"), D("0"))

    assert exc.value.kinds == [ErrorKind.INVALID_PRICE]
    assert exc.value.issues[0].limit == "9999999999.99"
