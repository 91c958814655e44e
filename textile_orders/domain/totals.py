# textile_orders/domain/totals.py
"""
Order totals.

This is the only place where an order total is computed. Draft views, the
payment policy and the submission payload all read ``OrderTotals`` from here.
"""
from dataclasses import dataclass
from decimal import Decimal

from textile_orders.domain.cart import Cart
from textile_orders.domain.errors import ErrorKind, OrderValidationError, ValidationIssue
from textile_orders.domain.money import CENT, MAX_AMOUNT, ZERO, in_range, parse_amount, round_currency


@dataclass(frozen=True)
class OrderAdjustments:
    order_discount: Decimal = ZERO
    order_tax: Decimal = ZERO

    @classmethod
    def from_raw(cls, discount=None, tax=None) -> "OrderAdjustments":
        """Build from user input, rejecting negative or oversized values."""
        order_discount = parse_amount(discount)
        order_tax = parse_amount(tax)

        issues = []
        for value, kind, field, label in (
            (order_discount, ErrorKind.INVALID_DISCOUNT, "order_discount", "Discount"),
            (order_tax, ErrorKind.INVALID_TAX, "order_tax", "Tax"),
        ):
            if value < 0:
                issues.append(ValidationIssue(kind, field, f"{label} cannot be negative"))
            elif not in_range(value):
                issues.append(ValidationIssue(
                    kind, field, f"{label} cannot exceed {MAX_AMOUNT}", limit=str(MAX_AMOUNT),
                ))
        if issues:
            raise OrderValidationError(issues)

        return cls(order_discount=round_currency(order_discount), order_tax=round_currency(order_tax))


@dataclass(frozen=True)
class OrderTotals:
    items_subtotal: Decimal
    order_discount: Decimal
    order_tax: Decimal
    total: Decimal


def recompute(cart: Cart, adjustments: OrderAdjustments) -> OrderTotals:
    """Full recompute, no incremental state. Carts are small."""
    if cart.is_empty():
        return OrderTotals(
            items_subtotal=ZERO,
            order_discount=adjustments.order_discount,
            order_tax=adjustments.order_tax,
            total=ZERO,
        )

    items_subtotal = cart.items_subtotal()
    after_discount = max(ZERO, items_subtotal - adjustments.order_discount)
    total = after_discount
    if adjustments.order_tax > 0:
        total += adjustments.order_tax
    total = round_currency(total)

    # Compatibility floor: a non-empty order never totals 0. Downstream order
    # storage rejects non-positive totals.
    if total <= 0:
        total = CENT

    return OrderTotals(
        items_subtotal=items_subtotal,
        order_discount=adjustments.order_discount,
        order_tax=adjustments.order_tax,
        total=total,
    )
