# textile_orders/domain/line_item.py
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from textile_orders.domain.errors import ErrorKind, OrderValidationError, ValidationIssue
from textile_orders.domain.money import MAX_AMOUNT, ZERO, in_range, round_currency


class ProductType(str, Enum):
    THREAD = "THREAD"
    FABRIC = "FABRIC"


@dataclass(frozen=True)
class ProductReference:
    product_id: int
    product_type: ProductType
    display_name: str = ""
    inventory_reference: Optional[int] = None

    @property
    def key(self) -> tuple:
        return (self.product_type.value, self.product_id, self.inventory_reference)


@dataclass(frozen=True)
class LineItemCandidate:
    """What the clerk filled in before pressing "add to cart"."""

    product: ProductReference
    quantity: int
    unit_price: Decimal
    available_quantity: int
    discount: Decimal = ZERO
    tax: Decimal = ZERO


@dataclass(frozen=True)
class LineItem:
    product: ProductReference
    quantity: int
    unit_price: Decimal
    item_discount: Decimal
    item_tax: Decimal
    available_quantity: int
    subtotal: Decimal

    @classmethod
    def from_candidate(cls, candidate: LineItemCandidate) -> "LineItem":
        subtotal = compute_subtotal(
            candidate.quantity,
            candidate.unit_price,
            candidate.discount,
            candidate.tax,
            available_quantity=candidate.available_quantity,
        )
        return cls(
            product=candidate.product,
            quantity=candidate.quantity,
            unit_price=candidate.unit_price,
            item_discount=candidate.discount,
            item_tax=candidate.tax,
            available_quantity=candidate.available_quantity,
            subtotal=subtotal,
        )


def compute_subtotal(
    quantity: int,
    unit_price: Decimal,
    discount: Decimal,
    tax: Decimal,
    available_quantity: Optional[int] = None,
) -> Decimal:
    """
    Subtotal of one line: max(0, quantity * unit_price - discount) + tax, rounded to cents.

    All checks run, so the caller gets every failing field at once. Raises
    OrderValidationError listing them.
    """
    issues = []
    base = quantity * unit_price

    if quantity <= 0:
        issues.append(ValidationIssue(
            ErrorKind.INVALID_QUANTITY, "quantity", "Quantity must be greater than zero",
        ))

    if available_quantity is not None and quantity > available_quantity:
        issues.append(ValidationIssue(
            ErrorKind.INSUFFICIENT_STOCK,
            "quantity",
            f"Cannot exceed available quantity of {available_quantity}",
            limit=str(available_quantity),
        ))

    if unit_price <= 0:
        issues.append(ValidationIssue(
            ErrorKind.INVALID_PRICE, "unit_price", "Price must be greater than zero",
        ))

    if discount < 0:
        issues.append(ValidationIssue(
            ErrorKind.INVALID_DISCOUNT, "discount", "Discount cannot be negative",
        ))
    #a negative base comes from an invalid quantity or price, already reported above
    elif discount > max(base, ZERO):
        issues.append(ValidationIssue(
            ErrorKind.DISCOUNT_EXCEEDS_BASE,
            "discount",
            "Discount cannot exceed the item base amount",
            limit=str(round_currency(max(base, ZERO))),
        ))

    if tax < 0:
        issues.append(ValidationIssue(
            ErrorKind.INVALID_TAX, "tax", "Tax cannot be negative",
        ))

    subtotal = max(ZERO, base - discount) + tax
    if not issues and not in_range(subtotal):
        issues.append(ValidationIssue(
            ErrorKind.INVALID_PRICE,
            "unit_price",
            f"Line amount cannot exceed {MAX_AMOUNT}",
            limit=str(MAX_AMOUNT),
        ))

    if issues:
        raise OrderValidationError(issues)

    return round_currency(subtotal)
