# textile_orders/domain/money.py
"""
Money helpers.

Every amount that reaches a cart or an order total is a ``Decimal`` with two
decimal places. User input (strings from forms, loose JSON numbers) goes through
``parse_amount`` first, then ``round_currency`` wherever it becomes a subtotal.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
#largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


class AmountOutOfRange(ValueError):
    pass


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        #shortest repr, so 1.005 stays 1.005 and not 1.00499999999999989...
        return Decimal(repr(value))
    return Decimal(value)


def parse_amount(raw) -> Decimal:
    """Parse user-entered amount, returns 0 for empty or invalid input. Never raises."""
    if raw is None or isinstance(raw, bool):
        return ZERO

    if isinstance(raw, str):
        raw = raw.strip().replace(",", "")
        if not raw:
            return ZERO

    try:
        value = _to_decimal(raw)
    except (InvalidOperation, ValueError, TypeError):
        return ZERO

    if not value.is_finite():
        return ZERO
    return value


def in_range(value: Decimal) -> bool:
    return not value.is_finite() or abs(value) <= MAX_AMOUNT


def round_currency(value) -> Decimal:
    """
    Round half-up to 2 decimal places.
    Raises AmountOutOfRange for amounts that do not fit an order column.
    """
    value = _to_decimal(value)
    if not in_range(value):
        raise AmountOutOfRange(f"Amount {value} exceeds the maximum of {MAX_AMOUNT}")
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise AmountOutOfRange(f"Amount {value} cannot be rounded to cents") from e
