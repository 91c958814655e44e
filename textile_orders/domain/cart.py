# textile_orders/domain/cart.py
from decimal import Decimal
from typing import Iterable, Tuple

from textile_orders.domain.errors import ErrorKind, OrderValidationError
from textile_orders.domain.line_item import LineItem, LineItemCandidate
from textile_orders.domain.money import ZERO, round_currency


class Cart:
    """
    Ordered line items of one order being composed.
    Insertion order is the display order and the submission order.
    """

    def __init__(self, items: Iterable[LineItem] = ()):
        self._items: Tuple[LineItem, ...] = tuple(items)

    @property
    def items(self) -> Tuple[LineItem, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def add_item(self, candidate: LineItemCandidate) -> LineItem:
        #validation failure leaves the cart as it was
        item = LineItem.from_candidate(candidate)
        self._items = self._items + (item,)
        return item

    def remove_item(self, index: int) -> LineItem:
        if isinstance(index, bool) or not 0 <= index < len(self._items):
            raise OrderValidationError.single(
                ErrorKind.INDEX_OUT_OF_RANGE,
                "index",
                f"No cart item at position {index}",
                limit=len(self._items),
            )
        removed = self._items[index]
        self._items = self._items[:index] + self._items[index + 1:]
        return removed

    def clear(self) -> None:
        self._items = ()

    def items_subtotal(self) -> Decimal:
        return round_currency(sum((round_currency(i.subtotal) for i in self._items), ZERO))
