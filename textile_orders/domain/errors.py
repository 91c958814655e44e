# textile_orders/domain/errors.py
from dataclasses import dataclass, asdict
from enum import Enum
from typing import List, Optional


class ErrorKind(str, Enum):
    INVALID_QUANTITY = "InvalidQuantity"
    INSUFFICIENT_STOCK = "InsufficientStock"
    INVALID_PRICE = "InvalidPrice"
    INVALID_DISCOUNT = "InvalidDiscount"
    DISCOUNT_EXCEEDS_BASE = "DiscountExceedsBase"
    INVALID_TAX = "InvalidTax"
    PAYMENT_AMOUNT_REQUIRED = "PaymentAmountRequired"
    PAYMENT_EXCEEDS_TOTAL = "PaymentExceedsTotal"
    CHEQUE_DETAILS_REQUIRED = "ChequeDetailsRequired"
    EMPTY_CART = "EmptyCart"
    INDEX_OUT_OF_RANGE = "IndexOutOfRange"


@dataclass(frozen=True)
class ValidationIssue:
    """One field-level problem, shown next to the field it belongs to."""

    kind: ErrorKind
    field: str
    message: str
    limit: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


class OrderValidationError(ValueError):
    """
    Blocks a single action (add to cart, submit), the session itself is left untouched.
    Carries every problem found, not just the first one.
    """

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = list(issues)
        super().__init__("; ".join(i.message for i in self.issues))

    @property
    def kinds(self) -> List[ErrorKind]:
        return [i.kind for i in self.issues]

    @classmethod
    def single(cls, kind: ErrorKind, field: str, message: str, limit=None):
        return cls([ValidationIssue(kind, field, message, None if limit is None else str(limit))])


class SubmissionError(RuntimeError):
    """Raised by the order submission collaborator when an order cannot be stored."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class SubmissionInProgress(RuntimeError):
    pass


class ConcurrencyConflict(RuntimeError):
    """Optimistic lock lost: the draft changed between read and write."""


class CatalogUnavailable(RuntimeError):
    pass
