# textile_orders/domain/payment.py
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from textile_orders.domain.errors import ErrorKind, ValidationIssue
from textile_orders.domain.money import CENT, ZERO, parse_amount, round_currency

PARTIAL_DEFAULT_SHARE = Decimal("0.5")


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class PaymentMode(str, Enum):
    CASH = "CASH"
    CHEQUE = "CHEQUE"
    ONLINE = "ONLINE"


class ChequeStatus(str, Enum):
    PENDING = "PENDING"
    CLEARED = "CLEARED"
    BOUNCED = "BOUNCED"


@dataclass(frozen=True)
class ChequeDetails:
    cheque_number: str = ""
    bank: str = ""
    branch: str = ""
    status: ChequeStatus = ChequeStatus.PENDING

    def is_complete(self) -> bool:
        return bool(self.cheque_number.strip()) and bool(self.bank.strip())


@dataclass(frozen=True)
class PaymentState:
    status: PaymentStatus = PaymentStatus.PENDING
    amount: Decimal = ZERO
    mode: PaymentMode = PaymentMode.CASH
    cheque: Optional[ChequeDetails] = None

    def balance_due(self, total: Decimal) -> Decimal:
        return round_currency(max(ZERO, total - self.amount))


def change_status(state: PaymentState, status: PaymentStatus, total: Decimal) -> PaymentState:
    """Apply a user-triggered status change. Any status can follow any other."""
    if status == PaymentStatus.PAID:
        return replace(state, status=status, amount=round_currency(total))

    if status in (PaymentStatus.PENDING, PaymentStatus.CANCELLED):
        return replace(state, status=status, amount=ZERO, mode=PaymentMode.CASH, cheque=None)

    #PARTIAL: keep what the user typed, otherwise offer half
    if state.amount <= 0:
        return replace(state, status=status, amount=round_currency(total * PARTIAL_DEFAULT_SHARE))
    return replace(state, status=status)


def set_amount(state: PaymentState, raw) -> PaymentState:
    """User edit of the paid amount. Checked again at submission."""
    return replace(state, amount=round_currency(parse_amount(raw)))


def set_mode(state: PaymentState, mode: PaymentMode, cheque: Optional[ChequeDetails] = None) -> PaymentState:
    if mode != PaymentMode.CHEQUE:
        return replace(state, mode=mode, cheque=None)
    return replace(state, mode=mode, cheque=cheque or state.cheque or ChequeDetails())


def on_total_changed(state: PaymentState, total: Decimal) -> PaymentState:
    if state.status == PaymentStatus.PAID:
        return replace(state, amount=round_currency(total))
    if state.amount > total:
        return replace(state, amount=round_currency(total))
    return state


def validate_for_submission(
    status: PaymentStatus,
    amount: Decimal,
    total: Decimal,
    mode: Optional[PaymentMode],
    cheque: Optional[ChequeDetails],
) -> List[ValidationIssue]:
    issues = []

    if status in (PaymentStatus.PAID, PaymentStatus.PARTIAL) and amount <= 0:
        issues.append(ValidationIssue(
            ErrorKind.PAYMENT_AMOUNT_REQUIRED,
            "payment_amount",
            f"Payment amount is required for {status.value.lower()} status",
        ))

    if amount > total + CENT:
        issues.append(ValidationIssue(
            ErrorKind.PAYMENT_EXCEEDS_TOTAL,
            "payment_amount",
            "Payment amount cannot exceed total sale amount",
            limit=str(total),
        ))

    if mode == PaymentMode.CHEQUE and (cheque is None or not cheque.is_complete()):
        issues.append(ValidationIssue(
            ErrorKind.CHEQUE_DETAILS_REQUIRED,
            "cheque_number" if cheque is None or not cheque.cheque_number.strip() else "bank",
            "Cheque number and bank are required when payment mode is CHEQUE",
        ))

    return issues


def settle(state: PaymentState, total: Decimal) -> PaymentState:
    """Final amounts written to the order, applied after validation passed."""
    if state.status in (PaymentStatus.PENDING, PaymentStatus.CANCELLED):
        return replace(state, amount=ZERO)
    if state.status == PaymentStatus.PAID and abs(state.amount - total) > CENT:
        return replace(state, amount=round_currency(total))
    return state
