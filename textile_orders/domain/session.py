# textile_orders/domain/session.py
"""
One order being composed by one clerk.

The session owns the cart, the order-level adjustments and the payment state.
Every change goes through a method here, which recomputes totals, re-runs the
payment policy and publishes what happened on the session's event channel.
Views (HTTP responses, logs, dialogs) subscribe to the channel instead of
recomputing anything themselves.
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple

from textile_orders.domain import payment as policy
from textile_orders.domain.cart import Cart
from textile_orders.domain.errors import (
    ErrorKind,
    OrderValidationError,
    SubmissionError,
    SubmissionInProgress,
    ValidationIssue,
)
from textile_orders.domain.line_item import LineItem, LineItemCandidate
from textile_orders.domain.payment import ChequeDetails, PaymentMode, PaymentState, PaymentStatus
from textile_orders.domain.totals import OrderAdjustments, OrderTotals, recompute


# --- events -----------------------------------------------------------------

@dataclass(frozen=True)
class ItemAdded:
    index: int
    item: LineItem


@dataclass(frozen=True)
class ItemRemoved:
    index: int
    item: LineItem


@dataclass(frozen=True)
class TotalsRecomputed:
    totals: OrderTotals


@dataclass(frozen=True)
class PaymentChanged:
    payment: PaymentState


@dataclass(frozen=True)
class OrderSubmitted:
    order_id: Optional[int]
    order_number: Optional[str]


@dataclass(frozen=True)
class SubmissionFailed:
    reason: str


class EventChannel:
    def __init__(self):
        self._handlers: Dict[type, List[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Callable) -> Callable[[], None]:
        self._handlers[event_type].append(handler)

        def unsubscribe():
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    def publish(self, event) -> None:
        for handler in list(self._handlers[type(event)]):
            handler(event)


# --- payload ----------------------------------------------------------------

@dataclass(frozen=True)
class CustomerRef:
    name: str
    customer_id: Optional[int] = None
    delivery_date: Optional[date] = None
    delivery_address: Optional[str] = None
    remarks: Optional[str] = None


@dataclass(frozen=True)
class OrderPayload:
    customer: CustomerRef
    items: Tuple[LineItem, ...]
    order_adjustments: OrderAdjustments
    payment_status: PaymentStatus
    payment_amount: Decimal
    payment_mode: PaymentMode
    cheque_details: Optional[ChequeDetails]
    total: Decimal


@dataclass(frozen=True)
class SubmissionResult:
    ok: bool
    order_id: Optional[int] = None
    order_number: Optional[str] = None
    reason: Optional[str] = None


Submitter = Callable[[OrderPayload], SubmissionResult]


class OrderCompositionSession:
    def __init__(
        self,
        customer: CustomerRef,
        items=(),
        adjustments: Optional[OrderAdjustments] = None,
        payment: Optional[PaymentState] = None,
        events: Optional[EventChannel] = None,
    ):
        self.customer = customer
        self.cart = Cart(items)
        self.adjustments = adjustments or OrderAdjustments()
        self.payment = payment or PaymentState()
        self.events = events or EventChannel()
        self.totals = recompute(self.cart, self.adjustments)
        self._in_flight = False

    @property
    def submitting(self) -> bool:
        return self._in_flight

    @property
    def balance_due(self) -> Decimal:
        return self.payment.balance_due(self.totals.total)

    # --- commands ---

    def add_item(self, candidate: LineItemCandidate) -> LineItem:
        item = self.cart.add_item(candidate)
        self.events.publish(ItemAdded(len(self.cart) - 1, item))
        self._refresh()
        return item

    def remove_item(self, index: int) -> LineItem:
        item = self.cart.remove_item(index)
        self.events.publish(ItemRemoved(index, item))
        self._refresh()
        return item

    def set_adjustments(self, adjustments: OrderAdjustments) -> None:
        self.adjustments = adjustments
        self._refresh()

    def change_payment_status(self, status: PaymentStatus) -> None:
        self._set_payment(policy.change_status(self.payment, status, self.totals.total))

    def set_payment_amount(self, raw) -> None:
        self._set_payment(policy.set_amount(self.payment, raw))

    def set_payment_mode(self, mode: PaymentMode, cheque: Optional[ChequeDetails] = None) -> None:
        self._set_payment(policy.set_mode(self.payment, mode, cheque))

    def finalize(self) -> OrderPayload:
        """Validate and freeze the order. Raises OrderValidationError with all problems."""
        issues: List[ValidationIssue] = []
        if self.cart.is_empty():
            issues.append(ValidationIssue(
                ErrorKind.EMPTY_CART, "items", "Please add at least one product to the cart",
            ))

        issues.extend(policy.validate_for_submission(
            self.payment.status,
            self.payment.amount,
            self.totals.total,
            self.payment.mode,
            self.payment.cheque,
        ))
        if issues:
            raise OrderValidationError(issues)

        settled = policy.settle(self.payment, self.totals.total)
        return OrderPayload(
            customer=self.customer,
            items=self.cart.items,
            order_adjustments=self.adjustments,
            payment_status=settled.status,
            payment_amount=settled.amount,
            payment_mode=settled.mode,
            cheque_details=settled.cheque if settled.mode == PaymentMode.CHEQUE else None,
            total=self.totals.total,
        )

    def submit(self, submitter: Submitter) -> SubmissionResult:
        """
        One attempt per call, no retry. The cart is cleared only when the
        submitter reports success, so a failed attempt can be repeated as is.
        """
        if self._in_flight:
            raise SubmissionInProgress("Order submission already in progress")

        payload = self.finalize()
        self._in_flight = True
        try:
            try:
                result = submitter(payload)
            except SubmissionError as e:
                result = SubmissionResult(ok=False, reason=e.reason)
        finally:
            self._in_flight = False

        if not result.ok:
            self.events.publish(SubmissionFailed(result.reason or "Failed to create sale"))
            return result

        self.events.publish(OrderSubmitted(result.order_id, result.order_number))
        self._reset()
        return result

    # --- internals ---

    def _refresh(self) -> None:
        self.totals = recompute(self.cart, self.adjustments)
        self.events.publish(TotalsRecomputed(self.totals))
        self._set_payment(policy.on_total_changed(self.payment, self.totals.total))

    def _set_payment(self, payment: PaymentState) -> None:
        if payment != self.payment:
            self.payment = payment
            self.events.publish(PaymentChanged(payment))

    def _reset(self) -> None:
        self.cart.clear()
        self.adjustments = OrderAdjustments()
        self.payment = PaymentState()
        self.totals = recompute(self.cart, self.adjustments)
