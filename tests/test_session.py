from decimal import Decimal

import pytest

from textile_orders.domain.errors import (
    ErrorKind,
    OrderValidationError,
    SubmissionError,
    SubmissionInProgress,
)
from textile_orders.domain.line_item import LineItemCandidate, ProductReference, ProductType
from textile_orders.domain.payment import ChequeDetails, PaymentMode, PaymentStatus
from textile_orders.domain.session import (
    CustomerRef,
    ItemAdded,
    OrderCompositionSession,
    OrderSubmitted,
    PaymentChanged,
    SubmissionFailed,
    SubmissionResult,
    TotalsRecomputed,
)
from textile_orders.domain.totals import OrderAdjustments

D = Decimal


def candidate(product_id=1, quantity=2, price="100", available=10):
    return LineItemCandidate(
        product=ProductReference(product_id, ProductType.THREAD),
        quantity=quantity,
        unit_price=D(price),
        available_quantity=available,
    )


@pytest.fixture()
def session():
    return OrderCompositionSession(CustomerRef(name="Al-Noor Weaving"))


def test_commands_publish_events(session):
    seen = []
    session.events.subscribe(ItemAdded, seen.append)
    session.events.subscribe(TotalsRecomputed, seen.append)

    session.add_item(candidate())

    assert [type(e) for e in seen] == [ItemAdded, TotalsRecomputed]
    assert seen[0].index == 0
    assert seen[1].totals.total == D("200.00")


def test_unsubscribe_stops_delivery(session):
    seen = []
    unsubscribe = session.events.subscribe(TotalsRecomputed, seen.append)
    session.add_item(candidate(product_id=1))
    unsubscribe()
    session.add_item(candidate(product_id=2))

    assert len(seen) == 1


def test_paid_amount_tracks_every_total_change(session):
    session.add_item(candidate())
    session.change_payment_status(PaymentStatus.PAID)
    assert session.payment.amount == D("200.00")

    session.set_adjustments(OrderAdjustments(order_discount=D("50")))
    assert session.payment.amount == D("150.00")

    session.set_adjustments(OrderAdjustments(order_discount=D("50"), order_tax=D("20")))
    assert session.payment.amount == D("170.00")

    session.add_item(candidate(product_id=2, quantity=1, price="30"))
    assert session.payment.amount == session.totals.total == D("200.00")
    assert session.balance_due == D("0")


def test_partial_default_from_session_total(session):
    session.add_item(candidate())
    session.set_adjustments(OrderAdjustments(order_discount=D("50")))

    session.change_payment_status(PaymentStatus.PARTIAL)

    assert session.payment.amount == D("75.00")
    assert session.balance_due == D("75.00")


def test_rejected_item_changes_nothing(session):
    session.add_item(candidate(product_id=1))
    totals = session.totals
    events = []
    session.events.subscribe(TotalsRecomputed, events.append)

    with pytest.raises(OrderValidationError) as exc:
        session.add_item(candidate(product_id=2, quantity=10, available=5))

    assert exc.value.kinds == [ErrorKind.INSUFFICIENT_STOCK]
    assert len(session.cart) == 1
    assert session.totals == totals
    assert events == []


def test_payment_event_only_on_change(session):
    session.add_item(candidate())
    changes = []
    session.events.subscribe(PaymentChanged, changes.append)

    session.set_payment_mode(PaymentMode.CASH)
    session.set_payment_mode(PaymentMode.ONLINE)

    assert len(changes) == 1
    assert changes[0].payment.mode == PaymentMode.ONLINE


def test_finalize_empty_cart(session):
    with pytest.raises(OrderValidationError) as exc:
        session.finalize()

    assert exc.value.kinds == [ErrorKind.EMPTY_CART]


def test_finalize_reports_all_problems(session):
    session.add_item(candidate())
    session.change_payment_status(PaymentStatus.PARTIAL)
    session.set_payment_amount("0")
    session.set_payment_mode(PaymentMode.CHEQUE, ChequeDetails(cheque_number="", bank=""))

    with pytest.raises(OrderValidationError) as exc:
        session.finalize()

    assert exc.value.kinds == [ErrorKind.PAYMENT_AMOUNT_REQUIRED, ErrorKind.CHEQUE_DETAILS_REQUIRED]


def test_finalize_settles_pending_amount(session):
    session.add_item(candidate())
    session.set_payment_amount("30")

    payload = session.finalize()

    assert payload.payment_status == PaymentStatus.PENDING
    assert payload.payment_amount == D("0")
    assert payload.total == D("200.00")
    assert payload.cheque_details is None


def test_finalize_carries_cheque_details(session):
    session.add_item(candidate())
    session.change_payment_status(PaymentStatus.PARTIAL)
    session.set_payment_mode(PaymentMode.CHEQUE, ChequeDetails("000123", "HBL", "Saddar"))

    payload = session.finalize()

    assert payload.payment_amount == D("100.00")
    assert payload.cheque_details.bank == "HBL"


def test_successful_submit_resets_session(session):
    session.add_item(candidate())
    session.change_payment_status(PaymentStatus.PAID)
    submitted = []
    payloads = []
    session.events.subscribe(OrderSubmitted, submitted.append)

    def submitter(payload):
        payloads.append(payload)
        return SubmissionResult(ok=True, order_id=7, order_number="SO-20261019120000-0042")

    result = session.submit(submitter)

    assert result.ok
    assert payloads[0].payment_amount == D("200.00")
    assert len(payloads[0].items) == 1
    assert submitted[0].order_number == "SO-20261019120000-0042"
    assert session.cart.is_empty()
    assert session.payment.status == PaymentStatus.PENDING
    assert session.totals.total == D("0")


def test_failed_submit_keeps_everything(session):
    session.add_item(candidate())
    failures = []
    session.events.subscribe(SubmissionFailed, failures.append)

    def submitter(payload):
        raise SubmissionError("order storage unavailable")

    result = session.submit(submitter)

    assert not result.ok
    assert result.reason == "order storage unavailable"
    assert failures[0].reason == "order storage unavailable"
    assert len(session.cart) == 1
    assert not session.submitting


def test_second_submit_while_in_flight_is_refused(session):
    session.add_item(candidate())

    def submitter(payload):
        assert session.submitting
        with pytest.raises(SubmissionInProgress):
            session.submit(submitter)
        return SubmissionResult(ok=True, order_id=1, order_number="SO-1")

    assert session.submit(submitter).ok
    assert not session.submitting
