from decimal import Decimal

from textile_orders.domain import payment as policy
from textile_orders.domain.errors import ErrorKind
from textile_orders.domain.payment import (
    ChequeDetails,
    PaymentMode,
    PaymentState,
    PaymentStatus,
)

D = Decimal


def test_paid_takes_the_total():
    state = policy.change_status(PaymentState(), PaymentStatus.PAID, D("150.00"))

    assert state.status == PaymentStatus.PAID
    assert state.amount == D("150.00")


def test_partial_defaults_to_half_of_total():
    state = policy.change_status(PaymentState(), PaymentStatus.PARTIAL, D("150.00"))

    assert state.amount == D("75.00")


def test_partial_half_rounds_half_up():
    state = policy.change_status(PaymentState(), PaymentStatus.PARTIAL, D("0.01"))

    assert state.amount == D("0.01")


def test_partial_keeps_amount_already_entered():
    state = policy.change_status(PaymentState(amount=D("40.00")), PaymentStatus.PARTIAL, D("150.00"))

    assert state.amount == D("40.00")


def test_pending_and_cancelled_reset_amount_and_mode():
    start = PaymentState(
        status=PaymentStatus.PARTIAL,
        amount=D("40.00"),
        mode=PaymentMode.CHEQUE,
        cheque=ChequeDetails("000123", "HBL"),
    )

    for status in (PaymentStatus.PENDING, PaymentStatus.CANCELLED):
        state = policy.change_status(start, status, D("150.00"))

        assert state.amount == D("0")
        assert state.mode == PaymentMode.CASH
        assert state.cheque is None


def test_set_amount_parses_user_input():
    assert policy.set_amount(PaymentState(), "1,234.565").amount == D("1234.57")
    assert policy.set_amount(PaymentState(), "n/a").amount == D("0")


def test_leaving_cheque_mode_drops_details():
    state = policy.set_mode(PaymentState(), PaymentMode.CHEQUE, ChequeDetails("000123", "HBL"))
    assert state.cheque.cheque_number == "000123"

    state = policy.set_mode(state, PaymentMode.ONLINE)
    assert state.cheque is None


def test_paid_follows_total_changes():
    state = PaymentState(status=PaymentStatus.PAID, amount=D("200.00"))

    assert policy.on_total_changed(state, D("170.00")).amount == D("170.00")
    assert policy.on_total_changed(state, D("260.00")).amount == D("260.00")


def test_partial_is_clamped_when_total_drops_below_it():
    state = PaymentState(status=PaymentStatus.PARTIAL, amount=D("100.00"))

    assert policy.on_total_changed(state, D("60.00")).amount == D("60.00")
    assert policy.on_total_changed(state, D("500.00")) == state


def test_cheque_without_bank_fails_validation():
    issues = policy.validate_for_submission(
        PaymentStatus.PARTIAL,
        D("50.00"),
        D("150.00"),
        PaymentMode.CHEQUE,
        ChequeDetails(cheque_number="000123", bank=""),
    )

    assert [i.kind for i in issues] == [ErrorKind.CHEQUE_DETAILS_REQUIRED]
    assert issues[0].field == "bank"


def test_paid_or_partial_needs_an_amount():
    for status in (PaymentStatus.PAID, PaymentStatus.PARTIAL):
        issues = policy.validate_for_submission(status, D("0"), D("150.00"), PaymentMode.CASH, None)
        assert [i.kind for i in issues] == [ErrorKind.PAYMENT_AMOUNT_REQUIRED]


def test_amount_may_exceed_total_by_one_cent_only():
    ok = policy.validate_for_submission(
        PaymentStatus.PARTIAL, D("200.01"), D("200.00"), PaymentMode.CASH, None,
    )
    too_much = policy.validate_for_submission(
        PaymentStatus.PARTIAL, D("200.02"), D("200.00"), PaymentMode.CASH, None,
    )

    assert ok == []
    assert [i.kind for i in too_much] == [ErrorKind.PAYMENT_EXCEEDS_TOTAL]
    assert too_much[0].limit == "200.00"


def test_settle_zeroes_pending_and_snaps_paid():
    pending = PaymentState(status=PaymentStatus.PENDING, amount=D("30.00"))
    paid = PaymentState(status=PaymentStatus.PAID, amount=D("149.00"))
    close = PaymentState(status=PaymentStatus.PAID, amount=D("149.99"))

    assert policy.settle(pending, D("150.00")).amount == D("0")
    assert policy.settle(paid, D("150.00")).amount == D("150.00")
    assert policy.settle(close, D("150.00")).amount == D("149.99")


def test_balance_due_never_negative():
    assert PaymentState(amount=D("40.00")).balance_due(D("150.00")) == D("110.00")
    assert PaymentState(amount=D("150.00")).balance_due(D("100.00")) == D("0")
