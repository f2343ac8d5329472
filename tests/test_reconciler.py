"""
Tests for the payment state machine.
"""
import pytest

from fee_proxy.core import (
    FeeCalculator,
    FeeSchedule,
    InsufficientValue,
    Operation,
    PaymentReconciler,
    PaymentStage,
)
from fee_proxy.utils import address_from_int

PROXY = address_from_int(0xF00)
USER = address_from_int(0xB0B)
RECIPIENT = address_from_int(1)


@pytest.fixture
def reconciler(ledger, vault):
    ledger.mint(USER, 1_000)
    return PaymentReconciler(ledger, PROXY, vault)


class TestPaymentReconciler:
    """Tests for stage transitions and value routing."""

    def test_full_walk(self, reconciler, ledger, vault):
        calculator = FeeCalculator(FeeSchedule(fixed_fee=10, percentage_fee=1_000))
        settlement = reconciler.receive(Operation.DEPOSIT, USER, 130)
        assert settlement.stage is PaymentStage.RECEIVED

        reconciler.validate(settlement, calculator, [100])
        assert settlement.stage is PaymentStage.VALIDATED
        assert settlement.fee == 20
        assert settlement.refund == 10

        forwarded = []
        reconciler.execute(settlement, RECIPIENT, forwarded.append)

        assert forwarded == [100]
        assert settlement.stage is PaymentStage.SETTLED
        assert ledger.balance_of(vault.address) == 100
        assert ledger.balance_of(RECIPIENT) == 20
        assert ledger.balance_of(USER) == 880
        assert ledger.balance_of(PROXY) == 0

    def test_rejection_records_reason(self, reconciler):
        calculator = FeeCalculator(FeeSchedule(fixed_fee=10))
        settlement = reconciler.receive(Operation.DEPOSIT, USER, 50)

        with pytest.raises(InsufficientValue):
            reconciler.validate(settlement, calculator, [50])

        assert settlement.stage is PaymentStage.REJECTED
        assert settlement.rejection_reason

    def test_zero_fee_emits_nothing(self, reconciler, ledger):
        calculator = FeeCalculator(FeeSchedule())
        settlement = reconciler.receive(Operation.DEPOSIT_BATCH, USER, 0)
        reconciler.validate(settlement, calculator, [0])

        reconciler.execute(settlement, RECIPIENT, lambda value: None)

        assert settlement.stage is PaymentStage.SETTLED
        assert ledger.events == []

    def test_stages_must_be_in_order(self, reconciler):
        settlement = reconciler.receive(Operation.DEPOSIT, USER, 0)

        with pytest.raises(RuntimeError):
            reconciler.forward(settlement, lambda value: None)
        with pytest.raises(RuntimeError):
            reconciler.settle(settlement, RECIPIENT)
