"""
Payment reconciliation for value-accepting proxy calls.

Each call walks RECEIVED -> VALIDATED -> FORWARDED -> SETTLED, or stops at
REJECTED. The vault is always called before the fee leaves the proxy, and
the caller runs the whole walk inside one ledger transaction so a failure
at any step undoes every earlier one.
"""
from typing import Callable, Sequence, TypeVar
import logging

from .errors import InsufficientValue, LedgerError, TransferFailed
from .fee_model import FeeCalculator, count_deposits
from .interfaces import BaseMultiVault
from .ledger import Ledger
from .types import Address, FeesCollected, Operation, PaymentStage, Settlement

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PaymentReconciler:
    """
    Validates payments against the fee model and routes value.

    Holds no state between calls; everything call-scoped lives in the
    Settlement it returns.
    """

    def __init__(self, ledger: Ledger, proxy_address: Address, vault: BaseMultiVault):
        self._ledger = ledger
        self._proxy = proxy_address
        self._vault = vault

    def receive(self, operation: Operation, payer: Address, payment: int) -> Settlement:
        """Take custody of the caller's payment."""
        self._ledger.transfer(payer, self._proxy, payment)
        return Settlement(operation=operation, payer=payer, payment=payment)

    def validate(
        self,
        settlement: Settlement,
        calculator: FeeCalculator,
        assets: Sequence[int],
        creation_cost: int = 0,
    ) -> Settlement:
        """
        Price a call that declares its deposits up front.

        The vault receives `creation_cost` plus every declared deposit;
        the fee is charged on strictly positive deposits only.
        """
        settlement.deposit_count = count_deposits(assets)
        settlement.total_deposit = sum(assets)
        settlement.fee = calculator.deposit_fee(
            settlement.deposit_count, settlement.total_deposit
        )
        settlement.vault_cost = creation_cost + settlement.total_deposit

        if settlement.payment < settlement.required:
            self._reject(settlement, InsufficientValue(settlement.payment, settlement.required))

        settlement.refund = settlement.payment - settlement.required
        settlement.stage = PaymentStage.VALIDATED
        return settlement

    def validate_inverse(self, settlement: Settlement, calculator: FeeCalculator) -> Settlement:
        """
        Price a single deposit where the caller only stated the total payment.
        Whatever the vault does not receive is fee.
        """
        amount = calculator.inverse_deposit_amount(settlement.payment)
        if amount == 0:
            self._reject(
                settlement,
                InsufficientValue(settlement.payment, calculator.min_inverse_payment()),
            )

        settlement.deposit_count = 1
        settlement.total_deposit = amount
        settlement.vault_cost = amount
        settlement.fee = settlement.payment - amount
        settlement.stage = PaymentStage.VALIDATED
        return settlement

    def forward(self, settlement: Settlement, call: Callable[[int], T]) -> T:
        """
        Send exactly the vault cost to the vault and invoke it.
        Vault errors are not caught.
        """
        if settlement.stage is not PaymentStage.VALIDATED:
            raise RuntimeError(f"Cannot forward a {settlement.stage.name} payment")

        self._ledger.transfer(self._proxy, self._vault.address, settlement.vault_cost)
        result = call(settlement.vault_cost)
        settlement.stage = PaymentStage.FORWARDED
        return result

    def settle(self, settlement: Settlement, fee_recipient: Address) -> Settlement:
        """Pay the fee to the recipient and return any overpayment."""
        if settlement.stage is not PaymentStage.FORWARDED:
            raise RuntimeError(f"Cannot settle a {settlement.stage.name} payment")

        if settlement.fee > 0:
            self._pay(fee_recipient, settlement.fee)
        if settlement.refund > 0:
            self._pay(settlement.payer, settlement.refund)

        settlement.stage = PaymentStage.SETTLED
        if settlement.fee > 0:
            self._ledger.emit(
                FeesCollected(
                    user=settlement.payer,
                    amount=settlement.fee,
                    operation=settlement.operation.value,
                )
            )
        logger.info(
            f"{settlement.operation.value} settled for {settlement.payer}: "
            f"fee={settlement.fee} vault={settlement.vault_cost} refund={settlement.refund}",
            extra=_log_fields(settlement),
        )
        return settlement

    def execute(
        self,
        settlement: Settlement,
        fee_recipient: Address,
        call: Callable[[int], T],
    ) -> T:
        """Forward then settle a validated payment."""
        result = self.forward(settlement, call)
        self.settle(settlement, fee_recipient)
        return result

    def _pay(self, recipient: Address, amount: int) -> None:
        try:
            self._ledger.transfer(self._proxy, recipient, amount)
        except LedgerError as e:
            raise TransferFailed(f"Transfer of {amount} to {recipient} failed: {e}") from e

    @staticmethod
    def _reject(settlement: Settlement, error: Exception) -> None:
        settlement.stage = PaymentStage.REJECTED
        settlement.rejection_reason = str(error)
        logger.warning(
            f"{settlement.operation.value} rejected for {settlement.payer}: {error}",
            extra=_log_fields(settlement),
        )
        raise error


def _log_fields(settlement: Settlement) -> dict:
    """Structured attributes picked up by JsonFormatter."""
    return {
        "operation": settlement.operation.value,
        "payer": settlement.payer,
        "stage": settlement.stage.name,
        "fee_wei": settlement.fee,
        "vault_wei": settlement.vault_cost,
        "refund_wei": settlement.refund,
        "reason": settlement.rejection_reason,
    }
