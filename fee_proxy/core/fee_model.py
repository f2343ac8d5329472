"""
Deposit fee model.

Formula: fee = fixed_fee * C + floor(A * bps / 10000)
Where:
    C   = number of strictly positive deposits
    A   = total deposited amount
    bps = percentage fee in basis points

All amounts are integers in the smallest native unit. Division truncates,
so no fee is ever rounded up in the proxy's favour.
"""
from dataclasses import dataclass
from typing import Iterable

from .errors import InvalidAmount
from .types import FEE_DENOMINATOR, FeeSchedule


def count_deposits(amounts: Iterable[int]) -> int:
    """Number of strictly positive entries; zero deposits are fee-free."""
    count = 0
    for amount in amounts:
        _require_unsigned(amount, "amount")
        if amount > 0:
            count += 1
    return count


def _require_unsigned(value: int, name: str) -> None:
    if value < 0:
        raise InvalidAmount(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class FeeCalculator:
    """
    Pure fee calculations over a FeeSchedule snapshot.
    """
    schedule: FeeSchedule

    @property
    def fixed_fee(self) -> int:
        return self.schedule.fixed_fee

    @property
    def percentage_fee(self) -> int:
        return self.schedule.percentage_fee

    def deposit_fee(self, count: int, total_amount: int) -> int:
        """Fee owed for `count` positive deposits summing to `total_amount`."""
        _require_unsigned(count, "count")
        _require_unsigned(total_amount, "total_amount")
        return (
            self.fixed_fee * count
            + (total_amount * self.percentage_fee) // FEE_DENOMINATOR
        )

    def batch_fee(self, amounts: Iterable[int]) -> int:
        """Fee owed for a list of declared deposits."""
        amounts = list(amounts)
        return self.deposit_fee(count_deposits(amounts), sum(amounts))

    def total_deposit_cost(self, amount: int) -> int:
        """Total payment needed for a single deposit of `amount`."""
        return amount + self.deposit_fee(1, amount)

    def total_creation_cost(self, count: int, total_amount: int, vault_cost: int) -> int:
        """Total payment needed for a creation call costing `vault_cost` at the vault."""
        _require_unsigned(vault_cost, "vault_cost")
        return vault_cost + self.deposit_fee(count, total_amount)

    def inverse_deposit_amount(self, paid_value: int) -> int:
        """
        Net deposit recoverable from a payment that already includes the fee.

        Closed-form inverse of total_deposit_cost:
            x = floor((paid - fixed) * 10000 / (10000 + bps))
        x + deposit_fee(1, x) never exceeds paid, and for paid produced by
        total_deposit_cost(a) the result is a or a - 1.
        Returns 0 when the payment does not exceed the fixed fee.
        """
        _require_unsigned(paid_value, "paid_value")
        if paid_value <= self.fixed_fee:
            return 0
        return (
            (paid_value - self.fixed_fee) * FEE_DENOMINATOR
            // (FEE_DENOMINATOR + self.percentage_fee)
        )

    def min_inverse_payment(self) -> int:
        """Smallest payment whose inverse deposit amount is non-zero."""
        scale = FEE_DENOMINATOR + self.percentage_fee
        return self.fixed_fee + -(-scale // FEE_DENOMINATOR)
