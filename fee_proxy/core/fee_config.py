"""
Access-controlled fee configuration.

FeeConfig holds the deposit fee parameters and the fee recipient.
AdminRegistry holds the addresses allowed to change them.
Both only validate and mutate; event emission is left to the owner.
"""
import logging
from dataclasses import dataclass
from typing import Iterable

from .errors import (
    FeePercentageTooHigh,
    InvalidAmount,
    NoAdminsProvided,
    NotWhitelistedAdmin,
    ZeroAddress,
)
from .fee_model import FeeCalculator
from .types import MAX_PERCENTAGE_FEE, Address, FeeSchedule
from ..utils.helpers import is_zero_address, to_address

logger = logging.getLogger(__name__)


@dataclass
class FeeConfig:
    """Current deposit fees and recipient."""
    deposit_fixed_fee: int
    deposit_percentage_fee: int
    fee_recipient: Address

    def __post_init__(self):
        # Constructor errors for the recipient are raised by the proxy
        self._check_fixed_fee(self.deposit_fixed_fee)
        self._check_percentage_fee(self.deposit_percentage_fee)
        self.fee_recipient = to_address(self.fee_recipient)

    @property
    def schedule(self) -> FeeSchedule:
        return FeeSchedule(
            fixed_fee=self.deposit_fixed_fee,
            percentage_fee=self.deposit_percentage_fee,
        )

    @property
    def calculator(self) -> FeeCalculator:
        """Calculator bound to a snapshot of the current fees."""
        return FeeCalculator(self.schedule)

    def set_fixed_fee(self, new_fee: int) -> int:
        """Replace the fixed fee. Returns the previous value."""
        self._check_fixed_fee(new_fee)
        old_fee, self.deposit_fixed_fee = self.deposit_fixed_fee, new_fee
        return old_fee

    def set_percentage_fee(self, new_fee: int) -> int:
        """Replace the percentage fee (bps). Returns the previous value."""
        self._check_percentage_fee(new_fee)
        old_fee, self.deposit_percentage_fee = self.deposit_percentage_fee, new_fee
        return old_fee

    def set_recipient(self, new_recipient: Address) -> Address:
        """Replace the fee recipient. Returns the previous recipient."""
        if is_zero_address(new_recipient):
            raise ZeroAddress()
        old_recipient, self.fee_recipient = self.fee_recipient, to_address(new_recipient)
        return old_recipient

    @staticmethod
    def _check_fixed_fee(fee: int) -> None:
        if fee < 0:
            raise InvalidAmount(f"Fixed fee must be non-negative, got {fee}")

    @staticmethod
    def _check_percentage_fee(fee: int) -> None:
        if fee < 0:
            raise InvalidAmount(f"Percentage fee must be non-negative, got {fee}")
        if fee > MAX_PERCENTAGE_FEE:
            raise FeePercentageTooHigh(
                f"Percentage fee {fee} exceeds {MAX_PERCENTAGE_FEE} bps"
            )


class AdminRegistry:
    """
    Set of addresses allowed to mutate the fee configuration.

    Any member may add or remove any address, themselves included.
    Removing the last member locks the configuration for good.
    """

    def __init__(self, admins: Iterable[Address]):
        members = {to_address(a) for a in admins}
        if not members:
            raise NoAdminsProvided()
        self._admins: set[Address] = members

    def __contains__(self, account: object) -> bool:
        return isinstance(account, str) and self.is_admin(account)

    def __len__(self) -> int:
        return len(self._admins)

    @property
    def admins(self) -> frozenset[Address]:
        return frozenset(self._admins)

    @property
    def is_locked(self) -> bool:
        """True once nobody can change the configuration anymore."""
        return not self._admins

    def is_admin(self, account: Address) -> bool:
        return to_address(account) in self._admins

    def require(self, caller: Address) -> None:
        """Raise NotWhitelistedAdmin unless caller is a member."""
        if not self.is_admin(caller):
            raise NotWhitelistedAdmin(f"{caller} is not a whitelisted admin")

    def restore(self, members: Iterable[Address]) -> None:
        """Replace the membership wholesale, empty included (rollback only)."""
        self._admins = set(members)

    def set_status(self, account: Address, enabled: bool) -> None:
        account = to_address(account)
        if enabled:
            self._admins.add(account)
        else:
            self._admins.discard(account)
            if self.is_locked:
                logger.warning(
                    f"Last admin {account} removed, fee configuration is now locked"
                )
