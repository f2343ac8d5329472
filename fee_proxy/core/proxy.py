"""
Fee-collecting proxy in front of a MultiVault.

Users pay the proxy once; the proxy forwards the vault-bound part of the
payment to the vault on their behalf and routes the fee to the configured
recipient, all inside a single ledger transaction.

Users must approve the proxy on the vault before calling it; the proxy
does not check this, the vault does.
"""
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Sequence
import logging

from .errors import (
    InvalidMultisigAddress,
    InvalidMultiVaultAddress,
    NoAdminsProvided,
    WrongArrayLengths,
)
from .fee_config import AdminRegistry, FeeConfig
from .interfaces import BaseMultiVault, Stateful
from .ledger import Ledger
from .reconciler import PaymentReconciler
from .types import (
    Address,
    AdminWhitelistUpdated,
    DepositFixedFeeUpdated,
    DepositPercentageFeeUpdated,
    FeeRecipientUpdated,
    FeesCollected,
    Operation,
    TermId,
)
from ..utils.helpers import is_zero_address, random_address, to_address
from ..utils.logging import FeeLogger

if TYPE_CHECKING:
    from .config import SystemConfig

logger = logging.getLogger(__name__)


def _check_lengths(*arrays: Sequence) -> None:
    if len({len(a) for a in arrays}) > 1:
        raise WrongArrayLengths(
            f"Array lengths differ: {', '.join(str(len(a)) for a in arrays)}"
        )


class FeeProxy(Stateful):
    """
    Fee-collecting intermediary for MultiVault deposits.

    Value-accepting calls take the caller as `sender` and the attached
    native payment as `value`, both keyword-only.
    """

    def __init__(
        self,
        ledger: Ledger,
        vault: BaseMultiVault,
        fee_recipient: Address,
        deposit_fixed_fee: int,
        deposit_percentage_fee: int,
        admins: Iterable[Address],
        address: Optional[Address] = None,
    ):
        if vault is None or is_zero_address(vault.address):
            raise InvalidMultiVaultAddress()
        if is_zero_address(fee_recipient):
            raise InvalidMultisigAddress()
        admins = list(admins)
        if not admins:
            raise NoAdminsProvided()

        self._ledger = ledger
        self._vault = vault
        self._multivault = to_address(vault.address)
        self.address = to_address(address) if address else random_address()
        self._fees = FeeConfig(
            deposit_fixed_fee=deposit_fixed_fee,
            deposit_percentage_fee=deposit_percentage_fee,
            fee_recipient=fee_recipient,
        )
        self._admins = AdminRegistry(admins)
        self._reconciler = PaymentReconciler(ledger, self.address, vault)
        self.fee_logger: Optional[FeeLogger] = None

        ledger.register(self)
        ledger.register(vault)
        logger.info(
            f"FeeProxy {self.address} deployed for MultiVault {self._multivault}: "
            f"fixed={deposit_fixed_fee} pct={deposit_percentage_fee}bps "
            f"recipient={self._fees.fee_recipient} admins={len(self._admins)}"
        )

    @classmethod
    def from_config(
        cls,
        config: "SystemConfig",
        ledger: Ledger,
        vault: BaseMultiVault,
    ) -> "FeeProxy":
        """
        Deploy a proxy from loaded configuration.

        `vault` must sit at the configured MultiVault address.
        """
        try:
            configured = to_address(config.proxy.multivault_address)
        except ValueError:
            raise InvalidMultiVaultAddress(
                f"Invalid MultiVault address: {config.proxy.multivault_address!r}"
            )
        if is_zero_address(configured):
            raise InvalidMultiVaultAddress("MultiVault address is the zero address")
        if configured != to_address(vault.address):
            raise InvalidMultiVaultAddress(
                f"Vault at {vault.address} does not match configured {configured}"
            )

        proxy = cls(
            ledger=ledger,
            vault=vault,
            fee_recipient=config.proxy.fee_recipient,
            deposit_fixed_fee=config.proxy.deposit_fixed_fee_wei,
            deposit_percentage_fee=config.proxy.deposit_percentage_fee,
            admins=config.proxy.admins,
        )
        if config.logging.fee_log_dir:
            proxy.fee_logger = FeeLogger(Path(config.logging.fee_log_dir))
            ledger.event_bus.subscribe(FeesCollected.channel, proxy.fee_logger.on_fees_collected)
        return proxy

    # ------------------------------------------------------------------
    # Stateful
    # ------------------------------------------------------------------

    def snapshot(self) -> tuple:
        return (
            self._fees.deposit_fixed_fee,
            self._fees.deposit_percentage_fee,
            self._fees.fee_recipient,
            self._admins.admins,
        )

    def restore(self, state: tuple) -> None:
        fixed_fee, percentage_fee, recipient, admins = state
        self._fees.deposit_fixed_fee = fixed_fee
        self._fees.deposit_percentage_fee = percentage_fee
        self._fees.fee_recipient = recipient
        self._admins.restore(admins)

    # ------------------------------------------------------------------
    # Configuration readers
    # ------------------------------------------------------------------

    @property
    def multivault(self) -> Address:
        return self._multivault

    @property
    def deposit_fixed_fee(self) -> int:
        return self._fees.deposit_fixed_fee

    @property
    def deposit_percentage_fee(self) -> int:
        return self._fees.deposit_percentage_fee

    @property
    def fee_recipient(self) -> Address:
        return self._fees.fee_recipient

    def whitelisted_admins(self, account: Address) -> bool:
        return self._admins.is_admin(account)

    # ------------------------------------------------------------------
    # Admin setters
    # ------------------------------------------------------------------

    def set_deposit_fixed_fee(self, new_fee: int, *, sender: Address) -> None:
        with self._ledger.transaction("setDepositFixedFee"):
            self._admins.require(sender)
            old_fee = self._fees.set_fixed_fee(new_fee)
            self._ledger.emit(DepositFixedFeeUpdated(old_fee=old_fee, new_fee=new_fee))
        logger.info(f"Deposit fixed fee {old_fee} -> {new_fee} by {sender}")

    def set_deposit_percentage_fee(self, new_fee: int, *, sender: Address) -> None:
        with self._ledger.transaction("setDepositPercentageFee"):
            self._admins.require(sender)
            old_fee = self._fees.set_percentage_fee(new_fee)
            self._ledger.emit(DepositPercentageFeeUpdated(old_fee=old_fee, new_fee=new_fee))
        logger.info(f"Deposit percentage fee {old_fee} -> {new_fee} bps by {sender}")

    def set_fee_recipient(self, new_recipient: Address, *, sender: Address) -> None:
        with self._ledger.transaction("setFeeRecipient"):
            self._admins.require(sender)
            old_recipient = self._fees.set_recipient(new_recipient)
            self._ledger.emit(
                FeeRecipientUpdated(
                    old_recipient=old_recipient,
                    new_recipient=self._fees.fee_recipient,
                )
            )
        logger.info(f"Fee recipient {old_recipient} -> {self._fees.fee_recipient} by {sender}")

    def set_whitelisted_admin(self, admin: Address, status: bool, *, sender: Address) -> None:
        with self._ledger.transaction("setWhitelistedAdmin"):
            self._admins.require(sender)
            admin = to_address(admin)
            self._admins.set_status(admin, status)
            self._ledger.emit(AdminWhitelistUpdated(admin=admin, status=status))
        logger.info(f"Admin {admin} whitelisted={status} by {sender}")

    # ------------------------------------------------------------------
    # Fee views
    # ------------------------------------------------------------------

    def calculate_deposit_fee(self, deposit_count: int, total_deposit: int) -> int:
        return self._fees.calculator.deposit_fee(deposit_count, total_deposit)

    def get_total_deposit_cost(self, deposit_amount: int) -> int:
        return self._fees.calculator.total_deposit_cost(deposit_amount)

    def get_total_creation_cost(
        self, deposit_count: int, total_deposit: int, multivault_cost: int
    ) -> int:
        return self._fees.calculator.total_creation_cost(
            deposit_count, total_deposit, multivault_cost
        )

    def get_multivault_amount_from_value(self, value: int) -> int:
        return self._fees.calculator.inverse_deposit_amount(value)

    # ------------------------------------------------------------------
    # Vault passthrough
    # ------------------------------------------------------------------

    def get_atom_cost(self) -> int:
        return self._vault.get_atom_cost()

    def get_triple_cost(self) -> int:
        return self._vault.get_triple_cost()

    def is_term_created(self, term_id: TermId) -> bool:
        return self._vault.is_term_created(term_id)

    def get_shares(self, account: Address, term_id: TermId, curve_id: int) -> int:
        return self._vault.get_shares(account, term_id, curve_id)

    # ------------------------------------------------------------------
    # Value-accepting entry points
    # ------------------------------------------------------------------

    def create_atoms(
        self,
        receiver: Address,
        data: Sequence[bytes],
        assets: Sequence[int],
        curve_id: int,
        *,
        sender: Address,
        value: int,
    ) -> list[TermId]:
        """Create atoms with an initial deposit each. Returns atom ids."""
        operation = Operation.CREATE_ATOMS
        receiver = to_address(receiver)
        with self._ledger.transaction(operation.value):
            _check_lengths(data, assets)
            calculator = self._fees.calculator
            settlement = self._reconciler.receive(operation, to_address(sender), value)
            self._reconciler.validate(
                settlement,
                calculator,
                assets,
                creation_cost=self._vault.get_atom_cost() * len(data),
            )
            return self._reconciler.execute(
                settlement,
                self._fees.fee_recipient,
                lambda vault_value: self._vault.create_atoms(
                    self.address, receiver, data, assets, curve_id, vault_value
                ),
            )

    def create_triples(
        self,
        receiver: Address,
        subject_ids: Sequence[TermId],
        predicate_ids: Sequence[TermId],
        object_ids: Sequence[TermId],
        assets: Sequence[int],
        curve_id: int,
        *,
        sender: Address,
        value: int,
    ) -> list[TermId]:
        """Create triples with an initial deposit each. Returns triple ids."""
        operation = Operation.CREATE_TRIPLES
        receiver = to_address(receiver)
        with self._ledger.transaction(operation.value):
            _check_lengths(subject_ids, predicate_ids, object_ids, assets)
            calculator = self._fees.calculator
            settlement = self._reconciler.receive(operation, to_address(sender), value)
            self._reconciler.validate(
                settlement,
                calculator,
                assets,
                creation_cost=self._vault.get_triple_cost() * len(subject_ids),
            )
            return self._reconciler.execute(
                settlement,
                self._fees.fee_recipient,
                lambda vault_value: self._vault.create_triples(
                    self.address,
                    receiver,
                    subject_ids,
                    predicate_ids,
                    object_ids,
                    assets,
                    curve_id,
                    vault_value,
                ),
            )

    def deposit(
        self,
        receiver: Address,
        term_id: TermId,
        curve_id: int,
        min_shares: int,
        *,
        sender: Address,
        value: int,
    ) -> int:
        """
        Deposit into one term. `value` is the total payment including the
        fee; the deposited amount is derived from it. Returns shares minted.
        """
        operation = Operation.DEPOSIT
        receiver = to_address(receiver)
        with self._ledger.transaction(operation.value):
            calculator = self._fees.calculator
            settlement = self._reconciler.receive(operation, to_address(sender), value)
            self._reconciler.validate_inverse(settlement, calculator)
            return self._reconciler.execute(
                settlement,
                self._fees.fee_recipient,
                lambda vault_value: self._vault.deposit(
                    self.address, receiver, term_id, curve_id, min_shares, vault_value
                ),
            )

    def deposit_batch(
        self,
        receiver: Address,
        term_ids: Sequence[TermId],
        curve_ids: Sequence[int],
        assets: Sequence[int],
        min_shares: Sequence[int],
        *,
        sender: Address,
        value: int,
    ) -> list[int]:
        """Deposit into several terms at once. Returns shares minted per term."""
        operation = Operation.DEPOSIT_BATCH
        receiver = to_address(receiver)
        with self._ledger.transaction(operation.value):
            _check_lengths(term_ids, curve_ids, assets, min_shares)
            calculator = self._fees.calculator
            settlement = self._reconciler.receive(operation, to_address(sender), value)
            self._reconciler.validate(settlement, calculator, assets)
            return self._reconciler.execute(
                settlement,
                self._fees.fee_recipient,
                lambda vault_value: self._vault.deposit_batch(
                    self.address,
                    receiver,
                    term_ids,
                    curve_ids,
                    assets,
                    min_shares,
                    vault_value,
                ),
            )
