"""
Abstract base classes defining component interfaces.
All concrete implementations must adhere to these contracts.
"""
from abc import ABC, abstractmethod
from typing import Any, Sequence

from .types import Address, TermId


class Stateful(ABC):
    """
    Anything whose state must roll back with a failed transaction.

    The ledger calls snapshot() when a transaction opens and restore()
    with that same value if the transaction fails.
    """

    @abstractmethod
    def snapshot(self) -> Any:
        """Return an independent copy of the mutable state."""
        pass

    @abstractmethod
    def restore(self, state: Any) -> None:
        """Reinstate state previously returned by snapshot()."""
        pass


class BaseMultiVault(Stateful):
    """
    Abstract base class for the vault capability the proxy forwards to.

    The vault is responsible for:
    1. Creating atoms and triples and assigning their term ids
    2. Issuing shares against deposits on a bonding curve
    3. Checking that the sender is approved to act for the receiver

    Value-accepting calls receive the native value already transferred
    to `address` and must raise if it does not match what they need.
    Errors raised here propagate through the proxy unchanged.
    """

    @property
    @abstractmethod
    def address(self) -> Address:
        """Ledger address of the vault."""
        pass

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @abstractmethod
    def get_atom_cost(self) -> int:
        """Creation cost of one atom, excluding any deposit."""
        pass

    @abstractmethod
    def get_triple_cost(self) -> int:
        """Creation cost of one triple, excluding any deposit."""
        pass

    @abstractmethod
    def is_term_created(self, term_id: TermId) -> bool:
        pass

    @abstractmethod
    def get_shares(self, account: Address, term_id: TermId, curve_id: int) -> int:
        pass

    # ------------------------------------------------------------------
    # Value-accepting calls
    # ------------------------------------------------------------------

    @abstractmethod
    def create_atoms(
        self,
        sender: Address,
        receiver: Address,
        data: Sequence[bytes],
        assets: Sequence[int],
        curve_id: int,
        value: int,
    ) -> list[TermId]:
        """Create atoms and deposit `assets` for `receiver`. Returns atom ids."""
        pass

    @abstractmethod
    def create_triples(
        self,
        sender: Address,
        receiver: Address,
        subject_ids: Sequence[TermId],
        predicate_ids: Sequence[TermId],
        object_ids: Sequence[TermId],
        assets: Sequence[int],
        curve_id: int,
        value: int,
    ) -> list[TermId]:
        """Create triples and deposit `assets` for `receiver`. Returns triple ids."""
        pass

    @abstractmethod
    def deposit(
        self,
        sender: Address,
        receiver: Address,
        term_id: TermId,
        curve_id: int,
        min_shares: int,
        value: int,
    ) -> int:
        """Deposit `value` into a term. Returns shares minted."""
        pass

    @abstractmethod
    def deposit_batch(
        self,
        sender: Address,
        receiver: Address,
        term_ids: Sequence[TermId],
        curve_ids: Sequence[int],
        assets: Sequence[int],
        min_shares: Sequence[int],
        value: int,
    ) -> list[int]:
        """Deposit into several terms at once. Returns shares minted per term."""
        pass
