"""
In-memory MultiVault.

Reference implementation of the vault capability for simulation and
tests. Shares are issued 1:1 against deposited assets on every curve;
no pricing curve, entry fee or protocol fee is modelled.
"""
from copy import deepcopy
from typing import Optional, Sequence
import logging

from ..core.errors import VaultError
from ..core.interfaces import BaseMultiVault
from ..core.types import Address, TermId
from ..utils.helpers import atom_id, random_address, to_address, to_wei, triple_id

logger = logging.getLogger(__name__)

DEFAULT_ATOM_COST = to_wei("0.001")
DEFAULT_TRIPLE_COST = to_wei("0.001")


class InMemoryMultiVault(BaseMultiVault):
    """
    Dict-backed vault.

    When `require_approval` is set, a sender acting for a different
    receiver must have been approved by that receiver first.
    """

    def __init__(
        self,
        atom_cost: int = DEFAULT_ATOM_COST,
        triple_cost: int = DEFAULT_TRIPLE_COST,
        address: Optional[Address] = None,
        require_approval: bool = True,
    ):
        self._address = to_address(address) if address else random_address()
        self.atom_cost = atom_cost
        self.triple_cost = triple_cost
        self.require_approval = require_approval

        self._terms: dict[TermId, str] = {}
        self._shares: dict[tuple[Address, TermId, int], int] = {}
        self._approvals: set[tuple[Address, Address]] = set()

    @property
    def address(self) -> Address:
        return self._address

    # ------------------------------------------------------------------
    # Stateful
    # ------------------------------------------------------------------

    def snapshot(self) -> tuple:
        return deepcopy((self._terms, self._shares, self._approvals))

    def restore(self, state: tuple) -> None:
        self._terms, self._shares, self._approvals = deepcopy(state)

    # ------------------------------------------------------------------
    # Setup helpers
    # ------------------------------------------------------------------

    def approve(self, owner: Address, sender: Address, approved: bool = True) -> None:
        """Let `sender` create and deposit on behalf of `owner`."""
        key = (to_address(owner), to_address(sender))
        if approved:
            self._approvals.add(key)
        else:
            self._approvals.discard(key)

    def set_term_created(self, term_id: TermId, created: bool = True, kind: str = "atom") -> None:
        if created:
            self._terms[term_id] = kind
        else:
            self._terms.pop(term_id, None)

    def set_shares(self, account: Address, term_id: TermId, curve_id: int, shares: int) -> None:
        self._shares[(to_address(account), term_id, curve_id)] = shares

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def get_atom_cost(self) -> int:
        return self.atom_cost

    def get_triple_cost(self) -> int:
        return self.triple_cost

    def is_term_created(self, term_id: TermId) -> bool:
        return term_id in self._terms

    def get_shares(self, account: Address, term_id: TermId, curve_id: int) -> int:
        return self._shares.get((to_address(account), term_id, curve_id), 0)

    # ------------------------------------------------------------------
    # Value-accepting calls
    # ------------------------------------------------------------------

    def create_atoms(self, sender, receiver, data, assets, curve_id, value):
        sender, receiver = self._authorize(sender, receiver)
        self._check_lengths(data, assets)
        self._check_value(value, self.atom_cost * len(data) + sum(assets))

        ids = []
        for item in data:
            term_id = atom_id(item)
            if term_id in self._terms or term_id in ids:
                raise VaultError("MultiVault_AtomExists", term_id.hex())
            ids.append(term_id)

        for term_id, amount in zip(ids, assets):
            self._terms[term_id] = "atom"
            self._mint(receiver, term_id, curve_id, amount)
        logger.debug(f"Created {len(ids)} atom(s) for {receiver}")
        return ids

    def create_triples(
        self, sender, receiver, subject_ids, predicate_ids, object_ids, assets, curve_id, value
    ):
        sender, receiver = self._authorize(sender, receiver)
        self._check_lengths(subject_ids, predicate_ids, object_ids, assets)
        self._check_value(value, self.triple_cost * len(subject_ids) + sum(assets))

        ids = []
        for s, p, o in zip(subject_ids, predicate_ids, object_ids):
            for term in (s, p, o):
                self._require_term(term)
            term_id = triple_id(s, p, o)
            if term_id in self._terms or term_id in ids:
                raise VaultError("MultiVault_TripleExists", term_id.hex())
            ids.append(term_id)

        for term_id, amount in zip(ids, assets):
            self._terms[term_id] = "triple"
            self._mint(receiver, term_id, curve_id, amount)
        logger.debug(f"Created {len(ids)} triple(s) for {receiver}")
        return ids

    def deposit(self, sender, receiver, term_id, curve_id, min_shares, value):
        sender, receiver = self._authorize(sender, receiver)
        self._require_term(term_id)
        return self._deposit_one(receiver, term_id, curve_id, value, min_shares)

    def deposit_batch(self, sender, receiver, term_ids, curve_ids, assets, min_shares, value):
        sender, receiver = self._authorize(sender, receiver)
        self._check_lengths(term_ids, curve_ids, assets, min_shares)
        self._check_value(value, sum(assets))
        for term_id in term_ids:
            self._require_term(term_id)
        return [
            self._deposit_one(receiver, term_id, curve_id, amount, minimum)
            for term_id, curve_id, amount, minimum in zip(term_ids, curve_ids, assets, min_shares)
        ]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _deposit_one(self, receiver: Address, term_id: TermId, curve_id: int, amount: int, min_shares: int) -> int:
        shares = amount
        if shares < min_shares:
            raise VaultError("MultiVault_SlippageExceeded", f"{shares} < {min_shares}")
        self._mint(receiver, term_id, curve_id, shares)
        return shares

    def _mint(self, receiver: Address, term_id: TermId, curve_id: int, shares: int) -> None:
        key = (receiver, term_id, curve_id)
        self._shares[key] = self._shares.get(key, 0) + shares

    def _authorize(self, sender: Address, receiver: Address) -> tuple[Address, Address]:
        sender, receiver = to_address(sender), to_address(receiver)
        if self.require_approval and sender != receiver and (receiver, sender) not in self._approvals:
            raise VaultError("MultiVault_SenderNotApproved", f"{receiver} has not approved {sender}")
        return sender, receiver

    def _require_term(self, term_id: TermId) -> None:
        if term_id not in self._terms:
            raise VaultError("MultiVault_TermDoesNotExist", term_id.hex())

    @staticmethod
    def _check_lengths(*arrays: Sequence) -> None:
        if len({len(a) for a in arrays}) > 1:
            raise VaultError("MultiVault_ArraysNotSameLength")

    @staticmethod
    def _check_value(value: int, expected: int) -> None:
        if value != expected:
            raise VaultError("MultiVault_IncorrectValue", f"got {value}, expected {expected}")
