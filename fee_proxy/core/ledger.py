"""
In-process execution substrate.

Tracks native balances and runs every proxy call as one all-or-nothing
transaction: on any exception, balances, registered participants and
buffered events are restored to what they were when the transaction
opened, and the exception propagates unchanged.
"""
from contextlib import contextmanager
from typing import Any, Iterator, Optional
import logging
import threading

from .errors import InsufficientBalance, InvalidAmount, TransferRejected
from .event_bus import EventBus
from .interfaces import Stateful
from .types import Address
from ..utils.helpers import generate_tx_id, to_address

logger = logging.getLogger(__name__)


class Ledger:
    """
    Serialized ledger of native balances.

    Transactions are strictly serialized through a re-entrant lock; a
    transaction opened while another is active on the same thread joins
    the outer one and shares its fate.
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus or EventBus()
        self._balances: dict[Address, int] = {}
        self._rejecting: set[Address] = set()
        self._participants: list[Stateful] = []
        self._events: list[Any] = []
        self._pending: list[Any] = []
        self._lock = threading.RLock()
        self._depth = 0
        self._tx_id: Optional[str] = None

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @property
    def events(self) -> list[Any]:
        """Committed events, oldest first."""
        return list(self._events)

    def balance_of(self, account: Address) -> int:
        return self._balances.get(to_address(account), 0)

    def mint(self, account: Address, amount: int) -> None:
        """Credit native value out of thin air (genesis/test funding)."""
        if amount < 0:
            raise InvalidAmount(f"Cannot mint negative amount {amount}")
        account = to_address(account)
        self._balances[account] = self._balances.get(account, 0) + amount

    def reject_transfers(self, account: Address, enabled: bool = True) -> None:
        """Make `account` refuse incoming native transfers."""
        account = to_address(account)
        if enabled:
            self._rejecting.add(account)
        else:
            self._rejecting.discard(account)

    def register(self, participant: Stateful) -> None:
        """Include a participant's state in transaction rollback."""
        if participant not in self._participants:
            self._participants.append(participant)

    def transfer(self, sender: Address, recipient: Address, amount: int) -> None:
        """Move native value. Zero-value transfers still hit the recipient."""
        if amount < 0:
            raise InvalidAmount(f"Cannot transfer negative amount {amount}")
        sender, recipient = to_address(sender), to_address(recipient)
        if recipient in self._rejecting:
            raise TransferRejected(recipient)

        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(sender, balance, amount)
        self._balances[sender] = balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount

    def emit(self, event: Any) -> None:
        """Buffer an event until the enclosing transaction commits."""
        with self._lock:
            if self._depth:
                self._pending.append(event)
            else:
                self._commit_events([event])

    @contextmanager
    def transaction(self, label: str = "") -> Iterator[str]:
        """
        Run the enclosed block atomically. Yields the transaction id.
        """
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self._tx_id
                finally:
                    self._depth -= 1
                return

            balances = dict(self._balances)
            states = [(p, p.snapshot()) for p in self._participants]
            self._tx_id = tx_id = generate_tx_id()
            self._depth = 1
            try:
                yield tx_id
            except Exception as e:
                self._balances = balances
                for participant, state in states:
                    participant.restore(state)
                self._pending = []
                logger.warning(f"{tx_id} {label} reverted: {e!r}")
                raise
            finally:
                self._depth = 0
                self._tx_id = None

            committed, self._pending = self._pending, []
            logger.debug(f"{tx_id} {label} committed with {len(committed)} event(s)")
            # Under the lock so publication order matches commit order
            self._commit_events(committed)

    def _commit_events(self, events: list[Any]) -> None:
        self._events.extend(events)
        for event in events:
            self.event_bus.publish(getattr(event, "channel", type(event).__name__), event)
