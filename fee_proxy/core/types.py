"""
Core type definitions for the fee proxy.
All components communicate using these standardized types.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Optional
import time


Address = str                       # EIP-55 checksummed hex address
TermId = bytes                      # 32-byte atom/triple identifier

ZERO_ADDRESS: Address = "0x0000000000000000000000000000000000000000"
FEE_DENOMINATOR = 10_000            # basis points, 10000 = 100%
MAX_PERCENTAGE_FEE = FEE_DENOMINATOR


class Operation(Enum):
    """Value-accepting proxy entry points."""
    CREATE_ATOMS = "createAtoms"
    CREATE_TRIPLES = "createTriples"
    DEPOSIT = "deposit"
    DEPOSIT_BATCH = "depositBatch"


class PaymentStage(Enum):
    """Per-call payment lifecycle states."""
    RECEIVED = auto()
    VALIDATED = auto()
    FORWARDED = auto()
    SETTLED = auto()
    REJECTED = auto()


@dataclass(frozen=True, slots=True)
class FeeSchedule:
    """
    Immutable snapshot of the deposit fee parameters.

    fixed_fee is charged once per strictly positive deposit,
    percentage_fee is in basis points of the deposited total.
    """
    fixed_fee: int = 0
    percentage_fee: int = 0

    @property
    def percentage(self) -> float:
        """Percentage fee as a human-readable percent (500 -> 5.0)."""
        return self.percentage_fee / 100


@dataclass(slots=True)
class Settlement:
    """
    Call-scoped accounting for one entry-point invocation.
    Never persisted beyond the call that created it.
    """
    operation: Operation
    payer: Address
    payment: int
    deposit_count: int = 0
    total_deposit: int = 0
    fee: int = 0
    vault_cost: int = 0
    refund: int = 0
    stage: PaymentStage = PaymentStage.RECEIVED
    created_at: int = field(default_factory=time.time_ns)
    rejection_reason: Optional[str] = None

    @property
    def required(self) -> int:
        """Minimum payment accepted for this call."""
        return self.fee + self.vault_cost

    @property
    def is_terminal(self) -> bool:
        return self.stage in (PaymentStage.SETTLED, PaymentStage.REJECTED)


# ============================================================================
# Events
# ============================================================================

@dataclass(frozen=True, slots=True)
class DepositFixedFeeUpdated:
    channel: ClassVar[str] = "DepositFixedFeeUpdated"
    old_fee: int
    new_fee: int


@dataclass(frozen=True, slots=True)
class DepositPercentageFeeUpdated:
    channel: ClassVar[str] = "DepositPercentageFeeUpdated"
    old_fee: int
    new_fee: int


@dataclass(frozen=True, slots=True)
class FeeRecipientUpdated:
    channel: ClassVar[str] = "FeeRecipientUpdated"
    old_recipient: Address
    new_recipient: Address


@dataclass(frozen=True, slots=True)
class AdminWhitelistUpdated:
    channel: ClassVar[str] = "AdminWhitelistUpdated"
    admin: Address
    status: bool


@dataclass(frozen=True, slots=True)
class FeesCollected:
    """Emitted once a fee reached the recipient."""
    channel: ClassVar[str] = "FeesCollected"
    user: Address
    amount: int
    operation: str
    timestamp: int = field(default_factory=time.time_ns, compare=False)
