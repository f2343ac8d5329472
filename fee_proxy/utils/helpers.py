"""
Utility functions for the fee proxy.
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Union

from web3 import Web3


# ============================================================================
# Addresses
# ============================================================================

def to_address(value: str) -> str:
    """
    Normalize a hex address to its EIP-55 checksummed form.
    Raises ValueError for anything that is not a 20-byte hex address.
    """
    if not Web3.is_address(value):
        raise ValueError(f"Invalid address: {value!r}")
    return Web3.to_checksum_address(value)


def is_zero_address(value: str) -> bool:
    """True for the zero address in any casing."""
    return int(to_address(value), 16) == 0


def random_address() -> str:
    """Fresh unpredictable address for newly deployed components."""
    digest = Web3.keccak(text=uuid.uuid4().hex).hex()
    return Web3.to_checksum_address("0x" + digest[-40:])


def address_from_int(n: int) -> str:
    """Deterministic address from an integer (0x...01 for 1)."""
    return Web3.to_checksum_address(f"0x{n:040x}")


# ============================================================================
# Units
# ============================================================================

def to_wei(amount: Union[str, int, Decimal]) -> int:
    """Convert an ether-denominated amount to wei."""
    return int(Web3.to_wei(Decimal(str(amount)), "ether"))


def from_wei(amount: int) -> Decimal:
    """Convert wei to an ether-denominated Decimal."""
    return Decimal(Web3.from_wei(amount, "ether"))


def format_ether(amount: int) -> str:
    """Human-readable ether string without trailing zeros."""
    return format(from_wei(amount).normalize(), "f")


# ============================================================================
# Term ids
# ============================================================================

def atom_id(data: bytes) -> bytes:
    """Atom id derived from its data."""
    return bytes(Web3.keccak(data))


def triple_id(subject_id: bytes, predicate_id: bytes, object_id: bytes) -> bytes:
    """Triple id derived from its three term ids."""
    return bytes(Web3.keccak(subject_id + predicate_id + object_id))


def term_id_from_int(n: int) -> bytes:
    """Left-padded 32-byte term id (0x...01 for 1)."""
    return n.to_bytes(32, "big")


# ============================================================================
# ID Generation
# ============================================================================

def generate_tx_id(prefix: str = "TX") -> str:
    """
    Generate a unique transaction ID.

    Format: PREFIX-YYYYMMDD-HHMMSS-RANDOM
    Example: TX-20241215-143052-a1b2c3
    """
    now = datetime.now(timezone.utc)
    date_part = now.strftime("%Y%m%d-%H%M%S")
    random_part = uuid.uuid4().hex[:6]
    return f"{prefix}-{date_part}-{random_part}"
