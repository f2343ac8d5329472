"""
Utility functions and helpers.
"""
from .logging import (
    setup_logging,
    get_logger,
    FeeLogger,
    JsonFormatter,
)
from .helpers import (
    # Addresses
    to_address,
    is_zero_address,
    random_address,
    address_from_int,
    # Units
    to_wei,
    from_wei,
    format_ether,
    # Term ids
    atom_id,
    triple_id,
    term_id_from_int,
    # IDs
    generate_tx_id,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "FeeLogger",
    "JsonFormatter",
    # Addresses
    "to_address",
    "is_zero_address",
    "random_address",
    "address_from_int",
    # Units
    "to_wei",
    "from_wei",
    "format_ether",
    # Term ids
    "atom_id",
    "triple_id",
    "term_id_from_int",
    # IDs
    "generate_tx_id",
]
