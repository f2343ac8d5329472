"""
Vault implementations.
"""
from .memory import InMemoryMultiVault, DEFAULT_ATOM_COST, DEFAULT_TRIPLE_COST

__all__ = [
    "InMemoryMultiVault",
    "DEFAULT_ATOM_COST",
    "DEFAULT_TRIPLE_COST",
]
