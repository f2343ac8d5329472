"""
fee_proxy: a fee-collecting proxy in front of an Intuition MultiVault.

Users pay the proxy once per call. The proxy forwards exactly what the
vault needs, sends the service fee to a configurable recipient, and does
both atomically.

Architecture:
    User → FeeProxy → PaymentReconciler → MultiVault
                    ↘ FeeCalculator / FeeConfig / AdminRegistry
    Ledger (balances, atomic transactions) → EventBus → subscribers

Key Components:
    - core: Types, errors, fee model, config, ledger, event bus, proxy
    - vault: In-memory MultiVault for simulation and tests
    - utils: Logging, address and unit helpers

Usage:
    from fee_proxy import FeeProxy, Ledger
    from fee_proxy.vault import InMemoryMultiVault

    ledger = Ledger()
    vault = InMemoryMultiVault()
    proxy = FeeProxy(ledger, vault, recipient, to_wei("0.1"), 500, [admin])
    proxy.deposit(user, term_id, 1, 0, sender=user, value=proxy.get_total_deposit_cost(amount))
"""

__version__ = "0.1.0"

from .core import (
    # Types
    Address,
    TermId,
    ZERO_ADDRESS,
    FEE_DENOMINATOR,
    Operation,
    PaymentStage,
    FeeSchedule,
    Settlement,
    # Events
    DepositFixedFeeUpdated,
    DepositPercentageFeeUpdated,
    FeeRecipientUpdated,
    AdminWhitelistUpdated,
    FeesCollected,
    # Errors
    FeeProxyError,
    NotWhitelistedAdmin,
    InsufficientValue,
    InvalidMultisigAddress,
    InvalidMultiVaultAddress,
    TransferFailed,
    WrongArrayLengths,
    ZeroAddress,
    FeePercentageTooHigh,
    InvalidAmount,
    NoAdminsProvided,
    VaultError,
    # Components
    FeeCalculator,
    FeeConfig,
    AdminRegistry,
    BaseMultiVault,
    EventBus,
    Ledger,
    PaymentReconciler,
    FeeProxy,
    # Config
    SystemConfig,
)

from .utils import (
    setup_logging,
    get_logger,
    to_wei,
    from_wei,
)

__all__ = [
    # Version
    "__version__",
    # Types
    "Address",
    "TermId",
    "ZERO_ADDRESS",
    "FEE_DENOMINATOR",
    "Operation",
    "PaymentStage",
    "FeeSchedule",
    "Settlement",
    # Events
    "DepositFixedFeeUpdated",
    "DepositPercentageFeeUpdated",
    "FeeRecipientUpdated",
    "AdminWhitelistUpdated",
    "FeesCollected",
    # Errors
    "FeeProxyError",
    "NotWhitelistedAdmin",
    "InsufficientValue",
    "InvalidMultisigAddress",
    "InvalidMultiVaultAddress",
    "TransferFailed",
    "WrongArrayLengths",
    "ZeroAddress",
    "FeePercentageTooHigh",
    "InvalidAmount",
    "NoAdminsProvided",
    "VaultError",
    # Components
    "FeeCalculator",
    "FeeConfig",
    "AdminRegistry",
    "BaseMultiVault",
    "EventBus",
    "Ledger",
    "PaymentReconciler",
    "FeeProxy",
    # Config
    "SystemConfig",
    # Utils
    "setup_logging",
    "get_logger",
    "to_wei",
    "from_wei",
]
