"""
Core module - contains types, fee model, ledger, event bus and the proxy.
"""
from .types import (
    Address,
    TermId,
    ZERO_ADDRESS,
    FEE_DENOMINATOR,
    MAX_PERCENTAGE_FEE,
    Operation,
    PaymentStage,
    FeeSchedule,
    Settlement,
    DepositFixedFeeUpdated,
    DepositPercentageFeeUpdated,
    FeeRecipientUpdated,
    AdminWhitelistUpdated,
    FeesCollected,
)
from .errors import (
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
    LedgerError,
    InsufficientBalance,
    TransferRejected,
    VaultError,
)
from .fee_model import FeeCalculator, count_deposits
from .fee_config import FeeConfig, AdminRegistry
from .interfaces import Stateful, BaseMultiVault
from .event_bus import EventBus, ChannelStats
from .ledger import Ledger
from .reconciler import PaymentReconciler
from .proxy import FeeProxy
from .config import SystemConfig, ProxyConfig, LoggingConfig

__all__ = [
    # Types
    "Address",
    "TermId",
    "ZERO_ADDRESS",
    "FEE_DENOMINATOR",
    "MAX_PERCENTAGE_FEE",
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
    "LedgerError",
    "InsufficientBalance",
    "TransferRejected",
    "VaultError",
    # Fee model
    "FeeCalculator",
    "count_deposits",
    "FeeConfig",
    "AdminRegistry",
    # Interfaces
    "Stateful",
    "BaseMultiVault",
    # Substrate
    "EventBus",
    "ChannelStats",
    "Ledger",
    # Proxy
    "PaymentReconciler",
    "FeeProxy",
    # Config
    "SystemConfig",
    "ProxyConfig",
    "LoggingConfig",
]
