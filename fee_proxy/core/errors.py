"""
Error taxonomy for the fee proxy.

Every error aborts the whole transaction it is raised in. The ``code``
attribute carries the on-chain custom error name so callers can match
revert reasons across implementations.
"""
from typing import Optional


class FeeProxyError(Exception):
    """Base class for all errors raised by the proxy itself."""

    code = "IntuitionFeeProxy_Error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.code)


class NotWhitelistedAdmin(FeeProxyError):
    code = "IntuitionFeeProxy_NotWhitelistedAdmin"


class InsufficientValue(FeeProxyError):
    code = "IntuitionFeeProxy_InsufficientValue"

    def __init__(self, provided: int, required: int):
        self.provided = provided
        self.required = required
        super().__init__(f"{self.code}: provided {provided}, required {required}")


class InvalidMultisigAddress(FeeProxyError):
    code = "IntuitionFeeProxy_InvalidMultisigAddress"


class InvalidMultiVaultAddress(FeeProxyError):
    code = "IntuitionFeeProxy_InvalidMultiVaultAddress"


class TransferFailed(FeeProxyError):
    code = "IntuitionFeeProxy_TransferFailed"


class WrongArrayLengths(FeeProxyError):
    code = "IntuitionFeeProxy_WrongArrayLengths"


class ZeroAddress(FeeProxyError):
    code = "IntuitionFeeProxy_ZeroAddress"


class FeePercentageTooHigh(FeeProxyError):
    code = "IntuitionFeeProxy_FeePercentageTooHigh"


class InvalidAmount(FeeProxyError):
    """Negative amount or count where only unsigned values make sense."""
    code = "IntuitionFeeProxy_InvalidAmount"


class NoAdminsProvided(FeeProxyError):
    code = "IntuitionFeeProxy_NoAdminsProvided"


# ============================================================================
# Execution substrate
# ============================================================================

class LedgerError(Exception):
    """Raised by the ledger when a native transfer cannot happen."""


class InsufficientBalance(LedgerError):
    def __init__(self, account: str, balance: int, amount: int):
        self.account = account
        self.balance = balance
        self.amount = amount
        super().__init__(f"{account} has {balance}, needs {amount}")


class TransferRejected(LedgerError):
    def __init__(self, recipient: str):
        self.recipient = recipient
        super().__init__(f"{recipient} rejected native transfer")


# ============================================================================
# Vault
# ============================================================================

class VaultError(Exception):
    """Revert raised by a vault implementation. Propagates unchanged."""

    def __init__(self, code: str, message: str = ""):
        self.code = code
        super().__init__(f"{code}: {message}" if message else code)
