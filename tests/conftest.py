"""
Shared fixtures: a funded ledger, an in-memory vault and a deployed proxy.
"""
from types import SimpleNamespace

import pytest

from fee_proxy.core import FeeProxy, Ledger
from fee_proxy.utils import address_from_int, to_wei
from fee_proxy.vault import InMemoryMultiVault

FEE_RECIPIENT = address_from_int(1)
DEPOSIT_FEE = to_wei("0.1")         # 0.1 per deposit
DEPOSIT_PERCENTAGE = 500            # 5%
FEE_DENOMINATOR = 10_000


@pytest.fixture
def accounts():
    return SimpleNamespace(
        admin1=address_from_int(0xA1),
        admin2=address_from_int(0xA2),
        admin3=address_from_int(0xA3),
        user=address_from_int(0xB0B),
        non_admin=address_from_int(0xBAD),
    )


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def vault():
    return InMemoryMultiVault()


@pytest.fixture
def proxy(ledger, vault, accounts):
    proxy = FeeProxy(
        ledger,
        vault,
        FEE_RECIPIENT,
        DEPOSIT_FEE,
        DEPOSIT_PERCENTAGE,
        [accounts.admin1, accounts.admin2, accounts.admin3],
    )
    vault.approve(accounts.user, proxy.address)
    ledger.mint(accounts.user, to_wei("1000"))
    return proxy


PROXY_ENV_VARS = [
    "MULTIVAULT_ADDRESS",
    "FEE_RECIPIENT",
    "ADMIN_1",
    "ADMIN_2",
    "ADMINS",
    "DEPOSIT_FEE",
    "DEPOSIT_PERCENTAGE",
    "LOG_LEVEL",
    "FEE_LOG_DIR",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Start without proxy variables and drop anything a .env file sets."""
    for name in PROXY_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
