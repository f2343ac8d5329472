"""
Configuration management for the fee proxy.

Loads config from YAML files and environment variables.
Environment variables take precedence over file config and may also be
provided through a .env file.
"""
from dataclasses import dataclass, field
from typing import Optional
from decimal import Decimal, InvalidOperation
from pathlib import Path
import os

from dotenv import find_dotenv, load_dotenv
from web3 import Web3
import yaml

from .types import MAX_PERCENTAGE_FEE
from ..utils.helpers import to_wei


@dataclass
class ProxyConfig:
    """Deployment parameters of one proxy."""
    multivault_address: str = ""        # From env: MULTIVAULT_ADDRESS
    fee_recipient: str = ""             # From env: FEE_RECIPIENT
    admins: list[str] = field(default_factory=list)  # From env: ADMIN_1, ADMIN_2, ADMINS
    deposit_fixed_fee: Decimal = Decimal("0")       # Ether per positive deposit
    deposit_percentage_fee: int = 500               # Basis points (500 = 5%)

    @property
    def deposit_fixed_fee_wei(self) -> int:
        return to_wei(self.deposit_fixed_fee)


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)-24s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[str] = None
    max_file_size_mb: int = 100
    backup_count: int = 5
    json_format: bool = False
    fee_log_dir: Optional[str] = None   # CSV log of collected fees, off when unset


@dataclass
class SystemConfig:
    """Top-level configuration."""
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        env_file: Optional[Path] = None,
    ) -> "SystemConfig":
        """
        Load configuration from file and environment variables.
        Environment variables override file config.
        """
        config = cls()

        if config_path and config_path.exists():
            with open(config_path) as f:
                file_config = yaml.safe_load(f)
                config = cls._merge_dict(config, file_config)

        load_dotenv(env_file or find_dotenv(usecwd=True))

        # Blank variables (as in .env.example) leave file values alone
        proxy = config.proxy
        proxy.multivault_address = os.getenv("MULTIVAULT_ADDRESS") or proxy.multivault_address
        proxy.fee_recipient = os.getenv("FEE_RECIPIENT") or proxy.fee_recipient
        if os.getenv("DEPOSIT_FEE"):
            proxy.deposit_fixed_fee = _to_decimal(os.environ["DEPOSIT_FEE"])
        if os.getenv("DEPOSIT_PERCENTAGE"):
            proxy.deposit_percentage_fee = int(os.environ["DEPOSIT_PERCENTAGE"])

        env_admins = [a for a in (os.getenv("ADMIN_1"), os.getenv("ADMIN_2")) if a]
        if os.getenv("ADMINS"):
            env_admins += [a.strip() for a in os.environ["ADMINS"].split(",") if a.strip()]
        if env_admins:
            proxy.admins = env_admins

        config.logging.level = os.getenv("LOG_LEVEL") or config.logging.level
        config.logging.fee_log_dir = os.getenv("FEE_LOG_DIR") or config.logging.fee_log_dir
        return config

    @classmethod
    def _merge_dict(cls, config: "SystemConfig", data: dict) -> "SystemConfig":
        """Merge dictionary into config object."""
        if not data:
            return config

        if "proxy" in data:
            for k, v in data["proxy"].items():
                if hasattr(config.proxy, k):
                    if k == "deposit_fixed_fee":
                        v = _to_decimal(v)
                    elif k == "deposit_percentage_fee":
                        v = int(v)
                    elif k == "admins":
                        v = list(v or [])
                    setattr(config.proxy, k, v)

        if "logging" in data:
            for k, v in data["logging"].items():
                if hasattr(config.logging, k):
                    setattr(config.logging, k, v)

        return config

    def validate(self) -> list[str]:
        """
        Validate configuration. Returns list of error messages.
        Empty list means config is valid.
        """
        errors = []
        proxy = self.proxy

        errors += _check_address("MULTIVAULT_ADDRESS", proxy.multivault_address)
        errors += _check_address("FEE_RECIPIENT", proxy.fee_recipient)

        if not proxy.admins:
            errors.append("No admins configured (ADMIN_1)")
        for i, admin in enumerate(proxy.admins, start=1):
            errors += _check_address(f"admin #{i}", admin)

        if proxy.deposit_fixed_fee < 0:
            errors.append("deposit_fixed_fee must be non-negative")
        if not 0 <= proxy.deposit_percentage_fee <= MAX_PERCENTAGE_FEE:
            errors.append(
                f"deposit_percentage_fee must be within [0, {MAX_PERCENTAGE_FEE}] bps"
            )

        if self.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown log level: {self.logging.level}")

        return errors


def _to_decimal(value) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a decimal amount: {value!r}")


def _check_address(name: str, value: str) -> list[str]:
    if not value:
        return [f"{name} not set"]
    if not Web3.is_address(value):
        return [f"{name} is not a valid address: {value}"]
    if int(value, 16) == 0:
        return [f"{name} must not be the zero address"]
    return []
