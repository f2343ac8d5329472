"""
Tests for configuration loading and validation.
"""
from decimal import Decimal
from pathlib import Path

import pytest

from fee_proxy.core import FeeProxy, InvalidMultiVaultAddress, Ledger, SystemConfig, ZERO_ADDRESS
from fee_proxy.utils import address_from_int, term_id_from_int, to_wei
from fee_proxy.vault import InMemoryMultiVault

VAULT = address_from_int(0x7A17)
RECIPIENT = address_from_int(1)
ADMIN_1 = address_from_int(0xA1)
ADMIN_2 = address_from_int(0xA2)
EXAMPLE_ENV = Path(__file__).resolve().parents[1] / ".env.example"


pytestmark = pytest.mark.usefixtures("clean_env")


@pytest.fixture
def no_env_file(tmp_path):
    return tmp_path / "missing.env"


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
proxy:
  multivault_address: "{VAULT}"
  fee_recipient: "{RECIPIENT}"
  admins: ["{ADMIN_1}"]
  deposit_fixed_fee: "0.1"
  deposit_percentage_fee: 500
logging:
  level: DEBUG
  json_format: true
"""
    )
    return path


class TestLoad:
    """Tests for SystemConfig.load."""

    def test_defaults(self, tmp_path, no_env_file):
        config = SystemConfig.load(tmp_path / "absent.yaml", env_file=no_env_file)

        assert config.proxy.deposit_fixed_fee == Decimal("0")
        assert config.proxy.deposit_percentage_fee == 500
        assert config.proxy.admins == []
        assert config.logging.level == "INFO"

    def test_yaml_file(self, config_file, no_env_file):
        config = SystemConfig.load(config_file, env_file=no_env_file)

        assert config.proxy.multivault_address == VAULT
        assert config.proxy.fee_recipient == RECIPIENT
        assert config.proxy.admins == [ADMIN_1]
        assert config.proxy.deposit_fixed_fee == Decimal("0.1")
        assert config.proxy.deposit_fixed_fee_wei == to_wei("0.1")
        assert config.logging.level == "DEBUG"
        assert config.logging.json_format is True

    def test_environment_overrides_file(self, config_file, no_env_file, monkeypatch):
        monkeypatch.setenv("FEE_RECIPIENT", ADMIN_2)
        monkeypatch.setenv("ADMIN_1", ADMIN_2)
        monkeypatch.setenv("DEPOSIT_FEE", "0.25")
        monkeypatch.setenv("DEPOSIT_PERCENTAGE", "250")

        config = SystemConfig.load(config_file, env_file=no_env_file)

        assert config.proxy.fee_recipient == ADMIN_2
        assert config.proxy.admins == [ADMIN_2]
        assert config.proxy.deposit_fixed_fee == Decimal("0.25")
        assert config.proxy.deposit_percentage_fee == 250
        assert config.proxy.multivault_address == VAULT

    def test_admin_list_variable(self, no_env_file, monkeypatch):
        monkeypatch.setenv("ADMIN_1", ADMIN_1)
        monkeypatch.setenv("ADMINS", f"{ADMIN_2}, {RECIPIENT}")

        config = SystemConfig.load(None, env_file=no_env_file)

        assert config.proxy.admins == [ADMIN_1, ADMIN_2, RECIPIENT]

    def test_dotenv_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(f"FEE_RECIPIENT={RECIPIENT}\nDEPOSIT_PERCENTAGE=100\n")

        config = SystemConfig.load(None, env_file=env_file)

        assert config.proxy.fee_recipient == RECIPIENT
        assert config.proxy.deposit_percentage_fee == 100

    def test_blank_variables_keep_file_values(self, config_file):
        """The shipped .env.example leaves addresses blank."""
        config = SystemConfig.load(config_file, env_file=EXAMPLE_ENV)

        assert config.proxy.multivault_address == VAULT
        assert config.proxy.fee_recipient == RECIPIENT
        assert config.proxy.admins == [ADMIN_1]
        assert config.logging.fee_log_dir is None
        assert config.validate() == []

    def test_dotenv_found_in_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("DEPOSIT_PERCENTAGE=42\n")
        monkeypatch.chdir(tmp_path)

        config = SystemConfig.load(tmp_path / "absent.yaml")

        assert config.proxy.deposit_percentage_fee == 42


class TestValidate:
    """Tests for SystemConfig.validate."""

    def test_valid(self, config_file, no_env_file):
        config = SystemConfig.load(config_file, env_file=no_env_file)
        assert config.validate() == []

    def test_empty_config(self):
        errors = SystemConfig().validate()

        assert "MULTIVAULT_ADDRESS not set" in errors
        assert "FEE_RECIPIENT not set" in errors
        assert any("No admins" in e for e in errors)

    def test_bad_values(self, config_file, no_env_file):
        config = SystemConfig.load(config_file, env_file=no_env_file)
        config.proxy.fee_recipient = "0x0000000000000000000000000000000000000000"
        config.proxy.admins = ["not-an-address"]
        config.proxy.deposit_percentage_fee = 10_001
        config.proxy.deposit_fixed_fee = Decimal("-1")
        config.logging.level = "LOUD"

        errors = config.validate()

        assert "FEE_RECIPIENT must not be the zero address" in errors
        assert any("admin #1" in e for e in errors)
        assert any("deposit_percentage_fee" in e for e in errors)
        assert "deposit_fixed_fee must be non-negative" in errors
        assert "Unknown log level: LOUD" in errors


class TestFromConfig:
    """Tests for deploying a proxy from configuration."""

    def test_builds_proxy(self, config_file, no_env_file):
        config = SystemConfig.load(config_file, env_file=no_env_file)
        vault = InMemoryMultiVault(address=config.proxy.multivault_address)

        proxy = FeeProxy.from_config(config, Ledger(), vault)

        assert proxy.multivault == VAULT
        assert proxy.fee_recipient == RECIPIENT
        assert proxy.deposit_fixed_fee == to_wei("0.1")
        assert proxy.deposit_percentage_fee == 500
        assert proxy.whitelisted_admins(ADMIN_1)

    def test_vault_must_match_configured_address(self, config_file, no_env_file):
        config = SystemConfig.load(config_file, env_file=no_env_file)
        vault = InMemoryMultiVault(address=address_from_int(0xDEAD))

        with pytest.raises(InvalidMultiVaultAddress):
            FeeProxy.from_config(config, Ledger(), vault)

    @pytest.mark.parametrize("address", ["", ZERO_ADDRESS, "not-an-address"])
    def test_unusable_configured_address(self, config_file, no_env_file, address):
        config = SystemConfig.load(config_file, env_file=no_env_file)
        config.proxy.multivault_address = address

        with pytest.raises(InvalidMultiVaultAddress):
            FeeProxy.from_config(config, Ledger(), InMemoryMultiVault())

    def test_configured_address_is_normalized(self, config_file, no_env_file):
        config = SystemConfig.load(config_file, env_file=no_env_file)
        config.proxy.multivault_address = VAULT.lower()

        proxy = FeeProxy.from_config(config, Ledger(), InMemoryMultiVault(address=VAULT))

        assert proxy.multivault == VAULT

    def test_fee_log_written_from_config(self, config_file, no_env_file, tmp_path):
        config = SystemConfig.load(config_file, env_file=no_env_file)
        config.logging.fee_log_dir = str(tmp_path / "fees")
        ledger = Ledger()
        vault = InMemoryMultiVault(address=VAULT)
        proxy = FeeProxy.from_config(config, ledger, vault)

        user = address_from_int(0xB0B)
        term_id = term_id_from_int(1)
        vault.set_term_created(term_id)
        vault.approve(user, proxy.address)
        ledger.mint(user, to_wei("10"))
        total = proxy.get_total_deposit_cost(to_wei("1"))
        proxy.deposit(user, term_id, 1, 0, sender=user, value=total)

        rows = proxy.fee_logger.path.read_text().splitlines()
        proxy.fee_logger.close()
        assert len(rows) == 2
        assert rows[1].endswith(f",{user},{total - ledger.balance_of(vault.address)},deposit")

    def test_no_fee_log_by_default(self, config_file, no_env_file):
        config = SystemConfig.load(config_file, env_file=no_env_file)
        proxy = FeeProxy.from_config(config, Ledger(), InMemoryMultiVault(address=VAULT))
        assert proxy.fee_logger is None
