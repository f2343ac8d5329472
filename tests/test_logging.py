"""
Tests for logging helpers.
"""
import json
import logging

from fee_proxy.core import (
    EventBus,
    FeeCalculator,
    FeeSchedule,
    FeesCollected,
    Operation,
    PaymentReconciler,
)
from fee_proxy.utils import FeeLogger, JsonFormatter, address_from_int

USER = address_from_int(0xB0B)


class TestFeeLogger:
    """Tests for the CSV fee log."""

    def test_writes_rows_from_event_bus(self, tmp_path):
        fee_logger = FeeLogger(tmp_path / "fees")
        bus = EventBus()
        bus.subscribe(FeesCollected.channel, fee_logger.on_fees_collected)

        bus.publish(
            FeesCollected.channel,
            FeesCollected(user=USER, amount=600, operation="deposit", timestamp=123),
        )
        fee_logger.close()

        lines = fee_logger.path.read_text().splitlines()
        assert lines == [
            "timestamp_ns,user,amount_wei,operation",
            f"123,{USER},600,deposit",
        ]

    def test_disabled(self, tmp_path):
        fee_logger = FeeLogger(tmp_path / "fees", enabled=False)
        fee_logger.log_fee(1, USER, 1, "deposit")

        assert fee_logger.path is None
        assert not (tmp_path / "fees").exists()


class TestJsonFormatter:
    """Tests for structured log output."""

    def test_format(self):
        record = logging.LogRecord(
            "fee_proxy.test", logging.INFO, __file__, 10, "settled %s", ("deposit",), None
        )

        entry = json.loads(JsonFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "fee_proxy.test"
        assert entry["message"] == "settled deposit"
        assert "fee_wei" not in entry

    def test_settlement_fields(self, ledger, vault, caplog):
        """Settlement logs carry amounts as integer fields."""
        proxy_address = address_from_int(0xF00)
        ledger.mint(USER, 1_000)
        reconciler = PaymentReconciler(ledger, proxy_address, vault)
        calculator = FeeCalculator(FeeSchedule(fixed_fee=10))

        with caplog.at_level(logging.INFO, logger="fee_proxy.core.reconciler"):
            settlement = reconciler.receive(Operation.DEPOSIT_BATCH, USER, 120)
            reconciler.validate(settlement, calculator, [100])
            reconciler.execute(settlement, address_from_int(1), lambda value: None)

        record = next(r for r in caplog.records if "settled" in r.getMessage())
        entry = json.loads(JsonFormatter().format(record))

        assert entry["operation"] == "depositBatch"
        assert entry["payer"] == USER
        assert entry["stage"] == "SETTLED"
        assert entry["fee_wei"] == 10
        assert entry["vault_wei"] == 100
        assert entry["refund_wei"] == 10
