"""
Logging configuration for the fee proxy.

Settlement and rejection records carry their amounts as structured fields,
so the JSON output can be summed per operation or per payer without
parsing messages. Collected fees can also be appended to a CSV file for
accounting.
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional
from datetime import datetime, timezone
import json

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-24s | %(message)s"

# Attributes passed through `extra=` by the reconciler
SETTLEMENT_FIELDS = (
    "operation",
    "payer",
    "stage",
    "fee_wei",
    "vault_wei",
    "refund_wei",
    "reason",
)


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    Settlement attributes present on the record are emitted as top-level
    keys; wei amounts stay integers.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in SETTLEMENT_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class FeeLogger:
    """
    CSV log of collected fees.

    Subscribe `on_fees_collected` to the FeesCollected channel of the
    event bus; one row is written and flushed per committed fee.
    `FeeProxy.from_config` does this when `logging.fee_log_dir` is set.
    """

    HEADER = "timestamp_ns,user,amount_wei,operation\n"

    def __init__(self, log_dir: Path, enabled: bool = True):
        self.enabled = enabled
        self.log_dir = log_dir
        self.path: Optional[Path] = None
        self._file = None

        if enabled:
            log_dir.mkdir(parents=True, exist_ok=True)
            self.path = log_dir / f"fees_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
            self._file = open(self.path, "w")
            self._file.write(self.HEADER)

    def on_fees_collected(self, event: Any) -> None:
        """Event bus callback for FeesCollected events."""
        self.log_fee(event.timestamp, event.user, event.amount, event.operation)

    def log_fee(self, timestamp_ns: int, user: str, amount: int, operation: str) -> None:
        if not self.enabled or not self._file:
            return
        self._file.write(f"{timestamp_ns},{user},{amount},{operation}\n")
        self._file.flush()

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None


def setup_logging(
    level: str = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    file_path: Optional[str] = None,
    max_file_size_mb: int = 100,
    backup_count: int = 5,
    json_format: bool = False
) -> logging.Logger:
    """
    Configure the root logger: stderr always, plus a rotating file when
    `file_path` is given. Both handlers share one formatter.

    Returns:
        Root logger instance
    """
    if json_format:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=log_format or DEFAULT_FORMAT, datefmt=date_format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if file_path:
        handlers.append(_rotating_file_handler(Path(file_path), max_file_size_mb, backup_count))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    # web3 logs every provider request at DEBUG
    for name in ("web3", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def _rotating_file_handler(path: Path, max_size_mb: int, backup_count: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8",
    )


def get_logger(name: str) -> logging.Logger:
    """Get a named logger."""
    return logging.getLogger(name)
