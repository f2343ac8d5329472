"""
fee-proxy command line.

    fee-proxy validate                       Check configuration
    fee-proxy show                           Print the deployment parameters
    fee-proxy quote deposit 10               Total payment for a 10 ether deposit
    fee-proxy quote batch 5 5                Total payment for a batch deposit
    fee-proxy quote create --unit-cost 0.001 0.01 0.01
                                             Total payment to create two atoms
    fee-proxy quote inverse 10.6             Net deposit from a 10.6 ether payment

Amounts are in ether.
"""
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional, Sequence
import argparse
import sys

from .core import FeeCalculator, FeeProxyError, FeeSchedule, SystemConfig
from .utils import format_ether, get_logger, setup_logging, to_wei

logger = get_logger("fee_proxy.main")


def _ether(value: str) -> int:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not an ether amount: {value!r}")
    if amount < 0:
        raise argparse.ArgumentTypeError(f"amount must be non-negative: {value}")
    return to_wei(amount)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fee-proxy",
        description="Fee-collecting MultiVault proxy: configuration and fee quotes",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=Path("config/config.yaml"),
        help="Path to configuration file"
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: search from the working directory)"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("validate", help="Validate configuration and exit")
    commands.add_parser("show", help="Print deployment parameters")

    quote = commands.add_parser("quote", help="Quote fees with the configured schedule")
    kinds = quote.add_subparsers(dest="kind", required=True)

    deposit = kinds.add_parser("deposit", help="Single deposit of AMOUNT")
    deposit.add_argument("amount", type=_ether)

    batch = kinds.add_parser("batch", help="Batch deposit of several amounts")
    batch.add_argument("amounts", type=_ether, nargs="+")

    create = kinds.add_parser("create", help="Create one term per amount")
    create.add_argument("amounts", type=_ether, nargs="+")
    create.add_argument(
        "--unit-cost",
        type=_ether,
        required=True,
        help="Vault creation cost per atom/triple"
    )

    inverse = kinds.add_parser("inverse", help="Net deposit from a total payment")
    inverse.add_argument("value", type=_ether)

    return parser


def show(config: SystemConfig) -> None:
    proxy = config.proxy
    print("Configuration:")
    print(f"- MultiVault address: {proxy.multivault_address or '(unset)'}")
    print(f"- Fee recipient: {proxy.fee_recipient or '(unset)'}")
    print(f"- Admins: {', '.join(proxy.admins) or '(none)'}")
    print(f"- Deposit fixed fee: {proxy.deposit_fixed_fee} ETH")
    print(f"- Deposit percentage: {proxy.deposit_percentage_fee / 100}%")


def quote(config: SystemConfig, args: argparse.Namespace) -> None:
    calculator = FeeCalculator(
        FeeSchedule(
            fixed_fee=config.proxy.deposit_fixed_fee_wei,
            percentage_fee=config.proxy.deposit_percentage_fee,
        )
    )

    if args.kind == "deposit":
        fee = calculator.deposit_fee(1, args.amount)
        total = calculator.total_deposit_cost(args.amount)
    elif args.kind == "batch":
        fee = calculator.batch_fee(args.amounts)
        total = sum(args.amounts) + fee
    elif args.kind == "create":
        fee = calculator.batch_fee(args.amounts)
        vault_cost = args.unit_cost * len(args.amounts) + sum(args.amounts)
        total = vault_cost + fee
    else:
        amount = calculator.inverse_deposit_amount(args.value)
        print(f"Deposit: {format_ether(amount)} ETH")
        print(f"Fee: {format_ether(args.value - amount)} ETH")
        return

    print(f"Fee: {format_ether(fee)} ETH")
    print(f"Total payment: {format_ether(total)} ETH")


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the exit code."""
    args = build_parser().parse_args(argv)
    config = SystemConfig.load(args.config, env_file=args.env_file)

    setup_logging(
        level=config.logging.level,
        file_path=config.logging.file_path,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
        json_format=config.logging.json_format,
    )

    if args.command == "validate":
        errors = config.validate()
        if errors:
            print("Configuration errors:")
            for error in errors:
                print(f"  - {error}")
            return 1
        print("Configuration is valid")
        return 0

    if args.command == "show":
        show(config)
        return 0

    try:
        quote(config, args)
    except FeeProxyError as e:
        logger.error(f"Quote failed: {e}")
        return 1
    return 0


def cli() -> None:
    """Command-line interface entry point."""
    sys.exit(run())


if __name__ == "__main__":
    cli()
