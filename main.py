# main.py

"""Entry point for the stock_sync job (sync run or single-EAN check)."""

import argparse
import asyncio
import dataclasses
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import ConfigError, SyncConfig

logger = logging.getLogger("stock_sync.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="stock-sync",
        description=(
            "Reconcile store stock quantities with the offer and "
            "shopping feeds."
        ),
        epilog="Connection settings are read from the environment / .env.",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        default=False,
        help="Send changes to the store (overrides APPLY_CHANGES).",
    )
    parser.add_argument(
        "--max-updates",
        type=int,
        default=None,
        dest="max_updates",
        help="Maximum number of updates per run (overrides MAX_UPDATES).",
    )
    parser.add_argument(
        "--save-report",
        action="store_true",
        default=False,
        dest="save_report",
        help="Save the change list and apply outcome to reports/.",
    )
    parser.add_argument(
        "--check-ean",
        nargs="?",
        const="",
        default=None,
        dest="check_ean",
        metavar="EAN",
        help="Inspect one EAN in all sources (defaults to TEST_EAN).",
    )
    return parser


def _load_config(args: argparse.Namespace) -> SyncConfig:
    """Environment config with command-line overrides applied."""
    config = SyncConfig.from_env()
    overrides: dict[str, object] = {}
    if args.apply:
        overrides["apply_changes"] = True
    if args.max_updates is not None:
        overrides["max_updates"] = max(0, args.max_updates)
    if args.check_ean:
        overrides["test_ean"] = args.check_ean.strip()
    return dataclasses.replace(config, **overrides)


def main() -> None:
    """Route to the single-EAN check or a full sync run."""
    args = _build_parser().parse_args()
    check_mode = args.check_ean is not None

    log_file = setup_logging(mode="check" if check_mode else "sync")
    logger.info("stock_sync starting, log file: %s", log_file)

    try:
        config = _load_config(args)
        if check_mode:
            config.validate_for_check()
        else:
            config.validate_for_sync()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)

    if check_mode:
        from src.cli.runner import run_check_ean

        exit_code = asyncio.run(run_check_ean(config))
    else:
        from src.cli.runner import run_sync

        exit_code = asyncio.run(
            run_sync(config, save_report=args.save_report)
        )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
