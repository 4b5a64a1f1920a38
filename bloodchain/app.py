from __future__ import annotations

import argparse
import sys
import time

from pydantic import ValidationError

from bloodchain.domain.donation import Donation, encode
from bloodchain.domain.errors import DonationError
from bloodchain.settings.logger import logger, set_level
from bloodchain.settings.settings import AppConfig, load_settings
from bloodchain.storage.accounts import FileHistoryAccount


def load_config(config_path: str | None) -> AppConfig:
    cfg = load_settings(config_path)
    set_level(cfg.logging.level)
    return cfg


def open_account(cfg: AppConfig) -> FileHistoryAccount:
    return FileHistoryAccount(cfg.storage.account_path, cfg.storage.capacity_bytes)


def cmd_debug(config_path: str | None):
    cfg = load_config(config_path)
    print("=== bloodchain DEBUG MODE ===")
    print(cfg)

    account = open_account(cfg)
    print(f"Account: {account.path} (exists={account.exists()})")
    print(f"Capacity: {account.capacity} bytes, occupied: {account.occupied} bytes")


def cmd_init(config_path: str | None, force: bool):
    cfg = load_config(config_path)
    account = open_account(cfg).create(overwrite=force)
    logger.info(
        f"Initialized donation history at {account.path} "
        f"({cfg.storage.capacity_records} records capacity)"
    )


def cmd_add(config_path: str | None, donor_name: str, blood_type: str, date: int | None):
    cfg = load_config(config_path)
    from bloodchain.program.processor import add_donation_instruction, process_instruction

    donation = Donation(
        donor_name=donor_name,
        blood_type=blood_type,
        date=int(time.time()) if date is None else date,
    )
    process_instruction([open_account(cfg)], add_donation_instruction(encode(donation)))


def cmd_history(config_path: str | None):
    cfg = load_config(config_path)
    from bloodchain.program.processor import (
        format_history,
        process_instruction,
        retrieve_history_instruction,
    )

    donations = process_instruction([open_account(cfg)], retrieve_history_instruction())
    if not donations:
        print("No donations recorded.")
        return
    for line in format_history(donations):
        print(line)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="bloodchain")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # debug
    p_debug = subparsers.add_parser("debug", help="Print config and account status")
    p_debug.add_argument("--config", type=str, default=None)

    # init
    p_init = subparsers.add_parser("init", help="Create an empty donation history account")
    p_init.add_argument("--config", type=str, default=None)
    p_init.add_argument("--force", action="store_true", help="Overwrite an existing account")

    # add
    p_add = subparsers.add_parser("add", help="Append one donation")
    p_add.add_argument("--config", type=str, default=None)
    p_add.add_argument("--donor-name", required=True)
    p_add.add_argument("--blood-type", required=True)
    p_add.add_argument("--date", type=int, default=None, help="Epoch seconds (default: now)")

    # history
    p_hist = subparsers.add_parser("history", help="List all donations in order")
    p_hist.add_argument("--config", type=str, default=None)

    args = parser.parse_args(argv)

    try:
        if args.command == "debug":
            cmd_debug(args.config)
        elif args.command == "init":
            cmd_init(args.config, args.force)
        elif args.command == "add":
            cmd_add(args.config, args.donor_name, args.blood_type, args.date)
        elif args.command == "history":
            cmd_history(args.config)
    except (DonationError, ValidationError, FileNotFoundError, FileExistsError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
