"""
Command-line interface.

Runs the same recovery wizard as the TUI, one prompt per step. The wallet
can be chosen with flags; the recovery phrase and the new password are
always read interactively (never from argv) unless piped via stdin.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

import pyfiglet
from colorama import Fore, Style, just_fix_windows_console
from loguru import logger

from . import __version__
from .core.config import DEFAULTS, apply_config_defaults, effective_config, save_config, validate_settings
from .core.errors import ConfigurationError, StoreError
from .core.gateway import HttpRecoveryGateway
from .core.log import LOG_LEVELS, setup_logging
from .core.machine import RecoveryWizard, StepResult
from .core.state import (
    FIELD_CONFIRM_PASSWORD,
    FIELD_MANUAL_ADDRESS,
    FIELD_NEW_PASSWORD,
    FIELD_RECOVERY_PHRASE,
    FIELD_SELECTED_WALLET,
    RecoveryMode,
    WalletInputMode,
)
from .core.store import FileCache, WalletDirectory

_SAVED_KEYS = ("api_url", "timeout", "store_path", "log_level", "log_file")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reclaim",
        description="RECLAIM — reset a wallet account password with its recovery phrase",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--known",
        metavar="ADDRESS",
        help="Recover the wallet with this address (verified with the service first)",
    )
    target.add_argument(
        "--wallet-id",
        metavar="ID",
        help="Recover a wallet stored on this device (see --list-wallets)",
    )
    target.add_argument(
        "--forgot",
        action="store_true",
        help="Find the wallet that belongs to your recovery phrase",
    )

    parser.add_argument("--api-url", help="Recovery service base URL")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--store", dest="store_path", help="Path of the local wallet store (JSON)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log verbosity (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write logs to this file (rotated daily)")
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Save the effective connection and logging options as the new defaults",
    )
    parser.add_argument(
        "--list-wallets",
        action="store_true",
        help="List wallets stored on this device and exit",
    )
    return parser


def _read_secret(prompt: str) -> str:
    """Read a secret from the terminal.

    getpass reads from /dev/tty on Unix; without any terminal (headless CI)
    one line is taken from stdin instead.
    """
    try:
        return getpass.getpass(prompt)
    except OSError:
        return sys.stdin.readline().rstrip("\n")


def _print_status(msg: str, error: bool = False) -> None:
    stream = sys.stderr if error else sys.stdout
    print(msg, file=stream)


def _print_banner() -> None:
    print(Fore.GREEN + Style.BRIGHT + pyfiglet.figlet_format("RECLAIM") + Style.RESET_ALL)


def _report(result: StepResult) -> None:
    if result.notice is None:
        return
    if result.notice.severity == "error":
        _print_status(f"{Fore.RED}Error: {result.notice.message}{Style.RESET_ALL}", error=True)
    else:
        _print_status(f"{Fore.GREEN}{result.notice.message}{Style.RESET_ALL}")


def _report_field_errors(wizard: RecoveryWizard, shown: str = "") -> None:
    for field_id, message in wizard.state.field_errors.items():
        if message != shown:
            _print_status(f"{Fore.RED}  {field_id.replace('_', ' ')}: {message}{Style.RESET_ALL}", error=True)


def _list_wallets(store_path: str) -> None:
    try:
        wallets = WalletDirectory(FileCache(store_path)).list_wallets()
    except StoreError as exc:
        _print_status(f"Error: {exc}", error=True)
        sys.exit(1)
    if not wallets:
        print("No wallets stored on this device.")
        return
    for wallet in wallets:
        created = f"  created {wallet.created_at}" if wallet.created_at else ""
        print(f"{wallet.id:<20} {wallet.name:<24} {wallet.address}{created}")


def _ask_mode() -> RecoveryMode:
    choice = input("Do you know which wallet you want to recover? (y/n): ").strip().lower()
    if choice in ("y", "yes"):
        return RecoveryMode.KNOWN_WALLET
    if choice in ("n", "no"):
        return RecoveryMode.FORGOT_WALLET
    _print_status("Invalid choice.", error=True)
    sys.exit(1)


def _fill_step(wizard: RecoveryWizard, args: argparse.Namespace) -> None:
    """Prompt for whatever the current step needs."""
    state = wizard.state
    mode, step = state.mode, state.step

    if mode == RecoveryMode.KNOWN_WALLET and step == 1:
        if args.wallet_id:
            wizard.edit(FIELD_SELECTED_WALLET, args.wallet_id)
            return
        address = args.known or input("Wallet address: ").strip()
        wizard.set_wallet_input_mode(WalletInputMode.MANUAL)
        wizard.edit(FIELD_MANUAL_ADDRESS, address)
    elif (mode, step) in ((RecoveryMode.KNOWN_WALLET, 2), (RecoveryMode.FORGOT_WALLET, 1)):
        wizard.edit(FIELD_RECOVERY_PHRASE, _read_secret("Recovery phrase (12 words): "))
    elif mode == RecoveryMode.FORGOT_WALLET and step == 2:
        wallet = state.recovered_wallet
        if wallet is not None:
            print(f"  Name:    {wallet.name}")
            print(f"  Address: {wallet.address}")
            if wallet.created_at:
                print(f"  Created: {wallet.created_at}")
    elif state.is_final_step:
        print(f"Set a new password for {state.target_address}")
        wizard.edit(FIELD_NEW_PASSWORD, _read_secret("New password: "))
        wizard.edit(FIELD_CONFIRM_PASSWORD, _read_secret("Confirm password: "))


async def _recover(wizard: RecoveryWizard, mode: RecoveryMode, args: argparse.Namespace) -> bool:
    try:
        wizard.load_wallets()
    except StoreError as exc:
        logger.warning("Local wallet list unavailable: {}", exc)

    wizard.select_mode(mode)
    while not wizard.state.submitted:
        _fill_step(wizard, args)
        result = await wizard.advance()
        _report(result)
        if not result.accepted:
            _report_field_errors(wizard, result.notice.message if result.notice else "")
            return False
    return True


def run_cli(argv: list[str] | None = None) -> None:
    """Run the CLI interface."""
    just_fix_windows_console()
    parser = _build_parser()
    args = parser.parse_args(argv)
    apply_config_defaults(args, effective_config())
    try:
        vars(args).update(validate_settings({key: getattr(args, key) for key in DEFAULTS}))
    except ConfigurationError as exc:
        _print_status(f"Error: {exc}", error=True)
        sys.exit(2)
    setup_logging(args.log_level, args.log_file or None)

    if args.save_config:
        path = save_config({key: getattr(args, key) for key in _SAVED_KEYS})
        _print_status(f"Saved preferences to {path}")

    if args.list_wallets:
        _list_wallets(args.store_path)
        return

    if args.save_config and not (args.known or args.wallet_id or args.forgot):
        return

    if args.known or args.wallet_id:
        mode = RecoveryMode.KNOWN_WALLET
    elif args.forgot:
        mode = RecoveryMode.FORGOT_WALLET
    else:
        _print_banner()
        mode = _ask_mode()

    async def _main() -> bool:
        async with HttpRecoveryGateway(args.api_url, args.timeout) as gateway:
            wizard = RecoveryWizard(gateway, FileCache(args.store_path), redirect_delay=0)
            return await _recover(wizard, mode, args)

    if not asyncio.run(_main()):
        sys.exit(1)
    _print_status("You can now sign in with your new password.")
