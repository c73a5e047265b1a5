from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from sqlalchemy.orm import Session

from config import AppSettings, config
from db.db import init_db
from db.repositories import TokenLedgerRepository
from domain.errors import NotInitializedError, TokenLedgerError
from domain.token import to_wei
from domain.token_ledger import TokenLedger
from utils.balance_summary import compute_balance_summary, render_balance_summary, render_transfer_history
from utils.formatting import format_token_amount

logger = logging.getLogger(__name__)


def load_ledger(session: Session) -> TokenLedger:
    ledger = TokenLedgerRepository(session).load()
    if ledger is None:
        raise NotInitializedError()
    return ledger


def parse_amount(args: argparse.Namespace, decimals: int) -> int:
    return args.amount if args.wei else to_wei(args.amount, decimals)


def cmd_init(args: argparse.Namespace, session: Session, settings: AppSettings) -> None:
    repository = TokenLedgerRepository(session)
    if repository.load() is not None:
        raise TokenLedgerError(f"Ledger already exists in {settings.database_file}; use --reset to start over")
    ledger = TokenLedger(settings.token_parameters())
    ledger.initialize(args.owner, args.pauser, args.developer, args.presaler, args.airdroper)
    repository.save(ledger)
    render_balance_summary(compute_balance_summary(ledger))


def cmd_transfer(args: argparse.Namespace, session: Session, settings: AppSettings) -> None:
    ledger = load_ledger(session)
    record = ledger.transfer(args.sender, args.to, parse_amount(args, ledger.parameters.decimals))
    TokenLedgerRepository(session).save(ledger)
    _print_transfer(ledger, record.amount, record.tax)


def cmd_approve(args: argparse.Namespace, session: Session, settings: AppSettings) -> None:
    ledger = load_ledger(session)
    amount = parse_amount(args, ledger.parameters.decimals)
    ledger.approve(args.owner, args.spender, amount)
    TokenLedgerRepository(session).save(ledger)
    print(f"Allowance set: {format_token_amount(amount, ledger.parameters.decimals, ledger.parameters.symbol)}")


def cmd_transfer_from(args: argparse.Namespace, session: Session, settings: AppSettings) -> None:
    ledger = load_ledger(session)
    amount = parse_amount(args, ledger.parameters.decimals)
    record = ledger.transfer_from(args.spender, args.owner, args.to, amount)
    TokenLedgerRepository(session).save(ledger)
    _print_transfer(ledger, record.amount, record.tax)


def cmd_pause(args: argparse.Namespace, session: Session, settings: AppSettings) -> None:
    ledger = load_ledger(session)
    if args.command == "pause":
        ledger.pause(args.caller)
    else:
        ledger.unpause(args.caller)
    TokenLedgerRepository(session).save(ledger)
    print("Transfers paused" if ledger.paused else "Transfers active")


def cmd_balances(args: argparse.Namespace, session: Session, settings: AppSettings) -> None:
    ledger = load_ledger(session)
    if args.address:
        balance = ledger.balance_of(args.address)
        print(format_token_amount(balance, ledger.parameters.decimals, ledger.parameters.symbol))
        return
    render_balance_summary(compute_balance_summary(ledger))


def cmd_history(args: argparse.Namespace, session: Session, settings: AppSettings) -> None:
    render_transfer_history(load_ledger(session))


def _print_transfer(ledger: TokenLedger, amount: int, tax: int) -> None:
    decimals = ledger.parameters.decimals
    symbol = ledger.parameters.symbol
    print(
        f"Transferred {format_token_amount(amount - tax, decimals, symbol)} "
        f"(tax {format_token_amount(tax, decimals, symbol)} to {ledger.tax_recipient})"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage an UnPack token ledger stored in SQLite.")
    parser.add_argument("--db", default=None, help="SQLite database file (default: settings.database_file)")
    parser.add_argument("--reset", action="store_true", help="Delete the database before running the command")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Mint the initial supply to the role accounts")
    for role in ("owner", "pauser", "developer", "presaler", "airdroper"):
        init_parser.add_argument(role)
    init_parser.set_defaults(handler=cmd_init)

    transfer_parser = subparsers.add_parser("transfer", help="Taxed transfer from the sender")
    transfer_parser.add_argument("--sender", required=True)
    transfer_parser.add_argument("--to", required=True)
    _add_amount_arguments(transfer_parser)
    transfer_parser.set_defaults(handler=cmd_transfer)

    approve_parser = subparsers.add_parser("approve", help="Allow a spender to move the owner's tokens")
    approve_parser.add_argument("--owner", required=True)
    approve_parser.add_argument("--spender", required=True)
    _add_amount_arguments(approve_parser)
    approve_parser.set_defaults(handler=cmd_approve)

    transfer_from_parser = subparsers.add_parser("transfer-from", help="Taxed transfer using an allowance")
    transfer_from_parser.add_argument("--spender", required=True)
    transfer_from_parser.add_argument("--owner", required=True)
    transfer_from_parser.add_argument("--to", required=True)
    _add_amount_arguments(transfer_from_parser)
    transfer_from_parser.set_defaults(handler=cmd_transfer_from)

    for name in ("pause", "unpause"):
        pause_parser = subparsers.add_parser(name, help=f"{name.capitalize()} transfers (pauser only)")
        pause_parser.add_argument("--caller", required=True)
        pause_parser.set_defaults(handler=cmd_pause)

    balances_parser = subparsers.add_parser("balances", help="Show balances")
    balances_parser.add_argument("address", nargs="?", default=None)
    balances_parser.set_defaults(handler=cmd_balances)

    history_parser = subparsers.add_parser("history", help="Show the transfer history")
    history_parser.set_defaults(handler=cmd_history)

    return parser


def _non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid amount: {raw!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"amount must be >= 0, got {value}")
    return value


def _add_amount_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--amount", type=_non_negative_int, required=True, help="Amount in whole tokens")
    parser.add_argument("--wei", action="store_true", help="Interpret --amount in wei")


def main(argv: Sequence[str] | None = None) -> int:
    settings = config()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    args = build_parser().parse_args(argv)

    session = init_db(args.db or settings.database_file, reset=args.reset)
    try:
        args.handler(args, session, settings)
    except TokenLedgerError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
