# flake8: noqa: E402
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


from config import config
from domain.token import to_wei
from domain.token_ledger import TokenLedger
from utils.balance_summary import compute_balance_summary, render_balance_summary, render_transfer_history

# Throwaway accounts for a dry run; any 20-byte hex addresses will do.
OWNER = "0x" + "11" * 20
PAUSER = "0x" + "22" * 20
DEVELOPER = "0x" + "33" * 20
PRESALER = "0x" + "44" * 20
AIRDROPER = "0x" + "55" * 20


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dry-run the launch allocation and one taxed transfer in memory.")
    parser.add_argument(
        "--amount",
        type=int,
        default=1000,
        help="Whole tokens the developer sends to the owner (default: 1000)",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    parameters = config().token_parameters()
    ledger = TokenLedger(parameters)
    ledger.initialize(OWNER, PAUSER, DEVELOPER, PRESALER, AIRDROPER)
    ledger.transfer(DEVELOPER, OWNER, to_wei(args.amount, parameters.decimals))

    render_balance_summary(compute_balance_summary(ledger))
    render_transfer_history(ledger)
    held = sum(ledger.holders().values())
    if held != ledger.total_supply():
        raise RuntimeError(f"Balances sum to {held}, expected total supply {ledger.total_supply()}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    main()
