from __future__ import annotations

import pytest

from domain.token import Role, to_wei
from domain.token_ledger import TokenLedger
from tests.constants import AIRDROPER, DEVELOPER, OWNER, PAUSER
from utils.balance_summary import compute_balance_summary, render_balance_summary, render_transfer_history
from utils.formatting import format_basis_points, format_token_amount


def test_compute_balance_summary_orders_by_balance(ledger: TokenLedger) -> None:
    summary = compute_balance_summary(ledger)

    assert [holder.address for holder in summary.holders][:2] == [OWNER, AIRDROPER]
    assert summary.holders[-1].address == PAUSER
    assert summary.holders[-1].balance == 0
    shares = {holder.address: holder.share_bps for holder in summary.holders}
    assert shares[OWNER] == 5_000
    assert shares[DEVELOPER] == 1_000
    roles = {holder.address: holder.roles for holder in summary.holders}
    assert roles[PAUSER] == [Role.PAUSER]


def test_render_balance_summary(ledger: TokenLedger, capsys: pytest.CaptureFixture[str]) -> None:
    render_balance_summary(compute_balance_summary(ledger))

    output = capsys.readouterr().out
    assert "Total supply: 1000000000 UNP" in output
    assert "Transfer tax: 3%" in output
    assert "500000000" in output
    assert OWNER in output


def test_render_transfer_history(ledger: TokenLedger, capsys: pytest.CaptureFixture[str]) -> None:
    ledger.transfer(DEVELOPER, OWNER, to_wei(1000))

    render_transfer_history(ledger)

    output = capsys.readouterr().out
    assert "Transfers: 5" in output
    assert f"(tax 30 to {AIRDROPER})" in output


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (0, "0"),
        (to_wei(1000), "1000"),
        (to_wei(970) + 5 * 10**17, "970.5"),
        (1, "0.000000000000000001"),
        (2**256 - 1, "115792089237316195423570985008687907853269984665640564039457.584007913129639935"),
    ],
)
def test_format_token_amount(amount: int, expected: str) -> None:
    assert format_token_amount(amount, 18) == expected


def test_format_basis_points() -> None:
    assert format_basis_points(300) == "3%"
    assert format_basis_points(125) == "1.25%"
