from __future__ import annotations

from dataclasses import dataclass, field

from domain.token import BASIS_POINTS_DENOMINATOR, Address, Role
from domain.token_ledger import TokenLedger

from .formatting import format_basis_points, format_token_amount


@dataclass
class HolderSummary:
    address: Address
    roles: list[Role]
    balance: int
    share_bps: int


@dataclass
class BalanceSummary:
    symbol: str
    decimals: int
    total_supply: int
    tax_basis_points: int
    paused: bool
    holders: list[HolderSummary] = field(default_factory=list)


def compute_balance_summary(ledger: TokenLedger) -> BalanceSummary:
    parameters = ledger.parameters
    total_supply = ledger.total_supply()

    roles_by_address: dict[Address, list[Role]] = {}
    for role, address in ledger.roles.as_dict().items():
        roles_by_address.setdefault(address, []).append(role)

    balances = ledger.holders()
    addresses = set(balances) | set(roles_by_address)

    holders = [
        HolderSummary(
            address=address,
            roles=roles_by_address.get(address, []),
            balance=balances.get(address, 0),
            share_bps=balances.get(address, 0) * BASIS_POINTS_DENOMINATOR // total_supply if total_supply else 0,
        )
        for address in addresses
    ]
    holders.sort(key=lambda holder: (-holder.balance, holder.address))

    return BalanceSummary(
        symbol=parameters.symbol,
        decimals=parameters.decimals,
        total_supply=total_supply,
        tax_basis_points=parameters.tax_basis_points,
        paused=ledger.paused,
        holders=holders,
    )


def render_balance_summary(summary: BalanceSummary) -> None:
    status = " (paused)" if summary.paused else ""
    print(f"Total supply: {format_token_amount(summary.total_supply, summary.decimals, summary.symbol)}{status}")
    print(f"Transfer tax: {format_basis_points(summary.tax_basis_points)}")
    if not summary.holders:
        print("  (empty)")
        return

    balance_label = f"Balance {summary.symbol}"
    share_label = "Share"

    rows: list[tuple[str, str, str, str]] = []
    for holder in summary.holders:
        roles_text = ",".join(role.value for role in holder.roles) or "-"
        balance_text = format_token_amount(holder.balance, summary.decimals)
        rows.append((holder.address, roles_text, balance_text, format_basis_points(holder.share_bps)))

    address_width = max(len("Address"), max((len(row[0]) for row in rows), default=0))
    roles_width = max(len("Roles"), max((len(row[1]) for row in rows), default=0))
    balance_width = max(len(balance_label), max((len(row[2]) for row in rows), default=0))
    share_width = max(len(share_label), max((len(row[3]) for row in rows), default=0))

    header = (
        f"{'Address':<{address_width}} {'Roles':<{roles_width}} "
        f"{balance_label:>{balance_width}} {share_label:>{share_width}}"
    )
    lines = [header, "-" * len(header)]
    for address, roles_text, balance_text, share_text in rows:
        lines.append(
            f"{address:<{address_width}} {roles_text:<{roles_width}} "
            f"{balance_text:>{balance_width}} {share_text:>{share_width}}"
        )
    lines.append("-" * len(header))
    print("\n".join(lines))


def render_transfer_history(ledger: TokenLedger) -> None:
    parameters = ledger.parameters
    transfers = ledger.transfers
    print(f"Transfers: {len(transfers)}")
    for record in transfers:
        amount_text = format_token_amount(record.amount, parameters.decimals, parameters.symbol)
        line = f"  {record.timestamp.isoformat()} {record.kind.value:<8} {record.sender} -> {record.recipient} {amount_text}"
        if record.tax:
            line += f" (tax {format_token_amount(record.tax, parameters.decimals)} to {record.tax_recipient})"
        print(line)
