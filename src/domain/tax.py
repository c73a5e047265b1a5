from __future__ import annotations

from dataclasses import dataclass

from .token import BASIS_POINTS_DENOMINATOR, Address, check_amount


@dataclass(frozen=True)
class TaxSplit:
    amount: int
    tax: int
    net_amount: int
    tax_recipient: Address


def compute_tax(amount: int, tax_basis_points: int, tax_recipient: Address) -> TaxSplit:
    """Split a gross transfer amount into the net part and the floored tax."""
    check_amount(amount)
    if not 0 <= tax_basis_points <= BASIS_POINTS_DENOMINATOR:
        raise ValueError("tax_basis_points must be within 0..10000")
    tax = amount * tax_basis_points // BASIS_POINTS_DENOMINATOR
    return TaxSplit(amount=amount, tax=tax, net_amount=amount - tax, tax_recipient=tax_recipient)
