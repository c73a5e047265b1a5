from __future__ import annotations

from .token import BASIS_POINTS_DENOMINATOR, AllocationTable, Role


def allocate_supply(total_supply: int, table: AllocationTable) -> dict[Role, int]:
    if total_supply < 0:
        raise ValueError("total_supply must be >= 0")

    allocation = {role: total_supply * bps // BASIS_POINTS_DENOMINATOR for role, bps in table.shares.items()}
    # Flooring can leave a few wei unassigned; the owner absorbs them.
    remainder = total_supply - sum(allocation.values())
    allocation[Role.OWNER] += remainder
    return allocation
