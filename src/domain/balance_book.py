from __future__ import annotations

from collections import defaultdict

from .errors import InsufficientBalanceError
from .token import Address


class BalanceBook:
    def __init__(self, balances: dict[Address, int] | None = None) -> None:
        self._balances: dict[Address, int] = defaultdict(int)
        for address, balance in (balances or {}).items():
            if balance < 0:
                raise ValueError(f"Negative balance for {address}")
            if balance:
                self._balances[address] = balance

    def apply_movement(self, *, address: Address, quantity: int) -> None:
        current_balance = self._balances[address]
        new_balance = current_balance + quantity
        if new_balance < 0:
            raise InsufficientBalanceError(
                address=address,
                attempted_amount=-quantity,
                available_balance=current_balance,
            )
        if new_balance == 0:
            self._balances.pop(address, None)
        else:
            self._balances[address] = new_balance

    def get_balance(self, address: Address) -> int:
        return self._balances.get(address, 0)

    def has_available(self, *, address: Address, quantity: int) -> bool:
        return self.get_balance(address) >= quantity

    def total(self) -> int:
        return sum(self._balances.values())

    def holders(self) -> dict[Address, int]:
        return dict(self._balances)
