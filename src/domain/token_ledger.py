from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from .allocation import allocate_supply
from .balance_book import BalanceBook
from .errors import (
    AlreadyInitializedError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvalidAddressError,
    LedgerPausedError,
    NotInitializedError,
    UnauthorizedError,
)
from .tax import compute_tax
from .token import (
    ZERO_ADDRESS,
    Address,
    LedgerSnapshot,
    Role,
    RoleAssignment,
    TokenParameters,
    TransferKind,
    TransferRecord,
    check_amount,
    normalize_address,
)

logger = logging.getLogger(__name__)


class TokenLedger:
    """Balances of a fixed-supply token with a tax on every transfer.

    The ledger starts empty; ``initialize`` mints the whole supply once according
    to the allocation table. Afterwards balances only move through transfers, so
    the sum of all balances always equals ``total_supply()``.

    Every mutating call validates first and mutates second: a call that raises
    leaves balances, allowances and the transfer history untouched.
    """

    def __init__(self, parameters: TokenParameters) -> None:
        self._parameters = parameters
        self._roles: RoleAssignment | None = None
        self._book = BalanceBook()
        self._allowances: dict[Address, dict[Address, int]] = defaultdict(dict)
        self._paused = False
        self._transfers: list[TransferRecord] = []

    @property
    def parameters(self) -> TokenParameters:
        return self._parameters

    @property
    def roles(self) -> RoleAssignment:
        if self._roles is None:
            raise NotInitializedError()
        return self._roles

    @property
    def is_initialized(self) -> bool:
        return self._roles is not None

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def tax_recipient(self) -> Address:
        return self.roles.address_for(self._parameters.tax_recipient_role)

    @property
    def transfers(self) -> list[TransferRecord]:
        return list(self._transfers)

    def initialize(
        self,
        owner: str,
        pauser: str,
        developer: str,
        presaler: str,
        airdroper: str,
    ) -> list[TransferRecord]:
        if self._roles is not None:
            logger.warning("Rejected second initialization")
            raise AlreadyInitializedError()

        roles = RoleAssignment(
            owner=self._checked_address(owner),
            pauser=self._checked_address(pauser),
            developer=self._checked_address(developer),
            presaler=self._checked_address(presaler),
            airdroper=self._checked_address(airdroper),
        )

        allocation = allocate_supply(self._parameters.total_supply, self._parameters.allocation)
        mints: list[TransferRecord] = []
        for role, amount in allocation.items():
            if amount == 0:
                continue
            recipient = roles.address_for(role)
            self._book.apply_movement(address=recipient, quantity=amount)
            mints.append(
                TransferRecord(kind=TransferKind.MINT, sender=ZERO_ADDRESS, recipient=recipient, amount=amount)
            )

        self._roles = roles
        self._transfers.extend(mints)
        logger.info(
            "Initialized %s (%s) with total supply %d across %d roles",
            self._parameters.name,
            self._parameters.symbol,
            self._parameters.total_supply,
            len(mints),
        )
        return mints

    def total_supply(self) -> int:
        return self._parameters.total_supply if self.is_initialized else 0

    def balance_of(self, address: str) -> int:
        return self._book.get_balance(normalize_address(address))

    def holders(self) -> dict[Address, int]:
        return self._book.holders()

    def transfer(self, sender: str, to: str, amount: int) -> TransferRecord:
        return self._move(self._checked_address(sender), self._checked_address(to), amount)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get(normalize_address(owner), {}).get(normalize_address(spender), 0)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        self._require_initialized()
        owner_address = self._checked_address(owner)
        spender_address = self._checked_address(spender)
        check_amount(amount)
        self._allowances[owner_address][spender_address] = amount
        logger.info("Approved %s to spend %d on behalf of %s", spender_address, amount, owner_address)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> TransferRecord:
        spender_address = self._checked_address(spender)
        owner_address = self._checked_address(owner)
        recipient = self._checked_address(to)
        check_amount(amount)
        self._require_active()

        current = self._allowances.get(owner_address, {}).get(spender_address, 0)
        if current < amount:
            logger.warning(
                "Rejected transfer_from: spender=%s owner=%s amount=%d allowance=%d",
                spender_address,
                owner_address,
                amount,
                current,
            )
            raise InsufficientAllowanceError(
                owner=owner_address, spender=spender_address, attempted_amount=amount, allowance=current
            )

        record = self._move(owner_address, recipient, amount)
        self._allowances[owner_address][spender_address] = current - amount
        return record

    def pause(self, caller: str) -> None:
        self._require_pauser(caller)
        self._paused = True
        logger.info("Transfers paused by %s", normalize_address(caller))

    def unpause(self, caller: str) -> None:
        self._require_pauser(caller)
        self._paused = False
        logger.info("Transfers unpaused by %s", normalize_address(caller))

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            parameters=self._parameters,
            roles=self.roles,
            balances=self._book.holders(),
            allowances={
                owner: {spender: amount for spender, amount in spenders.items() if amount}
                for owner, spenders in self._allowances.items()
                if any(spenders.values())
            },
            paused=self._paused,
        )

    @classmethod
    def from_snapshot(
        cls, snapshot: LedgerSnapshot, transfers: Iterable[TransferRecord] = ()
    ) -> TokenLedger:
        total = sum(snapshot.balances.values())
        if total != snapshot.parameters.total_supply:
            raise ValueError(f"Snapshot balances sum to {total}, expected {snapshot.parameters.total_supply}")

        ledger = cls(snapshot.parameters)
        ledger._roles = snapshot.roles
        ledger._book = BalanceBook(snapshot.balances)
        for owner, spenders in snapshot.allowances.items():
            ledger._allowances[owner].update(spenders)
        ledger._paused = snapshot.paused
        ledger._transfers = list(transfers)
        return ledger

    def _move(self, sender: Address, recipient: Address, amount: int) -> TransferRecord:
        check_amount(amount)
        self._require_active()
        if not self._book.has_available(address=sender, quantity=amount):
            available = self._book.get_balance(sender)
            logger.warning(
                "Rejected transfer: sender=%s amount=%d available=%d", sender, amount, available
            )
            raise InsufficientBalanceError(address=sender, attempted_amount=amount, available_balance=available)

        split = compute_tax(amount, self._parameters.tax_basis_points, self.tax_recipient)
        record = TransferRecord(
            kind=TransferKind.TRANSFER,
            sender=sender,
            recipient=recipient,
            amount=amount,
            tax=split.tax,
            tax_recipient=split.tax_recipient,
        )

        self._book.apply_movement(address=sender, quantity=-split.amount)
        self._book.apply_movement(address=recipient, quantity=split.net_amount)
        self._book.apply_movement(address=split.tax_recipient, quantity=split.tax)
        self._transfers.append(record)

        logger.info(
            "Transfer %s -> %s amount=%d tax=%d to %s",
            sender,
            recipient,
            split.amount,
            split.tax,
            split.tax_recipient,
        )
        return record

    def _require_initialized(self) -> None:
        if self._roles is None:
            raise NotInitializedError()

    def _require_active(self) -> None:
        self._require_initialized()
        if self._paused:
            logger.warning("Rejected transfer while paused")
            raise LedgerPausedError()

    def _require_pauser(self, caller: str) -> None:
        caller_address = normalize_address(caller)
        if caller_address != self.roles.pauser:
            logger.warning("Rejected pause toggle from %s", caller_address)
            raise UnauthorizedError(caller=caller_address, required_role=Role.PAUSER.value)

    @staticmethod
    def _checked_address(raw: str) -> Address:
        address = normalize_address(raw)
        if address == ZERO_ADDRESS:
            raise InvalidAddressError(raw)
        return address
