from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import StrEnum
from typing import NewType
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from .errors import InvalidAddressError

Address = NewType("Address", str)
TransferId = NewType("TransferId", UUID)

ZERO_ADDRESS = Address("0x" + "0" * 40)
BASIS_POINTS_DENOMINATOR = 10_000
DEFAULT_DECIMALS = 18

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(raw: str) -> Address:
    """Validate a 0x-prefixed 20-byte hex address and return it lower-cased."""
    candidate = raw.strip()
    if not _ADDRESS_RE.match(candidate):
        raise InvalidAddressError(raw)
    return Address(candidate.lower())


def to_wei(whole_tokens: int, decimals: int = DEFAULT_DECIMALS) -> int:
    return whole_tokens * 10**decimals


def check_amount(amount: int) -> int:
    """Reject anything but a non-negative int; floats would break exact wei sums."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"amount must be an int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError("amount must be >= 0")
    return amount


class Role(StrEnum):
    OWNER = "owner"
    PAUSER = "pauser"
    DEVELOPER = "developer"
    PRESALER = "presaler"
    AIRDROPER = "airdroper"


class TransferKind(StrEnum):
    MINT = "MINT"
    TRANSFER = "TRANSFER"


class AllocationTable(BaseModel):
    """Share of the initial supply per role, in basis points."""

    shares: dict[Role, int]

    @model_validator(mode="after")
    def _validate_shares(self) -> AllocationTable:
        if Role.OWNER not in self.shares:
            raise ValueError("Allocation table must include the owner")
        if Role.PAUSER in self.shares:
            raise ValueError("Pauser does not take part in the allocation")
        if any(bps < 0 for bps in self.shares.values()):
            raise ValueError("Allocation shares must be >= 0")
        total = sum(self.shares.values())
        if total != BASIS_POINTS_DENOMINATOR:
            raise ValueError(f"Allocation shares must sum to {BASIS_POINTS_DENOMINATOR} bps, got {total}")
        return self


DEFAULT_ALLOCATION = AllocationTable(
    shares={
        Role.DEVELOPER: 1_000,
        Role.PRESALER: 1_000,
        Role.AIRDROPER: 3_000,
        Role.OWNER: 5_000,
    }
)


class TokenParameters(BaseModel):
    name: str = "UnPack"
    symbol: str = "UNP"
    decimals: int = DEFAULT_DECIMALS
    total_supply: int
    tax_basis_points: int = 300
    tax_recipient_role: Role = Role.AIRDROPER
    allocation: AllocationTable = DEFAULT_ALLOCATION

    @model_validator(mode="after")
    def _validate_fields(self) -> TokenParameters:
        if self.total_supply <= 0:
            raise ValueError("total_supply must be > 0")
        if self.decimals < 0:
            raise ValueError("decimals must be >= 0")
        if not 0 <= self.tax_basis_points <= BASIS_POINTS_DENOMINATOR:
            raise ValueError("tax_basis_points must be within 0..10000")
        if self.tax_recipient_role == Role.PAUSER:
            raise ValueError("The pauser cannot receive transfer tax")
        return self


class RoleAssignment(BaseModel):
    owner: Address
    pauser: Address
    developer: Address
    presaler: Address
    airdroper: Address

    def address_for(self, role: Role) -> Address:
        return getattr(self, role.value)

    def as_dict(self) -> dict[Role, Address]:
        return {role: self.address_for(role) for role in Role}


class TransferRecord(BaseModel):
    """A single balance movement.

    ``amount`` is what left the sender; ``net_amount`` reached the recipient and
    ``tax`` went to ``tax_recipient``. Mints come from the zero address untaxed.
    """

    id: TransferId = TransferId(Field(default_factory=uuid4))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    kind: TransferKind
    sender: Address
    recipient: Address
    amount: int
    tax: int = 0
    tax_recipient: Address | None = None

    @property
    def net_amount(self) -> int:
        return self.amount - self.tax

    @model_validator(mode="after")
    def _validate_amounts(self) -> TransferRecord:
        if self.amount < 0:
            raise ValueError("amount must be >= 0")
        if not 0 <= self.tax <= self.amount:
            raise ValueError("tax must be within 0..amount")
        if self.tax and self.tax_recipient is None:
            raise ValueError("tax_recipient is required when tax is charged")
        return self


class LedgerSnapshot(BaseModel):
    parameters: TokenParameters
    roles: RoleAssignment
    balances: dict[Address, int]
    allowances: dict[Address, dict[Address, int]] = Field(default_factory=dict)
    paused: bool = False
