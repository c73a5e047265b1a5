from __future__ import annotations

from datetime import timezone

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from db import models
from domain.token import (
    Address,
    AllocationTable,
    LedgerSnapshot,
    Role,
    RoleAssignment,
    TokenParameters,
    TransferKind,
    TransferRecord,
)
from domain.token_ledger import TokenLedger

_STATE_ID = 1


class TransferRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def count(self) -> int:
        return self._session.scalar(select(func.count()).select_from(models.TransferOrm)) or 0

    def create_many(self, records: list[TransferRecord], *, commit: bool = True) -> list[TransferRecord]:
        start = self.count()
        self._session.add_all(
            [
                models.TransferOrm(
                    id=record.id,
                    sequence=start + offset,
                    timestamp=record.timestamp,
                    kind=record.kind.value,
                    sender=record.sender,
                    recipient=record.recipient,
                    amount=record.amount,
                    tax=record.tax,
                    tax_recipient=record.tax_recipient,
                )
                for offset, record in enumerate(records)
            ]
        )
        if commit:
            self._session.commit()
        return records

    def list(self) -> list[TransferRecord]:
        orm_records = self._session.scalars(select(models.TransferOrm).order_by(models.TransferOrm.sequence.asc()))
        return [self._to_domain(record) for record in orm_records]

    @staticmethod
    def _to_domain(orm_record: models.TransferOrm) -> TransferRecord:
        timestamp = orm_record.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return TransferRecord(
            id=orm_record.id,
            timestamp=timestamp,
            kind=TransferKind(orm_record.kind),
            sender=Address(orm_record.sender),
            recipient=Address(orm_record.recipient),
            amount=orm_record.amount,
            tax=orm_record.tax,
            tax_recipient=Address(orm_record.tax_recipient) if orm_record.tax_recipient else None,
        )


class TokenLedgerRepository:
    """Stores the current ledger state and appends its new transfers."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._transfers = TransferRepository(session)

    def save(self, ledger: TokenLedger) -> None:
        snapshot = ledger.snapshot()
        parameters = snapshot.parameters

        state = self._session.get(models.TokenStateOrm, _STATE_ID)
        if state is None:
            state = models.TokenStateOrm(id=_STATE_ID)
            self._session.add(state)
        state.name = parameters.name
        state.symbol = parameters.symbol
        state.decimals = parameters.decimals
        state.total_supply = parameters.total_supply
        state.tax_basis_points = parameters.tax_basis_points
        state.tax_recipient_role = parameters.tax_recipient_role.value
        state.paused = snapshot.paused
        existing_roles = {row.role: row for row in state.roles}
        for role, address in snapshot.roles.as_dict().items():
            row = existing_roles.get(role.value)
            if row is None:
                row = models.RoleAssignmentOrm(role=role.value)
                state.roles.append(row)
            row.address = address
            row.share_bps = parameters.allocation.shares.get(role, 0)

        self._session.execute(
            delete(models.BalanceOrm).where(models.BalanceOrm.address.not_in(list(snapshot.balances)))
        )
        for address, balance in snapshot.balances.items():
            self._session.merge(models.BalanceOrm(address=address, balance=balance))

        for row in self._session.scalars(select(models.AllowanceOrm)).all():
            if row.spender not in snapshot.allowances.get(Address(row.owner), {}):
                self._session.delete(row)
        for owner, spenders in snapshot.allowances.items():
            for spender, amount in spenders.items():
                self._session.merge(models.AllowanceOrm(owner=owner, spender=spender, amount=amount))

        stored = self._transfers.count()
        self._transfers.create_many(ledger.transfers[stored:], commit=False)
        self._session.commit()

    def load(self) -> TokenLedger | None:
        state = self._session.get(models.TokenStateOrm, _STATE_ID)
        if state is None:
            return None

        addresses = {Role(row.role): Address(row.address) for row in state.roles}
        shares = {Role(row.role): row.share_bps for row in state.roles if row.role != Role.PAUSER.value}
        parameters = TokenParameters(
            name=state.name,
            symbol=state.symbol,
            decimals=state.decimals,
            total_supply=state.total_supply,
            tax_basis_points=state.tax_basis_points,
            tax_recipient_role=Role(state.tax_recipient_role),
            allocation=AllocationTable(shares=shares),
        )
        balances = {
            Address(row.address): row.balance for row in self._session.scalars(select(models.BalanceOrm))
        }
        allowances: dict[Address, dict[Address, int]] = {}
        for row in self._session.scalars(select(models.AllowanceOrm)):
            allowances.setdefault(Address(row.owner), {})[Address(row.spender)] = row.amount

        snapshot = LedgerSnapshot(
            parameters=parameters,
            roles=RoleAssignment(**{role.value: address for role, address in addresses.items()}),
            balances=balances,
            allowances=allowances,
            paused=state.paused,
        )
        return TokenLedger.from_snapshot(snapshot, self._transfers.list())
