from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator


class IntAsString(TypeDecorator):
    """Wei amounts overflow SQLite's 64-bit integers, so they are stored as text."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: int | None, dialect: object) -> str | None:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: str | None, dialect: object) -> int | None:
        if value is None:
            return None
        return int(value)


class Base(DeclarativeBase):
    pass


class TokenStateOrm(Base):
    __tablename__ = "token_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    symbol: Mapped[str] = mapped_column(String, nullable=False)
    decimals: Mapped[int] = mapped_column(Integer, nullable=False)
    total_supply: Mapped[int] = mapped_column(IntAsString, nullable=False)
    tax_basis_points: Mapped[int] = mapped_column(Integer, nullable=False)
    tax_recipient_role: Mapped[str] = mapped_column(String, nullable=False)
    paused: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    roles: Mapped[list["RoleAssignmentOrm"]] = relationship(
        cascade="all, delete-orphan", back_populates="token", lazy="joined"
    )


class RoleAssignmentOrm(Base):
    __tablename__ = "role_assignments"

    token_id: Mapped[int] = mapped_column(Integer, ForeignKey("token_state.id"), primary_key=True)
    role: Mapped[str] = mapped_column(String, primary_key=True)
    address: Mapped[str] = mapped_column(String, nullable=False)
    # Allocation share in basis points; zero for roles outside the allocation.
    share_bps: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    token: Mapped[TokenStateOrm] = relationship(back_populates="roles")


class BalanceOrm(Base):
    __tablename__ = "balances"

    address: Mapped[str] = mapped_column(String, primary_key=True)
    balance: Mapped[int] = mapped_column(IntAsString, nullable=False)


class AllowanceOrm(Base):
    __tablename__ = "allowances"

    owner: Mapped[str] = mapped_column(String, primary_key=True)
    spender: Mapped[str] = mapped_column(String, primary_key=True)
    amount: Mapped[int] = mapped_column(IntAsString, nullable=False)


class TransferOrm(Base):
    __tablename__ = "transfers"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    kind: Mapped[str] = mapped_column(String, nullable=False)
    sender: Mapped[str] = mapped_column(String, nullable=False)
    recipient: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[int] = mapped_column(IntAsString, nullable=False)
    tax: Mapped[int] = mapped_column(IntAsString, nullable=False)
    tax_recipient: Mapped[str | None] = mapped_column(String, nullable=True)
