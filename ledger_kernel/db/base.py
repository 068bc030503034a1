"""
Module: ledger_kernel.db.base
Responsibility: Declarative base for the ledger's ORM models and the column
    helpers they share (UUID keys, cent-precision money, str enums).
Architecture position: Kernel > DB.  Lowest-level import target within the
    kernel.  MUST NOT import from models/, services/, selectors/ or domain/.

Invariants enforced:
    - Primary keys are uuid4, stored as 36-character strings so SQLite and
      PostgreSQL hold identical values.
    - Money columns are Numeric(18, 2): the ledger stores whole cents.
      NEVER use float for monetary amounts.
    - Unnamed constraints and indexes get conventional names, identical
      on SQLite and PostgreSQL.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import (
    BigInteger,
    Date,
    DateTime,
    Enum as SAEnum,
    MetaData,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

MONEY = Numeric(18, 2)

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class UUIDString(TypeDecorator):
    """UUID stored as String(36); loaded back as uuid.UUID."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    """
    Declarative base for all ledger models.

    Guarantees:
        - id is a uuid4 primary key.
        - Python types map to ledger column types: Decimal to cents,
          datetime to timezone-aware timestamps, int to BigInteger.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    type_annotation_map: ClassVar[dict] = {
        Decimal: MONEY,
        datetime: DateTime(timezone=True),
        date: Date,
        UUID: UUIDString(),
        int: BigInteger,
    }

    id: Mapped[UUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )


class TrackedBase(Base):
    """
    Abstract base for records a person creates and edits.

    Accounts, fiscal years and journal entries carry who created them and
    who changed them last; journal lines and counters do not.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    created_by_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    updated_by_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )


def money_column(nullable: bool = False):
    """Numeric(18, 2) column; non-nullable amounts default to 0.00."""
    if nullable:
        return mapped_column(MONEY, nullable=True)
    return mapped_column(MONEY, nullable=False, default=Decimal("0.00"))


def enum_column(enum_cls: type[Enum], length: int = 20) -> SAEnum:
    """Store a str Enum by value in a VARCHAR, loading it back as the member."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
