"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for the BAS chart of accounts -- the target
    of every journal line.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - account_number is unique per organization (uq_account_org_number).
    - account_number is the authoritative key for reporting; account_class
      is descriptive and validated against the number range at
      registration time (ChartOfAccountsService).

Failure modes:
    - AccountNotFoundError when a line references a non-existent account or
      one owned by another organization.
    - InactiveAccountError when a posting targets an inactive account.
"""

from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase, UUIDString, enum_column

if TYPE_CHECKING:
    from ledger_kernel.models.journal import JournalEntryLine


class AccountClass(str, Enum):
    """BAS account class, descriptive only."""

    ASSETS = "assets"
    LIABILITIES = "liabilities"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSES = "expenses"
    FINANCIAL = "financial"
    YEAR_END = "year_end"


class AccountType(str, Enum):
    """Position of the account in the chart hierarchy."""

    HEADER = "header"
    DETAIL = "detail"
    TOTAL = "total"


class Account(TrackedBase):
    """
    Chart of accounts entry.

    Guarantees:
        - (organization_id, account_number) is unique.
        - account_number is a 4-digit string.
        - System accounts (is_system) belong to the seeded BAS chart.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint(
            "organization_id", "account_number", name="uq_account_org_number"
        ),
        Index("idx_account_org_active", "organization_id", "is_active"),
    )

    organization_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    # BAS account number, e.g. "1930"
    account_number: Mapped[str] = mapped_column(
        String(4),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    name_en: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    account_class: Mapped[AccountClass] = mapped_column(
        enum_column(AccountClass),
        nullable=False,
    )

    account_type: Mapped[AccountType] = mapped_column(
        enum_column(AccountType),
        default=AccountType.DETAIL,
        nullable=False,
    )

    # Percent suggested for lines on this account, e.g. 25 for 2610
    default_vat_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2),
        nullable=True,
    )

    is_system: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    journal_lines: Mapped[list["JournalEntryLine"]] = relationship(
        back_populates="account",
        lazy="dynamic",
    )

    def __repr__(self) -> str:
        return f"<Account {self.account_number}: {self.name}>"
