"""
Module: ledger_kernel.models.journal
Responsibility: ORM persistence for journal entries (verifikationer) and their
    debit/credit lines.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - (organization_id, fiscal_year_id, verification_number) is unique:
      a verification number is never reused within its scope.
    - Each line carries non-negative debit_amount and credit_amount at cent
      precision (CHECK constraints).
    - An entry is reversed at most once (unique reversal_of_id).
    - Balance of posted entries is enforced by JournalEntryManager before the
      status becomes POSTED; is_balanced is a read-side convenience.

Failure modes:
    - IntegrityError on a duplicate verification number, surfaced by the
      manager as DuplicateVerificationNumberError.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import (
    Base,
    TrackedBase,
    UUIDString,
    enum_column,
    money_column,
)

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account
    from ledger_kernel.models.fiscal_year import FiscalYear


class JournalEntryStatus(str, Enum):
    """
    Lifecycle of a journal entry.

    DRAFT -> DRAFT (edit), DRAFT -> POSTED, POSTED -> VOIDED.
    """

    DRAFT = "draft"
    POSTED = "posted"
    VOIDED = "voided"


class JournalEntry(TrackedBase):
    """
    A verification: dated, numbered set of balanced debit/credit lines.

    Guarantees:
        - verification_number is allocated once and never changes.
        - lines are ordered by line_order.
    """

    __tablename__ = "journal_entries"

    __table_args__ = (
        UniqueConstraint(
            "organization_id",
            "fiscal_year_id",
            "verification_number",
            name="uq_journal_verification_number",
        ),
        UniqueConstraint("reversal_of_id", name="uq_journal_reversal_of"),
        Index("idx_journal_org_status_date", "organization_id", "status", "entry_date"),
        Index("idx_journal_fiscal_year", "fiscal_year_id"),
    )

    organization_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    fiscal_year_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("fiscal_years.id"),
        nullable=False,
    )

    entry_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    verification_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default="",
    )

    status: Mapped[JournalEntryStatus] = mapped_column(
        enum_column(JournalEntryStatus),
        default=JournalEntryStatus.DRAFT,
        nullable=False,
    )

    # Origin of the entry, e.g. "manual", "invoice", "sie_import"
    source_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="manual",
    )

    source_id: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    posted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    posted_by_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    voided_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    voided_by_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    reversal_of_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("journal_entries.id"),
        nullable=True,
    )

    lines: Mapped[list["JournalEntryLine"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="JournalEntryLine.line_order",
    )

    fiscal_year: Mapped["FiscalYear"] = relationship()

    reversal_of: Mapped["JournalEntry | None"] = relationship(
        remote_side="JournalEntry.id",
        foreign_keys=[reversal_of_id],
    )

    def __repr__(self) -> str:
        return (
            f"<JournalEntry {self.verification_number} "
            f"status={JournalEntryStatus(self.status).value}>"
        )

    @property
    def is_posted(self) -> bool:
        return self.status == JournalEntryStatus.POSTED

    @property
    def is_draft(self) -> bool:
        return self.status == JournalEntryStatus.DRAFT

    @property
    def is_voided(self) -> bool:
        return self.status == JournalEntryStatus.VOIDED

    @property
    def total_debits(self) -> Decimal:
        """Sum of all debit amounts."""
        return sum((line.debit_amount for line in self.lines), Decimal("0"))

    @property
    def total_credits(self) -> Decimal:
        """Sum of all credit amounts."""
        return sum((line.credit_amount for line in self.lines), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


class JournalEntryLine(Base):
    """
    One debit or credit row of a journal entry.

    Guarantees:
        - debit_amount >= 0 and credit_amount >= 0.
        - line_order gives deterministic ordering within the entry.
    """

    __tablename__ = "journal_entry_lines"

    __table_args__ = (
        CheckConstraint("debit_amount >= 0", name="ck_line_debit_non_negative"),
        CheckConstraint("credit_amount >= 0", name="ck_line_credit_non_negative"),
        Index("idx_line_entry", "journal_entry_id"),
        Index("idx_line_account", "account_id"),
    )

    journal_entry_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("journal_entries.id"),
        nullable=False,
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=False,
    )

    debit_amount: Mapped[Decimal] = money_column()

    credit_amount: Mapped[Decimal] = money_column()

    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    # VAT code as printed on the source document, e.g. "MP1"
    vat_code: Mapped[str | None] = mapped_column(
        String(10),
        nullable=True,
    )

    vat_amount: Mapped[Decimal | None] = money_column(nullable=True)

    cost_center: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )

    line_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    entry: Mapped["JournalEntry"] = relationship(
        back_populates="lines",
    )

    account: Mapped["Account"] = relationship(
        back_populates="journal_lines",
    )

    def __repr__(self) -> str:
        return f"<JournalEntryLine D{self.debit_amount} C{self.credit_amount}>"
