"""
Module: ledger_kernel.models.fiscal_year
Responsibility: ORM persistence for fiscal years -- the numbering scope for
    verification numbers and the date boundary for postings.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - No entry may be posted into a closed fiscal year.
    - A posted entry's entry_date lies within [start_date, end_date].
"""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase, UUIDString


class FiscalYear(TrackedBase):
    """
    Fiscal year (räkenskapsår) of one organization.

    Guarantees:
        - (organization_id, name) is unique.
        - close()/reopen() require an explicit actor and timestamp.
    """

    __tablename__ = "fiscal_years"

    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_fiscal_year_org_name"),
        Index("idx_fiscal_year_dates", "organization_id", "start_date", "end_date"),
    )

    organization_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    # e.g. "2024" or "2023/2024"
    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    # Boundaries (inclusive)
    start_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    end_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    is_closed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    closed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    closed_by_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    def __repr__(self) -> str:
        state = "closed" if self.is_closed else "open"
        return f"<FiscalYear {self.name}: {state}>"

    def contains_date(self, check_date: date) -> bool:
        """Check if a date falls within this fiscal year (inclusive)."""
        return self.start_date <= check_date <= self.end_date

    def close(self, actor_id: UUID, closed_at: datetime) -> None:
        self.is_closed = True
        self.closed_at = closed_at
        self.closed_by_id = actor_id

    def reopen(self) -> None:
        self.is_closed = False
        self.closed_at = None
        self.closed_by_id = None
