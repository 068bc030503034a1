"""
Module: ledger_kernel.selectors.journal_selector
Responsibility: Read-only journal entry queries -- lookup by id, listing by
    status/date, and verification-number ranges (the verification list that
    Swedish bookkeeping rules require to be producible in number order).
Architecture position: Kernel > Selectors.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.dtos import EntryStatus, JournalEntryRecord
from ledger_kernel.models.journal import JournalEntry, JournalEntryStatus
from ledger_kernel.selectors.base import BaseSelector


class JournalSelector(BaseSelector):
    """Selector for journal entries, returning JournalEntryRecord DTOs."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get_entry(self, organization_id: UUID, entry_id: UUID) -> JournalEntryRecord | None:
        entry = self.session.execute(
            select(JournalEntry).where(
                JournalEntry.id == entry_id,
                JournalEntry.organization_id == organization_id,
            )
        ).scalar_one_or_none()
        return JournalEntryRecord.from_model(entry) if entry else None

    def list_entries(
        self,
        organization_id: UUID,
        fiscal_year_id: UUID | None = None,
        status: EntryStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[JournalEntryRecord]:
        """Entries ordered by entry_date, then verification number."""
        query = select(JournalEntry).where(JournalEntry.organization_id == organization_id)
        if fiscal_year_id is not None:
            query = query.where(JournalEntry.fiscal_year_id == fiscal_year_id)
        if status is not None:
            query = query.where(JournalEntry.status == JournalEntryStatus(status.value))
        if start_date is not None:
            query = query.where(JournalEntry.entry_date >= start_date)
        if end_date is not None:
            query = query.where(JournalEntry.entry_date <= end_date)
        query = query.order_by(JournalEntry.entry_date, JournalEntry.verification_number)
        if limit is not None:
            query = query.limit(limit)
        if offset is not None:
            query = query.offset(offset)
        return [JournalEntryRecord.from_model(e) for e in self.session.execute(query).scalars()]

    def by_verification_range(
        self,
        organization_id: UUID,
        fiscal_year_id: UUID,
        first: int,
        last: int,
    ) -> list[JournalEntryRecord]:
        """Entries with first <= verification_number <= last, in number order."""
        if first > last:
            raise ValueError(f"Verification range {first}-{last} is inverted")
        query = (
            select(JournalEntry)
            .where(
                JournalEntry.organization_id == organization_id,
                JournalEntry.fiscal_year_id == fiscal_year_id,
                JournalEntry.verification_number >= first,
                JournalEntry.verification_number <= last,
            )
            .order_by(JournalEntry.verification_number)
        )
        return [JournalEntryRecord.from_model(e) for e in self.session.execute(query).scalars()]

    def count_entries(
        self,
        organization_id: UUID,
        fiscal_year_id: UUID | None = None,
        status: EntryStatus | None = None,
    ) -> int:
        query = (
            select(func.count())
            .select_from(JournalEntry)
            .where(JournalEntry.organization_id == organization_id)
        )
        if fiscal_year_id is not None:
            query = query.where(JournalEntry.fiscal_year_id == fiscal_year_id)
        if status is not None:
            query = query.where(JournalEntry.status == JournalEntryStatus(status.value))
        return self.session.execute(query).scalar_one()
