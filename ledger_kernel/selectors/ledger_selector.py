"""
Module: ledger_kernel.selectors.ledger_selector
Responsibility: Read-only ledger queries -- posted lines joined with their
    entry and account, and opening balances.  The ledger is a derived view
    over posted journal lines; no balances are stored anywhere.
Architecture position: Kernel > Selectors.  May import from models/,
    domain DTOs and selectors/base.py.

Invariants enforced:
    - Only lines of POSTED entries are returned.  Draft and voided entries
      never reach reporting.
    - Every query is scoped to one organization.
    - Point-in-time filters are inclusive (entry_date <= as_of_date);
      period filters are closed intervals [start_date, end_date].

Failure modes:
    - ValueError when as_of_date is combined with a period, or when the
      period is inverted.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.amounts import ZERO, round_cents
from ledger_kernel.domain.dtos import EntryStatus, LedgerLine
from ledger_kernel.models.account import Account
from ledger_kernel.models.journal import (
    JournalEntry,
    JournalEntryLine,
    JournalEntryStatus,
)
from ledger_kernel.selectors.base import BaseSelector


class LedgerSelector(BaseSelector):
    """
    Posted-line reader behind every report.

    Contract:
        posted_lines() returns LedgerLine DTOs ordered by entry_date,
        verification_number and line_order.

    Non-goals:
        - Does NOT aggregate; the Balance Aggregator does that in pure code.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def _base_query(self, organization_id: UUID) -> Select:
        return (
            select(
                JournalEntryLine.id.label("line_id"),
                JournalEntryLine.journal_entry_id.label("entry_id"),
                JournalEntryLine.account_id,
                JournalEntryLine.debit_amount,
                JournalEntryLine.credit_amount,
                JournalEntryLine.description.label("line_description"),
                JournalEntryLine.vat_code,
                JournalEntry.fiscal_year_id,
                JournalEntry.entry_date,
                JournalEntry.verification_number,
                JournalEntry.description.label("entry_description"),
                JournalEntry.status,
                Account.account_number,
                Account.name.label("account_name"),
                Account.name_en.label("account_name_en"),
            )
            .join(JournalEntry, JournalEntryLine.journal_entry_id == JournalEntry.id)
            .join(Account, JournalEntryLine.account_id == Account.id)
            .where(
                JournalEntry.organization_id == organization_id,
                JournalEntry.status == JournalEntryStatus.POSTED,
            )
        )

    def posted_lines(
        self,
        organization_id: UUID,
        fiscal_year_id: UUID | None = None,
        as_of_date: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        account_prefix: str | None = None,
        account_id: UUID | None = None,
    ) -> list[LedgerLine]:
        """
        Fetch posted lines for an organization.

        Args:
            fiscal_year_id: Restrict to one fiscal year.
            as_of_date: Point-in-time cutoff (inclusive).  Exclusive with
                start_date/end_date.
            start_date, end_date: Closed period.
            account_prefix: Restrict to account numbers starting with this
                prefix, e.g. "26" for VAT accounts.
            account_id: Restrict to one account.
        """
        if as_of_date is not None and (start_date is not None or end_date is not None):
            raise ValueError("as_of_date cannot be combined with start_date/end_date")
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValueError(f"start_date {start_date} is after end_date {end_date}")

        query = self._base_query(organization_id)
        if fiscal_year_id is not None:
            query = query.where(JournalEntry.fiscal_year_id == fiscal_year_id)
        if as_of_date is not None:
            query = query.where(JournalEntry.entry_date <= as_of_date)
        if start_date is not None:
            query = query.where(JournalEntry.entry_date >= start_date)
        if end_date is not None:
            query = query.where(JournalEntry.entry_date <= end_date)
        if account_prefix:
            query = query.where(Account.account_number.startswith(account_prefix))
        if account_id is not None:
            query = query.where(JournalEntryLine.account_id == account_id)

        query = query.order_by(
            JournalEntry.entry_date,
            JournalEntry.verification_number,
            JournalEntryLine.line_order,
        )

        return [
            LedgerLine(
                line_id=row.line_id,
                entry_id=row.entry_id,
                fiscal_year_id=row.fiscal_year_id,
                account_id=row.account_id,
                account_number=row.account_number,
                account_name=row.account_name,
                debit=Decimal(row.debit_amount),
                credit=Decimal(row.credit_amount),
                entry_date=row.entry_date,
                verification_number=row.verification_number,
                entry_description=row.entry_description,
                line_description=row.line_description,
                entry_status=EntryStatus(row.status.value),
                account_name_en=row.account_name_en,
                vat_code=row.vat_code,
            )
            for row in self.session.execute(query)
        ]

    def opening_balance(
        self,
        organization_id: UUID,
        account_id: UUID,
        before_date: date,
        fiscal_year_id: UUID | None = None,
    ) -> Decimal:
        """
        Sum of posted (debit - credit) on the account strictly before a date.

        Returns:
            Decimal rounded to cents; ZERO when there is no history.
        """
        query = (
            select(
                func.coalesce(func.sum(JournalEntryLine.debit_amount), 0),
                func.coalesce(func.sum(JournalEntryLine.credit_amount), 0),
            )
            .join(JournalEntry, JournalEntryLine.journal_entry_id == JournalEntry.id)
            .where(
                JournalEntry.organization_id == organization_id,
                JournalEntry.status == JournalEntryStatus.POSTED,
                JournalEntryLine.account_id == account_id,
                JournalEntry.entry_date < before_date,
            )
        )
        if fiscal_year_id is not None:
            query = query.where(JournalEntry.fiscal_year_id == fiscal_year_id)

        debit, credit = self.session.execute(query).one()
        return round_cents(Decimal(str(debit or ZERO)) - Decimal(str(credit or ZERO)))
