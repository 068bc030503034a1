"""
Financial Reporting Domain Models (``ledger_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects for the report inputs and outputs:
report windows, per-account balances, hierarchical report groups, the
balance sheet (Balansräkning), the income statement (Resultaträkning),
the VAT report (Momsrapport) and the general ledger (Huvudbok).

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by the
pure builders and by ``ReportingService``.

Invariants enforced
-------------------
* All models are ``frozen=True``; groups hold tuples, never lists.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* A ReportWindow is either point-in-time or a closed period, never both.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

# =========================================================================
# Enums
# =========================================================================


class ReportType(str, Enum):
    ACCOUNT_BALANCES = "account_balances"
    BALANCE_SHEET = "balance_sheet"
    INCOME_STATEMENT = "income_statement"
    VAT = "vat"
    GENERAL_LEDGER = "general_ledger"


class Consistency(str, Enum):
    """How the figures of one report relate to concurrent postings."""

    SNAPSHOT = "snapshot"  # one repeatable-read transaction
    BEST_EFFORT = "best_effort"  # statement-level reads


# =========================================================================
# Windows
# =========================================================================


@dataclass(frozen=True)
class ReportWindow:
    """
    Date filter for a report.

    Point-in-time: entry_date <= as_of_date.
    Period: start_date <= entry_date <= end_date.
    Either form may additionally be restricted to one fiscal year.
    """

    as_of_date: date | None = None
    start_date: date | None = None
    end_date: date | None = None
    fiscal_year_id: UUID | None = None

    def __post_init__(self) -> None:
        is_point = self.as_of_date is not None
        is_period = self.start_date is not None or self.end_date is not None
        if is_point and is_period:
            raise ValueError("A report window is either as-of or a period, not both")
        if is_period and (self.start_date is None or self.end_date is None):
            raise ValueError("A period window needs both start_date and end_date")
        if is_period and self.start_date > self.end_date:
            raise ValueError(
                f"Period start {self.start_date} is after period end {self.end_date}"
            )

    @classmethod
    def as_of(cls, as_of_date: date, fiscal_year_id: UUID | None = None) -> ReportWindow:
        return cls(as_of_date=as_of_date, fiscal_year_id=fiscal_year_id)

    @classmethod
    def period(
        cls, start_date: date, end_date: date, fiscal_year_id: UUID | None = None
    ) -> ReportWindow:
        return cls(start_date=start_date, end_date=end_date, fiscal_year_id=fiscal_year_id)

    @property
    def is_point_in_time(self) -> bool:
        return self.start_date is None and self.end_date is None

    def contains(self, entry_date: date) -> bool:
        if self.as_of_date is not None:
            return entry_date <= self.as_of_date
        if self.start_date is not None and self.end_date is not None:
            return self.start_date <= entry_date <= self.end_date
        return True

    @property
    def reference_date(self) -> date | None:
        """The date a report is 'as of': as_of_date or the period end."""
        return self.as_of_date or self.end_date


# =========================================================================
# Report Metadata (common to all reports)
# =========================================================================


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every report."""

    report_type: ReportType
    organization_id: UUID
    entity_name: str
    currency: str
    generated_at: str  # ISO format timestamp from injected clock
    window: ReportWindow
    comparative_window: ReportWindow | None = None
    consistency: Consistency = Consistency.BEST_EFFORT
    language: str = "sv"


# =========================================================================
# Balances and groups
# =========================================================================


@dataclass(frozen=True)
class AccountBalance:
    """Posted totals of one account inside a window."""

    account_id: UUID
    account_number: str
    account_name: str
    total_debit: Decimal
    total_credit: Decimal
    signed_balance: Decimal
    comparative_signed_balance: Decimal | None = None
    account_name_en: str | None = None


@dataclass(frozen=True)
class ReportGroup:
    """
    A section or subsection of a statement.

    Flat sections hold their accounts directly and have no subgroups;
    sections with subgroups hold no accounts of their own.
    """

    key: str
    name: str
    name_localized: str
    accounts: tuple[AccountBalance, ...]
    total: Decimal
    comparative_total: Decimal | None = None
    subgroups: tuple[ReportGroup, ...] = ()

    def subgroup(self, key: str) -> ReportGroup:
        for group in self.subgroups:
            if group.key == key:
                return group
        raise KeyError(key)

    def iter_accounts(self):
        yield from self.accounts
        for group in self.subgroups:
            yield from group.iter_accounts()


def _find(groups: tuple[ReportGroup, ...], key: str) -> ReportGroup:
    for group in groups:
        if group.key == key:
            return group
    raise KeyError(key)


# =========================================================================
# Balance Sheet (Balansräkning)
# =========================================================================


@dataclass(frozen=True)
class BalanceSheetTotals:
    assets: Decimal
    equity_and_liabilities: Decimal
    is_balanced: bool
    assets_comparative: Decimal | None = None
    equity_and_liabilities_comparative: Decimal | None = None


@dataclass(frozen=True)
class BalanceSheetReport:
    metadata: ReportMetadata
    sections: tuple[ReportGroup, ...]
    totals: BalanceSheetTotals
    # Net of all income statement accounts in the window, when shown in equity
    period_result: Decimal | None = None

    def section(self, key: str) -> ReportGroup:
        return _find(self.sections, key)


# =========================================================================
# Income Statement (Resultaträkning)
# =========================================================================


@dataclass(frozen=True)
class IncomeStatementTotals:
    operating_result: Decimal
    result_after_financial: Decimal
    result_before_tax: Decimal
    net_result: Decimal
    operating_result_comparative: Decimal | None = None
    result_after_financial_comparative: Decimal | None = None
    result_before_tax_comparative: Decimal | None = None
    net_result_comparative: Decimal | None = None


@dataclass(frozen=True)
class IncomeStatementReport:
    metadata: ReportMetadata
    sections: tuple[ReportGroup, ...]
    totals: IncomeStatementTotals

    def section(self, key: str) -> ReportGroup:
        return _find(self.sections, key)


# =========================================================================
# VAT Report (Momsrapport)
# =========================================================================


@dataclass(frozen=True)
class VatTransaction:
    """One posted line on a VAT account."""

    line_id: UUID
    entry_id: UUID
    entry_date: date
    verification_number: int
    description: str
    account_number: str
    account_name: str
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class VatBucket:
    key: str
    name: str
    amount: Decimal
    transactions: tuple[VatTransaction, ...] = ()


@dataclass(frozen=True)
class VatReport:
    """
    Output VAT (credit - debit) by rate, input VAT (debit - credit) by kind.

    net_vat > 0 is payable to Skatteverket, net_vat < 0 is refundable.
    """

    metadata: ReportMetadata
    output_vat: tuple[VatBucket, ...]
    output_total: Decimal
    input_vat: tuple[VatBucket, ...]
    input_total: Decimal
    net_vat: Decimal

    @property
    def is_payable(self) -> bool:
        return self.net_vat > 0

    @property
    def is_refundable(self) -> bool:
        return self.net_vat < 0

    def bucket(self, key: str) -> VatBucket:
        for bucket in self.output_vat + self.input_vat:
            if bucket.key == key:
                return bucket
        raise KeyError(key)


# =========================================================================
# General Ledger (Huvudbok)
# =========================================================================


@dataclass(frozen=True)
class GeneralLedgerRow:
    line_id: UUID
    entry_id: UUID
    entry_date: date
    verification_number: int
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal  # running (debit - credit) including the opening balance


@dataclass(frozen=True)
class GeneralLedgerAccount:
    account_id: UUID
    account_number: str
    account_name: str
    opening_balance: Decimal
    rows: tuple[GeneralLedgerRow, ...]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class GeneralLedgerReport:
    metadata: ReportMetadata
    accounts: tuple[GeneralLedgerAccount, ...]


@dataclass(frozen=True)
class AccountBalancesReport:
    metadata: ReportMetadata
    balances: tuple[AccountBalance, ...] = field(default_factory=tuple)
