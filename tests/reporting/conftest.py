"""
Reporting-specific test fixtures.

Provides:
- ReportingService instances wired to the test session
- Synthetic LedgerLine / AccountBalance factories for pure tests
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4, uuid5

import pytest

from ledger_kernel.domain.account_classifier import signed_balance
from ledger_kernel.domain.dtos import EntryStatus, LedgerLine
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    AccountBalance,
    ReportMetadata,
    ReportType,
    ReportWindow,
)
from ledger_modules.reporting.service import ReportingService

TEST_ORG_ID = UUID("00000000-0000-4000-8000-000000000001")
FISCAL_YEAR_ID = UUID("00000000-0000-4000-8000-000000000024")

_ACCOUNT_NAMESPACE = UUID("00000000-0000-4000-8000-0000000000aa")


def account_id_for(number: str) -> UUID:
    """Stable synthetic account id per account number."""
    return uuid5(_ACCOUNT_NAMESPACE, number)


def make_line(
    number: str,
    debit: str | Decimal = "0",
    credit: str | Decimal = "0",
    entry_date: date = date(2024, 3, 1),
    verification_number: int = 1,
    status: EntryStatus = EntryStatus.POSTED,
    name: str | None = None,
    description: str = "Verifikation",
    fiscal_year_id: UUID = FISCAL_YEAR_ID,
    entry_id: UUID | None = None,
) -> LedgerLine:
    """Factory for LedgerLine used in pure tests."""
    return LedgerLine(
        line_id=uuid4(),
        entry_id=entry_id or uuid4(),
        fiscal_year_id=fiscal_year_id,
        account_id=account_id_for(number),
        account_number=number,
        account_name=name or f"Konto {number}",
        debit=Decimal(debit),
        credit=Decimal(credit),
        entry_date=entry_date,
        verification_number=verification_number,
        entry_description=description,
        entry_status=status,
    )


def make_balance(number: str, debit: str = "0", credit: str = "0", comparative: str | None = None) -> AccountBalance:
    """Factory for AccountBalance with the signed balance derived from the number."""
    d, c = Decimal(debit), Decimal(credit)
    return AccountBalance(
        account_id=account_id_for(number),
        account_number=number,
        account_name=f"Konto {number}",
        total_debit=d,
        total_credit=c,
        signed_balance=signed_balance(number, d, c),
        comparative_signed_balance=Decimal(comparative) if comparative is not None else None,
    )


def make_metadata(
    report_type: ReportType = ReportType.BALANCE_SHEET,
    window: ReportWindow | None = None,
) -> ReportMetadata:
    return ReportMetadata(
        report_type=report_type,
        organization_id=TEST_ORG_ID,
        entity_name="Testbolaget AB",
        currency="SEK",
        generated_at="2024-12-31T23:59:59+00:00",
        window=window or ReportWindow.as_of(date(2024, 12, 31)),
    )


@pytest.fixture
def reporting_config() -> ReportingConfig:
    """Standard reporting configuration for tests."""
    return ReportingConfig.with_defaults()


@pytest.fixture
def reporting_service(session, deterministic_clock, reporting_config) -> ReportingService:
    """ReportingService wired to the test session."""
    return ReportingService(session=session, clock=deterministic_clock, config=reporting_config)
