"""
Reporting Module Service (``ledger_modules.reporting.service``).

Responsibility
--------------
Orchestrates report generation -- account balances, balance sheet,
income statement, VAT report and general ledger -- by bridging
``LedgerSelector`` to the pure functions in ``aggregation``,
``statements``, ``vat`` and ``general_ledger``.  This is a **read-only**
service: no journal entries are created or changed.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``session`` + ``clock`` +
``config`` (+ ``snapshot_isolation``).

Invariants enforced
-------------------
* Read-only -- no mutations to the journal.
* Only POSTED lines are read.
* Report metadata carries the window, the generation timestamp from the
  injected clock, and the read consistency of the figures.

Failure modes
-------------
* Invalid windows  -> ``ValueError`` before any query runs.
* An account that cannot be classified  -> ``ReportUnavailableError``.
  The underlying ``ClassificationError`` is logged with full detail and
  chained as ``__cause__``; the raised message names no accounts.
* Selector query failure  -> exception propagates.

Audit relevance
---------------
Structured log events for every report generation, carrying report type,
window and headline totals.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.domain.account_classifier import VAT_ACCOUNT_PREFIX
from ledger_kernel.domain.amounts import ZERO
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import AccountInfo, LedgerLine
from ledger_kernel.exceptions import ClassificationError, ReportUnavailableError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_modules.reporting.aggregation import aggregate_balances, attach_comparative
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.general_ledger import build_general_ledger
from ledger_modules.reporting.models import (
    AccountBalancesReport,
    BalanceSheetReport,
    Consistency,
    GeneralLedgerReport,
    IncomeStatementReport,
    ReportMetadata,
    ReportType,
    ReportWindow,
    VatReport,
)
from ledger_modules.reporting.statements import (
    build_balance_sheet,
    build_income_statement,
    render_to_dict,
)
from ledger_modules.reporting.vat import build_vat_report

logger = get_logger("modules.reporting.service")

T = TypeVar("T")


class ReportingService:
    """
    Report generation service.

    Contract
    --------
    * Every public method takes the organization explicitly and returns a
      frozen report DTO.
    * All methods are read-only.

    Guarantees
    ----------
    * No financial logic lives in this class; it fetches, then delegates.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT open its own transaction.  With ``snapshot_isolation=True``
      the caller promises the session runs in a repeatable-read
      transaction, and reports are labelled ``snapshot``.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
        snapshot_isolation: bool = False,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()
        self._consistency = (
            Consistency.SNAPSHOT if snapshot_isolation else Consistency.BEST_EFFORT
        )
        self._ledger = LedgerSelector(session)

        logger.info(
            "reporting_service_initialized",
            extra={
                "entity_name": self._config.entity_name,
                "currency": self._config.currency,
                "consistency": self._consistency.value,
            },
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _build_metadata(
        self,
        report_type: ReportType,
        organization_id: UUID,
        window: ReportWindow,
        comparative_window: ReportWindow | None = None,
    ) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            report_type=report_type,
            organization_id=organization_id,
            entity_name=self._config.entity_name,
            currency=self._config.currency,
            generated_at=self._clock.now().isoformat(),
            window=window,
            comparative_window=comparative_window,
            consistency=self._consistency,
            language=self._config.language,
        )

    def _lines(
        self,
        organization_id: UUID,
        window: ReportWindow,
        account_prefix: str | None = None,
        account_id: UUID | None = None,
    ) -> list[LedgerLine]:
        return self._ledger.posted_lines(
            organization_id,
            fiscal_year_id=window.fiscal_year_id,
            as_of_date=window.as_of_date,
            start_date=window.start_date,
            end_date=window.end_date,
            account_prefix=account_prefix,
            account_id=account_id,
        )

    def _balances(self, organization_id: UUID, window: ReportWindow):
        return aggregate_balances(self._lines(organization_id, window), window)

    def _load_accounts(self, organization_id: UUID) -> dict[UUID, AccountInfo]:
        accounts = self._session.execute(
            select(Account)
            .where(Account.organization_id == organization_id)
            .order_by(Account.account_number)
        ).scalars()
        return {a.id: AccountInfo.from_model(a) for a in accounts}

    def _classified(self, report_type: ReportType, build: Callable[[], T]) -> T:
        """Run a builder, hiding classification details from the caller."""
        try:
            return build()
        except ClassificationError as exc:
            logger.error(
                "report_classification_failed",
                exc_info=True,
                extra={"report_type": report_type.value},
            )
            raise ReportUnavailableError(report_type.value) from exc

    # =========================================================================
    # Public API
    # =========================================================================

    def account_balances(
        self,
        organization_id: UUID,
        window: ReportWindow,
        comparative_window: ReportWindow | None = None,
    ) -> AccountBalancesReport:
        """
        Per-account posted totals for a window, sorted by account number.

        Raises:
            ReportUnavailableError: an account number cannot be classified.
        """
        with LogContext.bind(
            organization_id=organization_id,
            report_type=ReportType.ACCOUNT_BALANCES.value,
        ):
            def build() -> tuple:
                balances = self._balances(organization_id, window)
                if comparative_window is not None:
                    balances = attach_comparative(
                        balances, self._balances(organization_id, comparative_window)
                    )
                return balances

            balances = self._classified(ReportType.ACCOUNT_BALANCES, build)
            report = AccountBalancesReport(
                metadata=self._build_metadata(
                    ReportType.ACCOUNT_BALANCES,
                    organization_id,
                    window,
                    comparative_window,
                ),
                balances=balances,
            )
            logger.info(
                "account_balances_generated",
                extra={"account_count": len(balances)},
            )
            return report

    def balance_sheet(
        self,
        organization_id: UUID,
        as_of_date: date,
        fiscal_year_id: UUID | None = None,
        comparative_as_of: date | None = None,
        comparative_fiscal_year_id: UUID | None = None,
    ) -> BalanceSheetReport:
        """
        Generate a balance sheet (Balansräkning) as of a date.

        Args:
            as_of_date: Report date; lines with entry_date <= as_of_date count.
            fiscal_year_id: Restrict to one fiscal year.  Leave unset to
                include every earlier year's postings.
            comparative_as_of: Optional prior date for comparison.
            comparative_fiscal_year_id: Fiscal year filter for the
                comparative window.

        Raises:
            ReportUnavailableError: an account number cannot be classified.
        """
        window = ReportWindow.as_of(as_of_date, fiscal_year_id)
        comparative_window = (
            ReportWindow.as_of(comparative_as_of, comparative_fiscal_year_id)
            if comparative_as_of is not None
            else None
        )

        with LogContext.bind(
            organization_id=organization_id,
            report_type=ReportType.BALANCE_SHEET.value,
        ):
            metadata = self._build_metadata(
                ReportType.BALANCE_SHEET, organization_id, window, comparative_window
            )

            def build() -> BalanceSheetReport:
                current = self._balances(organization_id, window)
                comparative = (
                    self._balances(organization_id, comparative_window)
                    if comparative_window is not None
                    else None
                )
                return build_balance_sheet(current, comparative, self._config, metadata)

            report = self._classified(ReportType.BALANCE_SHEET, build)
            log = logger.info if report.totals.is_balanced else logger.warning
            log(
                "balance_sheet_generated",
                extra={
                    "as_of_date": as_of_date.isoformat(),
                    "total_assets": str(report.totals.assets),
                    "total_equity_and_liabilities": str(
                        report.totals.equity_and_liabilities
                    ),
                    "is_balanced": report.totals.is_balanced,
                },
            )
            return report

    def income_statement(
        self,
        organization_id: UUID,
        period_start: date,
        period_end: date,
        fiscal_year_id: UUID | None = None,
        comparative_start: date | None = None,
        comparative_end: date | None = None,
        comparative_fiscal_year_id: UUID | None = None,
    ) -> IncomeStatementReport:
        """
        Generate an income statement (Resultaträkning) for a period.

        Raises:
            ValueError: inverted period, or only one comparative bound given.
            ReportUnavailableError: an account number cannot be classified.
        """
        if (comparative_start is None) != (comparative_end is None):
            raise ValueError("comparative_start and comparative_end go together")
        window = ReportWindow.period(period_start, period_end, fiscal_year_id)
        comparative_window = (
            ReportWindow.period(
                comparative_start, comparative_end, comparative_fiscal_year_id
            )
            if comparative_start is not None
            else None
        )

        with LogContext.bind(
            organization_id=organization_id,
            report_type=ReportType.INCOME_STATEMENT.value,
        ):
            metadata = self._build_metadata(
                ReportType.INCOME_STATEMENT, organization_id, window, comparative_window
            )

            def build() -> IncomeStatementReport:
                current = self._balances(organization_id, window)
                comparative = (
                    self._balances(organization_id, comparative_window)
                    if comparative_window is not None
                    else None
                )
                return build_income_statement(
                    current, comparative, self._config, metadata
                )

            report = self._classified(ReportType.INCOME_STATEMENT, build)
            logger.info(
                "income_statement_generated",
                extra={
                    "period_start": period_start.isoformat(),
                    "period_end": period_end.isoformat(),
                    "operating_result": str(report.totals.operating_result),
                    "net_result": str(report.totals.net_result),
                },
            )
            return report

    def vat_report(
        self,
        organization_id: UUID,
        period_start: date,
        period_end: date,
        fiscal_year_id: UUID | None = None,
    ) -> VatReport:
        """Generate the VAT report (Momsrapport) for a period."""
        window = ReportWindow.period(period_start, period_end, fiscal_year_id)

        with LogContext.bind(
            organization_id=organization_id,
            report_type=ReportType.VAT.value,
        ):
            lines = self._lines(organization_id, window, account_prefix=VAT_ACCOUNT_PREFIX)
            report = build_vat_report(
                lines,
                window,
                self._build_metadata(ReportType.VAT, organization_id, window),
            )
            logger.info(
                "vat_report_generated",
                extra={
                    "period_start": period_start.isoformat(),
                    "period_end": period_end.isoformat(),
                    "output_total": str(report.output_total),
                    "input_total": str(report.input_total),
                    "net_vat": str(report.net_vat),
                    "line_count": len(lines),
                },
            )
            return report

    def general_ledger(
        self,
        organization_id: UUID,
        window: ReportWindow,
        account_ids: list[UUID] | None = None,
    ) -> GeneralLedgerReport:
        """
        Generate the general ledger (Huvudbok).

        For a period window each account opens with the posted balance
        before the period start; a point-in-time window opens at zero.
        Without account_ids, every account with lines in the window is
        listed, in account-number order.
        """
        with LogContext.bind(
            organization_id=organization_id,
            report_type=ReportType.GENERAL_LEDGER.value,
        ):
            accounts = self._load_accounts(organization_id)
            lines = self._lines(organization_id, window)
            if account_ids is None:
                wanted = sorted(
                    {l.account_id for l in lines},
                    key=lambda aid: accounts[aid].account_number,
                )
            else:
                wanted = list(account_ids)

            ledgers = []
            for account_id in wanted:
                opening = ZERO
                if window.start_date is not None:
                    opening = self._ledger.opening_balance(
                        organization_id,
                        account_id,
                        window.start_date,
                        fiscal_year_id=window.fiscal_year_id,
                    )
                info = accounts.get(account_id)
                ledgers.append(
                    build_general_ledger(
                        lines,
                        account_id,
                        opening_balance=opening,
                        account_number=info.account_number if info else None,
                        account_name=info.name if info else None,
                    )
                )

            report = GeneralLedgerReport(
                metadata=self._build_metadata(
                    ReportType.GENERAL_LEDGER, organization_id, window
                ),
                accounts=tuple(ledgers),
            )
            logger.info(
                "general_ledger_generated",
                extra={"account_count": len(ledgers), "line_count": len(lines)},
            )
            return report

    def to_dict(self, report: object) -> dict:
        """Convert any report DTO to a plain dict for JSON serialization."""
        return render_to_dict(report)
