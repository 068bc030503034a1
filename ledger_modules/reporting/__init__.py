"""
Financial Reporting Module (``ledger_modules.reporting``).

Responsibility
--------------
Read-only module that produces the Swedish statutory reports from the
ledger: balance sheet (Balansräkning), income statement
(Resultaträkning), VAT report (Momsrapport), general ledger (Huvudbok)
and per-account balances.

Architecture position
---------------------
**Modules layer** -- report generation is implemented as pure functions;
``ReportingService`` is the only piece that touches the database.

Invariants enforced
-------------------
* No journal entries are created by this module.
* Reports derive entirely from posted journal lines; no stored balances.
* Section membership follows the BAS number ranges only.

Failure modes
-------------
* Unclassifiable account numbers -> ``ReportUnavailableError``.
* Invalid report windows -> ``ValueError``.

Audit relevance
---------------
Report generation is deterministic and reproducible from the journal.
Metadata records the window, the generation timestamp and whether the
figures come from a single snapshot.
"""

from ledger_modules.reporting.aggregation import aggregate_balances, attach_comparative
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.general_ledger import build_general_ledger
from ledger_modules.reporting.models import (
    AccountBalance,
    AccountBalancesReport,
    BalanceSheetReport,
    BalanceSheetTotals,
    Consistency,
    GeneralLedgerAccount,
    GeneralLedgerReport,
    GeneralLedgerRow,
    IncomeStatementReport,
    IncomeStatementTotals,
    ReportGroup,
    ReportMetadata,
    ReportType,
    ReportWindow,
    VatBucket,
    VatReport,
    VatTransaction,
)
from ledger_modules.reporting.service import ReportingService
from ledger_modules.reporting.statements import (
    build_balance_sheet,
    build_income_statement,
    render_to_dict,
)
from ledger_modules.reporting.vat import build_vat_report

__all__ = [
    "AccountBalance",
    "AccountBalancesReport",
    "BalanceSheetReport",
    "BalanceSheetTotals",
    "Consistency",
    "GeneralLedgerAccount",
    "GeneralLedgerReport",
    "GeneralLedgerRow",
    "IncomeStatementReport",
    "IncomeStatementTotals",
    "ReportGroup",
    "ReportMetadata",
    "ReportType",
    "ReportWindow",
    "ReportingConfig",
    "ReportingService",
    "VatBucket",
    "VatReport",
    "VatTransaction",
    "aggregate_balances",
    "attach_comparative",
    "build_balance_sheet",
    "build_general_ledger",
    "build_income_statement",
    "build_vat_report",
    "render_to_dict",
]
