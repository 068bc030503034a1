"""
Statement builders -- Balansräkning and Resultaträkning.

Responsibility
--------------
Classifies per-account balances into the BAS section tree and folds them
into frozen ``ReportGroup`` hierarchies with totals, for the current
window and an optional comparative window.

Architecture position
---------------------
**Modules layer** -- pure transformations with ZERO I/O.  Called by
``ReportingService`` after ``aggregate_balances``; callable directly in
tests with hand-built ``AccountBalance`` tuples.

Invariants enforced
-------------------
* Subsection total = sum of members; section total = sum of subsection
  totals (sum of members for flat sections); grand totals = sum of
  section totals.  Every total is rounded to cents where it is computed.
* The balance sheet only sees accounts below 3000; the income statement
  only sees accounts from 3000 up.
* All sections and subsections appear in a fixed order, empty or not.

Failure modes
-------------
* ``ClassificationError`` for a balance whose account number falls
  outside the BAS ranges.  Nothing is built.

Audit relevance
---------------
* The section ranges live in ``account_classifier`` and are the single
  source of truth for both statements and for account registration.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid5

from ledger_kernel.domain.account_classifier import (
    ASSET_SECTIONS,
    BALANCE_SHEET_SECTIONS,
    INCOME_STATEMENT_SECTIONS,
    SectionDefinition,
    SignConvention,
    Statement,
    SubsectionDefinition,
    classify,
)
from ledger_kernel.domain.amounts import ZERO, round_cents, sum_cents
from ledger_modules.reporting.aggregation import attach_comparative
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    AccountBalance,
    BalanceSheetReport,
    BalanceSheetTotals,
    IncomeStatementReport,
    IncomeStatementTotals,
    ReportGroup,
    ReportMetadata,
)

# Tolerance for the assets == equity + liabilities check
BALANCE_TOLERANCE = Decimal("0.01")

PERIOD_RESULT_ACCOUNT_NUMBER = "2099"
PERIOD_RESULT_NAME = "Årets resultat"
PERIOD_RESULT_NAME_EN = "Profit for the year"

# Stable id for the synthetic period-result line
_PERIOD_RESULT_NAMESPACE = UUID("6f1c2a0e-3b7d-4c8e-9a51-2d0f7e4b9c13")


# =========================================================================
# Helpers
# =========================================================================


def _localized(name: str, name_en: str, config: ReportingConfig) -> str:
    return name_en if config.language == "en" else name


def _is_visible(balance: AccountBalance, config: ReportingConfig) -> bool:
    if config.include_zero_balances:
        return True
    return balance.signed_balance != ZERO or bool(balance.comparative_signed_balance)


def _comparative_total(
    members: Iterable[Decimal | None], has_comparative: bool
) -> Decimal | None:
    if not has_comparative:
        return None
    return sum_cents(v or ZERO for v in members)


def _make_group(
    definition: SectionDefinition | SubsectionDefinition,
    accounts: Sequence[AccountBalance],
    config: ReportingConfig,
    has_comparative: bool,
) -> ReportGroup:
    return ReportGroup(
        key=definition.key,
        name=definition.name,
        name_localized=_localized(definition.name, definition.name_en, config),
        accounts=tuple(accounts),
        total=sum_cents(a.signed_balance for a in accounts),
        comparative_total=_comparative_total(
            (a.comparative_signed_balance for a in accounts), has_comparative
        ),
    )


def _make_section(
    definition: SectionDefinition,
    members: dict[str | None, list[AccountBalance]],
    config: ReportingConfig,
    has_comparative: bool,
) -> ReportGroup:
    if definition.is_flat:
        return _make_group(definition, members.get(None, []), config, has_comparative)

    subgroups = tuple(
        _make_group(sub, members.get(sub.key, []), config, has_comparative)
        for sub in definition.subsections
    )
    return ReportGroup(
        key=definition.key,
        name=definition.name,
        name_localized=_localized(definition.name, definition.name_en, config),
        accounts=(),
        total=sum_cents(g.total for g in subgroups),
        comparative_total=_comparative_total(
            (g.comparative_total for g in subgroups), has_comparative
        ),
        subgroups=subgroups,
    )


def _build_sections(
    balances: Iterable[AccountBalance],
    definitions: tuple[SectionDefinition, ...],
    statement: Statement,
    config: ReportingConfig,
    has_comparative: bool,
    extra: dict[tuple[str, str | None], list[AccountBalance]] | None = None,
) -> tuple[ReportGroup, ...]:
    """Classify balances of one statement and fold them into section groups."""
    buckets: dict[str, dict[str | None, list[AccountBalance]]] = {
        d.key: {} for d in definitions
    }
    for balance in balances:
        classification = classify(balance.account_number)
        if classification.statement is not statement:
            continue
        if not _is_visible(balance, config):
            continue
        buckets[classification.section].setdefault(
            classification.subsection, []
        ).append(balance)

    for (section, subsection), synthetic in (extra or {}).items():
        buckets[section].setdefault(subsection, []).extend(synthetic)

    return tuple(
        _make_section(d, buckets[d.key], config, has_comparative) for d in definitions
    )


def _merge(
    current: Iterable[AccountBalance],
    comparative: Iterable[AccountBalance] | None,
) -> tuple[tuple[AccountBalance, ...], bool]:
    if comparative is None:
        return tuple(current), False
    return attach_comparative(current, comparative), True


def _total_of(sections: Iterable[ReportGroup], keys: Iterable[str]) -> Decimal:
    wanted = set(keys)
    return sum_cents(s.total for s in sections if s.key in wanted)


def _comparative_of(sections: Iterable[ReportGroup], keys: Iterable[str]) -> Decimal:
    wanted = set(keys)
    return sum_cents(s.comparative_total or ZERO for s in sections if s.key in wanted)


def compute_period_result(
    balances: Iterable[AccountBalance],
) -> tuple[Decimal, Decimal]:
    """
    Net result of all income statement accounts, as (current, comparative).

    Computed as credit - debit so a profit is positive, which is how it
    sits in credit-normal equity.
    """
    current = ZERO
    comparative = ZERO
    for balance in balances:
        classification = classify(balance.account_number)
        if classification.statement is not Statement.INCOME_STATEMENT:
            continue
        if classification.sign_convention is SignConvention.DEBIT_NORMAL:
            current -= balance.signed_balance
            comparative -= balance.comparative_signed_balance or ZERO
        else:
            current += balance.signed_balance
            comparative += balance.comparative_signed_balance or ZERO
    return round_cents(current), round_cents(comparative)


# =========================================================================
# Balance Sheet (Balansräkning)
# =========================================================================


def build_balance_sheet(
    current: Iterable[AccountBalance],
    comparative: Iterable[AccountBalance] | None,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> BalanceSheetReport:
    """
    Build a balance sheet from per-account balances.

    Args:
        current: Balances of the reporting window.  Income statement
            accounts are ignored except for the optional period result.
        comparative: Balances of the comparative window, or None.
        config: Presentation options.
        metadata: Pre-built report metadata.

    Raises:
        ClassificationError: a balance on a non-BAS account number.
    """
    balances, has_comparative = _merge(current, comparative)

    extra = None
    period_result = None
    if config.include_period_result_in_equity:
        period_result, period_result_comparative = compute_period_result(balances)
        synthetic = AccountBalance(
            account_id=uuid5(_PERIOD_RESULT_NAMESPACE, str(metadata.organization_id)),
            account_number=PERIOD_RESULT_ACCOUNT_NUMBER,
            account_name=PERIOD_RESULT_NAME,
            total_debit=ZERO,
            total_credit=ZERO,
            signed_balance=period_result,
            comparative_signed_balance=(
                period_result_comparative if has_comparative else None
            ),
            account_name_en=PERIOD_RESULT_NAME_EN,
        )
        extra = {("equity", "non_restricted"): [synthetic]}

    sections = _build_sections(
        balances,
        BALANCE_SHEET_SECTIONS,
        Statement.BALANCE_SHEET,
        config,
        has_comparative,
        extra=extra,
    )

    liability_keys = [s.key for s in sections if s.key not in ASSET_SECTIONS]
    assets = _total_of(sections, ASSET_SECTIONS)
    equity_and_liabilities = _total_of(sections, liability_keys)

    totals = BalanceSheetTotals(
        assets=assets,
        equity_and_liabilities=equity_and_liabilities,
        is_balanced=abs(assets - equity_and_liabilities) < BALANCE_TOLERANCE,
        assets_comparative=(
            _comparative_of(sections, ASSET_SECTIONS) if has_comparative else None
        ),
        equity_and_liabilities_comparative=(
            _comparative_of(sections, liability_keys) if has_comparative else None
        ),
    )
    return BalanceSheetReport(
        metadata=metadata,
        sections=sections,
        totals=totals,
        period_result=period_result,
    )


# =========================================================================
# Income Statement (Resultaträkning)
# =========================================================================


def _result_chain(
    revenue: Decimal,
    expenses: Decimal,
    financial: Decimal,
    appropriations: Decimal,
    taxes: Decimal,
) -> tuple[Decimal, Decimal, Decimal, Decimal]:
    operating_result = round_cents(revenue - expenses)
    result_after_financial = round_cents(operating_result + financial)
    result_before_tax = round_cents(result_after_financial + appropriations)
    net_result = round_cents(result_before_tax - taxes)
    return operating_result, result_after_financial, result_before_tax, net_result


def build_income_statement(
    current: Iterable[AccountBalance],
    comparative: Iterable[AccountBalance] | None,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> IncomeStatementReport:
    """
    Build an income statement from per-account balances.

    Section totals are signed by each account's convention: revenue,
    financial items, appropriations and taxes credit-normal, operating
    expenses debit-normal.

    Raises:
        ClassificationError: a balance on a non-BAS account number.
    """
    balances, has_comparative = _merge(current, comparative)
    sections = _build_sections(
        balances,
        INCOME_STATEMENT_SECTIONS,
        Statement.INCOME_STATEMENT,
        config,
        has_comparative,
    )
    by_key = {s.key: s for s in sections}

    def chain(pick) -> tuple[Decimal, Decimal, Decimal, Decimal]:
        return _result_chain(
            pick(by_key["operating_revenue"]),
            pick(by_key["operating_expenses"]),
            pick(by_key["financial_items"]),
            pick(by_key["appropriations"]),
            pick(by_key["taxes"]),
        )

    operating, after_financial, before_tax, net = chain(lambda g: g.total)
    if has_comparative:
        comparative_chain: tuple[Decimal | None, ...] = chain(
            lambda g: g.comparative_total or ZERO
        )
    else:
        comparative_chain = (None, None, None, None)

    totals = IncomeStatementTotals(
        operating_result=operating,
        result_after_financial=after_financial,
        result_before_tax=before_tax,
        net_result=net,
        operating_result_comparative=comparative_chain[0],
        result_after_financial_comparative=comparative_chain[1],
        result_before_tax_comparative=comparative_chain[2],
        net_result_comparative=comparative_chain[3],
    )
    return IncomeStatementReport(metadata=metadata, sections=sections, totals=totals)


# =========================================================================
# Rendering
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to plain data for JSON serialization.

    Decimal becomes str (preserving precision), UUID str, date ISO format,
    Enum its value; tuples become lists.
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
