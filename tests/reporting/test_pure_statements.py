"""
Pure tests for the statement builders.

NO database, NO I/O.  Balances are built by hand with make_balance().
"""

from __future__ import annotations

import dataclasses
from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.exceptions import UnclassifiedAccountError
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import ReportType, ReportWindow
from ledger_modules.reporting.statements import (
    PERIOD_RESULT_ACCOUNT_NUMBER,
    build_balance_sheet,
    build_income_statement,
    compute_period_result,
    render_to_dict,
)
from tests.reporting.conftest import TEST_ORG_ID, make_balance, make_metadata

BS_METADATA = make_metadata(ReportType.BALANCE_SHEET)
IS_METADATA = make_metadata(
    ReportType.INCOME_STATEMENT,
    ReportWindow.period(date(2024, 1, 1), date(2024, 12, 31)),
)


def _config(**overrides) -> ReportingConfig:
    return ReportingConfig(**overrides)


# =============================================================================
# Balance sheet
# =============================================================================


class TestBalanceSheetStructure:
    def test_all_sections_present_in_order(self):
        report = build_balance_sheet((), None, _config(), BS_METADATA)
        assert [s.key for s in report.sections] == [
            "fixed_assets",
            "current_assets",
            "equity",
            "untaxed_reserves",
            "provisions",
            "long_term_liabilities",
            "short_term_liabilities",
        ]
        assert [g.key for g in report.section("current_assets").subgroups] == [
            "inventory",
            "receivables",
            "investments",
            "cash",
        ]
        assert report.totals.assets == Decimal("0")
        assert report.totals.is_balanced

    def test_equipment_purchase_lands_in_tangible_fixed_assets(self):
        report = build_balance_sheet(
            (make_balance("1200", debit="5000"),), None, _config(), BS_METADATA
        )
        tangible = report.section("fixed_assets").subgroup("tangible")
        assert [a.account_number for a in tangible.accounts] == ["1200"]
        assert tangible.total == Decimal("5000.00")
        assert report.section("fixed_assets").total == Decimal("5000.00")
        assert report.totals.assets == Decimal("5000.00")
        assert report.totals.equity_and_liabilities == Decimal("0.00")
        assert not report.totals.is_balanced

    def test_balanced_opening(self):
        balances = (
            make_balance("1930", debit="25000"),
            make_balance("2081", credit="25000"),
        )
        report = build_balance_sheet(balances, None, _config(), BS_METADATA)
        assert report.section("equity").subgroup("restricted").total == Decimal("25000.00")
        assert report.totals.assets == Decimal("25000.00")
        assert report.totals.equity_and_liabilities == Decimal("25000.00")
        assert report.totals.is_balanced

    def test_flat_sections_hold_accounts_directly(self):
        report = build_balance_sheet(
            (make_balance("2440", credit="800"),), None, _config(), BS_METADATA
        )
        section = report.section("short_term_liabilities")
        assert section.subgroups == ()
        assert section.accounts[0].account_number == "2440"
        assert section.total == Decimal("800.00")

    def test_income_statement_accounts_ignored(self):
        report = build_balance_sheet(
            (make_balance("3001", credit="1000"),), None, _config(), BS_METADATA
        )
        assert all(not list(s.iter_accounts()) for s in report.sections)
        assert report.period_result is None

    def test_subtotals_sum(self):
        balances = (
            make_balance("1220", debit="100"),
            make_balance("1510", debit="200.50"),
            make_balance("1910", debit="10"),
            make_balance("1930", debit="0.25"),
        )
        report = build_balance_sheet(balances, None, _config(), BS_METADATA)
        current_assets = report.section("current_assets")
        assert current_assets.total == sum(g.total for g in current_assets.subgroups)
        assert report.totals.assets == sum(
            report.section(k).total for k in ("fixed_assets", "current_assets")
        )
        assert report.totals.assets == Decimal("310.75")

    def test_unclassifiable_account_aborts(self):
        stray = dataclasses.replace(make_balance("1930", debit="1"), account_number="9100")
        with pytest.raises(UnclassifiedAccountError):
            build_balance_sheet(
                (make_balance("1930", debit="1"), stray), None, _config(), BS_METADATA
            )


class TestZeroBalances:
    def test_hidden_by_default(self):
        report = build_balance_sheet(
            (make_balance("1930", debit="100", credit="100"),), None, _config(), BS_METADATA
        )
        assert report.section("current_assets").subgroup("cash").accounts == ()

    def test_shown_when_configured(self):
        report = build_balance_sheet(
            (make_balance("1930", debit="100", credit="100"),),
            None,
            _config(include_zero_balances=True),
            BS_METADATA,
        )
        (account,) = report.section("current_assets").subgroup("cash").accounts
        assert account.signed_balance == Decimal("0")

    def test_nonzero_comparative_keeps_line(self):
        report = build_balance_sheet(
            (make_balance("1930"),),
            (make_balance("1930", debit="40"),),
            _config(),
            BS_METADATA,
        )
        (account,) = report.section("current_assets").subgroup("cash").accounts
        assert account.comparative_signed_balance == Decimal("40")


class TestBalanceSheetComparative:
    def test_comparative_totals(self):
        report = build_balance_sheet(
            (make_balance("1930", debit="300"), make_balance("2081", credit="300")),
            (make_balance("1930", debit="100"), make_balance("2081", credit="100")),
            _config(),
            BS_METADATA,
        )
        assert report.totals.assets_comparative == Decimal("100.00")
        assert report.totals.equity_and_liabilities_comparative == Decimal("100.00")
        assert report.section("current_assets").comparative_total == Decimal("100.00")

    def test_no_comparative_leaves_none(self):
        report = build_balance_sheet((make_balance("1930", debit="1"),), None, _config(), BS_METADATA)
        assert report.totals.assets_comparative is None
        assert report.section("current_assets").comparative_total is None


class TestPeriodResult:
    def test_compute_period_result(self):
        balances = (
            make_balance("3001", credit="1000", comparative="500"),
            make_balance("5010", debit="400", comparative="100"),
            make_balance("1930", debit="600"),
        )
        assert compute_period_result(balances) == (Decimal("600.00"), Decimal("400.00"))

    def test_period_result_balances_the_sheet(self):
        balances = (
            make_balance("1930", debit="25600"),
            make_balance("2081", credit="25000"),
            make_balance("3001", credit="1000"),
            make_balance("5010", debit="400"),
        )
        report = build_balance_sheet(
            balances, None, _config(include_period_result_in_equity=True), BS_METADATA
        )
        non_restricted = report.section("equity").subgroup("non_restricted")
        (line,) = non_restricted.accounts
        assert line.account_number == PERIOD_RESULT_ACCOUNT_NUMBER
        assert line.signed_balance == Decimal("600.00")
        assert report.period_result == Decimal("600.00")
        assert report.totals.is_balanced

    def test_period_result_line_id_is_stable(self):
        config = _config(include_period_result_in_equity=True)
        first = build_balance_sheet((), None, config, BS_METADATA)
        second = build_balance_sheet((), None, config, BS_METADATA)
        first_line = first.section("equity").subgroup("non_restricted").accounts[0]
        second_line = second.section("equity").subgroup("non_restricted").accounts[0]
        assert first_line.account_id == second_line.account_id
        assert first_line.signed_balance == Decimal("0.00")


class TestLanguage:
    def test_swedish_names_by_default(self):
        report = build_balance_sheet((), None, _config(), BS_METADATA)
        assert report.section("fixed_assets").name_localized == "Anläggningstillgångar"

    def test_english_names(self):
        report = build_balance_sheet((), None, _config(language="en"), BS_METADATA)
        section = report.section("fixed_assets")
        assert section.name == "Anläggningstillgångar"
        assert section.name_localized == "Fixed assets"
        assert section.subgroup("tangible").name_localized == "Tangible assets"


# =============================================================================
# Income statement
# =============================================================================


class TestIncomeStatement:
    def test_sections_in_order(self):
        report = build_income_statement((), None, _config(), IS_METADATA)
        assert [s.key for s in report.sections] == [
            "operating_revenue",
            "operating_expenses",
            "financial_items",
            "appropriations",
            "taxes",
        ]
        assert report.totals.net_result == Decimal("0")

    def test_balance_sheet_accounts_ignored(self):
        report = build_income_statement(
            (make_balance("1930", debit="1000"),), None, _config(), IS_METADATA
        )
        assert report.totals.operating_result == Decimal("0")

    def test_result_chain(self):
        balances = (
            make_balance("3001", credit="1000"),
            make_balance("4010", debit="200"),
            make_balance("5010", debit="100"),
            make_balance("8310", credit="50"),
            make_balance("8410", debit="20"),
            make_balance("8810", debit="100"),
            make_balance("8910", credit="120"),
        )
        report = build_income_statement(balances, None, _config(), IS_METADATA)
        totals = report.totals

        assert report.section("operating_revenue").total == Decimal("1000.00")
        assert report.section("operating_expenses").total == Decimal("300.00")
        assert report.section("financial_items").subgroup("financial_income").total == Decimal("50.00")
        assert report.section("financial_items").subgroup("financial_expenses").total == Decimal("-20.00")

        assert totals.operating_result == Decimal("700.00")
        assert totals.result_after_financial == Decimal("730.00")
        assert totals.result_before_tax == Decimal("630.00")
        assert totals.net_result == totals.result_before_tax - report.section("taxes").total
        assert totals.net_result == Decimal("510.00")

    def test_comparative_chain_is_independent(self):
        current = (make_balance("3001", credit="1000"), make_balance("5010", debit="400"))
        prior = (make_balance("3001", credit="800"), make_balance("5010", debit="500"))
        report = build_income_statement(current, prior, _config(), IS_METADATA)
        assert report.totals.operating_result == Decimal("600.00")
        assert report.totals.operating_result_comparative == Decimal("300.00")
        assert report.totals.net_result_comparative == Decimal("300.00")

    def test_no_comparative(self):
        report = build_income_statement((make_balance("3001", credit="1"),), None, _config(), IS_METADATA)
        assert report.totals.net_result_comparative is None


class TestRenderToDict:
    def test_plain_data(self):
        report = build_balance_sheet(
            (make_balance("1930", debit="10.50"),), None, _config(), BS_METADATA
        )
        data = render_to_dict(report)
        assert data["metadata"]["report_type"] == "balance_sheet"
        assert data["metadata"]["organization_id"] == str(TEST_ORG_ID)
        assert data["metadata"]["window"]["as_of_date"] == "2024-12-31"
        cash = data["sections"][1]["subgroups"][3]
        assert cash["key"] == "cash"
        assert cash["total"] == "10.50"
        assert data["totals"]["is_balanced"] is False
