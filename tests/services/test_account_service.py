"""
Tests for ChartOfAccountsService and FiscalYearService.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_kernel.domain.account_classifier import allowed_account_classes, classify
from ledger_kernel.domain.bas_chart import BAS_STARTER_CHART
from ledger_kernel.exceptions import (
    AccountClassMismatchError,
    AccountNotFoundError,
    DuplicateAccountNumberError,
    FiscalYearNotFoundError,
    FiscalYearOverlapError,
    SystemAccountProtectedError,
    UnclassifiedAccountError,
)


class TestRegisterAccount:
    def test_class_defaults_from_number(self, chart_service, organization_id, test_actor_id):
        info = chart_service.register_account(organization_id, "1930", "Företagskonto", test_actor_id)
        assert info.account_number == "1930"
        assert info.account_class == "assets"
        assert info.account_type == "detail"
        assert info.is_active

    def test_explicit_alias_class(self, chart_service, organization_id, test_actor_id):
        info = chart_service.register_account(
            organization_id, "2081", "Aktiekapital", test_actor_id, account_class="liabilities"
        )
        assert info.account_class == "liabilities"

    def test_class_mismatch(self, chart_service, organization_id, test_actor_id):
        with pytest.raises(AccountClassMismatchError) as exc_info:
            chart_service.register_account(
                organization_id, "3001", "Försäljning", test_actor_id, account_class="expenses"
            )
        assert exc_info.value.code == "ACCOUNT_CLASS_MISMATCH"

    @pytest.mark.parametrize("number", ["0999", "9100", "ABCD", "193"])
    def test_non_bas_number(self, chart_service, organization_id, test_actor_id, number):
        with pytest.raises(UnclassifiedAccountError):
            chart_service.register_account(organization_id, number, "x", test_actor_id)

    def test_duplicate_number_in_same_organization(self, chart_service, organization_id, test_actor_id):
        chart_service.register_account(organization_id, "1930", "Bank", test_actor_id)
        with pytest.raises(DuplicateAccountNumberError):
            chart_service.register_account(organization_id, "1930", "Bank igen", test_actor_id)

    def test_same_number_in_other_organization(self, chart_service, organization_id, test_actor_id):
        chart_service.register_account(organization_id, "1930", "Bank", test_actor_id)
        other = chart_service.register_account(uuid4(), "1930", "Bank", test_actor_id)
        assert other.account_number == "1930"


class TestMaintainAccount:
    def test_rename(self, chart_service, bas_accounts, organization_id, test_actor_id):
        info = chart_service.rename_account(
            organization_id, bas_accounts["1930"].id, "Bankkonto", test_actor_id, name_en="Bank account"
        )
        assert info.name == "Bankkonto"
        assert info.name_en == "Bank account"

    def test_deactivate_and_list(self, chart_service, bas_accounts, organization_id, test_actor_id):
        chart_service.set_active(organization_id, bas_accounts["1910"].id, False, test_actor_id)
        active = [a.account_number for a in chart_service.list_accounts(organization_id)]
        everything = [a.account_number for a in chart_service.list_accounts(organization_id, include_inactive=True)]
        assert "1910" not in active
        assert "1910" in everything
        assert everything == sorted(everything)

    def test_system_account_is_protected(self, chart_service, organization_id, test_actor_id):
        info = chart_service.register_account(
            organization_id, "2099", "Årets resultat", test_actor_id, is_system=True
        )
        with pytest.raises(SystemAccountProtectedError):
            chart_service.set_active(organization_id, info.id, False, test_actor_id)
        with pytest.raises(SystemAccountProtectedError):
            chart_service.rename_account(organization_id, info.id, "x", test_actor_id)

    def test_unknown_account(self, chart_service, organization_id, test_actor_id):
        with pytest.raises(AccountNotFoundError):
            chart_service.set_active(organization_id, uuid4(), False, test_actor_id)


class TestSeedBASChart:
    def test_seeds_every_template_as_system_account(
        self, chart_service, organization_id, test_actor_id
    ):
        created = chart_service.seed_bas_chart(organization_id, test_actor_id)

        assert [a.account_number for a in created] == [
            t.account_number for t in BAS_STARTER_CHART
        ]
        assert all(a.is_system and a.is_active for a in created)

    def test_seeded_chart_classifies(self, chart_service, organization_id, test_actor_id):
        for info in chart_service.seed_bas_chart(organization_id, test_actor_id):
            classification = classify(info.account_number)
            assert classification.section is not None
            assert info.account_class in allowed_account_classes(info.account_number)

    def test_types_and_vat_rates(self, chart_service, organization_id, test_actor_id):
        seeded = {
            a.account_number: a
            for a in chart_service.seed_bas_chart(organization_id, test_actor_id)
        }
        assert seeded["2610"].default_vat_rate == Decimal("25")
        assert seeded["3042"].default_vat_rate == Decimal("6")
        assert seeded["3300"].default_vat_rate == Decimal("0")
        assert seeded["1930"].default_vat_rate is None
        assert seeded["3000"].account_type == "header"
        assert seeded["8990"].account_type == "total"
        assert seeded["2010"].account_class == "equity"

    def test_seeded_accounts_are_protected(self, chart_service, organization_id, test_actor_id):
        created = chart_service.seed_bas_chart(organization_id, test_actor_id)
        bank = next(a for a in created if a.account_number == "1930")
        with pytest.raises(SystemAccountProtectedError):
            chart_service.set_active(organization_id, bank.id, False, test_actor_id)
        with pytest.raises(SystemAccountProtectedError):
            chart_service.rename_account(organization_id, bank.id, "Bank", test_actor_id)

    def test_existing_numbers_are_skipped(self, chart_service, organization_id, test_actor_id):
        own = chart_service.register_account(organization_id, "1930", "Bankkonto", test_actor_id)

        created = chart_service.seed_bas_chart(organization_id, test_actor_id)
        assert "1930" not in {a.account_number for a in created}
        assert len(created) == len(BAS_STARTER_CHART) - 1

        kept = next(
            a for a in chart_service.list_accounts(organization_id) if a.account_number == "1930"
        )
        assert kept.id == own.id
        assert kept.name == "Bankkonto"
        assert not kept.is_system

    def test_seeding_twice_creates_nothing(
        self, chart_service, organization_id, test_actor_id, captured_logs
    ):
        chart_service.seed_bas_chart(organization_id, test_actor_id)
        assert chart_service.seed_bas_chart(organization_id, test_actor_id) == []
        assert len(chart_service.list_accounts(organization_id)) == len(BAS_STARTER_CHART)

        seeded = [r for r in captured_logs() if r["message"] == "bas_chart_seeded"]
        assert seeded[-1]["accounts_created"] == 0
        assert seeded[-1]["accounts_skipped"] == len(BAS_STARTER_CHART)

    def test_other_organization_is_unaffected(self, chart_service, organization_id, test_actor_id):
        chart_service.seed_bas_chart(organization_id, test_actor_id)
        assert chart_service.list_accounts(uuid4()) == []


class TestFiscalYears:
    def test_overlap_rejected(self, fiscal_year_service, fiscal_year, organization_id, test_actor_id):
        with pytest.raises(FiscalYearOverlapError):
            fiscal_year_service.create_fiscal_year(
                organization_id, "2024b", date(2024, 7, 1), date(2025, 6, 30), test_actor_id
            )

    def test_inverted_dates_rejected(self, fiscal_year_service, organization_id, test_actor_id):
        with pytest.raises(ValueError):
            fiscal_year_service.create_fiscal_year(
                organization_id, "bad", date(2024, 12, 31), date(2024, 1, 1), test_actor_id
            )

    def test_broken_fiscal_year(self, fiscal_year_service, organization_id, test_actor_id):
        info = fiscal_year_service.create_fiscal_year(
            organization_id, "2024/25", date(2024, 5, 1), date(2025, 4, 30), test_actor_id
        )
        assert info.contains_date(date(2025, 1, 15))
        assert not info.contains_date(date(2024, 4, 30))

    def test_close_and_reopen(
        self, fiscal_year_service, fiscal_year, organization_id, test_actor_id, deterministic_clock
    ):
        closed = fiscal_year_service.close_fiscal_year(organization_id, fiscal_year.id, test_actor_id)
        assert closed.is_closed
        assert closed.closed_at == deterministic_clock.now()
        assert closed.closed_by_id == test_actor_id

        reopened = fiscal_year_service.reopen_fiscal_year(organization_id, fiscal_year.id, test_actor_id)
        assert not reopened.is_closed
        assert reopened.closed_at is None

    def test_other_organization_cannot_load(self, fiscal_year_service, fiscal_year):
        with pytest.raises(FiscalYearNotFoundError):
            fiscal_year_service.get_fiscal_year(uuid4(), fiscal_year.id)
