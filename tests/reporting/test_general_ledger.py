"""
Pure tests for the general ledger view.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from ledger_kernel.domain.dtos import EntryStatus
from ledger_modules.reporting.general_ledger import build_general_ledger
from tests.reporting.conftest import account_id_for, make_line


class TestGeneralLedger:
    def test_running_balance_from_opening(self):
        lines = [
            make_line("1930", debit="100", entry_date=date(2024, 2, 1), verification_number=3),
            make_line("1930", credit="30", entry_date=date(2024, 1, 15), verification_number=2),
            make_line("1930", debit="5", entry_date=date(2024, 1, 15), verification_number=1),
        ]
        ledger = build_general_ledger(lines, account_id_for("1930"), opening_balance=Decimal("50"))

        assert [r.verification_number for r in ledger.rows] == [1, 2, 3]
        assert [r.balance for r in ledger.rows] == [
            Decimal("55.00"),
            Decimal("25.00"),
            Decimal("125.00"),
        ]
        assert ledger.opening_balance == Decimal("50.00")
        assert ledger.total_debit == Decimal("105.00")
        assert ledger.total_credit == Decimal("30.00")
        assert ledger.closing_balance == Decimal("125.00")
        assert ledger.account_number == "1930"

    def test_other_accounts_and_drafts_skipped(self):
        lines = [
            make_line("1930", debit="10"),
            make_line("1510", debit="20"),
            make_line("1930", debit="40", status=EntryStatus.DRAFT),
        ]
        ledger = build_general_ledger(lines, account_id_for("1930"))
        assert len(ledger.rows) == 1
        assert ledger.closing_balance == Decimal("10.00")

    def test_balance_is_debit_minus_credit_for_credit_accounts(self):
        ledger = build_general_ledger(
            [make_line("3001", credit="1000")], account_id_for("3001")
        )
        assert ledger.closing_balance == Decimal("-1000.00")

    def test_empty_account_uses_given_names(self):
        ledger = build_general_ledger(
            [],
            account_id_for("1910"),
            opening_balance=Decimal("12.5"),
            account_number="1910",
            account_name="Kassa",
        )
        assert ledger.rows == ()
        assert ledger.account_name == "Kassa"
        assert ledger.closing_balance == Decimal("12.50")
