"""Tests for the typed exception hierarchy (ledger_kernel/exceptions.py)."""

import inspect
from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_kernel import exceptions
from ledger_kernel.exceptions import (
    AccountClassMismatchError,
    AllocatorError,
    ClassificationError,
    ClosedFiscalYearError,
    EntryNotEditableError,
    InvalidLineAmountError,
    LedgerKernelError,
    ReportUnavailableError,
    SequenceAllocationError,
    StateError,
    UnbalancedEntryError,
    UnclassifiedAccountError,
    ValidationError,
)


def _exception_classes():
    return [
        cls
        for _, cls in inspect.getmembers(exceptions, inspect.isclass)
        if issubclass(cls, LedgerKernelError)
    ]


class TestHierarchy:
    @pytest.mark.parametrize(
        "error, base",
        [
            (UnbalancedEntryError(Decimal("1"), Decimal("2")), ValidationError),
            (EntryNotEditableError(uuid4(), "posted"), StateError),
            (UnclassifiedAccountError("9999"), ClassificationError),
            (SequenceAllocationError(uuid4(), uuid4(), "timeout"), AllocatorError),
        ],
    )
    def test_categories(self, error, base):
        assert isinstance(error, base)
        assert isinstance(error, LedgerKernelError)

    def test_every_class_has_its_own_code(self):
        codes = [cls.code for cls in _exception_classes()]
        assert len(codes) == len(set(codes))
        assert all(code.isupper() for code in codes)


class TestStructuredPayload:
    def test_unbalanced_entry_reports_difference(self):
        error = UnbalancedEntryError(Decimal("500.00"), Decimal("400.00"))
        assert error.difference == Decimal("100.00")
        assert error.to_dict() == {
            "code": "UNBALANCED_ENTRY",
            "message": str(error),
            "debit_total": "500.00",
            "credit_total": "400.00",
            "difference": "100.00",
            "field": "lines",
        }

    def test_line_addressable(self):
        error = InvalidLineAmountError(2, "debit", Decimal("-5"), "negative")
        payload = error.to_dict()
        assert payload["line_index"] == 2
        assert payload["field"] == "debit"
        assert "line 2" in payload["message"]

    def test_state_errors_carry_status(self):
        assert EntryNotEditableError(uuid4(), "posted").status == "posted"
        assert ClosedFiscalYearError(uuid4(), "2023").status == "closed"

    def test_class_mismatch(self):
        error = AccountClassMismatchError("3001", "assets", "revenue")
        assert error.to_dict()["expected"] == "revenue"

    def test_report_unavailable_hides_account_numbers(self):
        error = ReportUnavailableError("balance_sheet")
        assert error.to_dict() == {
            "code": "REPORT_UNAVAILABLE",
            "message": str(error),
            "report_type": "balance_sheet",
        }
        assert "account number" not in str(error).lower()
