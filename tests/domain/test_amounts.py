"""Tests for cent arithmetic and line amount coercion."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_kernel.domain.amounts import (
    has_sub_cent_precision,
    round_cents,
    sum_cents,
    to_amount,
)
from ledger_kernel.domain.dtos import JournalEntryDraft, EntryStatus, LineSpec
from ledger_kernel.exceptions import InvalidLineAmountError


class TestRoundCents:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("0.005", "0.01"),
            ("-0.005", "-0.01"),
            ("2.675", "2.68"),
            ("2.665", "2.67"),
            ("10", "10.00"),
        ],
    )
    def test_half_away_from_zero(self, value, expected):
        assert round_cents(Decimal(value)) == Decimal(expected)

    def test_sum_cents(self):
        assert sum_cents([Decimal("0.1"), Decimal("0.2")]) == Decimal("0.30")
        assert sum_cents([]) == Decimal("0.00")


class TestToAmount:
    def test_accepts_str_int_decimal(self):
        assert to_amount("12.50") == Decimal("12.50")
        assert to_amount(7) == Decimal("7")
        assert to_amount(Decimal("1.01")) == Decimal("1.01")
        assert to_amount(None) == Decimal("0")

    def test_rejects_float(self):
        with pytest.raises(TypeError):
            to_amount(0.1)

    @pytest.mark.parametrize("bad", ["abc", "NaN", "Infinity"])
    def test_rejects_non_finite_or_garbage(self, bad):
        with pytest.raises(ValueError):
            to_amount(bad)

    def test_sub_cent_detection(self):
        assert has_sub_cent_precision(Decimal("1.001"))
        assert not has_sub_cent_precision(Decimal("1.010"))


class TestLineSpec:
    def test_coerces_strings(self):
        spec = LineSpec(account_id=uuid4(), debit="10.5")
        assert spec.debit == Decimal("10.5")
        assert spec.credit == Decimal("0")

    def test_rejects_sub_cent_amount(self):
        with pytest.raises(InvalidLineAmountError) as exc_info:
            LineSpec(account_id=uuid4(), credit=Decimal("1.005"), line_order=3)
        assert exc_info.value.field == "credit"
        assert exc_info.value.line_index == 3

    def test_rejects_float(self):
        with pytest.raises(InvalidLineAmountError):
            LineSpec(account_id=uuid4(), debit=1.5)

    def test_factories(self):
        account = uuid4()
        assert LineSpec.debit_line(account, "5").debit == Decimal("5")
        assert LineSpec.credit_line(account, "5").credit == Decimal("5")

    def test_draft_cannot_start_voided(self):
        with pytest.raises(ValueError):
            JournalEntryDraft(
                organization_id=uuid4(),
                fiscal_year_id=uuid4(),
                entry_date=None,
                description="x",
                lines=(),
                status=EntryStatus.VOIDED,
            )
