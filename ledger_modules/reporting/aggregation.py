"""
Balance aggregation -- posted ledger lines to per-account balances.

Responsibility
--------------
Folds ``LedgerLine`` DTOs into ``AccountBalance`` values for one
``ReportWindow``: debit and credit summed separately, signed balance by
the BAS sign convention, every summed figure rounded to cents.

Architecture position
---------------------
**Modules layer** -- pure functions with ZERO I/O.  The selector fetches,
this module folds, the statement builders classify and group.

Invariants enforced
-------------------
* Only POSTED lines contribute, whatever the caller passes in.
* Output is sorted by account number.

Failure modes
-------------
* ``UnclassifiedAccountError`` from the sign convention for an account
  number outside 1000..8999.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from decimal import Decimal
from uuid import UUID

from ledger_kernel.domain.account_classifier import signed_balance
from ledger_kernel.domain.amounts import ZERO, round_cents
from ledger_kernel.domain.dtos import LedgerLine
from ledger_modules.reporting.models import AccountBalance, ReportWindow


@dataclass
class _Accumulator:
    account_id: UUID
    account_number: str
    account_name: str
    account_name_en: str | None
    debit: Decimal = ZERO
    credit: Decimal = ZERO


def _in_window(line: LedgerLine, window: ReportWindow) -> bool:
    if window.fiscal_year_id is not None and line.fiscal_year_id != window.fiscal_year_id:
        return False
    return window.contains(line.entry_date)


def aggregate_balances(
    lines: Iterable[LedgerLine],
    window: ReportWindow,
) -> tuple[AccountBalance, ...]:
    """
    Sum posted lines per account inside the window.

    Returns:
        One AccountBalance per account with at least one contributing line,
        ordered by account number.
    """
    accumulators: dict[UUID, _Accumulator] = {}
    for line in lines:
        if not line.is_posted or not _in_window(line, window):
            continue
        acc = accumulators.get(line.account_id)
        if acc is None:
            acc = _Accumulator(
                account_id=line.account_id,
                account_number=line.account_number,
                account_name=line.account_name,
                account_name_en=line.account_name_en,
            )
            accumulators[line.account_id] = acc
        acc.debit += line.debit
        acc.credit += line.credit

    balances = []
    for acc in accumulators.values():
        debit = round_cents(acc.debit)
        credit = round_cents(acc.credit)
        balances.append(
            AccountBalance(
                account_id=acc.account_id,
                account_number=acc.account_number,
                account_name=acc.account_name,
                total_debit=debit,
                total_credit=credit,
                signed_balance=round_cents(signed_balance(acc.account_number, debit, credit)),
                account_name_en=acc.account_name_en,
            )
        )
    return tuple(sorted(balances, key=lambda b: b.account_number))


def attach_comparative(
    current: Iterable[AccountBalance],
    comparative: Iterable[AccountBalance],
) -> tuple[AccountBalance, ...]:
    """
    Merge a comparative window's balances into the current ones.

    Accounts that only appear in the comparative window are included with
    zero current totals so their prior-year figure is not lost.
    """
    prior = {b.account_id: b for b in comparative}
    merged: list[AccountBalance] = []
    for balance in current:
        match = prior.pop(balance.account_id, None)
        merged.append(
            replace(
                balance,
                comparative_signed_balance=match.signed_balance if match else ZERO,
            )
        )
    for only_prior in prior.values():
        merged.append(
            AccountBalance(
                account_id=only_prior.account_id,
                account_number=only_prior.account_number,
                account_name=only_prior.account_name,
                total_debit=ZERO,
                total_credit=ZERO,
                signed_balance=ZERO,
                comparative_signed_balance=only_prior.signed_balance,
                account_name_en=only_prior.account_name_en,
            )
        )
    return tuple(sorted(merged, key=lambda b: b.account_number))
