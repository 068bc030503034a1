"""
General ledger view (Huvudbok) -- per-account line listing with running balance.

Pure: the caller supplies the posted lines and the opening balance
(``LedgerSelector.opening_balance``).  The running balance is always
debit - credit, regardless of the account's sign convention.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from uuid import UUID

from ledger_kernel.domain.amounts import ZERO, round_cents, sum_cents
from ledger_kernel.domain.dtos import LedgerLine
from ledger_modules.reporting.models import GeneralLedgerAccount, GeneralLedgerRow


def build_general_ledger(
    lines: Iterable[LedgerLine],
    account_id: UUID,
    opening_balance: Decimal = ZERO,
    account_number: str | None = None,
    account_name: str | None = None,
) -> GeneralLedgerAccount:
    """
    Build the ledger of one account.

    Rows are ordered by (entry_date, verification_number); lines of other
    accounts and of non-posted entries are skipped.  account_number and
    account_name are only needed when there are no lines to take them from.
    """
    own = sorted(
        (l for l in lines if l.account_id == account_id and l.is_posted),
        key=lambda l: (l.entry_date, l.verification_number),
    )

    balance = round_cents(opening_balance)
    rows = []
    for line in own:
        balance = round_cents(balance + line.debit - line.credit)
        rows.append(
            GeneralLedgerRow(
                line_id=line.line_id,
                entry_id=line.entry_id,
                entry_date=line.entry_date,
                verification_number=line.verification_number,
                description=line.description,
                debit=line.debit,
                credit=line.credit,
                balance=balance,
            )
        )

    if own:
        account_number = own[0].account_number
        account_name = own[0].account_name

    return GeneralLedgerAccount(
        account_id=account_id,
        account_number=account_number or "",
        account_name=account_name or "",
        opening_balance=round_cents(opening_balance),
        rows=tuple(rows),
        total_debit=sum_cents(l.debit for l in own),
        total_credit=sum_cents(l.credit for l in own),
        closing_balance=balance,
    )
