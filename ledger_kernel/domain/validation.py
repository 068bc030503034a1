"""
Journal Entry Validator -- pure balance and structure checks.

Responsibility:
    Decides whether a set of lines may be posted: at least two lines, no
    negative amounts, and debit total equal to credit total after rounding
    each total to cents.

Architecture position:
    Kernel > Domain -- pure, no I/O.  Called by JournalEntryManager whenever
    an entry transitions into POSTED.  Drafts may be unbalanced.

Invariants enforced:
    - A posted entry has >= 2 lines and sum(debit) == sum(credit).
    - The validator never adjusts amounts to make an entry balance.
"""

from decimal import Decimal
from typing import Iterable, Protocol, Sequence

from ledger_kernel.domain.amounts import ZERO, round_cents
from ledger_kernel.domain.dtos import ValidationIssue, ValidationResult
from ledger_kernel.exceptions import (
    InsufficientLinesError,
    InvalidLineAmountError,
    UnbalancedEntryError,
)

MIN_LINES = 2


class HasDebitCredit(Protocol):
    @property
    def debit(self) -> Decimal: ...

    @property
    def credit(self) -> Decimal: ...


def line_totals(lines: Iterable[HasDebitCredit]) -> tuple[Decimal, Decimal, Decimal]:
    """Return (debit_total, credit_total, debit_total - credit_total), in cents."""
    debit_total = ZERO
    credit_total = ZERO
    for line in lines:
        debit_total += line.debit
        credit_total += line.credit
    debit_total = round_cents(debit_total)
    credit_total = round_cents(credit_total)
    return debit_total, credit_total, debit_total - credit_total


def _negative_amount_errors(lines: Sequence[HasDebitCredit]) -> list[InvalidLineAmountError]:
    errors = []
    for index, line in enumerate(lines):
        for field_name in ("debit", "credit"):
            amount = getattr(line, field_name)
            if amount < 0:
                errors.append(
                    InvalidLineAmountError(index, field_name, amount, "negative amount")
                )
    return errors


def _balance_errors(lines: Sequence[HasDebitCredit]) -> list[Exception]:
    errors: list[Exception] = []
    if len(lines) < MIN_LINES:
        errors.append(InsufficientLinesError(len(lines)))
    errors.extend(_negative_amount_errors(lines))
    debit_total, credit_total, difference = line_totals(lines)
    if difference != 0:
        errors.append(UnbalancedEntryError(debit_total, credit_total))
    return errors


def validate_lines(lines: Sequence[HasDebitCredit]) -> ValidationResult:
    """
    Validate lines for posting without raising.

    Returns:
        ValidationResult listing every problem found, each with its code,
        message, field and (for per-line problems) line index.
    """
    errors = _balance_errors(lines)
    if not errors:
        return ValidationResult.success()
    return ValidationResult.failure(
        *(
            ValidationIssue(
                code=err.code,
                message=str(err),
                field=getattr(err, "field", None),
                line_index=getattr(err, "line_index", None),
                details={
                    k: v
                    for k, v in vars(err).items()
                    if k not in ("field", "line_index")
                },
            )
            for err in errors
        )
    )


def ensure_valid_amounts(lines: Sequence[HasDebitCredit]) -> None:
    """
    Structural checks that apply to drafts as well.

    Raises:
        InvalidLineAmountError: for the first negative amount.
    """
    errors = _negative_amount_errors(lines)
    if errors:
        raise errors[0]


def ensure_balanced(lines: Sequence[HasDebitCredit]) -> None:
    """
    Raise the first reason the lines cannot be posted.

    Raises:
        InsufficientLinesError: fewer than two lines.
        InvalidLineAmountError: a negative amount.
        UnbalancedEntryError: debit total differs from credit total.
    """
    errors = _balance_errors(lines)
    if errors:
        raise errors[0]
