"""
Pure domain layer.

Data transfer objects and domain logic with NO dependencies on the ORM, the
database or I/O.  All domain objects are immutable and deterministic.
"""

from ledger_kernel.domain.account_classifier import (
    AccountClassification,
    SignConvention,
    Statement,
    classify,
    signed_balance,
)
from ledger_kernel.domain.amounts import ZERO, round_cents
from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.dtos import (
    EntryStatus,
    JournalEntryDraft,
    JournalEntryRecord,
    JournalEntryUpdate,
    JournalLineRecord,
    LedgerLine,
    LineSpec,
    ValidationIssue,
    ValidationResult,
)
from ledger_kernel.domain.validation import (
    ensure_balanced,
    line_totals,
    validate_lines,
)

__all__ = [
    "AccountClassification",
    "SignConvention",
    "Statement",
    "classify",
    "signed_balance",
    "ZERO",
    "round_cents",
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "EntryStatus",
    "JournalEntryDraft",
    "JournalEntryRecord",
    "JournalEntryUpdate",
    "JournalLineRecord",
    "LedgerLine",
    "LineSpec",
    "ValidationIssue",
    "ValidationResult",
    "ensure_balanced",
    "line_totals",
    "validate_lines",
]
