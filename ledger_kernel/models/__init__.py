"""ORM models for the ledger kernel."""

from ledger_kernel.models.account import Account, AccountClass, AccountType
from ledger_kernel.models.fiscal_year import FiscalYear
from ledger_kernel.models.journal import (
    JournalEntry,
    JournalEntryLine,
    JournalEntryStatus,
)
from ledger_kernel.models.verification_sequence import VerificationSequence

__all__ = [
    "Account",
    "AccountClass",
    "AccountType",
    "FiscalYear",
    "JournalEntry",
    "JournalEntryLine",
    "JournalEntryStatus",
    "VerificationSequence",
]
