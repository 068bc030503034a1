"""Write-side services.  All services flush; the caller commits."""

from ledger_kernel.services.account_service import (
    ChartOfAccountsService,
    FiscalYearService,
)
from ledger_kernel.services.journal_manager import JournalEntryManager
from ledger_kernel.services.sequence_service import (
    SequenceService,
    VerificationNumberAllocator,
)

__all__ = [
    "ChartOfAccountsService",
    "FiscalYearService",
    "JournalEntryManager",
    "SequenceService",
    "VerificationNumberAllocator",
]
