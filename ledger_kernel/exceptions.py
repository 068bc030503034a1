"""
Typed exception hierarchy for the ledger kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the ledger (API layers, batch importers, report exporters) need to
react to failures without parsing message strings.  Every error therefore:

  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE attribute (machine-readable, API-safe)
  3. Carries structured DATA (amounts, ids, statuses) as attributes

Example:
    try:
        manager.post_entry(org_id, entry_id, actor_id=user_id)
    except UnbalancedEntryError as e:
        api_response(code=e.code, difference=str(e.difference))
    except StateError as e:
        api_response(code=e.code, status=e.status)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- ValidationError                  recoverable: caller fixes the input
    |   +-- InsufficientLinesError
    |   +-- UnbalancedEntryError
    |   +-- InvalidLineAmountError
    |   +-- EntryDateOutsideFiscalYearError
    |   +-- InactiveAccountError
    |   +-- FiscalYearOverlapError
    |
    +-- StateError                       operation not allowed in current state
    |   +-- EntryNotEditableError
    |   +-- InvalidStatusTransitionError
    |   +-- ClosedFiscalYearError
    |   +-- EntryAlreadyReversedError
    |
    +-- NotFoundError
    |   +-- JournalEntryNotFoundError
    |   +-- FiscalYearNotFoundError
    |   +-- AccountNotFoundError
    |
    +-- ClassificationError              account number outside the BAS ranges
    |   +-- UnclassifiedAccountError
    |   +-- AccountClassMismatchError
    |
    +-- AllocatorError                   verification numbering failed
    |   +-- SequenceAllocationError
    |   +-- DuplicateVerificationNumberError
    |
    +-- AccountError
    |   +-- DuplicateAccountNumberError
    |   +-- SystemAccountProtectedError
    |
    +-- ReportUnavailableError

===============================================================================
ERROR CODES
===============================================================================

    Code                              | Exception
    ----------------------------------+-----------------------------------
    INSUFFICIENT_LINES                | InsufficientLinesError
    UNBALANCED_ENTRY                  | UnbalancedEntryError
    INVALID_LINE_AMOUNT               | InvalidLineAmountError
    ENTRY_DATE_OUTSIDE_FISCAL_YEAR    | EntryDateOutsideFiscalYearError
    INACTIVE_ACCOUNT                  | InactiveAccountError
    FISCAL_YEAR_OVERLAP               | FiscalYearOverlapError
    NOT_EDITABLE                      | EntryNotEditableError
    INVALID_STATUS_TRANSITION         | InvalidStatusTransitionError
    FISCAL_YEAR_CLOSED                | ClosedFiscalYearError
    ENTRY_ALREADY_REVERSED            | EntryAlreadyReversedError
    JOURNAL_ENTRY_NOT_FOUND           | JournalEntryNotFoundError
    FISCAL_YEAR_NOT_FOUND             | FiscalYearNotFoundError
    ACCOUNT_NOT_FOUND                 | AccountNotFoundError
    UNCLASSIFIED_ACCOUNT              | UnclassifiedAccountError
    ACCOUNT_CLASS_MISMATCH            | AccountClassMismatchError
    SEQUENCE_ALLOCATION_FAILED        | SequenceAllocationError
    DUPLICATE_VERIFICATION_NUMBER     | DuplicateVerificationNumberError
    DUPLICATE_ACCOUNT_NUMBER          | DuplicateAccountNumberError
    SYSTEM_ACCOUNT_PROTECTED          | SystemAccountProtectedError
    REPORT_UNAVAILABLE                | ReportUnavailableError

===============================================================================
"""

from decimal import Decimal
from typing import Any


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"

    def to_dict(self) -> dict[str, Any]:
        """Structured payload: code, message and public attributes."""
        payload: dict[str, Any] = {"code": self.code, "message": str(self)}
        for key, value in vars(self).items():
            if key.startswith("_"):
                continue
            payload[key] = str(value) if isinstance(value, Decimal) else value
        return payload


# Validation exceptions


class ValidationError(LedgerKernelError):
    """Base exception for input the caller can correct."""

    code: str = "VALIDATION_ERROR"


class InsufficientLinesError(ValidationError):
    """A postable entry needs at least two lines."""

    code: str = "INSUFFICIENT_LINES"

    def __init__(self, line_count: int):
        self.line_count = line_count
        self.field = "lines"
        super().__init__("Journal entry must have at least two lines")


class UnbalancedEntryError(ValidationError):
    """Journal entry debits do not equal credits."""

    code: str = "UNBALANCED_ENTRY"

    def __init__(self, debit_total: Decimal, credit_total: Decimal):
        self.debit_total = debit_total
        self.credit_total = credit_total
        self.difference = debit_total - credit_total
        self.field = "lines"
        super().__init__(
            f"Entry is not balanced. Debit: {debit_total}, "
            f"Credit: {credit_total}, Difference: {self.difference}"
        )


class InvalidLineAmountError(ValidationError):
    """A line amount is negative or finer than one cent."""

    code: str = "INVALID_LINE_AMOUNT"

    def __init__(self, line_index: int | None, field: str, amount: Any, reason: str):
        self.line_index = line_index
        self.field = field
        self.amount = amount
        self.reason = reason
        location = f"line {line_index}" if line_index is not None else "line"
        super().__init__(f"Invalid {field} on {location}: {amount} ({reason})")


class EntryDateOutsideFiscalYearError(ValidationError):
    """Entry date does not fall within the fiscal year it is booked in."""

    code: str = "ENTRY_DATE_OUTSIDE_FISCAL_YEAR"

    def __init__(self, entry_date: Any, start_date: Any, end_date: Any):
        self.entry_date = entry_date
        self.start_date = start_date
        self.end_date = end_date
        self.field = "entry_date"
        super().__init__(
            f"Entry date {entry_date} is outside fiscal year "
            f"{start_date} - {end_date}"
        )


class InactiveAccountError(ValidationError):
    """Posting to an account that has been deactivated."""

    code: str = "INACTIVE_ACCOUNT"

    def __init__(self, account_number: str):
        self.account_number = account_number
        self.field = "lines"
        super().__init__(f"Account {account_number} is inactive")


# State exceptions


class StateError(LedgerKernelError):
    """Base exception for operations not allowed in the current state."""

    code: str = "STATE_ERROR"


class EntryNotEditableError(StateError):
    """Only draft entries accept edits or deletion."""

    code: str = "NOT_EDITABLE"

    def __init__(self, entry_id: Any, status: str):
        self.entry_id = entry_id
        self.status = status
        super().__init__(
            f"Journal entry {entry_id} is {status}; only draft entries can be changed"
        )


class InvalidStatusTransitionError(StateError):
    """Requested status change is not part of the entry lifecycle."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, entry_id: Any, status: str, target: str):
        self.entry_id = entry_id
        self.status = status
        self.target = target
        super().__init__(
            f"Cannot move journal entry {entry_id} from {status} to {target}"
        )


class ClosedFiscalYearError(StateError):
    """Posting into a fiscal year that has been closed."""

    code: str = "FISCAL_YEAR_CLOSED"

    def __init__(self, fiscal_year_id: Any, name: str):
        self.fiscal_year_id = fiscal_year_id
        self.name = name
        self.status = "closed"
        super().__init__(f"Fiscal year {name} is closed")


class EntryAlreadyReversedError(StateError):
    """Entry has already been reversed."""

    code: str = "ENTRY_ALREADY_REVERSED"

    def __init__(self, entry_id: Any):
        self.entry_id = entry_id
        self.status = "posted"
        super().__init__(f"Journal entry {entry_id} has already been reversed")


# Lookup exceptions


class NotFoundError(LedgerKernelError):
    """Base exception for missing records."""

    code: str = "NOT_FOUND"


class JournalEntryNotFoundError(NotFoundError):
    code: str = "JOURNAL_ENTRY_NOT_FOUND"

    def __init__(self, entry_id: Any):
        self.entry_id = entry_id
        super().__init__(f"Journal entry not found: {entry_id}")


class FiscalYearNotFoundError(NotFoundError):
    code: str = "FISCAL_YEAR_NOT_FOUND"

    def __init__(self, fiscal_year_id: Any):
        self.fiscal_year_id = fiscal_year_id
        super().__init__(f"Fiscal year not found: {fiscal_year_id}")


class AccountNotFoundError(NotFoundError):
    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: Any):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


# Classification exceptions


class ClassificationError(LedgerKernelError):
    """Base exception for account numbers outside the reporting ranges."""

    code: str = "CLASSIFICATION_ERROR"


class UnclassifiedAccountError(ClassificationError):
    """Account number does not map to any report section."""

    code: str = "UNCLASSIFIED_ACCOUNT"

    def __init__(self, account_number: Any):
        self.account_number = account_number
        super().__init__(
            f"Account number {account_number!r} is not a BAS account in 1000-8999"
        )


class AccountClassMismatchError(ClassificationError):
    """Declared account class disagrees with the number range."""

    code: str = "ACCOUNT_CLASS_MISMATCH"

    def __init__(self, account_number: str, declared: str, expected: str):
        self.account_number = account_number
        self.declared = declared
        self.expected = expected
        super().__init__(
            f"Account {account_number} declared as {declared}, "
            f"number range implies {expected}"
        )


# Verification numbering exceptions


class AllocatorError(LedgerKernelError):
    """Base exception for verification number allocation failures."""

    code: str = "ALLOCATOR_ERROR"


class SequenceAllocationError(AllocatorError):
    code: str = "SEQUENCE_ALLOCATION_FAILED"

    def __init__(self, organization_id: Any, fiscal_year_id: Any, reason: str):
        self.organization_id = organization_id
        self.fiscal_year_id = fiscal_year_id
        self.reason = reason
        super().__init__(
            f"Could not allocate verification number for fiscal year "
            f"{fiscal_year_id}: {reason}"
        )


class DuplicateVerificationNumberError(AllocatorError):
    code: str = "DUPLICATE_VERIFICATION_NUMBER"

    def __init__(self, fiscal_year_id: Any, verification_number: int):
        self.fiscal_year_id = fiscal_year_id
        self.verification_number = verification_number
        super().__init__(
            f"Verification number {verification_number} already used in "
            f"fiscal year {fiscal_year_id}"
        )


# Chart of accounts exceptions


class AccountError(LedgerKernelError):
    """Base exception for chart-of-accounts maintenance."""

    code: str = "ACCOUNT_ERROR"


class DuplicateAccountNumberError(AccountError):
    code: str = "DUPLICATE_ACCOUNT_NUMBER"

    def __init__(self, organization_id: Any, account_number: str):
        self.organization_id = organization_id
        self.account_number = account_number
        super().__init__(f"Account number {account_number} already exists")


class SystemAccountProtectedError(AccountError):
    """System accounts of the seeded chart cannot be changed or deactivated."""

    code: str = "SYSTEM_ACCOUNT_PROTECTED"

    def __init__(self, account_number: str):
        self.account_number = account_number
        super().__init__(f"Account {account_number} is a system account")


class FiscalYearOverlapError(ValidationError):
    code: str = "FISCAL_YEAR_OVERLAP"

    def __init__(self, name: str, existing_name: str):
        self.name = name
        self.existing_name = existing_name
        super().__init__(f"Fiscal year {name} overlaps fiscal year {existing_name}")


# Reporting


class ReportUnavailableError(LedgerKernelError):
    """A report could not be produced from the current ledger data."""

    code: str = "REPORT_UNAVAILABLE"

    def __init__(self, report_type: str):
        self.report_type = report_type
        super().__init__(
            f"The {report_type} report could not be generated; "
            "the chart of accounts contains entries that cannot be reported"
        )
