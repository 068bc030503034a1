"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Immutable data structures crossing the kernel boundary: LineSpec and
    JournalEntryDraft (input), JournalEntryUpdate (draft edits),
    JournalEntryRecord (persisted entry), LedgerLine (one posted line as read
    for reporting) and the ValidationIssue/ValidationResult pair.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods are boundary converters invoked only from
    services and selectors.

Invariants enforced:
    - Monetary fields are Decimal at cent precision; floats are rejected.
    - Line amounts finer than one cent are rejected at construction.

Data flow:
    JournalEntryDraft -> JournalEntryManager -> JournalEntryRecord
    LedgerSelector -> LedgerLine -> Balance Aggregator / report builders
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

from ledger_kernel.domain.amounts import ZERO, has_sub_cent_precision, to_amount
from ledger_kernel.exceptions import InvalidLineAmountError

if TYPE_CHECKING:
    from ledger_kernel.models.journal import JournalEntry as JournalEntryModel


class EntryStatus(str, Enum):
    """
    Status of a journal entry.

    Mirrors ledger_kernel.models.journal.JournalEntryStatus so that domain
    code does not depend on the ORM.
    """

    DRAFT = "draft"
    POSTED = "posted"
    VOIDED = "voided"


def _cent_amount(value: Any, field_name: str, line_index: int | None) -> Decimal:
    try:
        amount = to_amount(value)
    except (TypeError, ValueError) as exc:
        raise InvalidLineAmountError(line_index, field_name, value, str(exc)) from exc
    if has_sub_cent_precision(amount):
        raise InvalidLineAmountError(
            line_index, field_name, value, "more than two decimal places"
        )
    return amount


@dataclass(frozen=True)
class LineSpec:
    """
    Specification for one journal line.

    Guarantees:
        - debit and credit are Decimal with at most two decimals.
        - Negative amounts are representable here; they are rejected by the
          validator so the error carries the line index.
    """

    account_id: UUID
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    description: str | None = None
    vat_code: str | None = None
    vat_amount: Decimal | None = None
    cost_center: str | None = None
    line_order: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "debit", _cent_amount(self.debit, "debit", self.line_order))
        object.__setattr__(self, "credit", _cent_amount(self.credit, "credit", self.line_order))
        if self.vat_amount is not None:
            object.__setattr__(
                self,
                "vat_amount",
                _cent_amount(self.vat_amount, "vat_amount", self.line_order),
            )

    @classmethod
    def debit_line(cls, account_id: UUID, amount: Decimal | str, **kwargs: Any) -> LineSpec:
        return cls(account_id=account_id, debit=amount, **kwargs)

    @classmethod
    def credit_line(cls, account_id: UUID, amount: Decimal | str, **kwargs: Any) -> LineSpec:
        return cls(account_id=account_id, credit=amount, **kwargs)


@dataclass(frozen=True)
class JournalEntryDraft:
    """Input for JournalEntryManager.create_entry."""

    organization_id: UUID
    fiscal_year_id: UUID
    entry_date: date
    description: str
    lines: tuple[LineSpec, ...]
    status: EntryStatus = EntryStatus.DRAFT
    source_type: str = "manual"
    source_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "status", EntryStatus(self.status))
        if self.status is EntryStatus.VOIDED:
            raise ValueError("An entry cannot be created in voided status")


@dataclass(frozen=True)
class JournalEntryUpdate:
    """
    Changes to a draft entry.  None means "leave unchanged".

    When lines is given it replaces the complete line set.
    """

    entry_date: date | None = None
    description: str | None = None
    lines: tuple[LineSpec, ...] | None = None
    status: EntryStatus | None = None

    def __post_init__(self) -> None:
        if self.lines is not None:
            object.__setattr__(self, "lines", tuple(self.lines))
        if self.status is not None:
            object.__setattr__(self, "status", EntryStatus(self.status))


@dataclass(frozen=True)
class JournalLineRecord:
    line_id: UUID
    account_id: UUID
    account_number: str
    account_name: str
    debit: Decimal
    credit: Decimal
    description: str | None
    vat_code: str | None
    vat_amount: Decimal | None
    line_order: int


@dataclass(frozen=True)
class JournalEntryRecord:
    """A persisted journal entry with its lines, detached from the ORM."""

    id: UUID
    organization_id: UUID
    fiscal_year_id: UUID
    entry_date: date
    verification_number: int
    description: str
    status: EntryStatus
    source_type: str
    source_id: str | None
    lines: tuple[JournalLineRecord, ...]
    posted_at: datetime | None = None
    posted_by_id: UUID | None = None
    voided_at: datetime | None = None
    voided_by_id: UUID | None = None
    reversal_of_id: UUID | None = None

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit

    @classmethod
    def from_model(cls, model: JournalEntryModel) -> JournalEntryRecord:
        lines = tuple(
            JournalLineRecord(
                line_id=line.id,
                account_id=line.account_id,
                account_number=line.account.account_number if line.account else "",
                account_name=line.account.name if line.account else "",
                debit=Decimal(line.debit_amount),
                credit=Decimal(line.credit_amount),
                description=line.description,
                vat_code=line.vat_code,
                vat_amount=line.vat_amount,
                line_order=line.line_order,
            )
            for line in sorted(model.lines, key=lambda ln: ln.line_order)
        )
        return cls(
            id=model.id,
            organization_id=model.organization_id,
            fiscal_year_id=model.fiscal_year_id,
            entry_date=model.entry_date,
            verification_number=model.verification_number,
            description=model.description,
            status=EntryStatus(model.status.value),
            source_type=model.source_type,
            source_id=model.source_id,
            lines=lines,
            posted_at=model.posted_at,
            posted_by_id=model.posted_by_id,
            voided_at=model.voided_at,
            voided_by_id=model.voided_by_id,
            reversal_of_id=model.reversal_of_id,
        )


@dataclass(frozen=True)
class LedgerLine:
    """
    One journal line joined with its entry and account, as read for reports.

    Contract:
        Produced by LedgerSelector.  Reporting components only count lines
        whose entry_status is POSTED, even when handed others.
    """

    line_id: UUID
    entry_id: UUID
    fiscal_year_id: UUID
    account_id: UUID
    account_number: str
    account_name: str
    debit: Decimal
    credit: Decimal
    entry_date: date
    verification_number: int
    entry_description: str
    line_description: str | None = None
    entry_status: EntryStatus = EntryStatus.POSTED
    account_name_en: str | None = None
    vat_code: str | None = None

    @property
    def is_posted(self) -> bool:
        return self.entry_status is EntryStatus.POSTED

    @property
    def description(self) -> str:
        """Line description, falling back to the entry description."""
        return self.line_description or self.entry_description


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation problem, addressable by field and line."""

    code: str
    message: str
    field: str | None = None
    line_index: int | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of validation.

    Guarantees:
        - errors is always a tuple (never None)
        - bool(result) == result.is_valid
    """

    is_valid: bool
    errors: tuple[ValidationIssue, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(is_valid=True, errors=())

    @classmethod
    def failure(cls, *errors: ValidationIssue) -> ValidationResult:
        return cls(is_valid=False, errors=tuple(errors))

    def __bool__(self) -> bool:
        return self.is_valid


@dataclass(frozen=True)
class AccountInfo:
    """Chart-of-accounts entry detached from the ORM."""

    id: UUID
    organization_id: UUID
    account_number: str
    name: str
    name_en: str | None
    account_class: str
    account_type: str
    is_system: bool
    is_active: bool
    default_vat_rate: Decimal | None = None

    @classmethod
    def from_model(cls, model: Any) -> AccountInfo:
        return cls(
            id=model.id,
            organization_id=model.organization_id,
            account_number=model.account_number,
            name=model.name,
            name_en=model.name_en,
            account_class=model.account_class.value,
            account_type=model.account_type.value,
            is_system=model.is_system,
            is_active=model.is_active,
            default_vat_rate=model.default_vat_rate,
        )


@dataclass(frozen=True)
class FiscalYearInfo:
    id: UUID
    organization_id: UUID
    name: str
    start_date: date
    end_date: date
    is_closed: bool
    closed_at: datetime | None = None
    closed_by_id: UUID | None = None

    def contains_date(self, check_date: date) -> bool:
        return self.start_date <= check_date <= self.end_date

    @classmethod
    def from_model(cls, model: Any) -> FiscalYearInfo:
        return cls(
            id=model.id,
            organization_id=model.organization_id,
            name=model.name,
            start_date=model.start_date,
            end_date=model.end_date,
            is_closed=model.is_closed,
            closed_at=model.closed_at,
            closed_by_id=model.closed_by_id,
        )
