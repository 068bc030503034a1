"""
JournalEntryManager -- lifecycle of journal entries (verifikationer).

Responsibility:
    Creates, edits, posts, voids, reverses and deletes journal entries.
    Allocates verification numbers, runs the balance validator whenever an
    entry enters POSTED, and enforces fiscal-year policy.

Architecture position:
    Kernel > Services -- imperative shell.  Consumes SequenceService (or any
    VerificationNumberAllocator), the pure validator and the ORM models.

Invariants enforced:
    - Posted entries have >= 2 lines and sum(debit) == sum(credit).
      The manager never auto-balances.
    - Lifecycle: DRAFT -> DRAFT (edit), DRAFT -> POSTED, POSTED -> VOIDED.
      Only drafts may be edited or deleted.
    - Verification numbers are allocated once per entry and never reused
      within (organization_id, fiscal_year_id).  Gaps from failed creations
      are permitted.
    - Entry and lines are written atomically (savepoint); a failure while
      writing lines leaves no entry behind.
    - Nothing is posted into a closed fiscal year or outside its dates.
    - Reversal never mutates the original: it adds a posted counter-entry
      linked by reversal_of_id.

Failure modes:
    - ValidationError subclasses (InsufficientLinesError,
      UnbalancedEntryError, InvalidLineAmountError,
      EntryDateOutsideFiscalYearError, InactiveAccountError).
    - StateError subclasses (EntryNotEditableError,
      InvalidStatusTransitionError, ClosedFiscalYearError,
      EntryAlreadyReversedError).
    - NotFoundError subclasses for unknown entries, fiscal years, accounts.
    - AllocatorError subclasses when numbering fails; nothing is persisted.

Audit relevance:
    Every state change is logged as a structured event carrying entry id,
    verification number and actor.  posted_at/posted_by_id and
    voided_at/voided_by_id are stamped from the injected Clock.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import (
    EntryStatus,
    JournalEntryDraft,
    JournalEntryRecord,
    JournalEntryUpdate,
    LineSpec,
)
from ledger_kernel.domain.validation import ensure_balanced, ensure_valid_amounts
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    ClosedFiscalYearError,
    DuplicateVerificationNumberError,
    EntryAlreadyReversedError,
    EntryDateOutsideFiscalYearError,
    EntryNotEditableError,
    FiscalYearNotFoundError,
    InactiveAccountError,
    InvalidStatusTransitionError,
    JournalEntryNotFoundError,
    LedgerKernelError,
    SequenceAllocationError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.fiscal_year import FiscalYear
from ledger_kernel.models.journal import (
    JournalEntry,
    JournalEntryLine,
    JournalEntryStatus,
)
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.sequence_service import (
    SequenceService,
    VerificationNumberAllocator,
)

logger = get_logger("services.journal_manager")

VOID_MARKER = "VOIDED"
REVERSAL_SOURCE_TYPE = "reversal"


class JournalEntryManager(BaseService):
    """
    Write-side API for journal entries.

    Contract:
        Every method takes the organization explicitly; entries, accounts and
        fiscal years of other organizations are treated as not found.
        Methods flush; the caller commits.

    Non-goals:
        - Does NOT call session.commit().
        - Does NOT store audit-log rows; structured log events only.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        allocator: VerificationNumberAllocator | None = None,
    ):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._allocator = allocator or SequenceService(session)

    # =========================================================================
    # Public API
    # =========================================================================

    def create_entry(
        self, draft: JournalEntryDraft, actor_id: UUID
    ) -> JournalEntryRecord:
        """
        Create a draft or directly posted entry.

        Postconditions:
            - The entry has a freshly allocated verification number.
            - If draft.status is POSTED, posted_at/posted_by_id are stamped.

        Raises:
            ValidationError / StateError subclasses when posting is refused,
            AllocatorError subclasses when numbering fails.
        """
        with LogContext.bind(
            organization_id=draft.organization_id,
            fiscal_year_id=draft.fiscal_year_id,
            actor_id=actor_id,
        ):
            return self._create(draft, actor_id)

    def update_entry(
        self,
        organization_id: UUID,
        entry_id: UUID,
        update: JournalEntryUpdate,
        actor_id: UUID,
    ) -> JournalEntryRecord:
        """
        Edit a draft; optionally post it in the same call.

        Raises:
            EntryNotEditableError: the entry is not a draft.
            InvalidStatusTransitionError: update.status is VOIDED.
        """
        with LogContext.bind(
            organization_id=organization_id, actor_id=actor_id, entry_id=entry_id
        ):
            entry = self._load_entry(organization_id, entry_id, lock=True)
            if entry.status != JournalEntryStatus.DRAFT:
                raise EntryNotEditableError(entry.id, entry.status.value)
            if update.status is EntryStatus.VOIDED:
                raise InvalidStatusTransitionError(
                    entry.id, entry.status.value, EntryStatus.VOIDED.value
                )

            entry_date = update.entry_date or entry.entry_date
            lines = update.lines if update.lines is not None else _specs_from_model(entry)
            ensure_valid_amounts(lines)
            accounts = self._resolve_accounts(organization_id, lines)

            posting = update.status is EntryStatus.POSTED
            if posting:
                self._ensure_postable(
                    self._load_fiscal_year(organization_id, entry.fiscal_year_id),
                    entry_date,
                    lines,
                    accounts,
                )

            if update.entry_date is not None:
                entry.entry_date = update.entry_date
            if update.description is not None:
                entry.description = update.description
            if update.lines is not None:
                entry.lines.clear()
                self.session.flush()
                entry.lines.extend(_build_lines(update.lines))
            entry.updated_by_id = actor_id
            if posting:
                self._stamp_posted(entry, actor_id)
            self.session.flush()

            logger.info(
                "journal_entry_updated",
                extra={
                    "entry_id": str(entry.id),
                    "verification_number": entry.verification_number,
                    "lines_replaced": update.lines is not None,
                    "posted": posting,
                },
            )
            return JournalEntryRecord.from_model(entry)

    def post_entry(
        self, organization_id: UUID, entry_id: UUID, actor_id: UUID
    ) -> JournalEntryRecord:
        """
        Transition a draft to POSTED.

        Raises:
            InvalidStatusTransitionError: the entry is not a draft.
            UnbalancedEntryError / InsufficientLinesError: lines do not balance.
            ClosedFiscalYearError / EntryDateOutsideFiscalYearError.
        """
        with LogContext.bind(
            organization_id=organization_id, actor_id=actor_id, entry_id=entry_id
        ):
            entry = self._load_entry(organization_id, entry_id, lock=True)
            if entry.status != JournalEntryStatus.DRAFT:
                raise InvalidStatusTransitionError(
                    entry.id, entry.status.value, EntryStatus.POSTED.value
                )
            lines = _specs_from_model(entry)
            accounts = self._resolve_accounts(organization_id, lines)
            self._ensure_postable(
                self._load_fiscal_year(organization_id, entry.fiscal_year_id),
                entry.entry_date,
                lines,
                accounts,
            )
            self._stamp_posted(entry, actor_id)
            entry.updated_by_id = actor_id
            self.session.flush()

            logger.info(
                "journal_entry_posted",
                extra={
                    "entry_id": str(entry.id),
                    "verification_number": entry.verification_number,
                },
            )
            return JournalEntryRecord.from_model(entry)

    def void_entry(
        self,
        organization_id: UUID,
        entry_id: UUID,
        actor_id: UUID,
        reason: str | None = None,
    ) -> JournalEntryRecord:
        """
        Mark a posted entry VOIDED so it drops out of every report.

        The description is prefixed with "VOIDED: <reason>" (or "VOIDED").

        Raises:
            InvalidStatusTransitionError: the entry is not POSTED (voiding
                twice is a StateError), or the entry is itself a reversal;
                a reversal is only cancelled by reversing it.
            EntryAlreadyReversedError: a reversal already cancels the entry.
            ClosedFiscalYearError: the entry's fiscal year is closed.
        """
        with LogContext.bind(
            organization_id=organization_id, actor_id=actor_id, entry_id=entry_id
        ):
            entry = self._load_entry(organization_id, entry_id, lock=True)
            if entry.status != JournalEntryStatus.POSTED:
                raise InvalidStatusTransitionError(
                    entry.id, entry.status.value, EntryStatus.VOIDED.value
                )
            if entry.reversal_of_id is not None:
                raise InvalidStatusTransitionError(
                    entry.id, "reversal", EntryStatus.VOIDED.value
                )
            if self._reversal_of(entry.id) is not None:
                raise EntryAlreadyReversedError(entry.id)
            fiscal_year = self._load_fiscal_year(organization_id, entry.fiscal_year_id)
            if fiscal_year.is_closed:
                raise ClosedFiscalYearError(fiscal_year.id, fiscal_year.name)

            marker = f"{VOID_MARKER}: {reason}" if reason else VOID_MARKER
            entry.description = (
                f"{marker} | {entry.description}" if entry.description else marker
            )
            entry.status = JournalEntryStatus.VOIDED
            entry.voided_at = self._clock.now()
            entry.voided_by_id = actor_id
            entry.updated_by_id = actor_id
            self.session.flush()

            logger.info(
                "journal_entry_voided",
                extra={
                    "entry_id": str(entry.id),
                    "verification_number": entry.verification_number,
                    "reason": reason,
                },
            )
            return JournalEntryRecord.from_model(entry)

    def reverse_entry(
        self,
        organization_id: UUID,
        entry_id: UUID,
        actor_id: UUID,
        reason: str | None = None,
        reversal_date: date | None = None,
    ) -> JournalEntryRecord:
        """
        Cancel a posted entry by posting its mirror image.

        The reversal swaps debit and credit on every line, is posted with
        its own verification number, and records reversal_of_id.  The
        original stays POSTED and unchanged.

        Args:
            reversal_date: Accounting date of the reversal; defaults to the
                original entry_date.  The fiscal year covering this date
                (of the same organization) receives the reversal.

        Raises:
            InvalidStatusTransitionError: the entry is not POSTED.
            EntryAlreadyReversedError: a reversal already exists.
            FiscalYearNotFoundError: no fiscal year covers reversal_date.
        """
        with LogContext.bind(
            organization_id=organization_id, actor_id=actor_id, entry_id=entry_id
        ):
            original = self._load_entry(organization_id, entry_id, lock=True)
            if original.status != JournalEntryStatus.POSTED:
                raise InvalidStatusTransitionError(
                    original.id, original.status.value, "reversed"
                )
            if self._reversal_of(original.id) is not None:
                raise EntryAlreadyReversedError(original.id)

            target_date = reversal_date or original.entry_date
            fiscal_year_id = original.fiscal_year_id
            original_year = self._load_fiscal_year(organization_id, fiscal_year_id)
            if not original_year.contains_date(target_date):
                fiscal_year_id = self._fiscal_year_for_date(organization_id, target_date).id

            text = f"Reversal of verification {original.verification_number}"
            draft = JournalEntryDraft(
                organization_id=organization_id,
                fiscal_year_id=fiscal_year_id,
                entry_date=target_date,
                description=f"{text}: {reason}" if reason else text,
                lines=tuple(
                    LineSpec(
                        account_id=line.account_id,
                        debit=line.credit_amount,
                        credit=line.debit_amount,
                        description=line.description,
                        vat_code=line.vat_code,
                        vat_amount=line.vat_amount,
                        cost_center=line.cost_center,
                        line_order=line.line_order,
                    )
                    for line in original.lines
                ),
                status=EntryStatus.POSTED,
                source_type=REVERSAL_SOURCE_TYPE,
                source_id=str(original.id),
            )
            record = self._create(draft, actor_id, reversal_of_id=original.id)

            logger.info(
                "journal_entry_reversed",
                extra={
                    "original_entry_id": str(original.id),
                    "reversal_entry_id": str(record.id),
                    "reversal_verification_number": record.verification_number,
                    "reason": reason,
                },
            )
            return record

    def delete_entry(
        self, organization_id: UUID, entry_id: UUID, actor_id: UUID
    ) -> None:
        """
        Delete a draft entry and its lines.

        Its verification number is not reused.

        Raises:
            EntryNotEditableError: the entry is posted or voided.
        """
        with LogContext.bind(
            organization_id=organization_id, actor_id=actor_id, entry_id=entry_id
        ):
            entry = self._load_entry(organization_id, entry_id, lock=True)
            if entry.status != JournalEntryStatus.DRAFT:
                raise EntryNotEditableError(entry.id, entry.status.value)
            verification_number = entry.verification_number
            self.session.delete(entry)
            self.session.flush()
            logger.info(
                "journal_entry_deleted",
                extra={
                    "entry_id": str(entry_id),
                    "verification_number": verification_number,
                },
            )

    def get_entry(self, organization_id: UUID, entry_id: UUID) -> JournalEntryRecord:
        """
        Raises:
            JournalEntryNotFoundError: unknown id or another organization's entry.
        """
        return JournalEntryRecord.from_model(
            self._load_entry(organization_id, entry_id)
        )

    # =========================================================================
    # Internal Implementation
    # =========================================================================

    def _create(
        self,
        draft: JournalEntryDraft,
        actor_id: UUID,
        reversal_of_id: UUID | None = None,
    ) -> JournalEntryRecord:
        fiscal_year = self._load_fiscal_year(draft.organization_id, draft.fiscal_year_id)
        ensure_valid_amounts(draft.lines)
        accounts = self._resolve_accounts(draft.organization_id, draft.lines)

        posting = draft.status is EntryStatus.POSTED
        if posting:
            self._ensure_postable(fiscal_year, draft.entry_date, draft.lines, accounts)

        number = self._allocate_number(draft.organization_id, draft.fiscal_year_id)

        entry = JournalEntry(
            organization_id=draft.organization_id,
            fiscal_year_id=draft.fiscal_year_id,
            entry_date=draft.entry_date,
            verification_number=number,
            description=draft.description,
            status=JournalEntryStatus.DRAFT,
            source_type=draft.source_type,
            source_id=draft.source_id,
            reversal_of_id=reversal_of_id,
            created_by_id=actor_id,
            lines=_build_lines(draft.lines),
        )
        if posting:
            self._stamp_posted(entry, actor_id)

        savepoint = self.session.begin_nested()
        try:
            self.session.add(entry)
            self.session.flush()
            savepoint.commit()
        except IntegrityError as exc:
            savepoint.rollback()
            logger.error(
                "journal_entry_write_failed",
                extra={
                    "fiscal_year_id": str(draft.fiscal_year_id),
                    "verification_number": number,
                },
                exc_info=True,
            )
            if self._number_taken(draft.organization_id, draft.fiscal_year_id, number):
                raise DuplicateVerificationNumberError(draft.fiscal_year_id, number) from exc
            if reversal_of_id is not None and self._reversal_of(reversal_of_id) is not None:
                raise EntryAlreadyReversedError(reversal_of_id) from exc
            raise

        logger.info(
            "journal_entry_created",
            extra={
                "entry_id": str(entry.id),
                "verification_number": number,
                "fiscal_year_id": str(draft.fiscal_year_id),
                "status": entry.status.value,
                "line_count": len(draft.lines),
            },
        )
        return JournalEntryRecord.from_model(entry)

    def _allocate_number(self, organization_id: UUID, fiscal_year_id: UUID) -> int:
        try:
            number = self._allocator.allocate(organization_id, fiscal_year_id)
        except LedgerKernelError:
            raise
        except SQLAlchemyError as exc:
            logger.error(
                "verification_number_allocation_failed",
                extra={"fiscal_year_id": str(fiscal_year_id)},
                exc_info=True,
            )
            raise SequenceAllocationError(
                organization_id, fiscal_year_id, type(exc).__name__
            ) from exc

        if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
            raise SequenceAllocationError(
                organization_id, fiscal_year_id, f"allocator returned {number!r}"
            )
        if self._number_taken(organization_id, fiscal_year_id, number):
            raise DuplicateVerificationNumberError(fiscal_year_id, number)
        return number

    def _number_taken(
        self, organization_id: UUID, fiscal_year_id: UUID, number: int
    ) -> bool:
        return (
            self.session.execute(
                select(JournalEntry.id).where(
                    JournalEntry.organization_id == organization_id,
                    JournalEntry.fiscal_year_id == fiscal_year_id,
                    JournalEntry.verification_number == number,
                )
            ).first()
            is not None
        )

    def _ensure_postable(
        self,
        fiscal_year: FiscalYear,
        entry_date: date,
        lines: Sequence[LineSpec],
        accounts: dict[UUID, Account],
    ) -> None:
        try:
            ensure_balanced(lines)
            if fiscal_year.is_closed:
                raise ClosedFiscalYearError(fiscal_year.id, fiscal_year.name)
            if not fiscal_year.contains_date(entry_date):
                raise EntryDateOutsideFiscalYearError(
                    entry_date, fiscal_year.start_date, fiscal_year.end_date
                )
            for spec in lines:
                account = accounts[spec.account_id]
                if not account.is_active:
                    raise InactiveAccountError(account.account_number)
        except LedgerKernelError as exc:
            logger.warning(
                "journal_entry_rejected",
                extra={"code": exc.code, "fiscal_year_id": str(fiscal_year.id)},
            )
            raise

    def _stamp_posted(self, entry: JournalEntry, actor_id: UUID) -> None:
        entry.status = JournalEntryStatus.POSTED
        entry.posted_at = self._clock.now()
        entry.posted_by_id = actor_id

    def _resolve_accounts(
        self, organization_id: UUID, lines: Iterable[LineSpec]
    ) -> dict[UUID, Account]:
        wanted = {spec.account_id for spec in lines}
        if not wanted:
            return {}
        found = {
            account.id: account
            for account in self.session.execute(
                select(Account).where(
                    Account.organization_id == organization_id,
                    Account.id.in_(wanted),
                )
            ).scalars()
        }
        missing = wanted - found.keys()
        if missing:
            raise AccountNotFoundError(sorted(str(m) for m in missing)[0])
        return found

    def _load_entry(
        self, organization_id: UUID, entry_id: UUID, lock: bool = False
    ) -> JournalEntry:
        stmt = select(JournalEntry).where(
            JournalEntry.id == entry_id,
            JournalEntry.organization_id == organization_id,
        )
        if lock:
            stmt = stmt.with_for_update()
        entry = self.session.execute(stmt).scalar_one_or_none()
        if entry is None:
            raise JournalEntryNotFoundError(entry_id)
        return entry

    def _load_fiscal_year(self, organization_id: UUID, fiscal_year_id: UUID) -> FiscalYear:
        fiscal_year = self.session.execute(
            select(FiscalYear).where(
                FiscalYear.id == fiscal_year_id,
                FiscalYear.organization_id == organization_id,
            )
        ).scalar_one_or_none()
        if fiscal_year is None:
            raise FiscalYearNotFoundError(fiscal_year_id)
        return fiscal_year

    def _fiscal_year_for_date(self, organization_id: UUID, on: date) -> FiscalYear:
        fiscal_year = self.session.execute(
            select(FiscalYear).where(
                FiscalYear.organization_id == organization_id,
                FiscalYear.start_date <= on,
                FiscalYear.end_date >= on,
            )
        ).scalars().first()
        if fiscal_year is None:
            raise FiscalYearNotFoundError(f"{organization_id}@{on.isoformat()}")
        return fiscal_year

    def _reversal_of(self, entry_id: UUID) -> UUID | None:
        return self.session.execute(
            select(JournalEntry.id).where(JournalEntry.reversal_of_id == entry_id)
        ).scalar_one_or_none()


def _build_lines(specs: Sequence[LineSpec]) -> list[JournalEntryLine]:
    return [
        JournalEntryLine(
            account_id=spec.account_id,
            debit_amount=spec.debit,
            credit_amount=spec.credit,
            description=spec.description,
            vat_code=spec.vat_code,
            vat_amount=spec.vat_amount,
            cost_center=spec.cost_center,
            line_order=spec.line_order if spec.line_order is not None else index,
        )
        for index, spec in enumerate(specs)
    ]


def _specs_from_model(entry: JournalEntry) -> tuple[LineSpec, ...]:
    return tuple(
        LineSpec(
            account_id=line.account_id,
            debit=line.debit_amount,
            credit=line.credit_amount,
            description=line.description,
            vat_code=line.vat_code,
            vat_amount=line.vat_amount,
            cost_center=line.cost_center,
            line_order=line.line_order,
        )
        for line in sorted(entry.lines, key=lambda ln: ln.line_order)
    )
