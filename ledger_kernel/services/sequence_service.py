"""
SequenceService -- verification number allocation via locked counter rows.

Responsibility:
    Hands out verification numbers 1, 2, 3, ... per
    (organization_id, fiscal_year_id).  Uses one counter row per scope with
    row-level locking (``SELECT ... FOR UPDATE``) so that concurrent
    allocations in the same scope are serialised.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.
    Called by JournalEntryManager when an entry is created.

Invariants enforced:
    - Numbers are unique and strictly increasing within a scope.  The
      aggregate-max-plus-one pattern is never used: the locked counter row is
      the sole source of the next value.
    - The increment is transactional: it is visible only when the caller's
      transaction commits, and a rollback returns the number.
    - Scopes are independent: allocating in one fiscal year never touches
      another fiscal year's counter.

Failure modes:
    - IntegrityError on the first-use insert race, handled by a savepoint
      rollback and a locked re-read.
"""

from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.verification_sequence import VerificationSequence
from ledger_kernel.services.base import BaseService

logger = get_logger("services.sequence")


class VerificationNumberAllocator(Protocol):
    """Anything that can hand out the next verification number for a scope."""

    def allocate(self, organization_id: UUID, fiscal_year_id: UUID) -> int: ...


class SequenceService(BaseService):
    """
    Transactional verification number allocator.

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.
        - Does NOT fill gaps left by rolled-back or deleted entries.

    Usage:
        number = SequenceService(session).allocate(org_id, fiscal_year_id)
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def _locked_counter(
        self, organization_id: UUID, fiscal_year_id: UUID
    ) -> VerificationSequence | None:
        return self.session.execute(
            select(VerificationSequence)
            .where(
                VerificationSequence.organization_id == organization_id,
                VerificationSequence.fiscal_year_id == fiscal_year_id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def allocate(self, organization_id: UUID, fiscal_year_id: UUID) -> int:
        """
        Return the next verification number for the scope.

        Postconditions:
            - Returns an integer > 0, strictly greater than every number
              previously allocated (and committed) in the same scope.
            - The counter row stays locked until the transaction completes.
        """
        counter = self._locked_counter(organization_id, fiscal_year_id)

        if counter is None:
            # First use of this scope; another transaction may race us.
            savepoint = self.session.begin_nested()
            try:
                counter = VerificationSequence(
                    organization_id=organization_id,
                    fiscal_year_id=fiscal_year_id,
                    current_value=1,
                )
                self.session.add(counter)
                self.session.flush()
                savepoint.commit()
                logger.debug(
                    "verification_number_allocated",
                    extra={"fiscal_year_id": str(fiscal_year_id), "value": 1},
                )
                return 1
            except IntegrityError:
                logger.debug(
                    "verification_sequence_race_retry",
                    extra={"fiscal_year_id": str(fiscal_year_id)},
                )
                savepoint.rollback()
                counter = self._locked_counter(organization_id, fiscal_year_id)
                if counter is None:
                    raise

        counter.current_value += 1
        self.session.flush()
        logger.debug(
            "verification_number_allocated",
            extra={
                "fiscal_year_id": str(fiscal_year_id),
                "value": counter.current_value,
            },
        )
        return counter.current_value

    def current_value(self, organization_id: UUID, fiscal_year_id: UUID) -> int | None:
        """Last allocated number in the scope, or None if none yet."""
        counter = self.session.execute(
            select(VerificationSequence).where(
                VerificationSequence.organization_id == organization_id,
                VerificationSequence.fiscal_year_id == fiscal_year_id,
            )
        ).scalar_one_or_none()
        return counter.current_value if counter else None
