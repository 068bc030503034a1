"""
Module: ledger_kernel.models.verification_sequence
Responsibility: Counter rows backing verification number allocation.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - One row per (organization_id, fiscal_year_id).
    - current_value only grows; it is the sole source of the next number.
      The aggregate-max-plus-one pattern is never used.
"""

from uuid import UUID

from sqlalchemy import BigInteger, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import Base, UUIDString


class VerificationSequence(Base):
    """Locked counter for one organization's fiscal year."""

    __tablename__ = "verification_sequences"

    __table_args__ = (
        UniqueConstraint(
            "organization_id", "fiscal_year_id", name="uq_verification_sequence_scope"
        ),
    )

    organization_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    fiscal_year_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    current_value: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return f"<VerificationSequence {self.fiscal_year_id}: {self.current_value}>"
