"""
ChartOfAccountsService and FiscalYearService -- reference data maintenance.

Responsibility:
    Seeds the standard BAS chart, registers BAS accounts (checking number
    validity, per-organization uniqueness and class/number consistency),
    activates and deactivates them, and creates, closes and reopens fiscal years.

Architecture position:
    Kernel > Services -- imperative shell.  Flush-only; the caller commits.

Invariants enforced:
    - account_number is a classifiable BAS number and unique per organization.
    - account_class agrees with the number range (AccountClassMismatchError).
    - System accounts cannot be renamed or deactivated.
    - Fiscal years of one organization do not overlap.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.domain.account_classifier import (
    allowed_account_classes,
    default_account_class,
    normalize_account_number,
)
from ledger_kernel.domain.bas_chart import BAS_STARTER_CHART, BASAccountTemplate
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import AccountInfo, FiscalYearInfo
from ledger_kernel.exceptions import (
    AccountClassMismatchError,
    AccountNotFoundError,
    DuplicateAccountNumberError,
    FiscalYearNotFoundError,
    FiscalYearOverlapError,
    SystemAccountProtectedError,
)
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import Account, AccountClass, AccountType
from ledger_kernel.models.fiscal_year import FiscalYear
from ledger_kernel.services.base import BaseService

logger = get_logger("services.accounts")


class ChartOfAccountsService(BaseService):
    """Registration and maintenance of an organization's BAS accounts."""

    def register_account(
        self,
        organization_id: UUID,
        account_number: str,
        name: str,
        actor_id: UUID,
        account_class: AccountClass | str | None = None,
        account_type: AccountType | str = AccountType.DETAIL,
        name_en: str | None = None,
        is_system: bool = False,
        default_vat_rate: Decimal | None = None,
    ) -> AccountInfo:
        """
        Add an account to the chart.

        account_class defaults to the class implied by the number range.

        Raises:
            UnclassifiedAccountError: not a BAS number in 1000..8999.
            AccountClassMismatchError: account_class contradicts the range.
            DuplicateAccountNumberError: number already used in the organization.
        """
        number = f"{normalize_account_number(account_number):04d}"
        declared = (
            AccountClass(account_class)
            if account_class is not None
            else AccountClass(default_account_class(number))
        )
        allowed = allowed_account_classes(number)
        if declared.value not in allowed:
            raise AccountClassMismatchError(
                number, declared.value, default_account_class(number)
            )

        existing = self.session.execute(
            select(Account.id).where(
                Account.organization_id == organization_id,
                Account.account_number == number,
            )
        ).first()
        if existing is not None:
            raise DuplicateAccountNumberError(organization_id, number)

        account = Account(
            organization_id=organization_id,
            account_number=number,
            name=name,
            name_en=name_en,
            account_class=declared,
            account_type=AccountType(account_type),
            is_system=is_system,
            default_vat_rate=default_vat_rate,
            is_active=True,
            created_by_id=actor_id,
        )
        self.session.add(account)
        self.session.flush()

        logger.info(
            "account_registered",
            extra={
                "organization_id": str(organization_id),
                "account_number": number,
                "account_class": declared.value,
            },
        )
        return AccountInfo.from_model(account)

    def seed_bas_chart(
        self,
        organization_id: UUID,
        actor_id: UUID,
        templates: tuple[BASAccountTemplate, ...] = BAS_STARTER_CHART,
    ) -> list[AccountInfo]:
        """
        Register the standard BAS chart as system accounts.

        Numbers the organization already has are left untouched, so seeding
        can be repeated.  Returns the accounts created by this call.
        """
        existing = set(
            self.session.execute(
                select(Account.account_number).where(
                    Account.organization_id == organization_id
                )
            ).scalars()
        )

        created = []
        for template in templates:
            if template.account_number in existing:
                continue
            created.append(
                self.register_account(
                    organization_id,
                    template.account_number,
                    template.name,
                    actor_id,
                    account_class=template.account_class,
                    account_type=template.account_type,
                    name_en=template.name_en,
                    is_system=True,
                    default_vat_rate=template.default_vat_rate,
                )
            )
            existing.add(template.account_number)

        logger.info(
            "bas_chart_seeded",
            extra={
                "organization_id": str(organization_id),
                "accounts_created": len(created),
                "accounts_skipped": len(templates) - len(created),
            },
        )
        return created

    def rename_account(
        self,
        organization_id: UUID,
        account_id: UUID,
        name: str,
        actor_id: UUID,
        name_en: str | None = None,
    ) -> AccountInfo:
        account = self._load(organization_id, account_id)
        if account.is_system:
            raise SystemAccountProtectedError(account.account_number)
        account.name = name
        if name_en is not None:
            account.name_en = name_en
        account.updated_by_id = actor_id
        self.session.flush()
        return AccountInfo.from_model(account)

    def set_active(
        self, organization_id: UUID, account_id: UUID, active: bool, actor_id: UUID
    ) -> AccountInfo:
        """
        Activate or deactivate an account.

        Inactive accounts keep their history but refuse new postings.
        """
        account = self._load(organization_id, account_id)
        if account.is_system and not active:
            raise SystemAccountProtectedError(account.account_number)
        account.is_active = active
        account.updated_by_id = actor_id
        self.session.flush()
        logger.info(
            "account_activation_changed",
            extra={"account_number": account.account_number, "is_active": active},
        )
        return AccountInfo.from_model(account)

    def list_accounts(
        self, organization_id: UUID, include_inactive: bool = False
    ) -> list[AccountInfo]:
        stmt = select(Account).where(Account.organization_id == organization_id)
        if not include_inactive:
            stmt = stmt.where(Account.is_active.is_(True))
        stmt = stmt.order_by(Account.account_number)
        return [AccountInfo.from_model(a) for a in self.session.execute(stmt).scalars()]

    def _load(self, organization_id: UUID, account_id: UUID) -> Account:
        account = self.session.execute(
            select(Account).where(
                Account.id == account_id,
                Account.organization_id == organization_id,
            )
        ).scalar_one_or_none()
        if account is None:
            raise AccountNotFoundError(account_id)
        return account


class FiscalYearService(BaseService):
    """Creates fiscal years and controls whether they accept postings."""

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def create_fiscal_year(
        self,
        organization_id: UUID,
        name: str,
        start_date: date,
        end_date: date,
        actor_id: UUID,
    ) -> FiscalYearInfo:
        """
        Raises:
            ValueError: end_date before start_date.
            FiscalYearOverlapError: dates overlap an existing fiscal year.
        """
        if end_date < start_date:
            raise ValueError(
                f"Fiscal year end {end_date} is before its start {start_date}"
            )
        overlapping = self.session.execute(
            select(FiscalYear).where(
                FiscalYear.organization_id == organization_id,
                FiscalYear.start_date <= end_date,
                FiscalYear.end_date >= start_date,
            )
        ).scalars().first()
        if overlapping is not None:
            raise FiscalYearOverlapError(name, overlapping.name)

        fiscal_year = FiscalYear(
            organization_id=organization_id,
            name=name,
            start_date=start_date,
            end_date=end_date,
            is_closed=False,
            created_by_id=actor_id,
        )
        self.session.add(fiscal_year)
        self.session.flush()
        logger.info(
            "fiscal_year_created",
            extra={
                "organization_id": str(organization_id),
                "fiscal_year": name,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
            },
        )
        return FiscalYearInfo.from_model(fiscal_year)

    def close_fiscal_year(
        self, organization_id: UUID, fiscal_year_id: UUID, actor_id: UUID
    ) -> FiscalYearInfo:
        fiscal_year = self._load(organization_id, fiscal_year_id)
        if not fiscal_year.is_closed:
            fiscal_year.close(actor_id, self._clock.now())
            fiscal_year.updated_by_id = actor_id
            self.session.flush()
            logger.info("fiscal_year_closed", extra={"fiscal_year": fiscal_year.name})
        return FiscalYearInfo.from_model(fiscal_year)

    def reopen_fiscal_year(
        self, organization_id: UUID, fiscal_year_id: UUID, actor_id: UUID
    ) -> FiscalYearInfo:
        fiscal_year = self._load(organization_id, fiscal_year_id)
        if fiscal_year.is_closed:
            fiscal_year.reopen()
            fiscal_year.updated_by_id = actor_id
            self.session.flush()
            logger.warning("fiscal_year_reopened", extra={"fiscal_year": fiscal_year.name})
        return FiscalYearInfo.from_model(fiscal_year)

    def get_fiscal_year(self, organization_id: UUID, fiscal_year_id: UUID) -> FiscalYearInfo:
        return FiscalYearInfo.from_model(self._load(organization_id, fiscal_year_id))

    def _load(self, organization_id: UUID, fiscal_year_id: UUID) -> FiscalYear:
        fiscal_year = self.session.execute(
            select(FiscalYear).where(
                FiscalYear.id == fiscal_year_id,
                FiscalYear.organization_id == organization_id,
            )
        ).scalar_one_or_none()
        if fiscal_year is None:
            raise FiscalYearNotFoundError(fiscal_year_id)
        return fiscal_year
