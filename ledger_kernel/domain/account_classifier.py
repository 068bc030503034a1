"""
Account Classifier -- BAS number ranges to report positions.

Responsibility:
    Maps a 4-digit BAS account number to the statement, section and
    subsection it is reported under, and to its sign convention.  The number
    is authoritative; the account_class stored on the Account row is a
    descriptive hint that is only validated against these ranges.

Architecture position:
    Kernel > Domain -- pure, no I/O, no module-level mutable state.

Invariants enforced:
    - Totality: every integer in 1000..8999 maps to exactly one
      (section, subsection).  Flat sections have subsection None.
    - Sign convention: debit-normal below 2000 and in 4000..7999
      (balance = debit - credit), credit-normal otherwise
      (balance = credit - debit).

Failure modes:
    - UnclassifiedAccountError for non-numeric input, input that is not four
      digits, or numbers outside 1000..8999.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ledger_kernel.exceptions import UnclassifiedAccountError

MIN_ACCOUNT_NUMBER = 1000
MAX_ACCOUNT_NUMBER = 8999
INCOME_STATEMENT_START = 3000
VAT_ACCOUNT_PREFIX = "26"


class Statement(str, Enum):
    BALANCE_SHEET = "balance_sheet"
    INCOME_STATEMENT = "income_statement"


class SignConvention(str, Enum):
    DEBIT_NORMAL = "debit_normal"
    CREDIT_NORMAL = "credit_normal"


@dataclass(frozen=True)
class SubsectionDefinition:
    key: str
    name: str
    name_en: str
    low: int
    high: int

    def contains(self, number: int) -> bool:
        return self.low <= number <= self.high


@dataclass(frozen=True)
class SectionDefinition:
    """A report section covering [low, high]; flat when it has no subsections."""

    key: str
    name: str
    name_en: str
    statement: Statement
    low: int
    high: int
    subsections: tuple[SubsectionDefinition, ...] = ()

    def contains(self, number: int) -> bool:
        return self.low <= number <= self.high

    @property
    def is_flat(self) -> bool:
        return not self.subsections


@dataclass(frozen=True)
class AccountClassification:
    account_number: str
    statement: Statement
    section: str
    subsection: str | None
    sign_convention: SignConvention


def _sub(key: str, name: str, name_en: str, low: int, high: int) -> SubsectionDefinition:
    return SubsectionDefinition(key=key, name=name, name_en=name_en, low=low, high=high)


BALANCE_SHEET_SECTIONS: tuple[SectionDefinition, ...] = (
    SectionDefinition(
        "fixed_assets", "Anläggningstillgångar", "Fixed assets",
        Statement.BALANCE_SHEET, 1000, 1399,
        (
            _sub("intangible", "Immateriella anläggningstillgångar", "Intangible assets", 1000, 1099),
            _sub("tangible", "Materiella anläggningstillgångar", "Tangible assets", 1100, 1299),
            _sub("financial", "Finansiella anläggningstillgångar", "Financial assets", 1300, 1399),
        ),
    ),
    SectionDefinition(
        "current_assets", "Omsättningstillgångar", "Current assets",
        Statement.BALANCE_SHEET, 1400, 1999,
        (
            _sub("inventory", "Varulager m.m.", "Inventory", 1400, 1499),
            _sub("receivables", "Kortfristiga fordringar", "Current receivables", 1500, 1799),
            _sub("investments", "Kortfristiga placeringar", "Short-term investments", 1800, 1899),
            _sub("cash", "Kassa och bank", "Cash and bank", 1900, 1999),
        ),
    ),
    SectionDefinition(
        "equity", "Eget kapital", "Equity",
        Statement.BALANCE_SHEET, 2000, 2099,
        (
            _sub("restricted", "Bundet eget kapital", "Restricted equity", 2000, 2089),
            _sub("non_restricted", "Fritt eget kapital", "Non-restricted equity", 2090, 2099),
        ),
    ),
    SectionDefinition(
        "untaxed_reserves", "Obeskattade reserver", "Untaxed reserves",
        Statement.BALANCE_SHEET, 2100, 2199,
    ),
    SectionDefinition(
        "provisions", "Avsättningar", "Provisions",
        Statement.BALANCE_SHEET, 2200, 2299,
    ),
    SectionDefinition(
        "long_term_liabilities", "Långfristiga skulder", "Long-term liabilities",
        Statement.BALANCE_SHEET, 2300, 2399,
    ),
    SectionDefinition(
        "short_term_liabilities", "Kortfristiga skulder", "Current liabilities",
        Statement.BALANCE_SHEET, 2400, 2999,
    ),
)

INCOME_STATEMENT_SECTIONS: tuple[SectionDefinition, ...] = (
    SectionDefinition(
        "operating_revenue", "Rörelsens intäkter", "Operating revenue",
        Statement.INCOME_STATEMENT, 3000, 3999,
        (
            _sub("net_sales", "Nettoomsättning", "Net sales", 3000, 3799),
            _sub("capitalized_work", "Aktiverat arbete för egen räkning", "Capitalized own work", 3800, 3899),
            _sub("other_operating_income", "Övriga rörelseintäkter", "Other operating income", 3900, 3999),
        ),
    ),
    SectionDefinition(
        "operating_expenses", "Rörelsens kostnader", "Operating expenses",
        Statement.INCOME_STATEMENT, 4000, 7999,
        (
            _sub("goods", "Handelsvaror", "Goods for resale", 4000, 4999),
            _sub("other_external", "Övriga externa kostnader", "Other external expenses", 5000, 6999),
            _sub("personnel", "Personalkostnader", "Personnel costs", 7000, 7699),
            _sub("depreciation", "Av- och nedskrivningar", "Depreciation and write-downs", 7700, 7899),
            _sub("other_operating", "Övriga rörelsekostnader", "Other operating expenses", 7900, 7999),
        ),
    ),
    SectionDefinition(
        "financial_items", "Finansiella poster", "Financial items",
        Statement.INCOME_STATEMENT, 8000, 8799,
        (
            _sub("financial_income", "Finansiella intäkter", "Financial income", 8000, 8399),
            _sub("financial_expenses", "Finansiella kostnader", "Financial expenses", 8400, 8699),
            _sub("extraordinary", "Extraordinära poster", "Extraordinary items", 8700, 8799),
        ),
    ),
    SectionDefinition(
        "appropriations", "Bokslutsdispositioner", "Appropriations",
        Statement.INCOME_STATEMENT, 8800, 8899,
    ),
    SectionDefinition(
        "taxes", "Skatt på årets resultat", "Tax on profit for the year",
        Statement.INCOME_STATEMENT, 8900, 8999,
    ),
)

ASSET_SECTIONS: frozenset[str] = frozenset({"fixed_assets", "current_assets"})

_ALL_SECTIONS = BALANCE_SHEET_SECTIONS + INCOME_STATEMENT_SECTIONS


def normalize_account_number(account_number: str | int) -> int:
    """
    Parse a BAS account number.

    Raises:
        UnclassifiedAccountError: unless the input is exactly four ASCII
            digits (or an int) in 1000..8999.
    """
    if isinstance(account_number, bool):
        raise UnclassifiedAccountError(account_number)
    if isinstance(account_number, int):
        number = account_number
    elif isinstance(account_number, str):
        text = account_number.strip()
        if len(text) != 4 or not (text.isascii() and text.isdigit()):
            raise UnclassifiedAccountError(account_number)
        number = int(text)
    else:
        raise UnclassifiedAccountError(account_number)

    if not MIN_ACCOUNT_NUMBER <= number <= MAX_ACCOUNT_NUMBER:
        raise UnclassifiedAccountError(account_number)
    return number


def sign_convention(account_number: str | int) -> SignConvention:
    number = normalize_account_number(account_number)
    if number < 2000 or 4000 <= number < 8000:
        return SignConvention.DEBIT_NORMAL
    return SignConvention.CREDIT_NORMAL


def signed_balance(
    account_number: str | int, debit: Decimal, credit: Decimal
) -> Decimal:
    """Apply the account's sign convention to debit and credit totals."""
    if sign_convention(account_number) is SignConvention.DEBIT_NORMAL:
        return debit - credit
    return credit - debit


def section_for(account_number: str | int) -> SectionDefinition:
    number = normalize_account_number(account_number)
    for section in _ALL_SECTIONS:
        if section.contains(number):
            return section
    # Unreachable while the section tables cover 1000..8999 without gaps.
    raise UnclassifiedAccountError(account_number)


def classify(account_number: str | int) -> AccountClassification:
    """
    Classify an account number into its report position.

    Returns:
        AccountClassification with statement, section, subsection (None for
        flat sections) and sign convention.

    Raises:
        UnclassifiedAccountError: outside 1000..8999 or not a 4-digit number.
    """
    number = normalize_account_number(account_number)
    section = section_for(number)
    subsection: str | None = None
    for candidate in section.subsections:
        if candidate.contains(number):
            subsection = candidate.key
            break
    return AccountClassification(
        account_number=f"{number:04d}",
        statement=section.statement,
        section=section.key,
        subsection=subsection,
        sign_convention=sign_convention(number),
    )


def is_balance_sheet_account(account_number: str | int) -> bool:
    return normalize_account_number(account_number) < INCOME_STATEMENT_START


def is_vat_account(account_number: str) -> bool:
    return str(account_number).startswith(VAT_ACCOUNT_PREFIX)


def default_account_class(account_number: str | int) -> str:
    """BAS account class implied by the number, as the stored enum value."""
    number = normalize_account_number(account_number)
    if number < 2000:
        return "assets"
    if number < 2100:
        return "equity"
    if number < 3000:
        return "liabilities"
    if number < 4000:
        return "revenue"
    if number < 8000:
        return "expenses"
    if number < 8800:
        return "financial"
    return "year_end"


def allowed_account_classes(account_number: str | int) -> frozenset[str]:
    """
    Account classes consistent with the number range.

    Equity accounts are also accepted as "liabilities" and year-end accounts
    as "financial", matching charts that only use the first digit.
    """
    expected = default_account_class(account_number)
    if expected == "equity":
        return frozenset({"equity", "liabilities"})
    if expected == "year_end":
        return frozenset({"year_end", "financial"})
    return frozenset({expected})
