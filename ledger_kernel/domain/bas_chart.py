"""
BAS starter chart -- the standard accounts seeded for a new organization.

Pure reference data.  ChartOfAccountsService.seed_bas_chart registers these
as system accounts; every number classifies under the BAS ranges and its
account_class is one of allowed_account_classes(number).
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class BASAccountTemplate:
    account_number: str
    name: str
    name_en: str
    account_class: str
    account_type: str = "detail"
    default_vat_rate: Decimal | None = None


def _t(number, name, name_en, account_class, account_type="detail", vat=None):
    rate = Decimal(vat) if vat is not None else None
    return BASAccountTemplate(number, name, name_en, account_class, account_type, rate)


BAS_STARTER_CHART: tuple[BASAccountTemplate, ...] = (
    # Class 1: Tillgångar
    _t("1510", "Kundfordringar", "Accounts Receivable", "assets"),
    _t("1910", "Kassa", "Cash", "assets"),
    _t("1920", "Plusgiro", "Plusgiro", "assets"),
    _t("1930", "Företagskonto/checkkonto/affärskonto", "Business Account", "assets"),
    _t("1940", "Övriga bankkonton", "Other Bank Accounts", "assets"),
    # Class 2: Eget kapital och skulder
    _t("2010", "Eget kapital", "Equity", "equity"),
    _t("2440", "Leverantörsskulder", "Accounts Payable", "liabilities"),
    _t("2610", "Utgående moms 25%", "Output VAT 25%", "liabilities", vat="25"),
    _t("2620", "Utgående moms 12%", "Output VAT 12%", "liabilities", vat="12"),
    _t("2630", "Utgående moms 6%", "Output VAT 6%", "liabilities", vat="6"),
    _t("2640", "Ingående moms", "Input VAT", "liabilities"),
    _t("2650", "Redovisningskonto för moms", "VAT Settlement Account", "liabilities"),
    _t("2710", "Personalskatt", "Employee Withholding Tax", "liabilities"),
    _t("2910", "Upplupna löner", "Accrued Wages", "liabilities"),
    _t("2920", "Upplupna semesterlöner", "Accrued Vacation Pay", "liabilities"),
    # Class 3: Intäkter
    _t(
        "3000",
        "Försäljning och utfört arbete samt övriga momspliktiga intäkter",
        "Sales Revenue",
        "revenue",
        "header",
    ),
    _t("3010", "Försäljning varor 25% moms", "Sales Goods 25% VAT", "revenue", vat="25"),
    _t("3011", "Försäljning varor 12% moms", "Sales Goods 12% VAT", "revenue", vat="12"),
    _t("3012", "Försäljning varor 6% moms", "Sales Goods 6% VAT", "revenue", vat="6"),
    _t("3040", "Försäljning tjänster 25% moms", "Sales Services 25% VAT", "revenue", vat="25"),
    _t("3041", "Försäljning tjänster 12% moms", "Sales Services 12% VAT", "revenue", vat="12"),
    _t("3042", "Försäljning tjänster 6% moms", "Sales Services 6% VAT", "revenue", vat="6"),
    _t("3100", "Försäljning momsfri", "Tax-Exempt Sales", "revenue", vat="0"),
    _t("3300", "Export", "Export Sales", "revenue", vat="0"),
    _t("3740", "Öres- och kronutjämning", "Rounding Adjustment", "revenue"),
    # Class 4: Varuinköp
    _t("4000", "Varuinköp", "Purchases", "expenses", "header"),
    _t("4010", "Inköp material och varor", "Materials and Goods Purchases", "expenses"),
    # Class 5: Övriga externa kostnader
    _t("5000", "Lokalkostnader", "Premises Costs", "expenses", "header"),
    _t("5010", "Lokalhyra", "Rent", "expenses"),
    _t(
        "5400",
        "Förbrukningsinventarier och förbrukningsmaterial",
        "Consumable Equipment",
        "expenses",
        "header",
    ),
    _t("5410", "Förbrukningsinventarier", "Consumable Supplies", "expenses"),
    _t("5800", "Resekostnader", "Travel Expenses", "expenses", "header"),
    _t("5810", "Biljetter", "Travel Tickets", "expenses"),
    _t("5900", "Reklam och PR", "Advertising and PR", "expenses", "header"),
    _t("5910", "Annonsering", "Advertising", "expenses"),
    # Class 6
    _t("6000", "Övriga försäljningskostnader", "Other Sales Expenses", "expenses", "header"),
    _t("6100", "Kontorsmaterial och trycksaker", "Office Supplies", "expenses", "header"),
    _t("6110", "Kontorsmaterial", "Office Materials", "expenses"),
    _t("6200", "Tele och post", "Telephone and Postage", "expenses", "header"),
    _t("6210", "Telekommunikation", "Telecommunications", "expenses"),
    _t("6500", "Övriga externa tjänster", "Other External Services", "expenses", "header"),
    _t("6530", "Redovisningstjänster", "Accounting Services", "expenses"),
    _t("6540", "IT-tjänster", "IT Services", "expenses"),
    _t("6570", "Bankkostnader", "Bank Fees", "expenses"),
    # Class 7: Personalkostnader
    _t(
        "7000",
        "Löner till kollektivanställda",
        "Wages Collective Employees",
        "expenses",
        "header",
    ),
    _t("7010", "Löner till kollektivanställda", "Wages Collective", "expenses"),
    _t(
        "7200",
        "Löner till tjänstemän och företagsledare",
        "Salaries Management",
        "expenses",
        "header",
    ),
    _t("7210", "Löner till tjänstemän", "Salaries Employees", "expenses"),
    _t(
        "7500",
        "Sociala och andra avgifter enligt lag och avtal",
        "Social Contributions",
        "expenses",
        "header",
    ),
    _t("7510", "Arbetsgivaravgifter", "Employer Contributions", "expenses"),
    # Class 8: Finansiella poster och bokslutsdispositioner
    _t("8000", "Finansiella intäkter", "Financial Income", "financial", "header"),
    _t("8300", "Ränteintäkter", "Interest Income", "financial"),
    _t("8400", "Räntekostnader", "Interest Expenses", "financial"),
    _t("8910", "Skatt på årets resultat", "Income Tax", "year_end"),
    _t("8990", "Resultat", "Net Income", "year_end", "total"),
)
