"""
VAT report builder (Momsrapport).

Responsibility
--------------
Buckets posted lines on BAS VAT accounts (26xx) by rate and kind, and nets
output VAT against input VAT for the reporting window.

Architecture position
---------------------
**Modules layer** -- pure function with ZERO I/O.

Invariants enforced
-------------------
* Only POSTED lines on accounts starting with ``26`` contribute.
* Output buckets: credit - debit.  Input buckets: debit - credit.
* ``net_vat = output_total - input_total``; positive is payable.
* Every 26xx line lands in exactly one bucket; unrecognised accounts
  fall into output "other".
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from ledger_kernel.domain.account_classifier import is_vat_account
from ledger_kernel.domain.amounts import round_cents, sum_cents
from ledger_kernel.domain.dtos import LedgerLine
from ledger_modules.reporting.models import (
    ReportMetadata,
    ReportWindow,
    VatBucket,
    VatReport,
    VatTransaction,
)

OUTPUT = "output"
INPUT = "input"

# (key, kind, name, account-number prefixes); first match wins
VAT_BUCKETS: tuple[tuple[str, str, str, tuple[str, ...]], ...] = (
    ("output_25", OUTPUT, "Utgående moms 25 %", ("2610", "2611", "2612")),
    ("output_12", OUTPUT, "Utgående moms 12 %", ("2620", "2621", "2622")),
    ("output_6", OUTPUT, "Utgående moms 6 %", ("2630", "2631", "2632")),
    ("input_deductible", INPUT, "Ingående moms", ("2640", "2641")),
    ("input_reverse_charge", INPUT, "Ingående moms omvänd skattskyldighet", ("2650",)),
    ("input_eu_acquisitions", INPUT, "Ingående moms EU-förvärv", ("2660",)),
)
OTHER_BUCKET = ("output_other", OUTPUT, "Övrig utgående moms", ())


def bucket_for(account_number: str) -> tuple[str, str, str, tuple[str, ...]]:
    """Return the bucket definition a VAT account number belongs to."""
    for definition in VAT_BUCKETS:
        if account_number.startswith(definition[3]):
            return definition
    return OTHER_BUCKET


def _transaction(line: LedgerLine) -> VatTransaction:
    return VatTransaction(
        line_id=line.line_id,
        entry_id=line.entry_id,
        entry_date=line.entry_date,
        verification_number=line.verification_number,
        description=line.description,
        account_number=line.account_number,
        account_name=line.account_name,
        debit=line.debit,
        credit=line.credit,
    )


def build_vat_report(
    lines: Iterable[LedgerLine],
    window: ReportWindow,
    metadata: ReportMetadata,
) -> VatReport:
    """
    Build the VAT report for a window.

    Args:
        lines: Ledger lines; non-posted, non-VAT and out-of-window lines
            are skipped.
        window: Usually a period (the VAT reporting period).
        metadata: Pre-built report metadata.
    """
    definitions = VAT_BUCKETS + (OTHER_BUCKET,)
    members: dict[str, list[LedgerLine]] = {d[0]: [] for d in definitions}
    for line in lines:
        if not line.is_posted or not is_vat_account(line.account_number):
            continue
        if window.fiscal_year_id is not None and line.fiscal_year_id != window.fiscal_year_id:
            continue
        if not window.contains(line.entry_date):
            continue
        members[bucket_for(line.account_number)[0]].append(line)

    output_buckets: list[VatBucket] = []
    input_buckets: list[VatBucket] = []
    for key, kind, name, _prefixes in definitions:
        bucket_lines = members[key]
        if kind == OUTPUT:
            amount = sum_cents(l.credit - l.debit for l in bucket_lines)
        else:
            amount = sum_cents(l.debit - l.credit for l in bucket_lines)
        bucket = VatBucket(
            key=key,
            name=name,
            amount=amount,
            transactions=tuple(_transaction(l) for l in bucket_lines),
        )
        (output_buckets if kind == OUTPUT else input_buckets).append(bucket)

    output_total = sum_cents(b.amount for b in output_buckets)
    input_total = sum_cents(b.amount for b in input_buckets)
    net_vat: Decimal = round_cents(output_total - input_total)

    return VatReport(
        metadata=metadata,
        output_vat=tuple(output_buckets),
        output_total=output_total,
        input_vat=tuple(input_buckets),
        input_total=input_total,
        net_vat=net_vat,
    )
