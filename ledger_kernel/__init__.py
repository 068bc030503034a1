"""
Ledger Kernel

A double-entry bookkeeping core for Swedish BAS charts of accounts:
- Balanced journal entries with gapless-per-year verification numbers
- Draft / posted / voided lifecycle with append-only reversals
- Number-range account classification for statutory reporting
- Cent-exact Decimal arithmetic throughout
"""

__version__ = "0.1.0"
