"""
Ledger Modules.

Thin layers over the Ledger Kernel.  Each module contains its domain
models, configuration schema, pure builders and one service that bridges
kernel selectors to those builders.

Modules:
- Reporting: Balansräkning, Resultaträkning, Momsrapport, Huvudbok
"""
