"""
Ledger Kernel

Pure double-entry bookkeeping core for a voucher-based ledger:
- Strict Account / Voucher / Entry model validated at the backend boundary
- Debit-positive running balances with Decimal-only arithmetic
- Read-only selectors over an immutable snapshot of accounts and vouchers
- Typed exceptions and structured JSON logging
"""

__version__ = "0.1.0"
