"""
Read-only query selectors over a LedgerSnapshot.
"""

from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.ledger_selector import AccountActivity, LedgerSelector, Posting
from ledger_kernel.selectors.voucher_selector import VoucherSelector

__all__ = [
    "AccountActivity",
    "BaseSelector",
    "LedgerSelector",
    "Posting",
    "VoucherSelector",
]
