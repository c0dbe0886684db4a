"""
Bookkeeping Module (``ledger_modules.bookkeeping``).

Chart of accounts maintenance and voucher entry over the backend.
"""

from ledger_modules.bookkeeping.models import (
    VoucherSubmissionResult,
    VoucherSubmissionStatus,
)
from ledger_modules.bookkeeping.service import (
    ChartOfAccountsService,
    VoucherEntryService,
)

__all__ = [
    "ChartOfAccountsService",
    "VoucherEntryService",
    "VoucherSubmissionResult",
    "VoucherSubmissionStatus",
]
