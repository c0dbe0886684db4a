"""
Reporting Module (``ledger_modules.reporting``).

Responsibility
--------------
Read-only module that derives every report from the voucher entries and
account opening balances: account ledger with running balance, trial
balance, income and expenditure account, balance sheet, account-wise
monthly comparison, dashboard summary and voucher register.

Architecture position
---------------------
**Modules layer** -- the report computations are pure functions in
``statements.py``; ``ReportingService`` loads the snapshot and wraps the
result in a ``ReportOutcome``.

Invariants enforced
-------------------
* Nothing is written back to the backend (read-only guarantee).
* No stored balances: every figure is recomputed from the snapshot.

Failure modes
-------------
* Data problems (unbalanced vouchers, unknown accounts, unparseable
  records) are reported as warnings, never corrected.
"""

from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    BalanceSheetReport,
    DashboardSummary,
    IncomeExpenditureReport,
    LedgerReport,
    LedgerRow,
    MonthlyAccountFilter,
    MonthlyAccountRow,
    MonthlyComparisonReport,
    ReportMetadata,
    ReportOutcome,
    ReportStatus,
    ReportType,
    StatementLine,
    TrialBalanceLine,
    TrialBalanceReport,
    VoucherRegisterReport,
    VoucherSummary,
)
from ledger_modules.reporting.service import ReportingService
from ledger_modules.reporting.statements import render_to_dict

__all__ = [
    # Service
    "ReportingService",
    # Config
    "ReportingConfig",
    # Models
    "ReportType",
    "ReportStatus",
    "ReportOutcome",
    "ReportMetadata",
    "LedgerRow",
    "LedgerReport",
    "TrialBalanceLine",
    "TrialBalanceReport",
    "StatementLine",
    "IncomeExpenditureReport",
    "BalanceSheetReport",
    "MonthlyAccountFilter",
    "MonthlyAccountRow",
    "MonthlyComparisonReport",
    "VoucherSummary",
    "VoucherRegisterReport",
    "DashboardSummary",
    # Serialization
    "render_to_dict",
]
