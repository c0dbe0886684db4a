"""
Reporting Domain Models (``ledger_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects representing report outputs: account
ledger, trial balance, income and expenditure, balance sheet, account-wise
monthly comparison, dashboard summary and voucher register, plus the
``ReportOutcome`` envelope returned by ``ReportingService``.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Report totals are computed over the lines the report lists.

Audit relevance
---------------
* ``ReportMetadata`` carries the generation timestamp and parameters.
* ``warnings`` carry data-integrity findings; reports never correct data.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from ledger_kernel.domain.balances import DisplayBalance
from ledger_kernel.domain.dtos import IntegrityWarning
from ledger_kernel.domain.entities import AccountType, VoucherType


# =========================================================================
# Enums
# =========================================================================


class ReportType(str, Enum):
    """Types of reports."""

    LEDGER = "ledger"
    TRIAL_BALANCE = "trial_balance"
    INCOME_EXPENDITURE = "income_expenditure"
    BALANCE_SHEET = "balance_sheet"
    MONTHLY_COMPARISON = "monthly_comparison"
    DASHBOARD = "dashboard"
    VOUCHER_REGISTER = "voucher_register"


class MonthlyAccountFilter(str, Enum):
    """Which account types the monthly comparison lists."""

    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"


class ReportStatus(str, Enum):
    """Status of a report request."""

    GENERATED = "generated"
    INVALID_PARAMETERS = "invalid_parameters"
    ACCOUNT_NOT_FOUND = "account_not_found"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    FAILED = "failed"


# =========================================================================
# Report Metadata (common to all reports)
# =========================================================================


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every report."""

    report_type: ReportType
    entity_name: str
    currency: str
    as_of_date: date
    generated_at: str  # ISO format timestamp from injected clock
    period_start: date | None = None
    period_end: date | None = None
    financial_year: str | None = None


# =========================================================================
# Ledger
# =========================================================================


@dataclass(frozen=True)
class LedgerRow:
    """One posting on an account ledger with the balance after it."""

    date: date
    voucher_no: str
    voucher_type: VoucherType
    narration: str
    debit: Decimal
    credit: Decimal
    balance: DisplayBalance


@dataclass(frozen=True)
class LedgerReport:
    """Chronological postings for one account with running balance."""

    metadata: ReportMetadata
    account_code: str
    account_name: str
    account_type: AccountType
    opening_balance: DisplayBalance
    rows: tuple[LedgerRow, ...]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: DisplayBalance
    warnings: tuple[IntegrityWarning, ...] = ()


# =========================================================================
# Trial Balance
# =========================================================================


@dataclass(frozen=True)
class TrialBalanceLine:
    """A single account on the trial balance; one column is always zero."""

    account_code: str
    account_name: str
    account_type: AccountType
    debit: Decimal
    credit: Decimal
    is_active: bool = True


@dataclass(frozen=True)
class TrialBalanceReport:
    """Complete trial balance as of a date."""

    metadata: ReportMetadata
    lines: tuple[TrialBalanceLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    difference: Decimal  # total_debit - total_credit
    is_balanced: bool
    # Postings to account codes missing from the chart
    unattributed_debit: Decimal = Decimal("0")
    unattributed_credit: Decimal = Decimal("0")
    # Every posting up to the date, attributed or not
    posting_debit: Decimal = Decimal("0")
    posting_credit: Decimal = Decimal("0")
    warnings: tuple[IntegrityWarning, ...] = ()


# =========================================================================
# Income & Expenditure
# =========================================================================


@dataclass(frozen=True)
class StatementLine:
    """An account and its natural-side amount on a statement."""

    account_code: str
    account_name: str
    amount: Decimal


@dataclass(frozen=True)
class IncomeExpenditureReport:
    """Period activity of income and expense accounts."""

    metadata: ReportMetadata
    income: tuple[StatementLine, ...]
    expenditure: tuple[StatementLine, ...]
    total_income: Decimal
    total_expenditure: Decimal
    surplus: Decimal  # negative is a deficit
    is_surplus: bool
    warnings: tuple[IntegrityWarning, ...] = ()


# =========================================================================
# Balance Sheet
# =========================================================================


@dataclass(frozen=True)
class BalanceSheetReport:
    """Assets against liabilities and capital as of a date."""

    metadata: ReportMetadata
    assets: tuple[StatementLine, ...]
    liabilities: tuple[StatementLine, ...]
    capital: tuple[StatementLine, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal  # capital accounts only
    # Income less expenditure to date, opening balances included
    accumulated_surplus: Decimal
    total_liabilities_and_equity: Decimal
    difference: Decimal  # total_assets - total_liabilities_and_equity
    is_balanced: bool
    warnings: tuple[IntegrityWarning, ...] = ()


# =========================================================================
# Account-wise Monthly Comparison
# =========================================================================


@dataclass(frozen=True)
class MonthlyAccountRow:
    """Twelve monthly net amounts for one income or expense account."""

    account_code: str
    account_name: str
    account_type: AccountType
    monthly: tuple[Decimal, ...]
    total: Decimal


@dataclass(frozen=True)
class MonthlyComparisonReport:
    """Income and expenditure by account and month for a financial year."""

    metadata: ReportMetadata
    financial_year: str
    account_filter: MonthlyAccountFilter
    month_labels: tuple[str, ...]  # "Apr 2024", ...
    income_rows: tuple[MonthlyAccountRow, ...]
    expense_rows: tuple[MonthlyAccountRow, ...]
    monthly_income: tuple[Decimal, ...]
    monthly_expense: tuple[Decimal, ...]
    total_income: Decimal
    total_expense: Decimal
    net_surplus: Decimal
    warnings: tuple[IntegrityWarning, ...] = ()


# =========================================================================
# Voucher register and dashboard
# =========================================================================


@dataclass(frozen=True)
class VoucherSummary:
    """A voucher as listed on the register; amount is the total debit."""

    voucher_no: str
    voucher_type: VoucherType
    date: date
    narration: str
    amount: Decimal
    entry_count: int
    is_balanced: bool
    created_by: str | None = None


@dataclass(frozen=True)
class VoucherRegisterReport:
    """Filtered voucher list, newest first."""

    metadata: ReportMetadata
    vouchers: tuple[VoucherSummary, ...]
    total_amount: Decimal
    voucher_type: VoucherType | None = None
    search: str | None = None
    warnings: tuple[IntegrityWarning, ...] = ()


@dataclass(frozen=True)
class DashboardSummary:
    """Headline figures: position today and this month's activity."""

    metadata: ReportMetadata
    total_assets: Decimal
    total_liabilities: Decimal
    month_income: Decimal
    month_expenditure: Decimal
    month_surplus: Decimal
    recent_vouchers: tuple[VoucherSummary, ...]
    warnings: tuple[IntegrityWarning, ...] = ()


# =========================================================================
# Outcome envelope
# =========================================================================


@dataclass(frozen=True)
class ReportOutcome:
    """Result of a report request."""

    status: ReportStatus
    report_type: ReportType
    report: Any = None
    message: str | None = None
    warnings: tuple[IntegrityWarning, ...] = ()

    @property
    def is_success(self) -> bool:
        return self.status == ReportStatus.GENERATED
