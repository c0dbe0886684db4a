"""
Pure report transformation functions.

These functions turn a LedgerSnapshot (read through the kernel selectors)
into report DTOs.  ZERO I/O. ZERO side effects.

All monetary values are Decimal and every sum is exact; rounding happens
only in ``render_to_dict``.  Functions in this module follow the
ledger_kernel/domain/ purity convention:
- No backend access
- No clock access (dates and metadata are passed in)
- Deterministic: same inputs always produce same outputs
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ledger_kernel.domain.amounts import ZERO, quantize_amount, within_tolerance
from ledger_kernel.domain.balances import (
    DisplayBalance,
    apply_movement,
    natural_balance,
    opening_running_total,
)
from ledger_kernel.domain.dtos import IntegrityWarning
from ledger_kernel.domain.entities import Account, AccountType, Voucher, VoucherType
from ledger_kernel.domain.financial_year import FinancialYear
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_kernel.selectors.voucher_selector import VoucherSelector
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
    StatementLine,
    TrialBalanceLine,
    TrialBalanceReport,
    VoucherRegisterReport,
    VoucherSummary,
)

# =========================================================================
# Helpers
# =========================================================================


def _reportable_accounts(
    selector: LedgerSelector,
    config: ReportingConfig,
    types: Iterable[AccountType] | None = None,
) -> list[Account]:
    """Accounts in code order, honouring include_inactive and a type filter."""
    wanted = set(types) if types is not None else None
    accounts = [
        a for a in selector.snapshot.accounts
        if (config.include_inactive or a.is_active)
        and (wanted is None or a.account_type in wanted)
    ]
    return sorted(accounts, key=lambda a: a.account_code)


def period_amount(debit_total: Decimal, credit_total: Decimal, account_type: AccountType) -> Decimal:
    """
    Period activity on the account's natural side.

    Income: credits - debits.  Expense: debits - credits.
    """
    return natural_balance(debit_total - credit_total, account_type)


def _sum_lines(lines: Iterable[StatementLine]) -> Decimal:
    return sum((line.amount for line in lines), ZERO)


def _ledger_warnings(
    warnings: Iterable[IntegrityWarning],
    account_code: str,
    voucher_nos: set[str],
) -> list[IntegrityWarning]:
    """Keep the findings that touch this account or its vouchers."""
    relevant = []
    for warning in warnings:
        details = warning.details or {}
        if details.get("account_code") == account_code \
                or details.get("voucher_no") in voucher_nos \
                or details.get("record_key") in voucher_nos:
            relevant.append(warning)
    return relevant


# =========================================================================
# Ledger
# =========================================================================


def build_ledger(
    selector: LedgerSelector,
    account: Account,
    metadata: ReportMetadata,
    from_date: date | None = None,
    to_date: date | None = None,
) -> LedgerReport:
    """
    Build the ledger of one account.

    The opening balance is rolled forward to ``from_date``: the account's
    opening balance plus every posting dated strictly before it.  Each row
    carries the balance after that posting; the closing balance equals the
    opening plus the rows' debits less their credits.
    """
    if from_date is not None:
        running = selector.running_total(account, before=from_date)
    else:
        running = opening_running_total(account)
    opening = DisplayBalance.from_running_total(running)

    rows: list[LedgerRow] = []
    total_debit = ZERO
    total_credit = ZERO
    for posting in selector.postings(account.account_code, from_date, to_date):
        running = apply_movement(running, posting.debit, posting.credit)
        total_debit += posting.debit
        total_credit += posting.credit
        rows.append(LedgerRow(
            date=posting.date,
            voucher_no=posting.voucher_no,
            voucher_type=posting.voucher_type,
            narration=posting.narration,
            debit=posting.debit,
            credit=posting.credit,
            balance=DisplayBalance.from_running_total(running),
        ))

    voucher_nos = {row.voucher_no for row in rows}
    warnings = _ledger_warnings(selector.integrity_warnings(), account.account_code, voucher_nos)
    pre_opening = selector.pre_opening_postings(account)
    if pre_opening:
        warnings.append(IntegrityWarning(
            code="PRE_OPENING_ENTRY",
            message=(
                f"{len(pre_opening)} posting(s) on {account.account_code} are dated "
                f"before its opening balance date "
                f"{account.opening_balance_as_on_date.isoformat()}"
            ),
            details={
                "account_code": account.account_code,
                "voucher_nos": sorted({p.voucher_no for p in pre_opening}),
            },
        ))

    return LedgerReport(
        metadata=metadata,
        account_code=account.account_code,
        account_name=account.account_name,
        account_type=account.account_type,
        opening_balance=opening,
        rows=tuple(rows),
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=DisplayBalance.from_running_total(running),
        warnings=tuple(warnings),
    )


# =========================================================================
# Trial Balance
# =========================================================================


def build_trial_balance(
    selector: LedgerSelector,
    config: ReportingConfig,
    metadata: ReportMetadata,
    as_of_date: date | None = None,
) -> TrialBalanceReport:
    """
    Build a trial balance as of a date.

    A positive running total goes in the debit column, a negative one in
    the credit column as its absolute value.  Postings to unknown account
    codes are totalled separately and never folded into an account line.
    The posting totals cover every voucher line up to the date, so a
    reader can reconcile the account columns against the journal.
    """
    lines: list[TrialBalanceLine] = []
    for account in _reportable_accounts(selector, config):
        total = selector.running_total(account, as_of=as_of_date)
        if total == ZERO and not config.include_zero_balances:
            continue
        lines.append(TrialBalanceLine(
            account_code=account.account_code,
            account_name=account.account_name,
            account_type=account.account_type,
            debit=total if total > ZERO else ZERO,
            credit=-total if total < ZERO else ZERO,
            is_active=account.is_active,
        ))

    total_debit = sum((line.debit for line in lines), ZERO)
    total_credit = sum((line.credit for line in lines), ZERO)
    unattributed = selector.unattributed_postings(to_date=as_of_date)
    posting_debit, posting_credit = selector.total_debits_credits(as_of=as_of_date)

    return TrialBalanceReport(
        metadata=metadata,
        lines=tuple(lines),
        total_debit=total_debit,
        total_credit=total_credit,
        difference=total_debit - total_credit,
        is_balanced=within_tolerance(total_debit, total_credit, config.balance_tolerance),
        unattributed_debit=sum((p.debit for p in unattributed), ZERO),
        unattributed_credit=sum((p.credit for p in unattributed), ZERO),
        posting_debit=posting_debit,
        posting_credit=posting_credit,
        warnings=selector.integrity_warnings(),
    )


# =========================================================================
# Income & Expenditure
# =========================================================================


def build_income_expenditure(
    selector: LedgerSelector,
    config: ReportingConfig,
    metadata: ReportMetadata,
    from_date: date | None = None,
    to_date: date | None = None,
) -> IncomeExpenditureReport:
    """
    Build the income and expenditure account for a period.

    Only postings inside ``[from_date, to_date]`` count; opening balances
    are excluded.  Accounts with zero net activity are omitted.
    """
    income: list[StatementLine] = []
    expenditure: list[StatementLine] = []
    for account in _reportable_accounts(
        selector, config, (AccountType.INCOME, AccountType.EXPENSE),
    ):
        activity = selector.activity(account.account_code, from_date, to_date)
        amount = period_amount(activity.debit_total, activity.credit_total, account.account_type)
        if amount == ZERO:
            continue
        line = StatementLine(account.account_code, account.account_name, amount)
        if account.account_type is AccountType.INCOME:
            income.append(line)
        else:
            expenditure.append(line)

    total_income = _sum_lines(income)
    total_expenditure = _sum_lines(expenditure)
    surplus = total_income - total_expenditure

    return IncomeExpenditureReport(
        metadata=metadata,
        income=tuple(income),
        expenditure=tuple(expenditure),
        total_income=total_income,
        total_expenditure=total_expenditure,
        surplus=surplus,
        is_surplus=surplus >= ZERO,
        warnings=selector.integrity_warnings(),
    )


# =========================================================================
# Balance Sheet
# =========================================================================


def build_balance_sheet(
    selector: LedgerSelector,
    config: ReportingConfig,
    metadata: ReportMetadata,
    as_of_date: date | None = None,
) -> BalanceSheetReport:
    """
    Build a balance sheet as of a date.

    Asset, liability and capital accounts are listed at their natural
    balances.  Income and expense accounts are not listed; their natural
    balances to date (opening balances included) form the accumulated
    surplus, which is added to the liabilities side when
    ``config.carry_surplus_to_equity`` is set.
    """
    assets: list[StatementLine] = []
    liabilities: list[StatementLine] = []
    capital: list[StatementLine] = []
    accumulated_surplus = ZERO

    sections = {
        AccountType.ASSET: assets,
        AccountType.LIABILITY: liabilities,
        AccountType.CAPITAL: capital,
    }
    for account in _reportable_accounts(selector, config):
        total = selector.running_total(account, as_of=as_of_date)
        natural = natural_balance(total, account.account_type)
        if account.account_type is AccountType.INCOME:
            accumulated_surplus += natural
            continue
        if account.account_type is AccountType.EXPENSE:
            accumulated_surplus -= natural
            continue
        if natural == ZERO and not config.include_zero_balances:
            continue
        sections[account.account_type].append(
            StatementLine(account.account_code, account.account_name, natural),
        )

    total_assets = _sum_lines(assets)
    total_liabilities = _sum_lines(liabilities)
    total_equity = _sum_lines(capital)
    total_liabilities_and_equity = total_liabilities + total_equity
    if config.carry_surplus_to_equity:
        total_liabilities_and_equity += accumulated_surplus

    return BalanceSheetReport(
        metadata=metadata,
        assets=tuple(assets),
        liabilities=tuple(liabilities),
        capital=tuple(capital),
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_equity=total_equity,
        accumulated_surplus=accumulated_surplus,
        total_liabilities_and_equity=total_liabilities_and_equity,
        difference=total_assets - total_liabilities_and_equity,
        is_balanced=within_tolerance(
            total_assets, total_liabilities_and_equity, config.balance_tolerance,
        ),
        warnings=selector.integrity_warnings(),
    )


# =========================================================================
# Account-wise Monthly Comparison
# =========================================================================


_FILTER_TYPES = {
    MonthlyAccountFilter.ALL: (AccountType.INCOME, AccountType.EXPENSE),
    MonthlyAccountFilter.INCOME: (AccountType.INCOME,),
    MonthlyAccountFilter.EXPENSE: (AccountType.EXPENSE,),
}


def _column_totals(rows: Iterable[MonthlyAccountRow], width: int) -> tuple[Decimal, ...]:
    totals = [ZERO] * width
    for row in rows:
        for i, amount in enumerate(row.monthly):
            totals[i] += amount
    return tuple(totals)


def build_monthly_comparison(
    selector: LedgerSelector,
    config: ReportingConfig,
    metadata: ReportMetadata,
    financial_year: FinancialYear,
    account_filter: MonthlyAccountFilter = MonthlyAccountFilter.ALL,
) -> MonthlyComparisonReport:
    """
    Build the account-wise monthly comparison for a financial year.

    Each income and expense account with postings in the year gets twelve
    monthly amounts on its natural side plus a row total.
    """
    months = financial_year.months()
    income_rows: list[MonthlyAccountRow] = []
    expense_rows: list[MonthlyAccountRow] = []

    for account in _reportable_accounts(selector, config, _FILTER_TYPES[account_filter]):
        postings = selector.postings(
            account.account_code, financial_year.start, financial_year.end,
        )
        if not postings:
            continue
        monthly = [ZERO] * len(months)
        for posting in postings:
            index = financial_year.month_index(posting.date)
            monthly[index] += period_amount(posting.debit, posting.credit, account.account_type)

        row = MonthlyAccountRow(
            account_code=account.account_code,
            account_name=account.account_name,
            account_type=account.account_type,
            monthly=tuple(monthly),
            total=sum(monthly, ZERO),
        )
        if account.account_type is AccountType.INCOME:
            income_rows.append(row)
        else:
            expense_rows.append(row)

    total_income = sum((r.total for r in income_rows), ZERO)
    total_expense = sum((r.total for r in expense_rows), ZERO)

    return MonthlyComparisonReport(
        metadata=metadata,
        financial_year=financial_year.label,
        account_filter=account_filter,
        month_labels=tuple(m.strftime("%b %Y") for m in months),
        income_rows=tuple(income_rows),
        expense_rows=tuple(expense_rows),
        monthly_income=_column_totals(income_rows, len(months)),
        monthly_expense=_column_totals(expense_rows, len(months)),
        total_income=total_income,
        total_expense=total_expense,
        net_surplus=total_income - total_expense,
        warnings=selector.integrity_warnings(),
    )


# =========================================================================
# Voucher register and dashboard
# =========================================================================


def summarize_voucher(voucher: Voucher, config: ReportingConfig) -> VoucherSummary:
    return VoucherSummary(
        voucher_no=voucher.voucher_no,
        voucher_type=voucher.voucher_type,
        date=voucher.date,
        narration=voucher.narration,
        amount=voucher.total_debit,
        entry_count=len(voucher.entries),
        is_balanced=voucher.is_balanced(config.balance_tolerance),
        created_by=voucher.created_by,
    )


def build_voucher_register(
    selector: VoucherSelector,
    config: ReportingConfig,
    metadata: ReportMetadata,
    voucher_type: VoucherType | None = None,
    search: str | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
) -> VoucherRegisterReport:
    summaries = tuple(
        summarize_voucher(v, config)
        for v in selector.filter(voucher_type, search, from_date, to_date)
    )
    return VoucherRegisterReport(
        metadata=metadata,
        vouchers=summaries,
        total_amount=sum((s.amount for s in summaries), ZERO),
        voucher_type=voucher_type,
        search=search or None,
        warnings=selector.snapshot.issues,
    )


def build_dashboard_summary(
    ledger: LedgerSelector,
    vouchers: VoucherSelector,
    config: ReportingConfig,
    metadata: ReportMetadata,
    today: date,
) -> DashboardSummary:
    """
    Headline figures: the balance sheet as of ``today``, income and
    expenditure from the first of the current month, and recent vouchers.
    """
    position = build_balance_sheet(ledger, config, metadata, as_of_date=today)
    month = build_income_expenditure(
        ledger, config, metadata, from_date=today.replace(day=1), to_date=today,
    )
    return DashboardSummary(
        metadata=metadata,
        total_assets=position.total_assets,
        total_liabilities=position.total_liabilities,
        month_income=month.total_income,
        month_expenditure=month.total_expenditure,
        month_surplus=month.surplus,
        recent_vouchers=tuple(
            summarize_voucher(v, config) for v in vouchers.recent(config.recent_voucher_count)
        ),
        warnings=ledger.integrity_warnings(),
    )


# =========================================================================
# Serialization
# =========================================================================


def render_to_dict(
    obj: object,
    precision: int | None = None,
) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (quantized to ``precision`` places when given)
    - DisplayBalance -> amount, side and a "1234.00 Dr" label
    - UUID -> str
    - date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(quantize_amount(obj, precision)) if precision is not None else str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, DisplayBalance):
        return {
            "amount": render_to_dict(obj.amount, precision),
            "side": render_to_dict(obj.side, precision),
            "label": obj.label(precision if precision is not None else 2),
        }
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item, precision) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v, precision) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name), precision)
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
