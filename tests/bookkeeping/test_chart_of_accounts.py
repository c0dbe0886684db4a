"""
Chart of accounts maintenance.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.entities import AccountType, BalanceSide
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    DuplicateAccountCodeError,
    MalformedRecordError,
)


class TestListing:

    def test_sorted_by_code(self, chart_service):
        codes = [a.account_code for a in chart_service.list_accounts()]
        assert codes == sorted(codes)
        assert len(codes) == 8

    def test_active_accounts(self, chart_service):
        chart_service.deactivate_account("4002")
        assert "4002" not in [a.account_code for a in chart_service.active_accounts()]
        assert "4002" in [a.account_code for a in chart_service.list_accounts()]

    def test_get_account(self, chart_service):
        assert chart_service.get_account("3001").account_type is AccountType.CAPITAL
        with pytest.raises(AccountNotFoundError):
            chart_service.get_account("7777")


class TestCreateAccount:

    def test_defaults(self, chart_service):
        account = chart_service.create_account("1003", "Fixed Deposit", "Asset")
        assert account.opening_balance == Decimal("0")
        assert account.opening_balance_type is BalanceSide.DEBIT
        assert account.opening_balance_as_on_date == date(2024, 4, 30)
        assert account.is_active
        assert chart_service.get_account("1003") == account

    def test_liability_opens_on_credit(self, chart_service):
        account = chart_service.create_account(
            "2002", "Security Deposits", AccountType.LIABILITY,
            opening_balance="1000", opening_balance_as_on_date="2024-04-01",
        )
        assert account.opening_balance_type is BalanceSide.CREDIT
        assert account.opening_balance == Decimal("1000")

    def test_explicit_side(self, chart_service):
        account = chart_service.create_account(
            "2003", "Staff Advance", "Liability",
            opening_balance=250, opening_balance_type="Debit",
        )
        assert account.opening_balance_type is BalanceSide.DEBIT

    def test_parent_must_exist(self, chart_service):
        with pytest.raises(AccountNotFoundError):
            chart_service.create_account("1004", "Petty Cash", "Asset", parent="1999")
        account = chart_service.create_account("1004", "Petty Cash", "Asset", parent="1001")
        assert account.parent == "1001"

    def test_duplicate_code(self, chart_service):
        with pytest.raises(DuplicateAccountCodeError):
            chart_service.create_account("1001", "Cash again", "Asset")

    def test_unknown_type(self, chart_service):
        with pytest.raises(ValueError):
            chart_service.create_account("6001", "Stock", "Inventory")


class TestUpdateAccount:

    def test_rename(self, chart_service):
        account = chart_service.update_account("4001", account_name="Donations and Grants")
        assert account.account_name == "Donations and Grants"
        assert chart_service.get_account("4001").account_name == "Donations and Grants"

    def test_opening_balance_coerced(self, chart_service):
        account = chart_service.update_account(
            "1001", opening_balance="6000", opening_balance_as_on_date="2024-04-02",
        )
        assert account.opening_balance == Decimal("6000")
        assert account.opening_balance_as_on_date == date(2024, 4, 2)

    def test_code_is_immutable(self, chart_service):
        with pytest.raises(MalformedRecordError) as exc_info:
            chart_service.update_account("4001", account_code="4100")
        assert exc_info.value.error_codes == ["ACCOUNT_CODE_IMMUTABLE"]

    def test_unknown_field(self, chart_service):
        with pytest.raises(ValueError, match="colour"):
            chart_service.update_account("4001", colour="green")

    def test_unknown_account(self, chart_service):
        with pytest.raises(AccountNotFoundError):
            chart_service.update_account("7777", account_name="x")


class TestDeactivateAccount:

    def test_history_survives(self, chart_service, reporting_service):
        chart_service.deactivate_account("5001")
        assert not chart_service.get_account("5001").is_active
        report = reporting_service.ledger("5001").report
        assert [r.voucher_no for r in report.rows] == ["PV-0002"]

    def test_logged(self, chart_service, log_stream):
        chart_service.deactivate_account("5001")
        events = [r for r in log_stream() if r["message"] == "account_deactivated"]
        assert events[-1]["account_code"] == "5001"
