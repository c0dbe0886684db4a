"""
Balance sheet.
"""

from decimal import Decimal

from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.service import ReportingService


class TestBalanceSheet:

    def test_april_position(self, reporting_service):
        report = reporting_service.balance_sheet("2024-04-30").report
        assert [(l.account_code, l.amount) for l in report.assets] == [
            ("1001", Decimal("2000")),
            ("1002", Decimal("22000")),
        ]
        assert report.total_assets == Decimal("24000")
        assert report.total_liabilities == Decimal("0")
        assert report.total_equity == Decimal("25000")
        assert report.accumulated_surplus == Decimal("-1000")
        assert report.total_liabilities_and_equity == Decimal("24000")
        assert report.is_balanced

    def test_may_position(self, reporting_service):
        report = reporting_service.balance_sheet("2024-05-31").report
        assert report.total_assets == Decimal("25500")
        assert [(l.account_code, l.amount) for l in report.liabilities] == [
            ("2001", Decimal("2000")),
        ]
        assert report.accumulated_surplus == Decimal("-1500")
        assert report.total_liabilities_and_equity == Decimal("25500")
        assert report.difference == Decimal("0")

    def test_income_and_expense_not_listed(self, reporting_service):
        report = reporting_service.balance_sheet("2024-05-31").report
        listed = {l.account_code for l in report.assets + report.liabilities + report.capital}
        assert listed == {"1001", "1002", "2001", "3001"}

    def test_without_surplus_carry(self, backend, deterministic_clock):
        service = ReportingService(
            backend, clock=deterministic_clock,
            config=ReportingConfig(carry_surplus_to_equity=False),
        )
        report = service.balance_sheet("2024-04-30").report
        assert report.accumulated_surplus == Decimal("-1000")
        assert report.total_liabilities_and_equity == Decimal("25000")
        assert report.difference == Decimal("-1000")
        assert not report.is_balanced

    def test_scenario_books(self, scenario_service):
        report = scenario_service.balance_sheet("2024-04-30").report
        assert report.total_assets == Decimal("7000")
        assert report.accumulated_surplus == Decimal("2000")
        assert report.is_balanced
