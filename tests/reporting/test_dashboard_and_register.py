"""
Dashboard headline figures and the voucher register.
"""

from decimal import Decimal

from ledger_kernel.domain.entities import VoucherType
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import ReportStatus
from ledger_modules.reporting.service import ReportingService


class TestDashboard:

    def test_headline_figures(self, reporting_service):
        summary = reporting_service.dashboard().report
        assert summary.total_assets == Decimal("24000")
        assert summary.total_liabilities == Decimal("0")
        assert summary.month_income == Decimal("10000")
        assert summary.month_expenditure == Decimal("11000")
        assert summary.month_surplus == Decimal("-1000")

    def test_recent_vouchers_newest_first(self, reporting_service):
        summary = reporting_service.dashboard().report
        assert [v.voucher_no for v in summary.recent_vouchers] == [
            "JV-0001", "RV-0002", "PV-0002", "PV-0001", "RV-0001",
        ]

    def test_recent_voucher_count(self, backend, deterministic_clock):
        service = ReportingService(
            backend, clock=deterministic_clock,
            config=ReportingConfig(recent_voucher_count=2),
        )
        assert len(service.dashboard().report.recent_vouchers) == 2

    def test_period_is_current_month(self, reporting_service):
        metadata = reporting_service.dashboard().report.metadata
        assert metadata.period_start.isoformat() == "2024-04-01"
        assert metadata.period_end.isoformat() == "2024-04-30"


class TestVoucherRegister:

    def test_all_vouchers(self, reporting_service):
        report = reporting_service.voucher_register().report
        assert len(report.vouchers) == 5
        assert report.total_amount == Decimal("24500")
        assert report.vouchers[0].voucher_no == "JV-0001"

    def test_all_keyword(self, reporting_service):
        assert len(reporting_service.voucher_register("all").report.vouchers) == 5

    def test_filter_by_type(self, reporting_service):
        report = reporting_service.voucher_register(VoucherType.PAYMENT).report
        assert [v.voucher_no for v in report.vouchers] == ["PV-0002", "PV-0001"]
        assert report.total_amount == Decimal("11000")
        assert report.voucher_type is VoucherType.PAYMENT

    def test_search(self, reporting_service):
        report = reporting_service.voucher_register(search="rent").report
        assert [v.voucher_no for v in report.vouchers] == ["JV-0001", "PV-0001"]
        assert report.search == "rent"

    def test_date_range(self, reporting_service):
        report = reporting_service.voucher_register(
            from_date="2024-05-01", to_date="2024-05-31",
        ).report
        assert [v.voucher_no for v in report.vouchers] == ["JV-0001", "RV-0002"]

    def test_summary_fields(self, reporting_service):
        summary = reporting_service.voucher_register("Receipt").report.vouchers[-1]
        assert summary.voucher_no == "RV-0001"
        assert summary.amount == Decimal("10000")
        assert summary.entry_count == 2
        assert summary.is_balanced

    def test_unknown_type(self, reporting_service):
        outcome = reporting_service.voucher_register("Sales")
        assert outcome.status is ReportStatus.INVALID_PARAMETERS
