"""
Voucher entry: numbering, drafts, submission and deletion.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.amounts import ZERO
from ledger_kernel.domain.entities import Entry, VoucherDraft, VoucherType
from ledger_kernel.exceptions import BackendUnavailableError, VoucherNotFoundError
from ledger_modules.bookkeeping.models import VoucherSubmissionStatus


def _draft(*entries, voucher_no="", narration="Stationery", day=date(2024, 4, 25)):
    return VoucherDraft(
        voucher_type=VoucherType.PAYMENT,
        voucher_no=voucher_no,
        date=day,
        narration=narration,
        entries=tuple(entries),
    )


def _payment(amount="250", expense="5002", voucher_no=""):
    return _draft(
        Entry("", ZERO, ZERO),
        Entry(expense, debit=Decimal(amount)),
        Entry("1001", credit=Decimal(amount)),
        Entry("", ZERO, ZERO),
        voucher_no=voucher_no,
    )


class TestNumbering:

    def test_next_number_per_type(self, entry_service):
        assert entry_service.next_voucher_number(VoucherType.PAYMENT) == "PV-0003"
        assert entry_service.next_voucher_number("Journal") == "JV-0002"
        assert entry_service.next_voucher_number("Contra") == "CV-0001"

    def test_new_draft(self, entry_service):
        draft = entry_service.new_draft("Receipt")
        assert draft.voucher_no == "RV-0003"
        assert draft.date == date(2024, 4, 30)
        assert draft.entries == ()


class TestSubmit:

    def test_accepted(self, entry_service, backend):
        result = entry_service.submit(_payment(), created_by="treasurer")
        assert result.is_success
        assert result.status is VoucherSubmissionStatus.SUBMITTED
        assert result.voucher_no == "PV-0003"
        assert len(result.voucher.entries) == 2
        assert result.voucher.created_by == "treasurer"
        assert "PV-0003" in [v["voucherNo"] for v in backend.list_vouchers()]

    def test_books_stay_balanced(self, entry_service, reporting_service):
        entry_service.submit(_payment("1234.56"))
        assert reporting_service.trial_balance("2024-04-30").report.is_balanced

    def test_every_error_reported(self, entry_service, backend):
        draft = _draft(
            Entry("5002", debit=Decimal("100")),
            Entry("1001", credit=Decimal("90")),
            narration="  ",
        )
        result = entry_service.submit(draft)
        assert result.status is VoucherSubmissionStatus.INVALID
        assert set(result.error_codes) == {"UNBALANCED_VOUCHER", "MISSING_NARRATION"}
        assert len(backend.list_vouchers()) == 5

    def test_single_line(self, entry_service):
        result = entry_service.submit(_draft(Entry("5002", debit=Decimal("100"))))
        assert "INSUFFICIENT_ENTRIES" in result.error_codes

    def test_within_tolerance(self, entry_service):
        draft = _draft(
            Entry("5002", debit=Decimal("100.004")),
            Entry("1001", credit=Decimal("100")),
        )
        assert entry_service.submit(draft).is_success

    def test_amount_on_unnamed_line(self, entry_service, backend):
        draft = _draft(
            Entry("", debit=Decimal("100")),
            Entry("1001", credit=Decimal("100")),
            Entry("5002", debit=Decimal("100")),
        )
        result = entry_service.submit(draft)
        assert result.status is VoucherSubmissionStatus.INVALID
        assert "MISSING_ACCOUNT" in result.error_codes
        assert len(backend.list_vouchers()) == 5

    def test_inactive_account(self, entry_service, chart_service):
        chart_service.deactivate_account("5002")
        result = entry_service.submit(_payment())
        assert result.error_codes == ("ACCOUNT_INACTIVE",)

    def test_unknown_account(self, entry_service):
        result = entry_service.submit(_payment(expense="5999"))
        assert result.error_codes == ("ACCOUNT_NOT_FOUND",)

    def test_duplicate_number_rejected_by_backend(self, entry_service):
        result = entry_service.submit(_payment(voucher_no="PV-0001"))
        assert result.status is VoucherSubmissionStatus.REJECTED
        assert result.error_code == "DUPLICATE_VOUCHER_NUMBER"

    def test_backend_down(self, entry_service, backend):
        backend.available = False
        with pytest.raises(BackendUnavailableError):
            entry_service.submit(_payment())

    def test_logged_with_context(self, entry_service, log_stream):
        entry_service.submit(_payment(), created_by="treasurer")
        submitted = next(r for r in log_stream() if r["message"] == "voucher_submitted")
        assert submitted["voucher_no"] == "PV-0003"
        assert submitted["actor_id"] == "treasurer"
        assert submitted["amount"] == "250"


class TestDelete:

    def test_delete(self, entry_service, reporting_service):
        entry_service.delete("PV-0001")
        report = reporting_service.ledger("1001").report
        assert report.rows == ()
        assert report.closing_balance.label() == "5000.00 Dr"

    def test_unknown(self, entry_service):
        with pytest.raises(VoucherNotFoundError):
            entry_service.delete("PV-0099")
