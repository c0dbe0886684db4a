"""
Boundary validation of backend payloads.

Malformed records are rejected and reported; well-formed but
inconsistent data (unbalanced vouchers, unknown accounts) loads as-is.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.entities import AccountType, BalanceSide, VoucherType
from ledger_kernel.exceptions import MalformedRecordError
from ledger_kernel.services.snapshot_loader import (
    UNDATED_OPENING,
    SnapshotLoader,
    account_to_payload,
    parse_account,
    parse_voucher,
    voucher_to_payload,
)
from tests.factories import chart_of_accounts, voucher_book


def _account(**overrides):
    payload = {
        "accountCode": "1001",
        "accountName": "Cash in Hand",
        "accountType": "Asset",
        "parent": None,
        "openingBalance": 5000,
        "openingBalanceType": "Debit",
        "openingBalanceAsOnDate": "2024-04-01T00:00:00.000Z",
        "isActive": True,
    }
    payload.update(overrides)
    return payload


def _voucher(**overrides):
    payload = {
        "voucherNo": "RV-0001",
        "voucherType": "Receipt",
        "date": "2024-04-05",
        "narration": "Donation",
        "entries": [
            {"accountCode": "1001", "debit": 100, "credit": 0},
            {"accountCode": "4001", "debit": 0, "credit": 100},
        ],
        "createdBy": "treasurer",
    }
    payload.update(overrides)
    return payload


class TestParseAccount:

    def test_full_payload(self):
        account = parse_account(_account())
        assert account.account_code == "1001"
        assert account.account_type is AccountType.ASSET
        assert account.opening_balance == Decimal("5000")
        assert account.opening_balance_type is BalanceSide.DEBIT
        assert account.opening_balance_as_on_date == date(2024, 4, 1)
        assert account.is_active

    def test_enum_values_case_insensitive(self):
        account = parse_account(_account(accountType="liability", openingBalanceType="CREDIT"))
        assert account.account_type is AccountType.LIABILITY
        assert account.opening_balance_type is BalanceSide.CREDIT

    def test_missing_side_defaults_from_type(self):
        account = parse_account(_account(accountType="Income", openingBalanceType=None))
        assert account.opening_balance_type is BalanceSide.CREDIT

    def test_missing_as_on_date(self):
        account = parse_account(_account(openingBalanceAsOnDate=None))
        assert account.opening_balance_as_on_date == UNDATED_OPENING

    def test_missing_name_falls_back_to_code(self):
        assert parse_account(_account(accountName=None)).account_name == "1001"

    def test_string_active_flag(self):
        assert not parse_account(_account(isActive="false")).is_active

    @pytest.mark.parametrize("overrides,code", [
        ({"accountCode": ""}, "MISSING_ACCOUNT_CODE"),
        ({"accountType": "Equity"}, "INVALID_ACCOUNT_TYPE"),
        ({"openingBalance": "abc"}, "INVALID_AMOUNT"),
        ({"openingBalance": -10}, "NEGATIVE_AMOUNT"),
        ({"openingBalanceType": "Sideways"}, "INVALID_BALANCE_SIDE"),
        ({"openingBalanceAsOnDate": "01/04/2024"}, "INVALID_DATE"),
    ])
    def test_rejections(self, overrides, code):
        with pytest.raises(MalformedRecordError) as exc_info:
            parse_account(_account(**overrides))
        assert code in exc_info.value.error_codes
        assert exc_info.value.record_kind == "account"

    def test_null_record(self):
        with pytest.raises(MalformedRecordError) as exc_info:
            parse_account(None)
        assert exc_info.value.error_codes == ["NOT_A_RECORD"]

    def test_round_trip(self):
        for account in chart_of_accounts():
            assert parse_account(account_to_payload(account)) == account


class TestParseVoucher:

    def test_full_payload(self):
        voucher = parse_voucher(_voucher())
        assert voucher.voucher_type is VoucherType.RECEIPT
        assert voucher.date == date(2024, 4, 5)
        assert voucher.total_debit == Decimal("100")
        assert voucher.created_by == "treasurer"

    def test_float_amounts_are_exact(self):
        voucher = parse_voucher(_voucher(entries=[
            {"accountCode": "1001", "debit": 0.1, "credit": 0},
            {"accountCode": "1001", "debit": 0.2, "credit": 0},
            {"accountCode": "4001", "debit": 0, "credit": 0.3},
        ]))
        assert voucher.total_debit == Decimal("0.3")
        assert voucher.is_balanced()

    def test_blank_lines_dropped(self):
        voucher = parse_voucher(_voucher(entries=[
            {"accountCode": "1001", "debit": "100", "credit": ""},
            {"accountCode": "", "debit": "", "credit": ""},
            {"accountCode": "4001", "debit": "", "credit": "100"},
        ]))
        assert [e.account_code for e in voucher.entries] == ["1001", "4001"]

    def test_embedded_account_reference(self):
        voucher = parse_voucher(_voucher(entries=[
            {"account": {"accountCode": "1001"}, "debit": 5, "credit": 0},
            {"account": {"accountCode": "4001"}, "debit": 0, "credit": 5},
        ]))
        assert [e.account_code for e in voucher.entries] == ["1001", "4001"]

    def test_created_by_object(self):
        assert parse_voucher(_voucher(createdBy={"name": "Asha"})).created_by == "Asha"

    def test_unbalanced_voucher_still_parses(self):
        voucher = parse_voucher(_voucher(entries=[
            {"accountCode": "1001", "debit": 100, "credit": 0},
            {"accountCode": "4001", "debit": 0, "credit": 99},
        ]))
        assert not voucher.is_balanced()

    @pytest.mark.parametrize("overrides,code", [
        ({"voucherNo": None}, "MISSING_VOUCHER_NO"),
        ({"voucherType": "Sales"}, "INVALID_VOUCHER_TYPE"),
        ({"date": "2024-13-01"}, "INVALID_DATE"),
        ({"date": "2024-04-05xyz"}, "INVALID_DATE"),
        ({"date": None}, "INVALID_DATE"),
        ({"entries": "none"}, "INVALID_ENTRIES"),
        ({"entries": [{"accountCode": "1001", "debit": "ten"}]}, "INVALID_AMOUNT"),
        ({"entries": [{"accountCode": "1001", "debit": -5}]}, "NEGATIVE_AMOUNT"),
    ])
    def test_rejections(self, overrides, code):
        with pytest.raises(MalformedRecordError) as exc_info:
            parse_voucher(_voucher(**overrides))
        assert code in exc_info.value.error_codes

    def test_round_trip(self):
        for voucher in voucher_book():
            assert parse_voucher(voucher_to_payload(voucher)) == voucher


class TestSnapshotLoader:

    def test_loads_backend(self, backend):
        snapshot = SnapshotLoader().load(backend)
        assert len(snapshot.accounts) == 8
        assert len(snapshot.vouchers) == 5
        assert snapshot.issues == ()
        assert snapshot.get_account("3001").account_name == "Capital Fund"

    def test_malformed_records_become_issues(self):
        snapshot = SnapshotLoader().from_payloads(
            [_account(), _account(accountCode="1002", accountType="Equity")],
            [_voucher(), _voucher(voucherNo="RV-0002", date="31/04/2024")],
        )
        assert [a.account_code for a in snapshot.accounts] == ["1001"]
        assert [v.voucher_no for v in snapshot.vouchers] == ["RV-0001"]
        assert [i.code for i in snapshot.issues] == ["MALFORMED_ACCOUNT", "MALFORMED_VOUCHER"]
        assert snapshot.issues[1].details["record_key"] == "RV-0002"
        assert snapshot.issues[1].details["error_codes"] == ["INVALID_DATE"]

    def test_non_mapping_records_become_issues(self):
        snapshot = SnapshotLoader().from_payloads([None, _account()], [_voucher(), "RV-0002"])
        assert [a.account_code for a in snapshot.accounts] == ["1001"]
        assert [v.voucher_no for v in snapshot.vouchers] == ["RV-0001"]
        assert [i.code for i in snapshot.issues] == ["MALFORMED_ACCOUNT", "MALFORMED_VOUCHER"]
        assert snapshot.issues[0].details["error_codes"] == ["NOT_A_RECORD"]

    def test_listing_that_is_not_a_list(self):
        snapshot = SnapshotLoader().from_payloads([_account()], None)
        assert len(snapshot.accounts) == 1
        assert snapshot.vouchers == ()
        assert snapshot.issues[0].code == "MALFORMED_VOUCHER"
        assert snapshot.issues[0].details["error_codes"] == ["NOT_A_LIST"]

    def test_first_duplicate_account_wins(self):
        snapshot = SnapshotLoader().from_payloads(
            [_account(), _account(accountName="Petty cash")],
            [],
        )
        assert len(snapshot.accounts) == 1
        assert snapshot.accounts[0].account_name == "Cash in Hand"
        assert snapshot.issues[0].code == "DUPLICATE_ACCOUNT_CODE"

    def test_strict_mode_raises(self):
        with pytest.raises(MalformedRecordError):
            SnapshotLoader(strict=True).from_payloads([_account(accountCode=None)], [])

    def test_rejections_are_logged(self, log_stream):
        SnapshotLoader().from_payloads([], [_voucher(date="garbage")])
        events = [r["message"] for r in log_stream()]
        assert "payload_record_rejected" in events
        assert "snapshot_loaded" in events
        rejected = next(r for r in log_stream() if r["message"] == "payload_record_rejected")
        assert rejected["level"] == "WARNING"
        assert rejected["record_kind"] == "voucher"
