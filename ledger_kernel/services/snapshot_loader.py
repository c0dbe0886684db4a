"""
SnapshotLoader -- boundary validation of backend payloads.

Responsibility:
    Converts the backend's raw camelCase account and voucher payloads into
    an immutable LedgerSnapshot.  Every field is parsed here exactly once;
    nothing past this boundary sees a raw payload, a float or a date string.

Architecture position:
    Kernel > Services -- imperative shell around the pure parse functions.
    Reads from a BackendService; never writes.

Invariants enforced:
    - Accounts missing a code or type, or carrying a malformed amount, side
      or date, are rejected.
    - Vouchers with a malformed number, type, date, entry list or amount are
      skipped in their entirety.
    - The first account with a given code wins; later duplicates are
      rejected.
    - Unbalanced vouchers and entries pointing at unknown accounts are
      loaded as-is so that reports surface them.

Failure modes:
    - In the default lenient mode each rejection becomes an
      IntegrityWarning on the snapshot and is logged at WARNING.
    - With ``strict=True`` the first rejection raises MalformedRecordError.
    - BackendUnavailableError from the backend propagates.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from enum import Enum
from typing import Any, TypeVar

from ledger_kernel.domain.amounts import ZERO, parse_amount, parse_date
from ledger_kernel.domain.dtos import IntegrityWarning, LedgerSnapshot
from ledger_kernel.domain.entities import (
    Account,
    AccountType,
    BalanceSide,
    Entry,
    Voucher,
    VoucherType,
    default_opening_side,
)
from ledger_kernel.exceptions import InvalidAmountError, InvalidDateError, MalformedRecordError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.services.backend import BackendService, Payload

logger = get_logger("services.snapshot_loader")

E = TypeVar("E", bound=Enum)

# Accounts without an as-on date predate every voucher.
UNDATED_OPENING = date.min


def _str(d: Mapping[str, Any], key: str) -> str:
    v = d.get(key)
    return str(v).strip() if v is not None else ""


def _optional_str(d: Mapping[str, Any], key: str) -> str | None:
    v = d.get(key)
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    return str(v).strip()


def _optional_bool(d: Mapping[str, Any], key: str, default: bool = True) -> bool:
    v = d.get(key)
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return v.strip().lower() in ("true", "1", "yes")
    return bool(v)


def _parse_enum(enum_cls: type[E], value: Any) -> E | None:
    """Case-insensitive match on the enum's wire value."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    for member in enum_cls:
        if member.value.lower() == text:
            return member
    return None


def _account_ref(value: Any) -> str:
    # Entries may embed the referenced account instead of its code.
    if isinstance(value, Mapping):
        value = value.get("accountCode")
    return str(value).strip() if value is not None else ""


def _created_by(value: Any) -> str | None:
    if isinstance(value, Mapping):
        value = value.get("name") or value.get("username") or value.get("email")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# -----------------------------------------------------------------------------
# Pure parse functions
# -----------------------------------------------------------------------------


def parse_account(payload: Payload) -> Account:
    """
    Build an Account from a backend payload.

    A missing ``openingBalanceType`` defaults from the account type; a
    missing ``openingBalanceAsOnDate`` means the opening balance predates
    every voucher.

    Raises:
        MalformedRecordError: listing every failed field check.
    """
    if not isinstance(payload, Mapping):
        raise MalformedRecordError("account", None, ["NOT_A_RECORD"])
    errors: list[str] = []

    code = _str(payload, "accountCode")
    if not code:
        errors.append("MISSING_ACCOUNT_CODE")

    account_type = _parse_enum(AccountType, payload.get("accountType"))
    if account_type is None:
        errors.append("INVALID_ACCOUNT_TYPE")

    opening = ZERO
    try:
        opening = parse_amount(payload.get("openingBalance"))
    except InvalidAmountError:
        errors.append("INVALID_AMOUNT")
    if opening < ZERO:
        errors.append("NEGATIVE_AMOUNT")

    side: BalanceSide | None = None
    if _optional_str(payload, "openingBalanceType") is not None:
        side = _parse_enum(BalanceSide, payload.get("openingBalanceType"))
        if side is None:
            errors.append("INVALID_BALANCE_SIDE")

    as_on = UNDATED_OPENING
    if payload.get("openingBalanceAsOnDate") not in (None, ""):
        try:
            as_on = parse_date(payload.get("openingBalanceAsOnDate"))
        except InvalidDateError:
            errors.append("INVALID_DATE")

    if errors:
        raise MalformedRecordError("account", code or None, errors)

    assert account_type is not None
    return Account(
        account_code=code,
        account_name=_str(payload, "accountName") or code,
        account_type=account_type,
        opening_balance=opening,
        opening_balance_type=side or default_opening_side(account_type),
        opening_balance_as_on_date=as_on,
        parent=_optional_str(payload, "parent"),
        is_active=_optional_bool(payload, "isActive"),
    )


def parse_voucher(payload: Payload) -> Voucher:
    """
    Build a Voucher from a backend payload.

    Entry lines with neither an account nor an amount are dropped.  The
    double-entry rules are NOT checked here.

    Raises:
        MalformedRecordError: listing every failed field check.
    """
    if not isinstance(payload, Mapping):
        raise MalformedRecordError("voucher", None, ["NOT_A_RECORD"])
    errors: list[str] = []

    voucher_no = _str(payload, "voucherNo")
    if not voucher_no:
        errors.append("MISSING_VOUCHER_NO")

    voucher_type = _parse_enum(VoucherType, payload.get("voucherType"))
    if voucher_type is None:
        errors.append("INVALID_VOUCHER_TYPE")

    voucher_date: date | None = None
    try:
        voucher_date = parse_date(payload.get("date"))
    except InvalidDateError:
        errors.append("INVALID_DATE")

    raw_entries = payload.get("entries")
    entries: list[Entry] = []
    if not isinstance(raw_entries, (list, tuple)):
        errors.append("INVALID_ENTRIES")
        raw_entries = ()
    for raw in raw_entries:
        if not isinstance(raw, Mapping):
            errors.append("INVALID_ENTRIES")
            continue
        try:
            debit = parse_amount(raw.get("debit"))
            credit = parse_amount(raw.get("credit"))
        except InvalidAmountError:
            errors.append("INVALID_AMOUNT")
            continue
        if debit < ZERO or credit < ZERO:
            errors.append("NEGATIVE_AMOUNT")
            continue
        account_code = _account_ref(raw.get("accountCode", raw.get("account")))
        if not account_code and debit == ZERO and credit == ZERO:
            continue
        entries.append(Entry(account_code=account_code, debit=debit, credit=credit))

    if errors:
        raise MalformedRecordError("voucher", voucher_no or None, sorted(set(errors)))

    assert voucher_type is not None and voucher_date is not None
    return Voucher(
        voucher_no=voucher_no,
        voucher_type=voucher_type,
        date=voucher_date,
        narration=_str(payload, "narration"),
        entries=tuple(entries),
        created_by=_created_by(payload.get("createdBy")),
    )


def account_to_payload(account: Account) -> dict[str, Any]:
    """Inverse of parse_account; amounts travel as strings."""
    return {
        "accountCode": account.account_code,
        "accountName": account.account_name,
        "accountType": account.account_type.value,
        "parent": account.parent,
        "openingBalance": str(account.opening_balance),
        "openingBalanceType": account.opening_balance_type.value,
        "openingBalanceAsOnDate": (
            None if account.opening_balance_as_on_date == UNDATED_OPENING
            else account.opening_balance_as_on_date.isoformat()
        ),
        "isActive": account.is_active,
    }


def voucher_to_payload(voucher: Voucher) -> dict[str, Any]:
    """Inverse of parse_voucher; amounts travel as strings."""
    return {
        "voucherNo": voucher.voucher_no,
        "voucherType": voucher.voucher_type.value,
        "date": voucher.date.isoformat(),
        "narration": voucher.narration,
        "entries": [
            {
                "accountCode": e.account_code,
                "debit": str(e.debit),
                "credit": str(e.credit),
            }
            for e in voucher.entries
        ],
        "createdBy": voucher.created_by,
    }


# -----------------------------------------------------------------------------
# Loader
# -----------------------------------------------------------------------------


class SnapshotLoader:
    """
    Fetches and validates one consistent snapshot per report request.

    Contract:
        ``load(backend)`` calls ``list_accounts()`` then ``list_vouchers()``
        and returns a LedgerSnapshot whose ``issues`` list every rejected
        record.
    """

    def __init__(self, strict: bool = False):
        self._strict = strict

    def load(self, backend: BackendService) -> LedgerSnapshot:
        accounts = backend.list_accounts()
        vouchers = backend.list_vouchers()
        return self.from_payloads(accounts, vouchers)

    def from_payloads(
        self,
        account_payloads: Iterable[Payload],
        voucher_payloads: Iterable[Payload],
    ) -> LedgerSnapshot:
        issues: list[IntegrityWarning] = []
        accounts = self._load_accounts(account_payloads, issues)
        vouchers = self._load_vouchers(voucher_payloads, issues)

        logger.info(
            "snapshot_loaded",
            extra={
                "account_count": len(accounts),
                "voucher_count": len(vouchers),
                "issue_count": len(issues),
            },
        )
        return LedgerSnapshot(
            accounts=tuple(accounts),
            vouchers=tuple(vouchers),
            issues=tuple(issues),
        )

    def _load_accounts(
        self,
        payloads: Iterable[Payload],
        issues: list[IntegrityWarning],
    ) -> list[Account]:
        accounts: list[Account] = []
        seen: set[str] = set()
        for payload in self._records(payloads, "account", "MALFORMED_ACCOUNT", issues):
            try:
                account = parse_account(payload)
            except MalformedRecordError as e:
                self._reject(e, "MALFORMED_ACCOUNT", issues)
                continue
            if account.account_code in seen:
                self._reject(
                    MalformedRecordError("account", account.account_code, ["DUPLICATE_ACCOUNT_CODE"]),
                    "DUPLICATE_ACCOUNT_CODE",
                    issues,
                )
                continue
            seen.add(account.account_code)
            accounts.append(account)
        return accounts

    def _load_vouchers(
        self,
        payloads: Iterable[Payload],
        issues: list[IntegrityWarning],
    ) -> list[Voucher]:
        vouchers: list[Voucher] = []
        for payload in self._records(payloads, "voucher", "MALFORMED_VOUCHER", issues):
            try:
                vouchers.append(parse_voucher(payload))
            except MalformedRecordError as e:
                self._reject(e, "MALFORMED_VOUCHER", issues)
        return vouchers

    def _records(
        self,
        payloads: Any,
        record_kind: str,
        issue_code: str,
        issues: list[IntegrityWarning],
    ) -> Sequence[Any]:
        """The backend listing as a sequence; anything else is one rejected batch."""
        if isinstance(payloads, (list, tuple)):
            return payloads
        self._reject(
            MalformedRecordError(record_kind, None, ["NOT_A_LIST"]), issue_code, issues,
        )
        return ()

    def _reject(
        self,
        error: MalformedRecordError,
        issue_code: str,
        issues: list[IntegrityWarning],
    ) -> None:
        if self._strict:
            raise error
        logger.warning(
            "payload_record_rejected",
            extra={
                "record_kind": error.record_kind,
                "record_key": error.record_key,
                "error_codes": error.error_codes,
            },
        )
        issues.append(IntegrityWarning(
            code=issue_code,
            message=str(error),
            details={
                "record_kind": error.record_kind,
                "record_key": error.record_key,
                "error_codes": list(error.error_codes),
            },
        ))
