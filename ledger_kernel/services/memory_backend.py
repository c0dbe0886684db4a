"""
InMemoryBackend -- reference BackendService held in process memory.

Responsibility:
    Stores account and voucher payloads and enforces the backend's write
    rules: unique and immutable account codes, soft delete of accounts,
    vouchers validated before they are stored, vouchers deleted but never
    edited.

Architecture position:
    Kernel > Services.  Used by tests and local tooling; a networked
    backend implements the same protocol.

Failure modes:
    - BackendUnavailableError on every call while ``available`` is False.
    - MalformedRecordError for payloads that fail boundary parsing.
    - DuplicateAccountCodeError / AccountNotFoundError for account writes.
    - VoucherError subclasses for rejected vouchers.
"""

from __future__ import annotations

from collections.abc import Iterable
from copy import deepcopy
from typing import Any

from ledger_kernel.domain.amounts import BALANCE_TOLERANCE
from ledger_kernel.domain.entities import Account, Voucher, VoucherType
from ledger_kernel.domain.numbering import next_voucher_number
from ledger_kernel.domain.voucher_validation import ensure_valid_voucher
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    BackendUnavailableError,
    DuplicateAccountCodeError,
    DuplicateVoucherNumberError,
    MalformedRecordError,
    VoucherNotFoundError,
)
from ledger_kernel.logging_config import get_logger
from ledger_kernel.services.backend import Payload
from ledger_kernel.services.snapshot_loader import (
    account_to_payload,
    parse_account,
    parse_voucher,
    voucher_to_payload,
)

logger = get_logger("services.memory_backend")


class InMemoryBackend:
    """
    Dict-backed store satisfying BackendService.

    Seed payloads passed to the constructor are stored verbatim and are
    NOT validated, so legacy or malformed data can be staged for reports.
    """

    def __init__(
        self,
        accounts: Iterable[Payload] = (),
        vouchers: Iterable[Payload] = (),
        tolerance=BALANCE_TOLERANCE,
    ):
        self._accounts: list[dict[str, Any]] = [dict(a) for a in deepcopy(list(accounts))]
        self._vouchers: list[dict[str, Any]] = [dict(v) for v in deepcopy(list(vouchers))]
        self._tolerance = tolerance
        self.available = True

    @classmethod
    def from_entities(
        cls,
        accounts: Iterable[Account] = (),
        vouchers: Iterable[Voucher] = (),
    ) -> InMemoryBackend:
        return cls(
            accounts=[account_to_payload(a) for a in accounts],
            vouchers=[voucher_to_payload(v) for v in vouchers],
        )

    def _check_available(self, operation: str) -> None:
        if not self.available:
            raise BackendUnavailableError(operation, "backend is offline")

    def _find_account(self, account_code: str) -> dict[str, Any] | None:
        for payload in self._accounts:
            if str(payload.get("accountCode", "")).strip() == account_code:
                return payload
        return None

    def _find_voucher(self, voucher_no: str) -> dict[str, Any] | None:
        for payload in self._vouchers:
            if str(payload.get("voucherNo", "")).strip() == voucher_no:
                return payload
        return None

    # =========================================================================
    # Reads
    # =========================================================================

    def list_accounts(self) -> list[dict[str, Any]]:
        self._check_available("list_accounts")
        return deepcopy(self._accounts)

    def list_vouchers(self) -> list[dict[str, Any]]:
        self._check_available("list_vouchers")
        return deepcopy(self._vouchers)

    # =========================================================================
    # Accounts
    # =========================================================================

    def add_account(self, payload: Payload) -> dict[str, Any]:
        self._check_available("add_account")
        account = parse_account(payload)
        if self._find_account(account.account_code) is not None:
            raise DuplicateAccountCodeError(account.account_code)

        stored = account_to_payload(account)
        self._accounts.append(stored)
        logger.info("account_added", extra={"account_code": account.account_code})
        return deepcopy(stored)

    def update_account(self, account_code: str, changes: Payload) -> dict[str, Any]:
        self._check_available("update_account")
        current = self._find_account(account_code)
        if current is None:
            raise AccountNotFoundError(account_code)
        new_code = changes.get("accountCode")
        if new_code is not None and str(new_code).strip() != account_code:
            raise MalformedRecordError("account", account_code, ["ACCOUNT_CODE_IMMUTABLE"])

        account = parse_account({**current, **changes})
        stored = account_to_payload(account)
        current.clear()
        current.update(stored)
        logger.info("account_updated", extra={"account_code": account_code})
        return deepcopy(stored)

    def deactivate_account(self, account_code: str) -> dict[str, Any]:
        self._check_available("deactivate_account")
        current = self._find_account(account_code)
        if current is None:
            raise AccountNotFoundError(account_code)
        current["isActive"] = False
        logger.info("account_deactivated", extra={"account_code": account_code})
        return deepcopy(current)

    # =========================================================================
    # Vouchers
    # =========================================================================

    def add_voucher(self, payload: Payload) -> dict[str, Any]:
        """
        Store a voucher after checking the double-entry rules.

        Entries must reference existing accounts; whether those accounts are
        still active is the entry form's concern.
        """
        self._check_available("add_voucher")
        voucher = parse_voucher(payload)
        if self._find_voucher(voucher.voucher_no) is not None:
            raise DuplicateVoucherNumberError(voucher.voucher_no)

        known = {}
        for raw in self._accounts:
            try:
                account = parse_account({**raw, "isActive": True})
            except MalformedRecordError:
                continue
            known[account.account_code] = account
        ensure_valid_voucher(voucher, accounts=known, tolerance=self._tolerance)

        stored = voucher_to_payload(voucher)
        self._vouchers.append(stored)
        logger.info(
            "voucher_added",
            extra={
                "voucher_no": voucher.voucher_no,
                "voucher_type": voucher.voucher_type.value,
                "total_debit": voucher.total_debit,
            },
        )
        return deepcopy(stored)

    def delete_voucher(self, voucher_no: str) -> None:
        self._check_available("delete_voucher")
        current = self._find_voucher(voucher_no)
        if current is None:
            raise VoucherNotFoundError(voucher_no)
        self._vouchers.remove(current)
        logger.info("voucher_deleted", extra={"voucher_no": voucher_no})

    def next_voucher_number(self, voucher_type: str) -> str:
        self._check_available("next_voucher_number")
        return next_voucher_number(
            (str(v.get("voucherNo", "")) for v in self._vouchers),
            VoucherType(voucher_type),
        )
