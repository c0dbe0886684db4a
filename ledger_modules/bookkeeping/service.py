"""
Bookkeeping Module Service (``ledger_modules.bookkeeping.service``).

Responsibility
--------------
The write side of the ledger: maintaining the chart of accounts and
entering vouchers.  Both services validate input in the kernel and hand
well-formed payloads to the backend, which owns persistence.

Architecture position
---------------------
**Modules layer** -- thin glue over ``BackendService``.

Invariants enforced
-------------------
* Account codes are immutable once created; accounts are deactivated,
  never deleted.
* A voucher reaches the backend only after it passes every double-entry
  rule against the current chart: blank lines dropped, at least two
  populated entries, debits equal credits within tolerance, a date and a
  narration, and only active accounts.
* Vouchers are never edited; a mistaken voucher is deleted and re-entered.

Failure modes
-------------
* ``ChartOfAccountsService`` raises typed kernel exceptions
  (DuplicateAccountCodeError, AccountNotFoundError, MalformedRecordError,
  BackendUnavailableError).
* ``VoucherEntryService.submit`` returns INVALID or REJECTED results
  instead of raising.
"""

from __future__ import annotations

import dataclasses
from datetime import date
from decimal import Decimal
from typing import Any

from ledger_kernel.domain.amounts import BALANCE_TOLERANCE, ZERO, parse_amount, parse_date
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.entities import (
    Account,
    AccountType,
    BalanceSide,
    VoucherDraft,
    VoucherType,
)
from ledger_kernel.domain.voucher_validation import drop_blank_entries, validate_voucher
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    LedgerKernelError,
    MalformedRecordError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.services.backend import BackendService
from ledger_kernel.services.snapshot_loader import (
    SnapshotLoader,
    account_to_payload,
    parse_account,
    voucher_to_payload,
)
from ledger_modules.bookkeeping.models import (
    VoucherSubmissionResult,
    VoucherSubmissionStatus,
)

logger = get_logger("modules.bookkeeping.service")

_UPDATABLE_FIELDS = frozenset({
    "account_name",
    "account_type",
    "opening_balance",
    "opening_balance_type",
    "opening_balance_as_on_date",
    "parent",
    "is_active",
})


class ChartOfAccountsService:
    """
    Chart of accounts maintenance.

    Contract
    --------
    * ``create_account`` defaults the opening side from the account type
      (Asset/Expense debit, others credit) and the as-on date to today.
    * ``update_account`` accepts any field except the code.
    """

    def __init__(
        self,
        backend: BackendService,
        clock: Clock | None = None,
        loader: SnapshotLoader | None = None,
    ):
        self._backend = backend
        self._clock = clock or SystemClock()
        self._loader = loader or SnapshotLoader()

    def list_accounts(self, include_inactive: bool = True) -> list[Account]:
        accounts = self._loader.load(self._backend).accounts
        return sorted(
            (a for a in accounts if include_inactive or a.is_active),
            key=lambda a: a.account_code,
        )

    def active_accounts(self) -> list[Account]:
        """Accounts offered for new voucher entries."""
        return self.list_accounts(include_inactive=False)

    def get_account(self, account_code: str) -> Account:
        account = self._loader.load(self._backend).get_account(account_code)
        if account is None:
            raise AccountNotFoundError(account_code)
        return account

    def create_account(
        self,
        account_code: str,
        account_name: str,
        account_type: AccountType | str,
        opening_balance: Decimal | str | int = ZERO,
        opening_balance_type: BalanceSide | str | None = None,
        opening_balance_as_on_date: date | str | None = None,
        parent: str | None = None,
    ) -> Account:
        if parent:
            self.get_account(parent)

        account = Account.create(
            account_code=account_code,
            account_name=account_name,
            account_type=AccountType(account_type),
            opening_balance=parse_amount(opening_balance),
            opening_balance_as_on_date=(
                parse_date(opening_balance_as_on_date) if opening_balance_as_on_date else None
            ),
            opening_balance_type=BalanceSide(opening_balance_type) if opening_balance_type else None,
            parent=parent,
            today=self._clock.today(),
        )
        stored = parse_account(self._backend.add_account(account_to_payload(account)))

        logger.info(
            "account_created",
            extra={
                "account_code": stored.account_code,
                "account_type": stored.account_type.value,
                "opening_balance": stored.opening_balance,
                "opening_balance_type": stored.opening_balance_type.value,
            },
        )
        return stored

    def update_account(self, account_code: str, **changes: Any) -> Account:
        new_code = changes.pop("account_code", account_code)
        if new_code != account_code:
            raise MalformedRecordError("account", account_code, ["ACCOUNT_CODE_IMMUTABLE"])
        unknown = sorted(set(changes) - _UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown account fields: {', '.join(unknown)}")

        current = self.get_account(account_code)
        if changes.get("parent"):
            self.get_account(changes["parent"])
        if "account_type" in changes:
            changes["account_type"] = AccountType(changes["account_type"])
        if "opening_balance" in changes:
            changes["opening_balance"] = parse_amount(changes["opening_balance"])
        if "opening_balance_type" in changes:
            changes["opening_balance_type"] = BalanceSide(changes["opening_balance_type"])
        if "opening_balance_as_on_date" in changes:
            changes["opening_balance_as_on_date"] = parse_date(changes["opening_balance_as_on_date"])

        updated = dataclasses.replace(current, **changes)
        stored = parse_account(
            self._backend.update_account(account_code, account_to_payload(updated)),
        )
        logger.info(
            "account_updated",
            extra={"account_code": account_code, "fields": sorted(changes)},
        )
        return stored

    def deactivate_account(self, account_code: str) -> Account:
        """Soft delete: the account keeps its history but takes no new entries."""
        stored = parse_account(self._backend.deactivate_account(account_code))
        logger.info("account_deactivated", extra={"account_code": account_code})
        return stored


class VoucherEntryService:
    """
    Voucher entry and deletion.

    Contract
    --------
    * ``submit`` drops blank lines, assigns the next number for the
      voucher type when the draft has none, validates against the current
      chart and only then calls the backend.
    * The returned result carries every validation error, not just the
      first.
    """

    def __init__(
        self,
        backend: BackendService,
        clock: Clock | None = None,
        loader: SnapshotLoader | None = None,
        tolerance: Decimal = BALANCE_TOLERANCE,
    ):
        self._backend = backend
        self._clock = clock or SystemClock()
        self._loader = loader or SnapshotLoader()
        self._tolerance = tolerance

    def next_voucher_number(self, voucher_type: VoucherType | str) -> str:
        return self._backend.next_voucher_number(VoucherType(voucher_type).value)

    def new_draft(self, voucher_type: VoucherType | str) -> VoucherDraft:
        """An empty draft numbered and dated for today."""
        type_ = VoucherType(voucher_type)
        return VoucherDraft(
            voucher_type=type_,
            voucher_no=self.next_voucher_number(type_),
            date=self._clock.today(),
        )

    def submit(
        self,
        draft: VoucherDraft,
        created_by: str | None = None,
    ) -> VoucherSubmissionResult:
        cleaned = dataclasses.replace(
            draft,
            voucher_no=draft.voucher_no.strip() or self.next_voucher_number(draft.voucher_type),
            entries=drop_blank_entries(draft.entries),
        )

        with LogContext.bind(voucher_no=cleaned.voucher_no, actor_id=created_by):
            accounts = self._loader.load(self._backend).account_map
            validation = validate_voucher(cleaned, accounts, self._tolerance)
            if not validation.is_valid:
                logger.info(
                    "voucher_submission_invalid",
                    extra={"error_codes": list(validation.error_codes)},
                )
                return VoucherSubmissionResult(
                    status=VoucherSubmissionStatus.INVALID,
                    voucher_no=cleaned.voucher_no,
                    errors=validation.errors,
                    message="; ".join(e.message for e in validation.errors),
                )

            voucher = cleaned.to_voucher(created_by)
            try:
                self._backend.add_voucher(voucher_to_payload(voucher))
            except LedgerKernelError as e:
                logger.warning(
                    "voucher_submission_rejected",
                    extra={"error_code": e.code, "reason": str(e)},
                )
                return VoucherSubmissionResult(
                    status=VoucherSubmissionStatus.REJECTED,
                    voucher_no=voucher.voucher_no,
                    error_code=e.code,
                    message=str(e),
                )

            logger.info(
                "voucher_submitted",
                extra={
                    "voucher_type": voucher.voucher_type.value,
                    "amount": voucher.total_debit,
                    "entry_count": len(voucher.entries),
                },
            )
            return VoucherSubmissionResult(
                status=VoucherSubmissionStatus.SUBMITTED,
                voucher_no=voucher.voucher_no,
                voucher=voucher,
            )

    def delete(self, voucher_no: str) -> None:
        """Delete a voucher; raises VoucherNotFoundError for unknown numbers."""
        self._backend.delete_voucher(voucher_no)
        logger.info("voucher_deleted", extra={"voucher_no": voucher_no})
