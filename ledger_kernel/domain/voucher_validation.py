"""
Voucher validation -- the double-entry acceptance rules.

Responsibility:
    Decides whether a voucher (or an entry-form draft) may be posted.  A
    voucher is accepted only when it has a number, a date and a narration,
    at least two populated entries, no line carrying an amount without an
    account, no line carrying both a debit and a credit, and total debits
    equal total credits within the tolerance.  Totals run over every line,
    so an amount on an unnamed line still counts.
    When a chart of accounts is supplied, every line must reference a
    known, active account.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - ``validate_voucher`` never raises; it returns a ValidationResult.
    - ``ensure_valid_voucher`` raises the typed exception for the failure.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal

from ledger_kernel.domain.amounts import BALANCE_TOLERANCE, ZERO, within_tolerance
from ledger_kernel.domain.dtos import ValidationError, ValidationResult
from ledger_kernel.domain.entities import Account, Entry, Voucher, VoucherDraft
from ledger_kernel.exceptions import (
    AccountInactiveError,
    AccountNotFoundError,
    InsufficientEntriesError,
    InvalidVoucherError,
    MissingNarrationError,
    MissingVoucherDateError,
    UnbalancedVoucherError,
)

MIN_POPULATED_ENTRIES = 2


def populated_entries(entries: Iterable[Entry]) -> tuple[Entry, ...]:
    """Entries naming an account and carrying a non-zero amount."""
    return tuple(e for e in entries if e.is_populated)


def drop_blank_entries(entries: Iterable[Entry]) -> tuple[Entry, ...]:
    """Remove untouched form rows; anything carrying an amount is kept."""
    return tuple(e for e in entries if not e.is_blank)


def validate_voucher(
    voucher: Voucher | VoucherDraft,
    accounts: Mapping[str, Account] | None = None,
    tolerance: Decimal = BALANCE_TOLERANCE,
) -> ValidationResult:
    """Check every posting rule and collect all failures."""
    errors: list[ValidationError] = []

    if not voucher.voucher_no or not voucher.voucher_no.strip():
        errors.append(ValidationError(
            code="MISSING_VOUCHER_NO",
            message="Voucher number is required",
            field="voucher_no",
        ))
    if voucher.date is None:
        errors.append(ValidationError(
            code="MISSING_VOUCHER_DATE",
            message="Date is required",
            field="date",
        ))
    if not voucher.narration or not voucher.narration.strip():
        errors.append(ValidationError(
            code="MISSING_NARRATION",
            message="Narration is required",
            field="narration",
        ))

    lines = populated_entries(voucher.entries)
    if len(lines) < MIN_POPULATED_ENTRIES:
        errors.append(ValidationError(
            code="INSUFFICIENT_ENTRIES",
            message=f"At least {MIN_POPULATED_ENTRIES} entries are required",
            field="entries",
            details={"populated_count": len(lines)},
        ))

    for index, entry in enumerate(voucher.entries):
        if not entry.account_code.strip() and not entry.is_blank:
            errors.append(ValidationError(
                code="MISSING_ACCOUNT",
                message=f"Entry {index + 1} carries an amount but no account",
                field=f"entries[{index}].account_code",
                details={"debit": str(entry.debit), "credit": str(entry.credit)},
            ))
        if entry.has_conflicting_sides:
            errors.append(ValidationError(
                code="CONFLICTING_SIDES",
                message=f"Entry {index + 1} has both a debit and a credit",
                field=f"entries[{index}]",
                details={"account_code": entry.account_code},
            ))

    total_debit = sum((e.debit for e in voucher.entries), ZERO)
    total_credit = sum((e.credit for e in voucher.entries), ZERO)
    if not within_tolerance(total_debit, total_credit, tolerance):
        errors.append(ValidationError(
            code="UNBALANCED_VOUCHER",
            message="Debit and Credit must be equal",
            field="entries",
            details={
                "total_debit": str(total_debit),
                "total_credit": str(total_credit),
                "difference": str(total_debit - total_credit),
            },
        ))

    if accounts is not None:
        for index, entry in enumerate(voucher.entries):
            if not entry.account_code.strip():
                continue
            account = accounts.get(entry.account_code)
            if account is None:
                errors.append(ValidationError(
                    code="ACCOUNT_NOT_FOUND",
                    message=f"Account not found: {entry.account_code}",
                    field=f"entries[{index}].account_code",
                    details={"account_code": entry.account_code},
                ))
            elif not account.is_active:
                errors.append(ValidationError(
                    code="ACCOUNT_INACTIVE",
                    message=f"Account {entry.account_code} is inactive",
                    field=f"entries[{index}].account_code",
                    details={"account_code": entry.account_code},
                ))

    return ValidationResult.from_errors(errors)


def ensure_valid_voucher(
    voucher: Voucher | VoucherDraft,
    accounts: Mapping[str, Account] | None = None,
    tolerance: Decimal = BALANCE_TOLERANCE,
) -> None:
    """
    Raise the typed exception for an invalid voucher.

    A single failure raises its specific exception; several failures raise
    InvalidVoucherError carrying every code.
    """
    result = validate_voucher(voucher, accounts, tolerance)
    if result.is_valid:
        return

    voucher_no = voucher.voucher_no or "<new>"
    if len(result.errors) > 1:
        raise InvalidVoucherError(voucher_no, list(result.error_codes))

    error = result.errors[0]
    if error.code == "UNBALANCED_VOUCHER":
        raise UnbalancedVoucherError(
            voucher_no, error.details["total_debit"], error.details["total_credit"],
        )
    if error.code == "INSUFFICIENT_ENTRIES":
        raise InsufficientEntriesError(voucher_no, error.details["populated_count"])
    if error.code == "MISSING_NARRATION":
        raise MissingNarrationError(voucher_no)
    if error.code == "MISSING_VOUCHER_DATE":
        raise MissingVoucherDateError(voucher_no)
    if error.code == "ACCOUNT_NOT_FOUND":
        raise AccountNotFoundError(error.details["account_code"])
    if error.code == "ACCOUNT_INACTIVE":
        raise AccountInactiveError(error.details["account_code"])
    raise InvalidVoucherError(voucher_no, [error.code])
