"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Bookkeeping code must handle errors precisely. Callers catch by type and
read structured attributes instead of parsing message strings:

    try:
        backend.add_voucher(voucher)
    except UnbalancedVoucherError as e:
        show_error(code=e.code, debit=e.total_debit, credit=e.total_credit)

Every class carries a ``code`` class attribute (machine-readable, API-safe)
and stores its context as instance attributes.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- VoucherError
    |   +-- UnbalancedVoucherError
    |   +-- InsufficientEntriesError
    |   +-- MissingNarrationError
    |   +-- MissingVoucherDateError
    |   +-- VoucherNotFoundError
    |   +-- DuplicateVoucherNumberError
    |   +-- InvalidVoucherError
    |
    +-- AccountError
    |   +-- AccountNotFoundError
    |   +-- AccountInactiveError
    |   +-- DuplicateAccountCodeError
    |
    +-- PayloadError
    |   +-- MalformedRecordError
    |   +-- InvalidDateError
    |   +-- InvalidAmountError
    |
    +-- ReportError
    |   +-- InvalidReportParametersError
    |
    +-- BackendError
        +-- BackendUnavailableError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                       | When Raised
-----------|----------------------------|------------------------------------------
Voucher    | UNBALANCED_VOUCHER         | Debits != Credits (tolerance 0.01)
           | INSUFFICIENT_ENTRIES       | Fewer than two populated entries
           | MISSING_NARRATION          | Narration blank
           | MISSING_VOUCHER_DATE       | Date not supplied
           | VOUCHER_NOT_FOUND          | Voucher number doesn't exist
           | DUPLICATE_VOUCHER_NUMBER   | Voucher number already used
           | INVALID_VOUCHER            | Several validation failures at once
-----------|----------------------------|------------------------------------------
Account    | ACCOUNT_NOT_FOUND          | Account code doesn't exist
           | ACCOUNT_INACTIVE           | Account deactivated (no new vouchers)
           | DUPLICATE_ACCOUNT_CODE     | Account code already used
-----------|----------------------------|------------------------------------------
Payload    | MALFORMED_RECORD           | Backend record fails schema checks
           | INVALID_DATE               | Date value cannot be parsed
           | INVALID_AMOUNT             | Amount is not a finite decimal
-----------|----------------------------|------------------------------------------
Report     | INVALID_REPORT_PARAMETERS  | e.g. from_date after to_date
-----------|----------------------------|------------------------------------------
Backend    | BACKEND_UNAVAILABLE        | Backend call failed
"""


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Voucher-related exceptions


class VoucherError(LedgerKernelError):
    """Base exception for voucher-related errors."""

    code: str = "VOUCHER_ERROR"


class UnbalancedVoucherError(VoucherError):
    """Voucher debits do not equal credits."""

    code: str = "UNBALANCED_VOUCHER"

    def __init__(self, voucher_no: str, total_debit: str, total_credit: str):
        self.voucher_no = voucher_no
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Unbalanced voucher {voucher_no}: "
            f"debits={total_debit}, credits={total_credit}"
        )


class InsufficientEntriesError(VoucherError):
    """Voucher has fewer than two populated entries."""

    code: str = "INSUFFICIENT_ENTRIES"

    def __init__(self, voucher_no: str, populated_count: int):
        self.voucher_no = voucher_no
        self.populated_count = populated_count
        super().__init__(
            f"Voucher {voucher_no} needs at least 2 entries, "
            f"got {populated_count}"
        )


class MissingNarrationError(VoucherError):
    """Voucher narration is blank."""

    code: str = "MISSING_NARRATION"

    def __init__(self, voucher_no: str):
        self.voucher_no = voucher_no
        super().__init__(f"Narration is required for voucher {voucher_no}")


class MissingVoucherDateError(VoucherError):
    """Voucher date is missing."""

    code: str = "MISSING_VOUCHER_DATE"

    def __init__(self, voucher_no: str):
        self.voucher_no = voucher_no
        super().__init__(f"Date is required for voucher {voucher_no}")


class VoucherNotFoundError(VoucherError):
    """Voucher was not found."""

    code: str = "VOUCHER_NOT_FOUND"

    def __init__(self, voucher_no: str):
        self.voucher_no = voucher_no
        super().__init__(f"Voucher not found: {voucher_no}")


class DuplicateVoucherNumberError(VoucherError):
    """Voucher number is already in use."""

    code: str = "DUPLICATE_VOUCHER_NUMBER"

    def __init__(self, voucher_no: str):
        self.voucher_no = voucher_no
        super().__init__(f"Voucher number already exists: {voucher_no}")


class InvalidVoucherError(VoucherError):
    """Voucher failed several validation rules."""

    code: str = "INVALID_VOUCHER"

    def __init__(self, voucher_no: str, error_codes: list[str]):
        self.voucher_no = voucher_no
        self.error_codes = error_codes
        super().__init__(
            f"Voucher {voucher_no} is invalid: {', '.join(error_codes)}"
        )


# Account-related exceptions


class AccountError(LedgerKernelError):
    """Base exception for account-related errors."""

    code: str = "ACCOUNT_ERROR"


class AccountNotFoundError(AccountError):
    """Account was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_code: str):
        self.account_code = account_code
        super().__init__(f"Account not found: {account_code}")


class AccountInactiveError(AccountError):
    """Account is inactive and cannot be used for new vouchers."""

    code: str = "ACCOUNT_INACTIVE"

    def __init__(self, account_code: str):
        self.account_code = account_code
        super().__init__(f"Account {account_code} is inactive")


class DuplicateAccountCodeError(AccountError):
    """Account code is already in use."""

    code: str = "DUPLICATE_ACCOUNT_CODE"

    def __init__(self, account_code: str):
        self.account_code = account_code
        super().__init__(f"Account code already exists: {account_code}")


# Payload-related exceptions


class PayloadError(LedgerKernelError):
    """Base exception for malformed backend payloads."""

    code: str = "PAYLOAD_ERROR"


class MalformedRecordError(PayloadError):
    """A backend record failed schema validation."""

    code: str = "MALFORMED_RECORD"

    def __init__(self, record_kind: str, record_key: str | None, error_codes: list[str]):
        self.record_kind = record_kind
        self.record_key = record_key
        self.error_codes = error_codes
        super().__init__(
            f"Malformed {record_kind} record {record_key or '<unknown>'}: "
            f"{', '.join(error_codes)}"
        )


class InvalidDateError(PayloadError):
    """A date value could not be parsed."""

    code: str = "INVALID_DATE"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid date: {value!r}")


class InvalidAmountError(PayloadError):
    """An amount is not a finite decimal number."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid amount: {value!r}")


# Report-related exceptions


class ReportError(LedgerKernelError):
    """Base exception for report generation errors."""

    code: str = "REPORT_ERROR"


class InvalidReportParametersError(ReportError):
    """Report parameters are inconsistent."""

    code: str = "INVALID_REPORT_PARAMETERS"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid report parameters: {reason}")


# Backend-related exceptions


class BackendError(LedgerKernelError):
    """Base exception for backend collaborator failures."""

    code: str = "BACKEND_ERROR"


class BackendUnavailableError(BackendError):
    """The backend could not serve the request."""

    code: str = "BACKEND_UNAVAILABLE"

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Backend call {operation} failed: {reason}")
