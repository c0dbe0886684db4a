"""
Bookkeeping result models.

Frozen value objects returned by ``VoucherEntryService.submit``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ledger_kernel.domain.dtos import ValidationError
from ledger_kernel.domain.entities import Voucher


class VoucherSubmissionStatus(str, Enum):
    """Status of a voucher submission."""

    SUBMITTED = "submitted"
    INVALID = "invalid"  # failed validation before reaching the backend
    REJECTED = "rejected"  # refused or not stored by the backend


@dataclass(frozen=True)
class VoucherSubmissionResult:
    """Result of submitting a voucher draft."""

    status: VoucherSubmissionStatus
    voucher_no: str
    voucher: Voucher | None = None
    errors: tuple[ValidationError, ...] = ()
    error_code: str | None = None
    message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == VoucherSubmissionStatus.SUBMITTED

    @property
    def error_codes(self) -> tuple[str, ...]:
        return tuple(e.code for e in self.errors)
