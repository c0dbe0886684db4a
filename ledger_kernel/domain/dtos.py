"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Validation results and data-integrity warnings shared by the boundary
    loader, voucher validation, selectors and reports, plus the immutable
    ``LedgerSnapshot`` every report is computed over.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

from ledger_kernel.domain.entities import Account, Voucher


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation error.

    Contract:
        Carries a machine-readable code, human-readable message, optional field
        path, and optional details dict.

    Non-goals:
        - Does NOT raise exceptions -- it IS the error representation.
    """

    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of validation.

    Guarantees:
        - errors is always a tuple (never None)
        - bool(result) == result.is_valid for convenience
    """

    is_valid: bool
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> ValidationResult:
        """Create a successful validation result."""
        return cls(is_valid=True, errors=())

    @classmethod
    def failure(cls, *errors: ValidationError) -> ValidationResult:
        """Create a failed validation result."""
        return cls(is_valid=False, errors=tuple(errors))

    @classmethod
    def from_errors(cls, errors: list[ValidationError]) -> ValidationResult:
        return cls.failure(*errors) if errors else cls.success()

    @property
    def error_codes(self) -> tuple[str, ...]:
        return tuple(e.code for e in self.errors)

    def __bool__(self) -> bool:
        return self.is_valid


@dataclass(frozen=True)
class IntegrityWarning:
    """
    Non-fatal data-integrity finding surfaced alongside a report.

    Examples: an unbalanced legacy voucher, an entry referencing an unknown
    account, a voucher skipped because its date could not be parsed.
    """

    code: str
    message: str
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Immutable, already-fetched view of the chart of accounts and vouchers.

    ``issues`` records backend records rejected at the boundary.
    """

    accounts: tuple[Account, ...]
    vouchers: tuple[Voucher, ...]
    issues: tuple[IntegrityWarning, ...] = ()

    @cached_property
    def account_map(self) -> dict[str, Account]:
        return {a.account_code: a for a in self.accounts}

    def get_account(self, account_code: str) -> Account | None:
        return self.account_map.get(account_code)
