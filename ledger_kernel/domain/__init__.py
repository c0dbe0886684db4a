"""
Pure domain layer.

This module contains entities, DTOs and bookkeeping rules with NO
dependencies on:
- Backend transport
- Time/clock (except through an injected Clock)
- I/O

All domain objects are immutable and deterministic.
"""

from ledger_kernel.domain.amounts import (
    BALANCE_TOLERANCE,
    ZERO,
    parse_amount,
    parse_date,
    quantize_amount,
    within_tolerance,
)
from ledger_kernel.domain.balances import (
    DisplayBalance,
    account_running_total,
    natural_balance,
    opening_running_total,
)
from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.dtos import (
    IntegrityWarning,
    LedgerSnapshot,
    ValidationError,
    ValidationResult,
)
from ledger_kernel.domain.entities import (
    Account,
    AccountType,
    BalanceSide,
    Entry,
    Voucher,
    VoucherDraft,
    VoucherType,
    default_opening_side,
)
from ledger_kernel.domain.financial_year import FinancialYear
from ledger_kernel.domain.numbering import next_voucher_number
from ledger_kernel.domain.voucher_validation import (
    drop_blank_entries,
    ensure_valid_voucher,
    populated_entries,
    validate_voucher,
)

__all__ = [
    # Entities
    "Account",
    "AccountType",
    "BalanceSide",
    "Entry",
    "Voucher",
    "VoucherDraft",
    "VoucherType",
    "default_opening_side",
    # Amounts
    "BALANCE_TOLERANCE",
    "ZERO",
    "parse_amount",
    "parse_date",
    "quantize_amount",
    "within_tolerance",
    # Balances
    "DisplayBalance",
    "account_running_total",
    "natural_balance",
    "opening_running_total",
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # DTOs
    "IntegrityWarning",
    "LedgerSnapshot",
    "ValidationError",
    "ValidationResult",
    # Rules
    "FinancialYear",
    "drop_blank_entries",
    "ensure_valid_voucher",
    "next_voucher_number",
    "populated_entries",
    "validate_voucher",
]
