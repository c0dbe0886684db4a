"""
Entities -- Chart of accounts and voucher value objects.

Responsibility:
    Defines the strict data model consumed by every report: Account,
    Voucher, Entry (and VoucherDraft for unposted user input), plus the
    enumerations for account type, balance side and voucher type.  Enum
    values are the backend's wire strings.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - All monetary fields are ``Decimal`` and non-negative.
    - ``account_code`` is the immutable business key of an Account.
    - Entries are owned by exactly one Voucher (held in a tuple).

    The per-voucher identity (debits == credits) and the two-entry minimum
    are NOT enforced at construction: legacy data that violates them must
    still load so the discrepancy surfaces in the trial balance.  Use
    ``voucher_validation`` before posting.

Failure modes:
    - ValueError on negative amounts or blank account codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from ledger_kernel.domain.amounts import BALANCE_TOLERANCE, ZERO, sum_amounts, within_tolerance


class AccountType(str, Enum):
    """Types of accounts in the chart of accounts."""

    ASSET = "Asset"
    LIABILITY = "Liability"
    INCOME = "Income"
    EXPENSE = "Expense"
    CAPITAL = "Capital"

    @property
    def is_debit_natured(self) -> bool:
        """Asset and Expense balances increase on debit."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)

    @property
    def natural_side(self) -> BalanceSide:
        return BalanceSide.DEBIT if self.is_debit_natured else BalanceSide.CREDIT


class BalanceSide(str, Enum):
    """Debit or credit polarity of a balance."""

    DEBIT = "Debit"
    CREDIT = "Credit"

    @property
    def short_label(self) -> str:
        return "Dr" if self is BalanceSide.DEBIT else "Cr"


class VoucherType(str, Enum):
    """Kinds of voucher; each keeps its own number sequence."""

    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    JOURNAL = "Journal"
    CONTRA = "Contra"


def default_opening_side(account_type: AccountType) -> BalanceSide:
    """Default opening balance side: Asset/Expense debit, others credit."""
    return account_type.natural_side


@dataclass(frozen=True)
class Account:
    """
    Chart of accounts entry.

    ``opening_balance_type`` may differ from the account type's default,
    e.g. a liability carrying an advance with a debit balance.
    """

    account_code: str
    account_name: str
    account_type: AccountType
    opening_balance: Decimal
    opening_balance_type: BalanceSide
    opening_balance_as_on_date: date
    parent: str | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        if not self.account_code or not self.account_code.strip():
            raise ValueError("account_code is required")
        if not isinstance(self.opening_balance, Decimal):
            raise TypeError(
                f"opening_balance must be Decimal, not {type(self.opening_balance).__name__}"
            )
        if self.opening_balance < ZERO:
            raise ValueError("opening_balance must be non-negative")

    @classmethod
    def create(
        cls,
        account_code: str,
        account_name: str,
        account_type: AccountType,
        opening_balance: Decimal = ZERO,
        opening_balance_as_on_date: date | None = None,
        opening_balance_type: BalanceSide | None = None,
        parent: str | None = None,
        is_active: bool = True,
        *,
        today: date | None = None,
    ) -> Account:
        """Factory applying the default opening side and as-on date."""
        as_on = opening_balance_as_on_date or today
        if as_on is None:
            raise ValueError("opening_balance_as_on_date or today is required")
        return cls(
            account_code=account_code.strip(),
            account_name=account_name,
            account_type=account_type,
            opening_balance=opening_balance,
            opening_balance_type=opening_balance_type or default_opening_side(account_type),
            opening_balance_as_on_date=as_on,
            parent=parent or None,
            is_active=is_active,
        )


@dataclass(frozen=True)
class Entry:
    """One line of a voucher: a debit or a credit against one account."""

    account_code: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO

    def __post_init__(self) -> None:
        if self.debit < ZERO or self.credit < ZERO:
            raise ValueError("Entry amounts must be non-negative")

    @property
    def amount(self) -> Decimal:
        return self.debit if self.debit != ZERO else self.credit

    @property
    def is_populated(self) -> bool:
        """True when the line names an account and carries an amount."""
        return bool(self.account_code.strip()) and (
            self.debit > ZERO or self.credit > ZERO
        )

    @property
    def is_blank(self) -> bool:
        """An untouched entry-form row: no account and no amount."""
        return not self.account_code.strip() and self.debit == ZERO and self.credit == ZERO

    @property
    def has_conflicting_sides(self) -> bool:
        return self.debit > ZERO and self.credit > ZERO


@dataclass(frozen=True)
class Voucher:
    """A posted, dated double-entry transaction."""

    voucher_no: str
    voucher_type: VoucherType
    date: date
    narration: str
    entries: tuple[Entry, ...]
    created_by: str | None = None

    @property
    def total_debit(self) -> Decimal:
        return sum_amounts(e.debit for e in self.entries)

    @property
    def total_credit(self) -> Decimal:
        return sum_amounts(e.credit for e in self.entries)

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    def is_balanced(self, tolerance: Decimal = BALANCE_TOLERANCE) -> bool:
        return within_tolerance(self.total_debit, self.total_credit, tolerance)


@dataclass(frozen=True)
class VoucherDraft:
    """
    Unposted voucher as typed into an entry form.

    Every field may be missing; ``voucher_validation.validate_voucher``
    reports what is wrong before ``to_voucher()`` is called.
    """

    voucher_type: VoucherType
    voucher_no: str = ""
    date: date | None = None
    narration: str = ""
    entries: tuple[Entry, ...] = field(default_factory=tuple)

    @property
    def total_debit(self) -> Decimal:
        return sum_amounts(e.debit for e in self.entries)

    @property
    def total_credit(self) -> Decimal:
        return sum_amounts(e.credit for e in self.entries)

    def to_voucher(self, created_by: str | None = None) -> Voucher:
        """Build the posted voucher from the populated lines."""
        if self.date is None:
            raise ValueError("VoucherDraft.date is required")
        return Voucher(
            voucher_no=self.voucher_no.strip(),
            voucher_type=self.voucher_type,
            date=self.date,
            narration=self.narration.strip(),
            entries=tuple(e for e in self.entries if not e.is_blank),
            created_by=created_by,
        )
