"""
Balances -- Debit-positive running totals and display polarity.

Responsibility:
    Implements the accounting sign convention used by every report.  An
    account keeps ONE running total in debit-positive terms regardless of
    its type: the opening balance contributes ``+amount`` when its side is
    Debit and ``-amount`` when Credit, debits add, credits subtract.

    Display polarity is decided by the sign of that total: positive is a
    Debit balance, negative a Credit balance, zero is unsigned.  The
    "natural" balance (positive when the account sits on its normal side)
    is the total as-is for Asset/Expense and negated for
    Liability/Income/Capital.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - All arithmetic is exact Decimal; no rounding happens here.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from ledger_kernel.domain.amounts import ZERO, quantize_amount
from ledger_kernel.domain.entities import Account, AccountType, BalanceSide


class _Movement(Protocol):
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class DisplayBalance:
    """
    A balance as shown on a report: magnitude plus Debit/Credit label.

    ``side`` is None for a zero balance.
    """

    amount: Decimal
    side: BalanceSide | None

    @classmethod
    def from_running_total(cls, total: Decimal) -> DisplayBalance:
        if total > ZERO:
            return cls(amount=total, side=BalanceSide.DEBIT)
        if total < ZERO:
            return cls(amount=-total, side=BalanceSide.CREDIT)
        return cls(amount=ZERO, side=None)

    @classmethod
    def zero(cls) -> DisplayBalance:
        return cls(amount=ZERO, side=None)

    @property
    def signed(self) -> Decimal:
        """Recover the debit-positive running total."""
        if self.side is BalanceSide.CREDIT:
            return -self.amount
        return self.amount

    @property
    def is_zero(self) -> bool:
        return self.amount == ZERO

    def label(self, places: int = 2) -> str:
        """Render as ``"7000.00 Dr"``; zero renders unsigned."""
        text = str(quantize_amount(self.amount, places))
        if self.side is None:
            return text
        return f"{text} {self.side.short_label}"


def opening_running_total(account: Account) -> Decimal:
    """Signed opening contribution in debit-positive terms."""
    if account.opening_balance_type is BalanceSide.DEBIT:
        return account.opening_balance
    return -account.opening_balance


def apply_movement(total: Decimal, debit: Decimal, credit: Decimal) -> Decimal:
    """Apply one entry to a debit-positive running total."""
    return total + debit - credit


def net_movement(movements: Iterable[_Movement]) -> Decimal:
    """Debits minus credits over a set of entries or postings."""
    total = ZERO
    for m in movements:
        total = apply_movement(total, m.debit, m.credit)
    return total


def account_running_total(account: Account, movements: Iterable[_Movement]) -> Decimal:
    """Opening balance plus every movement, in debit-positive terms."""
    return opening_running_total(account) + net_movement(movements)


def natural_balance(total: Decimal, account_type: AccountType) -> Decimal:
    """
    Balance adjusted for the account's normal side.

    Positive when the account carries its expected direction: a debit
    balance on Asset/Expense, a credit balance on Liability/Income/Capital.
    """
    if account_type.is_debit_natured:
        return total
    return -total
