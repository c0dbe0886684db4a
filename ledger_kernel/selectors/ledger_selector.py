"""
Module: ledger_kernel.selectors.ledger_selector
Responsibility: Read-only ledger queries over a LedgerSnapshot -- flattened
    postings per account, debit/credit activity, debit-positive running
    totals, and data-integrity findings.  The ledger is a derived view over
    voucher entries; there are no stored balances anywhere.
Architecture position: Kernel > Selectors.  May import from domain/ and
    selectors/base.py.

Invariants enforced:
    - Deterministic ordering: postings sort by (date, voucher_no, line).
    - All balance methods return Decimal (never float).
    - Postings to account codes missing from the chart are never attributed
      to an account; they are available through unattributed_postings().

Failure modes:
    - Returns empty results or zero balances when no postings match.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ledger_kernel.domain.amounts import ZERO
from ledger_kernel.domain.balances import account_running_total
from ledger_kernel.domain.dtos import IntegrityWarning, LedgerSnapshot
from ledger_kernel.domain.entities import Account, VoucherType
from ledger_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class Posting:
    """A single voucher entry flattened with its voucher's header fields."""

    voucher_no: str
    voucher_type: VoucherType
    date: date
    narration: str
    account_code: str
    debit: Decimal
    credit: Decimal
    line: int

    @property
    def sort_key(self) -> tuple[date, str, int]:
        return (self.date, self.voucher_no, self.line)


@dataclass(frozen=True)
class AccountActivity:
    """Debit and credit totals for one account over a date window."""

    account_code: str
    debit_total: Decimal
    credit_total: Decimal
    posting_count: int

    @property
    def net(self) -> Decimal:
        """Net movement (debits - credits)."""
        return self.debit_total - self.credit_total


def _in_window(
    day: date,
    from_date: date | None,
    to_date: date | None,
    before: date | None,
) -> bool:
    if from_date is not None and day < from_date:
        return False
    if to_date is not None and day > to_date:
        return False
    if before is not None and day >= before:
        return False
    return True


class LedgerSelector(BaseSelector):
    """
    Selector for ledger queries -- the balance computation engine.

    Contract:
        Date bounds are inclusive (``from_date``, ``to_date``); ``before`` is
        a strict upper bound used to roll a balance forward to the start of
        a range.

    Non-goals:
        - Does NOT re-filter entries against an account's opening-balance
          date; every entry the backend returned is part of the ledger.
    """

    def __init__(self, snapshot: LedgerSnapshot):
        super().__init__(snapshot)
        postings: list[Posting] = []
        for voucher in snapshot.vouchers:
            for line, entry in enumerate(voucher.entries):
                postings.append(Posting(
                    voucher_no=voucher.voucher_no,
                    voucher_type=voucher.voucher_type,
                    date=voucher.date,
                    narration=voucher.narration,
                    account_code=entry.account_code,
                    debit=entry.debit,
                    credit=entry.credit,
                    line=line,
                ))
        postings.sort(key=lambda p: p.sort_key)
        self._postings: tuple[Posting, ...] = tuple(postings)

        by_account: dict[str, list[Posting]] = defaultdict(list)
        for posting in self._postings:
            by_account[posting.account_code].append(posting)
        self._by_account = dict(by_account)

    # =========================================================================
    # Postings
    # =========================================================================

    def postings(
        self,
        account_code: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        before: date | None = None,
    ) -> list[Posting]:
        """
        Postings in chronological order.

        Args:
            account_code: Restrict to one account code.
            from_date: Inclusive lower bound.
            to_date: Inclusive upper bound.
            before: Strict upper bound.
        """
        source = (
            self._postings if account_code is None
            else self._by_account.get(account_code, [])
        )
        return [p for p in source if _in_window(p.date, from_date, to_date, before)]

    def unattributed_postings(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[Posting]:
        """Postings whose account code is not in the chart of accounts."""
        known = self.snapshot.account_map
        return [
            p for p in self.postings(from_date=from_date, to_date=to_date)
            if p.account_code not in known
        ]

    # =========================================================================
    # Balances
    # =========================================================================

    def activity(
        self,
        account_code: str,
        from_date: date | None = None,
        to_date: date | None = None,
        before: date | None = None,
    ) -> AccountActivity:
        """Debit/credit totals for one account over a window."""
        rows = self.postings(account_code, from_date, to_date, before)
        return AccountActivity(
            account_code=account_code,
            debit_total=sum((p.debit for p in rows), ZERO),
            credit_total=sum((p.credit for p in rows), ZERO),
            posting_count=len(rows),
        )

    def running_total(
        self,
        account: Account,
        as_of: date | None = None,
        before: date | None = None,
    ) -> Decimal:
        """
        Debit-positive balance of ``account``: opening balance plus every
        posting dated on or before ``as_of`` (and strictly before ``before``).
        """
        rows = self.postings(account.account_code, to_date=as_of, before=before)
        return account_running_total(account, rows)

    def pre_opening_postings(self, account: Account) -> list[Posting]:
        """Postings dated before the account's opening-balance date."""
        return self.postings(account.account_code, before=account.opening_balance_as_on_date)

    def total_debits_credits(self, as_of: date | None = None) -> tuple[Decimal, Decimal]:
        """Aggregate debit and credit over ALL postings, attributed or not."""
        rows = self.postings(to_date=as_of)
        return (
            sum((p.debit for p in rows), ZERO),
            sum((p.credit for p in rows), ZERO),
        )

    # =========================================================================
    # Integrity
    # =========================================================================

    def integrity_warnings(self) -> tuple[IntegrityWarning, ...]:
        """
        Findings in the snapshot that reports must surface, not correct.

        Includes boundary rejections recorded by the loader, unbalanced
        vouchers, entries with both sides populated, and entries pointing at
        unknown account codes.
        """
        warnings: list[IntegrityWarning] = list(self.snapshot.issues)
        known = self.snapshot.account_map

        for voucher in self.snapshot.vouchers:
            if not voucher.is_balanced():
                warnings.append(IntegrityWarning(
                    code="UNBALANCED_VOUCHER",
                    message=f"Voucher {voucher.voucher_no} debits do not equal credits",
                    details={
                        "voucher_no": voucher.voucher_no,
                        "total_debit": str(voucher.total_debit),
                        "total_credit": str(voucher.total_credit),
                    },
                ))
            for line, entry in enumerate(voucher.entries):
                if entry.has_conflicting_sides:
                    warnings.append(IntegrityWarning(
                        code="CONFLICTING_SIDES",
                        message=(
                            f"Voucher {voucher.voucher_no} line {line + 1} "
                            "has both a debit and a credit"
                        ),
                        details={"voucher_no": voucher.voucher_no, "line": line},
                    ))
                if entry.account_code not in known:
                    warnings.append(IntegrityWarning(
                        code="UNKNOWN_ACCOUNT",
                        message=(
                            f"Voucher {voucher.voucher_no} references unknown "
                            f"account {entry.account_code}"
                        ),
                        details={
                            "voucher_no": voucher.voucher_no,
                            "account_code": entry.account_code,
                            "debit": str(entry.debit),
                            "credit": str(entry.credit),
                        },
                    ))

        return tuple(warnings)
