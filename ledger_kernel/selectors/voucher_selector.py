"""
Module: ledger_kernel.selectors.voucher_selector
Responsibility: Read-only voucher register queries -- filter by type, text
    search and date range, most recent vouchers, lookup by number.
Architecture position: Kernel > Selectors.  May import from domain/ and
    selectors/base.py.

Invariants enforced:
    - Register order is newest first: date descending, then voucher number
      descending.
    - Text search is case-insensitive over voucher number and narration.
"""

from __future__ import annotations

from datetime import date

from ledger_kernel.domain.entities import Voucher, VoucherType
from ledger_kernel.selectors.base import BaseSelector


def _newest_first(vouchers: list[Voucher]) -> list[Voucher]:
    return sorted(vouchers, key=lambda v: (v.date, v.voucher_no), reverse=True)


class VoucherSelector(BaseSelector):
    """Selector for the voucher register."""

    def filter(
        self,
        voucher_type: VoucherType | None = None,
        search: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[Voucher]:
        """
        Vouchers matching every supplied criterion, newest first.

        Args:
            voucher_type: Keep only this type; None keeps all types.
            search: Case-insensitive substring of voucher number or narration.
            from_date: Inclusive lower bound.
            to_date: Inclusive upper bound.
        """
        needle = (search or "").strip().lower()
        matched = []
        for voucher in self.snapshot.vouchers:
            if voucher_type is not None and voucher.voucher_type is not voucher_type:
                continue
            if from_date is not None and voucher.date < from_date:
                continue
            if to_date is not None and voucher.date > to_date:
                continue
            if needle and needle not in voucher.voucher_no.lower() \
                    and needle not in voucher.narration.lower():
                continue
            matched.append(voucher)
        return _newest_first(matched)

    def recent(self, count: int) -> list[Voucher]:
        """The ``count`` most recent vouchers."""
        if count <= 0:
            return []
        return _newest_first(list(self.snapshot.vouchers))[:count]

    def get(self, voucher_no: str) -> Voucher | None:
        for voucher in self.snapshot.vouchers:
            if voucher.voucher_no == voucher_no:
                return voucher
        return None

    def voucher_numbers(self) -> list[str]:
        return [v.voucher_no for v in self.snapshot.vouchers]
