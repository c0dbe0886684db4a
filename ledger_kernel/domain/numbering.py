"""
Voucher numbering -- per-type sequences.

Each voucher type keeps its own sequence (``PV-0001``, ``RV-0001``,
``JV-0001``, ``CV-0001``).  The next number is one past the highest number
already used for that type; numbers that do not follow the pattern are
ignored.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from ledger_kernel.domain.entities import VoucherType

DEFAULT_PREFIXES: Mapping[VoucherType, str] = {
    VoucherType.PAYMENT: "PV",
    VoucherType.RECEIPT: "RV",
    VoucherType.JOURNAL: "JV",
    VoucherType.CONTRA: "CV",
}

DEFAULT_WIDTH = 4


def format_voucher_number(
    voucher_type: VoucherType,
    sequence: int,
    prefixes: Mapping[VoucherType, str] = DEFAULT_PREFIXES,
    width: int = DEFAULT_WIDTH,
) -> str:
    return f"{prefixes[voucher_type]}-{sequence:0{width}d}"


def parse_sequence(
    voucher_no: str,
    voucher_type: VoucherType,
    prefixes: Mapping[VoucherType, str] = DEFAULT_PREFIXES,
) -> int | None:
    """Sequence part of ``voucher_no`` if it belongs to ``voucher_type``."""
    match = re.fullmatch(rf"{re.escape(prefixes[voucher_type])}-(\d+)", voucher_no.strip())
    return int(match.group(1)) if match else None


def next_voucher_number(
    existing: Iterable[str],
    voucher_type: VoucherType,
    prefixes: Mapping[VoucherType, str] = DEFAULT_PREFIXES,
    width: int = DEFAULT_WIDTH,
) -> str:
    """Next free number in ``voucher_type``'s sequence."""
    highest = 0
    for voucher_no in existing:
        seq = parse_sequence(voucher_no, voucher_type, prefixes)
        if seq is not None and seq > highest:
            highest = seq
    return format_voucher_number(voucher_type, highest + 1, prefixes, width)
