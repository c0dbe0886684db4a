"""
Kernel services -- the imperative shell around the pure domain.
"""

from ledger_kernel.services.backend import BackendService
from ledger_kernel.services.memory_backend import InMemoryBackend
from ledger_kernel.services.snapshot_loader import (
    SnapshotLoader,
    account_to_payload,
    parse_account,
    parse_voucher,
    voucher_to_payload,
)

__all__ = [
    "BackendService",
    "InMemoryBackend",
    "SnapshotLoader",
    "account_to_payload",
    "parse_account",
    "parse_voucher",
    "voucher_to_payload",
]
