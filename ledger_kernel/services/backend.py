"""
Backend collaborator protocol.

Contract:
    The backend owns persistence.  ``list_accounts()`` and
    ``list_vouchers()`` return raw camelCase payload mappings exactly as
    stored; the SnapshotLoader turns them into entities.  Write operations
    take and return the same payload shape.

Architecture: ledger_kernel/services.  No transport assumptions; a REST
client, a database gateway and the InMemoryBackend all satisfy it.

Failure modes:
    - BackendUnavailableError when the backend cannot be reached.
    - DuplicateAccountCodeError, AccountNotFoundError,
      DuplicateVoucherNumberError, VoucherNotFoundError and VoucherError
      subclasses for rejected writes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

Payload = Mapping[str, Any]


@runtime_checkable
class BackendService(Protocol):
    """Protocol for the accounts and vouchers store."""

    def list_accounts(self) -> Sequence[Payload]:
        """Every account, active and inactive."""
        ...

    def list_vouchers(self) -> Sequence[Payload]:
        """Every voucher with its embedded entries."""
        ...

    def add_account(self, payload: Payload) -> Payload:
        ...

    def update_account(self, account_code: str, changes: Payload) -> Payload:
        """Apply ``changes``; the account code itself is immutable."""
        ...

    def deactivate_account(self, account_code: str) -> Payload:
        """Soft delete: the account stays in the chart with isActive false."""
        ...

    def add_voucher(self, payload: Payload) -> Payload:
        ...

    def delete_voucher(self, voucher_no: str) -> None:
        ...

    def next_voucher_number(self, voucher_type: str) -> str:
        ...
