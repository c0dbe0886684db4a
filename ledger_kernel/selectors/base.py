"""
Module: ledger_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
    Selectors provide structured read access to an immutable LedgerSnapshot.
Architecture position: Kernel > Selectors.  May import from domain/.
    MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Read-only access: selectors never modify the snapshot they are given.
    - DTO return convention: selectors return frozen dataclasses or computed
      results.
    - Snapshot ownership: the caller fetches the snapshot; any number of
      selectors may read the same snapshot concurrently.
"""

from abc import ABC

from ledger_kernel.domain.dtos import LedgerSnapshot


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Non-goals:
        - BaseSelector does NOT define any query methods; subclasses implement
          the ledger and voucher-register queries.
    """

    def __init__(self, snapshot: LedgerSnapshot):
        self.snapshot = snapshot
