"""
Pytest fixtures for the voucher ledger test suite.

Provides:
- A deterministic clock fixed at 2024-04-30 12:00 UTC
- A small non-profit chart of accounts with balanced opening balances
- Vouchers across April and May 2024
- In-memory backend and service instances wired to them
- Structured-log capture
"""

import json
import logging
from datetime import date, datetime, timezone
from io import StringIO

import pytest

from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.domain.entities import Account, AccountType, Voucher, VoucherType
from ledger_kernel.logging_config import LogContext, StructuredFormatter, reset_logging
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_kernel.services.memory_backend import InMemoryBackend
from ledger_kernel.services.snapshot_loader import SnapshotLoader, account_to_payload, voucher_to_payload
from ledger_modules.bookkeeping.service import ChartOfAccountsService, VoucherEntryService
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.service import ReportingService
from tests.factories import chart_of_accounts, make_account, make_voucher, voucher_book


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 4, 30, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def accounts() -> list[Account]:
    return chart_of_accounts()


@pytest.fixture
def vouchers() -> list[Voucher]:
    return voucher_book()


@pytest.fixture
def account_payloads(accounts) -> list[dict]:
    return [account_to_payload(a) for a in accounts]


@pytest.fixture
def voucher_payloads(vouchers) -> list[dict]:
    return [voucher_to_payload(v) for v in vouchers]


@pytest.fixture
def backend(account_payloads, voucher_payloads) -> InMemoryBackend:
    return InMemoryBackend(accounts=account_payloads, vouchers=voucher_payloads)


@pytest.fixture
def snapshot(backend):
    return SnapshotLoader().load(backend)


@pytest.fixture
def ledger_selector(snapshot) -> LedgerSelector:
    return LedgerSelector(snapshot)


@pytest.fixture
def reporting_config() -> ReportingConfig:
    return ReportingConfig.with_defaults()


@pytest.fixture
def reporting_service(backend, deterministic_clock, reporting_config) -> ReportingService:
    return ReportingService(
        backend=backend,
        clock=deterministic_clock,
        config=reporting_config,
    )


@pytest.fixture
def chart_service(backend, deterministic_clock) -> ChartOfAccountsService:
    return ChartOfAccountsService(backend, clock=deterministic_clock)


@pytest.fixture
def entry_service(backend, deterministic_clock) -> VoucherEntryService:
    return VoucherEntryService(backend, clock=deterministic_clock)


@pytest.fixture
def scenario_backend() -> InMemoryBackend:
    """
    Account 1100 (Asset, opening 5000 Dr) balanced by Capital Fund 3000
    (opening 5000 Cr), with one receipt of 2000 into 1100 from income 4000.
    """
    accounts = [
        make_account("1100", "Bank", AccountType.ASSET, "5000"),
        make_account("3000", "Capital Fund", AccountType.CAPITAL, "5000"),
        make_account("4000", "Grants", AccountType.INCOME),
    ]
    vouchers = [
        make_voucher(
            "RV-0001", date(2024, 4, 15),
            [("1100", "2000", "0"), ("4000", "0", "2000")],
            VoucherType.RECEIPT, "Grant received",
        ),
    ]
    return InMemoryBackend.from_entities(accounts, vouchers)


@pytest.fixture
def scenario_service(scenario_backend, deterministic_clock) -> ReportingService:
    return ReportingService(backend=scenario_backend, clock=deterministic_clock)


# =============================================================================
# Logging capture
# =============================================================================


@pytest.fixture
def log_stream():
    """Capture ledger_kernel logs as parsed JSON records."""
    reset_logging()
    LogContext.clear()
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)

    def records() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]

    yield records

    root.removeHandler(handler)
    reset_logging()
    LogContext.clear()
