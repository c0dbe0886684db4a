"""
Reporting Module Service (``ledger_modules.reporting.service``).

Responsibility
--------------
Orchestrates report generation -- account ledger, trial balance, income
and expenditure, balance sheet, account-wise monthly comparison, dashboard
and voucher register -- by loading one LedgerSnapshot per request from the
backend and handing it, through the kernel selectors, to the pure
functions in ``statements.py``.  This is a **read-only** service.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``backend`` + ``clock`` +
``config`` (+ an optional ``SnapshotLoader``).

Invariants enforced
-------------------
* Read-only -- no writes to the backend.
* Every report is computed over one immutable snapshot; concurrent
  requests never share mutable state.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.

Failure modes
-------------
* Invalid parameters (``from_date`` after ``to_date``, unparseable dates,
  unknown financial year or filter)  -> ``INVALID_PARAMETERS`` outcome.
* Unknown ledger account  -> ``ACCOUNT_NOT_FOUND`` outcome.
* Backend failure  -> ``BACKEND_UNAVAILABLE`` outcome.
* Any other kernel error  -> ``FAILED`` outcome.
* Any other exception  -> logged as ``report_crashed``, ``FAILED`` outcome.

Audit relevance
---------------
Structured log events are emitted for every report request, carrying the
report type, parameters, duration and warning count.  Data-integrity
findings are logged at WARNING and returned with the report.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import date
from typing import Any

from ledger_kernel.domain.amounts import parse_date
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import LedgerSnapshot
from ledger_kernel.domain.entities import VoucherType
from ledger_kernel.domain.financial_year import FinancialYear
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    BackendUnavailableError,
    InvalidDateError,
    InvalidReportParametersError,
    LedgerKernelError,
)
from ledger_kernel.logging_config import LogContext, get_logger, log_integrity_warnings
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_kernel.selectors.voucher_selector import VoucherSelector
from ledger_kernel.services.backend import BackendService
from ledger_kernel.services.snapshot_loader import SnapshotLoader
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    MonthlyAccountFilter,
    ReportMetadata,
    ReportOutcome,
    ReportStatus,
    ReportType,
)
from ledger_modules.reporting.statements import (
    build_balance_sheet,
    build_dashboard_summary,
    build_income_expenditure,
    build_ledger,
    build_monthly_comparison,
    build_trial_balance,
    build_voucher_register,
    render_to_dict,
)

logger = get_logger("modules.reporting.service")

DateParam = date | str | None


class ReportingService:
    """
    Report generation service.

    Contract
    --------
    * Every public report method returns a ``ReportOutcome``; errors
      become a status, never an exception.
    * Dates may be ``date`` objects or ISO strings.  ``to_date`` and
      ``as_of_date`` default to today from the injected clock.

    Guarantees
    ----------
    * Report generation delegates to pure transformation functions in
      ``statements.py``; no accounting logic lives in this class.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT post or edit vouchers (see ``ledger_modules.bookkeeping``).
    * Does NOT cache snapshots between requests.
    """

    def __init__(
        self,
        backend: BackendService,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
        loader: SnapshotLoader | None = None,
    ):
        self._backend = backend
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()
        self._loader = loader or SnapshotLoader()

        logger.info(
            "reporting_service_initialized",
            extra={
                "entity_name": self._config.entity_name,
                "currency": self._config.currency,
            },
        )

    @property
    def config(self) -> ReportingConfig:
        return self._config

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _load_snapshot(self) -> LedgerSnapshot:
        return self._loader.load(self._backend)

    def _build_metadata(
        self,
        report_type: ReportType,
        as_of_date: date,
        period_start: date | None = None,
        period_end: date | None = None,
        financial_year: str | None = None,
    ) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            report_type=report_type,
            entity_name=self._config.entity_name,
            currency=self._config.currency,
            as_of_date=as_of_date,
            generated_at=self._clock.now().isoformat(),
            period_start=period_start,
            period_end=period_end,
            financial_year=financial_year,
        )

    def _coerce_date(self, value: DateParam, name: str) -> date | None:
        if value is None or value == "":
            return None
        try:
            return parse_date(value)
        except InvalidDateError as e:
            raise InvalidReportParametersError(f"{name} is not a valid date: {value!r}") from e

    @staticmethod
    def _check_range(from_date: date | None, to_date: date | None) -> None:
        if from_date is not None and to_date is not None and from_date > to_date:
            raise InvalidReportParametersError(
                f"from_date {from_date.isoformat()} is after to_date {to_date.isoformat()}"
            )

    def _run(
        self,
        report_type: ReportType,
        build: Callable[[], Any],
        params: dict[str, Any],
    ) -> ReportOutcome:
        """Execute a builder and translate kernel errors into a status."""
        t0 = time.monotonic()
        with LogContext.bind(report_type=report_type.value):
            logger.info(
                "report_requested",
                extra={"params": {k: v for k, v in params.items() if v is not None}},
            )
            try:
                report = build()
            except InvalidReportParametersError as e:
                return self._failed(report_type, ReportStatus.INVALID_PARAMETERS, e)
            except AccountNotFoundError as e:
                return self._failed(report_type, ReportStatus.ACCOUNT_NOT_FOUND, e)
            except BackendUnavailableError as e:
                return self._failed(report_type, ReportStatus.BACKEND_UNAVAILABLE, e)
            except LedgerKernelError as e:
                logger.error(
                    "report_failed",
                    extra={"error_code": e.code},
                    exc_info=True,
                )
                return ReportOutcome(
                    status=ReportStatus.FAILED,
                    report_type=report_type,
                    message=str(e),
                )
            except Exception as e:
                logger.error(
                    "report_crashed",
                    extra={"error_type": type(e).__name__},
                    exc_info=True,
                )
                return ReportOutcome(
                    status=ReportStatus.FAILED,
                    report_type=report_type,
                    message=f"Report generation failed: {type(e).__name__}",
                )

            warnings = tuple(getattr(report, "warnings", ()))
            log_integrity_warnings(logger, warnings)
            logger.info(
                f"{report_type.value}_generated",
                extra={
                    "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                    "warning_count": len(warnings),
                },
            )
            return ReportOutcome(
                status=ReportStatus.GENERATED,
                report_type=report_type,
                report=report,
                warnings=warnings,
            )

    @staticmethod
    def _failed(
        report_type: ReportType,
        status: ReportStatus,
        error: LedgerKernelError,
    ) -> ReportOutcome:
        logger.warning(
            "report_rejected",
            extra={"status": status.value, "error_code": error.code, "reason": str(error)},
        )
        return ReportOutcome(status=status, report_type=report_type, message=str(error))

    # =========================================================================
    # Public API
    # =========================================================================

    def ledger(
        self,
        account_code: str,
        from_date: DateParam = None,
        to_date: DateParam = None,
    ) -> ReportOutcome:
        """
        Ledger of one account.

        Without ``from_date`` the ledger starts from the account's opening
        balance and lists every posting up to ``to_date``.
        """
        def build():
            start = self._coerce_date(from_date, "from_date")
            end = self._coerce_date(to_date, "to_date") or self._clock.today()
            self._check_range(start, end)

            snapshot = self._load_snapshot()
            account = snapshot.get_account(account_code)
            if account is None:
                raise AccountNotFoundError(account_code)

            with LogContext.bind(account_code=account_code):
                return build_ledger(
                    LedgerSelector(snapshot),
                    account,
                    self._build_metadata(ReportType.LEDGER, end, start, end),
                    from_date=start,
                    to_date=end,
                )

        return self._run(
            ReportType.LEDGER,
            build,
            {"account_code": account_code, "from_date": from_date, "to_date": to_date},
        )

    def trial_balance(self, as_of_date: DateParam = None) -> ReportOutcome:
        def build():
            as_of = self._coerce_date(as_of_date, "as_of_date") or self._clock.today()
            snapshot = self._load_snapshot()
            return build_trial_balance(
                LedgerSelector(snapshot),
                self._config,
                self._build_metadata(ReportType.TRIAL_BALANCE, as_of),
                as_of_date=as_of,
            )

        return self._run(ReportType.TRIAL_BALANCE, build, {"as_of_date": as_of_date})

    def income_expenditure(
        self,
        from_date: DateParam = None,
        to_date: DateParam = None,
    ) -> ReportOutcome:
        """
        Income and expenditure for a period.

        ``from_date`` defaults to the start of the financial year containing
        ``to_date``.
        """
        def build():
            end = self._coerce_date(to_date, "to_date") or self._clock.today()
            start = self._coerce_date(from_date, "from_date") or FinancialYear.for_date(
                end, self._config.financial_year_start_month,
            ).start
            self._check_range(start, end)

            snapshot = self._load_snapshot()
            return build_income_expenditure(
                LedgerSelector(snapshot),
                self._config,
                self._build_metadata(ReportType.INCOME_EXPENDITURE, end, start, end),
                from_date=start,
                to_date=end,
            )

        return self._run(
            ReportType.INCOME_EXPENDITURE,
            build,
            {"from_date": from_date, "to_date": to_date},
        )

    def balance_sheet(self, as_of_date: DateParam = None) -> ReportOutcome:
        def build():
            as_of = self._coerce_date(as_of_date, "as_of_date") or self._clock.today()
            snapshot = self._load_snapshot()
            return build_balance_sheet(
                LedgerSelector(snapshot),
                self._config,
                self._build_metadata(ReportType.BALANCE_SHEET, as_of),
                as_of_date=as_of,
            )

        return self._run(ReportType.BALANCE_SHEET, build, {"as_of_date": as_of_date})

    def monthly_comparison(
        self,
        financial_year: FinancialYear | str | None = None,
        account_filter: MonthlyAccountFilter | str = MonthlyAccountFilter.ALL,
    ) -> ReportOutcome:
        """Account-wise monthly comparison; defaults to the current financial year."""
        def build():
            start_month = self._config.financial_year_start_month
            if financial_year is None:
                year = FinancialYear.current(self._clock, start_month)
            elif isinstance(financial_year, FinancialYear):
                year = financial_year
            else:
                try:
                    year = FinancialYear.parse(financial_year, start_month)
                except ValueError as e:
                    raise InvalidReportParametersError(str(e)) from e
            try:
                filter_ = MonthlyAccountFilter(account_filter)
            except ValueError as e:
                raise InvalidReportParametersError(
                    f"Unknown account filter: {account_filter!r}"
                ) from e

            snapshot = self._load_snapshot()
            return build_monthly_comparison(
                LedgerSelector(snapshot),
                self._config,
                self._build_metadata(
                    ReportType.MONTHLY_COMPARISON,
                    year.end,
                    year.start,
                    year.end,
                    financial_year=year.label,
                ),
                year,
                filter_,
            )

        return self._run(
            ReportType.MONTHLY_COMPARISON,
            build,
            {"financial_year": str(financial_year) if financial_year else None,
             "account_filter": str(getattr(account_filter, "value", account_filter))},
        )

    def dashboard(self) -> ReportOutcome:
        def build():
            today = self._clock.today()
            snapshot = self._load_snapshot()
            return build_dashboard_summary(
                LedgerSelector(snapshot),
                VoucherSelector(snapshot),
                self._config,
                self._build_metadata(ReportType.DASHBOARD, today, today.replace(day=1), today),
                today,
            )

        return self._run(ReportType.DASHBOARD, build, {})

    def voucher_register(
        self,
        voucher_type: VoucherType | str | None = None,
        search: str | None = None,
        from_date: DateParam = None,
        to_date: DateParam = None,
    ) -> ReportOutcome:
        """Voucher list filtered by type, text and date range, newest first."""
        def build():
            start = self._coerce_date(from_date, "from_date")
            end = self._coerce_date(to_date, "to_date")
            self._check_range(start, end)
            type_ = None
            if voucher_type not in (None, "", "all"):
                try:
                    type_ = VoucherType(voucher_type)
                except ValueError as e:
                    raise InvalidReportParametersError(
                        f"Unknown voucher type: {voucher_type!r}"
                    ) from e

            snapshot = self._load_snapshot()
            return build_voucher_register(
                VoucherSelector(snapshot),
                self._config,
                self._build_metadata(
                    ReportType.VOUCHER_REGISTER, end or self._clock.today(), start, end,
                ),
                voucher_type=type_,
                search=search,
                from_date=start,
                to_date=end,
            )

        return self._run(
            ReportType.VOUCHER_REGISTER,
            build,
            {"voucher_type": voucher_type, "search": search,
             "from_date": from_date, "to_date": to_date},
        )

    def financial_years(self, count: int = 5) -> tuple[FinancialYear, ...]:
        """The current financial year and the ``count - 1`` before it."""
        return FinancialYear.recent(
            self._clock, count, self._config.financial_year_start_month,
        )

    def to_dict(self, report: object) -> dict | list | str | int | float | bool | None:
        """Render a report (or outcome) at the configured display precision."""
        return render_to_dict(report, self._config.display_precision)
