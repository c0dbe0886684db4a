"""
Structured JSON logging for the ledger kernel.

Every record is one JSON line.  Request-scoped fields (who posted, which
report, which account or voucher) ride along from ``LogContext`` so that
an auditor can follow one request through the loader, the selectors and
the report builders without threading ids through every call.

Money is written as the exact decimal string (``"1500.50"``), never as
a float.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
    "log_integrity_warnings",
]

import json
import logging
import sys
import threading
from collections.abc import Iterable, Mapping
from contextvars import ContextVar, Token
from datetime import UTC, date, datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any
from uuid import UUID

# ---------------------------------------------------------------------------
# Request context
# ---------------------------------------------------------------------------

_EMPTY: Mapping[str, str] = MappingProxyType({})


class LogContext:
    """
    Request-scoped log fields, safe across threads and asyncio tasks.

    All fields live in one immutable mapping held by a single ContextVar,
    so ``bind`` can restore the previous state with one token.
    """

    FIELDS: frozenset[str] = frozenset({
        "correlation_id",
        "actor_id",
        "report_type",
        "account_code",
        "voucher_no",
    })

    _fields: ContextVar[Mapping[str, str]] = ContextVar("ledger_log_fields", default=_EMPTY)

    @classmethod
    def _merged(cls, values: Mapping[str, str | None]) -> Mapping[str, str]:
        unknown = set(values) - cls.FIELDS
        if unknown:
            raise TypeError(f"Unknown log context field(s): {', '.join(sorted(unknown))}")
        merged = dict(cls._fields.get())
        merged.update({k: v for k, v in values.items() if v is not None})
        return MappingProxyType(merged)

    @classmethod
    def set(cls, **values: str | None) -> None:
        """Set context fields. None leaves a field untouched."""
        cls._fields.set(cls._merged(values))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(cls._fields.get())

    @classmethod
    def clear(cls) -> None:
        cls._fields.set(_EMPTY)

    @classmethod
    def bind(cls, **values: str | None) -> "_Binding":
        """Set fields for the duration of a ``with`` block."""
        return _Binding(values)


class _Binding:
    def __init__(self, values: Mapping[str, str | None]):
        self._values = values
        self._token: Token[Mapping[str, str]] | None = None

    def __enter__(self) -> type[LogContext]:
        self._token = LogContext._fields.set(LogContext._merged(self._values))
        return LogContext

    def __exit__(self, *exc: Any) -> None:
        if self._token is not None:
            LogContext._fields.reset(self._token)
            self._token = None


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, UUID):
        return str(obj)
    # Enums such as AccountType log by value
    value = getattr(obj, "value", None)
    if isinstance(value, str):
        return value
    return str(obj)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: base fields, then context, then extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, val in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, val)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_jsonable)

    @staticmethod
    def _exception_fields(exc: BaseException) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        # LedgerKernelError subclasses keep voucher_no, totals etc. as attributes
        for key, val in vars(exc).items():
            if not key.startswith("_") and key != "code":
                fields[f"exc_{key}"] = val
        return fields


# ---------------------------------------------------------------------------
# Loggers
# ---------------------------------------------------------------------------

_ROOT = "ledger_kernel"


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``ledger_kernel`` namespace."""
    return logging.getLogger(f"{_ROOT}.{name}")


def log_integrity_warnings(
    logger: logging.Logger,
    warnings: Iterable[Any],
    event: str = "report_integrity_warning",
) -> int:
    """
    Log each integrity warning at WARNING level and return how many.

    Reports surface data problems instead of correcting them, so every
    surfaced warning also lands in the audit log with its code and details.
    """
    count = 0
    for warning in warnings:
        logger.warning(event, extra={"warning_code": warning.code, "details": warning.details})
        count += 1
    return count


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach one JSON handler to the ``ledger_kernel`` logger. Idempotent."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root = logging.getLogger(_ROOT)
    root.setLevel(level)
    root.propagate = False
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)


def reset_logging() -> None:
    """Undo configure_logging. For tests."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_ROOT)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
