"""
Financial year -- April-to-March reporting years.

Responsibility:
    Labels, boundaries and month lists for financial years such as
    ``"2024-25"`` (1 April 2024 to 31 March 2025).  The start month is
    configurable; the label always names the calendar year the financial
    year starts in and the last two digits of the following year.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  The current year is
    derived from an injected Clock, never from the system time.

Failure modes:
    - ValueError for labels that are not ``YYYY-YY`` or whose two halves
      are not consecutive years.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta

from ledger_kernel.domain.clock import Clock

DEFAULT_START_MONTH = 4

_LABEL_RE = re.compile(r"^(?:FY\s*)?(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class FinancialYear:
    """A twelve-month financial year identified by its starting calendar year."""

    start_year: int
    start_month: int = DEFAULT_START_MONTH

    def __post_init__(self) -> None:
        if not 1 <= self.start_month <= 12:
            raise ValueError("start_month must be between 1 and 12")

    @classmethod
    def for_date(cls, day: date, start_month: int = DEFAULT_START_MONTH) -> FinancialYear:
        """The financial year containing ``day``."""
        if day.month >= start_month:
            return cls(day.year, start_month)
        return cls(day.year - 1, start_month)

    @classmethod
    def current(cls, clock: Clock, start_month: int = DEFAULT_START_MONTH) -> FinancialYear:
        return cls.for_date(clock.today(), start_month)

    @classmethod
    def parse(cls, label: str, start_month: int = DEFAULT_START_MONTH) -> FinancialYear:
        """Parse ``"2024-25"`` (optionally prefixed ``"FY "``)."""
        match = _LABEL_RE.match(label.strip())
        if match is None:
            raise ValueError(f"Invalid financial year label: {label!r}")
        start_year = int(match.group(1))
        if int(match.group(2)) != (start_year + 1) % 100:
            raise ValueError(f"Financial year halves are not consecutive: {label!r}")
        return cls(start_year, start_month)

    @classmethod
    def recent(
        cls,
        clock: Clock,
        count: int = 5,
        start_month: int = DEFAULT_START_MONTH,
    ) -> tuple[FinancialYear, ...]:
        """The current financial year followed by ``count - 1`` earlier ones."""
        current = cls.current(clock, start_month)
        return tuple(cls(current.start_year - i, start_month) for i in range(count))

    @property
    def label(self) -> str:
        return f"{self.start_year}-{(self.start_year + 1) % 100:02d}"

    @property
    def display_name(self) -> str:
        return f"FY {self.label}"

    @property
    def start(self) -> date:
        return date(self.start_year, self.start_month, 1)

    @property
    def end(self) -> date:
        next_start = FinancialYear(self.start_year + 1, self.start_month).start
        return next_start - timedelta(days=1)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def months(self) -> tuple[date, ...]:
        """First day of each of the twelve months, in order."""
        result = []
        year, month = self.start_year, self.start_month
        for _ in range(12):
            result.append(date(year, month, 1))
            month += 1
            if month > 12:
                month, year = 1, year + 1
        return tuple(result)

    def month_index(self, day: date) -> int:
        """Zero-based position of ``day``'s month within this year."""
        if not self.contains(day):
            raise ValueError(f"{day.isoformat()} is outside {self.display_name}")
        return (day.year - self.start_year) * 12 + day.month - self.start_month

    def __str__(self) -> str:
        return self.label
