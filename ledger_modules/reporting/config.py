"""
Reporting Configuration Schema.

Report header details, display formatting, and the switches that decide
which accounts appear on statements and how the balance sheet treats
the income and expenditure surplus.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Self

import yaml

from ledger_kernel.domain.amounts import BALANCE_TOLERANCE, parse_amount
from ledger_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    Controls report headers, formatting, and report generation.
    """

    # Entity name shown on reports
    entity_name: str = "Organisation"

    # Currency shown on reports
    currency: str = "INR"

    # Rounding precision for display
    display_precision: int = 2

    # Tolerance for every debit/credit and assets/liabilities comparison
    balance_tolerance: Decimal = BALANCE_TOLERANCE

    # Whether to list accounts with zero balance
    include_zero_balances: bool = True

    # Whether deactivated accounts stay on historical reports
    include_inactive: bool = True

    # Whether the balance sheet adds accumulated income less expenditure
    # to the liabilities side
    carry_surplus_to_equity: bool = True

    # First month of the financial year (4 = April)
    financial_year_start_month: int = 4

    # Vouchers listed on the dashboard
    recent_voucher_count: int = 5

    def __post_init__(self):
        if not isinstance(self.balance_tolerance, Decimal):
            self.balance_tolerance = parse_amount(self.balance_tolerance)
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if len(self.currency) != 3:
            raise ValueError("currency must be a 3-letter ISO 4217 code")
        if self.balance_tolerance <= 0:
            raise ValueError("balance_tolerance must be positive")
        if not 1 <= self.financial_year_start_month <= 12:
            raise ValueError("financial_year_start_month must be between 1 and 12")
        if self.recent_voucher_count < 0:
            raise ValueError("recent_voucher_count cannot be negative")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown reporting config keys: {', '.join(unknown)}")
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Self:
        """
        Create config from a YAML file.

        The file may hold the settings at top level or under a
        ``reporting:`` key.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Reporting config must be a mapping: {path}")
        if isinstance(data.get("reporting"), dict):
            data = data["reporting"]
        return cls.from_dict(data)
