"""Configuration management for the payroll engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from dotenv import load_dotenv


class PayslipSource(str, Enum):
    """Where payslip itemization comes from."""

    RECOMPUTE = "recompute"
    PAYROLL = "payroll"


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Built once at the edge (API lifespan, scripts) and passed to every
    service. Money and rate fields are Decimal so they never round-trip
    through float.
    """

    database_url: str = "sqlite+aiosqlite:///./payroll.db"
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    overtime_multiplier: Decimal = Decimal("1.5")
    overtime_rank_and_file_only: bool = False
    pagibig_rate: Decimal = Decimal("0.02")
    pagibig_cap: Decimal = Decimal("100.00")
    standard_work_days: int = 22
    leave_hours_per_day: int = 8
    lunch_break_hours: Decimal = Decimal("1")

    payslip_source: PayslipSource = PayslipSource.RECOMPUTE
    timezone: str = "Asia/Manila"
    company_name: str = "MotorPH"

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.overtime_multiplier <= 0:
            raise ValueError("overtime_multiplier must be positive")
        if self.standard_work_days < 1:
            raise ValueError("standard_work_days must be at least 1")
        if self.pagibig_cap < 0:
            raise ValueError("pagibig_cap cannot be negative")

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", str(cls.port))),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            overtime_multiplier=Decimal(
                os.getenv("OVERTIME_MULTIPLIER", str(cls.overtime_multiplier))
            ),
            overtime_rank_and_file_only=(
                os.getenv("OVERTIME_RANK_AND_FILE_ONLY", "false").lower() == "true"
            ),
            pagibig_rate=Decimal(os.getenv("PAGIBIG_RATE", str(cls.pagibig_rate))),
            pagibig_cap=Decimal(os.getenv("PAGIBIG_CAP", str(cls.pagibig_cap))),
            standard_work_days=int(
                os.getenv("STANDARD_WORK_DAYS", str(cls.standard_work_days))
            ),
            leave_hours_per_day=int(
                os.getenv("LEAVE_HOURS_PER_DAY", str(cls.leave_hours_per_day))
            ),
            lunch_break_hours=Decimal(
                os.getenv("LUNCH_BREAK_HOURS", str(cls.lunch_break_hours))
            ),
            payslip_source=PayslipSource(
                os.getenv("PAYSLIP_SOURCE", cls.payslip_source.value).lower()
            ),
            timezone=os.getenv("PAYROLL_TIMEZONE", cls.timezone),
            company_name=os.getenv("COMPANY_NAME", cls.company_name),
        )
