"""Tests for settings and logging setup."""

import logging
from decimal import Decimal

import pytest

from ph_payroll.config import PayslipSource, Settings
from ph_payroll.logging_config import configure_logging

ENV_VARS = [
    "DATABASE_URL",
    "LOG_LEVEL",
    "OVERTIME_MULTIPLIER",
    "OVERTIME_RANK_AND_FILE_ONLY",
    "PAGIBIG_CAP",
    "PAYSLIP_SOURCE",
    "STANDARD_WORK_DAYS",
    "PAYROLL_TIMEZONE",
    "COMPANY_NAME",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Isolate from the developer's environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.overtime_multiplier == Decimal("1.5")
        assert settings.overtime_rank_and_file_only is False
        assert settings.pagibig_cap == Decimal("100.00")
        assert settings.standard_work_days == 22
        assert settings.payslip_source is PayslipSource.RECOMPUTE
        assert settings.timezone == "Asia/Manila"

    def test_from_env(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("OVERTIME_MULTIPLIER", "1.25")
        clean_env.setenv("OVERTIME_RANK_AND_FILE_ONLY", "true")
        clean_env.setenv("PAYSLIP_SOURCE", "PAYROLL")
        clean_env.setenv("COMPANY_NAME", "Acme")

        settings = Settings.from_env()

        assert settings.database_url == "sqlite+aiosqlite:///./other.db"
        assert settings.log_level == "DEBUG"
        assert settings.overtime_multiplier == Decimal("1.25")
        assert settings.overtime_rank_and_file_only is True
        assert settings.payslip_source is PayslipSource.PAYROLL
        assert settings.company_name == "Acme"

    def test_unknown_payslip_source_rejected(self, clean_env):
        clean_env.setenv("PAYSLIP_SOURCE", "spreadsheet")

        with pytest.raises(ValueError):
            Settings.from_env()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"overtime_multiplier": Decimal("0")},
            {"standard_work_days": 0},
            {"pagibig_cap": Decimal("-1")},
        ],
    )
    def test_validation(self, overrides):
        with pytest.raises(ValueError):
            Settings(**overrides)


class TestLogging:
    def test_single_handler(self):
        logger = configure_logging("DEBUG")
        configure_logging("INFO")

        handlers = [h for h in logger.handlers if h.get_name() == "ph_payroll"]
        assert len(handlers) == 1
        assert logger.level == logging.INFO
