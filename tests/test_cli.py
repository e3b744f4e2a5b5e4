"""Tests for the command line interface."""

import json

import pytest

from ph_payroll.cli import PayrollCli
from ph_payroll.rules import default_deduction_rules


@pytest.fixture
def cli(db_settings) -> PayrollCli:
    return PayrollCli(db_settings)


class TestPayrollCli:
    def test_no_command_prints_help(self, cli: PayrollCli, capsys):
        assert cli.run([]) == 1
        assert "usage:" in capsys.readouterr().out

    def test_init_db_seeds_rules_once(self, cli: PayrollCli, capsys):
        assert cli.run(["init-db", "--seed-rules"]) == 0
        assert cli.run(["seed-rules"]) == 0

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "Tables created",
            f"Inserted {len(default_deduction_rules())} deduction rules",
            "Inserted 0 deduction rules",
        ]

    def test_generate_unknown_period(self, cli: PayrollCli, capsys):
        cli.run(["init-db"])
        capsys.readouterr()

        assert cli.run(["generate", "--pay-period-id", "42"]) == 0

        result = json.loads(capsys.readouterr().out)
        assert result == {"pay_period_id": 42, "generated": [], "skipped": [], "failed": {}}

    def test_regenerate_empty_period(self, cli: PayrollCli, capsys):
        cli.run(["init-db"])
        capsys.readouterr()

        assert cli.run(["regenerate", "--pay-period-id", "42", "--with-details"]) == 0

        result = json.loads(capsys.readouterr().out)
        assert result == {"pay_period_id": 42, "generated": [], "skipped": [], "failed": {}}

    def test_summary_of_empty_period(self, cli: PayrollCli, capsys):
        cli.run(["init-db"])
        capsys.readouterr()

        assert cli.run(["summary", "--pay-period-id", "1"]) == 0

        summary = json.loads(capsys.readouterr().out)
        assert summary["employee_count"] == 0
        assert summary["total_gross_income"] == "0"

    def test_print_missing_payslip(self, cli: PayrollCli, capsys):
        cli.run(["init-db"])
        capsys.readouterr()

        assert cli.run(["print-payslip", "--payslip-id", "5"]) == 0
        assert capsys.readouterr().out == "Payslip 5 not found.\n"

    @pytest.mark.parametrize("command", ["generate", "regenerate"])
    def test_pay_period_id_required(self, cli: PayrollCli, command: str):
        with pytest.raises(SystemExit):
            cli.run([command])
