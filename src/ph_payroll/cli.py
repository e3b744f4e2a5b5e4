"""Payroll Command Line Interface.

Provides operational tools for:
- Schema creation and default rule seeding
- Payroll and payslip generation, and payroll regeneration
- Period summaries and cleanup
- Running the HTTP API

Usage:
    python -m ph_payroll init-db --seed-rules
    python -m ph_payroll generate --pay-period-id 3 --with-details
    python -m ph_payroll regenerate --pay-period-id 3
    python -m ph_payroll payslips --pay-period-id 3
    python -m ph_payroll print-payslip --payslip-id 12
    python -m ph_payroll summary --pay-period-id 3
    python -m ph_payroll delete --pay-period-id 3
    python -m ph_payroll serve
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Callable, Coroutine

from ph_payroll.config import Settings
from ph_payroll.database import Database
from ph_payroll.logging_config import configure_logging
from ph_payroll.rules import seed_default_deduction_rules
from ph_payroll.services import GenerationResult, PayrollGenerator, PayslipGenerator


class PayrollCli:
    """Payroll Command Line Interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m ph_payroll",
            description="Payroll generation tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        init_db = subparsers.add_parser("init-db", help="Create tables that do not exist")
        init_db.add_argument(
            "--seed-rules",
            action="store_true",
            help="Also insert the default SSS, PhilHealth, Pag-IBIG and tax rules",
        )

        subparsers.add_parser("seed-rules", help="Insert the default deduction rules")

        generate = subparsers.add_parser("generate", help="Generate payroll for a pay period")
        generate.add_argument("--pay-period-id", type=int, required=True)
        generate.add_argument(
            "--with-details",
            action="store_true",
            help="Also write attendance, benefit, leave and overtime detail rows",
        )

        regenerate = subparsers.add_parser(
            "regenerate", help="Delete a pay period's payroll and generate it again"
        )
        regenerate.add_argument("--pay-period-id", type=int, required=True)
        regenerate.add_argument(
            "--with-details",
            action="store_true",
            help="Also write attendance, benefit, leave and overtime detail rows",
        )

        payslips = subparsers.add_parser("payslips", help="Generate payslips for a pay period")
        payslips.add_argument("--pay-period-id", type=int, required=True)

        print_payslip = subparsers.add_parser("print-payslip", help="Print a stored payslip")
        print_payslip.add_argument("--payslip-id", type=int, required=True)

        summary = subparsers.add_parser("summary", help="Show payroll totals for a pay period")
        summary.add_argument("--pay-period-id", type=int, required=True)

        delete = subparsers.add_parser("delete", help="Delete payroll for a pay period")
        delete.add_argument("--pay-period-id", type=int, required=True)

        serve = subparsers.add_parser("serve", help="Run the HTTP API")
        serve.add_argument("--host", type=str, default=None)
        serve.add_argument("--port", type=int, default=None)

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        if self.settings is None:
            self.settings = Settings.from_env()
        configure_logging(self.settings.log_level)

        if parsed.command == "serve":
            return self._cmd_serve(parsed)

        # Dispatch to command handler
        handlers: dict[str, Callable[[Database, argparse.Namespace], Coroutine[Any, Any, int]]] = {
            "init-db": self._cmd_init_db,
            "seed-rules": self._cmd_seed_rules,
            "generate": self._cmd_generate,
            "regenerate": self._cmd_regenerate,
            "payslips": self._cmd_payslips,
            "print-payslip": self._cmd_print_payslip,
            "summary": self._cmd_summary,
            "delete": self._cmd_delete,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        return asyncio.run(self._with_database(handler, parsed))

    async def _with_database(
        self,
        handler: Callable[[Database, argparse.Namespace], Coroutine[Any, Any, int]],
        parsed: argparse.Namespace,
    ) -> int:
        database = Database(self.settings)
        try:
            return await handler(database, parsed)
        finally:
            await database.dispose()

    async def _cmd_init_db(self, database: Database, args: argparse.Namespace) -> int:
        await database.create_all()
        print("Tables created")
        if args.seed_rules:
            return await self._cmd_seed_rules(database, args)
        return 0

    async def _cmd_seed_rules(self, database: Database, args: argparse.Namespace) -> int:
        async with database.session() as session:
            inserted = await seed_default_deduction_rules(session)
        print(f"Inserted {inserted} deduction rules")
        return 0

    async def _cmd_generate(self, database: Database, args: argparse.Namespace) -> int:
        generator = PayrollGenerator(database.session_factory, self.settings)
        result = await generator.run(args.pay_period_id, with_details=args.with_details)
        return self._report(result)

    async def _cmd_regenerate(self, database: Database, args: argparse.Namespace) -> int:
        generator = PayrollGenerator(database.session_factory, self.settings)
        result = await generator.regenerate_payroll(
            args.pay_period_id, with_details=args.with_details
        )
        return self._report(result)

    def _report(self, result: GenerationResult) -> int:
        """Print a generation result as JSON; exit code 2 when any employee failed."""
        print(
            json.dumps(
                {
                    "pay_period_id": result.pay_period_id,
                    "generated": result.generated,
                    "skipped": result.skipped,
                    "failed": result.failed,
                },
                indent=2,
            )
        )
        return 0 if not result.failed else 2

    async def _cmd_payslips(self, database: Database, args: argparse.Namespace) -> int:
        generator = PayslipGenerator(database.session_factory, self.settings)
        created = await generator.generate_all_payslips(args.pay_period_id)
        print(f"Created {created} payslips for pay period {args.pay_period_id}")
        return 0

    async def _cmd_print_payslip(self, database: Database, args: argparse.Namespace) -> int:
        generator = PayslipGenerator(database.session_factory, self.settings)
        print(await generator.print_payslip(args.payslip_id), end="")
        return 0

    async def _cmd_summary(self, database: Database, args: argparse.Namespace) -> int:
        generator = PayrollGenerator(database.session_factory, self.settings)
        summary = await generator.get_payroll_summary(args.pay_period_id)
        print(
            json.dumps(
                {
                    "pay_period_id": summary.pay_period_id,
                    "employee_count": summary.employee_count,
                    "total_gross_income": str(summary.total_gross_income),
                    "total_net_salary": str(summary.total_net_salary),
                    "total_deductions": str(summary.total_deductions),
                    "total_benefits": str(summary.total_benefits),
                },
                indent=2,
            )
        )
        return 0

    async def _cmd_delete(self, database: Database, args: argparse.Namespace) -> int:
        generator = PayrollGenerator(database.session_factory, self.settings)
        deleted = await generator.delete_payroll_by_period(args.pay_period_id)
        print(f"Deleted {deleted} payroll rows for pay period {args.pay_period_id}")
        return 0

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        import uvicorn

        from ph_payroll.api.app import create_app

        settings = self.settings
        uvicorn.run(
            create_app(settings),
            host=args.host or settings.host,
            port=args.port or settings.port,
        )
        return 0


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
