"""Campus payroll command line interface.

Provides operational tools for:
- Schema creation
- Monthly payroll generation
- Record listing and month summaries
- Approval and payment marking
- Running the API server

Usage:
    campus-payroll init-db
    campus-payroll generate 2024-06
    campus-payroll list 2024-06 --status draft
    campus-payroll approve <record-id> --by registrar
    campus-payroll mark-paid <record-id>
    campus-payroll serve --port 8000
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import Callable
from uuid import UUID

import uvicorn
from sqlalchemy.ext.asyncio import AsyncSession

from campus_payroll.calculators.types import PayrollValidationError
from campus_payroll.config import configure_logging, get_settings
from campus_payroll.database import create_engine, create_schema, create_session_factory
from campus_payroll.models import PayrollRecord
from campus_payroll.services import (
    EmployeeNotFoundError,
    InvalidTransitionError,
    PayrollLifecycleManager,
    PayrollRecordNotFoundError,
    PayrollStatus,
)

DOMAIN_ERRORS = (
    PayrollValidationError,
    InvalidTransitionError,
    PayrollRecordNotFoundError,
    EmployeeNotFoundError,
)


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    return UUID(s)


@asynccontextmanager
async def session_scope(database_url: str | None = None) -> AsyncIterator[AsyncSession]:
    """Session on a dedicated engine; commits on success, rolls back on error."""
    engine = create_engine(database_url)
    factory = create_session_factory(engine)
    try:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
    finally:
        await engine.dispose()


def format_record(record: PayrollRecord) -> str:
    return (
        f"  {record.employee_id:<16} {record.status:<9} "
        f"present {record.present_days:>2}/{record.working_days:<2} "
        f"gross {record.gross_salary:>12,.2f}  total {record.total_salary:>12,.2f}  "
        f"{record.payroll_record_id}"
    )


class PayrollCli:
    """Campus payroll command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="campus-payroll",
            description="Attendance-based payroll operations",
        )
        parser.add_argument(
            "--database-url",
            type=str,
            help="Database URL (default: $DATABASE_URL)",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            help="Log level (default: $LOG_LEVEL)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # init-db command
        subparsers.add_parser("init-db", help="Create database tables")

        # generate command
        generate = subparsers.add_parser(
            "generate",
            help="Generate payroll records for all active employees",
        )
        generate.add_argument("month", type=str, help="Payroll month (YYYY-MM)")
        generate.add_argument(
            "--employee-id",
            type=str,
            help="Regenerate a single employee only",
        )

        # list command
        list_cmd = subparsers.add_parser("list", help="List a month's payroll records")
        list_cmd.add_argument("month", type=str, help="Payroll month (YYYY-MM)")
        list_cmd.add_argument(
            "--status",
            type=str,
            choices=[s.value for s in PayrollStatus],
            help="Only records in this status",
        )

        # summary command
        summary = subparsers.add_parser(
            "summary",
            help="Status counts and payout totals for a month",
        )
        summary.add_argument("month", type=str, help="Payroll month (YYYY-MM)")

        # approve command
        approve = subparsers.add_parser("approve", help="Approve a draft record")
        approve.add_argument("record_id", type=parse_uuid, help="Payroll record ID")
        approve.add_argument(
            "--by",
            dest="approved_by",
            type=str,
            required=True,
            help="Approver identity",
        )

        # mark-paid command
        paid = subparsers.add_parser("mark-paid", help="Mark an approved record paid")
        paid.add_argument("record_id", type=parse_uuid, help="Payroll record ID")
        paid.add_argument("--actor", type=str, help="Who recorded the payment")

        # serve command
        serve = subparsers.add_parser("serve", help="Run the HTTP API")
        serve.add_argument("--host", type=str, help="Bind host (default: $HOST)")
        serve.add_argument("--port", type=int, help="Bind port (default: $PORT)")
        serve.add_argument("--reload", action="store_true", help="Auto-reload on changes")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        configure_logging(parsed.log_level)

        # Dispatch to command handler
        handlers: dict[str, Callable[[argparse.Namespace], Awaitable[int]]] = {
            "init-db": self._cmd_init_db,
            "generate": self._cmd_generate,
            "list": self._cmd_list,
            "summary": self._cmd_summary,
            "approve": self._cmd_approve,
            "mark-paid": self._cmd_mark_paid,
        }

        if parsed.command == "serve":
            return self._cmd_serve(parsed)

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return asyncio.run(handler(parsed))
        except DOMAIN_ERRORS as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    async def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create all tables."""
        engine = create_engine(args.database_url)
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()
        print("Schema created.")
        return 0

    async def _cmd_generate(self, args: argparse.Namespace) -> int:
        """Generate payroll for a month."""
        async with session_scope(args.database_url) as session:
            manager = PayrollLifecycleManager(session)

            if args.employee_id:
                record = await manager.generate_for_employee(args.employee_id, args.month)
                print(f"Generated payroll for {record.employee_id} in {record.month}:")
                print(format_record(record))
                return 0

            result = await manager.generate_monthly_payroll(args.month)

        print(f"Payroll for {result.month}: {len(result.records)} generated, "
              f"{len(result.failures)} failed")
        for record in result.records:
            print(format_record(record))
        for failure in result.failures:
            print(
                f"  FAILED {failure.employee_id}: {failure.error_type}: {failure.message}",
                file=sys.stderr,
            )
        return 0 if result.success else 1

    async def _cmd_list(self, args: argparse.Namespace) -> int:
        """List a month's records."""
        async with session_scope(args.database_url) as session:
            records = await PayrollLifecycleManager(session).list_month(args.month, args.status)

        print(f"Payroll records for {args.month}: {len(records)}")
        for record in records:
            print(format_record(record))
        return 0

    async def _cmd_summary(self, args: argparse.Namespace) -> int:
        """Print dashboard counters."""
        async with session_scope(args.database_url) as session:
            summary = await PayrollLifecycleManager(session).summarize_month(args.month)

        print(f"Payroll summary for {summary.month}")
        for status, count in summary.counts.items():
            print(f"  {status:<9} {count:>5}")
        print(f"\n  Total payout: {summary.total_payout:>15,.2f}")
        print(f"  Paid:         {summary.paid_total:>15,.2f}")
        return 0

    async def _cmd_approve(self, args: argparse.Namespace) -> int:
        """Approve a draft record."""
        async with session_scope(args.database_url) as session:
            record = await PayrollLifecycleManager(session).approve(
                args.record_id, args.approved_by
            )

        print(f"Approved {record.payroll_record_id} ({record.employee_id}, {record.month})")
        return 0

    async def _cmd_mark_paid(self, args: argparse.Namespace) -> int:
        """Mark an approved record paid."""
        async with session_scope(args.database_url) as session:
            record = await PayrollLifecycleManager(session).mark_paid(
                args.record_id, actor=args.actor
            )

        print(f"Marked {record.payroll_record_id} ({record.employee_id}, {record.month}) paid")
        return 0

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        """Run the API with uvicorn."""
        settings = get_settings()
        uvicorn.run(
            "campus_payroll.api.app:app",
            host=args.host or settings.HOST,
            port=args.port or settings.PORT,
            reload=args.reload or settings.DEBUG,
        )
        return 0


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
