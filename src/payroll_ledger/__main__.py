"""Command line entry point.

Usage:
    python -m payroll_ledger serve [--host H] [--port P] [--reload]
    python -m payroll_ledger export [--output salary_data.csv]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date

import uvicorn

from payroll_ledger.config import Settings, get_settings
from payroll_ledger.exceptions import LedgerError
from payroll_ledger.services import exporter
from payroll_ledger.services.ledger_service import LedgerService
from payroll_ledger.store import open_store

logger = logging.getLogger("payroll_ledger")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m payroll_ledger",
        description="Payroll ledger for hourly and piece-rate work",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP API (default)")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)
    serve.add_argument("--reload", action="store_true", default=settings.debug)

    export = subparsers.add_parser("export", help="Write all work records to a CSV file")
    export.add_argument("--output", help="Target file (default: salary_data_<today>.csv)")

    return parser


async def export_records(output: str | None) -> str:
    """Load the configured store and write its records as CSV."""
    ledger = LedgerService(await open_store())
    try:
        await ledger.load()
        path = exporter.write_csv(
            output or exporter.export_filename(date.today()),
            ledger.records,
            ledger.employees,
        )
    finally:
        await ledger.store.close()

    logger.info("Exported %d record(s) to %s", len(ledger.records), path)
    return str(path)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = build_parser(settings).parse_args(argv)

    if args.command == "export":
        try:
            print(asyncio.run(export_records(args.output)))
        except LedgerError as exc:
            logger.error("Export failed: %s", exc.message)
            return 1
        return 0

    uvicorn.run(
        "payroll_ledger.api.app:app",
        host=getattr(args, "host", settings.host),
        port=getattr(args, "port", settings.port),
        reload=getattr(args, "reload", settings.debug),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
