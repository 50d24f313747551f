"""Command-line interface for the calendar ledger."""

import argparse
import logging
import sys
from datetime import date

from calendar_ledger.config import get_settings
from calendar_ledger.services import create_store, create_sync_service, persist
from calendar_ledger.store.base import StoreError


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calendar Ledger - Reconcile calendar events into a spreadsheet log"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    parser.add_argument(
        "--workbook",
        help="Path to a local .xlsx ledger (default: Google Sheets from settings)",
    )
    parser.add_argument(
        "--sheet",
        help="Worksheet name, e.g. 2025-08 (default: SHEET_NAME setting)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the changes without writing them",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Refresh command
    subparsers.add_parser(
        "refresh", help="Reconcile every date already in the ledger"
    )

    # Add command
    add_parser = subparsers.add_parser(
        "add", help="Append events for a range of dates"
    )
    add_parser.add_argument(
        "--start",
        type=_parse_date,
        help="First date (default: start of the sheet's period)",
    )
    add_parser.add_argument(
        "--end",
        type=_parse_date,
        help="Last date (default: end of the sheet's period)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    try:
        store = create_store(settings, workbook_path=args.workbook, sheet_name=args.sheet)
        service = create_sync_service(settings, store=store)
    except (ValueError, FileNotFoundError, StoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "refresh":
        result = service.refresh(dry_run=args.dry_run)
    else:
        result = service.add_events(args.start, args.end, dry_run=args.dry_run)

    persist(service, result)

    if not result.success:
        print(f"Error ({result.failure.kind.value}): {result.message}", file=sys.stderr)
        return 1

    print(result.message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
