"""CLI entry point for the Olympics athlete status tracker."""

from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Any

from config import settings
from config.countries import select_countries
from config.errors import ConfigurationError
from core.http_client import HttpError
from parsing.errors import ParsingError
from services import pipeline
from utils.date_utils import parse_timestamp

_log = logging.getLogger(__name__)


def _print(result: dict[str, Any]) -> None:
    print(json.dumps(result, indent=2, ensure_ascii=False))


def cmd_reconcile(args: argparse.Namespace) -> None:
    now = None
    if args.now:
        now = parse_timestamp(args.now)
        if now is None:
            raise SystemExit(f"--now is not an ISO-8601 timestamp: {args.now}")
    result = pipeline.run_reconcile(
        data_dir=args.data_dir,
        out_dir=args.out,
        countries=select_countries(args.country),
        now=now,
    )
    if args.json:
        _print(result)
        return
    for row in result["summary"]:
        print(
            f"{row['country'].replace('_', ' ')}: "
            f"{row['active_athletes_count']} active, {row['inactive_athletes_count']} inactive"
        )
    print(f"Results written to {result['output_dir']}")


def cmd_fetch(args: argparse.Namespace) -> None:
    _print(pipeline.fetch_feeds(args.data_dir, args.schedule_url, args.entries_url))


def cmd_clean(args: argparse.Namespace) -> None:
    _print({"cleaned_schedule": pipeline.write_cleaned_schedule(args.data_dir)})


def cmd_calendars(args: argparse.Namespace) -> None:
    _print(pipeline.run_calendars(out_dir=args.out, countries=select_countries(args.country)))


def cmd_export_db(args: argparse.Namespace) -> None:
    _print(pipeline.run_export_db(args.db, data_dir=args.data_dir))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="olympics-tracker")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    reconcile = sub.add_parser("reconcile", help="Derive active / inactive athletes per country")
    reconcile.add_argument("--data-dir", required=False, help=f"Feed directory (default {settings.DATA_DIR})")
    reconcile.add_argument("--out", required=False, help="Output directory for result files")
    reconcile.add_argument("--country", action="append", help="Country name or NOC code (repeatable)")
    reconcile.add_argument("--now", required=False, help="Reference time (ISO-8601) instead of the clock")
    reconcile.add_argument("--json", action="store_true", help="Print the run summary as JSON")
    reconcile.set_defaults(func=cmd_reconcile)

    fetch = sub.add_parser("fetch", help="Download the schedule and entries feeds")
    fetch.add_argument("--data-dir", required=False, help="Feed directory")
    fetch.add_argument("--schedule-url", required=False, help="Schedule feed URL (default $OLYMPICS_SCHEDULE_URL)")
    fetch.add_argument("--entries-url", required=False, help="Entries feed URL (default $OLYMPICS_ENTRIES_URL)")
    fetch.set_defaults(func=cmd_fetch)

    clean = sub.add_parser("clean", help="Write cleaned_schedule.json from the raw schedule feed")
    clean.add_argument("--data-dir", required=False, help="Feed directory")
    clean.set_defaults(func=cmd_clean)

    calendars = sub.add_parser("calendars", help="Download and merge per-country ICS calendars")
    calendars.add_argument("--out", required=False, help="Directory for ICS files and merged JSON")
    calendars.add_argument("--country", action="append", help="Country name or NOC code (repeatable)")
    calendars.set_defaults(func=cmd_calendars)

    export_db = sub.add_parser("export-db", help="Load the schedule into a SQLite database")
    export_db.add_argument("--db", required=True, help="SQLite database path")
    export_db.add_argument("--data-dir", required=False, help="Feed directory")
    export_db.set_defaults(func=cmd_export_db)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except ConfigurationError as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        return 2
    except (ParsingError, HttpError, OSError) as e:
        _log.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
