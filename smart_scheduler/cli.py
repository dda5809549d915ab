#!/usr/bin/env python3
"""
Smart Scheduler Command Line Interface

Main entry point for the `smart-scheduler` command. Every command prints a
JSON result; failures exit with status 1.

Usage:
    smart-scheduler add-participant --id alice --name "Alice"
    smart-scheduler add-event --participant alice --title "Standup" \\
        --start 2024-09-01T10:00:00Z --end 2024-09-01T11:00:00Z
    smart-scheduler schedule --participants alice,bob --duration 60 \\
        --start 2024-09-01T09:00:00Z --end 2024-09-01T17:00:00Z
    smart-scheduler calendar --participant alice \\
        --start 2024-09-01T00:00:00Z --end 2024-09-01T23:59:59Z
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from smart_scheduler import __version__
from smart_scheduler.calendar.models import parse_instant
from smart_scheduler.calendar.store import SQLiteCalendarStore
from smart_scheduler.config_models import SchedulerConfig, load_scheduler_config
from smart_scheduler.errors import InvalidRequestError, SchedulingError
from smart_scheduler.logging_config import setup_logging
from smart_scheduler.scheduling.service import MeetingScheduler


def _load_config(args) -> SchedulerConfig:
    config = load_scheduler_config(Path(args.config) if args.config else None)
    if args.db:
        config.storage.db_path = args.db
    return config


def _open_store(config: SchedulerConfig) -> SQLiteCalendarStore:
    return SQLiteCalendarStore(
        config.storage.resolved_db_path(),
        timeout=config.storage.timeout_seconds,
    )


def cmd_add_participant(args, config: SchedulerConfig) -> dict[str, Any]:
    """Create or rename a participant."""
    store = _open_store(config)
    participant = store.add_participant(args.id, args.name or "")
    return {"success": True, "data": participant.to_dict()}


def cmd_add_event(args, config: SchedulerConfig) -> dict[str, Any]:
    """Record an existing busy block on a participant's calendar."""
    try:
        start = parse_instant(args.start)
        end = parse_instant(args.end)
    except ValueError as e:
        raise InvalidRequestError(f"Invalid timestamp: {e}") from e
    if start >= end:
        raise InvalidRequestError("start must be before end")

    store = _open_store(config)
    if args.participant not in store.participants_exist([args.participant]):
        store.add_participant(args.participant)
    entry = store.create_entry(args.title, start, end, args.participant)
    return {"success": True, "data": entry.to_dict()}


def cmd_schedule(args, config: SchedulerConfig) -> dict[str, Any]:
    """Find the best slot for all participants and book it."""
    payload = {
        "participant_ids": [p for p in args.participants.split(",") if p.strip()],
        "duration_minutes": args.duration,
        "time_range": {"start": args.start, "end": args.end},
    }
    with MeetingScheduler(_open_store(config), config) as scheduler:
        return scheduler.submit_schedule(payload).result()


def cmd_calendar(args, config: SchedulerConfig) -> dict[str, Any]:
    """List a participant's entries inside a window."""
    payload = {"participant_id": args.participant, "start": args.start, "end": args.end}
    with MeetingScheduler(_open_store(config), config) as scheduler:
        return scheduler.submit_calendar(payload).result()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smart-scheduler",
        description="Smart Scheduler - find and book a common meeting slot",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )
    parser.add_argument("--db", default=None, help="SQLite database path (overrides config)")
    parser.add_argument("--config", default=None, help="YAML config path (default: args/scheduler.yaml)")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # add-participant
    participant_parser = subparsers.add_parser(
        "add-participant", help="Create or rename a participant"
    )
    participant_parser.add_argument("--id", required=True, help="Participant ID")
    participant_parser.add_argument("--name", default="", help="Display name")
    participant_parser.set_defaults(func=cmd_add_participant)

    # add-event
    event_parser = subparsers.add_parser(
        "add-event", help="Add an existing calendar entry"
    )
    event_parser.add_argument("--participant", required=True, help="Owner participant ID")
    event_parser.add_argument("--title", required=True, help="Entry title")
    event_parser.add_argument("--start", required=True, help="Start (ISO-8601 with offset)")
    event_parser.add_argument("--end", required=True, help="End (ISO-8601 with offset)")
    event_parser.set_defaults(func=cmd_add_event)

    # schedule
    schedule_parser = subparsers.add_parser(
        "schedule", help="Find the best common slot and book it"
    )
    schedule_parser.add_argument("--participants", required=True, help="Participant IDs (comma-separated)")
    schedule_parser.add_argument("--duration", type=int, required=True, help="Duration in minutes")
    schedule_parser.add_argument("--start", required=True, help="Window start (ISO-8601 with offset)")
    schedule_parser.add_argument("--end", required=True, help="Window end (ISO-8601 with offset)")
    schedule_parser.set_defaults(func=cmd_schedule)

    # calendar
    calendar_parser = subparsers.add_parser(
        "calendar", help="Show a participant's entries in a window"
    )
    calendar_parser.add_argument("--participant", required=True, help="Participant ID")
    calendar_parser.add_argument("--start", required=True, help="Window start (ISO-8601 with offset)")
    calendar_parser.add_argument("--end", required=True, help="Window end (ISO-8601 with offset)")
    calendar_parser.set_defaults(func=cmd_calendar)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"smart-scheduler {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(level=args.log_level)
    config = _load_config(args)

    try:
        result = args.func(args, config)
    except SchedulingError as e:
        result = {"success": False, "error": str(e), "error_type": e.error_type}

    print(json.dumps(result, indent=2, default=str))
    return 0 if result.get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
