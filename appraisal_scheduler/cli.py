"""Command-line interface for the appraisal scheduling engine."""

from __future__ import annotations

import argparse
import json

from appraisal_scheduler.config import load_config
from appraisal_scheduler.dates import local_today, to_calendar_date
from appraisal_scheduler.domain.db import get_session, init_database, reset_database
from appraisal_scheduler.domain.repositories import CalendarRepository, ScheduledTaskRepository
from appraisal_scheduler.engine.orchestrator import initiate_appraisal, load_population
from appraisal_scheduler.io.export_csv import (
    export_eligibility_csv,
    export_schedule_csv,
    summarize_submission,
)
from appraisal_scheduler.io.import_csv import (
    import_calendar_csv,
    import_employees_csv,
    import_group_csv,
    import_templates_csv,
)
from appraisal_scheduler.io.request_file import load_request
from appraisal_scheduler.services.catalog import CalendarPeriodCatalog


def _db_url(args: argparse.Namespace, cfg) -> str:
    return args.db or cfg.db_url


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    cfg = load_config(args.config)
    if args.reset:
        reset_database(_db_url(args, cfg))
    else:
        init_database(_db_url(args, cfg))


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import CSV data into database."""
    cfg = load_config(args.config)
    session = get_session(_db_url(args, cfg))

    try:
        if args.employees:
            import_employees_csv(session, args.employees)

        if args.templates:
            import_templates_csv(session, args.templates)

        if args.calendar:
            if not args.calendar_code:
                raise SystemExit("--calendar-code is required with --calendar")
            calendar_id = import_calendar_csv(session, args.calendar, code=args.calendar_code)
            print(f"[OK] Calendar id: {calendar_id}")

        if args.group:
            if not args.group_name:
                raise SystemExit("--group-name is required with --group")
            group_id = import_group_csv(session, args.group, name=args.group_name, group_id=args.group_id)
            print(f"[OK] Group id: {group_id}")

        session.close()
        print("[OK] CSV import complete")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Import failed: {e}")
        raise


def _cmd_calendars(args: argparse.Namespace) -> None:
    """List frequency calendars."""
    cfg = load_config(args.config)
    session = get_session(_db_url(args, cfg))

    try:
        calendars = CalendarRepository.get_all(session)
        for calendar in calendars:
            print(f"{calendar.id}\t{calendar.code}\t{calendar.description or ''}")
        print(f"[OK] {len(calendars)} calendar(s)")
        session.close()

    except Exception as e:
        session.close()
        print(f"[ERROR] Could not list calendars: {e}")
        raise


def _cmd_periods(args: argparse.Namespace) -> None:
    """List the periods of a calendar."""
    cfg = load_config(args.config)
    session = get_session(_db_url(args, cfg))

    try:
        periods = CalendarPeriodCatalog(session).get_periods(args.calendar)
        for period in periods:
            print(f"{period.id}\t{period.display_name}\t{period.start_date}\t{period.end_date}")
        session.close()

    except Exception as e:
        session.close()
        print(f"[ERROR] Could not list periods: {e}")
        raise


def _cmd_initiate(args: argparse.Namespace) -> None:
    """Finalize an initiation request and (unless --dry-run) store it."""
    cfg = load_config(args.config)
    session = get_session(_db_url(args, cfg))

    try:
        request = load_request(args.request, cfg)
        submission = initiate_appraisal(session, request, cfg, persist=not args.dry_run)

        if args.schedule_out:
            export_schedule_csv(submission, args.schedule_out)
        if args.eligibility_out:
            employees = {e.id: e for e in load_population(session, request.group_id)}
            export_eligibility_csv(submission, args.eligibility_out, employees)
        if args.json:
            print(json.dumps(submission.to_dict(), indent=2))
        else:
            print(summarize_submission(submission))

        session.close()

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Initiation failed: {e}")
        raise


def _cmd_due_tasks(args: argparse.Namespace) -> None:
    """List pending scheduled tasks due on or before a date."""
    cfg = load_config(args.config)
    session = get_session(_db_url(args, cfg))

    try:
        as_of = to_calendar_date(args.as_of) if args.as_of else local_today(cfg.tz)
        tasks = ScheduledTaskRepository.get_due(session, as_of)
        for task in tasks:
            print(f"{task.id}\t{task.initiated_appraisal_id}\t{task.frequency_calendar_detail_id}\t{task.scheduled_date}")
        print(f"[OK] {len(tasks)} task(s) due as of {as_of}")
        session.close()

    except Exception as e:
        session.close()
        print(f"[ERROR] Could not list due tasks: {e}")
        raise


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="appraisal-scheduler",
        description="Appraisal cycle scheduling and eligibility engine",
    )

    # Global options
    parser.add_argument("--db", help="Database URL (default: from config, sqlite:///appraisal.db)")
    parser.add_argument("--config", help="Path to config YAML/JSON")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize database")
    init.add_argument("--reset", action="store_true", help="Drop and recreate all tables (deletes data)")
    init.set_defaults(func=_cmd_init_db)

    imp = sub.add_parser("import-csv", help="Import CSV data into database")
    imp.add_argument("--employees", help="Path to employees CSV")
    imp.add_argument("--templates", help="Path to questionnaire templates CSV")
    imp.add_argument("--calendar", help="Path to calendar periods CSV")
    imp.add_argument("--calendar-code", help="Code of the calendar being imported")
    imp.add_argument("--group", help="Path to group members CSV")
    imp.add_argument("--group-name", help="Name of the group being imported")
    imp.add_argument("--group-id", help="Optional id for the imported group")
    imp.set_defaults(func=_cmd_import_csv)

    cal = sub.add_parser("calendars", help="List frequency calendars")
    cal.set_defaults(func=_cmd_calendars)

    per = sub.add_parser("periods", help="List the periods of a calendar")
    per.add_argument("--calendar", required=True, help="Calendar id")
    per.set_defaults(func=_cmd_periods)

    ini = sub.add_parser("initiate", help="Initiate an appraisal cycle from a request file")
    ini.add_argument("--request", required=True, help="Path to request YAML/JSON")
    ini.add_argument("--dry-run", action="store_true", help="Validate and compute only, do not store")
    ini.add_argument("--schedule-out", help="Optional: export schedule to CSV")
    ini.add_argument("--eligibility-out", help="Optional: export eligibility to CSV")
    ini.add_argument("--json", action="store_true", help="Print the submission as JSON")
    ini.set_defaults(func=_cmd_initiate)

    due = sub.add_parser("due-tasks", help="List scheduled tasks due for initiation")
    due.add_argument("--as-of", help="Date (YYYY-MM-DD), default today")
    due.set_defaults(func=_cmd_due_tasks)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
