from __future__ import annotations

import argparse
import logging
from pathlib import Path

from street_collection_cal.common.holidays import build_holiday_table
from street_collection_cal.common.street_schedule import StreetEntry, load_street_schedule
from street_collection_cal.config.loader import TownFiles, load_town
from street_collection_cal.config.schema import TownConfig
from street_collection_cal.service.export import event_description, render_street_ics
from street_collection_cal.service.schedule import CollectionEvent, generate_events, local_today

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Street collection calendar tools")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("events", "Print collection days for a street"),
        ("ics", "Write an ICS calendar for a street"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--town", required=True, help="Path to town.yaml")
        sub.add_argument("--street", required=True, help="Street name as listed in the schedule")
        sub.add_argument("--year", type=int, help="Calendar year (default: current)")
        sub.add_argument("--from-month", type=int, help="First month, 1-12 (default: current)")
        sub.add_argument("--to-month", type=int, default=12, help="Last month, 1-12")
        if name == "ics":
            sub.add_argument("--out", required=True, help="Output .ics path")
            sub.add_argument("--reminder-days", type=int, help="Days before pickup to remind")
            sub.add_argument("--reminder-hour", type=int, help="Local hour of the reminder")

    validate = subparsers.add_parser("validate", help="Validate town config and street schedule")
    validate.add_argument("--town", required=True, help="Path to town.yaml")
    return parser.parse_args(argv)


def _load(town: str) -> TownFiles:
    return load_town(Path(town))


def _street_events(
    args: argparse.Namespace,
) -> tuple[TownConfig, StreetEntry, list[CollectionEvent]]:
    files = _load(args.town)
    config = files.config
    entry = load_street_schedule(files.street_schedule_path).lookup(args.street)
    if entry is None:
        raise SystemExit(f"Street not found: {args.street}")

    today = local_today(config.timezone)
    year = args.year if args.year is not None else today.year
    if args.from_month is not None:
        from_month = args.from_month
    else:
        from_month = today.month if year == today.year else 1
    events = generate_events(
        entry.pickup_weekday,
        year,
        from_month,
        args.to_month,
        holidays=build_holiday_table(config.holidays, year),
    )
    logger.info("%s (%s): %d collection days", entry.street, entry.day, len(events))
    return config, entry, events


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(message)s")

    try:
        if args.command == "validate":
            return _validate(args)
        return _run_street_command(args)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc


def _validate(args: argparse.Namespace) -> int:
    files = _load(args.town)
    config = files.config
    schedule = load_street_schedule(files.street_schedule_path)
    if not schedule.entries:
        raise SystemExit(f"Street schedule has no rows: {files.street_schedule_path}")
    year = local_today(config.timezone).year
    holidays = build_holiday_table(config.holidays, year)
    print(
        f"{config.town_name}: {len(schedule.streets())} streets, "
        f"{len(holidays.holidays)} holidays in {year} OK"
    )
    return 0


def _run_street_command(args: argparse.Namespace) -> int:
    config, entry, events = _street_events(args)

    if args.command == "events":
        for event in events:
            kind = "trash+recycling" if event.is_recycling else "trash"
            note = f"  ({event_description(event)})" if event.is_adjusted else ""
            print(f"{event.date.isoformat()} {event.date:%a} {kind}{note}")
        return 0

    if args.command == "ics":
        ics_text = render_street_ics(
            events,
            config=config,
            street=entry,
            reminder_days=args.reminder_days,
            reminder_hour=args.reminder_hour,
        )
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(ics_text, encoding="utf-8", newline="")
        logger.info("Wrote %d events to %s", len(events), out)
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
