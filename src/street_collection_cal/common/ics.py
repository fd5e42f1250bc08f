from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class IcsEvent:
    date: date
    summary: str
    uid_seed: str
    description: str | None = None
    alarm_at: datetime | None = None


def _format_date(value: date) -> str:
    return value.strftime("%Y%m%d")


def _format_utc(value: datetime) -> str:
    return value.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")


def _format_dtstamp(value: date) -> str:
    return _format_utc(datetime(value.year, value.month, value.day, tzinfo=UTC))


def _uid_from_seed(seed: str) -> str:
    return hashlib.sha1(seed.encode("utf-8")).hexdigest()


def _escape_text(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def reminder_trigger(event_date: date, days_before: int, hour: int, tz_name: str) -> datetime:
    """Local ``hour``:00 on the day ``days_before`` the event, as an aware UTC datetime."""
    local = datetime.combine(
        event_date - timedelta(days=days_before), time(hour=hour), tzinfo=ZoneInfo(tz_name)
    )
    return local.astimezone(UTC)


def build_ics(
    calendar_name: str,
    events: list[IcsEvent],
    prodid: str,
    *,
    alarm_description: str = "Reminder: Trash collection tomorrow",
) -> str:
    lines: list[str] = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"PRODID:{prodid}",
        f"X-WR-CALNAME:{_escape_text(calendar_name)}",
    ]

    for event in sorted(events, key=lambda e: (e.date, e.summary)):
        uid = _uid_from_seed(event.uid_seed)
        start = _format_date(event.date)
        end = _format_date(event.date + timedelta(days=1))
        dtstamp = _format_dtstamp(event.date)

        lines.extend(
            [
                "BEGIN:VEVENT",
                f"UID:{uid}",
                f"DTSTAMP:{dtstamp}",
                f"DTSTART;VALUE=DATE:{start}",
                f"DTEND;VALUE=DATE:{end}",
                f"SUMMARY:{_escape_text(event.summary)}",
            ]
        )
        if event.description:
            lines.append(f"DESCRIPTION:{_escape_text(event.description)}")
        lines.extend(["STATUS:CONFIRMED", "TRANSP:TRANSPARENT"])
        if event.alarm_at is not None:
            lines.extend(
                [
                    "BEGIN:VALARM",
                    "ACTION:DISPLAY",
                    f"TRIGGER;VALUE=DATE-TIME:{_format_utc(event.alarm_at)}",
                    f"DESCRIPTION:{_escape_text(alarm_description)}",
                    "END:VALARM",
                ]
            )
        lines.append("END:VEVENT")

    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"
