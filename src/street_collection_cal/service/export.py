from __future__ import annotations

from typing import Any

from street_collection_cal.common.ics import IcsEvent, build_ics, reminder_trigger
from street_collection_cal.common.street_schedule import StreetEntry
from street_collection_cal.config.schema import TownConfig
from street_collection_cal.service.schedule import CollectionEvent, MonthGrid


def event_summary(event: CollectionEvent) -> str:
    if event.is_recycling:
        return "Trash & Recycling Collection"
    return "Trash Collection"


def event_description(event: CollectionEvent) -> str:
    if event.is_adjusted:
        return "Collection day adjusted due to holiday"
    if event.is_recycling:
        return "Trash and recycling collection"
    return "Trash collection only"


def reminder_text(days_before: int) -> str:
    if days_before == 0:
        return "Reminder: Trash collection today"
    if days_before == 1:
        return "Reminder: Trash collection tomorrow"
    return f"Reminder: Trash collection in {days_before} days"


def event_to_dict(event: CollectionEvent) -> dict[str, Any]:
    return {
        "date": event.date.isoformat(),
        "is_recycling": event.is_recycling,
        "is_adjusted": event.is_adjusted,
        "summary": event_summary(event),
        "description": event_description(event),
    }


def grid_to_dict(grid: MonthGrid) -> dict[str, Any]:
    return {
        "year": grid.year,
        "month": grid.month,
        "leading_blanks": grid.leading_blanks,
        "days": [
            {
                "date": day.date.isoformat(),
                "is_pickup": day.is_pickup,
                "is_adjusted": day.is_adjusted,
                "is_holiday": day.is_holiday,
                "is_recycling": day.is_recycling,
                "holiday": day.holiday.name if day.holiday else None,
            }
            for day in grid.days
        ],
    }


def events_to_ics(
    events: list[CollectionEvent],
    *,
    config: TownConfig,
    street: StreetEntry,
    reminder_days: int,
    reminder_hour: int,
) -> list[IcsEvent]:
    ics_events: list[IcsEvent] = []
    for event in events:
        uid_seed = f"{config.town_id}|{street.street.lower()}|{event.date.isoformat()}"
        ics_events.append(
            IcsEvent(
                date=event.date,
                summary=event_summary(event),
                uid_seed=uid_seed,
                description=event_description(event),
                alarm_at=reminder_trigger(
                    event.date, reminder_days, reminder_hour, config.timezone
                ),
            )
        )
    return ics_events


def render_street_ics(
    events: list[CollectionEvent],
    *,
    config: TownConfig,
    street: StreetEntry,
    reminder_days: int | None = None,
    reminder_hour: int | None = None,
) -> str:
    if reminder_days is None:
        reminder_days = config.ics.reminder_days
    ics_events = events_to_ics(
        events,
        config=config,
        street=street,
        reminder_days=reminder_days,
        reminder_hour=config.ics.reminder_hour if reminder_hour is None else reminder_hour,
    )
    calendar_name = config.ics.calendar_name_template.format(
        town_name=config.town_name, town_id=config.town_id, street=street.street
    )
    prodid = f"-//street-collection-cal//{config.town_id}//EN"
    return build_ics(
        calendar_name, ics_events, prodid, alarm_description=reminder_text(reminder_days)
    )
