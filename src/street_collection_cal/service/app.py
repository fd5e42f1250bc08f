from __future__ import annotations

import logging
from typing import Any

from flask import Flask, current_app, jsonify, request

from street_collection_cal.common.street_schedule import StreetEntry
from street_collection_cal.config.loader import load_town_from_env
from street_collection_cal.service.export import event_to_dict, grid_to_dict, render_street_ics
from street_collection_cal.service.schedule import (
    build_month_grid,
    generate_events,
    local_today,
    month_holidays,
)
from street_collection_cal.service.town_data import TownData

logger = logging.getLogger(__name__)


class StreetRequestError(Exception):
    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status = status


def create_app() -> Flask:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    town = TownData(load_town_from_env())
    app = Flask(__name__)
    app.config["TOWN_DATA"] = town

    @app.errorhandler(StreetRequestError)
    def _lookup_failed(exc: StreetRequestError) -> Any:
        return jsonify({"error": str(exc)}), exc.status

    @app.errorhandler(ValueError)
    def _bad_request(exc: ValueError) -> Any:
        return jsonify({"error": str(exc)}), 400

    @app.get("/healthz")
    def healthz() -> Any:
        return jsonify({"ok": True})

    @app.get("/streets")
    def streets() -> Any:
        schedule = _town().schedule
        full = request.args.get("full", "").lower() in {"1", "true", "yes"}
        if full:
            return jsonify(schedule.streets())
        return jsonify({"count": len(schedule.streets())})

    @app.get("/lookup")
    def lookup() -> Any:
        entry = _street_from_request()
        return jsonify(_street_to_dict(entry))

    @app.get("/calendar")
    def month_calendar() -> Any:
        town = _town()
        entry = _street_from_request()
        today = local_today(town.config.timezone)
        year = _int_arg("year", today.year, 1900, 2100)
        month = _int_arg("month", today.month, 1, 12)
        table = town.holidays_for(year)
        grid = build_month_grid(year, month, entry.pickup_weekday, holidays=table)
        return jsonify(
            {
                **_street_to_dict(entry),
                "calendar": grid_to_dict(grid),
                "holidays": [
                    {"name": h.name, "date": f"{year:04d}-{h.month:02d}-{h.day:02d}"}
                    for h in month_holidays(table, month)
                ],
            }
        )

    @app.get("/events")
    def events() -> Any:
        town = _town()
        entry = _street_from_request()
        year, from_month, to_month = _range_args()
        result = generate_events(
            entry.pickup_weekday, year, from_month, to_month, holidays=town.holidays_for(year)
        )
        return jsonify(
            {
                **_street_to_dict(entry),
                "year": year,
                "from_month": from_month,
                "to_month": to_month,
                "events": [event_to_dict(e) for e in result],
            }
        )

    @app.get("/street.ics")
    def street_ics() -> Any:
        town = _town()
        entry = _street_from_request()
        year, from_month, to_month = _range_args()
        reminder_days = _int_arg("reminder_days", town.config.ics.reminder_days, 0, 7)
        reminder_hour = _int_arg("reminder_hour", town.config.ics.reminder_hour, 0, 23)
        result = generate_events(
            entry.pickup_weekday, year, from_month, to_month, holidays=town.holidays_for(year)
        )
        ics_text = render_street_ics(
            result,
            config=town.config,
            street=entry,
            reminder_days=reminder_days,
            reminder_hour=reminder_hour,
        )
        return app.response_class(ics_text, mimetype="text/calendar")

    logger.info(
        "Serving %s (%s): %d streets",
        town.config.town_name,
        town.config.town_id,
        len(town.schedule.entries),
    )
    return app


def _street_from_request() -> StreetEntry:
    street = request.args.get("street", "")
    if not street.strip():
        raise StreetRequestError("street is required", 400)
    entry = _town().lookup(street)
    if entry is None:
        raise StreetRequestError("Street not found", 404)
    return entry


def _street_to_dict(entry: StreetEntry) -> dict[str, Any]:
    return {"street": entry.street, "day": entry.day, "weekday": entry.pickup_weekday}


def _int_arg(name: str, default: int, low: int, high: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}")
    return value


def _range_args() -> tuple[int, int, int]:
    today = local_today(_town().config.timezone)
    year = _int_arg("year", today.year, 1900, 2100)
    default_from = today.month if year == today.year else 1
    from_month = _int_arg("from_month", default_from, 1, 12)
    to_month = _int_arg("to_month", 12, 1, 12)
    if from_month > to_month:
        raise ValueError("from_month cannot be after to_month")
    return year, from_month, to_month


def _town() -> TownData:
    return current_app.config["TOWN_DATA"]
