from __future__ import annotations

import logging
import time

from street_collection_cal.common.holidays import HolidayTable, build_holiday_table
from street_collection_cal.common.street_schedule import (
    StreetEntry,
    StreetSchedule,
    load_street_schedule,
)
from street_collection_cal.config.loader import TownFiles

logger = logging.getLogger(__name__)


class TownData:
    """Read-only town data shared by requests.

    The street table is re-read when the CSV's mtime changes, checked at most
    once per ``reload_interval_seconds``. Holiday tables are built once per
    requested year.
    """

    def __init__(self, files: TownFiles) -> None:
        self.config = files.config
        self.street_schedule_path = files.street_schedule_path
        self._schedule: StreetSchedule | None = None
        self._schedule_mtime: float | None = None
        self._next_check = 0.0
        self._holiday_tables: dict[int, HolidayTable] = {}

    @property
    def schedule(self) -> StreetSchedule:
        now = time.monotonic()
        if self._schedule is None or now >= self._next_check:
            self._next_check = now + self.config.service.reload_interval_seconds
            mtime = self.street_schedule_path.stat().st_mtime
            if self._schedule is None or mtime != self._schedule_mtime:
                self._schedule = load_street_schedule(self.street_schedule_path)
                self._schedule_mtime = mtime
                logger.info(
                    "Loaded %d streets for %s from %s",
                    len(self._schedule.entries),
                    self.config.town_id,
                    self.street_schedule_path,
                )
        return self._schedule

    def lookup(self, street: str) -> StreetEntry | None:
        return self.schedule.lookup(street)

    def holidays_for(self, year: int) -> HolidayTable:
        table = self._holiday_tables.get(year)
        if table is None:
            table = build_holiday_table(self.config.holidays, year)
            self._holiday_tables[year] = table
            logger.info("Built %s holiday table: %d holidays", year, len(table.holidays))
        return table
