from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from pydantic import BaseModel, field_validator, model_validator

WEEKDAY_NAMES = {
    "monday": calendar.MONDAY,
    "tuesday": calendar.TUESDAY,
    "wednesday": calendar.WEDNESDAY,
    "thursday": calendar.THURSDAY,
    "friday": calendar.FRIDAY,
    "saturday": calendar.SATURDAY,
    "sunday": calendar.SUNDAY,
}


# Week math steps one week into the neighbouring years.
MIN_YEAR = 2
MAX_YEAR = 9998


class InvalidInputError(ValueError):
    """Raised when the schedule engine is handed out-of-range input."""


@dataclass(frozen=True)
class Holiday:
    name: str
    month: int
    day: int


@dataclass(frozen=True)
class HolidayTable:
    """Concrete holiday dates for a single calendar year.

    Dates outside ``year`` never match, so a table built for 2025 says
    nothing about December 2024 even when the month and day line up.
    """

    year: int
    holidays: tuple[Holiday, ...] = ()
    _by_date: dict[tuple[int, int], Holiday] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise InvalidInputError(f"year out of range: {self.year}")
        holidays = tuple(self.holidays)
        object.__setattr__(self, "holidays", holidays)
        for holiday in holidays:
            try:
                date(self.year, holiday.month, holiday.day)
            except ValueError as exc:
                raise InvalidInputError(
                    f"{holiday.name}: no such date {self.year}-{holiday.month}-{holiday.day}"
                ) from exc
            self._by_date.setdefault((holiday.month, holiday.day), holiday)

    def get(self, some_day: date) -> Holiday | None:
        if some_day.year != self.year:
            return None
        return self._by_date.get((some_day.month, some_day.day))

    def __contains__(self, some_day: object) -> bool:
        return isinstance(some_day, date) and self.get(some_day) is not None

    def in_month(self, month: int) -> list[Holiday]:
        return sorted((h for h in self.holidays if h.month == month), key=lambda h: h.day)


class HolidayRule(BaseModel):
    """A holiday observed either on a fixed date or on the nth weekday of a month."""

    name: str
    month: int
    day: int | None = None
    weekday: str | None = None
    nth: int | None = None

    @field_validator("month")
    @classmethod
    def _month_range(cls, v: int) -> int:
        if not 1 <= v <= 12:
            raise ValueError("month must be between 1 and 12")
        return v

    @field_validator("weekday")
    @classmethod
    def _weekday_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if v.lower() not in WEEKDAY_NAMES:
            raise ValueError(f"unknown weekday: {v}")
        return v.lower()

    @field_validator("nth")
    @classmethod
    def _nth_range(cls, v: int | None) -> int | None:
        if v is not None and v not in {-1, 1, 2, 3, 4, 5}:
            raise ValueError("nth must be 1-5 or -1 (last)")
        return v

    @model_validator(mode="after")
    def _fixed_or_floating(self) -> HolidayRule:
        floating = self.weekday is not None or self.nth is not None
        if self.day is not None and floating:
            raise ValueError(f"{self.name}: use either day or weekday/nth, not both")
        if self.day is None and (self.weekday is None or self.nth is None):
            raise ValueError(f"{self.name}: floating rules need both weekday and nth")
        if self.day is not None:
            try:
                date(2000, self.month, self.day)  # leap year, so Feb 29 is allowed
            except ValueError as exc:
                raise ValueError(f"{self.name}: no such date {self.month}/{self.day}") from exc
        return self

    def occurs_in(self, year: int) -> bool:
        """Feb 29 rules and fifth-weekday rules skip the years without that date."""
        if self.day is not None:
            return calendar.isleap(year) or (self.month, self.day) != (2, 29)
        assert self.weekday is not None and self.nth is not None
        if self.nth == -1:
            return True
        weekday = WEEKDAY_NAMES[self.weekday]
        count = sum(1 for week in calendar.monthcalendar(year, self.month) if week[weekday])
        return self.nth <= count


DEFAULT_HOLIDAY_RULES: tuple[HolidayRule, ...] = (
    HolidayRule(name="New Year's Day", month=1, day=1),
    HolidayRule(name="Memorial Day", month=5, weekday="monday", nth=-1),
    HolidayRule(name="Independence Day", month=7, day=4),
    HolidayRule(name="Labor Day", month=9, weekday="monday", nth=1),
    HolidayRule(name="Thanksgiving Day", month=11, weekday="thursday", nth=4),
    HolidayRule(name="Christmas Day", month=12, day=25),
)


def nth_weekday_of_month(year: int, month: int, weekday: int, nth: int) -> int:
    """Day of month of the ``nth`` ``weekday`` (Monday=0); ``nth=-1`` is the last one."""
    days = [week[weekday] for week in calendar.monthcalendar(year, month) if week[weekday]]
    if nth == -1:
        return days[-1]
    if nth > len(days):
        raise InvalidInputError(f"{year}-{month:02d} has no occurrence #{nth} of weekday {weekday}")
    return days[nth - 1]


def resolve_observed_date(rule: HolidayRule, year: int) -> tuple[int, int]:
    if rule.day is not None:
        return rule.month, rule.day
    assert rule.weekday is not None and rule.nth is not None
    return rule.month, nth_weekday_of_month(year, rule.month, WEEKDAY_NAMES[rule.weekday], rule.nth)


def build_holiday_table(rules: Iterable[HolidayRule], year: int) -> HolidayTable:
    holidays = []
    for rule in rules:
        if not rule.occurs_in(year):
            continue
        month, day = resolve_observed_date(rule, year)
        holidays.append(Holiday(name=rule.name, month=month, day=day))
    return HolidayTable(year=year, holidays=tuple(holidays))
