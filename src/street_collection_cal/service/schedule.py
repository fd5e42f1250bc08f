from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from street_collection_cal.common.holidays import Holiday, HolidayTable, InvalidInputError


@dataclass(frozen=True)
class PickupResolution:
    is_pickup: bool
    is_adjusted: bool


@dataclass(frozen=True)
class CollectionEvent:
    date: date
    is_recycling: bool
    is_adjusted: bool


@dataclass(frozen=True)
class DayStatus:
    date: date
    is_pickup: bool
    is_adjusted: bool
    is_holiday: bool
    is_recycling: bool
    holiday: Holiday | None = None


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    leading_blanks: int
    days: tuple[DayStatus, ...]


def local_today(tz_name: str) -> date:
    tz = ZoneInfo(tz_name)
    return datetime.now(tz=tz).date()


def sunday_weekday(some_day: date) -> int:
    return (some_day.weekday() + 1) % 7


def _week_sunday(some_day: date) -> date:
    return some_day - timedelta(days=sunday_weekday(some_day))


def _check_weekday(pickup_weekday: int) -> None:
    if isinstance(pickup_weekday, bool) or not isinstance(pickup_weekday, int):
        raise InvalidInputError(f"pickup weekday must be an integer, got {pickup_weekday!r}")
    if not 0 <= pickup_weekday <= 6:
        raise InvalidInputError(f"pickup weekday must be 0-6, got {pickup_weekday}")


def _check_month(month: int) -> None:
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidInputError(f"month must be 1-12, got {month!r}")


def _check_table(year: int, holidays: HolidayTable) -> None:
    if holidays.year != year:
        raise InvalidInputError(
            f"holiday table is for {holidays.year}, requested year is {year}"
        )


def is_recycling_week(some_day: date) -> bool:
    """True when ``some_day`` falls in a trash-and-recycling week.

    Weeks run Sunday to Saturday and are counted from the week containing
    January 1st, which is week 1 and always trash-only.
    """
    week_start = _week_sunday(date(some_day.year, 1, 1))
    week_number = (some_day - week_start).days // 7 + 1
    return week_number % 2 == 0


def is_holiday_affecting_pickup(some_day: date, holidays: HolidayTable) -> bool:
    if some_day.weekday() >= 5:
        return False
    return some_day in holidays


def _holiday_on_or_before(nominal: date, pickup_weekday: int, holidays: HolidayTable) -> bool:
    for back in range(pickup_weekday + 1):
        if is_holiday_affecting_pickup(nominal - timedelta(days=back), holidays):
            return True
    return False


def is_shifted_pickup_day(
    candidate: date, pickup_weekday: int, holidays: HolidayTable
) -> PickupResolution:
    """Decide whether ``candidate`` is a collection day for ``pickup_weekday``.

    A qualifying holiday anywhere from the week's Sunday through the nominal
    pickup day moves that week's collection to the following day. Only one
    such shift per week is modelled.
    """
    _check_weekday(pickup_weekday)
    weekday = sunday_weekday(candidate)

    if weekday == pickup_weekday:
        if _holiday_on_or_before(candidate, pickup_weekday, holidays):
            return PickupResolution(is_pickup=False, is_adjusted=False)
        return PickupResolution(is_pickup=True, is_adjusted=False)

    if weekday == (pickup_weekday + 1) % 7:
        previous = candidate - timedelta(days=1)
        if _holiday_on_or_before(previous, pickup_weekday, holidays):
            return PickupResolution(is_pickup=True, is_adjusted=True)

    return PickupResolution(is_pickup=False, is_adjusted=False)


def _nominal_date(some_day: date, resolution: PickupResolution) -> date:
    if resolution.is_adjusted:
        return some_day - timedelta(days=1)
    return some_day


def classify_day(some_day: date, pickup_weekday: int, *, holidays: HolidayTable) -> DayStatus:
    _check_table(some_day.year, holidays)
    resolution = is_shifted_pickup_day(some_day, pickup_weekday, holidays)
    return DayStatus(
        date=some_day,
        is_pickup=resolution.is_pickup,
        is_adjusted=resolution.is_adjusted,
        is_holiday=is_holiday_affecting_pickup(some_day, holidays),
        is_recycling=is_recycling_week(_nominal_date(some_day, resolution)),
        holiday=holidays.get(some_day),
    )


def build_month_grid(
    year: int, month: int, pickup_weekday: int, *, holidays: HolidayTable
) -> MonthGrid:
    _check_month(month)
    _check_weekday(pickup_weekday)
    _check_table(year, holidays)
    days_in_month = calendar.monthrange(year, month)[1]
    days = tuple(
        classify_day(date(year, month, d), pickup_weekday, holidays=holidays)
        for d in range(1, days_in_month + 1)
    )
    return MonthGrid(
        year=year,
        month=month,
        leading_blanks=sunday_weekday(date(year, month, 1)),
        days=days,
    )


def month_holidays(holidays: HolidayTable, month: int) -> list[Holiday]:
    _check_month(month)
    return holidays.in_month(month)


def generate_events(
    pickup_weekday: int,
    year: int,
    from_month: int,
    to_month: int,
    *,
    holidays: HolidayTable,
) -> list[CollectionEvent]:
    _check_weekday(pickup_weekday)
    _check_month(from_month)
    _check_month(to_month)
    if from_month > to_month:
        raise InvalidInputError(f"from_month {from_month} is after to_month {to_month}")
    _check_table(year, holidays)

    current = date(year, from_month, 1)
    end = date(year, to_month, calendar.monthrange(year, to_month)[1])
    events: list[CollectionEvent] = []
    while current <= end:
        resolution = is_shifted_pickup_day(current, pickup_weekday, holidays)
        if resolution.is_pickup:
            events.append(
                CollectionEvent(
                    date=current,
                    is_recycling=is_recycling_week(_nominal_date(current, resolution)),
                    is_adjusted=resolution.is_adjusted,
                )
            )
        current += timedelta(days=1)
    return events
