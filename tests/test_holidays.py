from datetime import date

import pytest
from pydantic import ValidationError

from street_collection_cal.common.holidays import (
    DEFAULT_HOLIDAY_RULES,
    Holiday,
    HolidayRule,
    HolidayTable,
    InvalidInputError,
    build_holiday_table,
    nth_weekday_of_month,
    resolve_observed_date,
)


def test_default_rules_resolve_for_2025() -> None:
    resolved = [resolve_observed_date(rule, 2025) for rule in DEFAULT_HOLIDAY_RULES]
    assert resolved == [(1, 1), (5, 26), (7, 4), (9, 1), (11, 27), (12, 25)]


def test_floating_rules_move_with_the_year() -> None:
    table = build_holiday_table(DEFAULT_HOLIDAY_RULES, 2026)
    by_name = {h.name: (h.month, h.day) for h in table.holidays}
    assert by_name["Memorial Day"] == (5, 25)
    assert by_name["Labor Day"] == (9, 7)
    assert by_name["Thanksgiving Day"] == (11, 26)
    assert by_name["Christmas Day"] == (12, 25)


def test_nth_weekday_of_month_missing_occurrence() -> None:
    # February 2025 has only four Mondays.
    assert nth_weekday_of_month(2025, 2, 0, -1) == 24
    with pytest.raises(InvalidInputError):
        nth_weekday_of_month(2025, 2, 0, 5)


def test_holiday_rule_validation() -> None:
    rule = HolidayRule(name="Labor Day", month=9, weekday="Monday", nth=1)
    assert rule.weekday == "monday"

    with pytest.raises(ValidationError):
        HolidayRule(name="Both", month=9, day=1, weekday="monday", nth=1)
    with pytest.raises(ValidationError):
        HolidayRule(name="No nth", month=9, weekday="monday")
    with pytest.raises(ValidationError):
        HolidayRule(name="Bad month", month=13, day=1)
    with pytest.raises(ValidationError):
        HolidayRule(name="Bad weekday", month=9, weekday="funday", nth=1)
    with pytest.raises(ValidationError, match="no such date"):
        HolidayRule(name="Bad date", month=2, day=30)
    with pytest.raises(ValidationError, match="no such date"):
        HolidayRule(name="Bad date", month=4, day=31)


def test_leap_day_rule_only_in_leap_years() -> None:
    rules = [HolidayRule(name="Leap Day", month=2, day=29)]
    assert date(2024, 2, 29) in build_holiday_table(rules, 2024)
    assert build_holiday_table(rules, 2025).holidays == ()


def test_fifth_weekday_rule_skips_short_months() -> None:
    rules = [HolidayRule(name="Fifth Monday", month=6, weekday="monday", nth=5)]
    # June 2024 has four Mondays, June 2025 has five.
    assert build_holiday_table(rules, 2024).holidays == ()
    assert build_holiday_table(rules, 2025).holidays == (Holiday("Fifth Monday", 6, 30),)


@pytest.mark.parametrize("year", [0, 1, 9999, 10000])
def test_table_rejects_years_out_of_range(year: int) -> None:
    with pytest.raises(InvalidInputError, match="year out of range"):
        HolidayTable(year)


def test_table_rejects_impossible_dates() -> None:
    with pytest.raises(InvalidInputError):
        HolidayTable(2025, (Holiday("Leap Day", 2, 29),))
    assert date(2024, 2, 29) in HolidayTable(2024, (Holiday("Leap Day", 2, 29),))


def test_table_lookup_is_scoped_to_its_year(holidays_2025: HolidayTable) -> None:
    assert holidays_2025.get(date(2025, 12, 25)) == Holiday("Christmas Day", 12, 25)
    assert holidays_2025.get(date(2024, 12, 25)) is None
    assert date(2026, 1, 1) not in holidays_2025


def test_table_first_holiday_wins_on_same_date() -> None:
    table = HolidayTable(2025, (Holiday("First", 7, 4), Holiday("Second", 7, 4)))
    holiday = table.get(date(2025, 7, 4))
    assert holiday is not None
    assert holiday.name == "First"
    assert len(table.holidays) == 2
