from pathlib import Path

import pytest

from street_collection_cal.common.holidays import (
    DEFAULT_HOLIDAY_RULES,
    HolidayTable,
    build_holiday_table,
)

TOWN_YAML = """\
town_id: testville
town_name: Testville
timezone: America/New_York
street_schedule_csv: streets.csv
ics:
  reminder_days: 1
  reminder_hour: 18
"""

STREETS_CSV = """\
street,day
Lebanon Avenue,Thursday
Cochran Road,Monday
Beverly Road,Wednesday
Washington Road,Friday
"""


@pytest.fixture
def holidays_2025() -> HolidayTable:
    return build_holiday_table(DEFAULT_HOLIDAY_RULES, 2025)


@pytest.fixture
def holidays_2026() -> HolidayTable:
    return build_holiday_table(DEFAULT_HOLIDAY_RULES, 2026)


@pytest.fixture
def town_yaml(tmp_path: Path) -> Path:
    (tmp_path / "streets.csv").write_text(STREETS_CSV, encoding="utf-8")
    path = tmp_path / "town.yaml"
    path.write_text(TOWN_YAML, encoding="utf-8")
    return path
