from __future__ import annotations

from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from street_collection_cal.common.holidays import DEFAULT_HOLIDAY_RULES, HolidayRule


class IcsConfig(BaseModel):
    calendar_name_template: str = "{town_name} Trash - {street}"
    reminder_days: int = 1
    reminder_hour: int = 18

    @field_validator("reminder_days")
    @classmethod
    def _reminder_days_range(cls, v: int) -> int:
        if not 0 <= v <= 7:
            raise ValueError("reminder_days must be between 0 and 7")
        return v

    @field_validator("reminder_hour")
    @classmethod
    def _reminder_hour_range(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError("reminder_hour must be between 0 and 23")
        return v


class ServiceConfig(BaseModel):
    reload_interval_seconds: int = 10

    @field_validator("reload_interval_seconds")
    @classmethod
    def _reload_interval_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("reload_interval_seconds must be >= 1")
        return v


class TownConfig(BaseModel):
    town_id: str
    town_name: str
    timezone: str
    street_schedule_csv: str = "street-schedule.csv"
    holidays: list[HolidayRule] = Field(default_factory=lambda: list(DEFAULT_HOLIDAY_RULES))
    ics: IcsConfig = Field(default_factory=IcsConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)

    @field_validator("town_id", "town_name", "timezone", "street_schedule_csv")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value must be non-empty")
        return v

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {v}") from exc
        return v

    @model_validator(mode="after")
    def _unique_holiday_names(self) -> TownConfig:
        names = [h.name for h in self.holidays]
        if len(names) != len(set(names)):
            raise ValueError("holiday names must be unique")
        return self


def validate_config(data: dict[str, Any]) -> TownConfig:
    try:
        return TownConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid town config: {exc}") from exc
