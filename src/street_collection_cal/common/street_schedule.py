from __future__ import annotations

import csv
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

COLLECTION_DAYS = {
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
}


class StreetEntry(BaseModel):
    street: str
    day: str

    @field_validator("street")
    @classmethod
    def _street_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("street must be non-empty")
        return v

    @field_validator("day")
    @classmethod
    def _collection_day(cls, v: str) -> str:
        v = v.strip()
        if v.lower() not in COLLECTION_DAYS:
            raise ValueError(f"day must be Monday-Friday, got {v!r}")
        return v.capitalize()

    @property
    def pickup_weekday(self) -> int:
        return COLLECTION_DAYS[self.day.lower()]


class StreetSchedule(BaseModel):
    entries: list[StreetEntry] = Field(default_factory=list)

    def lookup(self, street: str) -> StreetEntry | None:
        wanted = street.strip().lower()
        if not wanted:
            return None
        for entry in self.entries:
            if entry.street.lower() == wanted:
                return entry
        return None

    def streets(self) -> list[str]:
        return sorted({e.street for e in self.entries}, key=str.lower)


def parse_street_schedule(text: str, source: str = "<string>") -> StreetSchedule:
    reader = csv.reader(text.splitlines())
    header = next(reader, None)
    if header is None:
        raise ValueError(f"Street schedule is empty: {source}")
    if [h.strip().lower() for h in header[:2]] != ["street", "day"]:
        raise ValueError(f"Street schedule header must be 'street,day': {source}")

    entries: list[StreetEntry] = []
    for line_no, row in enumerate(reader, start=2):
        if not any(cell.strip() for cell in row):
            continue
        if len(row) < 2:
            raise ValueError(f"{source}:{line_no}: expected street,day")
        try:
            entries.append(StreetEntry(street=row[0], day=row[1]))
        except ValidationError as exc:
            raise ValueError(f"{source}:{line_no}: {exc}") from exc
    return StreetSchedule(entries=entries)


def load_street_schedule(path: Path) -> StreetSchedule:
    if not path.exists():
        raise FileNotFoundError(f"Street schedule not found: {path}")
    return parse_street_schedule(path.read_text(encoding="utf-8"), str(path))
