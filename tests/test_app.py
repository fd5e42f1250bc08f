from pathlib import Path

import pytest
from flask.testing import FlaskClient

from street_collection_cal.service.app import create_app
from street_collection_cal.service.town_data import TownData


@pytest.fixture
def client(town_yaml: Path, monkeypatch: pytest.MonkeyPatch) -> FlaskClient:
    monkeypatch.setenv("TOWN_CONFIG_PATH", str(town_yaml))
    monkeypatch.delenv("TOWN_ID", raising=False)
    monkeypatch.delenv("STREET_SCHEDULE_PATH", raising=False)
    return create_app().test_client()


def test_healthz_and_streets(client: FlaskClient) -> None:
    assert client.get("/healthz").get_json() == {"ok": True}
    assert client.get("/streets").get_json() == {"count": 4}
    assert client.get("/streets?full=1").get_json() == [
        "Beverly Road",
        "Cochran Road",
        "Lebanon Avenue",
        "Washington Road",
    ]


def test_lookup(client: FlaskClient) -> None:
    resp = client.get("/lookup", query_string={"street": "lebanon avenue"})
    assert resp.status_code == 200
    assert resp.get_json() == {"street": "Lebanon Avenue", "day": "Thursday", "weekday": 4}

    missing = client.get("/lookup", query_string={"street": "Nowhere Lane"})
    assert missing.status_code == 404
    assert missing.get_json() == {"error": "Street not found"}

    assert client.get("/lookup").status_code == 400


def test_events_for_thanksgiving_week(client: FlaskClient) -> None:
    resp = client.get(
        "/events",
        query_string={
            "street": "Lebanon Avenue",
            "year": 2025,
            "from_month": 11,
            "to_month": 11,
        },
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert [e["date"] for e in body["events"]] == [
        "2025-11-06",
        "2025-11-13",
        "2025-11-20",
        "2025-11-28",
    ]
    last = body["events"][-1]
    assert last["is_adjusted"] is True
    assert last["is_recycling"] is True
    assert last["description"] == "Collection day adjusted due to holiday"
    assert last["summary"] == "Trash & Recycling Collection"


def test_calendar_month(client: FlaskClient) -> None:
    resp = client.get(
        "/calendar", query_string={"street": "Beverly Road", "year": 2025, "month": 1}
    )
    assert resp.status_code == 200
    body = resp.get_json()
    grid = body["calendar"]
    assert grid["leading_blanks"] == 3
    assert len(grid["days"]) == 31
    new_year, moved = grid["days"][0], grid["days"][1]
    assert new_year["is_holiday"] is True
    assert new_year["is_pickup"] is False
    assert new_year["holiday"] == "New Year's Day"
    assert moved["is_pickup"] is True
    assert moved["is_adjusted"] is True
    assert body["holidays"] == [{"name": "New Year's Day", "date": "2025-01-01"}]


def test_street_ics(client: FlaskClient) -> None:
    resp = client.get(
        "/street.ics",
        query_string={
            "street": "Lebanon Avenue",
            "year": 2025,
            "from_month": 11,
            "to_month": 12,
            "reminder_hour": 19,
        },
    )
    assert resp.status_code == 200
    assert resp.mimetype == "text/calendar"
    text = resp.get_data(as_text=True)
    assert "X-WR-CALNAME:Testville Trash - Lebanon Avenue" in text
    assert "DTSTART;VALUE=DATE:20251128" in text
    assert "DTSTART;VALUE=DATE:20251127" not in text
    assert "DTSTART;VALUE=DATE:20251226" in text
    assert "TRIGGER;VALUE=DATE-TIME:20251128T000000Z" in text
    assert text.count("BEGIN:VEVENT") == 8


def test_street_ics_reminder_text_matches_lead_time(client: FlaskClient) -> None:
    query = {"street": "Lebanon Avenue", "year": 2025, "from_month": 11, "to_month": 11}
    same_day = client.get("/street.ics", query_string={**query, "reminder_days": 0})
    text = same_day.get_data(as_text=True)
    assert "DESCRIPTION:Reminder: Trash collection today" in text
    assert "tomorrow" not in text

    early = client.get("/street.ics", query_string={**query, "reminder_days": 3})
    text = early.get_data(as_text=True)
    assert "DESCRIPTION:Reminder: Trash collection in 3 days" in text
    # Nov 28 pickup, three days earlier at 18:00 EST.
    assert "TRIGGER;VALUE=DATE-TIME:20251125T230000Z" in text


@pytest.mark.parametrize(
    "query",
    [
        {"street": "Lebanon Avenue", "year": 2025, "from_month": 12, "to_month": 11},
        {"street": "Lebanon Avenue", "year": 2025, "from_month": "soon"},
        {"street": "Lebanon Avenue", "year": 2025, "to_month": 13},
        {"street": "Lebanon Avenue", "year": 1492},
    ],
)
def test_events_bad_parameters(client: FlaskClient, query: dict[str, object]) -> None:
    resp = client.get("/events", query_string=query)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_app_shares_one_town_data(town_yaml: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOWN_CONFIG_PATH", str(town_yaml))
    monkeypatch.delenv("STREET_SCHEDULE_PATH", raising=False)
    app = create_app()
    town = app.config["TOWN_DATA"]
    assert isinstance(town, TownData)
    assert town.config.town_id == "testville"
    assert "TOWN_CONFIG" not in app.config

    client = app.test_client()
    events = client.get("/events", query_string={"street": "Cochran Road", "year": 2025})
    assert events.status_code == 200
    grid = client.get(
        "/calendar", query_string={"street": "Cochran Road", "year": 2025, "month": 5}
    )
    assert grid.status_code == 200
    assert list(town._holiday_tables) == [2025]


def test_missing_street_schedule(town_yaml: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (town_yaml.parent / "streets.csv").unlink()
    monkeypatch.setenv("TOWN_CONFIG_PATH", str(town_yaml))
    monkeypatch.delenv("STREET_SCHEDULE_PATH", raising=False)
    with pytest.raises(FileNotFoundError):
        create_app()
