import pytest

from app.core.errors import ValidationError
from app.services.availability_service import AvailabilityService
from app.services.db_service import BookingStore
from helpers import SATURDAY, SUNDAY, TIME_SLOTS, TOMORROW, add_booking


def make_service(database):
    return AvailabilityService(BookingStore(database), TIME_SLOTS)


@pytest.mark.asyncio
async def test_empty_day_returns_full_catalog_in_order(database):
    assert await make_service(database).get_available_times(TOMORROW) == TIME_SLOTS


@pytest.mark.asyncio
async def test_active_bookings_remove_their_slot(database):
    add_booking(database, time="09:00", status="pending")
    add_booking(database, time="13:00", status="confirmed")

    available = await make_service(database).get_available_times(TOMORROW)

    assert "09:00" not in available
    assert "13:00" not in available
    assert available == [s for s in TIME_SLOTS if s not in ("09:00", "13:00")]


@pytest.mark.asyncio
async def test_canceled_booking_frees_slot(database):
    add_booking(database, time="10:00", status="canceled")
    assert "10:00" in await make_service(database).get_available_times(TOMORROW)


@pytest.mark.asyncio
async def test_other_days_do_not_interfere(database):
    add_booking(database, day="2026-10-21", time="09:00")
    assert await make_service(database).get_available_times(TOMORROW) == TIME_SLOTS


@pytest.mark.asyncio
async def test_timestamped_rows_within_day_are_counted(database):
    # Rows written with a time component still belong to their day
    add_booking(database, day="2026-10-20T23:59:59", time="11:00")
    assert "11:00" not in await make_service(database).get_available_times(TOMORROW)


@pytest.mark.asyncio
async def test_iso_datetime_input_uses_written_day(database):
    add_booking(database, time="08:00")
    available = await make_service(database).get_available_times("2026-10-20T22:00:00.000Z")
    assert "08:00" not in available


@pytest.mark.asyncio
@pytest.mark.parametrize("day", [SATURDAY, SUNDAY])
async def test_weekends_rejected(database, day):
    with pytest.raises(ValidationError) as exc:
        await make_service(database).get_available_times(day)
    assert exc.value.message == "No available times on Saturday or Sunday"


@pytest.mark.asyncio
@pytest.mark.parametrize("value, message", [
    ("", "Date parameter is required"),
    (None, "Date parameter is required"),
    ("tomorrow", "Invalid date format"),
    ("2026-13-01", "Invalid date format"),
])
async def test_bad_input_rejected(database, value, message):
    with pytest.raises(ValidationError) as exc:
        await make_service(database).get_available_times(value)
    assert exc.value.message == message


def test_availability_endpoint(client, database):
    add_booking(database, time="09:00")

    response = client.get("/api/availability", params={"date": TOMORROW})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Available times fetched"
    assert body["availableTimes"] == [s for s in TIME_SLOTS if s != "09:00"]


def test_availability_endpoint_weekend(client):
    response = client.get("/api/availability", params={"date": SATURDAY})

    assert response.status_code == 400
    body = response.json()
    assert body["availableTimes"] == []
    assert body["error"] == "No available times on Saturday or Sunday"


def test_availability_endpoint_missing_date(client):
    response = client.get("/api/availability")
    assert response.status_code == 400
    assert response.json()["error"] == "Date parameter is required"


def test_availability_is_public(client):
    # No login required
    assert client.get("/api/availability", params={"date": TOMORROW}).status_code == 200


def test_availability_reflects_new_booking(client):
    before = client.get("/api/availability", params={"date": TOMORROW}).json()["availableTimes"]
    client.post("/api/booking", json={
        "firstName": "Ann", "lastName": "Lee", "email": "ann@x.com",
        "phone": "555-1111", "date": TOMORROW, "time": before[0],
    })
    after = client.get("/api/availability", params={"date": TOMORROW}).json()["availableTimes"]

    assert before[0] not in after
    assert len(after) == len(before) - 1


@pytest.mark.asyncio
async def test_browser_date_string_uses_written_day(database):
    add_booking(database, time="10:00")
    available = await make_service(database).get_available_times(
        "Tue Oct 20 2026 00:00:00 GMT+0200 (Central European Summer Time)"
    )
    assert available == [s for s in TIME_SLOTS if s != "10:00"]


@pytest.mark.parametrize("value", [
    "Tue Oct 20 2026 00:00:00 GMT+0200 (Central European Summer Time)",
    "2026-10-20T00:00:00.000+02:00",
])
def test_availability_endpoint_accepts_browser_dates(client, value):
    response = client.get("/api/availability", params={"date": value})

    assert response.status_code == 200
    assert response.json()["availableTimes"] == TIME_SLOTS
