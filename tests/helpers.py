from datetime import datetime

from fastapi.testclient import TestClient

from app.core.security import hash_password
from app.models.db_models import Booking, User
from app.services.db_service import Database

# Monday morning; tomorrow is Tuesday 2026-10-20
FIXED_NOW = datetime(2026, 10, 19, 9, 30)
TODAY = "2026-10-19"
TOMORROW = "2026-10-20"
SATURDAY = "2026-10-24"
SUNDAY = "2026-10-25"

TIME_SLOTS = ["08:00", "09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00", "16:00"]

COMPANY_CONFIG = {
    "company_name": "Test Clinic",
    "time_slots": TIME_SLOTS,
    "same_day_cutoff": "16:00",
    "notifications": {"email_enabled": False},
}


def fixed_clock():
    return FIXED_NOW


def add_user(db: Database, name: str, password: str = "secret", role: str = "admin") -> User:
    with db.session() as session:
        user = User(name=name, password=hash_password(password), role=role)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


def add_booking(db: Database, day: str = TOMORROW, time: str = "09:00", status: str = "pending", **fields) -> Booking:
    values = {
        "first_name": "Ann",
        "last_name": "Lee",
        "email": "ann@x.com",
        "phone": "555-1111",
        "message": None,
    }
    values.update(fields)
    with db.session() as session:
        booking = Booking(date=datetime.fromisoformat(day), time=time, status=status, **values)
        session.add(booking)
        session.commit()
        session.refresh(booking)
        return booking


def login(client: TestClient, name: str, password: str = "secret"):
    response = client.post("/api/auth/login", json={"name": name, "password": password})
    assert response.status_code == 200, response.text
    return response
