"""Builds per-request services from the state set up in the lifespan."""
from typing import Optional

from fastapi import Request

from app.core.config_loader import get_time_slots
from app.core.errors import ValidationError
from app.services.availability_service import AvailabilityService
from app.services.booking_service import BookingService
from app.services.db_service import BookingStore, UserStore
from app.services.user_service import UserService


def get_booking_service(request: Request) -> BookingService:
    state = request.app.state
    return BookingService(
        BookingStore(state.db),
        state.company_config,
        page_size=state.page_size,
        now=state.clock,
    )


def get_availability_service(request: Request) -> AvailabilityService:
    state = request.app.state
    return AvailabilityService(BookingStore(state.db), get_time_slots(state.company_config))


def get_user_service(request: Request) -> UserService:
    return UserService(UserStore(request.app.state.db))


def parse_id(value: Optional[str], label: str = "ID") -> Optional[int]:
    """Query-string ids arrive as text; None stays None."""
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Invalid {label}")
