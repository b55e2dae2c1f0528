import asyncio
import math
from datetime import datetime, time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from app.core.config_loader import get_same_day_cutoff, get_time_slots
from app.core.errors import NotFoundError, ValidationError
from app.core.logger import logger
from app.models.db_models import Booking
from app.services.db_service import BookingStore
from app.services.notification_service import send_booking_status_email
from app.services.validation import (
    INTAKE_FIELDS,
    INTAKE_SLOT,
    RESCHEDULE_FIELDS,
    RESCHEDULE_SLOT,
    ValidationContext,
    validate_fields,
)

DEFAULT_PAGE_SIZE = 9


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"


class BookingAction(str, Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"
    RESCHEDULE = "reschedule"


def apply_transition(action: Optional[str], new_date: Optional[str] = None, new_time: Optional[str] = None,
                     ctx: Optional[ValidationContext] = None) -> Dict[str, Any]:
    """
    Column changes for an admin action.

    confirm and cancel apply from any state. reschedule always returns the
    booking to pending with the new date and time; it validates their shape but
    does not check whether the slot is still free.
    """
    try:
        action = BookingAction(action)
    except ValueError:
        raise ValidationError("Invalid action")

    if action is BookingAction.CONFIRM:
        return {"status": BookingStatus.CONFIRMED.value}
    if action is BookingAction.CANCEL:
        return {"status": BookingStatus.CANCELED.value}

    cleaned = validate_fields({"newDate": new_date, "newTime": new_time}, RESCHEDULE_FIELDS,
                              ctx or ValidationContext(), slot_keys=RESCHEDULE_SLOT)
    return {
        "status": BookingStatus.PENDING.value,
        "date": datetime.combine(cleaned["newDate"], time.min),
        "time": cleaned["newTime"],
    }


class BookingService:
    def __init__(self, store: BookingStore, config: Dict[str, Any], page_size: int = DEFAULT_PAGE_SIZE,
                 now: Callable[[], datetime] = datetime.now):
        self.store = store
        self.config = config
        self.page_size = page_size
        self.now = now

    def _context(self) -> ValidationContext:
        return ValidationContext(
            time_slots=get_time_slots(self.config),
            same_day_cutoff=get_same_day_cutoff(self.config),
            now=self.now(),
        )

    async def create_booking(self, fields: Dict[str, Any]) -> Booking:
        """
        Validates the intake fields (first failure wins) and stores a pending booking.
        Does not check that the slot is still free.
        """
        cleaned = validate_fields(fields, INTAKE_FIELDS, self._context(), slot_keys=INTAKE_SLOT)

        booking = await self.store.insert(
            first_name=cleaned["firstName"],
            last_name=cleaned["lastName"],
            email=cleaned["email"],
            phone=cleaned["phone"],
            message=cleaned["message"],
            date=datetime.combine(cleaned["date"], time.min),
            time=cleaned["time"],
            status=BookingStatus.PENDING.value,
        )
        logger.info(f"🆕 Booking {booking.id} created for {cleaned['date'].isoformat()} {booking.time}")
        return booking

    async def get_booking(self, booking_id: int) -> Booking:
        booking = await self.store.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    async def list_bookings(self, status: Optional[str] = None, search: Optional[str] = None, page: int = 1) -> Dict[str, Any]:
        if not status or status == "all":
            status = None
        search = search.strip() if search else None
        page = max(page or 1, 1)

        items, total = await self.store.search(
            status=status,
            search=search,
            limit=self.page_size,
            offset=self.page_size * (page - 1),
        )
        return {"items": items, "totalPages": math.ceil(total / self.page_size)}

    async def update_booking(self, booking_id: int, action: Optional[str], new_date: Optional[str] = None,
                             new_time: Optional[str] = None) -> Booking:
        changes = apply_transition(action, new_date, new_time, self._context())

        # Check-then-write; not atomic
        await self.get_booking(booking_id)
        if not await self.store.update(booking_id, changes):
            raise NotFoundError("Booking not found")

        logger.info(f"✏️ Booking {booking_id}: {action} -> {changes['status']}")
        return await self.get_booking(booking_id)

    async def cancel_booking(self, booking_id: int) -> None:
        """Idempotent: cancelling a canceled booking succeeds."""
        if not await self.store.update(booking_id, {"status": BookingStatus.CANCELED.value}):
            raise NotFoundError("Booking not found")
        logger.info(f"🗑️ Booking {booking_id} canceled")

    async def notify(self, booking_id: int) -> bool:
        """Emails the visitor the booking's current status. Returns whether a mail went out."""
        booking = await self.get_booking(booking_id)
        return await asyncio.to_thread(send_booking_status_email, booking, self.config)
