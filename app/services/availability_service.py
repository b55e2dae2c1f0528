from datetime import datetime, time
from typing import List

from app.core.errors import ValidationError
from app.core.logger import logger
from app.services.booking_service import BookingStatus
from app.services.db_service import BookingStore
from app.services.validation import parse_calendar_date


class AvailabilityService:
    def __init__(self, store: BookingStore, time_slots: List[str]):
        self.store = store
        self.time_slots = list(time_slots)

    async def get_available_times(self, date_value: str) -> List[str]:
        """
        Slots of the Time Catalog not taken by an active booking on the given day,
        in catalog order. Weekends and malformed dates raise ValidationError.
        """
        if not date_value or not date_value.strip():
            raise ValidationError("Date parameter is required")

        day = parse_calendar_date(date_value)
        if day.weekday() >= 5:
            raise ValidationError("No available times on Saturday or Sunday")

        # Full-day window so both date-only and timestamped rows are caught
        start_of_day = datetime.combine(day, time.min)
        end_of_day = datetime.combine(day, time.max)
        bookings = await self.store.list_between(start_of_day, end_of_day)

        taken = {b.time for b in bookings if b.status != BookingStatus.CANCELED.value}
        available = [slot for slot in self.time_slots if slot not in taken]

        logger.debug(f"📅 {day.isoformat()}: {len(available)}/{len(self.time_slots)} slots free")
        return available
