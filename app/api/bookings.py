from typing import Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_booking_service, parse_id
from app.core.errors import ValidationError
from app.core.security import Operation, Role, require
from app.models.api_models import BookingIn, BookingUpdate
from app.services.booking_service import BookingService

router = APIRouter()

@router.get("/booking")
async def get_bookings(
    id: Optional[str] = None,
    _id: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: Optional[str] = None,
    role: Role = Depends(require(Operation.READ_BOOKINGS)),
    service: BookingService = Depends(get_booking_service),
):
    booking_id = parse_id(_id or id, "booking ID")
    if booking_id is not None:
        booking = await service.get_booking(booking_id)
        return {"message": "Booking fetched", "booking": booking.to_dict()}

    try:
        page_number = int(page) if page else 1
    except ValueError:
        page_number = 1

    result = await service.list_bookings(status=status, search=search, page=page_number)
    return {
        "message": "Bookings fetched",
        "bookings": [b.to_dict() for b in result["items"]],
        "totalPages": result["totalPages"],
    }

@router.post("/booking")
async def create_booking(req: BookingIn, service: BookingService = Depends(get_booking_service)):
    booking = await service.create_booking(req.model_dump())
    return {"message": "Booking created", "booking": booking.to_dict()}

@router.put("/booking")
async def update_booking(
    req: BookingUpdate,
    id: Optional[str] = None,
    _id: Optional[str] = None,
    role: Role = Depends(require(Operation.UPDATE_BOOKING)),
    service: BookingService = Depends(get_booking_service),
):
    booking_id = parse_id(_id or id, "booking ID")
    if booking_id is None:
        raise ValidationError("Invalid booking ID")

    booking = await service.update_booking(booking_id, req.action, req.newDate, req.newTime)
    return {"message": "Booking updated", "booking": booking.to_dict()}

@router.put("/booking/cancel")
async def cancel_booking(
    id: Optional[str] = None,
    _id: Optional[str] = None,
    role: Role = Depends(require(Operation.CANCEL_BOOKING)),
    service: BookingService = Depends(get_booking_service),
):
    booking_id = parse_id(_id or id, "booking ID")
    if booking_id is None:
        raise ValidationError("Booking ID required")

    await service.cancel_booking(booking_id)
    return {"message": "Booking updated"}

@router.post("/booking/notify")
async def notify_booking(
    id: Optional[str] = None,
    _id: Optional[str] = None,
    role: Role = Depends(require(Operation.NOTIFY_BOOKING)),
    service: BookingService = Depends(get_booking_service),
):
    booking_id = parse_id(_id or id, "booking ID")
    if booking_id is None:
        raise ValidationError("Booking ID required")

    sent = await service.notify(booking_id)
    return {"message": "Notification sent" if sent else "Notification skipped", "sent": sent}
