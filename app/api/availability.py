from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_availability_service
from app.core.errors import BookingAppError
from app.core.logger import logger
from app.services.availability_service import AvailabilityService

router = APIRouter()

@router.get("/availability")
async def get_availability(date: Optional[str] = None, service: AvailabilityService = Depends(get_availability_service)):
    try:
        available = await service.get_available_times(date)
    except BookingAppError as e:
        # The booking form expects an empty list alongside any error
        logger.info(f"📅 Availability refused for {date!r}: {e.message}")
        return JSONResponse(
            status_code=e.status_code,
            content={"message": "Could not fetch available times", "error": e.message, "availableTimes": []},
        )

    return {"message": "Available times fetched", "availableTimes": available}
