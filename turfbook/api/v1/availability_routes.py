"""Public availability queries for a field."""

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from turfbook.core.error_handlers import unwrap_result
from turfbook.dependencies import get_db
from turfbook.schemas.availability import AvailabilityResponse, TimeSlotResponse
from turfbook.services.availability_service import AvailabilityService

router = APIRouter(prefix="/fields/{field_id}", tags=["availability"])


@router.get("/availability", response_model=AvailabilityResponse)
def check_availability(
    field_id: int,
    *,
    db: Session = Depends(get_db),
    at: datetime = Query(..., description="Instant to check, e.g. 2025-04-14T10:00:00"),
) -> AvailabilityResponse:
    """Tell whether the field can be booked at a single instant."""

    service = AvailabilityService(db)
    result = unwrap_result(service.check_availability(field_id, at))
    window = result.window
    return AvailabilityResponse(
        field_id=field_id,
        at=at,
        available=result.available,
        reason=result.reason.value if result.reason else None,
        id_rule=result.rule.id_rule if result.rule is not None else None,
        zone_name=window.zone_name if window is not None else None,
        window_start=window.start_time if window is not None else None,
        window_end=window.end_time if window is not None else None,
        price=result.price,
    )


@router.get("/slots", response_model=List[TimeSlotResponse])
def list_slots(
    field_id: int,
    *,
    db: Session = Depends(get_db),
    date_value: Optional[date] = Query(
        None,
        alias="date",
        description="Date in ISO format (YYYY-MM-DD). Defaults to the current date.",
    ),
    slot_minutes: Optional[int] = Query(None, gt=0, description="Slot length in minutes"),
) -> List[TimeSlotResponse]:
    """List the slots of the day with their booking status."""

    service = AvailabilityService(db)
    slots = unwrap_result(
        service.list_available_slots(field_id, date_value or date.today(), slot_minutes)
    )
    return [
        TimeSlotResponse(
            start_time=slot.start_time,
            end_time=slot.end_time,
            status=slot.status.value,
            price=slot.price,
            zone_name=slot.zone_name,
        )
        for slot in slots
    ]
