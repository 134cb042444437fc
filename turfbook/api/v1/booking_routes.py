"""API routes for creating and managing bookings."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from turfbook.core.error_handlers import unwrap_result
from turfbook.core.security import get_current_actor
from turfbook.dependencies import get_db
from turfbook.schemas.booking import (
    BookingCancellationResponse,
    BookingCreate,
    BookingResponse,
)
from turfbook.services.booking_service import BookingService
from turfbook.services.permissions import Actor, Role, require_any_role, require_capability

router = APIRouter(prefix="/bookings", tags=["bookings"])

BOOKING_MANAGER_ROLES = (
    Role.COMPANY,
    Role.FACILITY_MANAGER,
    Role.CUSTOMER_SERVICE,
    Role.ADMIN,
)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> BookingResponse:
    """Book a field for the authenticated consumer."""

    unwrap_result(require_any_role(actor, (Role.CONSUMER,)))
    service = BookingService(db)
    return unwrap_result(
        service.create_booking(
            payload.id_field,
            actor.user_id,
            payload.start_time,
            payload.end_time,
            payload.notes,
        )
    )


@router.get("/me", response_model=List[BookingResponse])
def list_my_bookings(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> List[BookingResponse]:
    """Retrieve the bookings of the authenticated user, newest first."""

    service = BookingService(db)
    return unwrap_result(service.list_user_bookings(actor.user_id))


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> BookingResponse:
    service = BookingService(db)
    return unwrap_result(service.get_booking_details(booking_id, actor.user_id))


@router.put("/{booking_id}/cancel", response_model=BookingCancellationResponse)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> BookingCancellationResponse:
    """Cancel one of the caller's bookings with a full refund."""

    service = BookingService(db)
    cancellation = unwrap_result(service.cancel_booking(booking_id, actor.user_id))
    return BookingCancellationResponse(
        booking=BookingResponse.model_validate(cancellation.booking),
        refund_amount=cancellation.refund_amount,
    )


@router.put("/{booking_id}/confirm", response_model=BookingResponse)
def confirm_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> BookingResponse:
    """Confirm a pending booking if its window is still free."""

    unwrap_result(require_any_role(actor, BOOKING_MANAGER_ROLES))
    unwrap_result(require_capability(actor, lambda caps: caps.can_manage_bookings))
    service = BookingService(db)
    return unwrap_result(service.confirm_booking(booking_id, actor.user_id))
