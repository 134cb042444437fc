from fastapi import APIRouter

from .availability_routes import router as availability_router
from .booking_routes import router as booking_router
from .schedule_rule_routes import router as schedule_rule_router

router = APIRouter()
router.include_router(schedule_rule_router)
router.include_router(availability_router)
router.include_router(booking_router)

__all__ = [
    "router",
    "availability_router",
    "booking_router",
    "schedule_rule_router",
]
