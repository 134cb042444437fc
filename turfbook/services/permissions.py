"""Actor identity, roles and staff capabilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional

from turfbook.services.errors import ErrorCode, ServiceResult


class Role(str, Enum):
    ADMIN = "admin"
    COMPANY = "company"
    CONSUMER = "consumer"
    FACILITY_MANAGER = "facility_manager"
    MAINTENANCE_STAFF = "maintenance_staff"
    CUSTOMER_SERVICE = "customer_service"


STAFF_ROLES = frozenset(
    {Role.FACILITY_MANAGER, Role.MAINTENANCE_STAFF, Role.CUSTOMER_SERVICE}
)


@dataclass(frozen=True)
class Capabilities:
    can_manage_staff: bool = False
    can_manage_bookings: bool = False
    can_update_schedules: bool = False
    can_respond_to_reviews: bool = False
    can_access_reports: bool = False
    can_update_pricing: bool = False
    can_modify_facilities: bool = False

    @classmethod
    def from_claims(cls, claims: Optional[Mapping[str, Any]]) -> "Capabilities":
        """Read the permission claims of a token, one named flag at a time."""

        if not claims:
            return cls()
        return cls(
            can_manage_staff=claims.get("canManageStaff") is True,
            can_manage_bookings=claims.get("canManageBookings") is True,
            can_update_schedules=claims.get("canUpdateSchedules") is True,
            can_respond_to_reviews=claims.get("canRespondToReviews") is True,
            can_access_reports=claims.get("canAccessReports") is True,
            can_update_pricing=claims.get("canUpdatePricing") is True,
            can_modify_facilities=claims.get("canModifyFacilities") is True,
        )


DEFAULT_STAFF_CAPABILITIES = {
    Role.FACILITY_MANAGER: Capabilities(
        can_manage_staff=True,
        can_manage_bookings=True,
        can_update_schedules=True,
        can_respond_to_reviews=True,
        can_access_reports=True,
        can_update_pricing=True,
        can_modify_facilities=True,
    ),
    Role.MAINTENANCE_STAFF: Capabilities(can_update_schedules=True),
    Role.CUSTOMER_SERVICE: Capabilities(
        can_manage_bookings=True,
        can_respond_to_reviews=True,
        can_access_reports=True,
    ),
}


@dataclass(frozen=True)
class Actor:
    user_id: int
    role: Role
    capabilities: Capabilities = field(default_factory=Capabilities)


def require_any_role(actor: Actor, allowed_roles: Iterable[Role]) -> ServiceResult[None]:
    if actor.role in set(allowed_roles):
        return ServiceResult.success()
    return ServiceResult.failure(
        ErrorCode.UNAUTHORIZED,
        f"Role '{actor.role.value}' is not allowed to perform this action",
    )


def require_capability(
    actor: Actor,
    check: Callable[[Capabilities], bool],
) -> ServiceResult[None]:
    """Staff members need the capability; company owners and admins bypass it."""

    if actor.role in (Role.COMPANY, Role.ADMIN):
        return ServiceResult.success()
    if actor.role in STAFF_ROLES and check(actor.capabilities):
        return ServiceResult.success()
    return ServiceResult.failure(
        ErrorCode.UNAUTHORIZED,
        "Missing staff permission for this action",
    )


__all__ = [
    "Actor",
    "Capabilities",
    "DEFAULT_STAFF_CAPABILITIES",
    "Role",
    "STAFF_ROLES",
    "require_any_role",
    "require_capability",
]
