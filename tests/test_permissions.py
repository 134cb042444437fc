import pytest
from fastapi import HTTPException

from turfbook.core.security import actor_from_payload
from turfbook.services.errors import ErrorCode
from turfbook.services.permissions import (
    Actor,
    Capabilities,
    Role,
    require_any_role,
    require_capability,
)


def test_capabilities_read_known_claims_only():
    capabilities = Capabilities.from_claims(
        {"canManageBookings": True, "canUpdateSchedules": "yes", "canFly": True}
    )

    assert capabilities.can_manage_bookings is True
    assert capabilities.can_update_schedules is False
    assert capabilities == Capabilities(can_manage_bookings=True)


def test_require_any_role():
    actor = Actor(user_id=1, role=Role.CONSUMER)

    assert require_any_role(actor, (Role.CONSUMER,)).ok
    denied = require_any_role(actor, (Role.COMPANY, Role.ADMIN))
    assert denied.error is ErrorCode.UNAUTHORIZED
    assert "consumer" in denied.message


def test_company_owner_bypasses_capability_check():
    actor = Actor(user_id=1, role=Role.COMPANY)

    assert require_capability(actor, lambda caps: caps.can_manage_staff).ok


def test_staff_needs_the_capability():
    staff = Actor(user_id=2, role=Role.MAINTENANCE_STAFF, capabilities=Capabilities(can_update_schedules=True))

    assert require_capability(staff, lambda caps: caps.can_update_schedules).ok
    assert require_capability(staff, lambda caps: caps.can_manage_bookings).error is ErrorCode.UNAUTHORIZED


def test_consumer_never_passes_capability_check():
    actor = Actor(user_id=3, role=Role.CONSUMER, capabilities=Capabilities(can_manage_bookings=True))

    assert not require_capability(actor, lambda caps: caps.can_manage_bookings).ok


def test_actor_from_payload_uses_role_defaults():
    actor = actor_from_payload({"sub": "5", "role": "customer_service"})

    assert actor.user_id == 5
    assert actor.role is Role.CUSTOMER_SERVICE
    assert actor.capabilities.can_manage_bookings is True
    assert actor.capabilities.can_update_schedules is False


def test_actor_from_payload_prefers_explicit_permissions():
    actor = actor_from_payload(
        {"sub": "6", "role": "facility_manager", "permissions": {"canAccessReports": True}}
    )

    assert actor.capabilities == Capabilities(can_access_reports=True)


def test_actor_from_payload_rejects_bad_claims():
    with pytest.raises(HTTPException) as excinfo:
        actor_from_payload({"sub": "x", "role": "consumer"})

    assert excinfo.value.status_code == 401

    with pytest.raises(HTTPException):
        actor_from_payload({"sub": "1", "role": "pilot"})
