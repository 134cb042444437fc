import logging

from turfbook.models import AuditLog
from turfbook.services.audit_service import AuditAction, AuditService


def test_record_event_persists_and_logs(db, field, caplog):
    caplog.set_level(logging.INFO, logger="turfbook.services.audit_service")

    AuditService(db).record_event(
        AuditAction.FACILITY_UPDATED, 4, {"status": "inactive"}, field_id=field.id_field
    )

    log = db.query(AuditLog).one()
    assert log.details == {"status": "inactive"}
    assert "AUDIT action=facility_updated user=4" in caplog.text


def test_event_without_actor_is_only_logged(db):
    AuditService(db).record_event(AuditAction.BOOKING_UPDATED, None, {"bookingId": 1})

    assert db.query(AuditLog).count() == 0
