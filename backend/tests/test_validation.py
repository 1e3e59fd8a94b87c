import pytest
from sqlalchemy.exc import IntegrityError

from conftest import NOW
from app.errors import (
    field_code, InvalidIdentifier, MissingRequiredField, InvalidFieldType, NotFound,
    DuplicateValue, ReferentialIntegrityViolation, Internal, http_error_body
)
from app.models import Equipment, MaintenanceSchedule
from app.services.record_service import EquipmentService, ScheduleService, LogService
from app.validation import parse_identifier


def test_field_code():
    assert field_code("equipmentId") == "EQUIPMENT_ID"
    assert field_code("serial_number") == "SERIAL_NUMBER"
    assert field_code("title") == "TITLE"


@pytest.mark.parametrize("raw,expected", [("1", 1), (" 42 ", 42), (7, 7)])
def test_parse_identifier(raw, expected):
    assert parse_identifier(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "1.5", "0", "-3", str(2 ** 63), "9" * 5000])
def test_parse_identifier_rejects(raw):
    with pytest.raises(InvalidIdentifier):
        parse_identifier(raw)


def test_error_bodies():
    assert MissingRequiredField("title").to_dict() == {
        "error": "title is required",
        "code": "MISSING_TITLE",
        "field": "title",
    }
    assert InvalidFieldType("cost").status_code == 400
    assert NotFound("gone").to_dict() == {"error": "gone", "code": "NOT_FOUND"}
    assert ReferentialIntegrityViolation("blocked").status_code == 409


def test_schedule_write_against_vanished_equipment_maps_to_not_found(db_session):
    exc = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))
    error = ScheduleService.integrity_error(db_session, exc, {"equipment_id": 9})
    assert isinstance(error, NotFound)
    assert error.code == "EQUIPMENT_NOT_FOUND"


def test_log_integrity_error_without_missing_reference_is_internal(db_session):
    db_session.add(Equipment(name="Pump", created_at=NOW, updated_at=NOW))
    db_session.commit()

    exc = IntegrityError("INSERT", {}, Exception("CHECK constraint failed"))
    error = LogService.integrity_error(db_session, exc, {"equipment_id": 1})
    assert isinstance(error, Internal)


def test_equipment_unique_violation_maps_to_duplicate(db_session):
    exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: equipment.serial_number"))
    error = EquipmentService.integrity_error(db_session, exc, {})
    assert isinstance(error, DuplicateValue)
    assert error.code == "DUPLICATE_SERIAL_NUMBER"


def test_service_create_checks_references_before_writing(db_session):
    with pytest.raises(NotFound) as exc:
        ScheduleService.create(db_session, {"equipment_id": 3, "title": "Annual Check"}, NOW)
    assert exc.value.field == "equipmentId"
    assert db_session.query(MaintenanceSchedule).count() == 0


def test_malformed_json_body(client, auth_headers):
    resp = client.post(
        "/api/equipment",
        content="{not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_BODY"


def test_http_errors_share_the_error_shape():
    assert http_error_body(401, "Could not validate credentials") == {
        "error": "Could not validate credentials",
        "code": "UNAUTHORIZED",
    }
    assert http_error_body(418, {"reason": "teapot"}) == {"error": "Request failed", "code": "HTTP_ERROR"}


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"
