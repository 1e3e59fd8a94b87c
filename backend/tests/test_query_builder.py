import pytest

from conftest import NOW
from app.errors import InvalidFieldType
from app.models import Equipment, EquipmentStatus
from app.services.query_builder import (
    EQUIPMENT_QUERY, ListParams, build_list_query, clamp_limit, check_offset, resolve_sort
)


def add_equipment(db, count, **fields):
    for i in range(count):
        db.add(Equipment(name=f"Pump {i:03d}", created_at=NOW + i, updated_at=NOW + i, **fields))
    db.commit()


def test_clamp_limit():
    assert clamp_limit(None) == 10
    assert clamp_limit(None, default=20) == 20
    assert clamp_limit(0) == 1
    assert clamp_limit(-5) == 1
    assert clamp_limit(1000) == 100
    assert clamp_limit(25) == 25


def test_check_offset():
    assert check_offset(None) == 0
    assert check_offset(7) == 7
    assert check_offset(2 ** 63 - 1) == 2 ** 63 - 1
    with pytest.raises(InvalidFieldType):
        check_offset(2 ** 63)
    with pytest.raises(InvalidFieldType) as exc:
        check_offset(-1)
    assert exc.value.code == "INVALID_OFFSET"


def test_resolve_sort_falls_back_to_defaults():
    column, direction = resolve_sort(EQUIPMENT_QUERY, "name", "asc")
    assert column is Equipment.name
    assert direction == "asc"

    column, direction = resolve_sort(EQUIPMENT_QUERY, "name; DROP TABLE equipment", "sideways")
    assert column is Equipment.created_at
    assert direction == "desc"


def test_default_page_and_order(db_session):
    add_equipment(db_session, 15)

    page = build_list_query(db_session, EQUIPMENT_QUERY, ListParams()).all()
    assert len(page) == 10
    # Newest first
    assert page[0].name == "Pump 014"


def test_pages_do_not_overlap(db_session):
    add_equipment(db_session, 12)

    first = build_list_query(db_session, EQUIPMENT_QUERY, ListParams(limit=5, offset=0, sort="name", order="asc")).all()
    second = build_list_query(db_session, EQUIPMENT_QUERY, ListParams(limit=5, offset=5, sort="name", order="asc")).all()

    assert not {e.id for e in first} & {e.id for e in second}
    assert [e.name for e in first + second] == [f"Pump {i:03d}" for i in range(10)]


def test_filters_are_anded_and_unknown_keys_ignored(db_session):
    add_equipment(db_session, 2, location="ICU", status=EquipmentStatus.MAINTENANCE)
    add_equipment(db_session, 3, location="ICU")
    add_equipment(db_session, 1, location="ER", status=EquipmentStatus.MAINTENANCE)

    params = ListParams(filters={"location": "ICU", "status": "maintenance", "color": "red"}, limit=100)
    rows = build_list_query(db_session, EQUIPMENT_QUERY, params).all()
    assert len(rows) == 2
    assert all(e.location == "ICU" and e.status == EquipmentStatus.MAINTENANCE for e in rows)


def test_search_spans_text_columns(db_session):
    db_session.add_all([
        Equipment(name="Infusion pump", manufacturer="Baxter", created_at=NOW, updated_at=NOW),
        Equipment(name="Monitor", model="IntelliVue", created_at=NOW, updated_at=NOW),
        Equipment(name="Ventilator", serial_number="VX-9", created_at=NOW, updated_at=NOW),
    ])
    db_session.commit()

    def names(term):
        rows = build_list_query(db_session, EQUIPMENT_QUERY, ListParams(search=term, sort="name", order="asc")).all()
        return [e.name for e in rows]

    assert names("Baxter") == ["Infusion pump"]
    assert names("Intelli") == ["Monitor"]
    assert names("VX-") == ["Ventilator"]
    assert names("o") == ["Infusion pump", "Monitor", "Ventilator"]
    assert names("baxter") == []
