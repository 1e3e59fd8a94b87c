from conftest import NOW, DAY_MS


def test_example_scenario_overdue_view(client, auth_headers):
    resp = client.post("/api/equipment", json={"name": "ECG-1", "serialNumber": "SN001"}, headers=auth_headers)
    assert resp.json()["id"] == 1

    resp = client.post(
        "/api/maintenance-schedules",
        json={"equipmentId": 1, "title": "Annual Check", "nextDue": NOW - 1000},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["id"] == 1

    resp = client.get("/api/maintenance-schedules/overdue", headers=auth_headers)
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()] == [1]


def test_create_schedule_defaults(make_equipment, make_schedule):
    pump = make_equipment()
    schedule = make_schedule(pump["id"])
    assert schedule["priority"] == "medium"
    assert schedule["isActive"] is True
    assert schedule["nextDue"] is None


def test_create_schedule_for_unknown_equipment(client, auth_headers):
    resp = client.post(
        "/api/maintenance-schedules",
        json={"equipmentId": 999, "title": "Annual Check"},
        headers=auth_headers,
    )
    assert resp.status_code == 404
    assert resp.json() == {
        "error": "Equipment not found",
        "code": "EQUIPMENT_NOT_FOUND",
        "field": "equipmentId",
    }
    assert client.get("/api/maintenance-schedules", headers=auth_headers).json() == []


def test_create_schedule_validation_codes(client, auth_headers, make_equipment):
    pump = make_equipment()

    resp = client.post("/api/maintenance-schedules", json={"title": "x"}, headers=auth_headers)
    assert resp.json()["code"] == "MISSING_EQUIPMENT_ID"

    resp = client.post(
        "/api/maintenance-schedules",
        json={"equipmentId": "abc", "title": "x"},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_EQUIPMENT_ID"

    resp = client.post(
        "/api/maintenance-schedules",
        json={"equipmentId": pump["id"], "title": ""},
        headers=auth_headers,
    )
    assert resp.json()["code"] == "MISSING_TITLE"

    resp = client.post(
        "/api/maintenance-schedules",
        json={"equipmentId": pump["id"], "title": "x", "priority": "urgent"},
        headers=auth_headers,
    )
    assert resp.json()["code"] == "INVALID_PRIORITY"


def test_overdue_view_membership_and_order(client, auth_headers, make_equipment, make_schedule):
    pump = make_equipment()
    late = make_schedule(pump["id"], title="late", nextDue=NOW - 10 * DAY_MS)
    later = make_schedule(pump["id"], title="slightly late", nextDue=NOW - 1)
    make_schedule(pump["id"], title="inactive", nextDue=NOW - DAY_MS, isActive=False)
    make_schedule(pump["id"], title="due now", nextDue=NOW)
    make_schedule(pump["id"], title="future", nextDue=NOW + DAY_MS)
    make_schedule(pump["id"], title="undated")

    resp = client.get("/api/maintenance-schedules/overdue", headers=auth_headers)
    assert [s["id"] for s in resp.json()] == [late["id"], later["id"]]


def test_overdue_view_priority_filter_and_paging(client, auth_headers, make_equipment, make_schedule):
    pump = make_equipment()
    for i in range(3):
        make_schedule(pump["id"], title=f"high {i}", nextDue=NOW - (10 - i), priority="high")
    make_schedule(pump["id"], title="low", nextDue=NOW - 100, priority="low")

    resp = client.get("/api/maintenance-schedules/overdue", params={"priority": "high"}, headers=auth_headers)
    assert [s["title"] for s in resp.json()] == ["high 0", "high 1", "high 2"]

    resp = client.get(
        "/api/maintenance-schedules/overdue",
        params={"priority": "high", "limit": 1, "offset": 1},
        headers=auth_headers,
    )
    assert [s["title"] for s in resp.json()] == ["high 1"]


def test_upcoming_view_window_boundaries(client, auth_headers, make_equipment, make_schedule):
    pump = make_equipment()
    now_due = make_schedule(pump["id"], title="now", nextDue=NOW)
    edge = make_schedule(pump["id"], title="edge", nextDue=NOW + 30 * DAY_MS)
    soon = make_schedule(pump["id"], title="soon", nextDue=NOW + DAY_MS)
    make_schedule(pump["id"], title="past window", nextDue=NOW + 30 * DAY_MS + 1)
    make_schedule(pump["id"], title="overdue", nextDue=NOW - 1)
    make_schedule(pump["id"], title="inactive", nextDue=NOW + DAY_MS, isActive=False)

    resp = client.get("/api/maintenance-schedules/upcoming", headers=auth_headers)
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()] == [now_due["id"], soon["id"], edge["id"]]


def test_due_views_reject_bad_paging(client, auth_headers):
    resp = client.get("/api/maintenance-schedules/upcoming", params={"limit": "ten"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_LIMIT"

    resp = client.get("/api/maintenance-schedules/overdue", params={"offset": -1}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_OFFSET"


def test_list_schedules_filters(client, auth_headers, make_equipment, make_schedule):
    pump = make_equipment()
    monitor = make_equipment(name="Monitor")
    make_schedule(pump["id"], title="pump active")
    make_schedule(pump["id"], title="pump inactive", isActive=False)
    make_schedule(monitor["id"], title="monitor", assignedTo="Dana")

    resp = client.get(
        "/api/maintenance-schedules",
        params={"equipmentId": pump["id"], "isActive": "false"},
        headers=auth_headers,
    )
    assert [s["title"] for s in resp.json()] == ["pump inactive"]

    resp = client.get("/api/maintenance-schedules", params={"assignedTo": "Dana"}, headers=auth_headers)
    assert [s["title"] for s in resp.json()] == ["monitor"]


def test_update_schedule_checks_equipment_reference(client, auth_headers, make_equipment, make_schedule):
    pump = make_equipment()
    schedule = make_schedule(pump["id"])

    resp = client.put(
        f"/api/maintenance-schedules/{schedule['id']}",
        json={"equipmentId": 77},
        headers=auth_headers,
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == "EQUIPMENT_NOT_FOUND"

    resp = client.put(
        f"/api/maintenance-schedules/{schedule['id']}",
        json={"nextDue": NOW + DAY_MS, "isActive": False},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["nextDue"] == NOW + DAY_MS
    assert resp.json()["isActive"] is False
    assert resp.json()["title"] == "Annual Check"


def test_delete_schedule_keeps_its_logs(client, auth_headers, make_equipment, make_schedule, make_log):
    pump = make_equipment()
    schedule = make_schedule(pump["id"])
    log = make_log(pump["id"], scheduleId=schedule["id"])

    resp = client.delete(f"/api/maintenance-schedules/{schedule['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == schedule["id"]

    resp = client.get(f"/api/maintenance-logs/{log['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["scheduleId"] is None


def test_update_rejects_blank_priority(client, auth_headers, make_equipment, make_schedule):
    pump = make_equipment()
    schedule = make_schedule(pump["id"], priority="critical")

    resp = client.put(
        f"/api/maintenance-schedules/{schedule['id']}",
        json={"priority": "  "},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_PRIORITY"

    resp = client.get(f"/api/maintenance-schedules/{schedule['id']}", headers=auth_headers)
    assert resp.json()["priority"] == "critical"


def test_single_schedule_by_query_id_is_an_object(client, auth_headers, make_equipment, make_schedule):
    pump = make_equipment()
    schedule = make_schedule(pump["id"])

    resp = client.get("/api/maintenance-schedules", params={"id": schedule["id"]}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["title"] == "Annual Check"

    resp = client.get("/api/maintenance-schedules", params={"id": 404}, headers=auth_headers)
    assert resp.status_code == 404


def test_out_of_range_equipment_filter_is_rejected(client, auth_headers):
    resp = client.get("/api/maintenance-schedules", params={"equipmentId": 10 ** 20}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_EQUIPMENT_ID"

    resp = client.get("/api/maintenance-schedules/overdue", params={"offset": 10 ** 20}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_OFFSET"
