# tests/test_requests_api.py

"""
Tests for the request endpoints: envelope, status codes and role gating.
"""

from datetime import date, timedelta

from fastapi.testclient import TestClient

from dependencies.auth import CurrentUser


COMPLAINT = {"title": "Broken window", "description": "Cracked pane in the lounge", "category": "security"}
MAINTENANCE = {"title": "Leaky tap", "description": "Drips all night", "room_number": "101", "priority": "high"}


def sleepover_body(**overrides):
    today = date.today()
    body = {
        "guest_name": "Jane",
        "guest_surname": "Doe",
        "guest_phone_number": "0821234567",
        "room_number": "12",
        "start_date": (today - timedelta(days=1)).isoformat(),
        "end_date": (today + timedelta(days=1)).isoformat(),
    }
    body.update(overrides)
    return body


# ============================================================
# SUBMIT
# ============================================================
def test_student_submits_complaint(client: TestClient, login_as, student_user, store):
    login_as(student_user)

    response = client.post("/complaints", json=COMPLAINT)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    doc = store.get("complaints", data["id"])
    assert doc["user_id"] == student_user.id
    assert doc["status"] == "pending"
    # Filled in from the student's profile
    assert doc["room_number"] == "A101"
    assert doc["tenant_code"] == "T-001"


def test_submit_missing_field_is_400(client: TestClient, login_as, student_user):
    login_as(student_user)

    response = client.post("/complaints", json={"description": "No title"})

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_submit_blank_field_is_400(client: TestClient, login_as, student_user):
    login_as(student_user)

    response = client.post("/maintenance", json={**MAINTENANCE, "title": "  "})

    assert response.status_code == 400
    assert response.json() == {"error": "title is required", "code": "validation_error"}


def test_newbie_cannot_submit(client: TestClient, login_as, newbie_user):
    login_as(newbie_user)

    response = client.post("/complaints", json=COMPLAINT)

    assert response.status_code == 403
    assert response.json()["code"] == "unauthorized"


def test_sleepover_with_too_many_guests(client: TestClient, login_as, student_user):
    login_as(student_user)
    extra = [{"name": f"G{i}", "surname": "S", "phone_number": "0800000000"} for i in range(3)]

    response = client.post("/sleepovers", json=sleepover_body(additional_guests=extra))

    assert response.status_code == 400
    assert response.json()["code"] == "capacity_exceeded"


def test_guest_batch_returns_primary_id(client: TestClient, login_as, student_user, store):
    login_as(student_user)
    body = {
        "first_name": "Sipho",
        "last_name": "Dlamini",
        "phone_number": "0831112222",
        "purpose": "Study group",
        "from_date": date.today().isoformat(),
        "additional_guests": [{"first_name": "Ayanda", "last_name": "Zulu", "phone_number": "0844444444"}],
    }

    response = client.post("/guests", json=body)

    assert response.status_code == 200
    primary_id = response.json()["id"]
    assert store.get("guest_requests", primary_id)["first_name"] == "Sipho"
    assert len(store.all("guest_requests")) == 2


# ============================================================
# LIST / GET
# ============================================================
def test_student_only_sees_own(client: TestClient, login_as, student_user, other_student):
    login_as(other_student)
    client.post("/complaints", json=COMPLAINT)
    login_as(student_user)
    client.post("/complaints", json=COMPLAINT)

    response = client.get("/complaints", params={"scope": "all"})

    assert response.status_code == 200
    complaints = response.json()["complaints"]
    assert len(complaints) == 1
    assert complaints[0]["user_id"] == student_user.id


def test_admin_lists_pending(client: TestClient, login_as, student_user, admin_user):
    login_as(student_user)
    first = client.post("/maintenance", json=MAINTENANCE).json()["id"]
    second = client.post("/maintenance", json=MAINTENANCE).json()["id"]

    login_as(admin_user)
    client.patch(f"/maintenance/{first}", json={"status": "completed"})

    response = client.get("/maintenance", params={"scope": "pending"})
    assert [r["id"] for r in response.json()["requests"]] == [second]

    response = client.get("/maintenance", params={"status": "completed"})
    assert [r["id"] for r in response.json()["requests"]] == [first]


def test_list_rejects_unknown_status(client: TestClient, login_as, admin_user):
    login_as(admin_user)

    response = client.get("/complaints", params={"status": "approved"})

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_list_rejects_unknown_scope(client: TestClient, login_as, admin_user):
    login_as(admin_user)

    response = client.get("/complaints", params={"scope": "everything"})

    assert response.status_code == 400


def test_get_unknown_request(client: TestClient, login_as, admin_user):
    login_as(admin_user)

    response = client.get("/complaints/missing")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_student_cannot_read_other_students_request(client: TestClient, login_as, student_user, other_student):
    login_as(other_student)
    request_id = client.post("/complaints", json=COMPLAINT).json()["id"]

    login_as(student_user)
    response = client.get(f"/complaints/{request_id}")

    assert response.status_code == 403


# ============================================================
# TRANSITION
# ============================================================
def test_admin_transition_flow(client: TestClient, login_as, student_user, admin_user):
    login_as(student_user)
    request_id = client.post("/maintenance", json=MAINTENANCE).json()["id"]

    login_as(admin_user)
    response = client.patch(f"/maintenance/{request_id}", json={"status": "in_progress"})
    assert response.status_code == 200
    assert response.json()["request"]["status"] == "in_progress"

    response = client.patch(
        f"/maintenance/{request_id}", json={"status": "completed", "admin_response": "Fixed"}
    )
    assert response.json()["request"]["admin_response"] == "Fixed"

    response = client.patch(f"/maintenance/{request_id}", json={"status": "pending"})
    assert response.status_code == 400
    assert response.json()["code"] == "already_finalized"


def test_student_cannot_transition(client: TestClient, login_as, student_user):
    login_as(student_user)
    request_id = client.post("/complaints", json=COMPLAINT).json()["id"]

    response = client.patch(f"/complaints/{request_id}", json={"status": "resolved"})

    assert response.status_code == 403


def test_maintenance_admin_is_limited_to_its_office(
    client: TestClient, login_as, student_user, maintenance_admin
):
    login_as(student_user)
    sleepover_id = client.post("/sleepovers", json=sleepover_body()).json()["id"]
    complaint_id = client.post("/complaints", json=COMPLAINT).json()["id"]

    login_as(maintenance_admin)
    assert client.patch(f"/sleepovers/{sleepover_id}", json={"status": "approved"}).status_code == 403
    assert client.patch(f"/complaints/{complaint_id}", json={"status": "resolved"}).status_code == 200


# ============================================================
# CHECKOUT
# ============================================================
def test_sleepover_checkout_flow(client: TestClient, login_as, student_user, admin_user):
    login_as(student_user)
    request_id = client.post("/sleepovers", json=sleepover_body()).json()["id"]
    login_as(admin_user)
    client.patch(f"/sleepovers/{request_id}", json={"status": "approved"})

    login_as(student_user)
    response = client.post("/sleepovers/checkout", json={"pin": "0000"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid security code", "code": "invalid_pin"}

    response = client.post("/sleepovers/checkout", json={"pin": "3693"})
    assert response.status_code == 200
    data = response.json()
    assert data["request_id"] == request_id
    assert data["guest_name"] == "Jane Doe"
    assert data["sign_out_time"]


def test_sleepover_checkout_with_nothing_active(client: TestClient, login_as, student_user):
    login_as(student_user)

    response = client.post("/sleepovers/checkout", json={"pin": "3693"})

    assert response.status_code == 400
    assert response.json()["code"] == "no_active_sleepover"


def test_guest_checkout_by_security_admin(client: TestClient, login_as, student_user):
    login_as(student_user)
    body = {
        "first_name": "Sipho",
        "last_name": "Dlamini",
        "phone_number": "0831112222",
        "purpose": "Visit",
        "from_date": date.today().isoformat(),
    }
    guest_id = client.post("/guests", json=body).json()["id"]

    login_as(CurrentUser(id="sec-1", email="desk@example.com", role="admin-security"))
    response = client.post(f"/guests/{guest_id}/checkout", json={"pin": "1005"})

    assert response.status_code == 200
    assert response.json()["request"]["status"] == "checked_out"


def test_student_cannot_checkout_other_students_guest(
    client: TestClient, login_as, student_user, other_student
):
    login_as(other_student)
    body = {
        "first_name": "Sipho",
        "last_name": "Dlamini",
        "phone_number": "0831112222",
        "purpose": "Visit",
        "from_date": date.today().isoformat(),
    }
    guest_id = client.post("/guests", json=body).json()["id"]

    login_as(student_user)
    response = client.post(f"/guests/{guest_id}/checkout", json={"pin": "1005"})

    assert response.status_code == 403


# ============================================================
# ASSIGN / LIST OPTIONS
# ============================================================
def test_admin_assigns_staff(client: TestClient, login_as, student_user, maintenance_admin):
    login_as(student_user)
    request_id = client.post("/maintenance", json=MAINTENANCE).json()["id"]

    login_as(maintenance_admin)
    response = client.patch(f"/maintenance/{request_id}/assign", json={"staff_id": "staff-7"})

    assert response.status_code == 200
    assert response.json()["request"]["assigned_staff_id"] == "staff-7"


def test_student_cannot_assign(client: TestClient, login_as, student_user):
    login_as(student_user)
    request_id = client.post("/complaints", json=COMPLAINT).json()["id"]

    response = client.patch(f"/complaints/{request_id}/assign", json={"staff_id": "staff-7"})

    assert response.status_code == 403


def test_assign_route_only_for_tickets_and_complaints(client: TestClient, login_as, admin_user):
    login_as(admin_user)

    response = client.patch("/sleepovers/any-id/assign", json={"staff_id": "staff-7"})

    assert response.status_code == 404


def test_scope_and_status_together_is_400(client: TestClient, login_as, admin_user):
    login_as(admin_user)

    response = client.get("/complaints", params={"scope": "mine", "status": "pending"})

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"
