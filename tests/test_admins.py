# tests/test_admins.py

"""
Tests for admin account management.
"""

import pytest

from core.errors import ConflictError, NotFoundError, ValidationError
from dependencies.auth import CurrentUser, lookup_profile
from services.admins import create_admin, delete_admin, list_admins, update_admin


NEW_ADMIN = {"user_id": "uid-9", "email": "Desk@Example.com", "name": "Front Desk", "type": "admin-security"}


def test_create_admin(store, clock):
    admin_id = create_admin(store, NEW_ADMIN, "super-1", clock=clock)

    admin = store.get("admins", admin_id)
    assert admin["email"] == "desk@example.com"
    assert admin["role"] == "admin"
    assert admin["created_at"] == clock.now
    # The new row is what role lookup reads
    assert lookup_profile(store, "uid-9")["role"] == "admin-security"


def test_create_superadmin_role(store):
    admin_id = create_admin(store, {**NEW_ADMIN, "type": "superadmin"}, "super-1")
    assert store.get("admins", admin_id)["role"] == "superadmin"


def test_create_rejects_unknown_type(store):
    with pytest.raises(ValidationError):
        create_admin(store, {**NEW_ADMIN, "type": "janitor"}, "super-1")


def test_create_rejects_duplicate_account(store):
    create_admin(store, NEW_ADMIN, "super-1")
    with pytest.raises(ConflictError):
        create_admin(store, NEW_ADMIN, "super-1")


def test_update_changes_type_and_role(store):
    admin_id = create_admin(store, NEW_ADMIN, "super-1")

    admin = update_admin(store, admin_id, {"type": "superadmin"})

    assert admin["type"] == "superadmin"
    assert admin["role"] == "superadmin"


def test_update_unknown(store):
    with pytest.raises(NotFoundError):
        update_admin(store, "missing", {"name": "x"})


def test_cannot_delete_self(store):
    admin_id = create_admin(store, NEW_ADMIN, "super-1")

    with pytest.raises(ValidationError):
        delete_admin(store, admin_id, requester_id="uid-9")

    delete_admin(store, admin_id, requester_id="super-1")
    assert list_admins(store) == []


# ============================================================
# API
# ============================================================
superadmin = CurrentUser(id="super-1", email="boss@example.com", role="superadmin")


def test_superadmin_manages_admins(client, login_as):
    login_as(superadmin)

    admin_id = client.post("/admins", json=NEW_ADMIN).json()["id"]
    assert [a["id"] for a in client.get("/admins").json()["admins"]] == [admin_id]

    response = client.patch(f"/admins/{admin_id}", json={"name": "Night Desk"})
    assert response.json()["admin"]["name"] == "Night Desk"

    assert client.delete(f"/admins/{admin_id}").status_code == 200
    assert client.delete(f"/admins/{admin_id}").status_code == 404


def test_residence_admin_cannot_manage_admins(client, login_as, admin_user):
    login_as(admin_user)

    assert client.get("/admins").status_code == 403
    assert client.post("/admins", json=NEW_ADMIN).status_code == 403


def test_create_admin_bad_email_is_400(client, login_as):
    login_as(superadmin)

    response = client.post("/admins", json={**NEW_ADMIN, "email": "nope"})
    assert response.status_code == 400
