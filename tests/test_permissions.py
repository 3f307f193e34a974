# tests/test_permissions.py

"""
Tests for role permissions and the current-user dependency.
"""

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from unittest.mock import patch, Mock

from core.errors import UnauthorizedError
from core.permission_helpers import can_approve, ensure_permission, is_admin, require_submitter
from dependencies.auth import CurrentUser, get_current_user
from models.enums import RequestKind


def user(role):
    return CurrentUser(id=f"{role}-id", email=f"{role}@example.com", role=role)


@pytest.mark.parametrize(
    "role,kinds",
    [
        ("superadmin", {"guest", "sleepover", "maintenance", "complaint"}),
        ("admin", {"guest", "sleepover", "maintenance", "complaint"}),
        ("admin-maintenance", {"maintenance", "complaint"}),
        ("admin-security", {"guest", "sleepover"}),
        ("admin-guest-management", {"guest", "sleepover"}),
        ("admin-complaints", {"complaint"}),
        ("admin-finance", set()),
        ("student", set()),
        ("newbie", set()),
    ],
)
def test_approval_rights_per_role(role, kinds):
    allowed = {kind.value for kind in RequestKind if can_approve(user(role), kind)}
    assert allowed == kinds


def test_is_admin():
    assert is_admin(user("admin-complaints"))
    assert not is_admin(user("student"))


def test_only_students_submit():
    require_submitter(user("student"))
    with pytest.raises(UnauthorizedError):
        require_submitter(user("newbie"))


def test_superadmin_has_every_permission():
    ensure_permission(user("superadmin"), "reports:read")
    with pytest.raises(UnauthorizedError):
        ensure_permission(user("admin-security"), "reports:read")


def test_only_superadmin_manages_admins():
    ensure_permission(user("superadmin"), "admins:manage")
    for role in ("admin", "admin-finance", "student"):
        with pytest.raises(UnauthorizedError):
            ensure_permission(user(role), "admins:manage")


def test_finance_office():
    assert is_admin(user("admin-finance"))
    ensure_permission(user("admin-finance"), "finance:write")
    with pytest.raises(UnauthorizedError):
        ensure_permission(user("admin-maintenance"), "finance:read")


# ============================================================
# get_current_user
# ============================================================
def credentials():
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials="test-token")


def mock_auth(uid="uid-1", email="someone@example.com"):
    mock_client = Mock()
    mock_client.auth.get_user.return_value = Mock(
        user=Mock(id=uid, email=email, user_metadata={"full_name": "Meta Name"})
    )
    return mock_client


def test_admin_row_wins(store):
    store.create("admins", {"user_id": "uid-1", "type": "admin-security", "name": "Desk"})
    store.create("users", {"id": "uid-1", "role": "student"})

    with patch("dependencies.auth.get_supabase_client", return_value=mock_auth()):
        current = get_current_user(credentials(), store)

    assert current.role == "admin-security"
    assert current.display_name == "Desk"


def test_student_profile(store):
    store.create(
        "users",
        {"id": "uid-1", "role": "student", "name": "Thandi", "surname": "Mokoena", "room_number": "A101"},
    )

    with patch("dependencies.auth.get_supabase_client", return_value=mock_auth()):
        current = get_current_user(credentials(), store)

    assert current.role == "student"
    assert current.display_name == "Thandi Mokoena"
    assert current.room_number == "A101"


def test_unknown_role_falls_back_to_newbie(store):
    store.create("users", {"id": "uid-1", "role": "warden"})

    with patch("dependencies.auth.get_supabase_client", return_value=mock_auth()):
        assert get_current_user(credentials(), store).role == "newbie"


def test_no_profile(store):
    with patch("dependencies.auth.get_supabase_client", return_value=mock_auth()):
        with pytest.raises(UnauthorizedError):
            get_current_user(credentials(), store)


def test_invalid_token(store):
    mock_client = Mock()
    mock_client.auth.get_user.side_effect = Exception("JWT expired")

    with patch("dependencies.auth.get_supabase_client", return_value=mock_client):
        with pytest.raises(HTTPException) as exc:
            get_current_user(credentials(), store)
    assert exc.value.status_code == 401


def test_missing_token_is_rejected(client):
    response = client.get("/auth/me")
    assert response.status_code in (401, 403)
