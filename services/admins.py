# services/admins.py

"""
Admin accounts.

An ``admins`` row turns an auth uid into an admin; its ``type`` is the role
``get_current_user`` resolves. Only superadmins manage these rows.
"""

from typing import Callable, List

from core.errors import ConflictError, NotFoundError, ValidationError
from core.logging_config import logger
from core.permissions import ADMIN_ROLES
from core.store import EntityStore
from core.utils import sanitize, utcnow
from models.enums import Role

ADMINS_COLLECTION = "admins"

EDITABLE_FIELDS = ("email", "name", "type")


def _check_type(admin_type):
    if admin_type not in ADMIN_ROLES:
        raise ValidationError(f"type must be one of: {', '.join(sorted(ADMIN_ROLES))}")


def _role_for(admin_type: str) -> str:
    return Role.superadmin.value if admin_type == Role.superadmin.value else Role.admin.value


def list_admins(store: EntityStore) -> List[dict]:
    return store.query(ADMINS_COLLECTION, order_by="created_at", descending=True)


def get_admin(store: EntityStore, admin_id: str) -> dict:
    admin = store.get(ADMINS_COLLECTION, admin_id)
    if not admin:
        raise NotFoundError("Admin not found")
    return admin


def create_admin(store: EntityStore, payload: dict, created_by: str, clock: Callable = utcnow) -> str:
    data = sanitize(dict(payload))
    for field in ("user_id", "email", "name", "type"):
        if not data.get(field):
            raise ValidationError(f"{field} is required")
    _check_type(data["type"])

    if store.query(ADMINS_COLLECTION, [("user_id", "eq", data["user_id"])]):
        raise ConflictError("This account is already an admin")

    now = clock()
    admin_id = store.create(
        ADMINS_COLLECTION,
        {
            "user_id": data["user_id"],
            "email": data["email"].lower(),
            "name": data["name"],
            "type": data["type"],
            "role": _role_for(data["type"]),
            "created_at": now,
            "updated_at": now,
        },
    )
    logger.info(f"Superadmin {created_by} made user {data['user_id']} a {data['type']} admin")
    return admin_id


def update_admin(store: EntityStore, admin_id: str, changes: dict, clock: Callable = utcnow) -> dict:
    get_admin(store, admin_id)

    data = sanitize({k: v for k, v in changes.items() if k in EDITABLE_FIELDS})
    for field, value in data.items():
        if not value:
            raise ValidationError(f"{field} cannot be empty")
    if "type" in data:
        _check_type(data["type"])
        data["role"] = _role_for(data["type"])
    if "email" in data:
        data["email"] = data["email"].lower()

    data["updated_at"] = clock()
    updated = store.update(ADMINS_COLLECTION, admin_id, data)
    if updated is None:
        raise NotFoundError("Admin not found")
    logger.info(f"Admin record {admin_id} updated")
    return updated


def delete_admin(store: EntityStore, admin_id: str, requester_id: str):
    admin = get_admin(store, admin_id)
    if admin.get("user_id") == requester_id:
        raise ValidationError("You cannot remove your own admin account")

    if not store.delete(ADMINS_COLLECTION, admin_id):
        raise NotFoundError("Admin not found")
    logger.info(f"Superadmin {requester_id} removed admin record {admin_id}")
