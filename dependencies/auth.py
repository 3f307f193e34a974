from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.errors import UnauthorizedError
from core.logging_config import logger
from core.store import EntityStore, get_store
from core.supabase_client import get_supabase_client
from core.permissions import ROLE_PERMISSIONS


bearer_scheme = HTTPBearer()

USERS_COLLECTION = "users"
ADMINS_COLLECTION = "admins"


# ============================================================
# Current User Model (principal + residence profile)
# ============================================================
class CurrentUser(BaseModel):
    id: str                         # Supabase Auth UID
    email: str
    role: str

    display_name: Optional[str] = None
    room_number: Optional[str] = None
    tenant_code: Optional[str] = None


# ============================================================
# ROLE LOOKUP (residence tables, not auth metadata)
# ============================================================
def lookup_profile(store: EntityStore, user_id: str) -> Optional[dict]:
    """
    Resolve the residence profile for an auth uid.

    An ``admins`` row wins: its ``type`` is the admin role. Otherwise the
    ``users`` row supplies ``role`` (student / newbie).
    """
    admins = store.query(ADMINS_COLLECTION, [("user_id", "eq", user_id)])
    if admins:
        admin = admins[0]
        return {
            "role": admin.get("type") or "admin",
            "display_name": admin.get("name"),
        }

    user = store.get(USERS_COLLECTION, user_id)
    if user:
        name = " ".join(p for p in (user.get("name"), user.get("surname")) if p)
        return {
            "role": user.get("role") or "newbie",
            "display_name": name or None,
            "room_number": user.get("room_number"),
            "tenant_code": user.get("tenant_code"),
        }

    return None


# ============================================================
# AUTH DECODING (Supabase: validates JWT + fetches profile)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    store: EntityStore = Depends(get_store),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
    except Exception:
        raise unauthorized
    if not auth_resp or not auth_resp.user:
        raise unauthorized

    auth_user = auth_resp.user
    if not auth_user.email:
        raise unauthorized

    # ---------------------------------------------------------
    # Residence profile → role
    # ---------------------------------------------------------
    profile = lookup_profile(store, auth_user.id)
    if not profile:
        logger.warning(f"Authenticated user {auth_user.id} has no residence profile")
        raise UnauthorizedError("No residence profile for this account")

    role = profile["role"]
    if role not in ROLE_PERMISSIONS:
        logger.warning(f"Unknown role '{role}' for user {auth_user.id}; treating as newbie")
        role = "newbie"

    metadata = auth_user.user_metadata or {}
    return CurrentUser(
        id=auth_user.id,
        email=auth_user.email,
        role=role,
        display_name=profile.get("display_name") or metadata.get("full_name"),
        room_number=profile.get("room_number"),
        tenant_code=profile.get("tenant_code"),
    )
