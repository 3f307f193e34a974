from fastapi import APIRouter, HTTPException, Depends

from core.errors import ValidationError
from core.logging_config import logger
from core.store import EntityStore, get_store
from core.supabase_client import get_supabase_client
from core.utils import sanitize, utcnow
from dependencies.auth import USERS_COLLECTION, get_current_user, CurrentUser
from models.auth import LoginRequest, RegisterRequest, TokenResponse
from models.enums import ApplicationStatus, Role


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# LOGIN (SUPABASE AUTH)
# ============================================================
@router.post("/login", response_model=TokenResponse, summary="Authenticate user")
def login(payload: LoginRequest):

    email = payload.email.strip().lower()

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        response = client.auth.sign_in_with_password(
            {"email": email, "password": payload.password}
        )
    except Exception as e:
        # Log the error for debugging but don't expose details to user
        logger.warning(f"Login attempt failed for {email}: {type(e).__name__}")
        raise HTTPException(
            status_code=401,
            detail="Invalid email or password"
        )

    if not response.session or not response.session.access_token:
        raise HTTPException(401, "Invalid email or password")

    return TokenResponse(
        access_token=response.session.access_token,
        refresh_token=response.session.refresh_token,
    )


# ============================================================
# REGISTER (new applicant)
# ============================================================
@router.post("/register", summary="Create an applicant account")
def register(payload: RegisterRequest, store: EntityStore = Depends(get_store)):
    """
    Creates the Supabase Auth account and a ``users`` profile with role
    ``newbie`` and a pending application. An admin accepts or denies it
    through ``/applications``.
    """
    email = payload.email.strip().lower()
    if len(payload.password) < 6:
        raise ValidationError("Password must be at least 6 characters")

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        response = client.auth.sign_up({"email": email, "password": payload.password})
    except Exception as e:
        logger.warning(f"Registration failed for {email}: {type(e).__name__}")
        raise HTTPException(400, "Could not create account for this email")

    if not response or not response.user:
        raise HTTPException(400, "Could not create account for this email")

    now = utcnow()
    profile = sanitize(payload.model_dump(exclude={"email", "password"}))
    user_id = store.create(
        USERS_COLLECTION,
        {
            **profile,
            "id": response.user.id,
            "email": email,
            "role": Role.newbie.value,
            "application_status": ApplicationStatus.pending.value,
            "communication_log": [],
            "created_at": now,
            "updated_at": now,
        },
    )

    logger.info(f"New applicant {user_id} registered")
    return {"success": True, "user_id": user_id}


# ============================================================
# CURRENT USER
# ============================================================
@router.get("/me", response_model=CurrentUser, summary="Current authenticated user")
def read_me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user
