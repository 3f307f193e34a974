from typing import Optional
from pydantic import BaseModel, EmailStr


# -----------------------------------------------------
# LOGIN REQUEST (using Supabase email/password)
# -----------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# -----------------------------------------------------
# TOKEN RESPONSE (Supabase session JWT)
# -----------------------------------------------------
class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"


# -----------------------------------------------------
# REGISTRATION (new applicant → newbie profile)
# -----------------------------------------------------
class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: str
    surname: str
    phone: Optional[str] = None
    place_of_study: Optional[str] = None
