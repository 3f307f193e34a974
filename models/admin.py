from typing import Optional
from pydantic import BaseModel, EmailStr


# -----------------------------------------------------
# ADMIN ACCOUNTS (superadmin only)
# -----------------------------------------------------
class AdminCreate(BaseModel):
    user_id: str                    # Supabase Auth UID of the account
    email: EmailStr
    name: str
    type: str                       # One of the admin roles


class AdminUpdate(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    type: Optional[str] = None
