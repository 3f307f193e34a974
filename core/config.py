from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Residence Portal API"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------
    # Frontend origins (portals)
    # -------------------------------------------------
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Built below from FRONTEND_ORIGINS
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, env="SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Checkout PINs
    # -------------------------------------------------
    # Shared front-desk codes, identical for every tenant.
    SLEEPOVER_CHECKOUT_PIN: str = Field("3693", env="SLEEPOVER_CHECKOUT_PIN")
    GUEST_CHECKOUT_PIN: str = Field("1005", env="GUEST_CHECKOUT_PIN")

    # -------------------------------------------------
    # Residence policy
    # -------------------------------------------------
    MAX_GUESTS_PER_STUDENT: int = Field(3, env="MAX_GUESTS_PER_STUDENT", description="Primary guest plus additional guests a student may have signed in at once (default: 3)")
    RESIDENCE_TIMEZONE: str = Field("Africa/Johannesburg", env="RESIDENCE_TIMEZONE", description="Timezone used for 'today' windows and sleepover checkout dates")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list after loading settings
# -------------------------------------------------
settings.BACKEND_CORS_ORIGINS = sorted(
    {origin.rstrip("/") for origin in settings.FRONTEND_ORIGINS}
)
