# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_optional_config() -> List[str]:
    """
    Settings that work out of the box but should be changed in production.
    Returns warnings only.
    """
    warnings = []

    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY (optional but recommended)")
    if settings.SLEEPOVER_CHECKOUT_PIN == "3693":
        warnings.append("SLEEPOVER_CHECKOUT_PIN is the default code")
    if settings.GUEST_CHECKOUT_PIN == "1005":
        warnings.append("GUEST_CHECKOUT_PIN is the default code")

    return warnings


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Missing Supabase credentials are fatal in production and a warning
    elsewhere, so the app still boots for local work and tests.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        if settings.ENV == "production":
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        logger.warning(error_msg)

    for warning in missing_optional:
        logger.warning(f"Configuration: {warning}")

    logger.info("Configuration validation complete")
