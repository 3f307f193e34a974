# core/errors.py

"""
Domain error taxonomy.

Services raise these; main.py turns them into the JSON error envelope
``{"error": <message>, "code": <code>}`` with the status code carried
by the exception class.
"""


class ResidenceError(Exception):
    """Base class for every failure the API reports to a caller."""

    status_code = 400
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ValidationError(ResidenceError):
    """Missing or malformed required field."""
    code = "validation_error"


class InvalidTransitionError(ValidationError):
    """Target status is not reachable from the current status."""
    code = "invalid_transition"


class CapacityExceededError(ResidenceError):
    code = "capacity_exceeded"


class AlreadyFinalizedError(ResidenceError):
    code = "already_finalized"


class InvalidPinError(ResidenceError):
    code = "invalid_pin"


class NoActiveSleepoverError(ResidenceError):
    code = "no_active_sleepover"


class NotFoundError(ResidenceError):
    status_code = 404
    code = "not_found"


class UnauthorizedError(ResidenceError):
    status_code = 403
    code = "unauthorized"


class ConflictError(ResidenceError):
    """The document changed between read and write."""
    status_code = 409
    code = "conflict"


class StoreError(ResidenceError):
    status_code = 500
    code = "store_error"


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / GoTrue / PostgREST APIError
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: Supabase errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or type(error).__name__


def store_error(error: Exception, operation: str) -> StoreError:
    """
    Wrap a Supabase client failure in a StoreError.
    Returns (doesn't raise) so the caller can ``raise ... from error``.
    """
    from core.logging_config import logger

    detail = extract_supabase_error(error)
    logger.error(f"{operation}: {detail}")
    return StoreError(f"{operation} failed")
