# core/supabase_client.py

from supabase import create_client, Client
from core.config import settings
from core.logging_config import logger


# Tables checked by the health check
HEALTH_TABLES = [
    "users",
    "complaints",
    "maintenance_requests",
    "sleepover_requests",
    "guest_requests",
    "notifications",
    "admins",
    "students",
    "payments",
    "financial_reports",
]


# ============================================================
# Supabase Client Factory (ALWAYS service role)
# ============================================================

def get_supabase_client() -> Client:
    """
    Creates a Supabase client using the SERVICE ROLE KEY.
    REQUIRED for:
        - auth.get_user (token validation)
        - auth.sign_up for new applicants
        - full read/write on all residence tables
    """
    try:
        supabase_url = settings.SUPABASE_URL
        supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY  # MUST be service-role

        if not supabase_url or not supabase_key:
            logger.error("Missing Supabase credentials")
            logger.error(f"   URL: {supabase_url}")
            logger.error(f"   SERVICE ROLE KEY: {'SET' if supabase_key else 'MISSING'}")
            return None

        return create_client(supabase_url, supabase_key)

    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


# ============================================================
# Ping Supabase for health checks
# ============================================================

def ping_supabase() -> dict:
    """
    Simple connectivity check.
    Does NOT query auth tables.
    """
    client = get_supabase_client()
    if client is None:
        return {"service": "Supabase", "status": "not_configured"}

    results = {}
    for table in HEALTH_TABLES:
        try:
            res = client.table(table).select("id").limit(1).execute()
            results[table] = {
                "status": "ok",
                "rows_found": len(res.data or []),
            }
        except Exception as err:
            results[table] = {"status": "error", "detail": str(err)}

    overall = "ok" if all(r["status"] == "ok" for r in results.values()) else "degraded"
    return {
        "service": "Supabase",
        "status": overall,
        "tables": results,
    }
