# routers/health.py

from fastapi import APIRouter, Response

from core.config import settings
from core.logging_config import logger
from core.supabase_client import HEALTH_TABLES, ping_supabase

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get("/app", summary="Liveness probe")
def app_health():
    """Process is up and configured. Does not touch the data store."""
    return {
        "service": settings.PROJECT_NAME,
        "env": settings.ENV,
        "status": "ok",
        "unit_generation": {
            "batch_size": settings.UNIT_BATCH_SIZE,
            "page_limit_max": settings.UNITS_PAGE_LIMIT_MAX,
        },
    }


@router.get("/db", summary="Readiness probe for the property tables")
def db_health(response: Response):
    """
    Reads one row from each property table the unit generator depends on.

    Anything short of "ok" answers 503 with the per-table breakdown in
    the body.
    """
    try:
        report = ping_supabase()
    except Exception as e:
        logger.error(f"Health check could not reach Supabase: {e}")
        report = {"status": "error", "detail": str(e)}

    status = report.get("status", "unknown")
    if status != "ok":
        response.status_code = 503

    return {
        "status": status,
        "checked": HEALTH_TABLES,
        "details": report,
    }
