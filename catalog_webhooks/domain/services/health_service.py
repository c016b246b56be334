"""
Health service: liveness is answered by the route itself, readiness checks
the database with a trivial query.
"""
from typing import Any

from sqlalchemy import text

from catalog_webhooks.core.logging import get_logger
from catalog_webhooks.db.database import AsyncSessionLocal

logger = get_logger(__name__)

_STATUS_OK = "ok"
_STATUS_DEGRADED = "degraded"

_CHECK_OK = "ok"
# Generic message; the driver error stays in the log
_ERROR_DB = "error: db_unavailable"


async def _check_db() -> str:
    """Run SELECT 1 against the configured database."""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return _CHECK_OK
    except Exception as e:
        logger.warning("Database readiness check failed", extra_data={"error": str(e)})
        return _ERROR_DB


async def check_readiness() -> dict[str, Any]:
    """Readiness report: overall status plus one entry per dependency."""
    db_status = await _check_db()
    overall = _STATUS_OK if db_status == _CHECK_OK else _STATUS_DEGRADED
    return {"status": overall, "db": db_status}
