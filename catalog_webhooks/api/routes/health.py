"""
Health and echo routes: open to unauthenticated callers
"""
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from catalog_webhooks.core.logging import get_logger
from catalog_webhooks.domain.services.health_service import check_readiness

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Liveness probe",
    description="Answers as long as the process is serving requests. Does not touch the database.",
    tags=["Health"],
)
async def health_check() -> dict[str, str]:
    logger.info("PONG!")
    return {"status": "ok"}


@router.get(
    "/health/ready",
    summary="Readiness probe",
    description="Checks the database. 503 with status=degraded when it is unreachable.",
    responses={
        200: {"content": {"application/json": {"example": {"status": "ok", "db": "ok"}}}},
        503: {
            "content": {
                "application/json": {
                    "example": {"status": "degraded", "db": "error: db_unavailable"}
                }
            }
        },
    },
    tags=["Health"],
)
async def readiness_check() -> JSONResponse:
    result = await check_readiness()
    status_code = 200 if result["status"] == "ok" else 503
    return JSONResponse(content=result, status_code=status_code)


@router.post(
    "/echo",
    summary="Echo endpoint for testing",
    description="Logs the received body and acknowledges it. Nothing is stored.",
    tags=["Health"],
)
async def echo(body: Any = Body(None)) -> dict[str, str]:
    """Echo endpoint for testing webhook senders"""
    logger.info("Echo received", extra_data={"body": body})
    return {"status": "ok"}
