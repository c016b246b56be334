"""
Webhook Ingress Routes

URL: {API_PREFIX}/entity/{uid}/webhook?token=...
"""
import json
import math
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_webhooks.api.dependencies.webhook_auth import verify_webhook_token
from catalog_webhooks.core.config import settings
from catalog_webhooks.core.exceptions import (
    PayloadTooLargeException,
    StorageException,
    ValidationException,
)
from catalog_webhooks.core.logging import get_logger
from catalog_webhooks.db.database import get_db
from catalog_webhooks.domain.services.payload_store import PayloadStore

logger = get_logger(__name__)

router = APIRouter()


def _reject_constant(name: str) -> Any:
    """NaN and Infinity are not JSON; JSON columns cannot store them"""
    raise ValueError(f"Invalid JSON constant: {name}")


def _parse_finite_float(raw: str) -> float:
    value = float(raw)
    if math.isinf(value):
        raise ValueError(f"Number out of range: {raw}")
    return value


class SavedResponse(BaseModel):
    """Acknowledgment for a stored delivery"""
    status: str = "saved"


async def read_json_body(request: Request) -> Any:
    """
    Parse the request body as JSON within MAX_PAYLOAD_BYTES.

    An empty body is stored as ``{}``. Any JSON value is accepted otherwise.
    """
    limit = settings.MAX_PAYLOAD_BYTES

    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeException(int(declared), limit)

    raw = await request.body()
    if len(raw) > limit:
        raise PayloadTooLargeException(len(raw), limit)

    if not raw.strip():
        return {}

    try:
        return json.loads(
            raw,
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float,
        )
    except ValueError as e:
        raise ValidationException("Invalid JSON body", details={"error": str(e)}) from e


@router.post(
    "/entity/{uid}/webhook",
    response_model=SavedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Receive a webhook for a catalog entity",
    description=(
        "Stores the JSON body verbatim under the entity identifier from the path. "
        "Requires the shared secret in the `token` query parameter. "
        "Every call creates a new record; retries are not deduplicated."
    ),
    responses={
        201: {"description": "Payload stored"},
        400: {"description": "Missing entity UID or invalid JSON"},
        401: {"description": "Invalid or missing token"},
        413: {"description": "Body exceeds MAX_PAYLOAD_BYTES"},
        500: {"description": "Storage failure"},
    },
    tags=["Webhooks"],
)
async def receive_entity_webhook(
    uid: str,
    request: Request,
    _: None = Depends(verify_webhook_token),
    db: AsyncSession = Depends(get_db),
) -> SavedResponse:
    """Entity-specific webhook endpoint"""
    entity_uid = uid.strip()
    if not entity_uid:
        raise ValidationException("Missing entity UID in URL", field="uid")

    payload = await read_json_body(request)

    store = PayloadStore(db)
    try:
        await store.save_payload(payload, entity_uid)
    except SQLAlchemyError as e:
        logger.error(
            "Failed to save payload",
            extra_data={"entity_uid": entity_uid, "error": str(e)},
            exc_info=True,
        )
        raise StorageException("Failed to save payload", operation="save_payload") from e

    return SavedResponse()
