"""
Record Query Routes: paginated list and single-record details
"""
from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_webhooks.core.config import settings
from catalog_webhooks.core.exceptions import (
    NotFoundException,
    StorageException,
    ValidationException,
)
from catalog_webhooks.core.logging import get_logger
from catalog_webhooks.db.database import get_db
from catalog_webhooks.domain.services.payload_store import PayloadStore
from catalog_webhooks.domain.services.payload_view import record_detail

logger = get_logger(__name__)

router = APIRouter()

# Largest value of the INTEGER primary key
_MAX_RECORD_ID = 2**31 - 1


# ==================== Schemas ====================


class RecordSummary(BaseModel):
    """Row of the records list: derived fields only, never the raw payload"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    created_at: datetime
    updated_at: datetime
    workflow: Any = None
    workflow_run: Any = Field(None, alias="workflowRun")
    kind: Any = None


class RecordsResponse(BaseModel):
    """Page of records; total counts all records of the entity"""
    records: List[RecordSummary]
    total: int


class RecordDetailResponse(BaseModel):
    """Full stored record"""
    id: int
    entity_uid: str
    payload: Any
    created_at: datetime
    updated_at: datetime


# ==================== Helpers ====================


def _is_ascii_number(raw: str) -> bool:
    """Plain ASCII digits only: no sign, underscores or other scripts' digits"""
    return raw.isascii() and raw.isdigit()


def _parse_positive_int(raw: Optional[str], default: int) -> int:
    """Query value as a positive int; anything else falls back to ``default``"""
    if raw is None or not _is_ascii_number(raw.strip()):
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value >= 1 else default


# ==================== Endpoints ====================


@router.get(
    "/records",
    response_model=RecordsResponse,
    summary="List stored webhook records",
    description=(
        "Newest first. Filters by entity when `entityUid` is given, otherwise "
        "lists every entity. `search` matches a substring of "
        "`Metadata.Workflow.Name`. `total` ignores `search`."
    ),
    tags=["Records"],
)
async def list_records(
    entity_uid: Optional[str] = Query(None, alias="entityUid"),
    search: str = Query("", description="Substring of the workflow name"),
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Records per page"),
    db: AsyncSession = Depends(get_db),
) -> RecordsResponse:
    """Records retrieval endpoint with pagination and search"""
    page_number = _parse_positive_int(page, 1)
    page_size = min(
        _parse_positive_int(limit, settings.DEFAULT_PAGE_SIZE),
        settings.MAX_PAGE_SIZE,
    )
    entity_uid = (entity_uid or "").strip()
    search_query = search or ""

    store = PayloadStore(db)
    try:
        if entity_uid:
            result = await store.get_payloads(entity_uid, search_query, page_number, page_size)
        else:
            result = await store.get_all_payloads(search_query, page_number, page_size)
    except SQLAlchemyError as e:
        logger.error(
            "Failed to fetch records",
            extra_data={"entity_uid": entity_uid, "page": page_number, "error": str(e)},
            exc_info=True,
        )
        raise StorageException("Failed to fetch records", operation="get_payloads") from e

    return RecordsResponse(
        records=[RecordSummary.model_validate(r) for r in result.records],
        total=result.total,
    )


@router.get(
    "/details/{record_id}",
    response_model=RecordDetailResponse,
    summary="Get a stored webhook record",
    description=(
        "Returns the full record only when it belongs to `entityUid`. "
        "A record of another entity is reported exactly like a missing one."
    ),
    responses={
        400: {"description": "Missing entityUid parameter"},
        404: {"description": "Record not found"},
    },
    tags=["Records"],
)
async def get_record_details(
    record_id: str,
    entity_uid: Optional[str] = Query(None, alias="entityUid"),
    db: AsyncSession = Depends(get_db),
) -> RecordDetailResponse:
    """Record details retrieval endpoint, scoped to an entity"""
    entity_uid = (entity_uid or "").strip()
    if not entity_uid:
        raise ValidationException("Missing entityUid parameter", field="entityUid")

    if not _is_ascii_number(record_id):
        raise NotFoundException("Record", record_id)
    try:
        parsed_id = int(record_id)
    except ValueError:
        raise NotFoundException("Record", record_id) from None
    if not 1 <= parsed_id <= _MAX_RECORD_ID:
        raise NotFoundException("Record", record_id)

    store = PayloadStore(db)
    try:
        record = await store.get_payload_by_id(parsed_id)
    except SQLAlchemyError as e:
        logger.error(
            "Failed to fetch record details",
            extra_data={"record_id": parsed_id, "error": str(e)},
            exc_info=True,
        )
        raise StorageException(
            "Failed to fetch record details", operation="get_payload_by_id"
        ) from e

    if record is None or record.entity_uid != entity_uid:
        raise NotFoundException("Record", parsed_id)

    return RecordDetailResponse.model_validate(record_detail(record))
