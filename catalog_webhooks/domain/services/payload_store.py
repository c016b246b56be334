"""
Payload Store - persistence and retrieval of webhook deliveries.

SQLAlchemyError is not translated here; the route that called the store
decides which message the caller gets.
"""
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_webhooks.db.models.webhook_payload import WebhookPayload
from catalog_webhooks.domain.services.payload_view import (
    WORKFLOW_NAME_PATH,
    summarize_record,
)
from catalog_webhooks.core.logging import get_logger

logger = get_logger(__name__)

# Largest OFFSET/LIMIT the drivers can bind (signed 64-bit)
_MAX_SQL_INT = 2**63 - 1


@dataclass
class PayloadPage:
    """One page of summary rows plus the unpaginated total"""
    records: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0


class PayloadStore:
    """Service for storing and listing webhook payloads"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_payload(self, payload: Any, entity_uid: str) -> WebhookPayload:
        """Insert one row for ``entity_uid``; the payload is stored as-is."""
        record = WebhookPayload(entity_uid=entity_uid, payload=payload)
        self.db.add(record)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        await self.db.refresh(record)

        logger.info(
            "Webhook payload saved",
            extra_data={"record_id": record.id, "entity_uid": entity_uid}
        )
        return record

    async def get_payload_by_id(self, record_id: int) -> Optional[WebhookPayload]:
        """Get payload by ID, None when no row matches"""
        result = await self.db.execute(
            select(WebhookPayload).where(WebhookPayload.id == record_id)
        )
        return result.scalar_one_or_none()

    async def get_payloads(
        self,
        entity_uid: str,
        search_query: str,
        page: int,
        limit: int
    ) -> PayloadPage:
        """
        Newest-first page of an entity's payloads.

        ``total`` counts every row of the entity; the search filter narrows
        the page only.
        """
        return await self._fetch_page(
            [WebhookPayload.entity_uid == entity_uid], search_query, page, limit
        )

    async def get_all_payloads(
        self,
        search_query: str,
        page: int,
        limit: int
    ) -> PayloadPage:
        """Same contract as get_payloads, across every entity."""
        return await self._fetch_page([], search_query, page, limit)

    async def _fetch_page(
        self,
        conditions: list,
        search_query: str,
        page: int,
        limit: int
    ) -> PayloadPage:
        page = max(page, 1)
        limit = max(limit, 1)

        # ספירה כוללת: בלי סינון חיפוש
        count_result = await self.db.execute(
            select(func.count(WebhookPayload.id)).where(*conditions)
        )
        total = count_result.scalar() or 0

        offset = (page - 1) * limit
        if offset > _MAX_SQL_INT:
            return PayloadPage(records=[], total=total)
        limit = min(limit, _MAX_SQL_INT)

        query = select(WebhookPayload).where(*conditions)
        if search_query:
            workflow_name = WebhookPayload.payload[WORKFLOW_NAME_PATH].as_string()
            query = query.where(workflow_name.contains(search_query, autoescape=True))

        result = await self.db.execute(
            query
            .order_by(WebhookPayload.created_at.desc(), WebhookPayload.id.desc())
            .offset(offset)
            .limit(limit)
        )
        records = list(result.scalars().all())

        logger.debug(
            "Fetched payload page",
            extra_data={
                "search": search_query,
                "page": page,
                "limit": limit,
                "returned": len(records),
                "total": total,
            }
        )
        return PayloadPage(records=[summarize_record(r) for r in records], total=total)
