"""
Webhook Payload Model - raw webhook deliveries addressed to a catalog entity.

Rows are append-only: the ingress endpoint inserts, the query endpoints read,
nothing in the service updates or deletes them.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON, Index

from catalog_webhooks.db.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WebhookPayload(Base):
    """A single webhook delivery stored verbatim"""

    __tablename__ = "webhook_payloads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # No foreign key: the catalog lives in another system and is not consulted
    entity_uid = Column(String(255), nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        Index("ix_webhook_payloads_entity_created", "entity_uid", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<WebhookPayload id={self.id} entity_uid={self.entity_uid!r}>"
