"""
Database Models
"""
from catalog_webhooks.db.models.webhook_payload import WebhookPayload

__all__ = [
    "WebhookPayload",
]
