"""
Domain Services
"""
from catalog_webhooks.domain.services.payload_store import PayloadStore, PayloadPage

__all__ = [
    "PayloadStore",
    "PayloadPage",
]
