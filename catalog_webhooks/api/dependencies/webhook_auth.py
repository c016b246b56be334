"""
Shared-secret check for inbound webhook deliveries.

Senders append ``?token=...`` to the webhook URL. The value must equal
``WEBHOOK_TOKEN``; there is exactly one token and no rotation.

Usage:
    @router.post("/entity/{uid}/webhook")
    async def receive_webhook(
        ...,
        _: None = Depends(verify_webhook_token),
    ):
        ...
"""
import hmac

from fastapi import Query

from catalog_webhooks.core.config import settings
from catalog_webhooks.core.exceptions import UnauthorizedException
from catalog_webhooks.core.logging import get_logger

logger = get_logger(__name__)


async def verify_webhook_token(
    token: str | None = Query(None, description="Shared webhook secret"),
) -> None:
    """
    Reject the request with 401 when ``token`` is missing or wrong.

    The attempted value is logged on purpose: failed attempts are audited.
    """
    expected = settings.WEBHOOK_TOKEN

    # compare_digest keeps the comparison time independent of the prefix match
    if token is None or not hmac.compare_digest(token.encode(), expected.encode()):
        logger.warning(
            f"Unauthorized webhook attempt with token: {token}",
            extra_data={"attempted_token": token}
        )
        raise UnauthorizedException()
