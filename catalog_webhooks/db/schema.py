"""
Schema bootstrap for the webhook_payloads table.

ensure_schema runs on every startup. create_all with checkfirst only issues
CREATE TABLE / CREATE INDEX for objects that are missing, so an existing table
and its rows are left untouched. Two instances starting together may both try
the CREATE; the database's own DDL handling decides the winner.
"""
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

from catalog_webhooks.core.logging import get_logger, log_async_operation
from catalog_webhooks.db.models.webhook_payload import WebhookPayload

logger = get_logger(__name__)


@log_async_operation("ensure_schema")
async def ensure_schema(engine: AsyncEngine) -> None:
    """Create webhook_payloads (and its indexes) if it does not exist yet."""
    async with engine.begin() as conn:
        existed = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).has_table(WebhookPayload.__tablename__)
        )
        await conn.run_sync(
            WebhookPayload.metadata.create_all,
            tables=[WebhookPayload.__table__],
            checkfirst=True,
        )

    if existed:
        logger.debug(
            "Table already present",
            extra_data={"table": WebhookPayload.__tablename__}
        )
    else:
        logger.info(
            "Table created",
            extra_data={"table": WebhookPayload.__tablename__}
        )


async def get_table_columns(engine: AsyncEngine) -> list[str]:
    """Column names of webhook_payloads as the database reports them."""
    async with engine.connect() as conn:
        columns = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_columns(WebhookPayload.__tablename__)
        )
    return [column["name"] for column in columns]
