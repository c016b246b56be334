#!/usr/bin/env python3
"""
Schema bootstrap

Creates the webhook_payloads table against DATABASE_URL ahead of the first
deploy. Safe to run repeatedly; an existing table is left as it is.
"""
import asyncio
import sys
from pathlib import Path

# Allow running from any directory
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from catalog_webhooks.core.logging import get_logger, setup_logging  # noqa: E402
from catalog_webhooks.db.database import engine  # noqa: E402
from catalog_webhooks.db.schema import ensure_schema, get_table_columns  # noqa: E402

logger = get_logger(__name__)


async def _run() -> None:
    try:
        await ensure_schema(engine)
        columns = await get_table_columns(engine)
        logger.info("Schema ready", extra_data={"columns": columns})
    finally:
        await engine.dispose()


def main() -> int:
    setup_logging(level="INFO", json_format=False, app_name="catalog-webhooks-schema")
    try:
        asyncio.run(_run())
    except Exception as e:
        logger.error(f"Schema bootstrap failed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
