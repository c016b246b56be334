"""
Tests for idempotent schema creation
"""
import pytest
from sqlalchemy import inspect

from catalog_webhooks.db.schema import ensure_schema, get_table_columns
from catalog_webhooks.domain.services.payload_store import PayloadStore
from tests.conftest import count_rows


async def _index_names(engine) -> set[str]:
    async with engine.connect() as conn:
        indexes = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_indexes("webhook_payloads")
        )
    return {index["name"] for index in indexes}


class TestEnsureSchema:

    @pytest.mark.integration
    async def test_table_has_expected_columns(self, async_engine):
        columns = await get_table_columns(async_engine)

        assert set(columns) == {"id", "entity_uid", "payload", "created_at", "updated_at"}

    @pytest.mark.integration
    async def test_second_call_changes_nothing(self, async_engine):
        """async_engine already ran ensure_schema once"""
        columns_before = await get_table_columns(async_engine)
        indexes_before = await _index_names(async_engine)

        await ensure_schema(async_engine)
        await ensure_schema(async_engine)

        assert await get_table_columns(async_engine) == columns_before
        assert await _index_names(async_engine) == indexes_before
        assert "ix_webhook_payloads_entity_created" in indexes_before

    @pytest.mark.integration
    async def test_existing_rows_survive(self, async_engine, db_session):
        store = PayloadStore(db_session)
        await store.save_payload({"Kind": "Attestation"}, "e1")
        await store.save_payload({"Kind": "Attestation"}, "e1")

        await ensure_schema(async_engine)

        assert await count_rows(db_session, "e1") == 2
