"""
Smoke test against a running instance.

Runs lightweight HTTP checks:
- GET  {prefix}/health
- POST {prefix}/entity/{uid}/webhook without a token (expects 401)
- POST {prefix}/entity/{uid}/webhook with WEBHOOK_TOKEN (expects 201)
- GET  {prefix}/records?entityUid={uid} (expects the delivery to be listed)

Every run stores one real record under SMOKE_ENTITY_UID.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import httpx

# Allow running from any directory (python scripts/smoke_webhooks.py)
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from catalog_webhooks.core.logging import get_logger, setup_logging  # noqa: E402


logger = get_logger(__name__)


def _base_url() -> str:
    port = os.environ.get("PORT", "8000")
    base = os.environ.get("BASE_URL", f"http://127.0.0.1:{port}").rstrip("/")
    prefix = os.environ.get("API_PREFIX", "/api").strip("/")
    return f"{base}/{prefix}" if prefix else base


def _timeout_seconds() -> float:
    return float(os.environ.get("SMOKE_TIMEOUT_SECONDS", "10"))


def _entity_uid() -> str:
    return os.environ.get("SMOKE_ENTITY_UID", "smoke-entity")


def _attestation_payload() -> dict:
    return {
        "Kind": "Attestation",
        "Metadata": {
            "Workflow": {"Name": "smoke", "Project": "smoke-tests"},
            "WorkflowRun": {
                "Id": f"smoke-{datetime.now(timezone.utc).strftime('%Y%m%d%H%M%S')}",
                "State": "success",
            },
        },
    }


def _check_status(resp: httpx.Response, expected: int) -> None:
    if resp.status_code != expected:
        raise RuntimeError(
            f"Unexpected status {resp.status_code} (expected {expected}) for "
            f"{resp.request.method} {resp.request.url.copy_remove_param('token')}. "
            f"Body: {(resp.text or '')[:500]}"
        )


def main() -> int:
    setup_logging(level="INFO", json_format=False, app_name="catalog-webhooks-smoke")

    token = os.environ.get("WEBHOOK_TOKEN")
    if not token:
        logger.error("WEBHOOK_TOKEN not set")
        return 1

    base_url = _base_url()
    entity_uid = _entity_uid()
    timeout = _timeout_seconds()
    webhook_url = f"{base_url}/entity/{entity_uid}/webhook"

    logger.info("Starting smoke tests", extra_data={"base_url": base_url, "timeout_seconds": timeout})

    with httpx.Client(timeout=timeout) as client:
        resp = client.get(f"{base_url}/health")
        _check_status(resp, 200)

        logger.info("Posting webhook without token", extra_data={"url": webhook_url})
        resp = client.post(webhook_url, json=_attestation_payload())
        _check_status(resp, 401)

        logger.info("Posting webhook with token", extra_data={"url": webhook_url})
        resp = client.post(webhook_url, params={"token": token}, json=_attestation_payload())
        _check_status(resp, 201)

        resp = client.get(f"{base_url}/records", params={"entityUid": entity_uid, "search": "smoke"})
        _check_status(resp, 200)
        if not resp.json().get("records"):
            raise RuntimeError("Stored delivery is missing from /records")

    logger.info("Smoke tests completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
