"""
Read-time views over stored webhook payloads.

The payload column holds whatever JSON the sender posted. The list endpoint
exposes three fields pulled from conventional paths inside it; any missing
segment, or a non-object along the way, yields None.
"""
from typing import Any

from catalog_webhooks.db.models.webhook_payload import WebhookPayload

WORKFLOW_PATH = ("Metadata", "Workflow")
WORKFLOW_RUN_PATH = ("Metadata", "WorkflowRun")
KIND_PATH = ("Kind",)
# Field matched by the free-text search on /records
WORKFLOW_NAME_PATH = ("Metadata", "Workflow", "Name")


def extract_path(document: Any, path: tuple[str, ...]) -> Any:
    """Walk ``path`` through nested objects; None as soon as a step is missing."""
    current = document
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def summarize_record(record: WebhookPayload) -> dict[str, Any]:
    """List-view row: identifiers, timestamps and the derived fields, no raw payload."""
    return {
        "id": record.id,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
        "workflow": extract_path(record.payload, WORKFLOW_PATH),
        "workflowRun": extract_path(record.payload, WORKFLOW_RUN_PATH),
        "kind": extract_path(record.payload, KIND_PATH),
    }


def record_detail(record: WebhookPayload) -> dict[str, Any]:
    """Full stored record as returned by the detail endpoint."""
    return {
        "id": record.id,
        "entity_uid": record.entity_uid,
        "payload": record.payload,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }
