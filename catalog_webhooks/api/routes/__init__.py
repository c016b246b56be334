"""
API Routes

Auth policy: every route here is open except the webhook ingress, which
carries the shared-secret token dependency on the route itself.
"""
from fastapi import APIRouter

from catalog_webhooks.api.routes.health import router as health_router
from catalog_webhooks.api.routes.webhooks import router as webhooks_router
from catalog_webhooks.api.routes.records import router as records_router

router = APIRouter()

router.include_router(health_router)
router.include_router(webhooks_router)
router.include_router(records_router)
