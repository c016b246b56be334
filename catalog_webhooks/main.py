"""
Catalog Webhooks - Main FastAPI Application
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_webhooks.core.config import settings
from catalog_webhooks.core.logging import setup_logging, get_logger
from catalog_webhooks.core.middleware import setup_middleware, setup_exception_handlers
from catalog_webhooks.api.routes import router as api_router
from catalog_webhooks.db.database import engine
from catalog_webhooks.db.schema import ensure_schema

# Setup logging before anything else
setup_logging(
    level="DEBUG" if settings.DEBUG else settings.LOG_LEVEL,
    json_format=not settings.DEBUG,
    app_name=settings.APP_NAME
)

logger = get_logger(__name__)


def _parse_allowed_origins(raw: str) -> list[str]:
    """Parse comma-separated CORS origins string into a clean list."""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


_OPENAPI_TAGS = [
    {"name": "Webhooks", "description": "Token-protected ingress for webhook deliveries."},
    {"name": "Records", "description": "Paginated list and details of stored deliveries."},
    {"name": "Health", "description": "Liveness, readiness and echo endpoints."},
]


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description=(
        "Receives webhook payloads addressed to catalog entities, stores them "
        "verbatim and serves them back page by page."
    ),
    openapi_tags=_OPENAPI_TAGS,
)

# Setup middleware (correlation ID, request logging, rate limit)
setup_middleware(app, settings)
setup_exception_handlers(app)

allowed_origins = _parse_allowed_origins(settings.ALLOWED_ORIGINS)
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Correlation-ID"],
    )

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.on_event("startup")
async def startup() -> None:
    """Create the payload table if this is the first start"""
    logger.info(
        "Starting application",
        extra_data={"app_name": settings.APP_NAME, "api_prefix": settings.API_PREFIX or "/"}
    )
    await ensure_schema(engine)


@app.on_event("shutdown")
async def shutdown() -> None:
    """Cleanup on shutdown"""
    logger.info("Shutting down application")
    await engine.dispose()
    logger.info("Database connections disposed")
