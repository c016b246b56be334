"""
Application Configuration
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator, model_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    APP_NAME: str = "Catalog Webhooks"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    # Comma-separated list of allowed origins. Empty disables CORS entirely.
    ALLOWED_ORIGINS: str = ""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./catalog_webhooks.db"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def convert_database_url(cls, v: str) -> str:
        """Convert postgres:// or postgresql:// to postgresql+asyncpg:// for async support"""
        if v:
            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql+asyncpg://", 1)
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    # Webhook ingress: shared secret passed as ?token=...
    # אין ברירת מחדל: בלי טוקן השירות לא עולה
    WEBHOOK_TOKEN: str

    @field_validator("WEBHOOK_TOKEN", mode="after")
    @classmethod
    def validate_webhook_token(cls, v: str) -> str:
        """A blank token is rejected at startup"""
        if not v or not v.strip():
            raise ValueError(
                "WEBHOOK_TOKEN is empty. Set it before starting the service: "
                "export WEBHOOK_TOKEN=$(openssl rand -hex 32)"
            )
        return v

    # Routing
    API_PREFIX: str = "/api"

    @field_validator("API_PREFIX", mode="before")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """'/api/' and 'api' both become '/api'; '' and '/' mount at the root"""
        v = (v or "").strip().strip("/")
        return f"/{v}" if v else ""

    # Request body ceiling for webhook deliveries (50MB)
    MAX_PAYLOAD_BYTES: int = 50 * 1024 * 1024

    # Pagination for /records
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    @field_validator("MAX_PAYLOAD_BYTES", "DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE", mode="after")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    # Rate limiting: webhooks
    WEBHOOK_RATE_LIMIT_MAX_REQUESTS: int = 100  # per client IP
    WEBHOOK_RATE_LIMIT_WINDOW_SECONDS: int = 60

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "Settings":
        """DEFAULT_PAGE_SIZE must fit under MAX_PAGE_SIZE, otherwise the default is silently clamped."""
        if self.DEFAULT_PAGE_SIZE > self.MAX_PAGE_SIZE:
            raise ValueError(
                f"DEFAULT_PAGE_SIZE ({self.DEFAULT_PAGE_SIZE}) is larger than "
                f"MAX_PAGE_SIZE ({self.MAX_PAGE_SIZE})"
            )
        return self

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
