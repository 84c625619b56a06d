import os
from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field, validator
from typing import List, Optional, Union


class Settings(BaseSettings):
    """
    Application settings with Pydantic validation.
    Loads from environment variables with type checking and validation.
    """
    app_name: str = Field(default="Elk Peak Dashboard API", env="APP_NAME")
    environment: str = Field(default="development", env="ENVIRONMENT")

    # Comma-separated origins/domains allowed to call the gateway. Empty = allow all.
    allowed_origins: str = Field(default="", env="ALLOWED_ORIGINS")

    database_url: str = Field(
        default="sqlite:///./elkpeak.db",
        env="DATABASE_URL"
    )

    # Fixed API key expected as "Authorization: Bearer <key>". Disabled when unset.
    api_key: Optional[str] = Field(default=None, env="API_KEY")

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True, env="RATE_LIMIT_ENABLED")
    redis_url: str = Field(default="", env="REDIS_URL")

    # Goal progress: "latest" (aggregate everything) | "quarter" (goal's own quarter)
    goal_progress_scope: str = Field(default="latest", env="GOAL_PROGRESS_SCOPE")

    # Sentry
    sentry_dsn: Union[str, None] = Field(default=None, env="SENTRY_DSN")
    sentry_env: str = Field(default="development", env="SENTRY_ENV")

    # Prometheus scrape token (required in production)
    metrics_token: Optional[str] = Field(default=None, env="METRICS_TOKEN")

    # Contact notifications (Resend)
    resend_api_key: Optional[str] = Field(default=None, env="RESEND_API_KEY")
    resend_to_email: Optional[str] = Field(default=None, env="RESEND_TO_EMAIL")
    resend_from_email: str = Field(default="Contact Form <onboarding@resend.dev>", env="RESEND_FROM_EMAIL")
    resend_api_url: str = Field(default="https://api.resend.com/emails", env="RESEND_API_URL")

    debug: bool = Field(default=True, env="DEBUG")

    @validator("database_url")
    def validate_database_url(cls, v: str, values: dict) -> str:
        """Validate database URL; disallow SQLite in production."""
        env = values.get("environment")
        if env == "production" and v.startswith("sqlite"):
            raise ValueError("SQLite is not allowed for DATABASE_URL in production. Use PostgreSQL.")
        return v

    @validator("goal_progress_scope")
    def validate_goal_progress_scope(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in ("latest", "quarter"):
            raise ValueError("GOAL_PROGRESS_SCOPE must be 'latest' or 'quarter'.")
        return v

    @validator("debug")
    def validate_debug(cls, v: bool, values: dict) -> bool:
        """Never allow DEBUG=true in production."""
        if values.get("environment") == "production" and v:
            raise ValueError("DEBUG must be false in production.")
        return v

    def origin_allow_list(self) -> List[str]:
        return [o.strip() for o in (self.allowed_origins or "").split(",") if o.strip()]

    class Config:
        # Load env file based on ENVIRONMENT; default to development
        env_file = ".env.production" if os.getenv("ENVIRONMENT") == "production" else ".env.development"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Validates all environment variables on first access.
    Raises ValidationError if configuration is invalid.
    """
    return Settings()
