"""Configuration management for the ingestion service."""

from typing import Literal, Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class Config(BaseSettings):
    """Application configuration from environment variables."""

    # Storage (in-memory store is used when either is blank)
    supabase_url: str = ""
    supabase_key: str = ""

    # Triggers
    cron_secret: Optional[str] = None
    scheduler_signature_header: str = "x-vercel-signature"
    environment: Literal["development", "production"] = "development"
    enable_scheduler: bool = False
    scrape_interval_hours: int = 6

    # Fetching
    request_timeout_seconds: float = 30.0
    fetch_attempts: int = 1
    max_concurrent_sources: int = 4
    user_agent: str = DEFAULT_USER_AGENT

    # Optional
    inject_sample_grants: bool = True
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore"}

    @property
    def scheduler_enabled(self) -> bool:
        """Recurring runs are on in development, and elsewhere only when asked for."""
        return self.environment != "production" or self.enable_scheduler

    @property
    def use_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def validate_config() -> Config:
    """Load and validate configuration from environment.

    Raises ValueError with a descriptive message listing ALL invalid
    variables (not just the first one).
    """
    try:
        return Config()
    except ValidationError as exc:
        names = sorted({str(err["loc"][0]).upper() for err in exc.errors() if err.get("loc")})
        raise ValueError(
            f"Invalid environment variable(s): {', '.join(names)}. "
            "Please check your .env file or environment."
        ) from exc


def load_config() -> Config:
    """Load configuration from environment (startup entry point)."""
    return validate_config()
