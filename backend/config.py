from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

# Get the directory where this config file is located.
_BACKEND_DIR = Path(__file__).parent.resolve()
_PROJECT_ROOT = _BACKEND_DIR.parent.resolve()


class Settings(BaseSettings):
    # Data store (PostgREST served by Supabase under /rest/v1)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_KEY: Optional[str] = None
    SOURCE_TIMEOUT_SECONDS: float = 10.0

    # Production Settings
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    CORS_ORIGINS: list[str] = ["*"]
    SNAPSHOT_CACHE_MAX_AGE_SECONDS: int = 30  # snapshot is near-real-time, not consistent

    # Agent liveness
    HEARTBEAT_STALE_MINUTES: int = 30  # online sessions older than this are "stale"

    # Content
    CONTENT_DAILY_TARGET: int = 10  # published units per day

    # Trading desk
    TRADING_DECOMMISSIONED: bool = False  # zero the headline balance, keep P&L figures
    TRADING_STARTING_BALANCE: float = 1010.0
    TRADING_MODE: str = "paper"

    @field_validator("SUPABASE_URL", mode="before")
    @classmethod
    def _normalize_url_field(cls, value: object) -> object:
        """Trim accidental quotes/whitespace from URL env vars."""
        if value is None:
            return value
        text = str(value).strip().strip('"').strip("'")
        if not text:
            return None
        return text.rstrip("/")

    @field_validator("SUPABASE_SERVICE_KEY", mode="before")
    @classmethod
    def _normalize_secret(cls, value: object) -> object:
        if value is None:
            return value
        text = str(value).strip().strip('"').strip("'")
        return text or None

    class Config:
        # Load project-root .env first (common workflow), then backend/.env
        # as an override if present.
        env_file = (
            str(_PROJECT_ROOT / ".env"),
            str(_BACKEND_DIR / ".env"),
        )
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
