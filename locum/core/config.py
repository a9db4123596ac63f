"""Application configuration management."""

from pydantic import AnyUrl, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: AnyUrl

    # Redis (optional, used for cross-process submission locks)
    redis_url: str | None = None
    submission_lock_timeout_seconds: float = Field(default=30.0, gt=0)

    # Review workflow
    review_window_hours: int = Field(
        default=72,
        ge=48,
        le=72,
        description="Hours a facility has to decide on a pending application",
    )
    deadline_warning_hours: int = Field(default=24, ge=1, le=72)

    # Expiration sweep
    expiry_sweep_enabled: bool = True
    expiry_sweep_interval_minutes: int = Field(default=5, ge=1, le=60)

    # IP lookup for the application audit trail
    ip_lookup_enabled: bool = True
    ip_lookup_url: str = "https://api.ipify.org?format=json"
    ip_lookup_timeout_seconds: float = Field(default=3.0, gt=0)

    log_level: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
