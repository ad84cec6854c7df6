"""Application configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "ArenaOne"
    debug: bool = True
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # Database
    database_url: str = "postgresql+asyncpg://arenaone:arenaone@db:5432/arenaone"
    database_echo: bool = False

    # Redis (Celery broker + result backend)
    redis_url: str = "redis://redis:6379/0"

    # Clubs without a valid IANA zone fall back to this one
    default_club_timezone: str = "Europe/Kyiv"

    # Availability
    slot_minutes: int = 60
    training_duration_minutes: int = 60
    max_suggestions: int = 3
    suggestion_horizon_days: int = 7

    # Unpaid reservations are held this long before the sweep cancels them
    reservation_hold_minutes: int = 5

    # Daily statistics older than this are recomputed by the nightly job
    statistics_stale_days: int = 1

    model_config = {"env_prefix": "AO_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
