"""Application configuration."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="CIVICREPORTS_",
    )

    app_name: str = "civicreports"
    debug: bool = False

    # Storage
    report_backend: Literal["memory", "database"] = "memory"
    database_url: str = "sqlite:///./civicreports.db"
    seed_demo_data: bool = True

    # Dashboard
    report_timezone: str = "UTC"
    hotspot_top_n: int = 5
    recent_activity_limit: int = 4
    # Dashboard filter sessions kept in memory, least recently changed dropped first
    filter_session_limit: int = 1000

    # Activity log retention, 0 keeps everything
    activity_log_limit: int = 0

    # Off: any status may follow any other
    enforce_status_transitions: bool = False


settings = Settings()
