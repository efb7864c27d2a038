"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings (environment variables)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Facebook page
    fb_page_id: str = ""
    fb_page_token: str = ""
    fb_graph_version: str = "v24.0"
    fb_fetch_limit: int = 20
    feed_timeout_seconds: int = 30

    # Sync
    sync_cooldown_minutes: int = 10
    sync_interval_minutes: int = 10

    # App
    database_url: str = "sqlite+aiosqlite:///./news.db"
    admin_token: str = ""
    cors_origins: str = ""

    @property
    def cors_origin_list(self) -> list[str]:
        """Explicitly allowed CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()
