from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "local"
    api_port: int = 8000
    log_level: str = "INFO"

    postgres_host: str = "127.0.0.1"
    postgres_port: int = 5432
    postgres_db: str = "smartzap"
    postgres_user: str = "smartzap"
    postgres_password: str = "smartzap_password"
    database_url_override: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL_OVERRIDE", "DATABASE_URL"),
    )
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: int = 30
    db_auto_create: bool = False
    db_seed_demo_data: bool = False

    feed_default_limit: int = 50
    feed_max_limit: int = 200
    feed_poll_interval_seconds: float = 10.0
    feed_stale_seconds: float = 5.0
    feed_api_base_url: str = "http://127.0.0.1:8000"
    feed_client_timeout_seconds: float = 10.0

    cors_allowed_origins_raw: str = "http://127.0.0.1:3000,http://localhost:3000"
    trusted_hosts_raw: str = "127.0.0.1,localhost"
    force_https: bool = False

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def cors_allowed_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.cors_allowed_origins_raw.split(",")
            if origin.strip()
        ]

    @property
    def trusted_hosts(self) -> list[str]:
        return [
            host.strip() for host in self.trusted_hosts_raw.split(",") if host.strip()
        ]

    def validate_security_settings(self) -> None:
        if self.app_env.lower() != "production":
            return

        if not self.cors_allowed_origins:
            raise ValueError(
                "CORS_ALLOWED_ORIGINS_RAW must define explicit origins in production."
            )
        if "*" in self.cors_allowed_origins:
            raise ValueError("Wildcard CORS origin is not allowed in production.")
        if not self.trusted_hosts:
            raise ValueError(
                "TRUSTED_HOSTS_RAW must define explicit hosts in production."
            )
        if "*" in self.trusted_hosts:
            raise ValueError("Wildcard trusted host is not allowed in production.")

    def validate_feed_settings(self) -> None:
        if self.feed_default_limit < 1 or self.feed_default_limit > self.feed_max_limit:
            raise ValueError(
                "FEED_DEFAULT_LIMIT must be between 1 and FEED_MAX_LIMIT."
            )
        if self.feed_poll_interval_seconds <= 0:
            raise ValueError("FEED_POLL_INTERVAL_SECONDS must be positive.")
        if self.feed_stale_seconds < 0:
            raise ValueError("FEED_STALE_SECONDS cannot be negative.")


@lru_cache
def get_settings() -> Settings:
    return Settings()
