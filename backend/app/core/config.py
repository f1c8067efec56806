from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = "CV Builder API"
    environment: str = "dev"
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"
    log_format: str = "json"

    frontend_origin: str = "http://localhost:3000"

    clerk_webhook_secret: str = ""
    clerk_jwks_url: str | None = None
    clerk_issuer: str | None = None
    clerk_authorized_parties: str = ""
    clerk_provider_name: str = "clerk"

    database_url: str = "sqlite+pysqlite:///./cv_builder.db"

    redis_url: str = "redis://localhost:6379/0"
    redis_namespace: str = "cv-builder"
    cache_default_ttl_seconds: int = 5 * 60
    cache_negative_ttl_seconds: int = 60

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def frontend_origin_list(self) -> list[str]:
        return _csv_to_list(self.frontend_origin)

    @property
    def authorized_party_list(self) -> list[str]:
        return _csv_to_list(self.clerk_authorized_parties)

    def cache_key(self, key: str) -> str:
        return f"{self.redis_namespace}:{key}"


def _csv_to_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
