from __future__ import annotations

from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VAULTPREVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Vault Preview Gateway"
    APP_VERSION: str = "1.0.0"
    HOST: str = "0.0.0.0"
    PORT: int = 8001
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Grant service (issues short-lived signed URLs)
    GRANT_SERVICE_BASE_URL: str = "http://localhost:8000"
    GRANT_DOWNLOAD_PATH: str = "/files/{document_id}/download"
    GRANT_TIMEOUT_S: float = 10.0
    # Optional JSON file overriding the grant connection (base_url/download_path/timeout)
    GRANT_CONFIG_PATH: str = "grant_config.json"

    # Storage fetch
    CONTENT_TIMEOUT_S: float = 30.0
    STREAM_CHUNK_SIZE: int = Field(default=64 * 1024, gt=0)

    # `expires` is sent to the grant service in minutes
    PREVIEW_GRANT_EXPIRES_MINUTES: int = Field(default=5, gt=0)
    PREVIEW_CACHE_MAX_AGE_S: int = Field(default=300, ge=0)

    @model_validator(mode="after")
    def _cache_within_grant_lifetime(self) -> "Settings":
        if self.PREVIEW_CACHE_MAX_AGE_S > self.PREVIEW_GRANT_EXPIRES_MINUTES * 60:
            raise ValueError("PREVIEW_CACHE_MAX_AGE_S must not exceed the preview grant lifetime")
        return self


settings = Settings()
