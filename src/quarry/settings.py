"""Application settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QUARRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    manifest_file: str = "package.json"

    # Scan limits
    max_concurrent_reads: int = 32
    max_files: int = 20_000
    max_file_size: int = 2_000_000  # bytes


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
