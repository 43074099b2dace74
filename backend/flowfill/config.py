"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

APP_VERSION = "0.1.0"


class Settings(BaseSettings):
    flowfill_env: str = "development"
    flowfill_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Engine safety caps, per placement pass
    max_positions: int = 10_000
    max_candidates: int = 100_000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
