"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    stickerlab_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Pipeline execution
    pipeline_timeout_s: float = 5.0
    batch_workers: int = 0  # 0 = one worker per CPU core

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
