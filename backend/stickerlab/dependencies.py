"""FastAPI dependency injection."""

from __future__ import annotations

from stickerlab.config import settings
from stickerlab.engine.config import IsolationConfig


def get_isolation_config() -> IsolationConfig:
    return IsolationConfig(timeout_s=settings.pipeline_timeout_s)
