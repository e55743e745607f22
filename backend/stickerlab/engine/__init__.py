"""StickerLab foreground isolation engine."""

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.pipeline import IsolationPipeline, create_pipeline, run_batch
from stickerlab.engine.registry import Layer, get_registry, stage

__all__ = [
    "stage",
    "Layer",
    "get_registry",
    "IsolationConfig",
    "IsolationContext",
    "IsolationPipeline",
    "create_pipeline",
    "run_batch",
]
