"""Pipeline orchestrator — runs stages in dependency order with gating and a deadline."""

from __future__ import annotations

import importlib
import logging
import os
import pkgutil
import threading
import time
from collections.abc import Iterable
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.registry import StageRegistry, get_registry
from stickerlab.models.contour_path import NormalizedContourPath

logger = logging.getLogger(__name__)

_LAYER_PACKAGES = ("layer0", "layer1", "layer2")


def load_stages() -> None:
    """Import every stage module so the @stage decorators fire."""
    for layer_name in _LAYER_PACKAGES:
        package = importlib.import_module(f"stickerlab.engine.{layer_name}")
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"stickerlab.engine.{layer_name}.{module_name}")


class IsolationPipeline:
    """Orchestrates the isolation stages for one image at a time."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: IsolationConfig | None = None,
    ) -> None:
        if registry is None:
            load_stages()
        self.registry = registry or get_registry()
        self.config = config or IsolationConfig()

    def run(
        self,
        ctx: IsolationContext,
        cancel_event: threading.Event | None = None,
    ) -> IsolationContext:
        """Run every stage on ``ctx``. Never raises for stage failures."""
        start = time.perf_counter()
        deadline = start + self.config.timeout_s if self.config.timeout_s else None

        skip_ids = self._gate()
        ordered = [s for s in self.registry.resolve_order() if s.id not in skip_ids]
        ctx.skipped_stages.update(skip_ids)
        logger.info("Pipeline: %d stages queued (%d skipped)", len(ordered), len(skip_ids))

        for i, spec in enumerate(ordered):
            if self._should_stop(cancel_event, deadline):
                ctx.cancelled = True
                ctx.skipped_stages.update(s.id for s in ordered[i:])
                logger.info("Pipeline cancelled before %s", spec.id)
                break

            t0 = time.perf_counter()
            try:
                spec.fn(ctx, self.config)
                ctx.completed_stages.add(spec.id)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
            elapsed = (time.perf_counter() - t0) * 1000
            ctx.timings_ms[spec.id] = round(elapsed, 2)
            logger.debug("  %s completed in %.1fms", spec.id, elapsed)

            if ctx.no_subject:
                ctx.skipped_stages.update(s.id for s in ordered[i + 1 :])
                break

        self._apply_fallbacks(ctx)
        if not self.config.keep_intermediates:
            ctx.release_intermediates()

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d stages in %.0fms (status=%s)",
            len(ctx.completed_stages),
            len(ordered),
            total,
            ctx.status,
        )
        return ctx

    def _gate(self) -> set[str]:
        """Stages switched off by configuration."""
        skip: set[str] = set()
        if not self.config.outline_enabled:
            skip.add("T2.02")
        return skip

    @staticmethod
    def _should_stop(cancel_event: threading.Event | None, deadline: float | None) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return True
        return deadline is not None and time.perf_counter() >= deadline

    @staticmethod
    def _apply_fallbacks(ctx: IsolationContext) -> None:
        if ctx.cancelled:
            return
        if ctx.masked_image is None:
            ctx.no_subject = True
            return
        if ctx.contour_path is None:
            ctx.contour_path = NormalizedContourPath.unit_rectangle()


def create_pipeline(config: IsolationConfig | None = None) -> IsolationPipeline:
    """Factory function for creating a pipeline instance."""
    return IsolationPipeline(config=config)


def _run_one(ctx: IsolationContext, config: IsolationConfig) -> IsolationContext:
    return IsolationPipeline(config=config).run(ctx)


def run_batch(
    contexts: Iterable[IsolationContext],
    config: IsolationConfig | None = None,
    max_workers: int | None = None,
    use_processes: bool = False,
) -> list[IsolationContext]:
    """Run one pipeline per context on a bounded pool; results keep input order.

    With processes the returned contexts are copies; with threads they are
    the input objects, mutated in place.
    """
    config = config or IsolationConfig()
    jobs = list(contexts)
    if not jobs:
        return []

    workers = max_workers or os.cpu_count() or 1
    workers = max(1, min(workers, len(jobs)))
    pool_cls: type[Executor] = ProcessPoolExecutor if use_processes else ThreadPoolExecutor
    logger.info("Batch: %d image(s) on %d worker(s)", len(jobs), workers)

    with pool_cls(max_workers=workers) as pool:
        return list(pool.map(_run_one, jobs, [config] * len(jobs)))
