"""Stage registry — every pipeline stage is a standalone function registered via decorator.

Usage:
    @stage(id="T1.02", layer=Layer.CONTOUR, dependencies=["T1.01"])
    def boundary_trace(ctx: IsolationContext, config: IsolationConfig) -> None:
        ctx.contour = trace_boundary(ctx.edges)

Adding a stage = creating one file under a layer package with the decorator.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from stickerlab.engine.config import IsolationConfig
    from stickerlab.engine.context import IsolationContext

logger = logging.getLogger(__name__)

StageFn = Callable[["IsolationContext", "IsolationConfig"], None]


class Layer(enum.IntEnum):
    MASKING = 0
    CONTOUR = 1
    PRESENTATION = 2


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: StageFn
    dependencies: list[str] = field(default_factory=list)
    description: str = ""


class StageRegistry:
    """Registry of pipeline stages keyed by id."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def get_layer(self, layer: Layer) -> list[StageSpec]:
        return sorted((s for s in self._stages.values() if s.layer == layer), key=lambda s: s.id)

    def all(self) -> list[StageSpec]:
        return sorted(self._stages.values(), key=lambda s: (s.layer, s.id))

    def resolve_order(self, requested_ids: set[str] | None = None) -> list[StageSpec]:
        """Dependency order via Kahn's algorithm; ids break ties.

        Requested ids pull in their transitive dependencies.
        """
        pool = self._stages
        if requested_ids is not None:
            needed: set[str] = set()
            stack = list(requested_ids)
            while stack:
                sid = stack.pop()
                if sid in needed or sid not in pool:
                    continue
                needed.add(sid)
                stack.extend(pool[sid].dependencies)
            pool = {k: v for k, v in pool.items() if k in needed}

        in_degree = {
            sid: sum(1 for dep in spec.dependencies if dep in pool)
            for sid, spec in pool.items()
        }
        ready = sorted(sid for sid, deg in in_degree.items() if deg == 0)
        ordered: list[StageSpec] = []

        while ready:
            sid = ready.pop(0)
            ordered.append(pool[sid])
            for other_id, other in pool.items():
                if sid in other.dependencies:
                    in_degree[other_id] -= 1
                    if in_degree[other_id] == 0:
                        ready.append(other_id)
            ready.sort()

        if len(ordered) != len(pool):
            stuck = set(pool) - {s.id for s in ordered}
            raise ValueError(f"Circular dependency detected among: {sorted(stuck)}")

        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


# Module-level singleton
_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    description: str = "",
):
    """Decorator to register a stage function."""

    def decorator(fn: StageFn) -> StageFn:
        _registry.register(
            StageSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=dependencies or [],
                description=description,
            )
        )
        return fn

    return decorator
