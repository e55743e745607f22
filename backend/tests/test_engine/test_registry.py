"""Tests for the stage registry."""

import pytest

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.pipeline import load_stages
from stickerlab.engine.registry import Layer, StageRegistry, StageSpec, get_registry


def _noop(ctx: IsolationContext, config: IsolationConfig) -> None:
    pass


def test_register_and_get():
    reg = StageRegistry()
    spec = StageSpec(id="T0.01", layer=Layer.MASKING, fn=_noop)
    reg.register(spec)
    assert reg.get("T0.01") is spec
    assert reg.count == 1


def test_duplicate_id_rejected():
    reg = StageRegistry()
    reg.register(StageSpec(id="T0.01", layer=Layer.MASKING, fn=_noop))
    with pytest.raises(ValueError, match="Duplicate"):
        reg.register(StageSpec(id="T0.01", layer=Layer.MASKING, fn=_noop))


def test_get_layer():
    reg = StageRegistry()
    reg.register(StageSpec(id="T0.01", layer=Layer.MASKING, fn=_noop))
    reg.register(StageSpec(id="T1.01", layer=Layer.CONTOUR, fn=_noop))
    layer0 = reg.get_layer(Layer.MASKING)
    assert len(layer0) == 1
    assert layer0[0].id == "T0.01"


def test_resolve_order_pulls_in_dependencies():
    reg = StageRegistry()
    reg.register(StageSpec(id="T0.01", layer=Layer.MASKING, fn=_noop))
    reg.register(StageSpec(id="T1.01", layer=Layer.CONTOUR, fn=_noop, dependencies=["T0.01"]))
    reg.register(StageSpec(id="T2.01", layer=Layer.PRESENTATION, fn=_noop))
    ids = [s.id for s in reg.resolve_order({"T1.01"})]
    assert ids == ["T0.01", "T1.01"]


def test_cycle_detected():
    reg = StageRegistry()
    reg.register(StageSpec(id="A", layer=Layer.MASKING, fn=_noop, dependencies=["B"]))
    reg.register(StageSpec(id="B", layer=Layer.MASKING, fn=_noop, dependencies=["A"]))
    with pytest.raises(ValueError, match="Circular"):
        reg.resolve_order()


def test_builtin_stages_registered_in_order():
    load_stages()
    reg = get_registry()
    assert reg.count == 7
    ids = [s.id for s in reg.resolve_order()]
    assert ids == ["T0.01", "T0.02", "T1.01", "T1.02", "T1.03", "T2.01", "T2.02"]


def test_load_stages_is_repeatable():
    load_stages()
    load_stages()
    assert get_registry().count == 7
