"""Tests for the transform registry."""

import pytest

from percepta.engine.registry import (
    DECODE_LAYERS,
    ENCODE_LAYERS,
    Layer,
    TransformRegistry,
    TransformSpec,
    load_transforms,
)


def _noop(ctx) -> None:
    pass


def test_load_transforms_registers_every_stage():
    reg = load_transforms()
    ids = {s.id for s in reg.all()}
    assert {"F0.01", "F0.02", "F0.03", "F0.04", "F0.05", "F0.06"} <= ids
    assert {"E1.01", "E2.01", "E3.01"} <= ids
    assert {"D0.01", "D1.01", "D1.02", "D1.03", "D1.04", "D2.01", "D3.01"} <= ids
    assert {"D4.01", "D5.01", "D6.01", "D6.02"} <= ids


def test_layers_split_encode_and_decode():
    reg = load_transforms()
    encode_ids = {s.id for s in reg.in_layers(ENCODE_LAYERS)}
    decode_ids = {s.id for s in reg.in_layers(DECODE_LAYERS)}
    assert not encode_ids & decode_ids
    assert all(i[0] in "FE" for i in encode_ids)
    assert all(i[0] == "D" for i in decode_ids)


def test_dream_stage_is_tagged():
    reg = load_transforms()
    assert "dream" in reg.get("D5.01").tags
    assert "radial" in reg.get("F0.06").tags


def test_resolve_order_respects_dependencies():
    reg = load_transforms()
    order = [s.id for s in reg.resolve_order({s.id for s in reg.in_layers(ENCODE_LAYERS)})]
    assert order.index("F0.01") < order.index("F0.02") < order.index("F0.04")
    assert order.index("F0.05") < order.index("E1.01") < order.index("E3.01")
    assert order.index("E2.01") < order.index("E3.01")


def test_resolve_order_pulls_in_transitive_dependencies():
    reg = TransformRegistry()
    reg.register(TransformSpec(id="X0.01", layer=Layer.FEATURES, fn=_noop))
    reg.register(TransformSpec(id="X0.02", layer=Layer.FEATURES, fn=_noop, dependencies=["X0.01"]))
    reg.register(TransformSpec(id="X1.01", layer=Layer.AFFECT, fn=_noop, dependencies=["X0.02"]))

    assert [s.id for s in reg.resolve_order({"X1.01"})] == ["X0.01", "X0.02", "X1.01"]


def test_duplicate_id_rejected():
    reg = TransformRegistry()
    reg.register(TransformSpec(id="X0.01", layer=Layer.FEATURES, fn=_noop))
    with pytest.raises(ValueError, match="Duplicate"):
        reg.register(TransformSpec(id="X0.01", layer=Layer.FEATURES, fn=_noop))


def test_circular_dependency_detected():
    reg = TransformRegistry()
    reg.register(TransformSpec(id="X0.01", layer=Layer.FEATURES, fn=_noop, dependencies=["X0.02"]))
    reg.register(TransformSpec(id="X0.02", layer=Layer.FEATURES, fn=_noop, dependencies=["X0.01"]))
    with pytest.raises(ValueError, match="Circular"):
        reg.resolve_order()
