"""Tests for edge detection (F0.01) and shape extraction (F0.02)."""

import math

import numpy as np
import pytest

from percepta.engine.config import CodecConfig
from percepta.engine.context import EncodingContext, RasterImage, Shape
from percepta.engine.features.f0_02_shapes import classify_shape, shape_saliency
from percepta.engine.pipeline import Pipeline
from percepta.engine.registry import Layer, load_transforms
from percepta.errors import InputError
from percepta.utils.geometry import bbox, centroid, path_length
from tests.conftest import raster, solid


def _features(image: RasterImage, mode: str = "balanced") -> EncodingContext:
    ctx = EncodingContext(image=image, mode=mode)
    Pipeline(registry=load_transforms(), layers={Layer.FEATURES}, fail_fast=True).run(ctx)
    return ctx


def _shape_from(points: np.ndarray) -> Shape:
    return Shape(
        points=points,
        centroid=centroid(points),
        area=len(points),
        perimeter=path_length(points),
        bounding_box=bbox(points),
    )


def _ring(n: int, r: float, cx: float = 32, cy: float = 32) -> np.ndarray:
    t = np.linspace(0, 2 * math.pi, n, endpoint=False)
    return np.column_stack([cx + r * np.cos(t), cy + r * np.sin(t)])


def _square_outline(x0: int, y0: int, side: int) -> np.ndarray:
    top = [(x, y0) for x in range(x0, x0 + side)]
    right = [(x0 + side, y) for y in range(y0, y0 + side)]
    bottom = [(x, y0 + side) for x in range(x0 + side, x0, -1)]
    left = [(x0, y) for y in range(y0 + side, y0, -1)]
    return np.asarray(top + right + bottom + left, dtype=np.float64)


def test_uniform_image_has_no_edges(white_image):
    ctx = _features(white_image)
    assert ctx.edges.density == 0.0
    assert ctx.edges.entropy == 0.0
    assert ctx.shapes == []


def test_square_produces_edges_and_a_shape(square_image):
    ctx = _features(square_image)
    assert 0.0 < ctx.edges.density < 0.5
    assert sum(ctx.edges.histogram) > 0
    assert len(ctx.shapes) >= 1
    assert all(0.0 <= s.saliency <= 1.0 for s in ctx.shapes)


def test_shapes_sorted_by_symbol_weight(busy_image):
    ctx = _features(busy_image)
    weights = [s.symbol_weight for s in ctx.shapes]
    assert weights == sorted(weights, reverse=True)
    assert len(ctx.shapes) <= ctx.config.max_shapes


def test_compact_mode_uses_higher_threshold(square_image):
    assert _features(square_image, "compact").edge_threshold == CodecConfig().edge_threshold_compact
    assert _features(square_image, "rich").edge_threshold == CodecConfig().edge_threshold


def test_light_path_accepts_small_images():
    ctx = _features(raster(solid(8, 8)))
    assert ctx.edges.density == 0.0


def test_too_small_image_rejected():
    with pytest.raises(InputError):
        _features(raster(solid(4, 4)))


def test_classify_circle():
    assert classify_shape(_shape_from(_ring(64, 12)), CodecConfig()) == "circle"


def test_classify_square_outline():
    assert classify_shape(_shape_from(_square_outline(10, 10, 20)), CodecConfig()) == "square"


def test_classify_lines():
    horizontal = np.column_stack([np.arange(30.0), np.full(30, 5.0)])
    vertical = np.column_stack([np.full(30, 5.0), np.arange(30.0)])
    assert classify_shape(_shape_from(horizontal), CodecConfig()) == "horizontal-line"
    assert classify_shape(_shape_from(vertical), CodecConfig()) == "vertical-line"


def test_centered_shape_is_more_salient():
    cfg = CodecConfig()
    centered = _shape_from(_ring(40, 8, 32, 32))
    corner = _shape_from(_ring(40, 8, 9, 9))
    assert shape_saliency(centered, 64, 64, cfg) > shape_saliency(corner, 64, 64, cfg)
