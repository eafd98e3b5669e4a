"""Tests for color analysis (F0.03), spatial layout (F0.04-F0.06)."""

import numpy as np

from percepta.engine.config import CodecConfig
from percepta.engine.context import EncodingContext, Shape
from percepta.engine.features.f0_03_colors import cluster_colors, color_harmony, palette_entry, sample_pixels
from percepta.engine.features.f0_04_spatial import classify_distribution, depth_bucket, grid_zone
from percepta.engine.pipeline import Pipeline
from percepta.engine.registry import Layer, load_transforms
from tests.conftest import RED, BLUE, raster, solid, with_square


def _features(image) -> EncodingContext:
    ctx = EncodingContext(image=image)
    Pipeline(registry=load_transforms(), layers={Layer.FEATURES}, fail_fast=True).run(ctx)
    return ctx


def test_white_image_single_cluster(white_image):
    ctx = _features(white_image)
    assert len(ctx.colors.clusters) == 1
    assert ctx.colors.clusters[0].center == (255, 255, 255)
    assert ctx.colors.harmony == 1.0
    assert ctx.colors.temperature == 0.5


def test_two_color_image_clusters():
    arr = solid(32, 32, RED)
    arr[:, 16:, :3] = BLUE
    ctx = _features(raster(arr))
    centers = {c.center for c in ctx.colors.clusters}
    assert centers == {RED, BLUE}
    assert abs(sum(c.weight for c in ctx.colors.clusters) - 1.0) < 1e-9


def test_clustering_is_deterministic():
    rng = np.random.default_rng(7)
    rgb = rng.integers(0, 256, size=(200, 3)).astype(np.float64)
    a = cluster_colors(rgb, CodecConfig())
    b = cluster_colors(rgb, CodecConfig())
    assert [c.center for c in a] == [c.center for c in b]
    assert len(a) <= CodecConfig().max_color_clusters


def test_transparent_pixels_are_skipped():
    arr = solid(16, 16, RED)
    arr[..., 3] = 0
    samples = sample_pixels(arr, 1)
    assert samples.tolist() == [[255.0, 255.0, 255.0]]


def test_warm_image_is_warm():
    ctx = _features(raster(solid(32, 32, RED)))
    assert ctx.colors.temperature > 0.7
    assert palette_entry(RED).warmth > 0.5


def test_harmony_single_cluster_is_one():
    clusters = cluster_colors(np.asarray([[10.0, 10.0, 10.0]]), CodecConfig())
    assert color_harmony(clusters, CodecConfig()) == 1.0


def test_grid_zone_row_major():
    assert grid_zone(1, 1, 90, 90) == 0
    assert grid_zone(45, 45, 90, 90) == 4
    assert grid_zone(89, 89, 90, 90) == 8
    assert grid_zone(89, 1, 90, 90) == 2


def test_depth_bucket_large_low_shape_is_foreground():
    big_low = Shape(centroid=(50.0, 90.0), bounding_box=(0, 40, 99, 99))
    small_high = Shape(centroid=(50.0, 5.0), bounding_box=(48, 3, 52, 7))
    assert depth_bucket(big_low, 100, 100) == "foreground"
    assert depth_bucket(small_high, 100, 100) == "background"


def test_classify_distribution():
    args = (0.6, 0.3, 0.3)
    assert classify_distribution([0.9, 0.05, 0.03, 0.02], *args) == "clustered"
    assert classify_distribution([0.25, 0.25, 0.25, 0.25], *args) == "balanced"


def test_empty_scene_is_balanced(white_image):
    ctx = _features(white_image)
    assert ctx.spatial.distribution_pattern == "balanced"
    assert ctx.spatial.asymmetry == 0.0
    assert ctx.spatial.foreground_weight == 0.0


def test_off_center_square_is_asymmetric():
    ctx = _features(raster(with_square(solid(64, 64), 4, 4, 16)))
    assert ctx.spatial.asymmetry > 0.0
    assert ctx.saliency > 0.0


def test_radial_distribution_computed(busy_image):
    ctx = _features(busy_image)
    radial = ctx.spatial.radial
    assert radial is not None
    assert len(radial.sectors) == 8
    assert 0.0 <= radial.balance <= 1.0
    assert 0 <= radial.dominant_sector < 8


def test_radial_gated_for_cartesian(busy_image):
    ctx = EncodingContext(image=busy_image, gated_tags={"radial"})
    Pipeline(registry=load_transforms(), layers={Layer.FEATURES}, fail_fast=True).run(ctx)
    assert ctx.spatial.radial is None
    assert "F0.06" not in ctx.completed_transforms
