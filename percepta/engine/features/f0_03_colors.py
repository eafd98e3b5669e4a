"""F0.03 — Color analysis.

Stride-sampled, alpha-filtered pixels clustered with seeded k-means++ under
CIEDE2000. Harmony counts complementary (ΔE > 80) and analogous (ΔE < 20)
cluster pairs; temperature is the weight-averaged red/blue balance.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from percepta.engine.config import CodecConfig
from percepta.engine.context import ColorCluster, ColorFeatures, EncodingContext, PaletteEntry
from percepta.engine.registry import Layer, transform
from percepta.utils.colorspace import pairwise_delta_e, rgb_to_lab
from percepta.utils.math_helpers import clamp01

logger = logging.getLogger(__name__)

# Fully transparent images are analyzed as a single white sample
_NEUTRAL_SAMPLE = np.array([[255, 255, 255]], dtype=np.float64)


def sample_pixels(pixels: NDArray[np.uint8], step: int) -> NDArray[np.float64]:
    """RGB samples at ``step``, dropping fully transparent pixels."""
    grid = pixels[::step, ::step].reshape(-1, 4)
    opaque = grid[grid[:, 3] > 0, :3].astype(np.float64)
    if len(opaque) == 0:
        return _NEUTRAL_SAMPLE.copy()
    return opaque


def _seed_centers(lab: NDArray[np.float64], k: int, rng: np.random.Generator) -> NDArray[np.float64]:
    """k-means++ seeding with squared ΔE00 as the sampling weight."""
    n = len(lab)
    centers = [lab[int(rng.integers(n))]]
    while len(centers) < k:
        nearest = pairwise_delta_e(lab, np.asarray(centers)).min(axis=1) ** 2
        total = float(nearest.sum())
        if total <= 1e-12:
            break
        centers.append(lab[int(rng.choice(n, p=nearest / total))])
    return np.asarray(centers, dtype=np.float64)


def cluster_colors(rgb: NDArray[np.float64], config: CodecConfig) -> list[ColorCluster]:
    lab = rgb_to_lab(rgb)
    unique = len(np.unique(rgb, axis=0))
    k = max(1, min(config.max_color_clusters, unique))
    rng = np.random.default_rng(config.kmeans_seed)
    centers = _seed_centers(lab, k, rng)

    labels = np.zeros(len(lab), dtype=int)
    for iteration in range(config.max_kmeans_iterations):
        labels = pairwise_delta_e(lab, centers).argmin(axis=1)
        moved = False
        for j in range(len(centers)):
            members = lab[labels == j]
            if len(members) == 0:
                continue
            updated = members.mean(axis=0)
            shift = float(pairwise_delta_e(updated[None, :], centers[j][None, :])[0, 0])
            if shift > config.center_shift_tolerance:
                centers[j] = updated
                moved = True
        if not moved:
            logger.debug("k-means converged after %d iterations (k=%d)", iteration + 1, len(centers))
            break
    labels = pairwise_delta_e(lab, centers).argmin(axis=1)

    clusters: list[ColorCluster] = []
    n = len(rgb)
    for j in range(len(centers)):
        mask = labels == j
        count = int(mask.sum())
        if count == 0:
            continue
        mean_rgb = rgb[mask].mean(axis=0)
        clusters.append(
            ColorCluster(
                center=tuple(int(round(c)) for c in mean_rgb),
                weight=count / n,
                lab=tuple(float(v) for v in centers[j]),
            )
        )
    clusters.sort(key=lambda c: c.weight, reverse=True)
    return clusters


def color_harmony(clusters: list[ColorCluster], config: CodecConfig) -> float:
    if len(clusters) < 2:
        return 1.0
    lab = np.asarray([c.lab for c in clusters])
    dist = pairwise_delta_e(lab, lab)
    iu = np.triu_indices(len(clusters), k=1)
    pairs = dist[iu]
    harmonious = (pairs > config.harmony_complementary) | (pairs < config.harmony_analogous)
    return float(harmonious.mean())


def palette_entry(center: tuple[int, int, int]) -> PaletteEntry:
    r, g, b = center
    warmth = clamp01((r - b) / 510 + 0.5)
    brightness = (r + g + b) / (3 * 255)
    hi, lo = max(center), min(center)
    saturation = (hi - lo) / hi if hi > 0 else 0.0
    return PaletteEntry(
        warmth=round(warmth, 6),
        brightness=round(brightness, 6),
        saturation=round(saturation, 6),
        emotional_weight=round(0.4 * warmth + 0.3 * brightness + 0.3 * saturation, 6),
    )


@transform(
    id="F0.03",
    layer=Layer.FEATURES,
    dependencies=["F0.01"],
    description="CIEDE2000 k-means++ color clusters, harmony and temperature",
)
def analyze_colors(ctx: EncodingContext) -> None:
    config = ctx.config
    step = max(1, config.sample_stride * config.color_sample_factor)
    rgb = sample_pixels(ctx.pixels, step)
    clusters = cluster_colors(rgb, config)

    temperature = 0.5 + sum(c.weight * (c.center[0] - c.center[2]) / 255 for c in clusters)
    ctx.colors = ColorFeatures(
        clusters=clusters,
        harmony=round(color_harmony(clusters, config), 6),
        temperature=round(clamp01(temperature), 6),
        palette=[palette_entry(c.center) for c in clusters],
    )
