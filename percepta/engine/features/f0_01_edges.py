"""F0.01 — Edge detection. ★

Sobel gradient of BT.601 luminance. Density = fraction of stride-sampled
interior pixels above threshold; orientation = 8-bin atan2 histogram reduced
to its dominant bin and normalized entropy.
"""

from __future__ import annotations

import math

import numpy as np
from scipy import ndimage

from percepta.engine.context import EdgeFeatures, EncodingContext
from percepta.engine.registry import Layer, transform
from percepta.utils.colorspace import luminance
from percepta.utils.math_helpers import normalized_entropy

ORIENTATION_BINS = 8


@transform(
    id="F0.01",
    layer=Layer.FEATURES,
    description="Sobel gradient, edge density and orientation histogram",
)
def detect_edges(ctx: EncodingContext) -> None:
    ctx.image.validate(strict=False)
    pixels = ctx.image.to_array()
    ctx.pixels = pixels

    lum = luminance(pixels[:, :, :3])
    gx = ndimage.sobel(lum, axis=1, mode="nearest")
    gy = ndimage.sobel(lum, axis=0, mode="nearest")
    # Border pixels carry no gradient
    for g in (gx, gy):
        g[0, :] = g[-1, :] = 0.0
        g[:, 0] = g[:, -1] = 0.0
    magnitude = np.hypot(gx, gy)

    ctx.gradient_x = gx
    ctx.gradient_y = gy
    ctx.magnitude = magnitude
    ctx.edge_threshold = ctx.config.threshold_for(ctx.mode)

    stride = max(1, ctx.config.sample_stride)
    sampled = magnitude[1:-1:stride, 1:-1:stride]
    if sampled.size == 0:
        ctx.edges = EdgeFeatures()
        return

    above = sampled > ctx.edge_threshold
    density = float(above.mean())

    angles = np.arctan2(gy[1:-1:stride, 1:-1:stride][above], gx[1:-1:stride, 1:-1:stride][above])
    bins = ((angles + math.pi) / (2 * math.pi) * ORIENTATION_BINS).astype(int) % ORIENTATION_BINS
    histogram = np.bincount(bins, minlength=ORIENTATION_BINS)

    dominant = int(np.argmax(histogram)) if histogram.sum() > 0 else 0
    angle = -math.pi + (dominant + 0.5) * (2 * math.pi / ORIENTATION_BINS)

    ctx.edges = EdgeFeatures(
        density=round(density, 6),
        angle=round(angle, 6),
        entropy=round(normalized_entropy(histogram), 6),
        histogram=[int(c) for c in histogram],
    )
