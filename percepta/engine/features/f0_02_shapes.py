"""F0.02 — Shape extraction. ★

Greedy 8-connected contour walk over above-threshold gradient pixels, then
per-shape saliency and type classification.

Saliency = w_size·size + w_compact·compactness + w_center·centrality
  size        = min(1, area / half-perimeter of the image)
  compactness = min(1, 4π·area / perimeter²)
  centrality  = 1 − distance(centroid, image center) / half diagonal
"""

from __future__ import annotations

import math

import numpy as np

from percepta.engine.config import CodecConfig
from percepta.engine.context import EncodingContext, Shape
from percepta.engine.registry import Layer, transform
from percepta.utils.geometry import (
    bbox,
    centroid,
    centroid_distance_cv,
    hull_corner_count,
    hull_perimeter,
    path_length,
)

# E, SE, S, SW, W, NW, N, NE (image y grows downward)
DIRECTIONS = ((1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1), (1, -1))


def _walk(
    above: np.ndarray,
    visited: np.ndarray,
    x: int,
    y: int,
    max_steps: int,
) -> list[tuple[int, int]]:
    """Trace one contour from (x, y), preferring to keep the current heading."""
    h, w = above.shape
    points = [(x, y)]
    visited[y, x] = True
    heading = 0
    for _ in range(max_steps):
        moved = False
        # Start two turns back from the heading and sweep clockwise
        for k in range(8):
            d = (heading + 6 + k) % 8
            nx, ny = x + DIRECTIONS[d][0], y + DIRECTIONS[d][1]
            if 0 <= nx < w and 0 <= ny < h and above[ny, nx] and not visited[ny, nx]:
                x, y, heading = nx, ny, d
                visited[y, x] = True
                points.append((x, y))
                moved = True
                break
        if not moved:
            break
    return points


def classify_shape(shape: Shape, config: CodecConfig) -> str:
    """Label a traced contour by aspect, radial regularity and hull corners."""
    w, h = shape.bbox_width, shape.bbox_height
    aspect = w / h if h else float("inf")
    if aspect > config.line_aspect_high:
        return "horizontal-line"
    if aspect < config.line_aspect_low:
        return "vertical-line"

    pts = shape.points
    if centroid_distance_cv(pts) < config.circle_radial_cv:
        return "circle"

    epsilon = config.hull_rdp_epsilon_pct * math.hypot(w, h)
    corners = hull_corner_count(pts, epsilon)
    if corners == 3:
        return "triangle"
    if corners == 4:
        if abs(aspect - 1.0) < config.square_aspect_tolerance:
            return "square"
        return "rectangle"

    hull_perim = hull_perimeter(pts)
    if hull_perim > 0 and shape.perimeter / hull_perim > config.complex_path_ratio:
        return "complex"
    return "organic"


def shape_saliency(shape: Shape, width: int, height: int, config: CodecConfig) -> float:
    w_size, w_compact, w_center = config.saliency_weights
    size = min(1.0, shape.area / (0.5 * (width + height)))
    compactness = 0.0
    if shape.perimeter > 1e-10:
        compactness = min(1.0, 4 * math.pi * shape.area / shape.perimeter ** 2)
    half_diag = 0.5 * math.hypot(width, height)
    dist = math.hypot(shape.centroid[0] - width / 2, shape.centroid[1] - height / 2)
    centrality = max(0.0, 1.0 - dist / half_diag)
    return max(0.0, min(1.0, w_size * size + w_compact * compactness + w_center * centrality))


@transform(
    id="F0.02",
    layer=Layer.FEATURES,
    dependencies=["F0.01"],
    description="Trace contours, score saliency and classify shape types",
)
def extract_shapes(ctx: EncodingContext) -> None:
    config = ctx.config
    magnitude = ctx.magnitude
    h, w = magnitude.shape
    above = magnitude > ctx.edge_threshold
    visited = np.zeros_like(above)
    max_steps = w * h

    step = max(1, config.sample_stride * config.shape_seed_factor)
    seed_mask = np.zeros_like(above)
    seed_mask[1:-1:step, 1:-1:step] = True
    seeds = np.argwhere(above & seed_mask)

    shapes: list[Shape] = []
    for sy, sx in seeds:
        if visited[sy, sx]:
            continue
        walked = _walk(above, visited, int(sx), int(sy), max_steps)
        if len(walked) < config.min_shape_points:
            continue

        pts = np.asarray(walked, dtype=np.float64)
        shape = Shape(
            points=pts,
            centroid=centroid(pts),
            area=len(walked),
            perimeter=path_length(pts, closed=True),
            bounding_box=bbox(pts),
        )
        shape.saliency = round(shape_saliency(shape, w, h, config), 6)
        shape.type = classify_shape(shape, config)
        shape.symbol_weight = shape.saliency * (1 + math.log(shape.area + 1) / 10)
        shapes.append(shape)

    shapes.sort(key=lambda s: s.symbol_weight, reverse=True)
    ctx.shapes = shapes[: config.max_shapes]
