"""Leaf-node geometry helpers for traced contours. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import ConvexHull, QhullError

from percepta.utils.contour import simplify_ring


def bbox(points: NDArray[np.float64]) -> tuple[int, int, int, int]:
    """Compute (xmin, ymin, xmax, ymax) bounding box in pixel units."""
    if len(points) == 0:
        return (0, 0, 0, 0)
    return (
        int(np.min(points[:, 0])),
        int(np.min(points[:, 1])),
        int(np.max(points[:, 0])),
        int(np.max(points[:, 1])),
    )


def centroid(points: NDArray[np.float64]) -> tuple[float, float]:
    """Compute centroid of a point set."""
    if len(points) == 0:
        return (0.0, 0.0)
    return (float(np.mean(points[:, 0])), float(np.mean(points[:, 1])))


def centroid_distance_cv(points: NDArray[np.float64]) -> float:
    """Coefficient of variation of centroid distances. <0.15 = circular."""
    if len(points) == 0:
        return float("inf")
    cx, cy = centroid(points)
    dists = np.hypot(points[:, 0] - cx, points[:, 1] - cy)
    mean = float(np.mean(dists))
    if mean < 1e-10:
        return float("inf")
    return float(np.std(dists) / mean)


def path_length(points: NDArray[np.float64], closed: bool = True) -> float:
    """Sum of segment lengths; ``closed`` adds the last→first segment."""
    if len(points) < 2:
        return 0.0
    seg = np.diff(points, axis=0)
    total = float(np.hypot(seg[:, 0], seg[:, 1]).sum())
    if closed:
        dx, dy = points[0] - points[-1]
        total += math.hypot(float(dx), float(dy))
    return total


def hull_outline(points: NDArray[np.float64]) -> NDArray[np.float64] | None:
    """Closed convex hull ring (first vertex repeated), or None if degenerate."""
    if len(points) < 3:
        return None
    try:
        hull = ConvexHull(points)
    except QhullError:
        return None
    ring = points[hull.vertices]
    return np.vstack([ring, ring[:1]])


def hull_corner_count(points: NDArray[np.float64], epsilon: float) -> int:
    """Corners of the RDP-simplified convex hull. 0 when degenerate."""
    ring = hull_outline(points)
    if ring is None:
        return 0
    return len(simplify_ring(ring, epsilon))


def hull_perimeter(points: NDArray[np.float64]) -> float:
    ring = hull_outline(points)
    if ring is None:
        return 0.0
    return path_length(ring, closed=False)
