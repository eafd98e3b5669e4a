"""Polyline simplification for traced shape outlines."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def _chord_distances(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Distance of every point to the segment joining the first and last."""
    a, b = points[0], points[-1]
    chord = b - a
    length = float(np.hypot(*chord))
    if length < 1e-10:
        return np.linalg.norm(points - a, axis=1)
    rel = points - a
    return np.abs(rel[:, 0] * chord[1] - rel[:, 1] * chord[0]) / length


def rdp_keep_mask(points: NDArray[np.float64], epsilon: float) -> NDArray[np.bool_]:
    """Ramer-Douglas-Peucker over an open polyline, as a mask of kept vertices."""
    n = len(points)
    keep = np.zeros(n, dtype=bool)
    if n == 0:
        return keep
    keep[0] = keep[-1] = True
    spans = [(0, n - 1)]
    while spans:
        lo, hi = spans.pop()
        if hi - lo < 2:
            continue
        dist = _chord_distances(points[lo : hi + 1])
        split = int(np.argmax(dist[1:-1])) + 1
        if dist[split] > epsilon:
            keep[lo + split] = True
            spans.append((lo, lo + split))
            spans.append((lo + split, hi))
    return keep


def simplify_ring(ring: NDArray[np.float64], epsilon: float) -> NDArray[np.float64]:
    """Simplify a closed outline; returns vertices without the closing repeat.

    The ring is cut at the vertex farthest from its start, giving two open
    halves with non-degenerate chords.
    """
    if len(ring) > 1 and np.allclose(ring[0], ring[-1]):
        ring = ring[:-1]
    if len(ring) <= 3:
        return ring

    far = int(np.argmax(np.linalg.norm(ring - ring[0], axis=1)))
    closed = np.vstack([ring, ring[:1]])
    keep = np.zeros(len(closed), dtype=bool)
    keep[: far + 1] |= rdp_keep_mask(closed[: far + 1], epsilon)
    keep[far:] |= rdp_keep_mask(closed[far:], epsilon)
    return closed[:-1][keep[:-1]]
