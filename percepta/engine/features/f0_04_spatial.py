"""F0.04 — Spatial layout.

Mass = area·saliency. Quadrant weights about the mass-weighted centroid:
  clustered   one quadrant holds > 60% of the mass
  diagonal    |(TL+BR) − (TR+BL)| / total > 0.3
  asymmetric  coefficient of variation of the four weights > 0.3
  balanced    otherwise (and when there are no shapes)
Depth score = 0.7·size + 0.3·(cy / H); lower in the frame reads as closer.
"""

from __future__ import annotations

from percepta.engine.context import EncodingContext, Shape, SpatialFeatures
from percepta.engine.registry import Layer, transform
from percepta.engine.symbols.vocabulary import GRID_ZONES
from percepta.utils.math_helpers import coefficient_of_variation

# Depth score cut points
_FOREGROUND_MIN = 0.5
_MIDGROUND_MIN = 0.3


def grid_zone(x: float, y: float, width: int, height: int) -> int:
    """Row-major 3×3 cell index of a point."""
    gx = min(2, max(0, int(3 * x / width)))
    gy = min(2, max(0, int(3 * y / height)))
    return gy * 3 + gx


def depth_bucket(shape: Shape, width: int, height: int) -> str:
    size = min(1.0, 4 * shape.bbox_area / (width * height))
    score = 0.7 * size + 0.3 * (shape.centroid[1] / height)
    if score > _FOREGROUND_MIN:
        return "foreground"
    if score > _MIDGROUND_MIN:
        return "midground"
    return "background"


def classify_distribution(quadrants: list[float], clustered: float, diagonal: float, asymmetric: float) -> str:
    total = sum(quadrants)
    if total <= 0:
        return "balanced"
    if max(quadrants) / total > clustered:
        return "clustered"
    tl, tr, bl, br = quadrants
    if abs((tl + br) - (tr + bl)) / total > diagonal:
        return "diagonal"
    if coefficient_of_variation(quadrants) > asymmetric:
        return "asymmetric"
    return "balanced"


@transform(
    id="F0.04",
    layer=Layer.FEATURES,
    dependencies=["F0.02"],
    description="Center of mass, quadrant distribution, depth buckets, focus zone",
)
def analyze_spatial(ctx: EncodingContext) -> None:
    config = ctx.config
    w, h = ctx.width, ctx.height
    shapes = ctx.shapes

    total_mass = sum(s.mass for s in shapes)
    if total_mass > 0:
        cx = sum(s.centroid[0] * s.mass for s in shapes) / total_mass
        cy = sum(s.centroid[1] * s.mass for s in shapes) / total_mass
    else:
        cx, cy = w / 2, h / 2

    # TL, TR, BL, BR about the center of mass
    quadrants = [0.0, 0.0, 0.0, 0.0]
    for s in shapes:
        qx = 0 if s.centroid[0] < cx else 1
        qy = 0 if s.centroid[1] < cy else 1
        quadrants[qy * 2 + qx] += s.mass

    pattern = classify_distribution(
        quadrants, config.clustered_fraction, config.diagonal_imbalance, config.asymmetric_cv
    )

    depth_map: dict[str, list[int]] = {"foreground": [], "midground": [], "background": []}
    for i, s in enumerate(shapes):
        s.depth = depth_bucket(s, w, h)
        depth_map[s.depth].append(i)

    focus = "center"
    if shapes:
        top = shapes[0]
        focus = GRID_ZONES[grid_zone(top.centroid[0], top.centroid[1], w, h)]

    left = sum(s.mass for s in shapes if s.centroid[0] < w / 2)
    right = total_mass - left
    asymmetry = abs(left - right) / total_mass if total_mass > 0 else 0.0

    fg_mass = sum(shapes[i].mass for i in depth_map["foreground"])

    ctx.spatial = SpatialFeatures(
        center_of_mass=(round(cx, 4), round(cy, 4)),
        distribution_pattern=pattern,
        depth_map=depth_map,
        primary_focus=focus,
        asymmetry=round(asymmetry, 6),
        central_mass=round(total_mass / (w * h), 6),
        foreground_weight=round(fg_mass / total_mass, 6) if total_mass > 0 else 0.0,
    )
