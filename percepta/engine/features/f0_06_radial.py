"""F0.06 — Radial distribution.

Eight angular sectors of shape mass about the center of mass. Only runs for
grammars with radial spatial priority; cartesian grammars gate the "radial" tag.

balance = 1 − CV(sectors)/√7, where √7 is the CV with all mass in one sector.
"""

from __future__ import annotations

import math

from percepta.engine.context import EncodingContext, RadialDistribution
from percepta.engine.registry import Layer, transform
from percepta.utils.math_helpers import coefficient_of_variation

SECTORS = 8
_MAX_SECTOR_CV = math.sqrt(SECTORS - 1)
_HALF_SECTOR = math.pi / SECTORS
# Sector 0 is centered on +x; image y grows downward, so sector 2 is south
SECTOR_NAMES = ("east", "southeast", "south", "southwest", "west", "northwest", "north", "northeast")


@transform(
    id="F0.06",
    layer=Layer.FEATURES,
    dependencies=["F0.04"],
    tags={"radial"},
    description="8-sector radial mass distribution",
)
def radial_distribution(ctx: EncodingContext) -> None:
    cx, cy = ctx.spatial.center_of_mass
    sectors = [0.0] * SECTORS
    for s in ctx.shapes:
        angle = math.atan2(s.centroid[1] - cy, s.centroid[0] - cx)
        idx = int(((angle + _HALF_SECTOR) % (2 * math.pi)) / (2 * math.pi) * SECTORS) % SECTORS
        sectors[idx] += s.mass

    if sum(sectors) > 0:
        balance = max(0.0, 1.0 - coefficient_of_variation(sectors) / _MAX_SECTOR_CV)
        dominant = max(range(SECTORS), key=lambda i: sectors[i])
    else:
        balance, dominant = 1.0, 0

    ctx.spatial.radial = RadialDistribution(
        sectors=[round(v, 4) for v in sectors],
        balance=round(balance, 6),
        dominant_sector=dominant,
    )
