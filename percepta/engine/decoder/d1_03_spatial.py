"""D1.03 — Spatial reconstruction.

Slots: focus, distribution, depth distribution, quantized foreground
weight; anything past slot 3 is padding. Layer weights:
  foreground = fg,  midground = lerp(0.2, 0.4, 1 − |0.5 − fg|·2),  background = 1 − fg
"""

from __future__ import annotations

from percepta.engine.context import DecodingContext
from percepta.engine.decoder import tables
from percepta.engine.registry import Layer, transform
from percepta.engine.symbols import vocabulary as vocab
from percepta.models.experience import DepthInfo, DepthLayers, DistributionInfo, FocusInfo, SpatialModel
from percepta.utils.math_helpers import dequantize_symbol, lerp

DEFAULT_FOREGROUND = 0.33
_DYNAMIC_TENSION = 0.5


def depth_layers(foreground: float) -> DepthLayers:
    return DepthLayers(
        foreground=foreground,
        midground=round(lerp(0.2, 0.4, 1.0 - abs(0.5 - foreground) * 2), 6),
        background=round(1.0 - foreground, 6),
    )


def visual_flow(focus: FocusInfo, distribution: DistributionInfo) -> str:
    flow = tables.FLOW.get((focus.type, distribution.pattern))
    if flow:
        return flow
    return "dynamic" if distribution.tension > _DYNAMIC_TENSION else "still"


def reconstruct_spatial(segment: str) -> SpatialModel:
    zone, strength, focus_type = tables.FOCUS.get(segment[:1], tables.FOCUS["W"])
    focus = FocusInfo(primary=zone, strength=strength, type=focus_type)

    pattern = vocab.value_for(segment[1:2], vocab.DISTRIBUTIONS, vocab.DISTRIBUTION_ALPHABET, "balanced")
    balance, tension = tables.DISTRIBUTION[pattern]
    distribution = DistributionInfo(pattern=pattern, balance=balance, tension=tension)

    depth_label = vocab.value_for(segment[2:3], vocab.DEPTH_DISTRIBUTIONS, vocab.DEPTH_ALPHABET, "flat")
    fg_symbol = segment[3:4]
    foreground = dequantize_symbol(fg_symbol) if fg_symbol and fg_symbol in vocab.UPPER else DEFAULT_FOREGROUND
    perspective, atmosphere = tables.DEPTH[depth_label]
    depth = DepthInfo(
        distribution=depth_label,
        foreground_weight=foreground,
        layers=depth_layers(foreground),
        perspective=perspective,
        atmosphere=atmosphere,
    )

    return SpatialModel(
        focus=focus,
        distribution=distribution,
        depth=depth,
        flow=visual_flow(focus, distribution),
        narrative=f"{tables.SPATIAL_PHRASES[zone]}, in a {perspective} {pattern} arrangement",
    )


@transform(
    id="D1.03",
    layer=Layer.RECONSTRUCTION,
    dependencies=["D0.01"],
    description="Focus, distribution and depth layers",
)
def spatial(ctx: DecodingContext) -> None:
    ctx.spatial = reconstruct_spatial(ctx.segments["spatial"])
