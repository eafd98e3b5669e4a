"""F0.05 — Scene saliency = mean(edge density, 1 − color harmony, spatial asymmetry)."""

from __future__ import annotations

from percepta.engine.context import EncodingContext
from percepta.engine.registry import Layer, transform


@transform(
    id="F0.05",
    layer=Layer.FEATURES,
    dependencies=["F0.01", "F0.03", "F0.04"],
    description="Scene-level saliency",
)
def scene_saliency(ctx: EncodingContext) -> None:
    parts = (ctx.edges.density, 1.0 - ctx.colors.harmony, ctx.spatial.asymmetry)
    ctx.saliency = round(sum(parts) / len(parts), 6)
