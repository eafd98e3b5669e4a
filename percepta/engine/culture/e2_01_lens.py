"""E2.01 — Cultural lens.

Re-weights color clusters by their nearest named color and shapes by type,
then, for radial grammars, restates focus and pattern in radial terms.
"""

from __future__ import annotations

from percepta.engine.context import EncodingContext
from percepta.engine.culture.grammar import get_grammar, nearest_color_name
from percepta.engine.features.f0_06_radial import SECTOR_NAMES
from percepta.engine.registry import Layer, transform

# Above this radial balance the layout reads as radiating from the center
RADIAL_BALANCE_MIN = 0.7


@transform(
    id="E2.01",
    layer=Layer.CULTURE,
    dependencies=["F0.03", "F0.04", "F0.06"],
    description="Cultural color and shape weighting, radial restatement",
)
def apply_cultural_lens(ctx: EncodingContext) -> None:
    grammar = ctx.grammar or get_grammar(None)

    for cluster in ctx.colors.clusters:
        cluster.color_name = nearest_color_name(cluster.center)
        meaning = grammar.colors.get(cluster.color_name)
        cluster.cultural_weight = meaning.weight if meaning else 1.0
        cluster.cultural_tag = meaning.tag if meaning else ""

    for shape in ctx.shapes:
        shape.cultural_weight = shape.symbol_weight * grammar.shape_weight(shape.type)

    radial = ctx.spatial.radial
    if grammar.is_radial and radial is not None:
        if radial.balance > RADIAL_BALANCE_MIN:
            ctx.spatial.distribution_pattern = "radial"
            ctx.spatial.primary_focus = "center"
        else:
            ctx.spatial.primary_focus = SECTOR_NAMES[radial.dominant_sector]
