"""D3.01 — Cultural interpretation of the reconstructed scene and objects.

  emotional_weight = clamp01(importance · significance · (0.5 + 0.5·arousal))
"""

from __future__ import annotations

from percepta.engine.context import DecodingContext
from percepta.engine.culture.grammar import get_grammar
from percepta.engine.registry import Layer, transform
from percepta.utils.math_helpers import clamp01


@transform(
    id="D3.01",
    layer=Layer.INTERPRETATION,
    dependencies=["D1.01", "D1.02", "D1.03", "D1.04"],
    description="Grammar scene reading, object significance and labels",
)
def interpret(ctx: DecodingContext) -> None:
    grammar = ctx.grammar or get_grammar(None)
    ctx.scene.type, ctx.scene.subtype = grammar.interpret_scene(ctx.scene.category)

    arousal_gain = 0.5 + 0.5 * ctx.emotional.current.arousal
    for obj in ctx.objects:
        obj.cultural_significance = grammar.significance(obj.category)
        obj.label = grammar.label(obj.category)
        obj.emotional_weight = round(clamp01(obj.importance * obj.cultural_significance * arousal_gain), 6)
