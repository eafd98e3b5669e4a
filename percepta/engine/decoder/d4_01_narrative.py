"""D4.01 — Narrative over the interpreted experience, before any dream perturbation."""

from __future__ import annotations

from percepta.engine.context import DecodingContext
from percepta.engine.narrative import NarrativeEngine
from percepta.engine.registry import Layer, transform


@transform(
    id="D4.01",
    layer=Layer.NARRATIVE,
    dependencies=["D2.01", "D3.01"],
    description="Primary, poetic and variant prose plus archetype",
)
def narrate(ctx: DecodingContext) -> None:
    echoes = ctx.memory_report.echoes if ctx.memory_report else []
    ctx.narrative = NarrativeEngine().generate(
        ctx.scene,
        ctx.objects,
        ctx.spatial,
        ctx.emotional,
        echoes,
        seed=ctx.payload,
    )
