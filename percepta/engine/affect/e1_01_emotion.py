"""E1.01 — Emotion reading, blended with caller context."""

from __future__ import annotations

from percepta.engine.affect.emotion import EmotionAnalyzer
from percepta.engine.context import EncodingContext
from percepta.engine.registry import Layer, transform


@transform(
    id="E1.01",
    layer=Layer.AFFECT,
    dependencies=["F0.05"],
    description="Visual emotion, context blend, trajectory and resonance",
)
def read_emotion(ctx: EncodingContext) -> None:
    if ctx.emotion_analyzer is None:
        ctx.emotion_analyzer = EmotionAnalyzer()
    ctx.visual_emotion, ctx.emotion = ctx.emotion_analyzer.analyze(ctx.features, ctx.context_emotion)
