"""D6.02 — Rendering hints, focal points and palettes for a downstream renderer."""

from __future__ import annotations

from typing import Any

from percepta.engine.context import DecodingContext
from percepta.engine.culture.grammar import CulturalGrammar, get_grammar
from percepta.engine.decoder import tables
from percepta.engine.registry import Layer, transform
from percepta.models.experience import (
    ColorPalette,
    EmotionalModel,
    FocalPoint,
    MoodPalette,
    ObjectModel,
    Rendering,
    SceneModel,
    SpatialModel,
)

_FILL_LIGHT = {"dramatic": "minimal", "harsh": "strong"}


def focal_points(objects: list[ObjectModel]) -> list[FocalPoint]:
    """Weighted center of the objects, then the two heaviest objects."""
    weighted = [(o, o.importance * o.emotional_weight) for o in objects]
    total = sum(w for _, w in weighted)
    if not weighted or total <= 0:
        return [FocalPoint(x=0.5, y=0.5, weight=0.0)]
    cx = sum(o.position.x * w for o, w in weighted) / total
    cy = sum(o.position.y * w for o, w in weighted) / total
    weighted.sort(key=lambda pair: pair[1], reverse=True)
    points = [FocalPoint(x=round(cx, 6), y=round(cy, 6), weight=1.0, label="center-of-interest")]
    points.extend(
        FocalPoint(x=o.position.x, y=o.position.y, weight=round(w / total, 6), label=o.label)
        for o, w in weighted[:2]
    )
    return points


def mood_palette(emotional: EmotionalModel) -> MoodPalette:
    v, a = emotional.current.valence, emotional.current.arousal
    hue, saturation, brightness = tables.mood_hsb(v, a)
    return MoodPalette(
        hue=round(hue, 3),
        saturation=round(saturation, 6),
        brightness=round(brightness, 6),
        adjective=tables.mood_adjective(v, a),
    )


def accent_tint(valence: float, arousal: float) -> str:
    if valence > 0.6:
        return "warm" if arousal > 0.6 else "pastel"
    if valence < 0.4:
        return "neon" if arousal > 0.6 else "cool"
    return "neutral"


def color_palette(grammar: CulturalGrammar, emotional: EmotionalModel) -> ColorPalette:
    names = list(grammar.colors)
    return ColorPalette(
        key_colors=names[:3],
        accent=accent_tint(emotional.current.valence, emotional.current.arousal),
        semantics={name: grammar.colors[name].tag for name in names},
    )


def composition_rule(spatial: SpatialModel) -> str:
    if spatial.distribution.pattern == "radial":
        return "radial"
    if spatial.focus.primary == "center":
        return "central"
    if spatial.distribution.pattern == "balanced":
        return "symmetry"
    return "rule-of-thirds"


def rendering_hints(
    scene: SceneModel,
    spatial: SpatialModel,
    emotional: EmotionalModel,
    coherence: float,
    decay: float,
) -> dict[str, Any]:
    current = emotional.current
    return {
        "lighting": {
            "key": scene.lighting.model_dump(),
            "fill": _FILL_LIGHT.get(scene.lighting.quality, "soft"),
            "rim": "strong" if current.arousal > 0.7 else "subtle",
        },
        "color": {
            "temperature": scene.atmosphere.temperature,
            "saturation": emotional.resonance.strength,
        },
        "composition": {
            "rule": composition_rule(spatial),
            "dynamic_range": "wide" if scene.complexity in ("high", "extreme") else "narrow",
            "focus_gradient": spatial.focus.strength,
        },
        "effects": {
            "blur": "dreamlike" if coherence < 0.7 else "minimal",
            "grain": "nostalgic" if decay > 0.5 else "clean",
            "vignette": "heavy" if current.valence < 0.3 else "light",
        },
        "animation": {
            "flow": spatial.flow,
            "timing": "quick" if current.arousal > 0.6 else "slow" if current.arousal < 0.4 else "moderate",
        },
    }


@transform(
    id="D6.02",
    layer=Layer.SCORING,
    dependencies=["D6.01"],
    description="Focal points, mood and color palettes, rendering hints",
)
def render(ctx: DecodingContext) -> None:
    grammar = ctx.grammar or get_grammar(None)
    coherence = ctx.temporal.coherence if ctx.temporal else 1.0
    decay = ctx.memory_report.decay if ctx.memory_report else 0.0
    ctx.rendering = Rendering(
        hints=rendering_hints(ctx.scene, ctx.spatial, ctx.emotional, coherence, decay),
        focus=focal_points(ctx.objects),
        mood_palette=mood_palette(ctx.emotional),
        color_palette=color_palette(grammar, ctx.emotional),
    )
