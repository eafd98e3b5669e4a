"""D1.01 — Scene reconstruction.

Slot 0 scene type, 1 lighting, 2 mood, 3 complexity (absent in compact,
read as "medium"). Symbols outside a table decode to its default.
"""

from __future__ import annotations

from percepta.engine.context import DecodingContext
from percepta.engine.decoder import tables
from percepta.engine.registry import Layer, transform
from percepta.engine.symbols import vocabulary as vocab
from percepta.models.experience import Atmosphere, Lighting, MoodInfo, SceneModel

_TEMPERATURES = {"golden": "warm", "blue": "cool"}


def _slot(segment: str, index: int) -> str:
    return segment[index] if index < len(segment) else ""


def decode_lighting(symbol: str) -> Lighting:
    label = vocab.value_for(symbol, vocab.LIGHTING, vocab.LIGHTING_ALPHABET, "")
    quality, direction, intensity, color = tables.LIGHTING.get(label, tables.DEFAULT_LIGHTING)
    return Lighting(quality=quality, direction=direction, intensity=intensity, color=color)


def mood_undertones(mood: str, lighting: Lighting) -> list[str]:
    undertones = list(tables.MOOD_UNDERTONES.get(mood, tables.MOOD_UNDERTONES["neutral"]))
    extra = tables.LIGHTING_UNDERTONES.get(lighting.quality)
    if extra:
        undertones.append(extra)
    return undertones


def reconstruct_scene(segment: str) -> SceneModel:
    category = vocab.value_for(_slot(segment, 0), vocab.SCENE_TYPES, vocab.SCENE_ALPHABET, "general")
    lighting = decode_lighting(_slot(segment, 1))
    mood = vocab.value_for(_slot(segment, 2), vocab.MOODS, vocab.MOOD_ALPHABET, "neutral")
    complexity = vocab.value_for(_slot(segment, 3), vocab.COMPLEXITY, vocab.COMPLEXITY_ALPHABET, "medium")

    temperature = _TEMPERATURES.get(lighting.color, "neutral")
    density = tables.COMPLEXITY_DENSITY[complexity]
    return SceneModel(
        category=category,
        type=category,
        lighting=lighting,
        mood=MoodInfo(primary=mood, undertones=mood_undertones(mood, lighting)),
        complexity=complexity,
        atmosphere=Atmosphere(
            temperature=temperature,
            density=density,
            description=f"{temperature} and {'dense' if density > 0.5 else 'open'}",
        ),
    )


@transform(
    id="D1.01",
    layer=Layer.RECONSTRUCTION,
    dependencies=["D0.01"],
    description="Scene type, lighting, mood and complexity",
)
def scene(ctx: DecodingContext) -> None:
    ctx.scene = reconstruct_scene(ctx.segments["scene"])
