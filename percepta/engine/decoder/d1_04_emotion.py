"""D1.04 — Emotion reconstruction.

Valence and arousal dequantize as idx/25; slot 2 is the trajectory, slot 3
the resonance (0.5 when the budget has no slot for it). Dominance is not
carried in the code and reads back as the mean of valence and arousal.
"""

from __future__ import annotations

from percepta.engine.context import DecodingContext
from percepta.engine.decoder import tables
from percepta.engine.registry import Layer, transform
from percepta.engine.symbols import vocabulary as vocab
from percepta.models.experience import EmotionalModel, EmotionCurrent, ResonanceInfo, TrajectoryInfo
from percepta.utils.colorspace import hsv_to_hex
from percepta.utils.math_helpers import dequantize_symbol

DEFAULT_RESONANCE = 0.5


def predict(label: str, momentum: float) -> str:
    if momentum > 0:
        return f"rising-{label}"
    if momentum < 0:
        return f"settling-{label}"
    return f"continued-{label}"


def emotional_texture(valence: float, arousal: float, resonance: float) -> str:
    if resonance > 0.7:
        return "layered"
    if arousal > 0.6:
        return "vibrant" if valence >= 0.4 else "jagged"
    if arousal < 0.4:
        return "velvet" if valence >= 0.4 else "heavy"
    return "smooth"


def reconstruct_emotion(segment: str) -> EmotionalModel:
    if len(segment) < 2:
        return EmotionalModel()
    valence = dequantize_symbol(segment[0])
    arousal = dequantize_symbol(segment[1])
    trajectory = vocab.value_for(segment[2:3], vocab.TRAJECTORIES, vocab.TRAJECTORY_ALPHABET, "stable")
    res_symbol = segment[3:4]
    resonance = dequantize_symbol(res_symbol) if res_symbol and res_symbol in vocab.UPPER else DEFAULT_RESONANCE

    label = tables.emotion_label(valence, arousal)
    momentum = tables.TRAJECTORY_MOMENTUM[trajectory]
    hue, saturation, brightness = tables.mood_hsb(valence, arousal)
    return EmotionalModel(
        current=EmotionCurrent(
            valence=valence,
            arousal=arousal,
            dominance=(valence + arousal) / 2,
            label=label,
        ),
        trajectory=TrajectoryInfo(direction=trajectory, momentum=momentum, prediction=predict(label, momentum)),
        resonance=ResonanceInfo(strength=resonance, harmonics=[resonance, resonance / 2, resonance / 4]),
        color=hsv_to_hex(hue, saturation, brightness),
        texture=emotional_texture(valence, arousal, resonance),
    )


@transform(
    id="D1.04",
    layer=Layer.RECONSTRUCTION,
    dependencies=["D0.01"],
    description="Valence, arousal, trajectory and resonance",
)
def emotion(ctx: DecodingContext) -> None:
    ctx.emotional = reconstruct_emotion(ctx.segments["emotion"])
