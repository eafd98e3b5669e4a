"""D5.01 — Dream logic for the dreamlike and npc decoding modes.

Gated off entirely in stable mode, which keeps the interpreted experience
as-is with temporal coherence 1.0. Otherwise, with stability s:
  objects morph toward the emotion's form when rng > s
  space warps around the focus when rng > s, strength (1 − s)·associativity
  echoes become timed fragments, duration lerp(3, 12, resonance)·jitter
  echo objects bleed in with probability resonance·bleed
  npc mode (bleed > 0.5) also pulls object weights toward their mean
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from percepta.engine.context import DecodingContext
from percepta.engine.decoder import tables
from percepta.engine.decoder.d1_02_objects import decode_object
from percepta.engine.decoder.segmenter import segment_code
from percepta.engine.decoder.tokens import parse_object_tokens
from percepta.engine.registry import Layer, transform
from percepta.errors import FormatError
from percepta.models.experience import (
    EmotionalModel,
    MemoryEcho,
    ObjectModel,
    TemporalFragment,
    TemporalModel,
    Warping,
)
from percepta.utils.math_helpers import lerp

logger = logging.getLogger(__name__)

# Fragments older than this are faded
FADE_AFTER_DAYS = 1.0
BLEED_CONTAGION_MIN = 0.5


@dataclass(frozen=True)
class DreamParams:
    stability: float
    associativity: float
    emotional_bleed: float


def dream_params(decoding_mode: str) -> DreamParams:
    return DreamParams(
        stability=0.9 if decoding_mode == "stable" else 0.5,
        associativity=0.8 if decoding_mode == "dreamlike" else 0.3,
        emotional_bleed=0.7 if decoding_mode == "npc" else 0.4,
    )


def warping_type(emotional: EmotionalModel) -> str:
    v, a = emotional.current.valence, emotional.current.arousal
    if a > 0.6:
        return "ripple" if v > 0.5 else "shatter"
    return "compress" if v < 0.4 else "stretch"


def morph_target(obj: ObjectModel, emotional: EmotionalModel) -> str:
    target = tables.MORPH_TARGETS.get(emotional.current.label, "mystery")
    return "spiral" if target == obj.category else target


def temporal_fragments(echoes: list[MemoryEcho], stability: float, rng: np.random.Generator) -> list[TemporalFragment]:
    jitter = (1.0 - stability) * 0.15
    return [
        TemporalFragment(
            snapshot_code=echo.code,
            duration_sec=round(lerp(3.0, 12.0, echo.resonance) * (1.0 + (rng.random() - 0.5) * jitter), 3),
            faded=echo.age_days > FADE_AFTER_DAYS,
        )
        for echo in echoes
    ]


def memory_loops(echoes: list[MemoryEcho], code: str) -> list[str]:
    """Echo codes identical to the one being decoded: the moment is being relived."""
    return [echo.code for echo in echoes if echo.code == code]


def bleed_memory_objects(
    objects: list[ObjectModel],
    echoes: list[MemoryEcho],
    bleed: float,
    rng: np.random.Generator,
) -> list[ObjectModel]:
    present = {o.category for o in objects}
    bled: list[ObjectModel] = []
    for echo in echoes:
        strength = echo.resonance * bleed
        try:
            _, segments = segment_code(echo.code[:-1])
        except FormatError:
            continue
        tokens, _ = parse_object_tokens(segments["objects"])
        for token in tokens:
            obj = decode_object(token)
            if obj is None or obj.category in present:
                continue
            if rng.random() < strength:
                obj.from_memory = True
                obj.opacity = round(strength, 6)
                bled.append(obj)
                present.add(obj.category)
    return bled


def emotional_contagion(objects: list[ObjectModel], bleed: float) -> None:
    if not objects:
        return
    mean = sum(o.emotional_weight for o in objects) / len(objects)
    for obj in objects:
        obj.emotional_weight = round(lerp(obj.emotional_weight, mean, bleed * 0.5), 6)


@transform(
    id="D5.01",
    layer=Layer.DREAM,
    dependencies=["D4.01"],
    tags={"dream"},
    description="Morphing, warping, temporal fragments and memory bleed",
)
def dream(ctx: DecodingContext) -> None:
    params = dream_params(ctx.decoding_mode)
    s = params.stability
    echoes = ctx.memory_report.echoes if ctx.memory_report else []

    for obj in ctx.objects:
        if ctx.rng.random() > s:
            obj.morphing = True
            obj.morph_target = morph_target(obj, ctx.emotional)
            obj.morph_strength = round(1.0 - s, 6)

    if ctx.rng.random() > s:
        ctx.spatial.warping = Warping(
            type=warping_type(ctx.emotional),
            strength=round((1.0 - s) * params.associativity, 6),
            epicenter=ctx.spatial.focus.primary,
        )

    fragments = temporal_fragments(echoes, s, ctx.rng)
    loops = memory_loops(echoes, ctx.code) if ctx.rng.random() > s else []
    ctx.temporal = TemporalModel(mode=ctx.decoding_mode, coherence=s, fragments=fragments, loops=loops)

    bled = bleed_memory_objects(ctx.objects, echoes, params.emotional_bleed, ctx.rng)
    for echo in echoes:
        strength = echo.resonance * params.emotional_bleed
        current = ctx.emotional.current
        current.valence = round(lerp(current.valence, echo.valence, strength), 6)
    ctx.objects.extend(bled)

    if params.emotional_bleed > BLEED_CONTAGION_MIN:
        emotional_contagion(ctx.objects, params.emotional_bleed)

    logger.debug(
        "Dream (%s): %d morphing, %d bled from memory, warping=%s",
        ctx.decoding_mode,
        sum(o.morphing for o in ctx.objects),
        len(bled),
        ctx.spatial.warping.type if ctx.spatial.warping else None,
    )
