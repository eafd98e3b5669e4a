"""D2.01 — Memory lookup against the facade's buffer snapshot.

  resonance = mean echo resonance
  decay     = 1 − exp(−mean echo age / 30 days)
Both are 0 when nothing echoes.
"""

from __future__ import annotations

import math

from percepta.engine.context import DecodingContext
from percepta.engine.registry import Layer, transform
from percepta.learning.memory import DECAY_DAYS, Echo, MemoryResonance
from percepta.models.experience import MemoryEcho, MemoryReport


def to_memory_echo(echo: Echo) -> MemoryEcho:
    return MemoryEcho(
        code=echo.entry.code,
        similarity=round(echo.similarity, 6),
        resonance=round(echo.resonance, 6),
        strength=round(echo.strength, 6),
        age_days=echo.age_days,
        valence=echo.entry.valence,
        arousal=echo.entry.arousal,
        context=dict(echo.entry.context),
    )


def memory_report(echoes: list[Echo]) -> MemoryReport:
    if not echoes:
        return MemoryReport()
    mean_age = sum(e.age_days for e in echoes) / len(echoes)
    return MemoryReport(
        echoes=[to_memory_echo(e) for e in echoes],
        resonance=sum(e.resonance for e in echoes) / len(echoes),
        decay=1.0 - math.exp(-mean_age / DECAY_DAYS),
    )


@transform(
    id="D2.01",
    layer=Layer.RESONANCE,
    dependencies=["D1.02", "D1.04"],
    description="Echoes, per-object and emotional memory counts",
)
def memory_lookup(ctx: DecodingContext) -> None:
    resonance = MemoryResonance(ctx.memory)
    current = ctx.emotional.current
    echoes = resonance.find_echoes(ctx.payload, (current.valence, current.arousal), ctx.now)
    ctx.memory_report = memory_report(echoes)

    for obj in ctx.objects:
        obj.memory_count = len(resonance.find_object_memories(obj.symbol[0]))
    ctx.emotional.resonance.memory_count = len(
        resonance.find_emotional_memories(current.valence, current.arousal)
    )
