"""D6.01 — Reconstruction confidence and symbol entropy.

Per-segment score:
  scene, spatial, emotion  share of symbols legal for their slot
  objects                  share of non-padding symbols inside well-formed tokens
                           (an all-padding segment scores 0.6)
confidence = mean(segment scores) · 0.9 if corrected
             · (0.5 + 0.5·temporal coherence) when dreaming
"""

from __future__ import annotations

import logging

from percepta.engine.context import DecodingContext
from percepta.engine.decoder import tables
from percepta.engine.decoder.tokens import parse_object_tokens
from percepta.engine.registry import Layer, transform
from percepta.engine.symbols import vocabulary as vocab
from percepta.models.experience import Metrics

logger = logging.getLogger(__name__)

EMPTY_OBJECTS_SCORE = 0.6
CORRECTION_PENALTY = 0.9


def slot_legality(segment: str, alphabets: list[str]) -> float:
    if not segment:
        return 0.0
    legal = sum(1 for ch, allowed in zip(segment, alphabets) if ch in allowed)
    return legal / len(segment)


def objects_score(segment: str) -> float:
    body = segment.rstrip(vocab.OBJECT_PAD)
    if not body:
        return EMPTY_OBJECTS_SCORE
    tokens, _ = parse_object_tokens(segment)
    covered = sum(len(t.text) for t in tokens if t.well_formed)
    return covered / len(body)


def segment_scores(mode: str, segments: dict[str, str]) -> dict[str, float]:
    slots = vocab.slot_alphabets(mode)
    bounds = vocab.BUDGETS[mode].boundaries()
    scores = {}
    for name in vocab.SEGMENT_NAMES:
        if name == "objects":
            scores[name] = objects_score(segments[name])
        else:
            start, end = bounds[name]
            scores[name] = slot_legality(segments[name], slots[start:end])
    return scores


def symbol_bits(ch: str) -> int:
    for alphabet, bits in tables.SYMBOL_BITS:
        if ch in alphabet:
            return bits
    return tables.FALLBACK_BITS


def entropy_metrics(code: str) -> Metrics:
    total = sum(symbol_bits(ch) for ch in code)
    return Metrics(
        entropy_bits_per_symbol=round(total / len(code), 6) if code else 0.0,
        total_bits=total,
        length=len(code),
    )


@transform(
    id="D6.01",
    layer=Layer.SCORING,
    dependencies=["D4.01", "D5.01"],
    description="Confidence from segment legality, correction and coherence",
)
def score(ctx: DecodingContext) -> None:
    ctx.segment_scores = segment_scores(ctx.mode, ctx.segments)
    confidence = sum(ctx.segment_scores.values()) / len(ctx.segment_scores)
    if ctx.validation is not None and ctx.validation.corrected:
        confidence *= CORRECTION_PENALTY
    if ctx.decoding_mode != "stable" and ctx.temporal is not None:
        confidence *= 0.5 + 0.5 * ctx.temporal.coherence
    ctx.confidence = round(confidence, 6)
    ctx.metrics = entropy_metrics(ctx.code)
    logger.debug("Confidence %.3f from %s", ctx.confidence, ctx.segment_scores)
