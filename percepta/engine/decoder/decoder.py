"""Symbolic decoder — validation, the decode pipeline and the fallback boundary.

INIT → VALIDATE → {FALLBACK | SEGMENT} → RECONSTRUCT → MEMORY_LOOKUP →
INTERPRET → NARRATE → {stable passthrough | dream perturb} → SCORE → DONE

Nothing raises past :meth:`SymbolicDecoder.decode`: validation failures and
stage failures both come back as a fully populated, zero-confidence result.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable

import numpy as np

from percepta.engine.config import CodecConfig
from percepta.engine.context import DecodingContext
from percepta.engine.culture.grammar import CulturalGrammar, get_grammar
from percepta.engine.decoder.validator import SymbolValidator
from percepta.engine.pipeline import create_decoder_pipeline
from percepta.engine.symbols.vocabulary import VOCABULARY_VERSION
from percepta.errors import ReconstructionError
from percepta.learning.memory import MemoryEntry
from percepta.models.experience import (
    DecodedExperience,
    DecodeMetadata,
    Experience,
    MemoryReport,
    Metrics,
    Narrative,
    TemporalModel,
)

logger = logging.getLogger(__name__)

DECODING_MODES = ("stable", "dreamlike", "npc")
DEFAULT_CONFIDENCE_THRESHOLD = 0.6

FALLBACK_NARRATIVE = Narrative(
    primary="A memory too faded to fully recall...",
    poetic="Like trying to hold water in cupped hands",
    variations=["Fragments of something once seen..."],
)


class SymbolicDecoder:
    """Code string → DecodedExperience."""

    def __init__(
        self,
        config: CodecConfig | None = None,
        grammar: CulturalGrammar | None = None,
        decoding_mode: str = "stable",
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        seed: int | None = None,
    ) -> None:
        if decoding_mode not in DECODING_MODES:
            raise ValueError(f"Unknown decoding mode {decoding_mode!r}; expected one of {DECODING_MODES}")
        self.config = config or CodecConfig()
        self.grammar = grammar or get_grammar(None)
        self.decoding_mode = decoding_mode
        self.confidence_threshold = confidence_threshold
        self.validator = SymbolValidator()
        self.pipeline = create_decoder_pipeline(self.config)
        self._rng = np.random.default_rng(seed)

    def decode(
        self,
        code: str,
        memory: Iterable[MemoryEntry] = (),
        now: float | None = None,
    ) -> DecodedExperience:
        start = time.perf_counter()
        validation = self.validator.validate_and_correct(code)
        if not validation.valid:
            logger.warning("Decode fell back: %s", validation.error)
            return self._fallback(validation.error, start)

        ctx = DecodingContext(
            code=validation.code,
            decoding_mode=self.decoding_mode,
            config=self.config,
            grammar=self.grammar,
            memory=tuple(memory),
            rng=self._rng,
            now=now,
            validation=validation,
        )
        ctx.temporal = TemporalModel(mode=self.decoding_mode, coherence=1.0)
        if self.decoding_mode == "stable":
            ctx.gated_tags.add("dream")

        try:
            self.pipeline.run(ctx)
            return self._assemble(ctx, start)
        except ReconstructionError as e:
            logger.warning("Decode fell back at %s: %s", e.stage, e)
            return self._fallback(f"{type(e).__name__}: {e}", start, ctx)

    def _assemble(self, ctx: DecodingContext, start: float) -> DecodedExperience:
        if ctx.errors:
            stage = sorted(ctx.errors)[0]
            raise ReconstructionError(f"{stage} failed: {ctx.errors[stage]}", stage=stage)

        result = DecodedExperience(
            experience=Experience(
                scene=ctx.scene,
                objects=ctx.objects,
                spatial=ctx.spatial,
                emotional=ctx.emotional,
                temporal=ctx.temporal,
            ),
            narrative=ctx.narrative,
            memory=ctx.memory_report,
            rendering=ctx.rendering,
            metrics=ctx.metrics,
            metadata=self._metadata(ctx.confidence, start, ctx),
        )
        logger.info(
            "Decoded %s (%s, %s): confidence %.2f",
            ctx.code,
            ctx.mode,
            self.decoding_mode,
            ctx.confidence,
        )
        return result

    def _metadata(
        self,
        confidence: float,
        start: float,
        ctx: DecodingContext | None = None,
        error: str | None = None,
    ) -> DecodeMetadata:
        validation = ctx.validation if ctx is not None else None
        return DecodeMetadata(
            confidence=confidence,
            is_reliable=confidence >= self.confidence_threshold,
            corrected=bool(validation and validation.corrected),
            corrected_position=validation.corrected_position if validation else None,
            mode=ctx.mode if ctx is not None else "",
            decoding_mode=self.decoding_mode,
            culture=self.grammar.name,
            vocabulary_version=VOCABULARY_VERSION,
            error=error,
            stage_errors=dict(ctx.errors) if ctx is not None else {},
            processing_time_ms=round((time.perf_counter() - start) * 1000, 3),
        )

    def fallback(self, error: str) -> DecodedExperience:
        """Zero-confidence result for input rejected before decoding starts."""
        return self._fallback(error, time.perf_counter())

    def _fallback(self, error: str | None, start: float, ctx: DecodingContext | None = None) -> DecodedExperience:
        """Zero-confidence result keeping whatever stages completed."""
        experience = Experience(temporal=TemporalModel(mode=self.decoding_mode, coherence=1.0))
        memory, metrics = MemoryReport(), Metrics()
        if ctx is not None:
            experience = Experience(
                scene=ctx.scene or experience.scene,
                objects=ctx.objects,
                spatial=ctx.spatial or experience.spatial,
                emotional=ctx.emotional or experience.emotional,
                temporal=ctx.temporal or experience.temporal,
            )
            memory = ctx.memory_report or memory
            metrics = ctx.metrics or metrics
        return DecodedExperience(
            experience=experience,
            narrative=FALLBACK_NARRATIVE.model_copy(deep=True),
            memory=memory,
            metrics=metrics,
            metadata=self._metadata(0.0, start, ctx, error),
        )
