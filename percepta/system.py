"""PerceptualSystem — the public encode / decode / process facade.

Owns the two pieces of cross-call state: the emotion analyzer (trajectory
history) and the bounded memory buffer. Encode appends to memory; decode
reads a snapshot of it. One instance is not safe for concurrent use; the
host serializes calls.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import asdict
from typing import Any

from pydantic import ValidationError

from percepta.config import SystemConfig
from percepta.engine.affect.emotion import EmotionAnalyzer
from percepta.engine.config import CodecConfig
from percepta.engine.context import EncodingContext, RasterImage
from percepta.engine.culture.grammar import resolve_culture
from percepta.engine.decoder.decoder import SymbolicDecoder
from percepta.engine.decoder.segmenter import segment_code
from percepta.engine.decoder.validator import SymbolValidator
from percepta.engine.narrative import narrative_hint
from percepta.engine.pipeline import create_encoder_pipeline
from percepta.errors import ChecksumError, EncodingInvariantError, FormatError, InputError
from percepta.learning.memory import MemoryBuffer, MemoryEntry
from percepta.models.experience import DecodedExperience
from percepta.models.requests import EncodeContext
from percepta.models.responses import EmotionSnapshot, EncodeAnalysis, EncodeResult, ProcessResult

logger = logging.getLogger(__name__)


def encode_confidence(ctx: EncodingContext) -> float:
    """mean(min(1, 2·edge density), color harmony, 1 − |valence − 0.5|)."""
    parts = (
        min(1.0, 2 * ctx.edges.density),
        ctx.colors.harmony,
        1.0 - abs(ctx.emotion.valence - 0.5),
    )
    return round(sum(parts) / len(parts), 6)


class PerceptualSystem:
    """Image → code → experience, with memory across calls."""

    def __init__(
        self,
        config: SystemConfig | None = None,
        codec_config: CodecConfig | None = None,
        **overrides: Any,
    ) -> None:
        self.config = config or SystemConfig.from_settings(**overrides)
        self.codec_config = codec_config or CodecConfig()
        self.grammar = resolve_culture(self.config.culture, self.config.blend_weight)
        self.emotion_analyzer = EmotionAnalyzer()
        self.validator = SymbolValidator()
        self.encoder = create_encoder_pipeline(self.codec_config)
        self.decoder = SymbolicDecoder(
            config=self.codec_config,
            grammar=self.grammar,
            decoding_mode=self.config.decoding_mode,
            confidence_threshold=self.config.confidence_threshold,
            seed=self.config.seed,
        )
        self._memory = MemoryBuffer(self.config.max_memory_size)

    @property
    def memory(self) -> tuple[MemoryEntry, ...]:
        return self._memory.snapshot()

    def reset(self) -> None:
        """Forget memory and emotional history."""
        self._memory.clear()
        self.emotion_analyzer.reset()

    # --- encode ---

    def encode(
        self,
        image: Any,
        context: EncodeContext | dict | None = None,
        strict: bool = True,
    ) -> EncodeResult:
        """Analyze ``image`` into a checksummed code and remember it.

        ``strict=False`` takes the light path, accepting images down to 8x8.
        """
        start = time.perf_counter()
        raster = RasterImage.coerce(image)
        raster.validate(strict=strict)
        encode_ctx = self._coerce_context(context)

        ctx = EncodingContext(
            image=raster,
            mode=self.config.mode,
            grammar=self.grammar,
            context_emotion=encode_ctx.emotion.model_dump(exclude_none=True) if encode_ctx.emotion else None,
            emotion_analyzer=self.emotion_analyzer,
        )
        if not self.grammar.is_radial:
            ctx.gated_tags.add("radial")
        self.encoder.run(ctx)
        self._self_check(ctx.code)

        timestamp = encode_ctx.timestamp if encode_ctx.timestamp is not None else time.time()
        self._memory.append(
            MemoryEntry(
                code=ctx.code,
                timestamp=timestamp,
                context={"narrative_tag": encode_ctx.narrative_tag, "mode": ctx.mode},
                emotion=asdict(ctx.emotion),
            )
        )

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Encoded %dx%d image as %s in %.1fms", raster.width, raster.height, ctx.code, elapsed)
        dominant = ctx.colors.dominant
        return EncodeResult(
            code=ctx.code,
            analysis=self._analysis(ctx, elapsed),
            confidence=encode_confidence(ctx),
            narrative_hint=narrative_hint(
                ctx.features,
                ctx.emotion,
                dominant.color_name if dominant else "",
                ctx.labels["complexity"],
            ),
        )

    def _self_check(self, code: str) -> None:
        """Re-validate a fresh code with the decoder's own validator."""
        try:
            result = self.validator.check(code)
            segment_code(result.payload)
        except (FormatError, ChecksumError) as e:
            raise EncodingInvariantError(f"encoder produced an invalid code {code!r}: {e}") from e
        if result.corrected:
            raise EncodingInvariantError(f"encoder produced {code!r}, which only verifies after correction")

    @staticmethod
    def _coerce_context(context: EncodeContext | dict | None) -> EncodeContext:
        if context is None:
            return EncodeContext()
        if isinstance(context, EncodeContext):
            return context
        try:
            return EncodeContext.model_validate(context)
        except ValidationError as e:
            raise InputError(f"invalid context: {e}") from e

    def _analysis(self, ctx: EncodingContext, elapsed_ms: float) -> EncodeAnalysis:
        return EncodeAnalysis(
            mode=ctx.mode,
            culture=self.grammar.name,
            scene=ctx.labels["scene"],
            lighting=ctx.labels["lighting"],
            mood=ctx.labels["mood"],
            complexity=ctx.labels["complexity"],
            shape_count=len(ctx.shapes),
            shape_types=dict(Counter(s.type for s in ctx.shapes)),
            edge_density=ctx.edges.density,
            color_count=len(ctx.colors.clusters),
            harmony=ctx.colors.harmony,
            temperature=ctx.colors.temperature,
            distribution=ctx.spatial.distribution_pattern,
            focus=ctx.spatial.primary_focus,
            saliency=ctx.saliency,
            emotion=EmotionSnapshot(**asdict(ctx.emotion)),
            segments=ctx.segments,
            processing_time_ms=round(elapsed_ms, 1),
        )

    # --- decode ---

    def decode(self, code: str, context: EncodeContext | dict | None = None) -> DecodedExperience:
        """Never raises: bad codes or contexts and failed stages give a zero-confidence fallback."""
        try:
            now = self._coerce_context(context).timestamp if context is not None else None
        except InputError as e:
            logger.warning("Decode fell back: %s", e)
            return self.decoder.fallback(f"{type(e).__name__}: {e}")
        return self.decoder.decode(code, memory=self._memory.snapshot(), now=now)

    def process(self, image: Any, context: EncodeContext | dict | None = None) -> ProcessResult:
        encoded = self.encode(image, context)
        decoded = self.decode(encoded.code, context)
        return ProcessResult(
            encoded=encoded,
            decoded=decoded,
            is_reliable=decoded.metadata.confidence >= self.config.confidence_threshold,
        )
