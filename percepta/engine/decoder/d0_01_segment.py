"""D0.01 — Segmentation: payload → mode tier + four segments."""

from __future__ import annotations

from percepta.engine.context import DecodingContext
from percepta.engine.decoder.segmenter import segment_code
from percepta.engine.registry import Layer, transform


@transform(
    id="D0.01",
    layer=Layer.SEGMENTATION,
    description="Split the validated payload by the budget table",
)
def segment(ctx: DecodingContext) -> None:
    ctx.mode, ctx.segments = segment_code(ctx.payload)
