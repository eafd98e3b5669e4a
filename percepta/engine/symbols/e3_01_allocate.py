"""E3.01 — Symbol allocation and checksum."""

from __future__ import annotations

from percepta.engine.context import EncodingContext
from percepta.engine.registry import Layer, transform
from percepta.engine.symbols.encoder import SymbolEncoder


@transform(
    id="E3.01",
    layer=Layer.SYMBOLS,
    dependencies=["F0.05", "E1.01", "E2.01"],
    description="Fixed-budget symbol allocation with checksum",
)
def allocate_symbols(ctx: EncodingContext) -> None:
    allocation = SymbolEncoder(ctx.mode).encode(ctx.features, ctx.emotion, ctx.width, ctx.height)
    ctx.labels = allocation.labels
    ctx.segments = allocation.segments
    ctx.payload = allocation.payload
    ctx.code = allocation.code
