"""D1.02 — Object reconstruction.

Each token is a category letter, its modifiers and a 3×3 position letter.
Token length gives the size tier (1 letter large … 3 small); importance
blends that tier's base with how central the cell is:
  importance = 0.8·base + 0.2·(1 − distance_to_center / max_distance)
Unknown category letters are dropped.
"""

from __future__ import annotations

import math

from percepta.engine.context import DecodingContext
from percepta.engine.decoder import tables
from percepta.engine.decoder.tokens import ObjectToken, parse_object_tokens
from percepta.engine.registry import Layer, transform
from percepta.engine.symbols import vocabulary as vocab
from percepta.models.experience import ObjectModel, Position

_MAX_CENTER_DISTANCE = math.hypot(1 / 3, 1 / 3)


def cell_position(index: int) -> Position:
    gx, gy = index % 3, index // 3
    return Position(x=(gx + 0.5) / 3, y=(gy + 0.5) / 3, zone=vocab.GRID_ZONES[index])


def object_importance(base: float, position: Position) -> float:
    distance = math.hypot(position.x - 0.5, position.y - 0.5)
    return round(0.8 * base + 0.2 * (1.0 - distance / _MAX_CENTER_DISTANCE), 6)


def decode_object(token: ObjectToken) -> ObjectModel | None:
    entry = vocab.OBJECT_CATEGORIES.get(token.category)
    if entry is None:
        return None
    primary, variants = entry
    size, base = tables.SIZES.get(min(token.letters, 3), tables.SIZES[3])
    position = cell_position(token.position)
    return ObjectModel(
        category=primary,
        symbol=token.text,
        label=primary,
        variants=list(variants),
        form=tables.forms_for(token.category),
        position=position,
        size=size,
        importance=object_importance(base, position),
        archetypes=tables.archetypes_for(primary),
    )


def reconstruct_objects(segment: str) -> list[ObjectModel]:
    tokens, _ = parse_object_tokens(segment)
    objects = [obj for obj in (decode_object(t) for t in tokens) if obj is not None]
    return sorted(objects, key=lambda o: o.importance, reverse=True)


@transform(
    id="D1.02",
    layer=Layer.RECONSTRUCTION,
    dependencies=["D0.01"],
    description="Object tokens → category, position, size, importance",
)
def objects(ctx: DecodingContext) -> None:
    ctx.objects = reconstruct_objects(ctx.segments["objects"])
