"""Stage registry for the codec.

Each encode or decode stage is a plain function registered by decorator:

    @transform(id="F0.03", layer=Layer.FEATURES, dependencies=["F0.01"])
    def colors(ctx: EncodingContext) -> None:
        ctx.colors = ...

Stage IDs name the layer and position: F/E for encoding (layers 0-3), D for
decoding (layers 10-16). A stage module registers itself on import, so new
stages only need a file inside one of ``TRANSFORM_PACKAGES``.
"""

from __future__ import annotations

import enum
import heapq
import importlib
import logging
import pkgutil
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    # Encode side
    FEATURES = 0
    AFFECT = 1
    CULTURE = 2
    SYMBOLS = 3
    # Decode side
    SEGMENTATION = 10
    RECONSTRUCTION = 11
    RESONANCE = 12
    INTERPRETATION = 13
    NARRATIVE = 14
    DREAM = 15
    SCORING = 16


ENCODE_LAYERS = frozenset(layer for layer in Layer if layer < Layer.SEGMENTATION)
DECODE_LAYERS = frozenset(layer for layer in Layer if layer >= Layer.SEGMENTATION)

TRANSFORM_PACKAGES = (
    "percepta.engine.features",
    "percepta.engine.affect",
    "percepta.engine.culture",
    "percepta.engine.symbols",
    "percepta.engine.decoder",
)


@dataclass
class TransformSpec:
    id: str
    layer: Layer
    fn: Callable[[Any], None]
    dependencies: list[str] = field(default_factory=list)
    tags: set[str] = field(default_factory=set)
    description: str = ""

    @property
    def sort_key(self) -> tuple[int, str]:
        return int(self.layer), self.id


class TransformRegistry:
    """Codec stages keyed by ID."""

    def __init__(self) -> None:
        self._transforms: dict[str, TransformSpec] = {}

    def register(self, spec: TransformSpec) -> None:
        if spec.id in self._transforms:
            raise ValueError(f"Duplicate transform ID: {spec.id}")
        self._transforms[spec.id] = spec
        logger.debug("Registered %s in %s", spec.id, spec.layer.name)

    def get(self, transform_id: str) -> TransformSpec:
        return self._transforms[transform_id]

    def in_layers(self, layers: Iterable[Layer]) -> list[TransformSpec]:
        wanted = set(layers)
        return sorted((s for s in self._transforms.values() if s.layer in wanted), key=lambda s: s.sort_key)

    def all(self) -> list[TransformSpec]:
        return sorted(self._transforms.values(), key=lambda s: s.sort_key)

    @property
    def count(self) -> int:
        return len(self._transforms)

    def closure(self, ids: Iterable[str]) -> set[str]:
        """``ids`` plus everything they depend on, transitively."""
        seen: set[str] = set()
        pending = list(ids)
        while pending:
            tid = pending.pop()
            if tid in seen:
                continue
            seen.add(tid)
            spec = self._transforms.get(tid)
            if spec is not None:
                pending.extend(spec.dependencies)
        return seen

    def resolve_order(self, requested_ids: set[str] | None = None) -> list[TransformSpec]:
        """Dependency order (Kahn), ties broken by ID. None means every stage."""
        ids = set(self._transforms) if requested_ids is None else self.closure(requested_ids)
        pool = {tid: self._transforms[tid] for tid in ids if tid in self._transforms}

        dependents: dict[str, list[str]] = defaultdict(list)
        remaining: dict[str, int] = {}
        for tid, spec in pool.items():
            deps = [d for d in spec.dependencies if d in pool]
            remaining[tid] = len(deps)
            for dep in deps:
                dependents[dep].append(tid)

        ready = [tid for tid, n in remaining.items() if n == 0]
        heapq.heapify(ready)
        ordered: list[TransformSpec] = []
        while ready:
            tid = heapq.heappop(ready)
            ordered.append(pool[tid])
            for child in dependents[tid]:
                remaining[child] -= 1
                if remaining[child] == 0:
                    heapq.heappush(ready, child)

        if len(ordered) != len(pool):
            stuck = sorted(set(pool) - {s.id for s in ordered})
            raise ValueError(f"Circular dependency detected among: {stuck}")
        return ordered


_registry = TransformRegistry()


def get_registry() -> TransformRegistry:
    return _registry


def load_transforms() -> TransformRegistry:
    """Import every stage module so its decorator registers it."""
    for package_name in TRANSFORM_PACKAGES:
        package = importlib.import_module(package_name)
        for info in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package_name}.{info.name}")
    return _registry


def transform(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    tags: set[str] | None = None,
    description: str = "",
):
    """Register the decorated function as stage ``id``."""

    def decorator(fn: Callable[[Any], None]):
        _registry.register(
            TransformSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=list(dependencies or ()),
                tags=set(tags or ()),
                description=description,
            )
        )
        return fn

    return decorator
