"""Pipeline orchestrator: runs codec stages in dependency order with tag gating."""

from __future__ import annotations

import logging
import time
from typing import Any

from percepta.engine.config import CodecConfig
from percepta.engine.registry import (
    DECODE_LAYERS,
    ENCODE_LAYERS,
    Layer,
    TransformRegistry,
    TransformSpec,
    get_registry,
    load_transforms,
)

logger = logging.getLogger(__name__)


class Pipeline:
    """Orchestrates one direction (encode or decode) of the codec."""

    def __init__(
        self,
        registry: TransformRegistry | None = None,
        config: CodecConfig | None = None,
        layers: frozenset[Layer] | set[Layer] | None = None,
        fail_fast: bool = False,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config
        self.layers = layers
        self.fail_fast = fail_fast

    def plan(self, ctx: Any) -> list[TransformSpec]:
        """Stages this run will attempt, in dependency order, after gating."""
        gated = self._adaptive_gate(ctx)
        specs = self.registry.all() if self.layers is None else self.registry.in_layers(self.layers)
        wanted = {s.id for s in specs} - gated
        return [s for s in self.registry.resolve_order(wanted) if s.id in wanted]

    def run(self, ctx: Any) -> Any:
        """Run every planned stage on ``ctx``.

        A failed stage is recorded in ``ctx.errors``; stages depending on it
        are skipped. In fail-fast mode the first failure is re-raised.
        """
        start = time.perf_counter()
        if self.config is not None:
            ctx.config = self.config

        ordered = self.plan(ctx)
        logger.debug("Pipeline: %d stages planned", len(ordered))

        for spec in ordered:
            failed = next((dep for dep in spec.dependencies if dep in ctx.errors), None)
            if failed is not None:
                ctx.errors[spec.id] = f"skipped: dependency {failed} failed"
                continue
            self._execute(spec, ctx)

        logger.debug(
            "Pipeline complete: %d/%d stages in %.1fms",
            len(ctx.completed_transforms),
            len(ordered),
            (time.perf_counter() - start) * 1000,
        )
        return ctx

    def _execute(self, spec: TransformSpec, ctx: Any) -> None:
        t0 = time.perf_counter()
        try:
            spec.fn(ctx)
        except Exception as e:
            ctx.errors[spec.id] = str(e)
            if self.fail_fast:
                raise
            logger.warning("  %s FAILED: %s", spec.id, e)
            return
        ctx.completed_transforms.add(spec.id)
        logger.debug("  %s completed in %.1fms", spec.id, (time.perf_counter() - t0) * 1000)

    def _adaptive_gate(self, ctx: Any) -> set[str]:
        """IDs of stages carrying any tag in ``ctx.gated_tags``.

        Stable decoding gates "dream"; cartesian grammars gate "radial".
        """
        gated = set(getattr(ctx, "gated_tags", ()))
        if not gated:
            return set()
        return {spec.id for spec in self.registry.all() if spec.tags & gated}


def create_encoder_pipeline(config: CodecConfig | None = None) -> Pipeline:
    """Factory for the fail-fast encode pipeline."""
    return Pipeline(registry=load_transforms(), config=config, layers=ENCODE_LAYERS, fail_fast=True)


def create_decoder_pipeline(config: CodecConfig | None = None) -> Pipeline:
    """Factory for the degrading decode pipeline."""
    return Pipeline(registry=load_transforms(), config=config, layers=DECODE_LAYERS)
