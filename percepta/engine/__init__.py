"""percepta codec engine."""

from percepta.engine.registry import transform, Layer, get_registry
from percepta.engine.context import EncodingContext, DecodingContext, RasterImage
from percepta.engine.pipeline import Pipeline

__all__ = [
    "transform",
    "Layer",
    "get_registry",
    "EncodingContext",
    "DecodingContext",
    "RasterImage",
    "Pipeline",
]
