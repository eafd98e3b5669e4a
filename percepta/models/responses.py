"""Encode and round-trip results."""

from __future__ import annotations

from pydantic import BaseModel, Field

from percepta.models.experience import DecodedExperience


class EmotionSnapshot(BaseModel):
    valence: float = 0.5
    arousal: float = 0.5
    dominance: float = 0.5
    trajectory: str = "stable"
    resonance: float = 0.5


class EncodeAnalysis(BaseModel):
    mode: str
    culture: str
    scene: str = "general"
    lighting: str = "neutral"
    mood: str = "neutral"
    complexity: str = "low"
    shape_count: int = 0
    shape_types: dict[str, int] = Field(default_factory=dict)
    edge_density: float = 0.0
    color_count: int = 0
    harmony: float = 1.0
    temperature: float = 0.5
    distribution: str = "balanced"
    focus: str = "center"
    saliency: float = 0.0
    emotion: EmotionSnapshot = Field(default_factory=EmotionSnapshot)
    segments: dict[str, str] = Field(default_factory=dict)
    processing_time_ms: float = 0.0


class NarrativeHint(BaseModel):
    scene: str = ""
    emotion: str = ""
    poetic: str = ""
    summary: str = ""


class EncodeResult(BaseModel):
    code: str
    analysis: EncodeAnalysis
    confidence: float = 0.0
    narrative_hint: NarrativeHint = Field(default_factory=NarrativeHint)


class ProcessResult(BaseModel):
    encoded: EncodeResult
    decoded: DecodedExperience
    is_reliable: bool = False
